"""Request dependencies: database session, session capability and access guards."""

from collections.abc import Callable, Generator
from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from rolegate.core.context import AppContext
from rolegate.schemas.auth import SessionIdentity
from rolegate.services.accounts import find_user_by_id
from rolegate.services.sessions import SessionHandle

LOGIN_PATH = "/login"


class Unauthenticated(Exception):
    """Raised by guards when the request has no session; answered with a redirect to login."""


def get_context(request: Request) -> AppContext:
    return request.app.state.context


def get_db(context: Annotated[AppContext, Depends(get_context)]) -> Generator[Session, None, None]:
    """Dependency that yields a DB session and closes it when done."""
    db = context.session_factory()
    try:
        yield db
    finally:
        db.close()


def get_session(
    request: Request,
    context: Annotated[AppContext, Depends(get_context)],
) -> SessionHandle:
    cookie = request.cookies.get(context.settings.SESSION_COOKIE_NAME)
    return SessionHandle(context.sessions, context.settings, cookie)


def require_authenticated(
    session: Annotated[SessionHandle, Depends(get_session)],
) -> SessionIdentity:
    """Dependency: return the session identity or redirect to the login page."""
    identity = session.read()
    if identity is None:
        raise Unauthenticated()
    return identity


def require_role(role_name: str) -> Callable[..., SessionIdentity]:
    """
    Build a dependency that admits only users whose current role is role_name.

    The role is re-read from the store rather than taken from the session
    snapshot, so a changed or deleted account is refused with 403.
    """

    def guard(
        identity: Annotated[SessionIdentity, Depends(require_authenticated)],
        db: Annotated[Session, Depends(get_db)],
    ) -> SessionIdentity:
        user = find_user_by_id(db, identity.id, include_role=True)
        if user is None or user.role_name != role_name:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied")
        return identity

    return guard
