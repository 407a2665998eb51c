"""Home redirect and the pages behind the access guards."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from fastapi.responses import HTMLResponse, PlainTextResponse, RedirectResponse

from rolegate.api.deps import LOGIN_PATH, get_session, require_authenticated, require_role
from rolegate.api.forms import profile_greeting
from rolegate.schemas.auth import SessionIdentity
from rolegate.services.accounts import ADMIN_ROLE
from rolegate.services.sessions import SessionHandle

router = APIRouter()


@router.get("/")
def home(session: Annotated[SessionHandle, Depends(get_session)]) -> RedirectResponse:
    target = "/profile" if session.read() is not None else LOGIN_PATH
    return RedirectResponse(target, status_code=status.HTTP_302_FOUND)


@router.get("/profile", response_class=HTMLResponse)
def profile(identity: Annotated[SessionIdentity, Depends(require_authenticated)]) -> str:
    return profile_greeting(identity.login)


@router.get(
    "/admin",
    response_class=PlainTextResponse,
    dependencies=[Depends(require_role(ADMIN_ROLE))],
)
def admin() -> str:
    """Admin panel; only users whose stored role is 'admin' get here."""
    return "Welcome to the admin panel! Administrators only."
