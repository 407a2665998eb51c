"""Registration, login and logout routes."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Form, HTTPException, status
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from rolegate.api.deps import get_db, get_session
from rolegate.api.forms import LOGIN_PAGE, REGISTER_PAGE
from rolegate.services.accounts import ConstraintViolation, NotFound
from rolegate.services.auth import AuthenticationFailure, authenticate, register
from rolegate.services.sessions import SessionHandle, SessionStoreError

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/register", response_class=HTMLResponse)
def show_register() -> str:
    return REGISTER_PAGE


@router.post("/register")
def do_register(
    login: Annotated[str, Form()],
    password: Annotated[str, Form()],
    db: Annotated[Session, Depends(get_db)],
) -> RedirectResponse:
    """Create a 'user' account and send the client to the login page."""
    try:
        register(db, login, password)
    except NotFound as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message) from e
    except ConstraintViolation as e:
        logger.error("Registration failed for login=%s: %s", login, e.message)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Registration failed: {e.message}",
        ) from e
    except SQLAlchemyError as e:
        logger.exception("Registration failed for login=%s", login)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Server error: {e}",
        ) from e
    return RedirectResponse("/login", status_code=status.HTTP_302_FOUND)


@router.get("/login", response_class=HTMLResponse)
def show_login() -> str:
    return LOGIN_PAGE


@router.post("/login")
def do_login(
    login: Annotated[str, Form()],
    password: Annotated[str, Form()],
    db: Annotated[Session, Depends(get_db)],
    session: Annotated[SessionHandle, Depends(get_session)],
) -> RedirectResponse:
    """
    Check credentials and start a session.

    Unknown login and wrong password get the same 401 so accounts cannot be
    enumerated.
    """
    try:
        identity = authenticate(db, login, password)
    except AuthenticationFailure as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=e.message) from e
    except SQLAlchemyError as e:
        logger.exception("Login failed for login=%s", login)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Server error: {e}",
        ) from e

    response = RedirectResponse("/profile", status_code=status.HTTP_302_FOUND)
    try:
        session.create(identity, response)
    except SessionStoreError as e:
        logger.error("Could not create session for login=%s: %s", login, e.message)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Server error: {e.message}",
        ) from e
    return response


@router.get("/logout")
def logout(session: Annotated[SessionHandle, Depends(get_session)]) -> RedirectResponse:
    response = RedirectResponse("/", status_code=status.HTTP_302_FOUND)
    session.destroy(response)
    return response
