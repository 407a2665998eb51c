"""Registration and credential checks built on the account store."""

import logging

from sqlalchemy.orm import Session

from rolegate.core.security import hash_password, verify_password
from rolegate.schemas.auth import SessionIdentity, UserRecord
from rolegate.services.accounts import (
    USER_ROLE,
    NotFound,
    create_user,
    find_role_by_name,
    find_user_by_login,
)

logger = logging.getLogger(__name__)


class AuthenticationFailure(Exception):
    """Raised when login and password do not match a stored account."""

    def __init__(self, message: str = "Invalid login or password") -> None:
        self.message = message
        super().__init__(message)


def register(db: Session, login: str, password: str) -> UserRecord:
    """
    Create an account with the 'user' role.

    Raises NotFound when the role is missing and ConstraintViolation when the
    login is taken.
    """
    role = find_role_by_name(db, USER_ROLE)
    if role is None:
        raise NotFound("Role not found")
    user = create_user(db, login, hash_password(password), role.id)
    logger.info("Registered user id=%s login=%s", user.id, user.login)
    return user


def authenticate(db: Session, login: str, password: str) -> SessionIdentity:
    """
    Return the session snapshot for valid credentials.

    Unknown login and wrong password raise the same AuthenticationFailure.
    """
    user = find_user_by_login(db, login, include_role=True)
    if user is None or not verify_password(password, user.password):
        raise AuthenticationFailure()
    return SessionIdentity(id=user.id, login=user.login, role=user.role_name or "")
