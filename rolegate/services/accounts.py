"""Persistence operations for roles and users."""

import logging

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from rolegate.models import Role, User
from rolegate.schemas.auth import RoleRecord, UserRecord

logger = logging.getLogger(__name__)

USER_ROLE = "user"
ADMIN_ROLE = "admin"


class AccountError(Exception):
    """Base class for account persistence errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class NotFound(AccountError):
    """Raised when a record the operation depends on does not exist."""


class ConstraintViolation(AccountError):
    """Raised when the store rejects a write (duplicate login, unknown role id)."""


def _user_record(user: User, role_name: str | None = None) -> UserRecord:
    return UserRecord(
        id=user.id,
        login=user.login,
        password=user.password,
        role_id=user.role_id,
        role_name=role_name,
    )


def create_role(db: Session, name: str) -> RoleRecord:
    """Insert a role. Raises ConstraintViolation if the name is taken."""
    role = Role(name=name)
    db.add(role)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise ConstraintViolation(str(e.orig)) from e
    db.refresh(role)
    logger.info("Created role %s", name)
    return RoleRecord.model_validate(role)


def find_role_by_name(db: Session, name: str) -> RoleRecord | None:
    role = db.query(Role).filter(Role.name == name).first()
    return RoleRecord.model_validate(role) if role else None


def find_or_create_role(db: Session, name: str) -> RoleRecord:
    """
    Return the role called name, creating it when missing.

    A concurrent creator that wins the insert makes ours fail on the unique
    constraint; the row it created is returned instead.
    """
    existing = find_role_by_name(db, name)
    if existing is not None:
        return existing
    try:
        return create_role(db, name)
    except ConstraintViolation:
        role = find_role_by_name(db, name)
        if role is None:
            raise
        return role


def count_users(db: Session) -> int:
    return db.query(func.count(User.id)).scalar() or 0


def create_user(db: Session, login: str, hashed_password: str, role_id: int) -> UserRecord:
    """
    Insert a user with an already hashed password.

    Raises ConstraintViolation when login exists or role_id references no role.
    """
    user = User(login=login, password=hashed_password, role_id=role_id)
    db.add(user)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise ConstraintViolation(str(e.orig)) from e
    db.refresh(user)
    return _user_record(user)


def find_user_by_login(db: Session, login: str, include_role: bool = False) -> UserRecord | None:
    """Look a user up by login; with include_role the record carries role_name."""
    if include_role:
        row = (
            db.query(User, Role.name)
            .join(Role, User.role_id == Role.id)
            .filter(User.login == login)
            .first()
        )
        return _user_record(row[0], role_name=row[1]) if row else None
    user = db.query(User).filter(User.login == login).first()
    return _user_record(user) if user else None


def find_user_by_id(db: Session, user_id: int, include_role: bool = False) -> UserRecord | None:
    """Look a user up by primary key; with include_role the record carries role_name."""
    if include_role:
        row = (
            db.query(User, Role.name)
            .join(Role, User.role_id == Role.id)
            .filter(User.id == user_id)
            .first()
        )
        return _user_record(row[0], role_name=row[1]) if row else None
    user = db.get(User, user_id)
    return _user_record(user) if user else None
