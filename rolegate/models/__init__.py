"""SQLAlchemy ORM models."""

from rolegate.models.base import Base
from rolegate.models.role import Role
from rolegate.models.user import User

__all__ = ["Base", "Role", "User"]
