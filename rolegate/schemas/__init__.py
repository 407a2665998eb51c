"""Pydantic value objects and response schemas."""

from rolegate.schemas.auth import RoleRecord, SessionIdentity, UserRecord
from rolegate.schemas.health import HealthResponse

__all__ = [
    "HealthResponse",
    "RoleRecord",
    "SessionIdentity",
    "UserRecord",
]
