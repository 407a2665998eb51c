"""Value objects passed between the persistence layer, sessions and routes."""

from pydantic import BaseModel, ConfigDict, Field


class RoleRecord(BaseModel):
    """A stored role (id, name)."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str


class UserRecord(BaseModel):
    """
    A stored user. role_name is set only when the user was loaded together
    with its role.
    """

    model_config = ConfigDict(from_attributes=True)

    id: int
    login: str
    password: str = Field(..., description="bcrypt hash, never plain text")
    role_id: int
    role_name: str | None = None


class SessionIdentity(BaseModel):
    """Snapshot of the authenticated user kept in the session store."""

    id: int
    login: str
    role: str
