"""ORM model for application users (session auth and RBAC)."""

from sqlalchemy import Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from rolegate.models.base import Base


class User(Base):
    """User account; password holds the bcrypt hash only."""

    __tablename__ = "User"

    id = Column(Integer, primary_key=True, autoincrement=True)
    login = Column(String(255), nullable=False, unique=True, index=True)
    password = Column(String(255), nullable=False)
    role_id = Column("roleId", Integer, ForeignKey("Role.id"), nullable=False)

    role = relationship("Role", back_populates="users")
