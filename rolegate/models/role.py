"""ORM model for authorization roles."""

from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship

from rolegate.models.base import Base


class Role(Base):
    """
    Named authorization level assigned to users.

    name: 'user' or 'admin'
    """

    __tablename__ = "Role"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False, unique=True)

    users = relationship("User", back_populates="role")
