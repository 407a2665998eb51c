"""Declarative Base shared by the Role and User tables."""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass
