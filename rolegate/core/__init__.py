"""Core app configuration, database and security helpers."""

from rolegate.core.config import Settings, get_settings
from rolegate.core.database import build_engine, build_session_factory, init_schema

__all__ = ["Settings", "get_settings", "build_engine", "build_session_factory", "init_schema"]
