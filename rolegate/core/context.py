"""Application context shared by every request."""

from dataclasses import dataclass
from datetime import timedelta

from sqlalchemy import Engine
from sqlalchemy.orm import Session, sessionmaker

from rolegate.core.config import Settings
from rolegate.core.database import build_engine, build_session_factory
from rolegate.services.sessions import SessionStore


@dataclass
class AppContext:
    """Settings, database handles and session store built once at startup."""

    settings: Settings
    engine: Engine
    session_factory: sessionmaker[Session]
    sessions: SessionStore

    @classmethod
    def from_settings(cls, settings: Settings) -> "AppContext":
        engine = build_engine(settings)
        return cls(
            settings=settings,
            engine=engine,
            session_factory=build_session_factory(engine),
            sessions=SessionStore(ttl=timedelta(minutes=settings.SESSION_EXPIRE_MINUTES)),
        )
