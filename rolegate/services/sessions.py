"""Server-side session store and the per-request session capability."""

import logging
import secrets
import threading
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from fastapi import Response

from rolegate.core.config import Settings
from rolegate.core.security import sign_session_id, unsign_session_id
from rolegate.schemas.auth import SessionIdentity

logger = logging.getLogger(__name__)


class SessionStoreError(Exception):
    """
    Raised when the session store cannot complete an operation.

    The in-process SessionStore never raises it; it is the failure contract
    for stores backed by an external service, which callers must tolerate.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


@dataclass
class _Entry:
    identity: SessionIdentity
    expires_at: datetime


class SessionStore:
    """
    In-process map from opaque session id to SessionIdentity.

    Entries expire after ttl. Expired entries are dropped when read and swept
    on every create, so abandoned sessions do not accumulate.
    """

    def __init__(self, ttl: timedelta) -> None:
        self._ttl = ttl
        self._entries: dict[str, _Entry] = {}
        self._lock = threading.Lock()

    def create(self, identity: SessionIdentity) -> str:
        session_id = secrets.token_urlsafe(32)
        now = datetime.now(UTC)
        with self._lock:
            self._purge_expired(now)
            self._entries[session_id] = _Entry(identity, now + self._ttl)
        return session_id

    def read(self, session_id: str) -> SessionIdentity | None:
        with self._lock:
            entry = self._entries.get(session_id)
            if entry is None:
                return None
            if entry.expires_at <= datetime.now(UTC):
                del self._entries[session_id]
                return None
            return entry.identity

    def purge_expired(self) -> int:
        """Drop every expired entry; return how many were removed."""
        with self._lock:
            return self._purge_expired(datetime.now(UTC))

    def _purge_expired(self, now: datetime) -> int:
        # caller holds the lock
        expired = [sid for sid, entry in self._entries.items() if entry.expires_at <= now]
        for sid in expired:
            del self._entries[sid]
        return len(expired)

    def delete(self, session_id: str) -> None:
        with self._lock:
            self._entries.pop(session_id, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


class SessionHandle:
    """
    Read/write access to the session of a single request.

    Built by a dependency from the request cookie; handlers receive it
    explicitly instead of mutating the request.
    """

    def __init__(self, store: SessionStore, settings: Settings, cookie: str | None) -> None:
        self._store = store
        self._settings = settings
        self._session_id = unsign_session_id(cookie, settings) if cookie else None

    def read(self) -> SessionIdentity | None:
        """Return the identity for this request, or None if there is no live session."""
        if self._session_id is None:
            return None
        return self._store.read(self._session_id)

    def create(self, identity: SessionIdentity, response: Response) -> None:
        """Start a session for identity, replacing any session this client had."""
        if self._session_id is not None:
            self._store.delete(self._session_id)
        self._session_id = self._store.create(identity)
        response.set_cookie(
            key=self._settings.SESSION_COOKIE_NAME,
            value=sign_session_id(self._session_id, self._settings),
            max_age=self._settings.SESSION_EXPIRE_MINUTES * 60,
            httponly=True,
            samesite="lax",
            secure=self._settings.SESSION_COOKIE_SECURE,
        )
        logger.debug("Session created for user id=%s", identity.id)

    def destroy(self, response: Response) -> None:
        """
        End the session and clear the cookie.

        A store failure is logged; the cookie is cleared either way.
        """
        if self._session_id is not None:
            try:
                self._store.delete(self._session_id)
            except SessionStoreError as e:
                logger.error("Failed to destroy session: %s", e.message)
            else:
                logger.debug("Session destroyed")
            self._session_id = None
        response.delete_cookie(
            key=self._settings.SESSION_COOKIE_NAME,
            httponly=True,
            samesite="lax",
            secure=self._settings.SESSION_COOKIE_SECURE,
        )
