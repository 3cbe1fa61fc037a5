"""Session management with signed session tokens."""

import logging
from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from typing import Annotated, Any
from uuid import uuid4

from fastapi import Header, HTTPException
from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer

from config import config

logger = logging.getLogger(__name__)


class SessionSigner:
    """Sign and verify session IDs using itsdangerous."""

    def __init__(self, secret_key: str | None = None) -> None:
        """Initialize the signer with a secret key."""
        self._secret_key = secret_key or config.security.secret_key
        self._serializer = URLSafeTimedSerializer(self._secret_key)

    def sign(self, session_id: str) -> str:
        """Create a signed token from a session ID."""
        return self._serializer.dumps(session_id)

    def unsign(self, token: str, max_age: int | None = None) -> str | None:
        """
        Verify and extract session_id from a signed token.

        Args:
            token: The signed token to verify
            max_age: Maximum age in seconds (defaults to session_ttl)

        Returns:
            The session ID if valid, None otherwise
        """
        max_age = max_age or config.session_ttl
        try:
            return self._serializer.loads(token, max_age=max_age)
        except (BadSignature, SignatureExpired):
            return None


# Global signer instance
_session_signer: SessionSigner | None = None


def get_session_signer() -> SessionSigner:
    """Get or create the session signer."""
    global _session_signer
    if _session_signer is None:
        _session_signer = SessionSigner()
    return _session_signer


class SessionStore(ABC):
    """Abstract session store."""

    @abstractmethod
    async def get(self, session_id: str) -> dict[str, Any] | None:
        """Get session data."""
        ...

    @abstractmethod
    async def set(self, session_id: str, data: dict[str, Any], ttl: int | None = None) -> None:
        """Set session data."""
        ...

    @abstractmethod
    async def delete(self, session_id: str) -> None:
        """Delete session."""
        ...

    async def exists(self, session_id: str) -> bool:
        """Check if session exists."""
        return await self.get(session_id) is not None

    def create_session_id(self, signed: bool = True) -> str:
        """
        Create a new session ID.

        Args:
            signed: If True, return a signed session token

        Returns:
            A new session ID (signed or unsigned based on parameter)
        """
        session_id = str(uuid4())
        if signed:
            return get_session_signer().sign(session_id)
        return session_id


class InMemorySessionStore(SessionStore):
    """In-memory session store; sessions live as long as the local server."""

    def __init__(self) -> None:
        self._sessions: dict[str, tuple[dict[str, Any], datetime]] = {}

    async def get(self, session_id: str) -> dict[str, Any] | None:
        """Get session data."""
        if session_id not in self._sessions:
            return None

        data, expiry = self._sessions[session_id]
        if expiry < datetime.now():
            await self.delete(session_id)
            return None

        return data

    async def set(
        self,
        session_id: str,
        data: dict[str, Any],
        ttl: int | None = None,
    ) -> None:
        """Set session data."""
        ttl = ttl or config.session_ttl
        expiry = datetime.now() + timedelta(seconds=ttl)
        self._sessions[session_id] = (data, expiry)

    async def delete(self, session_id: str) -> None:
        """Delete session."""
        self._sessions.pop(session_id, None)

    async def cleanup_expired(self) -> int:
        """Remove expired sessions."""
        now = datetime.now()
        expired = [sid for sid, (_, expiry) in self._sessions.items() if expiry < now]
        for sid in expired:
            del self._sessions[sid]
        return len(expired)


# Global session store instance
_session_store: SessionStore | None = None


def get_session_store() -> SessionStore:
    """Get or create the session store."""
    global _session_store
    if _session_store is None:
        _session_store = InMemorySessionStore()
    return _session_store


async def create_session(data: dict[str, Any] | None = None) -> str:
    """Create a new session and return its signed token."""
    store = get_session_store()
    session_id = store.create_session_id()
    await store.set(session_id, data or {})
    logger.debug("Created session %s", session_id[:8])
    return session_id


async def touch_session(session_id: str, **data: Any) -> None:
    """Refresh a session's expiry and merge data into it."""
    store = get_session_store()
    session_data = await store.get(session_id) or {}
    session_data.update(data)
    await store.set(session_id, session_data)


def extract_session_id(token: str) -> str | None:
    """
    Extract the raw session ID from a signed token.

    Args:
        token: The signed session token

    Returns:
        The raw session ID if valid, None otherwise
    """
    return get_session_signer().unsign(token)


async def require_session(
    session_id: Annotated[str, Header(alias="X-Session-ID")],
) -> str:
    """FastAPI dependency: the caller's signed session token, verified."""
    if extract_session_id(session_id) is None:
        raise HTTPException(status_code=401, detail="Invalid session token")
    if not await get_session_store().exists(session_id):
        raise HTTPException(status_code=404, detail="Session not found or expired")
    return session_id


async def ensure_session(token: str | None) -> str:
    """Return the caller's token if it is still valid, otherwise a new session's."""
    if token is not None and extract_session_id(token) is not None:
        if await get_session_store().exists(token):
            return token
    return await create_session({"created_at": int(datetime.now().timestamp())})


async def drop_expired_games(games: dict[str, Any]) -> int:
    """
    Remove the games of sessions that no longer exist.

    Args:
        games: Live games keyed by session token

    Returns:
        Number of games removed
    """
    store = get_session_store()
    expired = [session_id for session_id in games if not await store.exists(session_id)]
    for session_id in expired:
        del games[session_id]
    if expired:
        logger.debug("Dropped %d games of expired sessions", len(expired))
    return len(expired)
