# app/services/session_store.py
import json
import secrets
from typing import Any, Dict

import redis

from app.utils.retry import redis_retry
from app.utils.settings import REDIS_URL, SESSION_TTL_SECONDS
from app.utils.logging import get_logger

logger = get_logger(__name__)

#key session:<sid> -> JSON document, TTL renewed on every save


def new_session_id() -> str:
    return secrets.token_urlsafe(32)


class WebSession:
    """Server-side session data bound to the id carried by the session cookie."""

    def __init__(self, session_id: str, data: Dict[str, Any] | None = None, is_new: bool = False):
        self.id = session_id
        self.data = data or {}
        self.is_new = is_new

    @property
    def user_id(self) -> int | None:
        return self.data.get("user_id")

    @property
    def role(self) -> str | None:
        return self.data.get("role")


class SessionStore:
    """
    -session data read/written as JSON in redis
    -TTL refreshed on every save
    -tenacity retry on connection errors
    """

    def __init__(self, url: str | None = None, ttl: int = SESSION_TTL_SECONDS):
        self.redis = redis.Redis.from_url(
            url or REDIS_URL,
            decode_responses=True,
        )
        self.ttl = ttl

    @staticmethod
    def _key(session_id: str) -> str:
        return f"session:{session_id}"

    @redis_retry()
    def load(self, session_id: str) -> Dict[str, Any] | None:
        raw = self.redis.get(self._key(session_id))
        if raw is None:
            return None
        return json.loads(raw)

    @redis_retry()
    def save(self, session_id: str, data: Dict[str, Any]) -> None:
        self.redis.set(self._key(session_id), json.dumps(data), ex=self.ttl)

    @redis_retry()
    def delete(self, session_id: str) -> None:
        logger.info(f"Destroying session {session_id[:8]}...")
        self.redis.delete(self._key(session_id))

    def open(self, session_id: str | None) -> WebSession:
        """Resumes a known session or starts a fresh one with a new id."""
        if session_id:
            data = self.load(session_id)
            if data is not None:
                return WebSession(session_id, data)
        fresh = WebSession(new_session_id(), {}, is_new=True)
        self.save(fresh.id, fresh.data)
        return fresh

    def commit(self, session: WebSession) -> None:
        self.save(session.id, session.data)
