"""
Token revocation list
Holds tokens revoked at sign-out until they would have expired anyway.

Uses Redis when REDIS_URL is set, in-memory storage otherwise.
"""

import hashlib
import os
import time
import logging
from typing import Dict, Optional
from threading import Lock

import redis

logger = logging.getLogger(__name__)


class TokenBlacklist:
    """Revoked tokens, keyed by jti (or a hash of the token when there is none)"""

    def __init__(self, redis_url: Optional[str] = None):
        self._redis_client: Optional[redis.Redis] = None
        self._memory_expiry: Dict[str, float] = {}
        self._lock = Lock()

        if redis_url:
            try:
                self._redis_client = redis.from_url(redis_url, decode_responses=True)
                self._redis_client.ping()
                logger.info("Token blacklist using Redis")
            except redis.RedisError as e:
                logger.warning(f"Failed to connect to Redis: {e}. Using in-memory blacklist.")
                self._redis_client = None
        else:
            logger.info("Token blacklist using in-memory storage")

    @staticmethod
    def _key(token: str, token_jti: Optional[str]) -> str:
        return token_jti if token_jti else hashlib.sha256(token.encode()).hexdigest()[:32]

    def add(self, token: str, token_jti: Optional[str] = None, expires_in_seconds: int = 3600) -> None:
        key = self._key(token, token_jti)
        expires_in_seconds = max(int(expires_in_seconds), 1)

        if self._redis_client:
            self._redis_client.setex(f"blacklist:{key}", expires_in_seconds, "1")
            return

        with self._lock:
            self._memory_expiry[key] = time.time() + expires_in_seconds
            self._cleanup_expired()

    def is_blacklisted(self, token: str, token_jti: Optional[str] = None) -> bool:
        key = self._key(token, token_jti)

        if self._redis_client:
            try:
                return self._redis_client.exists(f"blacklist:{key}") > 0
            except redis.RedisError as e:
                logger.error(f"Failed to check blacklist: {e}")
                return False

        with self._lock:
            expiry = self._memory_expiry.get(key)
            return expiry is not None and expiry > time.time()

    def _cleanup_expired(self):
        now = time.time()
        expired = [k for k, v in self._memory_expiry.items() if v < now]
        for key in expired:
            self._memory_expiry.pop(key, None)
        if expired:
            logger.debug(f"Cleaned up {len(expired)} expired blacklist entries")

    def clear(self):
        """Clear all revoked tokens (for testing)."""
        if self._redis_client:
            keys = self._redis_client.keys("blacklist:*")
            if keys:
                self._redis_client.delete(*keys)
        else:
            with self._lock:
                self._memory_expiry.clear()


# Global instance
token_blacklist = TokenBlacklist(os.getenv("REDIS_URL"))


def blacklist_token(token: str, token_jti: Optional[str] = None, expires_in_seconds: int = 3600) -> None:
    token_blacklist.add(token, token_jti, expires_in_seconds)


def is_token_blacklisted(token: str, token_jti: Optional[str] = None) -> bool:
    return token_blacklist.is_blacklisted(token, token_jti)
