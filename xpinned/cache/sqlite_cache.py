"""SQLite-based guest token cache."""

import asyncio
import time
from pathlib import Path

import aiosqlite

from xpinned.cache.base import TokenCache


class SQLiteTokenCache(TokenCache):
    """
    Persists the guest token across runs using aiosqlite.

    Guest tokens stay valid for hours, so consecutive CLI invocations can
    reuse one instead of activating a new token every time.

    The TTL only bounds reuse across runs: rows older than it read as
    absent. Within a run a stale token is still detected the usual way,
    when the API rejects it and the token is invalidated.
    """

    def __init__(
        self,
        db_path: str = ".xpinned_cache.db",
        ttl_seconds: int = 3600,
        key: str = "guest_token",
    ):
        """
        Initialize SQLite token cache.

        Args:
            db_path: Path to SQLite database file
            ttl_seconds: How long a stored token is trusted (1 hour)
            key: Row key, lets several bearer tokens share one database
        """
        self.db_path = Path(db_path)
        self.ttl_seconds = ttl_seconds
        self.key = key
        self._db: aiosqlite.Connection | None = None
        self._lock = asyncio.Lock()

    async def _ensure_db(self) -> aiosqlite.Connection:
        """Ensure database connection and schema exist."""
        if self._db is None:
            self._db = await aiosqlite.connect(self.db_path)
            await self._db.execute("""
                CREATE TABLE IF NOT EXISTS tokens (
                    key TEXT PRIMARY KEY,
                    token TEXT NOT NULL,
                    created_at REAL NOT NULL,
                    expires_at REAL NOT NULL
                )
            """)
            await self._db.commit()
        return self._db

    async def get(self) -> str | None:
        """Return the stored token, None if missing or expired."""
        async with self._lock:
            db = await self._ensure_db()
            async with db.execute(
                "SELECT token FROM tokens WHERE key = ? AND expires_at > ?",
                (self.key, time.time()),
            ) as cursor:
                row = await cursor.fetchone()

        if row is None:
            return None
        return row[0]

    async def set(self, token: str) -> None:
        """Store token with a fresh expiry."""
        now = time.time()
        async with self._lock:
            db = await self._ensure_db()
            await db.execute(
                """
                INSERT OR REPLACE INTO tokens (key, token, created_at, expires_at)
                VALUES (?, ?, ?, ?)
                """,
                (self.key, token, now, now + self.ttl_seconds),
            )
            await db.commit()

    async def invalidate(self) -> None:
        """Remove the stored token."""
        async with self._lock:
            db = await self._ensure_db()
            await db.execute("DELETE FROM tokens WHERE key = ?", (self.key,))
            await db.commit()

    async def clear(self) -> None:
        """Remove every stored token, whatever its key."""
        async with self._lock:
            db = await self._ensure_db()
            await db.execute("DELETE FROM tokens")
            await db.commit()

    async def close(self) -> None:
        """Close database connection."""
        if self._db is not None:
            await self._db.close()
            self._db = None
