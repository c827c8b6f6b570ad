"""
ETag response cache for hosting-service GET requests.

GitHub does not count ``304 Not Modified`` answers against the rate limit, so
repeated runs revalidate cached listings instead of downloading them again.
The database is a scratch file: deleting it only costs a slower next run.
"""

import json
import sqlite3
from pathlib import Path
from typing import Any

from tedium.logging import get_logger

logger = get_logger("cache")

SCHEMA_VERSION = 1


class ResponseCache:
    """``url -> (etag, body)`` store backed by a sqlite file."""

    def __init__(self, path: str | Path = ".github-cachedb") -> None:
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(self.path)
        self._conn.row_factory = sqlite3.Row
        self._init_db()

    def _init_db(self) -> None:
        self._conn.execute(
            """
            CREATE TABLE IF NOT EXISTS meta (
              key TEXT PRIMARY KEY,
              value TEXT NOT NULL
            );
            """
        )
        self._conn.execute(
            """
            CREATE TABLE IF NOT EXISTS responses (
              url TEXT PRIMARY KEY,
              etag TEXT NOT NULL,
              body TEXT NOT NULL
            );
            """
        )
        row = self._conn.execute(
            "SELECT value FROM meta WHERE key='schema_version'"
        ).fetchone()
        if row is None:
            self._conn.execute(
                "INSERT INTO meta(key, value) VALUES('schema_version', ?)",
                (str(SCHEMA_VERSION),),
            )
        elif row["value"] != str(SCHEMA_VERSION):
            # Stale layout, the contents are disposable
            logger.info(f"discarding response cache with schema {row['value']}")
            self._conn.execute("DELETE FROM responses")
            self._conn.execute(
                "UPDATE meta SET value=? WHERE key='schema_version'",
                (str(SCHEMA_VERSION),),
            )
        self._conn.commit()

    def get(self, url: str) -> tuple[str, Any] | None:
        """Return ``(etag, body)`` for ``url``, or None when not cached."""
        row = self._conn.execute(
            "SELECT etag, body FROM responses WHERE url=?", (url,)
        ).fetchone()
        if row is None:
            return None
        return row["etag"], json.loads(row["body"])

    def put(self, url: str, etag: str, body: Any) -> None:
        self._conn.execute(
            "INSERT OR REPLACE INTO responses(url, etag, body) VALUES(?, ?, ?)",
            (url, etag, json.dumps(body)),
        )
        self._conn.commit()

    def __len__(self) -> int:
        return self._conn.execute("SELECT COUNT(*) FROM responses").fetchone()[0]

    def close(self) -> None:
        self._conn.close()


__all__ = ["ResponseCache"]
