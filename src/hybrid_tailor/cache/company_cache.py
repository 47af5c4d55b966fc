"""SQLite cache of company recognition lookups with TTL expiration."""

from __future__ import annotations

import sqlite3
import time
from pathlib import Path

from hybrid_tailor.models.analysis import CompanyContext

DEFAULT_DB_PATH = Path.home() / ".hybrid-tailor" / "company_cache.db"
DEFAULT_TTL_DAYS = 30


def cache_key(company_name: str) -> str:
    return " ".join(company_name.lower().split())


class CompanyCache:
    """Remembers whether a company is recognizable enough to skip context."""

    def __init__(
        self,
        db_path: str | Path = DEFAULT_DB_PATH,
        ttl_days: int = DEFAULT_TTL_DAYS,
    ):
        self.db_path = Path(db_path)
        self.ttl_seconds = ttl_days * 86400
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _init_db(self) -> None:
        with self._connect() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS company_context (
                    company_key TEXT PRIMARY KEY,
                    context_json TEXT NOT NULL,
                    cached_at REAL NOT NULL
                )
            """)

    def _connect(self) -> sqlite3.Connection:
        return sqlite3.connect(str(self.db_path))

    def get(self, company_name: str) -> CompanyContext | None:
        """Cached context for ``company_name``, or None when missing or expired."""
        with self._connect() as conn:
            row = conn.execute(
                "SELECT context_json, cached_at FROM company_context WHERE company_key = ?",
                (cache_key(company_name),),
            ).fetchone()
        if row is None:
            return None

        context_json, cached_at = row
        if time.time() - cached_at > self.ttl_seconds:
            self.delete(company_name)
            return None
        return CompanyContext.model_validate_json(context_json).model_copy(update={"source": "cache"})

    def put(self, company_name: str, is_well_known: bool, context: str = "") -> CompanyContext:
        entry = CompanyContext(
            company_name=company_name.strip(),
            is_well_known=is_well_known,
            source="cache",
            context=context,
        )
        with self._connect() as conn:
            conn.execute(
                """INSERT OR REPLACE INTO company_context
                   (company_key, context_json, cached_at)
                   VALUES (?, ?, ?)""",
                (cache_key(company_name), entry.model_dump_json(), time.time()),
            )
        return entry

    def delete(self, company_name: str) -> None:
        with self._connect() as conn:
            conn.execute("DELETE FROM company_context WHERE company_key = ?", (cache_key(company_name),))

    def clear(self) -> int:
        """Clear all cached entries. Returns count of deleted rows."""
        with self._connect() as conn:
            cursor = conn.execute("DELETE FROM company_context")
            return cursor.rowcount

    def stats(self) -> dict:
        with self._connect() as conn:
            total = conn.execute("SELECT COUNT(*) FROM company_context").fetchone()[0]
            expired = conn.execute(
                "SELECT COUNT(*) FROM company_context WHERE ? - cached_at > ?",
                (time.time(), self.ttl_seconds),
            ).fetchone()[0]
        return {"total": total, "expired": expired, "active": total - expired}
