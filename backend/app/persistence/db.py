"""SQLite connection, transaction scope + schema initialisation."""
from __future__ import annotations
import os
import sqlite3
import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Iterator, Optional

import bcrypt

from app.core import config
from app.core.logging import get_logger
from app.domain.common.errors import ConcurrencyConflictError

logger = get_logger(__name__)


def get_connection(db_path: Optional[str] = None) -> sqlite3.Connection:
    """Autocommit connection; multi-statement writes go through `transaction()`."""
    conn = sqlite3.connect(
        db_path or config.DATABASE_PATH,
        check_same_thread=False,
        timeout=config.DB_BUSY_TIMEOUT_MS / 1000,
        isolation_level=None,
    )
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    conn.execute("PRAGMA foreign_keys=ON")
    return conn


@contextmanager
def connect(db_path: Optional[str] = None) -> Iterator[sqlite3.Connection]:
    conn = get_connection(db_path)
    try:
        yield conn
    finally:
        conn.close()


@contextmanager
def transaction(db_path: Optional[str] = None) -> Iterator[sqlite3.Connection]:
    """
    One atomic unit of work. BEGIN IMMEDIATE takes the write lock up front,
    so writers serialize here; any exception rolls everything back.
    """
    conn = get_connection(db_path)
    try:
        try:
            conn.execute("BEGIN IMMEDIATE")
        except sqlite3.OperationalError as exc:
            raise ConcurrencyConflictError(f"Could not acquire the write lock: {exc}") from exc
        try:
            yield conn
        except BaseException:
            conn.execute("ROLLBACK")
            raise
        conn.execute("COMMIT")
    finally:
        conn.close()


def init_db(db_path: Optional[str] = None, seed_admin: bool = True) -> None:
    """Run all migration SQL files against the database."""
    path = db_path or config.DATABASE_PATH
    if path != ":memory:":
        os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)
    for name in sorted(os.listdir(config.MIGRATIONS_DIR)):
        if not name.endswith(".sql"):
            continue
        with open(os.path.join(config.MIGRATIONS_DIR, name), "r", encoding="utf-8") as f:
            sql = f.read()
        with connect(path) as conn:
            conn.executescript(sql)
    logger.info("database_initialised", path=path)
    if seed_admin:
        _seed_default_user(path)


def _seed_default_user(db_path: str) -> None:
    """Insert a default admin user when the users table is empty."""
    with connect(db_path) as conn:
        count = conn.execute("SELECT COUNT(*) FROM users").fetchone()[0]
        if count:
            return
        hashed = bcrypt.hashpw(config.DEFAULT_ADMIN_PASSWORD.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")
        conn.execute(
            """
            INSERT INTO users (id, username, password_hash, role, display_name, created_at)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            (
                str(uuid.uuid4()),
                "admin",
                hashed,
                "admin",
                "Administrator",
                datetime.now(timezone.utc).isoformat(),
            ),
        )
    logger.info("default_admin_seeded")
