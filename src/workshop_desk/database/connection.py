"""SQLite connection management — one connection per repository call."""

import logging
import sqlite3
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Iterator

logger = logging.getLogger(__name__)


class DatabaseConnection:
    """Opens the shop database with foreign keys on and ``sqlite3.Row`` rows.

    Every ``get_connection`` block is one transaction: it commits when the
    block finishes and rolls back if anything inside it raises, so a
    repository call never leaves a partial write behind.
    """

    def __init__(self, db_path: str | Path, timeout: float = 5.0):
        self.db_path = Path(db_path)
        self.timeout = timeout
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    @contextmanager
    def get_connection(self) -> Iterator[sqlite3.Connection]:
        conn = sqlite3.connect(str(self.db_path), timeout=self.timeout)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        try:
            yield conn
            conn.commit()
        except Exception as e:
            conn.rollback()
            logger.debug(f"Rolled back transaction on {self.db_path.name}: {e!r}")
            raise
        finally:
            conn.close()

    def execute(self, sql: str, params: tuple = ()) -> list[sqlite3.Row]:
        """Run one statement in its own transaction and return all rows."""
        with self.get_connection() as conn:
            return conn.execute(sql, params).fetchall()

    def execute_script(self, sql_script: str):
        with self.get_connection() as conn:
            conn.executescript(sql_script)

    def backup(self, backup_dir: str | Path, keep: int = 10) -> Path:
        """Write a timestamped snapshot of the database into ``backup_dir``.

        Uses the SQLite online backup API, so the copy is consistent even
        while another connection has the file open. Only the newest
        ``keep`` snapshots are retained.
        """
        backup_dir = Path(backup_dir)
        backup_dir.mkdir(parents=True, exist_ok=True)
        stamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
        target = backup_dir / f"{self.db_path.stem}_{stamp}.db"

        dest = sqlite3.connect(str(target))
        try:
            with self.get_connection() as conn:
                conn.backup(dest)
        finally:
            dest.close()
        logger.info(f"Backed up {self.db_path.name} to {target}")

        snapshots = sorted(backup_dir.glob(f"{self.db_path.stem}_*.db"), reverse=True)
        for old in snapshots[keep:]:
            old.unlink()
            logger.info(f"Removed old backup {old.name}")
        return target
