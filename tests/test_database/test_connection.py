"""Tests for the DatabaseConnection class."""

import sqlite3

import pytest

from workshop_desk.database.connection import DatabaseConnection
from workshop_desk.database.models import InventoryItem
from workshop_desk.database.schema import initialize_database


class TestDatabaseConnectionInit:
    def test_creates_parent_dirs(self, tmp_path):
        db_path = tmp_path / "sub" / "deep" / "shop.db"
        DatabaseConnection(str(db_path))
        assert db_path.parent.exists()

    def test_accepts_str_or_path(self, tmp_path):
        db_path = tmp_path / "shop.db"
        assert DatabaseConnection(str(db_path)).db_path == db_path
        assert DatabaseConnection(db_path).db_path == db_path


class TestGetConnection:
    def test_row_factory_is_row(self, tmp_path):
        db = DatabaseConnection(tmp_path / "row.db")
        with db.get_connection() as conn:
            assert conn.row_factory == sqlite3.Row

    def test_foreign_keys_enabled(self, tmp_path):
        db = DatabaseConnection(tmp_path / "fk.db")
        with db.get_connection() as conn:
            assert conn.execute("PRAGMA foreign_keys").fetchone()[0] == 1

    def test_auto_commits(self, tmp_path):
        db = DatabaseConnection(tmp_path / "commit.db")
        with db.get_connection() as conn:
            conn.execute("CREATE TABLE t (id INTEGER PRIMARY KEY, v TEXT)")
            conn.execute("INSERT INTO t (v) VALUES ('hello')")
        rows = db.execute("SELECT v FROM t")
        assert [r["v"] for r in rows] == ["hello"]

    def test_rollback_on_exception(self, tmp_path):
        db = DatabaseConnection(tmp_path / "rollback.db")
        db.execute("CREATE TABLE t (id INTEGER PRIMARY KEY, v TEXT)")
        db.execute("INSERT INTO t (v) VALUES ('keep')")
        with pytest.raises(RuntimeError):
            with db.get_connection() as conn:
                conn.execute("INSERT INTO t (v) VALUES ('discard')")
                raise RuntimeError("fail")
        rows = db.execute("SELECT v FROM t")
        assert [r["v"] for r in rows] == ["keep"]

    def test_check_constraint_rolls_back_whole_block(self, db, repo, oil):
        """A negative quantity is refused by the table itself."""
        with pytest.raises(sqlite3.IntegrityError):
            with db.get_connection() as conn:
                conn.execute(
                    "UPDATE inventory SET threshold = 1 WHERE id = ?", (oil.id,)
                )
                conn.execute(
                    "UPDATE inventory SET quantity = -1 WHERE id = ?", (oil.id,)
                )
        stored = repo.get_inventory_item_by_id(oil.id)
        assert stored.quantity == 10
        assert stored.threshold == 5

    def test_job_lines_cascade_on_delete(self, repo, job_factory):
        job = repo.create_job(job_factory())
        repo.delete_job(job.id)
        rows = repo.db.execute(
            "SELECT COUNT(*) AS n FROM job_services WHERE job_id = ?", (job.id,)
        )
        assert rows[0]["n"] == 0


class TestExecute:
    def test_with_params(self, db):
        db.execute(
            "INSERT INTO inventory (id, item_name, last_updated) VALUES (?, ?, ?)",
            ("x1", "Wiper Blade", "2026-03-10T09:00:00"),
        )
        rows = db.execute("SELECT item_name FROM inventory WHERE id = ?", ("x1",))
        assert rows[0]["item_name"] == "Wiper Blade"

    def test_returns_empty_for_no_rows(self, db):
        assert db.execute("SELECT * FROM jobs") == []

    def test_raises_on_bad_sql(self, tmp_path):
        db = DatabaseConnection(tmp_path / "bad.db")
        with pytest.raises(sqlite3.OperationalError):
            db.execute("SELECT * FROM nonexistent_table")

    def test_execute_script(self, tmp_path):
        db = DatabaseConnection(tmp_path / "script.db")
        initialize_database(db, seed_demo_data=False)
        db.execute_script("""
            INSERT INTO inventory (id, item_name, last_updated)
                VALUES ('a', 'Spark Plug', '2026-03-10T09:00:00');
            INSERT INTO inventory (id, item_name, last_updated)
                VALUES ('b', 'Fuse', '2026-03-10T09:00:00');
        """)
        assert len(db.execute("SELECT * FROM inventory")) == 2


def test_repository_sees_committed_rows(db, repo):
    repo.create_inventory_item(InventoryItem(item_name="Bulb", quantity=4))
    rows = db.execute("SELECT quantity FROM inventory WHERE item_name = 'Bulb'")
    assert rows[0]["quantity"] == 4


class TestBackup:
    def test_snapshot_has_committed_rows(self, db, repo, tmp_path):
        repo.create_inventory_item(InventoryItem(item_name="Bulb", quantity=4))
        target = db.backup(tmp_path / "backups")
        assert target.parent == tmp_path / "backups"
        copy = DatabaseConnection(target)
        rows = copy.execute("SELECT quantity FROM inventory WHERE item_name = 'Bulb'")
        assert rows[0]["quantity"] == 4

    def test_snapshot_named_after_database(self, db, tmp_path):
        target = db.backup(tmp_path / "backups")
        assert target.name.startswith(f"{db.db_path.stem}_")
        assert target.suffix == ".db"

    def test_keeps_only_newest(self, db, tmp_path):
        made = [db.backup(tmp_path / "backups", keep=2) for _ in range(3)]
        remaining = sorted((tmp_path / "backups").glob("*.db"))
        assert remaining == sorted(made[1:])

    def test_other_files_left_alone(self, db, tmp_path):
        backups = tmp_path / "backups"
        backups.mkdir()
        (backups / "notes.txt").write_text("keep me", encoding="utf-8")
        db.backup(backups, keep=1)
        db.backup(backups, keep=1)
        assert (backups / "notes.txt").exists()
