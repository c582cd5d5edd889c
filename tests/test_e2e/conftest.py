"""E2E test fixtures — a shop opened on its first-run demo data."""

import pytest

from workshop_desk.database.connection import DatabaseConnection
from workshop_desk.database.repository import Repository
from workshop_desk.database.schema import initialize_database


@pytest.fixture
def repo(tmp_path):
    """Fresh database with the demo users, services and inventory."""
    db = DatabaseConnection(str(tmp_path / "e2e.db"))
    initialize_database(db, seed_demo_data=True)
    return Repository(db)


@pytest.fixture
def admin_user(repo):
    return repo.authenticate_user("admin", "admin123")


@pytest.fixture
def john(repo):
    """Seeded staff member 'staff1'."""
    return repo.authenticate_user("staff1", "staff123")


@pytest.fixture
def catalog(repo):
    """Seeded services keyed by name."""
    return {s.name: s for s in repo.get_all_services()}


@pytest.fixture
def stock(repo):
    """Seeded inventory keyed by short name."""
    items = {i.id: i for i in repo.get_all_inventory_items()}
    return {
        "oil": items["1"],
        "oil_filter": items["2"],
        "brake_fluid": items["3"],
        "air_filter": items["4"],
        "coolant": items["5"],
    }
