"""Shared test fixtures."""

from datetime import datetime

import pytest

from workshop_desk.database.connection import DatabaseConnection
from workshop_desk.database.models import (
    InventoryItem,
    Job,
    JobService,
    ScheduledService,
    User,
)
from workshop_desk.database.repository import Repository
from workshop_desk.database.schema import initialize_database

# Fixed clock for date-sensitive tests
NOW = datetime(2026, 3, 10, 9, 0, 0)


@pytest.fixture
def db_path(tmp_path):
    """Provide a temporary database path."""
    return tmp_path / "test.db"


@pytest.fixture
def db(db_path):
    """Provide an initialized database with no demo data."""
    conn = DatabaseConnection(db_path)
    initialize_database(conn, seed_demo_data=False)
    return conn


@pytest.fixture
def repo(db):
    """Provide a repository over an empty, initialized database."""
    return Repository(db)


@pytest.fixture
def seeded_repo(tmp_path):
    """Provide a repository over a database holding the first-run demo data."""
    conn = DatabaseConnection(tmp_path / "seeded.db")
    initialize_database(conn, seed_demo_data=True)
    return Repository(conn)


@pytest.fixture
def staff_user(repo):
    return repo.create_user(User(
        username="mech", name="Sam Mechanic",
        password_hash=Repository.hash_password("secret"),
        role="staff",
    ))


@pytest.fixture
def oil(repo):
    return repo.create_inventory_item(InventoryItem(
        item_name="Engine Oil", category="oil",
        quantity=10, unit="litres", threshold=5, price_per_unit=8.5,
    ))


@pytest.fixture
def filters(repo):
    return repo.create_inventory_item(InventoryItem(
        item_name="Oil Filter", category="filter",
        quantity=3, unit="pcs", threshold=2,
    ))


def make_job(**overrides) -> Job:
    """A valid job with one Oil Change line; override any field."""
    fields = dict(
        customer_name="Alice Brown",
        vehicle="2015 Ford Focus",
        services=[JobService(service_id="1", service_name="Oil Change",
                             price=45.0, quantity=1)],
        payment_type="card",
        date="2026-03-10T10:30:00",
        staff_id="2",
        staff_name="John Mechanic",
    )
    fields.update(overrides)
    return Job(**fields)


def make_appointment(**overrides) -> ScheduledService:
    """A valid appointment two days after NOW; override any field."""
    fields = dict(
        customer_name="Bob Singh",
        phone_number="(555) 201-3344",
        car_details="2019 Toyota Corolla",
        service_type="Brake Inspection",
        scheduled_date="2026-03-12T14:00:00",
        created_by="1",
        created_by_name="Admin User",
    )
    fields.update(overrides)
    return ScheduledService(**fields)


@pytest.fixture
def job_factory():
    return make_job


@pytest.fixture
def appointment_factory():
    return make_appointment


@pytest.fixture
def now():
    """The fixed clock used by date-sensitive tests."""
    return NOW
