"""Seed the database with a week of mock jobs and appointments for demos.

Creates (on top of the first-run demo users, services and inventory):
  - 3 extra inventory items
  - ~20 jobs spread across the last 7 days, some drawing consumables
  - 8 appointments over the next 10 days

Run:
    python -m execution.seed_mock_data          (from project root)
    python execution/seed_mock_data.py          (direct)

WARNING: This script INSERTS data — run against a fresh DB to avoid
duplicates. Delete data/workshop.db first for a clean start.
"""

import os
import random
import sys
from datetime import datetime, timedelta

# Ensure project src is on the path
_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, os.path.join(_ROOT, "src"))

from workshop_desk.config import Config
from workshop_desk.database.connection import DatabaseConnection
from workshop_desk.database.models import (
    InventoryItem,
    Job,
    JobConsumable,
    JobService,
    ScheduledService,
)
from workshop_desk.database.repository import Repository
from workshop_desk.database.schema import initialize_database
from workshop_desk.exceptions import InsufficientStockError

CUSTOMERS = [
    ("Alice Brown", "+44 7700 900123", "2015 Ford Focus"),
    ("Bob Singh", "(555) 201-3344", "2019 Toyota Corolla"),
    ("Carmen Diaz", "555 877 1200", "2012 VW Golf"),
    ("Dev Patel", "+1 415 555 0199", "2021 Tesla Model 3"),
    ("Erin Walsh", "+44 7700 900456", "2010 Honda Civic"),
    ("Farid Haddad", "555-3030", "2017 Nissan Qashqai"),
]

PAYMENTS = ["cash", "card", "transfer", "check"]


def seed(repo: Repository, rng: random.Random):
    """Populate the database with mock activity."""

    # ── 1. Extra inventory ────────────────────────────────────────
    print("Creating inventory items...")
    for name, category, qty, unit, threshold, price in [
        ("Wiper Blades 22in", "parts", 10, "pcs", 4, 9.50),
        ("Spark Plug - Iridium", "parts", 24, "pcs", 8, 7.25),
        ("Brake Pads - Front", "parts", 6, "sets", 2, 42.00),
    ]:
        repo.create_inventory_item(InventoryItem(
            item_name=name, category=category, quantity=qty,
            unit=unit, threshold=threshold, price_per_unit=price,
        ))

    services = repo.get_active_services()
    staff = repo.get_all_users(active_only=True)
    oil = repo.get_inventory_item_by_name("Engine Oil - 5W30")
    oil_filter = repo.get_inventory_item_by_name("Oil Filter - Standard")

    # ── 2. Jobs over the past week ───────────────────────────────
    print("Creating jobs...")
    today = datetime.now().replace(minute=0, second=0, microsecond=0)
    created = 0
    for days_back in range(7):
        for _ in range(rng.randint(1, 4)):
            picked = rng.sample(services, rng.randint(1, 2))
            customer, _, vehicle = rng.choice(CUSTOMERS)
            member = rng.choice(staff)
            lines = [
                JobService(service_id=s.id, service_name=s.name,
                           price=s.price, quantity=rng.randint(1, 2))
                for s in picked
            ]
            consumables = []
            if oil and oil_filter and any(s.name == "Oil Change" for s in picked):
                consumables = [
                    JobConsumable(item_id=oil.id, item_name=oil.item_name,
                                  quantity_used=4, unit=oil.unit),
                    JobConsumable(item_id=oil_filter.id,
                                  item_name=oil_filter.item_name,
                                  quantity_used=1, unit=oil_filter.unit),
                ]
            when = today - timedelta(days=days_back, hours=rng.randint(0, 8))
            try:
                repo.create_job(Job(
                    customer_name=customer, vehicle=vehicle,
                    services=lines, consumables=consumables,
                    payment_type=rng.choice(PAYMENTS),
                    date=when.isoformat(),
                    staff_id=member.id, staff_name=member.name,
                ))
                created += 1
            except InsufficientStockError as e:
                print(f"  skipped job: {e}")
    print(f"  {created} jobs")

    # ── 3. Upcoming appointments ─────────────────────────────────
    print("Creating appointments...")
    admin = repo.get_user_by_username("admin")
    for n in range(8):
        customer, phone, vehicle = CUSTOMERS[n % len(CUSTOMERS)]
        service = rng.choice(services)
        when = today + timedelta(days=rng.randint(1, 10), hours=rng.randint(1, 6))
        repo.create_scheduled_service(ScheduledService(
            customer_name=customer, phone_number=phone,
            car_details=vehicle, service_type=service.name,
            scheduled_date=when.isoformat(),
            created_by=admin.id if admin else "",
            created_by_name=admin.name if admin else "",
        ))

    print("Done.")


if __name__ == "__main__":
    db = DatabaseConnection(Config.DATABASE_PATH)
    initialize_database(db, seed_demo_data=True)
    seed(Repository(db), random.Random(42))
