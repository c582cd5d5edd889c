"""Database schema definition, initialization, and demo seed data."""

from workshop_desk.utils.dates import to_timestamp

from .repository import Repository

SCHEMA_VERSION = 1

# Each statement is a separate string to avoid executescript issues
_SCHEMA_STATEMENTS = [
    """CREATE TABLE IF NOT EXISTS schema_version (
        version INTEGER PRIMARY KEY,
        applied_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )""",

    """CREATE TABLE IF NOT EXISTS users (
        id TEXT PRIMARY KEY,
        username TEXT NOT NULL UNIQUE,
        password_hash TEXT NOT NULL,
        name TEXT NOT NULL,
        role TEXT NOT NULL DEFAULT 'staff' CHECK (role IN ('admin', 'staff')),
        email TEXT NOT NULL DEFAULT '',
        is_active INTEGER NOT NULL DEFAULT 1,
        created_at TEXT NOT NULL
    )""",

    """CREATE TABLE IF NOT EXISTS services (
        id TEXT PRIMARY KEY,
        name TEXT NOT NULL,
        type TEXT NOT NULL DEFAULT 'fixed'
            CHECK (type IN ('fixed', 'hourly', 'custom')),
        price REAL NOT NULL DEFAULT 0 CHECK (price >= 0),
        estimated_time INTEGER,
        is_active INTEGER NOT NULL DEFAULT 1
    )""",

    """CREATE TABLE IF NOT EXISTS inventory (
        id TEXT PRIMARY KEY,
        item_name TEXT NOT NULL,
        category TEXT NOT NULL DEFAULT '',
        quantity REAL NOT NULL DEFAULT 0 CHECK (quantity >= 0),
        unit TEXT NOT NULL DEFAULT '',
        threshold REAL NOT NULL DEFAULT 0 CHECK (threshold >= 0),
        price_per_unit REAL,
        last_updated TEXT NOT NULL
    )""",

    # Jobs carry value-copies of services and consumables; no FKs to catalog
    """CREATE TABLE IF NOT EXISTS jobs (
        id TEXT PRIMARY KEY,
        customer_name TEXT NOT NULL,
        vehicle TEXT NOT NULL,
        total_price REAL NOT NULL DEFAULT 0,
        payment_type TEXT NOT NULL DEFAULT 'cash'
            CHECK (payment_type IN ('cash', 'card', 'transfer', 'check')),
        date TEXT NOT NULL,
        staff_id TEXT NOT NULL DEFAULT '',
        staff_name TEXT NOT NULL DEFAULT '',
        notes TEXT NOT NULL DEFAULT ''
    )""",

    """CREATE TABLE IF NOT EXISTS job_services (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        job_id TEXT NOT NULL,
        position INTEGER NOT NULL,
        service_id TEXT NOT NULL DEFAULT '',
        service_name TEXT NOT NULL,
        price REAL NOT NULL DEFAULT 0,
        quantity INTEGER NOT NULL DEFAULT 1 CHECK (quantity > 0),
        is_custom INTEGER NOT NULL DEFAULT 0,
        FOREIGN KEY (job_id) REFERENCES jobs(id) ON DELETE CASCADE
    )""",

    """CREATE TABLE IF NOT EXISTS job_consumables (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        job_id TEXT NOT NULL,
        position INTEGER NOT NULL,
        item_id TEXT NOT NULL,
        item_name TEXT NOT NULL DEFAULT '',
        quantity_used REAL NOT NULL CHECK (quantity_used > 0),
        unit TEXT NOT NULL DEFAULT '',
        FOREIGN KEY (job_id) REFERENCES jobs(id) ON DELETE CASCADE
    )""",

    """CREATE TABLE IF NOT EXISTS scheduled_services (
        id TEXT PRIMARY KEY,
        customer_name TEXT NOT NULL,
        phone_number TEXT NOT NULL,
        car_details TEXT NOT NULL,
        service_type TEXT NOT NULL,
        custom_service_type TEXT NOT NULL DEFAULT '',
        scheduled_date TEXT NOT NULL,
        status TEXT NOT NULL DEFAULT 'scheduled'
            CHECK (status IN ('scheduled', 'completed', 'missed', 'cancelled')),
        notes TEXT NOT NULL DEFAULT '',
        created_by TEXT NOT NULL DEFAULT '',
        created_by_name TEXT NOT NULL DEFAULT '',
        created_at TEXT NOT NULL
    )""",

    # Indexes
    "CREATE INDEX IF NOT EXISTS idx_jobs_date ON jobs(date)",
    "CREATE INDEX IF NOT EXISTS idx_jobs_staff ON jobs(staff_id)",
    "CREATE INDEX IF NOT EXISTS idx_job_services_job ON job_services(job_id)",
    "CREATE INDEX IF NOT EXISTS idx_job_consumables_job ON job_consumables(job_id)",
    "CREATE INDEX IF NOT EXISTS idx_scheduled_date ON scheduled_services(scheduled_date)",
    "CREATE INDEX IF NOT EXISTS idx_scheduled_status ON scheduled_services(status)",

    # Record schema version
    f"INSERT OR IGNORE INTO schema_version (version) VALUES ({SCHEMA_VERSION})",
]

# (id, username, password, name, role, email)
_SEED_USERS = [
    ("1", "admin", "admin123", "Admin User", "admin", "admin@mechshop.com"),
    ("2", "staff1", "staff123", "John Mechanic", "staff", "john@mechshop.com"),
    ("3", "staff2", "staff123", "Jane Technician", "staff", "jane@mechshop.com"),
]

# (id, name, type, price, estimated_time)
_SEED_SERVICES = [
    ("1", "Oil Change", "fixed", 45.0, 30),
    ("2", "Brake Inspection", "fixed", 65.0, 45),
    ("3", "Engine Diagnostic", "hourly", 120.0, None),
    ("4", "Tire Rotation", "fixed", 35.0, 30),
]

# (id, item_name, category, quantity, unit, threshold, price_per_unit)
_SEED_INVENTORY = [
    ("1", "Engine Oil - 5W30", "oil", 25, "litres", 10, 8.50),
    ("2", "Oil Filter - Standard", "filter", 15, "pcs", 5, 12.00),
    ("3", "Brake Fluid - DOT 4", "fluid", 8, "bottles", 3, 15.00),
    ("4", "Air Filter - Universal", "filter", 2, "pcs", 5, 18.00),
    ("5", "Coolant - Green", "coolant", 12, "litres", 8, 6.75),
]


def _get_schema_version(conn) -> int:
    """Get the current schema version, or 0 if no schema exists."""
    row = conn.execute(
        "SELECT name FROM sqlite_master "
        "WHERE type = 'table' AND name = 'schema_version'"
    ).fetchone()
    if not row:
        return 0
    row = conn.execute("SELECT MAX(version) AS v FROM schema_version").fetchone()
    return row["v"] if row and row["v"] else 0


def _seed_demo_data(conn):
    """Insert the demo users, services and inventory items."""
    now = to_timestamp(None)
    for uid, username, password, name, role, email in _SEED_USERS:
        conn.execute(
            "INSERT OR IGNORE INTO users "
            "(id, username, password_hash, name, role, email, is_active, created_at) "
            "VALUES (?, ?, ?, ?, ?, ?, 1, ?)",
            (uid, username, Repository.hash_password(password),
             name, role, email, now),
        )
    for sid, name, stype, price, minutes in _SEED_SERVICES:
        conn.execute(
            "INSERT OR IGNORE INTO services "
            "(id, name, type, price, estimated_time, is_active) "
            "VALUES (?, ?, ?, ?, ?, 1)",
            (sid, name, stype, price, minutes),
        )
    for iid, name, category, qty, unit, threshold, ppu in _SEED_INVENTORY:
        conn.execute(
            "INSERT OR IGNORE INTO inventory "
            "(id, item_name, category, quantity, unit, threshold, "
            "price_per_unit, last_updated) VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
            (iid, name, category, qty, unit, threshold, ppu, now),
        )


def initialize_database(db_connection, seed_demo_data: bool = True):
    """Create all tables and indexes, seeding demo data on a fresh database.

    Seeding only happens the first time the schema is created, so demo
    records that were edited or deactivated are never restored.
    """
    with db_connection.get_connection() as conn:
        version = _get_schema_version(conn)
        if version == 0:
            for stmt in _SCHEMA_STATEMENTS:
                conn.execute(stmt)
            if seed_demo_data:
                _seed_demo_data(conn)
