"""Application-wide constants."""

APP_NAME = "Workshop Desk"
APP_VERSION = "1.0.0"

# User roles
USER_ROLES = ["admin", "staff"]

# Service pricing types
SERVICE_TYPES = ["fixed", "hourly", "custom"]

# Job payment types
PAYMENT_TYPES = ["cash", "card", "transfer", "check"]

# Appointment statuses
APPOINTMENT_STATUSES = ["scheduled", "completed", "missed", "cancelled"]

# Allowed appointment moves: only 'scheduled' may change, all targets are terminal
APPOINTMENT_TRANSITIONS = {
    "scheduled": {"completed", "missed", "cancelled"},
    "completed": set(),
    "missed": set(),
    "cancelled": set(),
}

# Service type that requires a free-text description on appointments
OTHER_SERVICE_TYPE = "Other"

# Inventory categories offered by default
INVENTORY_CATEGORIES = [
    "oil", "filter", "fluid", "coolant", "parts", "tyres", "other",
]

# Timestamp format used for every stored date
TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S"

# Decimal places kept for stock quantities (litres, bottles, pieces)
QUANTITY_PRECISION = 6
