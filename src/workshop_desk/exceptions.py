"""Typed exceptions raised by the repository layer.

Every error carries a machine-readable ``code`` so callers (the console
command, export scripts, tests) can branch on type instead of parsing
messages::

    WorkshopError
    +-- NotFoundError            NOT_FOUND
    |   +-- ItemNotFoundError    ITEM_NOT_FOUND
    +-- InsufficientStockError   INSUFFICIENT_STOCK
    +-- ValidationError          VALIDATION_ERROR
        +-- InvalidTransitionError  INVALID_TRANSITION
"""


class WorkshopError(Exception):
    """Base class for all workshop errors."""

    code: str = "WORKSHOP_ERROR"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class NotFoundError(WorkshopError):
    """An operation referenced an id that does not exist."""

    code = "NOT_FOUND"

    def __init__(self, entity: str, entity_id: str):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} not found: {entity_id}")


class ItemNotFoundError(NotFoundError):
    """A consumable or service line references an unknown catalog id."""

    code = "ITEM_NOT_FOUND"

    def __init__(self, item_id: str, entity: str = "Inventory item"):
        super().__init__(entity, item_id)
        self.item_id = item_id


class InsufficientStockError(WorkshopError):
    """A consumption request exceeds the quantity on hand."""

    code = "INSUFFICIENT_STOCK"

    def __init__(self, item_id: str, item_name: str,
                 available: float, required: float, unit: str = ""):
        self.item_id = item_id
        self.item_name = item_name
        self.available = available
        self.required = required
        self.unit = unit
        suffix = f" {unit}" if unit else ""
        super().__init__(
            f"Insufficient quantity for {item_name}. "
            f"Available: {available:g}{suffix}, "
            f"Required: {required:g}{suffix}"
        )


class ValidationError(WorkshopError):
    """Required field missing or malformed."""

    code = "VALIDATION_ERROR"

    def __init__(self, errors: list[str] | str):
        if isinstance(errors, str):
            errors = [errors]
        self.errors = list(errors)
        super().__init__("; ".join(self.errors))


class InvalidTransitionError(ValidationError):
    """Appointment status change not allowed from its current status."""

    code = "INVALID_TRANSITION"

    def __init__(self, appointment_id: str, current: str, requested: str):
        self.appointment_id = appointment_id
        self.current = current
        self.requested = requested
        super().__init__(
            f"Cannot change appointment {appointment_id} "
            f"from '{current}' to '{requested}'"
        )
