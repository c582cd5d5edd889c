"""Validation rules for records entering the store.

Each validator returns a list of error strings; an empty list means the
record is acceptable. The repository turns a non-empty list into a
``ValidationError``.
"""

import re

from workshop_desk.utils.constants import (
    OTHER_SERVICE_TYPE,
    PAYMENT_TYPES,
    SERVICE_TYPES,
    USER_ROLES,
)

_PHONE_STRIP = re.compile(r"[\s\-\(\)]")
_PHONE_PATTERN = re.compile(r"^\+?[1-9]\d{0,15}$")


def _blank(value) -> bool:
    return value is None or not str(value).strip()


def validate_phone_number(phone: str) -> bool:
    """Accept digits with an optional leading '+', ignoring spaces, dashes and parentheses."""
    if _blank(phone):
        return False
    return bool(_PHONE_PATTERN.match(_PHONE_STRIP.sub("", phone)))


def validate_user(user) -> list[str]:
    errors = []
    if _blank(user.username):
        errors.append("username is required")
    if _blank(user.name):
        errors.append("name is required")
    if _blank(user.password_hash):
        errors.append("password is required")
    if user.role not in USER_ROLES:
        errors.append(f"role must be one of {', '.join(USER_ROLES)}")
    return errors


def validate_service(service) -> list[str]:
    errors = []
    if _blank(service.name):
        errors.append("service name is required")
    if service.type not in SERVICE_TYPES:
        errors.append(f"service type must be one of {', '.join(SERVICE_TYPES)}")
    if service.price is None or service.price < 0:
        errors.append("price cannot be negative")
    if service.estimated_time is not None and service.estimated_time <= 0:
        errors.append("estimated time must be positive")
    return errors


def validate_inventory_item(item) -> list[str]:
    errors = []
    if _blank(item.item_name):
        errors.append("item name is required")
    if item.quantity is None or item.quantity < 0:
        errors.append("quantity cannot be negative")
    if item.threshold is None or item.threshold < 0:
        errors.append("threshold cannot be negative")
    if item.price_per_unit is not None and item.price_per_unit < 0:
        errors.append("price per unit cannot be negative")
    return errors


def validate_job(job) -> list[str]:
    errors = []
    if _blank(job.customer_name):
        errors.append("customer name is required")
    if _blank(job.vehicle):
        errors.append("vehicle is required")
    if not job.services:
        errors.append("at least one service is required")
    for n, line in enumerate(job.services, start=1):
        if _blank(line.service_name):
            errors.append(f"service line {n}: name is required")
        if line.quantity is None or line.quantity < 1:
            errors.append(f"service line {n}: quantity must be at least 1")
        if line.price is None or line.price < 0:
            errors.append(f"service line {n}: price cannot be negative")
    for n, line in enumerate(job.consumables, start=1):
        if _blank(line.item_id):
            errors.append(f"consumable line {n}: item is required")
        if line.quantity_used is None or line.quantity_used <= 0:
            errors.append(f"consumable line {n}: quantity must be positive")
    if job.payment_type not in PAYMENT_TYPES:
        errors.append(f"payment type must be one of {', '.join(PAYMENT_TYPES)}")
    return errors


def validate_appointment(appointment) -> list[str]:
    """Check required fields and phone format (not the future-date rule)."""
    errors = []
    if _blank(appointment.customer_name):
        errors.append("customer name is required")
    if _blank(appointment.phone_number):
        errors.append("phone number is required")
    elif not validate_phone_number(appointment.phone_number):
        errors.append("please enter a valid phone number")
    if _blank(appointment.car_details):
        errors.append("car details are required")
    if _blank(appointment.service_type):
        errors.append("service type is required")
    elif (appointment.service_type == OTHER_SERVICE_TYPE
          and _blank(appointment.custom_service_type)):
        errors.append("please specify the custom service type")
    if _blank(appointment.scheduled_date):
        errors.append("scheduled date is required")
    return errors


def validate_inventory_row(row: dict, row_num: int) -> list[str]:
    """Validate a single row of inventory import data."""
    errors = []

    name = (row.get("item_name") or "").strip()
    if not name:
        errors.append(f"Row {row_num}: item_name is required")

    for column in ("quantity", "threshold", "price_per_unit"):
        raw = (row.get(column) or "").strip()
        if raw == "":
            continue
        try:
            value = float(raw)
            if value < 0:
                errors.append(f"Row {row_num}: {column} cannot be negative")
        except (ValueError, TypeError):
            errors.append(f"Row {row_num}: {column} must be a number")

    return errors
