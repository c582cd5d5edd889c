"""Data models for the database layer."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from workshop_desk.utils.constants import OTHER_SERVICE_TYPE
from workshop_desk.utils.dates import parse_timestamp


@dataclass
class User:
    id: Optional[str] = None
    username: str = ""
    password_hash: str = ""
    name: str = ""
    role: str = "staff"
    email: str = ""
    is_active: int = 1
    created_at: str = ""

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


@dataclass
class Service:
    id: Optional[str] = None
    name: str = ""
    type: str = "fixed"  # 'fixed', 'hourly' or 'custom'
    price: float = 0.0
    estimated_time: Optional[int] = None  # minutes
    is_active: int = 1


@dataclass
class InventoryItem:
    id: Optional[str] = None
    item_name: str = ""
    category: str = ""
    quantity: float = 0
    unit: str = ""
    threshold: float = 0
    price_per_unit: Optional[float] = None
    last_updated: str = ""

    @property
    def is_low_stock(self) -> bool:
        return self.quantity <= self.threshold

    @property
    def stock_value(self) -> float:
        return self.quantity * (self.price_per_unit or 0.0)


@dataclass
class ConsumptionRequest:
    """One line of a consumption batch: draw ``quantity_used`` of ``item_id``."""

    item_id: str = ""
    quantity_used: float = 0


@dataclass
class JobService:
    service_id: str = ""
    service_name: str = ""
    price: float = 0.0
    quantity: int = 1
    is_custom: int = 0

    @property
    def line_total(self) -> float:
        return self.price * self.quantity


@dataclass
class JobConsumable:
    item_id: str = ""
    item_name: str = ""
    quantity_used: float = 0
    unit: str = ""


@dataclass
class Job:
    id: Optional[str] = None
    customer_name: str = ""
    vehicle: str = ""
    services: list[JobService] = field(default_factory=list)
    consumables: list[JobConsumable] = field(default_factory=list)
    total_price: float = 0.0
    payment_type: str = "cash"
    date: str = ""
    staff_id: str = ""
    staff_name: str = ""
    notes: str = ""

    def compute_total(self) -> float:
        return sum(s.line_total for s in self.services)

    @property
    def timestamp(self) -> datetime:
        return parse_timestamp(self.date)


@dataclass
class ScheduledService:
    id: Optional[str] = None
    customer_name: str = ""
    phone_number: str = ""
    car_details: str = ""
    service_type: str = ""
    custom_service_type: str = ""  # Free text when service_type is 'Other'
    scheduled_date: str = ""
    status: str = "scheduled"
    notes: str = ""
    created_by: str = ""
    created_by_name: str = ""
    created_at: str = ""

    @property
    def scheduled_at(self) -> datetime:
        return parse_timestamp(self.scheduled_date)

    @property
    def display_service(self) -> str:
        if self.service_type == OTHER_SERVICE_TYPE and self.custom_service_type:
            return self.custom_service_type
        return self.service_type


# ── Reporting (derived, never stored) ───────────────────────────


@dataclass
class ServiceTally:
    count: int = 0
    revenue: float = 0.0


@dataclass
class StaffTally:
    name: str = ""
    jobs: int = 0
    revenue: float = 0.0


@dataclass
class DailySummary:
    date: str = ""
    total_jobs: int = 0
    total_revenue: float = 0.0
    service_breakdown: dict[str, ServiceTally] = field(default_factory=dict)
    staff_performance: dict[str, StaffTally] = field(default_factory=dict)

    @property
    def active_services(self) -> dict[str, ServiceTally]:
        """Services with at least one sale, highest revenue first."""
        rows = [(k, v) for k, v in self.service_breakdown.items() if v.count > 0]
        rows.sort(key=lambda kv: kv[1].revenue, reverse=True)
        return dict(rows)

    @property
    def average_ticket(self) -> float:
        return self.total_revenue / self.total_jobs if self.total_jobs else 0.0


@dataclass
class DashboardStats:
    jobs_today: int = 0
    revenue_today: float = 0.0
    average_ticket: float = 0.0
    low_stock_count: int = 0
    upcoming_appointments: int = 0
