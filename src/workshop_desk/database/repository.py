"""Repository layer — all CRUD operations and queries."""

import hashlib
import logging
import uuid
from dataclasses import replace
from datetime import datetime
from typing import Iterable, Optional

from workshop_desk.config import Config
from workshop_desk.exceptions import (
    InsufficientStockError,
    InvalidTransitionError,
    ItemNotFoundError,
    NotFoundError,
    ValidationError,
)
from workshop_desk.io.validators import (
    validate_appointment,
    validate_inventory_item,
    validate_job,
    validate_service,
    validate_user,
)
from workshop_desk.utils.constants import (
    APPOINTMENT_STATUSES,
    APPOINTMENT_TRANSITIONS,
    QUANTITY_PRECISION,
)
from workshop_desk.utils.dates import (
    day_window,
    days_ahead,
    now_local,
    parse_timestamp,
    to_day,
    to_local_naive,
    to_timestamp,
)

from .connection import DatabaseConnection
from .models import (
    DailySummary,
    DashboardStats,
    InventoryItem,
    Job,
    JobConsumable,
    JobService,
    ScheduledService,
    Service,
    ServiceTally,
    StaffTally,
    User,
)

logger = logging.getLogger(__name__)


def _check(errors: list[str]):
    if errors:
        raise ValidationError(errors)


def _request_fields(request) -> tuple[str, float]:
    """Read (item_id, quantity_used) from a dataclass, object or mapping."""
    if isinstance(request, dict):
        return request["item_id"], request["quantity_used"]
    return request.item_id, request.quantity_used


def _qty(value: float) -> float:
    """Round a stock quantity so float sums like 0.1 + 0.2 compare exactly."""
    return round(float(value), QUANTITY_PRECISION)


class Repository:
    """Provides all database operations for the application."""

    def __init__(self, db: DatabaseConnection):
        self.db = db

    @staticmethod
    def new_id() -> str:
        return uuid.uuid4().hex

    # ── Users ────────────────────────────────────────────────────

    @staticmethod
    def hash_password(password: str) -> str:
        """Hash a password using SHA-256."""
        return hashlib.sha256(password.encode("utf-8")).hexdigest()

    def create_user(self, user: User) -> User:
        _check(validate_user(user))
        user = replace(user, id=self.new_id(), created_at=to_timestamp(None))
        with self.db.get_connection() as conn:
            taken = conn.execute(
                "SELECT 1 FROM users WHERE username = ?", (user.username,)
            ).fetchone()
            if taken:
                raise ValidationError(f"username '{user.username}' is already taken")
            conn.execute("""
                INSERT INTO users
                    (id, username, password_hash, name, role, email,
                     is_active, created_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            """, (
                user.id, user.username, user.password_hash, user.name,
                user.role, user.email, int(bool(user.is_active)),
                user.created_at,
            ))
        logger.info(f"Created {user.role} user '{user.username}'")
        return user

    def get_user_by_id(self, user_id: str) -> Optional[User]:
        rows = self.db.execute(
            "SELECT * FROM users WHERE id = ?", (user_id,)
        )
        return User(**dict(rows[0])) if rows else None

    def get_user_by_username(self, username: str) -> Optional[User]:
        rows = self.db.execute(
            "SELECT * FROM users WHERE username = ?", (username,)
        )
        return User(**dict(rows[0])) if rows else None

    def authenticate_user(self, username: str, password: str) -> Optional[User]:
        """Look up an active user by credentials. Returns User or None."""
        user = self.get_user_by_username(username)
        if (user and user.is_active
                and user.password_hash == self.hash_password(password)):
            return user
        return None

    def get_all_users(self, active_only: bool = False) -> list[User]:
        if active_only:
            rows = self.db.execute(
                "SELECT * FROM users WHERE is_active = 1 ORDER BY name"
            )
        else:
            rows = self.db.execute("SELECT * FROM users ORDER BY name")
        return [User(**dict(r)) for r in rows]

    def update_user(self, user: User) -> User:
        _check(validate_user(user))
        with self.db.get_connection() as conn:
            clash = conn.execute(
                "SELECT 1 FROM users WHERE username = ? AND id != ?",
                (user.username, user.id),
            ).fetchone()
            if clash:
                raise ValidationError(f"username '{user.username}' is already taken")
            cursor = conn.execute("""
                UPDATE users SET
                    username = ?, password_hash = ?, name = ?,
                    role = ?, email = ?, is_active = ?
                WHERE id = ?
            """, (
                user.username, user.password_hash, user.name,
                user.role, user.email, int(bool(user.is_active)), user.id,
            ))
            if cursor.rowcount == 0:
                raise NotFoundError("User", user.id)
        return user

    def toggle_user_active(self, user_id: str) -> User:
        """Flip a user's active flag. Users are never hard-deleted."""
        with self.db.get_connection() as conn:
            cursor = conn.execute(
                "UPDATE users SET is_active = 1 - is_active WHERE id = ?",
                (user_id,),
            )
            if cursor.rowcount == 0:
                raise NotFoundError("User", user_id)
        return self.get_user_by_id(user_id)

    def user_count(self) -> int:
        rows = self.db.execute("SELECT COUNT(*) as cnt FROM users")
        return rows[0]["cnt"] if rows else 0

    # ── Services ────────────────────────────────────────────────

    def get_all_services(self) -> list[Service]:
        rows = self.db.execute("SELECT * FROM services ORDER BY name")
        return [Service(**dict(r)) for r in rows]

    def get_active_services(self) -> list[Service]:
        rows = self.db.execute(
            "SELECT * FROM services WHERE is_active = 1 ORDER BY name"
        )
        return [Service(**dict(r)) for r in rows]

    def get_service_by_id(self, service_id: str) -> Optional[Service]:
        rows = self.db.execute(
            "SELECT * FROM services WHERE id = ?", (service_id,)
        )
        return Service(**dict(rows[0])) if rows else None

    def create_service(self, service: Service) -> Service:
        _check(validate_service(service))
        service = replace(service, id=self.new_id())
        with self.db.get_connection() as conn:
            conn.execute("""
                INSERT INTO services
                    (id, name, type, price, estimated_time, is_active)
                VALUES (?, ?, ?, ?, ?, ?)
            """, (
                service.id, service.name, service.type, service.price,
                service.estimated_time, int(bool(service.is_active)),
            ))
        return service

    def update_service(self, service: Service) -> Service:
        """Replace a catalog entry. Past jobs keep their own name/price copy."""
        _check(validate_service(service))
        with self.db.get_connection() as conn:
            cursor = conn.execute("""
                UPDATE services SET
                    name = ?, type = ?, price = ?,
                    estimated_time = ?, is_active = ?
                WHERE id = ?
            """, (
                service.name, service.type, service.price,
                service.estimated_time, int(bool(service.is_active)),
                service.id,
            ))
            if cursor.rowcount == 0:
                raise NotFoundError("Service", service.id)
        return service

    def toggle_service_active(self, service_id: str) -> Service:
        with self.db.get_connection() as conn:
            cursor = conn.execute(
                "UPDATE services SET is_active = 1 - is_active WHERE id = ?",
                (service_id,),
            )
            if cursor.rowcount == 0:
                raise NotFoundError("Service", service_id)
        return self.get_service_by_id(service_id)

    # ── Inventory ───────────────────────────────────────────────

    def get_all_inventory_items(self) -> list[InventoryItem]:
        rows = self.db.execute("SELECT * FROM inventory ORDER BY item_name")
        return [InventoryItem(**dict(r)) for r in rows]

    def get_available_inventory_items(self) -> list[InventoryItem]:
        """Items that can still be drawn for a job (quantity > 0)."""
        rows = self.db.execute(
            "SELECT * FROM inventory WHERE quantity > 0 ORDER BY item_name"
        )
        return [InventoryItem(**dict(r)) for r in rows]

    def get_inventory_item_by_id(self, item_id: str) -> Optional[InventoryItem]:
        rows = self.db.execute(
            "SELECT * FROM inventory WHERE id = ?", (item_id,)
        )
        return InventoryItem(**dict(rows[0])) if rows else None

    def get_inventory_item_by_name(self, item_name: str) -> Optional[InventoryItem]:
        rows = self.db.execute(
            "SELECT * FROM inventory WHERE item_name = ?", (item_name,)
        )
        return InventoryItem(**dict(rows[0])) if rows else None

    def get_inventory_categories(self) -> list[str]:
        rows = self.db.execute(
            "SELECT DISTINCT category FROM inventory "
            "WHERE category != '' ORDER BY category"
        )
        return [r["category"] for r in rows]

    def create_inventory_item(self, item: InventoryItem) -> InventoryItem:
        _check(validate_inventory_item(item))
        item = replace(item, id=self.new_id(), last_updated=to_timestamp(None))
        with self.db.get_connection() as conn:
            conn.execute("""
                INSERT INTO inventory
                    (id, item_name, category, quantity, unit, threshold,
                     price_per_unit, last_updated)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            """, (
                item.id, item.item_name, item.category, item.quantity,
                item.unit, item.threshold, item.price_per_unit,
                item.last_updated,
            ))
        return item

    def update_inventory_item(self, item: InventoryItem) -> InventoryItem:
        _check(validate_inventory_item(item))
        item = replace(item, last_updated=to_timestamp(None))
        with self.db.get_connection() as conn:
            cursor = conn.execute("""
                UPDATE inventory SET
                    item_name = ?, category = ?, quantity = ?, unit = ?,
                    threshold = ?, price_per_unit = ?, last_updated = ?
                WHERE id = ?
            """, (
                item.item_name, item.category, item.quantity, item.unit,
                item.threshold, item.price_per_unit, item.last_updated,
                item.id,
            ))
            if cursor.rowcount == 0:
                raise NotFoundError("Inventory item", item.id)
        return item

    def restock_inventory_item(self, item_id: str, amount: float) -> InventoryItem:
        """Add stock to an item and refresh its timestamp."""
        if amount is None or amount <= 0:
            raise ValidationError("restock amount must be positive")
        with self.db.get_connection() as conn:
            cursor = conn.execute(
                "UPDATE inventory SET quantity = ROUND(quantity + ?, ?), "
                "last_updated = ? WHERE id = ?",
                (amount, QUANTITY_PRECISION, to_timestamp(None), item_id),
            )
            if cursor.rowcount == 0:
                raise NotFoundError("Inventory item", item_id)
        logger.info(f"Restocked inventory item {item_id} by {amount:g}")
        return self.get_inventory_item_by_id(item_id)

    def get_low_stock_items(self) -> list[InventoryItem]:
        """Items at or below their threshold."""
        rows = self.db.execute(
            "SELECT * FROM inventory WHERE quantity <= threshold "
            "ORDER BY item_name"
        )
        return [InventoryItem(**dict(r)) for r in rows]

    # ── Inventory Consumption ───────────────────────────────────

    @staticmethod
    def _net_requests(requests: Iterable) -> dict[str, float]:
        """Sum quantities per item id, keeping first-seen order."""
        totals: dict[str, float] = {}
        for request in requests:
            item_id, quantity = _request_fields(request)
            if quantity is None or quantity <= 0:
                raise ValidationError(
                    f"consumption quantity for item {item_id} must be positive"
                )
            totals[item_id] = _qty(totals.get(item_id, 0) + quantity)
        return totals

    def _consume(self, conn, requests: Iterable):
        """Validate every request, then apply all decrements.

        Runs on the caller's connection so it shares the caller's
        transaction; any exception rolls the whole batch back.
        """
        totals = self._net_requests(requests)

        # Validation pass: no writes until every line is known to fit
        remaining: dict[str, float] = {}
        for item_id, needed in totals.items():
            row = conn.execute(
                "SELECT item_name, quantity, unit FROM inventory WHERE id = ?",
                (item_id,),
            ).fetchone()
            if not row:
                raise ItemNotFoundError(item_id)
            on_hand = _qty(row["quantity"])
            if on_hand < needed:
                raise InsufficientStockError(
                    item_id, row["item_name"], on_hand, needed, row["unit"],
                )
            remaining[item_id] = _qty(on_hand - needed)

        # Apply pass
        stamp = to_timestamp(None)
        for item_id, quantity in remaining.items():
            conn.execute(
                "UPDATE inventory SET quantity = ?, last_updated = ? "
                "WHERE id = ?",
                (quantity, stamp, item_id),
            )

    def consume_inventory(self, requests: Iterable):
        """Draw down stock for a batch of (item_id, quantity_used) requests.

        All-or-nothing: if any line references an unknown item or asks
        for more than is on hand, no item is modified. Lines naming the
        same item are summed before the sufficiency check.
        """
        requests = list(requests)
        try:
            with self.db.get_connection() as conn:
                self._consume(conn, requests)
        except (ItemNotFoundError, InsufficientStockError, ValidationError) as e:
            logger.warning(f"Consumption rejected: {e}")
            raise
        logger.info(f"Consumed {len(requests)} inventory line(s)")

    # ── Jobs ────────────────────────────────────────────────────

    _JOB_SELECT = """
        SELECT id, customer_name, vehicle, total_price, payment_type,
               date, staff_id, staff_name, notes
        FROM jobs
    """

    @staticmethod
    def _load_job_lines(conn, job: Job) -> Job:
        job.services = [
            JobService(**dict(r)) for r in conn.execute("""
                SELECT service_id, service_name, price, quantity, is_custom
                FROM job_services WHERE job_id = ? ORDER BY position
            """, (job.id,))
        ]
        job.consumables = [
            JobConsumable(**dict(r)) for r in conn.execute("""
                SELECT item_id, item_name, quantity_used, unit
                FROM job_consumables WHERE job_id = ? ORDER BY position
            """, (job.id,))
        ]
        return job

    @staticmethod
    def _write_job_lines(conn, job: Job):
        conn.execute("DELETE FROM job_services WHERE job_id = ?", (job.id,))
        conn.execute("DELETE FROM job_consumables WHERE job_id = ?", (job.id,))
        for pos, line in enumerate(job.services):
            conn.execute("""
                INSERT INTO job_services
                    (job_id, position, service_id, service_name, price,
                     quantity, is_custom)
                VALUES (?, ?, ?, ?, ?, ?, ?)
            """, (
                job.id, pos, line.service_id, line.service_name,
                line.price, line.quantity, int(bool(line.is_custom)),
            ))
        for pos, line in enumerate(job.consumables):
            conn.execute("""
                INSERT INTO job_consumables
                    (job_id, position, item_id, item_name, quantity_used, unit)
                VALUES (?, ?, ?, ?, ?, ?)
            """, (
                job.id, pos, line.item_id, line.item_name,
                line.quantity_used, line.unit,
            ))

    def _fetch_jobs(self, where: str = "", params: tuple = ()) -> list[Job]:
        with self.db.get_connection() as conn:
            rows = conn.execute(
                self._JOB_SELECT + where + " ORDER BY date DESC, rowid DESC",
                params,
            ).fetchall()
            return [self._load_job_lines(conn, Job(**dict(r))) for r in rows]

    def get_all_jobs(self) -> list[Job]:
        return self._fetch_jobs()

    def get_job_by_id(self, job_id: str) -> Optional[Job]:
        jobs = self._fetch_jobs(" WHERE id = ?", (job_id,))
        return jobs[0] if jobs else None

    def get_jobs_by_staff(self, staff_id: str) -> list[Job]:
        return self._fetch_jobs(" WHERE staff_id = ?", (staff_id,))

    def get_jobs_by_date(self, day) -> list[Job]:
        """Jobs whose timestamp falls on the given local calendar day."""
        start, end = day_window(to_day(day))
        return self._fetch_jobs(" WHERE date BETWEEN ? AND ?", (start, end))

    def get_jobs_for_today(self, today=None) -> list[Job]:
        return self.get_jobs_by_date(to_day(today))

    def search_jobs(self, search: str = "",
                    start_date=None, end_date=None,
                    staff_id: Optional[str] = None) -> list[Job]:
        """Filter jobs like the Jobs screen: text, inclusive day range, staff."""
        clauses, params = [], []
        if start_date:
            clauses.append("date >= ?")
            params.append(day_window(to_day(start_date))[0])
        if end_date:
            clauses.append("date <= ?")
            params.append(day_window(to_day(end_date))[1])
        if staff_id:
            clauses.append("staff_id = ?")
            params.append(staff_id)
        where = " WHERE " + " AND ".join(clauses) if clauses else ""
        jobs = self._fetch_jobs(where, tuple(params))

        needle = (search or "").strip().lower()
        if not needle:
            return jobs
        return [
            j for j in jobs
            if needle in j.customer_name.lower()
            or needle in j.vehicle.lower()
            or any(needle in s.service_name.lower() for s in j.services)
        ]

    @staticmethod
    def _job_date(value) -> str:
        try:
            return to_timestamp(value)
        except (TypeError, ValueError):
            raise ValidationError(f"date '{value}' is not a valid date") from None

    def create_job(self, job: Job) -> Job:
        """Record a job, drawing its consumables from inventory.

        The consumption and the insert share one transaction: if any
        consumable cannot be drawn, nothing is written.
        """
        _check(validate_job(job))
        job = replace(
            job,
            id=self.new_id(),
            date=self._job_date(job.date or None),
            total_price=job.compute_total(),
        )
        try:
            with self.db.get_connection() as conn:
                if job.consumables:
                    self._consume(conn, job.consumables)
                conn.execute("""
                    INSERT INTO jobs
                        (id, customer_name, vehicle, total_price,
                         payment_type, date, staff_id, staff_name, notes)
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """, (
                    job.id, job.customer_name, job.vehicle, job.total_price,
                    job.payment_type, job.date, job.staff_id,
                    job.staff_name, job.notes,
                ))
                self._write_job_lines(conn, job)
        except (ItemNotFoundError, InsufficientStockError, ValidationError) as e:
            logger.warning(f"Job for {job.customer_name} refused: {e}")
            raise
        logger.info(
            f"Created job {job.id} for {job.customer_name} "
            f"({job.total_price:.2f})"
        )
        return job

    def update_job(self, job: Job) -> Job:
        """Replace a job and all its line items.

        Inventory is not reconciled: changing the consumable list on an
        existing job has no effect on stock levels.
        """
        _check(validate_job(job))
        job = replace(job, total_price=job.compute_total())
        date = self._job_date(job.date) if job.date else None
        with self.db.get_connection() as conn:
            row = conn.execute(
                "SELECT date FROM jobs WHERE id = ?", (job.id,)
            ).fetchone()
            if not row:
                raise NotFoundError("Job", job.id)
            job.date = date if date else row["date"]
            conn.execute("""
                UPDATE jobs SET
                    customer_name = ?, vehicle = ?, total_price = ?,
                    payment_type = ?, date = ?, staff_id = ?,
                    staff_name = ?, notes = ?
                WHERE id = ?
            """, (
                job.customer_name, job.vehicle, job.total_price,
                job.payment_type, job.date, job.staff_id,
                job.staff_name, job.notes, job.id,
            ))
            self._write_job_lines(conn, job)
        return job

    def delete_job(self, job_id: str):
        """Hard-delete a job. Consumed stock is not returned."""
        with self.db.get_connection() as conn:
            cursor = conn.execute("DELETE FROM jobs WHERE id = ?", (job_id,))
            if cursor.rowcount == 0:
                raise NotFoundError("Job", job_id)

    # ── Scheduled Services (Appointments) ───────────────────────

    def get_all_scheduled_services(self) -> list[ScheduledService]:
        rows = self.db.execute(
            "SELECT * FROM scheduled_services ORDER BY scheduled_date"
        )
        return [ScheduledService(**dict(r)) for r in rows]

    def get_scheduled_service_by_id(self, appointment_id: str) -> Optional[ScheduledService]:
        rows = self.db.execute(
            "SELECT * FROM scheduled_services WHERE id = ?", (appointment_id,)
        )
        return ScheduledService(**dict(rows[0])) if rows else None

    def get_scheduled_services_by_date(self, day) -> list[ScheduledService]:
        start, end = day_window(to_day(day))
        rows = self.db.execute(
            "SELECT * FROM scheduled_services "
            "WHERE scheduled_date BETWEEN ? AND ? ORDER BY scheduled_date",
            (start, end),
        )
        return [ScheduledService(**dict(r)) for r in rows]

    def get_todays_appointments(self, now: Optional[datetime] = None) -> list[ScheduledService]:
        return self.get_scheduled_services_by_date(to_day(now))

    def get_upcoming_appointments(self, days: Optional[int] = None,
                                  now: Optional[datetime] = None) -> list[ScheduledService]:
        """Scheduled appointments from ``now`` to ``now + days``, both inclusive."""
        if days is None:
            days = Config.UPCOMING_DAYS
        now = to_local_naive(now) if now else now_local()
        rows = self.db.execute(
            "SELECT * FROM scheduled_services "
            "WHERE status = 'scheduled' "
            "AND scheduled_date >= ? AND scheduled_date <= ? "
            "ORDER BY scheduled_date",
            (to_timestamp(now), to_timestamp(days_ahead(now, days))),
        )
        return [ScheduledService(**dict(r)) for r in rows]

    @staticmethod
    def _parse_scheduled_date(appointment: ScheduledService) -> datetime:
        try:
            return parse_timestamp(appointment.scheduled_date)
        except (TypeError, ValueError):
            raise ValidationError(
                f"scheduled date '{appointment.scheduled_date}' is not a valid date"
            ) from None

    def create_scheduled_service(self, appointment: ScheduledService,
                                 now: Optional[datetime] = None) -> ScheduledService:
        """Book an appointment. The slot must be strictly in the future."""
        _check(validate_appointment(appointment))
        when = self._parse_scheduled_date(appointment)
        now = to_local_naive(now) if now else now_local()
        if when <= now:
            logger.warning(
                f"Rejected appointment for {appointment.customer_name}: "
                f"{appointment.scheduled_date} is not in the future"
            )
            raise ValidationError(
                "please schedule the appointment for a future date and time"
            )
        appointment = replace(
            appointment,
            id=self.new_id(),
            phone_number=appointment.phone_number.strip(),
            scheduled_date=to_timestamp(when),
            status="scheduled",
            created_at=to_timestamp(now),
        )
        with self.db.get_connection() as conn:
            conn.execute("""
                INSERT INTO scheduled_services
                    (id, customer_name, phone_number, car_details,
                     service_type, custom_service_type, scheduled_date,
                     status, notes, created_by, created_by_name, created_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """, (
                appointment.id, appointment.customer_name,
                appointment.phone_number, appointment.car_details,
                appointment.service_type, appointment.custom_service_type,
                appointment.scheduled_date, appointment.status,
                appointment.notes, appointment.created_by,
                appointment.created_by_name, appointment.created_at,
            ))
        logger.info(
            f"Scheduled {appointment.display_service} for "
            f"{appointment.customer_name} at {appointment.scheduled_date}"
        )
        return appointment

    @staticmethod
    def _check_transition(appointment_id: str, current: str, requested: str,
                          allow_unchanged: bool = False):
        if requested not in APPOINTMENT_STATUSES:
            raise ValidationError(
                f"status must be one of {', '.join(APPOINTMENT_STATUSES)}"
            )
        if allow_unchanged and requested == current:
            return
        if requested not in APPOINTMENT_TRANSITIONS[current]:
            raise InvalidTransitionError(appointment_id, current, requested)

    def update_scheduled_service(self, appointment: ScheduledService) -> ScheduledService:
        """Replace an appointment. A status change must follow the workflow."""
        _check(validate_appointment(appointment))
        when = self._parse_scheduled_date(appointment)
        appointment = replace(appointment, scheduled_date=to_timestamp(when))
        with self.db.get_connection() as conn:
            row = conn.execute(
                "SELECT status, created_at FROM scheduled_services WHERE id = ?",
                (appointment.id,),
            ).fetchone()
            if not row:
                raise NotFoundError("Appointment", appointment.id)
            self._check_transition(
                appointment.id, row["status"], appointment.status,
                allow_unchanged=True,
            )
            appointment.created_at = row["created_at"]
            conn.execute("""
                UPDATE scheduled_services SET
                    customer_name = ?, phone_number = ?, car_details = ?,
                    service_type = ?, custom_service_type = ?,
                    scheduled_date = ?, status = ?, notes = ?,
                    created_by = ?, created_by_name = ?
                WHERE id = ?
            """, (
                appointment.customer_name, appointment.phone_number,
                appointment.car_details, appointment.service_type,
                appointment.custom_service_type, appointment.scheduled_date,
                appointment.status, appointment.notes,
                appointment.created_by, appointment.created_by_name,
                appointment.id,
            ))
        return appointment

    def update_appointment_status(self, appointment_id: str, status: str) -> ScheduledService:
        """Move a scheduled appointment to completed, missed or cancelled."""
        with self.db.get_connection() as conn:
            row = conn.execute(
                "SELECT status FROM scheduled_services WHERE id = ?",
                (appointment_id,),
            ).fetchone()
            if not row:
                raise NotFoundError("Appointment", appointment_id)
            self._check_transition(appointment_id, row["status"], status)
            conn.execute(
                "UPDATE scheduled_services SET status = ? WHERE id = ?",
                (status, appointment_id),
            )
        logger.info(f"Appointment {appointment_id}: {row['status']} -> {status}")
        return self.get_scheduled_service_by_id(appointment_id)

    def delete_scheduled_service(self, appointment_id: str):
        with self.db.get_connection() as conn:
            cursor = conn.execute(
                "DELETE FROM scheduled_services WHERE id = ?", (appointment_id,)
            )
            if cursor.rowcount == 0:
                raise NotFoundError("Appointment", appointment_id)

    # ── Reports ─────────────────────────────────────────────────

    def daily_summary(self, day=None) -> DailySummary:
        """Aggregate one calendar day's jobs by service and by staff.

        Every active catalog service appears in the breakdown, with zero
        counts when it had no sales that day.
        """
        day = to_day(day)
        jobs = self.get_jobs_by_date(day)

        breakdown = {s.name: ServiceTally() for s in self.get_active_services()}
        staff: dict[str, StaffTally] = {}

        for job in jobs:
            tally = staff.get(job.staff_id)
            if tally is None:
                tally = staff[job.staff_id] = StaffTally(
                    name=self._staff_display_name(job)
                )
            tally.jobs += 1
            tally.revenue += job.total_price

            for line in job.services:
                entry = breakdown.setdefault(line.service_name, ServiceTally())
                entry.count += line.quantity
                entry.revenue += line.line_total

        return DailySummary(
            date=day.isoformat(),
            total_jobs=len(jobs),
            total_revenue=sum(j.total_price for j in jobs),
            service_breakdown=breakdown,
            staff_performance=staff,
        )

    def _staff_display_name(self, job: Job) -> str:
        if job.staff_name:
            return job.staff_name
        user = self.get_user_by_id(job.staff_id) if job.staff_id else None
        return user.name if user else "Unknown"

    def dashboard_stats(self, staff_id: Optional[str] = None,
                        today: Optional[datetime] = None) -> DashboardStats:
        """Headline numbers for today; staff see only their own jobs."""
        now = to_local_naive(today) if isinstance(today, datetime) else now_local()
        day = to_day(today) if today is not None else now.date()
        jobs = self.get_jobs_by_date(day)
        if staff_id:
            jobs = [j for j in jobs if j.staff_id == staff_id]
        revenue = sum(j.total_price for j in jobs)
        return DashboardStats(
            jobs_today=len(jobs),
            revenue_today=revenue,
            average_ticket=revenue / len(jobs) if jobs else 0.0,
            low_stock_count=len(self.get_low_stock_items()),
            upcoming_appointments=len(self.get_upcoming_appointments(now=now)),
        )
