"""E2E tests: a working day at the front desk from booking to report.

These tests exercise full flows across multiple repository methods,
verifying that stock quantities, appointment statuses and the daily
figures stay consistent through multi-step operations.
"""

from datetime import datetime

import pytest

from workshop_desk.database.models import (
    Job,
    JobConsumable,
    JobService,
    ScheduledService,
)
from workshop_desk.exceptions import InsufficientStockError, InvalidTransitionError
from workshop_desk.io.csv_handler import export_daily_summary_csv

NOW = datetime(2026, 3, 10, 8, 0, 0)


def _line(service, quantity=1):
    return JobService(
        service_id=service.id, service_name=service.name,
        price=service.price, quantity=quantity,
    )


def _draw(item, quantity):
    return JobConsumable(
        item_id=item.id, item_name=item.item_name,
        quantity_used=quantity, unit=item.unit,
    )


class TestBookingToInvoice:
    """Appointment booked, car arrives, job recorded, stock drawn."""

    def test_full_day(self, repo, admin_user, john, catalog, stock, tmp_path):
        # Morning: the front desk books an oil change for later today
        appt = repo.create_scheduled_service(ScheduledService(
            customer_name="Alice Brown",
            phone_number="+1 (555) 201-3344",
            car_details="2015 Ford Focus",
            service_type="Oil Change",
            scheduled_date="2026-03-10T10:30:00",
            created_by=admin_user.id,
            created_by_name=admin_user.name,
        ), now=NOW)
        assert [a.id for a in repo.get_todays_appointments(NOW)] == [appt.id]
        assert [a.id for a in repo.get_upcoming_appointments(now=NOW)] == [appt.id]

        # Car arrives; John records the job and it draws stock
        job = repo.create_job(Job(
            customer_name="Alice Brown",
            vehicle="2015 Ford Focus",
            services=[_line(catalog["Oil Change"]), _line(catalog["Tire Rotation"])],
            consumables=[_draw(stock["oil"], 4), _draw(stock["oil_filter"], 1)],
            payment_type="card",
            date="2026-03-10T11:15:00",
            staff_id=john.id,
            staff_name=john.name,
        ))
        assert job.total_price == 80
        assert repo.get_inventory_item_by_id(stock["oil"].id).quantity == 21
        assert repo.get_inventory_item_by_id(stock["oil_filter"].id).quantity == 14

        # Appointment closed out; it drops off the upcoming list
        repo.update_appointment_status(appt.id, "completed")
        assert repo.get_upcoming_appointments(now=NOW) == []
        with pytest.raises(InvalidTransitionError):
            repo.update_appointment_status(appt.id, "cancelled")

        # End of day report
        summary = repo.daily_summary("2026-03-10")
        assert summary.total_jobs == 1
        assert summary.total_revenue == 80
        assert summary.service_breakdown["Oil Change"].count == 1
        assert summary.service_breakdown["Brake Inspection"].count == 0
        assert summary.staff_performance[john.id].name == "John Mechanic"

        path = export_daily_summary_csv(summary, tmp_path / "today.csv")
        assert "Alice" not in path.read_text(encoding="utf-8")
        assert "John Mechanic,1,80.00" in path.read_text(encoding="utf-8")


class TestStockRunsLow:
    def test_job_pushes_item_below_threshold_then_restock(self, repo, john, catalog, stock):
        oil = stock["oil"]  # 25 litres, threshold 10
        low_before = {i.id for i in repo.get_low_stock_items()}
        assert low_before == {stock["air_filter"].id}

        repo.create_job(Job(
            customer_name="Fleet Van 7", vehicle="Transit",
            services=[_line(catalog["Oil Change"], 3)],
            consumables=[_draw(oil, 15)],
            staff_id=john.id, staff_name=john.name,
        ))
        assert repo.get_inventory_item_by_id(oil.id).quantity == 10
        assert oil.id in {i.id for i in repo.get_low_stock_items()}
        assert repo.dashboard_stats().low_stock_count == 2

        repo.restock_inventory_item(oil.id, 20)
        assert {i.id for i in repo.get_low_stock_items()} == low_before

    def test_refused_job_changes_nothing(self, repo, john, catalog, stock):
        with pytest.raises(InsufficientStockError) as exc:
            repo.create_job(Job(
                customer_name="Late Walk-in", vehicle="Civic",
                services=[_line(catalog["Brake Inspection"])],
                consumables=[
                    _draw(stock["oil_filter"], 2),
                    _draw(stock["brake_fluid"], 9),
                ],
                staff_id=john.id,
            ))
        assert exc.value.available == 8
        assert exc.value.required == 9
        assert repo.get_all_jobs() == []
        assert repo.get_inventory_item_by_id(stock["oil_filter"].id).quantity == 15
        assert repo.get_inventory_item_by_id(stock["brake_fluid"].id).quantity == 8

    def test_edit_and_delete_leave_stock_alone(self, repo, john, catalog, stock):
        job = repo.create_job(Job(
            customer_name="Dana Lee", vehicle="Golf",
            services=[_line(catalog["Oil Change"])],
            consumables=[_draw(stock["coolant"], 2)],
            staff_id=john.id,
        ))
        job.consumables = [_draw(stock["coolant"], 6)]
        repo.update_job(job)
        assert repo.get_inventory_item_by_id(stock["coolant"].id).quantity == 10

        repo.delete_job(job.id)
        assert repo.get_inventory_item_by_id(stock["coolant"].id).quantity == 10


class TestStaffScopedDashboard:
    def test_each_staff_sees_own_numbers(self, repo, john, catalog):
        jane = repo.authenticate_user("staff2", "staff123")
        for staff, service in [(john, "Oil Change"), (jane, "Engine Diagnostic"),
                               (jane, "Tire Rotation")]:
            repo.create_job(Job(
                customer_name="Walk-in", vehicle="Car",
                services=[_line(catalog[service])],
                date="2026-03-10T13:00:00",
                staff_id=staff.id, staff_name=staff.name,
            ))
        all_stats = repo.dashboard_stats(today=NOW)
        jane_stats = repo.dashboard_stats(staff_id=jane.id, today=NOW)
        assert all_stats.jobs_today == 3
        assert all_stats.revenue_today == 200
        assert jane_stats.jobs_today == 2
        assert jane_stats.revenue_today == 155
        assert jane_stats.average_ticket == 77.5
