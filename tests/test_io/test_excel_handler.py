"""Tests for the Excel export handler."""

from openpyxl import load_workbook

from workshop_desk.database.models import InventoryItem
from workshop_desk.io.excel_handler import (
    export_daily_summary_excel,
    export_inventory_excel,
    export_jobs_excel,
)


class TestInventoryExcel:
    def test_export(self, repo, oil, tmp_path):
        repo.create_inventory_item(InventoryItem(
            item_name="Air Filter", quantity=2, threshold=5,
        ))
        outfile = tmp_path / "inventory.xlsx"
        assert export_inventory_excel(repo, outfile) == 2

        ws = load_workbook(outfile)["Inventory"]
        rows = list(ws.iter_rows(values_only=True))
        assert rows[0][0] == "Item"
        flags = {r[0]: r[6] for r in rows[1:]}
        assert flags["Air Filter"] == "YES"
        assert not flags["Engine Oil"]


class TestJobsExcel:
    def test_export(self, repo, job_factory, tmp_path):
        repo.create_job(job_factory())
        outfile = tmp_path / "jobs.xlsx"
        assert export_jobs_excel(repo, outfile) == 1

        rows = list(load_workbook(outfile)["Jobs"].iter_rows(values_only=True))
        assert rows[1][1] == "Alice Brown"
        assert rows[1][3] == "Oil Change"
        assert rows[1][4] == 45


class TestDailySummaryExcel:
    def test_sheets(self, seeded_repo, job_factory, tmp_path):
        seeded_repo.create_job(job_factory())
        summary = seeded_repo.daily_summary("2026-03-10")
        path = export_daily_summary_excel(summary, tmp_path / "out" / "report.xlsx")

        wb = load_workbook(path)
        assert wb.sheetnames == ["Summary", "Services", "Staff"]
        summary_rows = dict(wb["Summary"].iter_rows(values_only=True))
        assert summary_rows["Total Jobs"] == 1
        assert summary_rows["Total Revenue"] == 45

        services = list(wb["Services"].iter_rows(values_only=True))
        assert len(services) == 1 + 4
        assert ("Oil Change", 1, 45) in services

        staff = list(wb["Staff"].iter_rows(values_only=True))
        assert staff[1] == ("John Mechanic", 1, 45)
