"""Excel (XLSX) export for inventory, jobs and daily reports."""

from pathlib import Path

from openpyxl import Workbook
from openpyxl.styles import Font

from workshop_desk.database.models import DailySummary
from workshop_desk.database.repository import Repository


def _autofit(ws):
    """Approximate column widths from the longest value."""
    for col in ws.columns:
        max_len = max(len(str(cell.value or "")) for cell in col)
        ws.column_dimensions[col[0].column_letter].width = min(max_len + 2, 40)


def export_inventory_excel(repo: Repository, filepath: str | Path) -> int:
    """Export all inventory items to an Excel workbook. Returns row count."""
    items = repo.get_all_inventory_items()
    filepath = Path(filepath)
    filepath.parent.mkdir(parents=True, exist_ok=True)

    wb = Workbook()
    ws = wb.active
    ws.title = "Inventory"
    ws.append([
        "Item", "Category", "Quantity", "Unit", "Threshold",
        "Price / Unit", "Low Stock", "Last Updated",
    ])

    for item in items:
        ws.append([
            item.item_name,
            item.category,
            item.quantity,
            item.unit,
            item.threshold,
            item.price_per_unit,
            "YES" if item.is_low_stock else "",
            item.last_updated,
        ])

    _autofit(ws)
    wb.save(filepath)
    return len(items)


def export_jobs_excel(repo: Repository, filepath: str | Path) -> int:
    """Export all jobs to an Excel workbook. Returns row count."""
    jobs = repo.get_all_jobs()
    filepath = Path(filepath)
    filepath.parent.mkdir(parents=True, exist_ok=True)

    wb = Workbook()
    ws = wb.active
    ws.title = "Jobs"
    ws.append([
        "Date", "Customer", "Vehicle", "Services",
        "Total", "Payment", "Staff", "Notes",
    ])

    for job in jobs:
        ws.append([
            job.date,
            job.customer_name,
            job.vehicle,
            ", ".join(s.service_name for s in job.services),
            job.total_price,
            job.payment_type,
            job.staff_name,
            job.notes,
        ])

    _autofit(ws)
    wb.save(filepath)
    return len(jobs)


def export_daily_summary_excel(summary: DailySummary, filepath: str | Path) -> Path:
    """Write a daily report workbook with Services and Staff sheets."""
    filepath = Path(filepath)
    filepath.parent.mkdir(parents=True, exist_ok=True)

    wb = Workbook()
    ws = wb.active
    ws.title = "Summary"
    ws.append(["Date", summary.date])
    ws.append(["Total Jobs", summary.total_jobs])
    ws.append(["Total Revenue", summary.total_revenue])
    ws.append(["Average Ticket", summary.average_ticket])
    for row in ws.iter_rows(min_col=1, max_col=1):
        row[0].font = Font(bold=True)
    _autofit(ws)

    services = wb.create_sheet("Services")
    services.append(["Service", "Count", "Revenue"])
    for name, tally in summary.service_breakdown.items():
        services.append([name, tally.count, tally.revenue])
    _autofit(services)

    staff = wb.create_sheet("Staff")
    staff.append(["Staff", "Jobs", "Revenue"])
    for tally in summary.staff_performance.values():
        staff.append([tally.name, tally.jobs, tally.revenue])
    _autofit(staff)

    wb.save(filepath)
    return filepath
