"""CSV import and export for inventory, jobs and daily reports."""

import csv
from pathlib import Path

from workshop_desk.database.models import DailySummary, InventoryItem
from workshop_desk.database.repository import Repository
from workshop_desk.io.validators import validate_inventory_row
from workshop_desk.utils.formatters import format_report_date

INVENTORY_CSV_COLUMNS = [
    "item_name", "category", "quantity", "unit", "threshold",
    "price_per_unit", "last_updated",
]

JOB_CSV_COLUMNS = [
    "date", "customer_name", "vehicle", "services", "consumables",
    "total_price", "payment_type", "staff_name", "notes",
]


def export_inventory_csv(repo: Repository, filepath: str | Path) -> int:
    """Export all inventory items to CSV. Returns the number of rows written."""
    items = repo.get_all_inventory_items()
    filepath = Path(filepath)
    filepath.parent.mkdir(parents=True, exist_ok=True)

    with open(filepath, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=INVENTORY_CSV_COLUMNS)
        writer.writeheader()
        for item in items:
            writer.writerow({
                "item_name": item.item_name,
                "category": item.category,
                "quantity": f"{item.quantity:g}",
                "unit": item.unit,
                "threshold": f"{item.threshold:g}",
                "price_per_unit": (
                    "" if item.price_per_unit is None else item.price_per_unit
                ),
                "last_updated": item.last_updated,
            })
    return len(items)


def export_jobs_csv(repo: Repository, filepath: str | Path) -> int:
    """Export all jobs to CSV, one row per job. Returns the row count."""
    jobs = repo.get_all_jobs()
    filepath = Path(filepath)
    filepath.parent.mkdir(parents=True, exist_ok=True)

    with open(filepath, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=JOB_CSV_COLUMNS)
        writer.writeheader()
        for job in jobs:
            writer.writerow({
                "date": job.date,
                "customer_name": job.customer_name,
                "vehicle": job.vehicle,
                "services": "; ".join(
                    f"{s.service_name} x{s.quantity}" for s in job.services
                ),
                "consumables": "; ".join(
                    f"{c.item_name} {c.quantity_used:g} {c.unit}".strip()
                    for c in job.consumables
                ),
                "total_price": f"{job.total_price:.2f}",
                "payment_type": job.payment_type,
                "staff_name": job.staff_name,
                "notes": job.notes,
            })
    return len(jobs)


def export_daily_summary_csv(summary: DailySummary, filepath: str | Path) -> Path:
    """Write a daily report in three sections: summary, services, staff."""
    filepath = Path(filepath)
    filepath.parent.mkdir(parents=True, exist_ok=True)

    with open(filepath, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow([f"Daily Report: {format_report_date(summary.date)}"])
        writer.writerow([])
        writer.writerow(["Summary"])
        writer.writerow(["Total Jobs", summary.total_jobs])
        writer.writerow(["Total Revenue", f"{summary.total_revenue:.2f}"])
        writer.writerow([])
        writer.writerow(["Service Breakdown"])
        writer.writerow(["Service", "Count", "Revenue"])
        for name, tally in summary.service_breakdown.items():
            writer.writerow([name, tally.count, f"{tally.revenue:.2f}"])
        writer.writerow([])
        writer.writerow(["Staff Performance"])
        writer.writerow(["Staff", "Jobs", "Revenue"])
        for tally in summary.staff_performance.values():
            writer.writerow([tally.name, tally.jobs, f"{tally.revenue:.2f}"])
    return filepath


def _float_or(value: str | None, default):
    value = (value or "").strip()
    return float(value) if value else default


def import_inventory_csv(
    repo: Repository,
    filepath: str | Path,
    update_existing: bool = False,
) -> dict:
    """Import inventory items from CSV, matching existing items by name.

    Returns a results dict with counts and error strings.
    """
    filepath = Path(filepath)
    results = {"imported": 0, "updated": 0, "skipped": 0, "errors": []}

    try:
        with open(filepath, "r", encoding="utf-8") as f:
            reader = csv.DictReader(f)
            for row_num, row in enumerate(reader, start=2):
                errors = validate_inventory_row(row, row_num)
                if errors:
                    results["errors"].extend(errors)
                    results["skipped"] += 1
                    continue

                name = row["item_name"].strip()
                existing = repo.get_inventory_item_by_name(name)

                item = InventoryItem(
                    id=existing.id if existing else None,
                    item_name=name,
                    category=(row.get("category") or "").strip(),
                    quantity=_float_or(row.get("quantity"), 0),
                    unit=(row.get("unit") or "").strip(),
                    threshold=_float_or(row.get("threshold"), 0),
                    price_per_unit=_float_or(row.get("price_per_unit"), None),
                )

                if existing and update_existing:
                    repo.update_inventory_item(item)
                    results["updated"] += 1
                elif existing:
                    results["skipped"] += 1
                else:
                    repo.create_inventory_item(item)
                    results["imported"] += 1

    except (OSError, csv.Error, UnicodeDecodeError) as e:
        results["errors"].append(f"File error: {e}")

    return results
