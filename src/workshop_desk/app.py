"""Application entry point — opens the shop database and runs a command."""

import argparse
import logging
import sys
from pathlib import Path

from workshop_desk.config import Config
from workshop_desk.database.connection import DatabaseConnection
from workshop_desk.database.repository import Repository
from workshop_desk.database.schema import initialize_database
from workshop_desk.exceptions import ValidationError, WorkshopError
from workshop_desk.utils.constants import APP_NAME, APP_VERSION
from workshop_desk.utils.dates import to_day
from workshop_desk.utils.formatters import format_currency, format_quantity

logger = logging.getLogger(__name__)


def open_repository(db_path: str | Path | None = None) -> Repository:
    """Initialize the database (seeding on first run) and wrap it."""
    db = DatabaseConnection(db_path or Config.DATABASE_PATH)
    initialize_database(db, seed_demo_data=Config.SEED_DEMO_DATA)
    return Repository(db)


def _cmd_init(repo: Repository, args) -> int:
    print(f"Database ready: {repo.db.db_path} ({repo.user_count()} users)")
    return 0


def _cmd_low_stock(repo: Repository, args) -> int:
    items = repo.get_low_stock_items()
    if not items:
        print("All inventory items are above their thresholds.")
        return 0
    for item in sorted(items, key=lambda i: i.quantity):
        qty = format_quantity(item.quantity, item.threshold, item.unit)
        print(f"{item.id}  {item.item_name:<30} {qty}  (threshold {item.threshold:g})")
    return 0


def _cmd_upcoming(repo: Repository, args) -> int:
    appointments = repo.get_upcoming_appointments(days=args.days)
    if not appointments:
        print("No upcoming appointments.")
    for appt in appointments:
        print(
            f"{appt.scheduled_date}  {appt.customer_name:<20} "
            f"{appt.display_service:<20} {appt.car_details}"
        )
    return 0


def _cmd_today(repo: Repository, args) -> int:
    stats = repo.dashboard_stats(staff_id=args.staff)
    money = Config.CURRENCY_SYMBOL
    print(f"Jobs today:      {stats.jobs_today}")
    print(f"Revenue today:   {format_currency(stats.revenue_today, money)}")
    print(f"Average ticket:  {format_currency(stats.average_ticket, money)}")
    print(f"Low stock items: {stats.low_stock_count}")
    print(f"Upcoming ({Config.UPCOMING_DAYS}d):   {stats.upcoming_appointments}")
    return 0


def _cmd_report(repo: Repository, args) -> int:
    from workshop_desk.io.csv_handler import export_daily_summary_csv
    from workshop_desk.io.excel_handler import export_daily_summary_excel
    from workshop_desk.utils.report_pdf import generate_daily_report_pdf

    summary = repo.daily_summary(args.date)
    output = args.output or str(
        Path(Config.REPORTS_DIRECTORY) / f"daily-report-{summary.date}.{args.format}"
    )
    if args.format == "csv":
        export_daily_summary_csv(summary, output)
    elif args.format == "xlsx":
        export_daily_summary_excel(summary, output)
    else:
        generate_daily_report_pdf(
            summary, output,
            shop_name=Config.SHOP_NAME,
            currency_symbol=Config.CURRENCY_SYMBOL,
        )
    logger.info(f"Daily report for {summary.date} written to {output}")
    print(
        f"{summary.total_jobs} jobs, "
        f"{format_currency(summary.total_revenue, Config.CURRENCY_SYMBOL)} "
        f"-> {output}"
    )
    return 0


def _cmd_restock(repo: Repository, args) -> int:
    item = repo.restock_inventory_item(args.item_id, args.amount)
    print(f"Successfully restocked {item.item_name}: now {item.quantity:g} {item.unit}")
    return 0


def _cmd_backup(repo: Repository, args) -> int:
    if args.keep < 1:
        raise ValidationError("--keep must be at least 1")
    target = repo.db.backup(args.dest or Config.BACKUP_PATH, keep=args.keep)
    print(f"Backup created: {target}")
    return 0


def _cmd_import(repo: Repository, args) -> int:
    from workshop_desk.io.csv_handler import import_inventory_csv

    results = import_inventory_csv(repo, args.file, update_existing=args.update)
    print(
        f"Imported: {results['imported']}  Updated: {results['updated']}  "
        f"Skipped: {results['skipped']}"
    )
    for err in results["errors"]:
        print(f"  - {err}", file=sys.stderr)
    if results["errors"]:
        logger.warning(f"Import of {args.file} had {len(results['errors'])} error(s)")
        return 1
    return 0


def _cmd_export(repo: Repository, args) -> int:
    from workshop_desk.io import csv_handler, excel_handler

    exporters = {
        ("inventory", "csv"): csv_handler.export_inventory_csv,
        ("inventory", "xlsx"): excel_handler.export_inventory_excel,
        ("jobs", "csv"): csv_handler.export_jobs_csv,
        ("jobs", "xlsx"): excel_handler.export_jobs_excel,
    }
    output = args.output or str(
        Path(Config.REPORTS_DIRECTORY) / f"{args.kind}.{args.format}"
    )
    count = exporters[(args.kind, args.format)](repo, output)
    print(f"Exported {count} {args.kind} rows to {output}")
    return 0


def _report_day(text: str):
    """argparse type for --date: a calendar day as YYYY-MM-DD."""
    try:
        return to_day(text)
    except (TypeError, ValueError):
        raise argparse.ArgumentTypeError(
            f"'{text}' is not a valid date (expected YYYY-MM-DD)"
        ) from None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="workshop-desk", description=f"{APP_NAME} {APP_VERSION}",
    )
    parser.add_argument("--db", help="Path to the SQLite database file")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("init", help="Create the database and demo data")
    sub.add_parser("low-stock", help="List items at or below threshold")

    upcoming = sub.add_parser("upcoming", help="List upcoming appointments")
    upcoming.add_argument("--days", type=int, default=None)

    today = sub.add_parser("today", help="Show today's dashboard numbers")
    today.add_argument("--staff", help="Limit job figures to one staff id")

    report = sub.add_parser("report", help="Export a daily report")
    report.add_argument("--date", type=_report_day,
                        help="Report day (YYYY-MM-DD), default today")
    report.add_argument("--format", choices=["csv", "xlsx", "pdf"], default="pdf")
    report.add_argument("--output", help="Output file path")

    restock = sub.add_parser("restock", help="Add stock to an inventory item")
    restock.add_argument("item_id")
    restock.add_argument("amount", type=float)

    backup = sub.add_parser("backup", help="Snapshot the database")
    backup.add_argument("--dest", help="Backup directory, default DATABASE_BACKUP_PATH")
    backup.add_argument("--keep", type=int, default=10,
                        help="Number of snapshots to retain")

    imp = sub.add_parser("import", help="Import inventory items from CSV")
    imp.add_argument("file")
    imp.add_argument("--update", action="store_true",
                     help="Update items that already exist (matched by name)")

    export = sub.add_parser("export", help="Export inventory or jobs")
    export.add_argument("kind", choices=["inventory", "jobs"])
    export.add_argument("--format", choices=["csv", "xlsx"], default="csv")
    export.add_argument("--output", help="Output file path")

    return parser


_COMMANDS = {
    "init": _cmd_init,
    "low-stock": _cmd_low_stock,
    "upcoming": _cmd_upcoming,
    "today": _cmd_today,
    "report": _cmd_report,
    "restock": _cmd_restock,
    "backup": _cmd_backup,
    "import": _cmd_import,
    "export": _cmd_export,
}


def main(argv: list[str] | None = None) -> int:
    """Run a workshop-desk command and return the process exit code."""
    logging.basicConfig(
        level=getattr(logging, Config.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    args = build_parser().parse_args(argv)
    repo = open_repository(args.db)
    try:
        return _COMMANDS[args.command](repo, args)
    except WorkshopError as e:
        logger.error(f"{args.command} failed [{e.code}]: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
