import argparse
from datetime import date
from pathlib import Path

from pos_analytics.core.dates import resolve_day_range
from pos_analytics.core.logging import setup_logging
from pos_analytics.database import session_scope
from pos_analytics.services.analytics_service import (
    LOW_STOCK,
    PRODUCT_ANALYTICS,
    build_low_stock_report,
    build_product_analytics,
)
from pos_analytics.services.export_service import export_filename, write_csv

REPORTS = (PRODUCT_ANALYTICS, LOW_STOCK)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Export a report to a CSV file.")
    parser.add_argument("--report", choices=REPORTS, default=PRODUCT_ANALYTICS)
    parser.add_argument("--start", type=date.fromisoformat, help="First day (YYYY-MM-DD).")
    parser.add_argument("--end", type=date.fromisoformat, help="Last day (YYYY-MM-DD).")
    parser.add_argument("--out-dir", default="exports", help="Directory for the CSV file.")
    return parser.parse_args(argv)


def export_report(db, report, start=None, end=None, out_dir="exports"):
    """Write ``report`` as CSV under ``out_dir``; returns None when there is nothing to write."""
    if report == LOW_STOCK:
        records = build_low_stock_report(db, limit=100).items
        filename = export_filename(report, None, None)
    else:
        range_start, range_end = resolve_day_range(start, end)
        records = build_product_analytics(db, range_start, range_end).product_performance
        filename = export_filename(report, range_start, range_end)

    if not records:
        return None
    return write_csv(records, Path(out_dir) / filename)


def main(argv=None):
    setup_logging()
    args = parse_args(argv)

    with session_scope() as db:
        path = export_report(db, args.report, args.start, args.end, args.out_dir)

    if path is None:
        print("Nothing to export.")
    else:
        print("Wrote {}".format(path))


if __name__ == "__main__":
    main()
