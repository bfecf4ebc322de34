"""
Dashboard report from the command line.

Usage:
    python report.py                                   # recent activity
    python report.py --from 2024-01-01 --to 2024-01-31 # date range
    python report.py --from 2024-01-01 --to 2024-01-31 --export
"""

import logging
import sys

import env_loader  # noqa: F401
from bms.config import Settings
from bms.gateway import DynamoGateway
from bms.models.records import DateRange
from bms.services import DashboardService, ReferenceDataCache, SyncStatus

logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(name)s] %(levelname)s: %(message)s")


def _option(args, name):
    if name in args:
        i = args.index(name)
        if i + 1 < len(args):
            return args[i + 1]
    return None


def print_report(dashboard: DashboardService):
    report = dashboard.report
    print("\n" + "=" * 60)
    if report.date_range:
        print(f"📊 Report {report.date_range.start} -> {report.date_range.end}")
    else:
        print("📊 Report (recent activity)")
    print("=" * 60)
    print(f"   Revenue:         {report.total_revenue:,.0f}")
    print(f"   Commission:      {report.total_commission:,.0f}")
    print(f"   Posts:           {report.total_posts}")
    print(f"   Active products: {report.active_products}")

    print("\n--- Sales by talent ---")
    for row in report.sales_by_talent:
        print(f"   {row.name:<20} {row.value:>15,.0f}")

    print("\n--- Posts by platform ---")
    for row in report.posts_by_platform:
        print(f"   {row.name:<20} {row.count:>15}")

    print("\n--- Top products ---")
    for row in report.top_products:
        print(f"   {row.name:<30} {row.owner_label:<15} {row.post_count:>4} posts {row.revenue:>15,.0f}")


def main(argv=None):
    args = sys.argv[1:] if argv is None else argv
    start, end = _option(args, "--from"), _option(args, "--to")
    if bool(start) != bool(end):
        print("❌ --from and --to must be given together")
        return 2
    date_range = DateRange(start, end) if start else None

    settings = Settings.from_env()
    gateway = DynamoGateway(settings=settings)
    cache = ReferenceDataCache(gateway)
    cache.refresh()
    dashboard = DashboardService(gateway, cache=cache, top_products=settings.top_products)

    dashboard.refresh(date_range)
    if dashboard.status is SyncStatus.ERROR:
        print(f"❌ {dashboard.last_error}")
        return 1
    print_report(dashboard)

    if "--export" in args:
        export = dashboard.export()
        with open(export.filename, "w", encoding="utf-8", newline="") as f:
            f.write(export.content)
        print(f"\n✓ {export.filename} written")
    return 0


if __name__ == "__main__":
    sys.exit(main())
