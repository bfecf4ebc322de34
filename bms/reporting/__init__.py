from bms.reporting.csv_export import export_csv, export_filename
from bms.reporting.engine import (
    DashboardReport,
    PlatformCount,
    ProductPerformance,
    TalentTotal,
    active_product_count,
    build_report,
    group_by_platform,
    group_by_talent,
    product_performance,
    total_commission,
    total_revenue,
)

__all__ = [
    "DashboardReport",
    "PlatformCount",
    "ProductPerformance",
    "TalentTotal",
    "active_product_count",
    "build_report",
    "export_csv",
    "export_filename",
    "group_by_platform",
    "group_by_talent",
    "product_performance",
    "total_commission",
    "total_revenue",
]
