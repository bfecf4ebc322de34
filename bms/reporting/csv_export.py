"""CSV export of sales activity for download."""

from __future__ import annotations

import csv
from io import StringIO
from typing import Iterable, Optional

from bms.models.records import DateRange, SaleRecord

HEADER = [
    "Date",
    "Type",
    "Talent",
    "Account",
    "Product/Context",
    "GMV/Revenue",
    "Commission",
    "Qty",
    "Views",
    "Clicks",
]
PLACEHOLDER = "-"


def _number(value) -> str:
    if not value:
        return "0"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _text(value: Optional[str]) -> str:
    return value if value else PLACEHOLDER


def sale_row(sale: SaleRecord) -> list[str]:
    return [
        _text(sale.date),
        sale.kind.value,
        _text(sale.talent_name),
        _text(sale.account_name),
        _text(sale.product_name),
        _number(sale.value),
        _number(sale.commission),
        _number(sale.quantity),
        _number(sale.product_views),
        _number(sale.product_clicks),
    ]


def export_csv(sales: Iterable[SaleRecord]) -> str:
    """Header plus one row per sale, in the order given."""
    buffer = StringIO()
    # QUOTE_MINIMAL only quotes fields that contain a delimiter or quote
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(HEADER)
    for sale in sales:
        writer.writerow(sale_row(sale))
    return buffer.getvalue()


def export_filename(date_range: Optional[DateRange] = None) -> str:
    if date_range is None:
        return "sales_report_all_time.csv"
    return f"sales_report_{date_range.start}_to_{date_range.end}.csv"
