"""Reporting engine - dashboard aggregates over sales, posts and products.

Pure functions only: every call gets a fresh snapshot of the three
collections and returns fresh results. Missing optional numbers count as 0.

Two views exist:
- all-time (no date range): product revenue also includes legacy indirect
  attribution through ``linked_post_id``.
- date range: only direct ``product_id`` attribution, and products with
  neither posts nor revenue are dropped before ranking.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Mapping, Optional, Sequence

from bms.models.records import (
    DateRange,
    PostRecord,
    ProductRecord,
    SaleKind,
    SaleRecord,
)

TOP_PRODUCTS = 10
GLOBAL_OWNER = "Global"


@dataclass
class TalentTotal:
    name: str
    value: float


@dataclass
class PlatformCount:
    name: str
    count: int


@dataclass
class ProductPerformance:
    product_id: Optional[str]
    name: str
    account: Optional[str]
    post_count: int
    revenue: float

    @property
    def owner_label(self) -> str:
        return self.account or GLOBAL_OWNER

    @property
    def is_active(self) -> bool:
        return self.post_count > 0 or self.revenue > 0


@dataclass
class DashboardReport:
    total_revenue: float = 0
    total_commission: float = 0
    total_posts: int = 0
    active_products: int = 0
    sales_by_talent: list[TalentTotal] = field(default_factory=list)
    posts_by_platform: list[PlatformCount] = field(default_factory=list)
    top_products: list[ProductPerformance] = field(default_factory=list)
    date_range: Optional[DateRange] = None


def total_revenue(sales: Iterable[SaleRecord]) -> float:
    return sum(s.value for s in sales)


def total_commission(sales: Iterable[SaleRecord]) -> float:
    return sum(s.commission or 0 for s in sales)


def group_by_talent(
    sales: Iterable[SaleRecord],
    talent_labels: Optional[Mapping[str, str]] = None,
) -> list[TalentTotal]:
    """Sales value per talent name, in first-seen order.

    With ``talent_labels`` (talent id -> current name) a record carrying a
    known ``talent_id`` is counted under the talent's current name, so a
    renamed talent keeps one bar. Records without an id fall back to their
    stored name and merge into the same bar when that name matches.
    """
    totals: dict[str, TalentTotal] = {}
    for sale in sales:
        if talent_labels and sale.talent_id in talent_labels:
            label = talent_labels[sale.talent_id]
        else:
            label = sale.talent_name
        entry = totals.get(label)
        if entry is None:
            totals[label] = TalentTotal(name=label, value=sale.value)
        else:
            entry.value += sale.value
    return list(totals.values())


def group_by_platform(posts: Iterable[PostRecord]) -> list[PlatformCount]:
    counts: dict[str, PlatformCount] = {}
    for post in posts:
        name = post.platform.value
        if name in counts:
            counts[name].count += 1
        else:
            counts[name] = PlatformCount(name=name, count=1)
    return list(counts.values())


def product_performance(
    products: Sequence[ProductRecord],
    posts: Sequence[PostRecord],
    sales: Sequence[SaleRecord],
    ranged: bool = False,
    limit: int = TOP_PRODUCTS,
) -> list[ProductPerformance]:
    """Ranks products by attributed revenue, highest first (stable on ties)."""
    product_sales = [s for s in sales if s.kind is SaleKind.PRODUCT_LINKED]

    rows = []
    for product in products:
        pid = product.id
        related_posts = [p for p in posts if pid and p.product_id == pid]
        revenue = sum(s.revenue or 0 for s in product_sales if pid and s.product_id == pid)

        # Legacy records: sale -> post -> product, only in the all-time view
        if not ranged:
            post_ids = {p.id for p in related_posts if p.id}
            revenue += sum(
                s.revenue or 0
                for s in product_sales
                if not s.product_id and s.linked_post_id in post_ids
            )

        rows.append(
            ProductPerformance(
                product_id=product.id,
                name=product.name,
                account=product.account_name,
                post_count=len(related_posts),
                revenue=revenue,
            )
        )

    if ranged:
        rows = [r for r in rows if r.is_active]
    rows.sort(key=lambda r: r.revenue, reverse=True)
    return rows[:limit]


def active_product_count(rows: Iterable[ProductPerformance]) -> int:
    return sum(1 for r in rows if r.is_active)


def filter_by_range(records: Iterable, date_range: Optional[DateRange]) -> list:
    if date_range is None:
        return list(records)
    return [r for r in records if date_range.contains(r.date)]


def build_report(
    sales: Sequence[SaleRecord],
    posts: Sequence[PostRecord],
    products: Sequence[ProductRecord],
    date_range: Optional[DateRange] = None,
    talent_labels: Optional[Mapping[str, str]] = None,
    limit: int = TOP_PRODUCTS,
) -> DashboardReport:
    """Runs every aggregate over one consistent snapshot."""
    sales = filter_by_range(sales, date_range)
    posts = filter_by_range(posts, date_range)
    ranged = date_range is not None

    top = product_performance(products, posts, sales, ranged=ranged, limit=limit)
    return DashboardReport(
        total_revenue=total_revenue(sales),
        total_commission=total_commission(sales),
        total_posts=len(posts),
        active_products=active_product_count(top),
        sales_by_talent=group_by_talent(sales, talent_labels),
        posts_by_platform=group_by_platform(posts),
        top_products=top,
        date_range=date_range,
    )
