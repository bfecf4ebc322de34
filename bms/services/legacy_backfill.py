"""Legacy link backfill.

Older product sales point at a product only through a post
(``linked_post_id`` -> post -> ``product_id``). The backfill writes the
resolved ``product_id`` onto each such sale so that reports can rely on
direct attribution alone. Links that cannot be resolved are reported and
left untouched.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional

from bms.models.records import PostRecord, ProductRecord, SaleKind, SaleRecord

logger = logging.getLogger(__name__)


@dataclass
class BackfillLink:
    sale_id: str
    post_id: str
    product_id: str
    product_name: Optional[str] = None


@dataclass
class BackfillPlan:
    links: list[BackfillLink] = field(default_factory=list)
    unresolved: list[str] = field(default_factory=list)


def needs_backfill(sale: SaleRecord) -> bool:
    return (
        sale.kind is SaleKind.PRODUCT_LINKED
        and not sale.product_id
        and bool(sale.linked_post_id)
    )


def plan_backfill(
    sales: Iterable[SaleRecord],
    posts: Iterable[PostRecord],
    products: Iterable[ProductRecord] = (),
) -> BackfillPlan:
    posts_by_id = {p.id: p for p in posts if p.id}
    names = {p.id: p.name for p in products if p.id}

    plan = BackfillPlan()
    for sale in sales:
        if not needs_backfill(sale):
            continue
        post = posts_by_id.get(sale.linked_post_id)
        if not sale.id or post is None or not post.product_id:
            plan.unresolved.append(sale.id or "<no id>")
            continue
        plan.links.append(
            BackfillLink(
                sale_id=sale.id,
                post_id=post.id,
                product_id=post.product_id,
                product_name=names.get(post.product_id) or post.product_name,
            )
        )
    return plan


def apply_backfill(gateway: Any, plan: BackfillPlan, dry_run: bool = True) -> dict:
    """Writes planned links; with ``dry_run`` nothing is written."""
    applied = 0
    failed: list[str] = []
    if not dry_run:
        for link in plan.links:
            if gateway.link_sale_to_product(link.sale_id, link.product_id, link.product_name):
                applied += 1
            else:
                failed.append(link.sale_id)

    summary = {
        "planned": len(plan.links),
        "applied": applied,
        "failed": failed,
        "unresolved": list(plan.unresolved),
        "dry_run": dry_run,
    }
    logger.info(
        "Backfill %s: %d planned, %d applied, %d failed, %d unresolved",
        "dry run" if dry_run else "run",
        summary["planned"],
        applied,
        len(failed),
        len(plan.unresolved),
    )
    return summary
