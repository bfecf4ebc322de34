"""Resolves legacy post-linked sales to a direct product link.

Dry run by default; pass --apply to write.

Usage:
    python -m data_layer.scripts.backfill_legacy_links
    python -m data_layer.scripts.backfill_legacy_links --apply
"""
import json
import logging
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

import env_loader  # noqa: F401
from bms.errors import GatewayUnavailable
from bms.gateway import DynamoGateway
from bms.services.legacy_backfill import apply_backfill, plan_backfill

logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(name)s] %(levelname)s: %(message)s")
logger = logging.getLogger("backfill_legacy_links")


def main(argv=None):
    args = sys.argv[1:] if argv is None else argv
    dry_run = "--apply" not in args

    gateway = DynamoGateway()
    try:
        sales = gateway.fetch_all_sales()
        posts = gateway.fetch_all_posts()
        products = gateway.fetch_products()
    except GatewayUnavailable as e:
        logger.error("Cannot read collections: %s", e)
        return 1

    plan = plan_backfill(sales, posts, products)
    summary = apply_backfill(gateway, plan, dry_run=dry_run)
    print(json.dumps(summary, indent=2, ensure_ascii=False))
    return 1 if summary["failed"] else 0


if __name__ == "__main__":
    sys.exit(main())
