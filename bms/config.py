"""Environment driven settings for the DynamoDB gateway and reports."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)

DEFAULT_REGION = "us-west-2"


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("%s=%r is not an integer, using %d", name, raw, default)
        return default


@dataclass
class Settings:
    region: str = DEFAULT_REGION
    sales_table: str = "new_sales_data"
    posts_table: str = "new_posts_data"
    products_table: str = "new_products_data"
    talents_table: str = "talent_references"
    # Size of the unbounded "recent activity" window.
    recent_limit: int = 50
    top_products: int = 10
    endpoint_url: Optional[str] = None

    @property
    def table_names(self) -> dict[str, str]:
        return {
            "sales": self.sales_table,
            "posts": self.posts_table,
            "products": self.products_table,
            "talents": self.talents_table,
        }

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            region=os.environ.get("AWS_DEFAULT_REGION", DEFAULT_REGION),
            sales_table=os.environ.get("BMS_SALES_TABLE", cls.sales_table),
            posts_table=os.environ.get("BMS_POSTS_TABLE", cls.posts_table),
            products_table=os.environ.get("BMS_PRODUCTS_TABLE", cls.products_table),
            talents_table=os.environ.get("BMS_TALENTS_TABLE", cls.talents_table),
            recent_limit=_env_int("BMS_RECENT_LIMIT", cls.recent_limit),
            top_products=_env_int("BMS_TOP_PRODUCTS", cls.top_products),
            endpoint_url=os.environ.get("BMS_DYNAMODB_ENDPOINT") or None,
        )
