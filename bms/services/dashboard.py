"""Dashboard service - fetches the three collections and keeps the report current.

- Sales, posts and products are fetched together and awaited jointly; the
  reporting engine runs once, on the complete snapshot.
- Each refresh takes a ticket. A result is applied only while its ticket is
  the latest one issued, so a slow superseded fetch never overwrites a newer
  report.
- Read failures leave an empty report with status ``error``; write failures
  set the generic "failed to save" message. Nothing is retried automatically.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from bms.errors import GatewayUnavailable
from bms.models.records import DateRange, PostRecord, ProductRecord, SaleRecord
from bms.reporting.csv_export import export_csv, export_filename
from bms.reporting.engine import TOP_PRODUCTS, DashboardReport, build_report
from bms.services.reference_cache import ReferenceDataCache

logger = logging.getLogger(__name__)

FAILED_TO_SAVE = "failed to save"
FAILED_TO_SYNC = "failed to sync"


class SyncStatus(str, Enum):
    IDLE = "idle"
    SYNCING = "syncing"
    SYNCED = "synced"
    ERROR = "error"


@dataclass
class Snapshot:
    sales: list[SaleRecord]
    posts: list[PostRecord]
    products: list[ProductRecord]


@dataclass
class ExportFile:
    filename: str
    content: str


class DashboardService:
    def __init__(
        self,
        gateway: Any,
        cache: Optional[ReferenceDataCache] = None,
        top_products: int = TOP_PRODUCTS,
    ):
        self.gateway = gateway
        self.cache = cache
        self.top_products = top_products

        self._lock = threading.Lock()
        self._latest_ticket = 0

        self.date_range: Optional[DateRange] = None
        self.snapshot = Snapshot(sales=[], posts=[], products=[])
        self.report = DashboardReport()
        self.status = SyncStatus.IDLE
        self.last_error: Optional[str] = None

    # --- Refresh ---

    def _next_ticket(self) -> int:
        with self._lock:
            self._latest_ticket += 1
            self.status = SyncStatus.SYNCING
            return self._latest_ticket

    def _fetch(self, date_range: Optional[DateRange]) -> Snapshot:
        """Dispatches the three reads together; raises GatewayUnavailable."""
        with ThreadPoolExecutor(max_workers=3) as executor:
            sales = executor.submit(self.gateway.fetch_sales, date_range)
            posts = executor.submit(self.gateway.fetch_posts, date_range)
            products = executor.submit(self.gateway.fetch_products)
            return Snapshot(
                sales=sales.result(),
                posts=posts.result(),
                products=products.result(),
            )

    def _apply(
        self,
        ticket: int,
        date_range: Optional[DateRange],
        snapshot: Optional[Snapshot],
    ) -> bool:
        with self._lock:
            if ticket != self._latest_ticket:
                logger.debug(
                    "Discarding stale refresh #%d (latest #%d)", ticket, self._latest_ticket
                )
                return False

            self.date_range = date_range
            if snapshot is None:
                self.snapshot = Snapshot(sales=[], posts=[], products=[])
                self.report = DashboardReport(date_range=date_range)
                self.status = SyncStatus.ERROR
                self.last_error = FAILED_TO_SYNC
                return True

            labels = self.cache.talent_labels() if self.cache else None
            self.snapshot = snapshot
            self.report = build_report(
                snapshot.sales,
                snapshot.posts,
                snapshot.products,
                date_range=date_range,
                talent_labels=labels,
                limit=self.top_products,
            )
            self.status = SyncStatus.SYNCED
            self.last_error = None

        logger.info(
            "Dashboard refreshed #%d: %d sales, %d posts, %d products",
            ticket,
            len(snapshot.sales),
            len(snapshot.posts),
            len(snapshot.products),
        )
        return True

    def refresh(self, date_range: Optional[DateRange] = None) -> bool:
        """Re-fetches and re-aggregates. Returns False if superseded."""
        ticket = self._next_ticket()
        try:
            snapshot = self._fetch(date_range)
        except GatewayUnavailable as e:
            logger.error("Dashboard sync failed: %s", e)
            snapshot = None
        return self._apply(ticket, date_range, snapshot)

    # --- Mutations ---

    def delete_sale(self, sale_id: str) -> bool:
        """Delete, then a full re-fetch; no optimistic local update."""
        with self._lock:
            self.status = SyncStatus.SYNCING
        if not self.gateway.delete_sale(sale_id):
            with self._lock:
                self.status = SyncStatus.ERROR
                self.last_error = FAILED_TO_SAVE
            return False
        self.refresh(self.date_range)
        return True

    # --- Views ---

    @property
    def recent_sales(self) -> list[SaleRecord]:
        return list(self.snapshot.sales)

    def export(self) -> ExportFile:
        """CSV of the sales currently on display."""
        return ExportFile(
            filename=export_filename(self.date_range),
            content=export_csv(self.snapshot.sales),
        )
