"""Record entry - builds and submits sales, posts, products and talents.

Input checks happen before any write; a missing required field raises
``ValidationError``. Gateway failures come back as ``False``.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Union

from bms.errors import ValidationError
from bms.models.records import (
    Platform,
    PostRecord,
    ProductRecord,
    SaleKind,
    SaleRecord,
    TalentReference,
)
from bms.services.reference_cache import ReferenceDataCache

logger = logging.getLogger(__name__)

GENERAL_REPORT_LABEL = "General Report"
UNKNOWN_PRODUCT_SALE = "Unknown Product"
UNKNOWN_PRODUCT_POST = "Unknown"


def _require(**fields: Any) -> None:
    missing = [name for name, value in fields.items() if not (value or "").strip()]
    if missing:
        raise ValidationError(f"Required field(s) missing: {', '.join(missing)}")


class RecordEntryService:
    def __init__(self, gateway: Any, cache: Optional[ReferenceDataCache] = None):
        self.gateway = gateway
        self.cache = cache or ReferenceDataCache(gateway)

    def _talent_id(self, talent_name: Optional[str]) -> Optional[str]:
        if not talent_name:
            return None
        talent = self.cache.find_talent(talent_name)
        return talent.id if talent else None

    # --- Sales ---

    def submit_general_sale(
        self,
        date: str,
        talent_name: str,
        account_name: str,
        gmv: float = 0,
        commission: float = 0,
        quantity: int = 0,
        product_views: int = 0,
        product_clicks: int = 0,
    ) -> bool:
        """Aggregate sales report for an account, not tied to a product."""
        _require(date=date, talent_name=talent_name, account_name=account_name)
        sale = SaleRecord(
            date=date,
            talent_name=talent_name,
            account_name=account_name,
            kind=SaleKind.GENERAL,
            gmv=gmv,
            revenue=0,
            commission=commission,
            quantity=quantity,
            product_views=product_views,
            product_clicks=product_clicks,
            product_name=GENERAL_REPORT_LABEL,
            talent_id=self._talent_id(talent_name),
        )
        return self.gateway.create_sale(sale)

    def submit_product_sale(
        self,
        date: str,
        talent_name: str,
        account_name: str,
        product_id: str,
        revenue: float = 0,
        commission: float = 0,
        quantity: int = 0,
    ) -> bool:
        _require(
            date=date,
            talent_name=talent_name,
            account_name=account_name,
            product_id=product_id,
        )
        product = self.cache.find_product(product_id)
        sale = SaleRecord(
            date=date,
            talent_name=talent_name,
            account_name=account_name,
            kind=SaleKind.PRODUCT_LINKED,
            revenue=revenue,
            commission=commission,
            quantity=quantity,
            product_id=product_id,
            product_name=product.name if product else UNKNOWN_PRODUCT_SALE,
            talent_id=self._talent_id(talent_name),
        )
        return self.gateway.create_sale(sale)

    # --- Posts ---

    def submit_post(
        self,
        date: str,
        talent_name: str,
        account_name: str,
        platform: Union[Platform, str],
        link: str,
        product_id: Optional[str] = None,
    ) -> bool:
        _require(date=date, talent_name=talent_name, account_name=account_name, link=link)
        product = self.cache.find_product(product_id)
        post = PostRecord(
            date=date,
            talent_name=talent_name,
            account_name=account_name,
            platform=Platform.parse(platform),
            link=link.strip(),
            product_id=product_id or None,
            product_name=product.name if product else UNKNOWN_PRODUCT_POST,
            talent_id=self._talent_id(talent_name),
        )
        return self.gateway.create_post(post)

    # --- Products ---

    def save_product(
        self,
        name: str,
        url: Optional[str] = None,
        talent_name: Optional[str] = None,
        account_name: Optional[str] = None,
        product_id: Optional[str] = None,
        expected_version: Optional[int] = None,
    ) -> bool:
        """Creates a product, or updates it when ``product_id`` is given."""
        _require(name=name)
        product = ProductRecord(
            id=product_id,
            name=name.strip(),
            url=url or None,
            talent_name=talent_name or None,
            account_name=account_name or None,
            talent_id=self._talent_id(talent_name),
        )
        if product_id:
            # created_at and version are kept by the stored record itself
            existing = self.cache.find_product(product_id)
            if existing is not None:
                product.version = existing.version
            ok = self.gateway.update_product(product, expected_version=expected_version)
        else:
            ok = self.gateway.create_product(product)
        if ok:
            self.cache.refresh()
        return ok

    # --- Talents ---

    def save_talent(
        self, name: str, accounts: list[str], talent_id: Optional[str] = None
    ) -> bool:
        """Creates a talent, or replaces name and accounts of an existing one."""
        _require(name=name)
        cleaned = [a.strip() for a in accounts if a and a.strip()]
        talent = TalentReference(id=talent_id, name=name.strip(), accounts=cleaned)
        if talent_id:
            ok = self.gateway.update_talent(talent)
        else:
            ok = self.gateway.create_talent(talent)
        if ok:
            self.cache.refresh()
        return ok
