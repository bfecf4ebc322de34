"""Reference data cache - talents, their accounts and registered products."""

from __future__ import annotations

import logging
from typing import Any, Optional

from bms.models.records import ProductRecord, TalentReference

logger = logging.getLogger(__name__)


class ReferenceDataCache:
    """In-memory copy of talents and products, refreshed on demand."""

    def __init__(self, gateway: Any):
        self.gateway = gateway
        self._talents: list[TalentReference] = []
        self._products: list[ProductRecord] = []

    def refresh(self) -> None:
        self._talents = self.gateway.list_talents()
        self._products = self.gateway.list_products()
        logger.info(
            "Reference data refreshed: %d talents, %d products",
            len(self._talents),
            len(self._products),
        )

    @property
    def talents(self) -> list[TalentReference]:
        return list(self._talents)

    @property
    def products(self) -> list[ProductRecord]:
        return list(self._products)

    def find_talent(self, name: str) -> Optional[TalentReference]:
        for talent in self._talents:
            if talent.name == name:
                return talent
        return None

    def accounts_for(self, talent_name: str) -> list[str]:
        talent = self.find_talent(talent_name)
        return list(talent.accounts) if talent else []

    def products_for_account(self, account_name: Optional[str]) -> list[ProductRecord]:
        """Products owned by the account plus global (unowned) products."""
        if not account_name:
            return []
        return [
            p for p in self._products
            if p.account_name == account_name or p.is_global
        ]

    def find_product(self, product_id: Optional[str]) -> Optional[ProductRecord]:
        if not product_id:
            return None
        for product in self._products:
            if product.id == product_id:
                return product
        return None

    def talent_labels(self) -> dict[str, str]:
        """Talent id -> current display name."""
        return {t.id: t.name for t in self._talents if t.id}
