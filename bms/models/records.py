"""Record models for sales, posts, products and talent references."""

from __future__ import annotations

import time
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Optional

UNNAMED_TALENT = "Unnamed Talent"


def _now_ms() -> int:
    return int(time.time() * 1000)


class SaleKind(str, Enum):
    GENERAL = "general"
    PRODUCT_LINKED = "content"

    @classmethod
    def parse(cls, value: Any) -> "SaleKind":
        # Anything that is not an explicit general report carries revenue.
        if value == cls.GENERAL.value:
            return cls.GENERAL
        return cls.PRODUCT_LINKED


class Platform(str, Enum):
    TIKTOK = "TikTok"
    INSTAGRAM = "Instagram"
    SHOPEE = "Shopee"
    YOUTUBE = "YouTube"
    OTHER = "Other"

    @classmethod
    def parse(cls, value: Any) -> "Platform":
        for platform in cls:
            if value == platform.value:
                return platform
        return cls.OTHER


def _number(value: Any) -> float:
    if isinstance(value, bool) or value is None:
        return 0
    if isinstance(value, (int, float)):
        return value
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return 0
    return int(parsed) if parsed.is_integer() else parsed


def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value)
    return text or None


def _compact(data: dict) -> dict:
    return {k: v for k, v in data.items() if v is not None}


@dataclass(frozen=True)
class DateRange:
    """Inclusive range of ISO ``YYYY-MM-DD`` days."""

    start: str
    end: str

    def contains(self, day: Optional[str]) -> bool:
        if not day:
            return False
        return self.start <= day <= self.end


@dataclass
class SaleRecord:
    date: str
    talent_name: str
    account_name: str
    kind: SaleKind = SaleKind.GENERAL
    gmv: float = 0
    revenue: float = 0
    commission: float = 0
    quantity: int = 0
    product_id: Optional[str] = None
    product_name: Optional[str] = None
    linked_post_id: Optional[str] = None
    product_views: int = 0
    product_clicks: int = 0
    talent_id: Optional[str] = None
    id: Optional[str] = None
    created_at: int = field(default_factory=_now_ms)

    @property
    def value(self) -> float:
        """GMV for general reports, attributed revenue for product sales."""
        if self.kind is SaleKind.GENERAL:
            return self.gmv or 0
        return self.revenue or 0

    @classmethod
    def from_item(cls, item: dict) -> "SaleRecord":
        return cls(
            id=_text(item.get("id")),
            date=str(item.get("date") or ""),
            talent_name=str(item.get("talent_name") or ""),
            account_name=str(item.get("account_name") or ""),
            kind=SaleKind.parse(item.get("type")),
            gmv=_number(item.get("gmv")),
            revenue=_number(item.get("revenue")),
            commission=_number(item.get("commission")),
            quantity=_number(item.get("quantity")),
            product_id=_text(item.get("product_id")),
            product_name=_text(item.get("product_name")),
            linked_post_id=_text(item.get("linked_post_id")),
            product_views=_number(item.get("product_views")),
            product_clicks=_number(item.get("product_clicks")),
            talent_id=_text(item.get("talent_id")),
            created_at=_number(item.get("created_at")),
        )

    def to_item(self) -> dict:
        data = asdict(self)
        data["type"] = self.kind.value
        del data["kind"]
        return _compact(data)


@dataclass
class PostRecord:
    date: str
    talent_name: str
    account_name: str
    platform: Platform
    link: str
    product_id: Optional[str] = None
    product_name: Optional[str] = None
    views: Optional[int] = None
    likes: Optional[int] = None
    talent_id: Optional[str] = None
    id: Optional[str] = None
    created_at: int = field(default_factory=_now_ms)

    @classmethod
    def from_item(cls, item: dict) -> "PostRecord":
        views = item.get("views")
        likes = item.get("likes")
        return cls(
            id=_text(item.get("id")),
            date=str(item.get("date") or ""),
            talent_name=str(item.get("talent_name") or ""),
            account_name=str(item.get("account_name") or ""),
            platform=Platform.parse(item.get("platform")),
            link=str(item.get("link") or ""),
            product_id=_text(item.get("product_id")),
            product_name=_text(item.get("product_name")),
            views=None if views is None else _number(views),
            likes=None if likes is None else _number(likes),
            talent_id=_text(item.get("talent_id")),
            created_at=_number(item.get("created_at")),
        )

    def to_item(self) -> dict:
        data = asdict(self)
        data["platform"] = self.platform.value
        return _compact(data)


@dataclass
class ProductRecord:
    name: str
    url: Optional[str] = None
    talent_name: Optional[str] = None
    account_name: Optional[str] = None
    talent_id: Optional[str] = None
    version: int = 0
    id: Optional[str] = None
    created_at: int = field(default_factory=_now_ms)

    @property
    def is_global(self) -> bool:
        return not self.account_name

    @classmethod
    def from_item(cls, item: dict) -> "ProductRecord":
        return cls(
            id=_text(item.get("id")),
            name=str(item.get("name") or ""),
            url=_text(item.get("url")),
            talent_name=_text(item.get("talent_name")),
            account_name=_text(item.get("account_name")),
            talent_id=_text(item.get("talent_id")),
            version=_number(item.get("version")),
            created_at=_number(item.get("created_at")),
        )

    def to_item(self) -> dict:
        return _compact(asdict(self))


@dataclass
class TalentReference:
    name: str
    accounts: list[str] = field(default_factory=list)
    id: Optional[str] = None

    @classmethod
    def from_item(cls, item: dict) -> "TalentReference":
        # Consumers index into accounts, so it is always a list.
        accounts = item.get("accounts")
        if not isinstance(accounts, list):
            accounts = []
        return cls(
            id=_text(item.get("id")),
            name=str(item.get("name") or UNNAMED_TALENT),
            accounts=[str(a) for a in accounts],
        )

    def to_item(self) -> dict:
        return _compact(asdict(self))
