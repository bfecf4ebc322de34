"""Seed definitions for sample data generation."""
from dataclasses import dataclass, field
from typing import List, Optional, Tuple


@dataclass
class TalentSeed:
    name: str
    accounts: List[str] = field(default_factory=list)


@dataclass
class ProductSeed:
    name: str
    price_range: Tuple[int, int]  # IDR per unit
    account_name: Optional[str] = None  # None = global product
    url: Optional[str] = None
