from bms.models.records import (
    DateRange,
    Platform,
    PostRecord,
    ProductRecord,
    SaleKind,
    SaleRecord,
    TalentReference,
)

__all__ = [
    "DateRange",
    "Platform",
    "PostRecord",
    "ProductRecord",
    "SaleKind",
    "SaleRecord",
    "TalentReference",
]
