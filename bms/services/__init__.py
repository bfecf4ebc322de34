from bms.services.dashboard import DashboardService, SyncStatus
from bms.services.record_entry import RecordEntryService
from bms.services.reference_cache import ReferenceDataCache

__all__ = [
    "DashboardService",
    "RecordEntryService",
    "ReferenceDataCache",
    "SyncStatus",
]
