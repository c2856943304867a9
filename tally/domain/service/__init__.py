"""Domain services."""

from .base import Service
from .counter_service import CounterService
from .merge_service import MergeService
from .sync_service import DurableSyncScope, DurableSyncService

__all__ = [
    "CounterService",
    "DurableSyncScope",
    "DurableSyncService",
    "MergeService",
    "Service",
]
