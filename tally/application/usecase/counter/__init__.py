"""Counter maintenance use cases."""

from .initialize_counters import (
    InitializeCountersRequest,
    InitializeCountersResponse,
    InitializeCountersUseCase,
)
from .reconcile_counters import (
    ReconcileCountersRequest,
    ReconcileCountersResponse,
    ReconcileCountersUseCase,
)

__all__ = [
    "InitializeCountersRequest",
    "InitializeCountersResponse",
    "InitializeCountersUseCase",
    "ReconcileCountersRequest",
    "ReconcileCountersResponse",
    "ReconcileCountersUseCase",
]
