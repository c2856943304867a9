"""Infrastructure layer errors."""


class AdapterError(Exception):
    """Base infrastructure error."""

    pass


class CounterStoreError(AdapterError):
    """Atomic counter store error."""

    pass


class CounterStoreUnavailableError(CounterStoreError):
    """The counter store could not be reached or timed out.

    Raised before or instead of any partial write; callers may assume the
    store is unchanged by the failed operation.
    """

    def __init__(self, operation: str, reason: str):
        self.operation = operation
        self.reason = reason
        super().__init__(f"Counter store unavailable during {operation}: {reason}")
