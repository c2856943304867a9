"""Base service class for domain services."""


class Service:
    """Base class for all domain services.

    Domain services hold the like-counter rules that span the atomic store
    and the durable store.
    """

    pass
