# storefront/domain/errors.py
"""
Typed errors raised by the store and the services.
Mapping to HTTP status codes happens in the routers.
"""


class StoreError(Exception):
    pass


class NotFoundError(StoreError):
    def __init__(self, entity: str, entity_id):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} {entity_id} not found")


class ValidationConflictError(StoreError):
    """Duplicate value for a unique key."""


class InvalidStateError(StoreError):
    pass


class EmptyCartError(InvalidStateError):
    def __init__(self, cart_id: int):
        self.cart_id = cart_id
        super().__init__(f"Cart {cart_id} has no items")


class ForbiddenError(StoreError):
    pass


class LockConflictError(StoreError):
    """Another checkout holds the cart or one of its products."""
