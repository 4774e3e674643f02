# storefront/domain/errors.py
"""
Domain errors. Each one subclasses the builtin the routers already map,
so `except ValueError` / `except RuntimeError` keeps working.
"""


class NotFoundError(ValueError):
    """Requested record does not exist."""


class CheckoutValidationError(ValueError):
    """Buyer input rejected before anything is written to the store."""


class OrderPlacementError(RuntimeError):
    """Order (or its items) could not be written; the cart is left intact."""


class CheckoutInProgressError(RuntimeError):
    """Another submission for the same buyer holds the checkout lock."""
