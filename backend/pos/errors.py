# backend/pos/errors.py
"""Exceptions raised by the point-of-sale core.

Routes translate them into HTTP responses; nothing in ``pos`` knows about
HTTP.
"""


class PosError(Exception):
    """Base class for all point-of-sale errors."""


class EmptyCartError(PosError):
    """Checkout was requested for a cart without items."""


class CheckoutStateError(PosError):
    """An operation is not allowed in the session's current checkout state."""

    def __init__(self, operation: str, state) -> None:
        self.operation = operation
        self.state = state
        super().__init__(f"Cannot {operation} while checkout is {state.value}")


class CheckoutAbortedError(PosError):
    """An in-flight checkout was abandoned before it completed."""


class InvoiceServiceError(PosError):
    """The external invoice provider did not return an invoice number."""


class MarketplaceSyncError(PosError):
    """The marketplace rejected or failed an inventory sync."""
