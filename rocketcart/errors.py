"""
Cart Errors

Error kinds raised inside the cart controller. They never leave an
operation: the controller turns them into an OperationResult and a
user-facing notification.
"""

from enum import Enum

# Log messages (user-facing text lives in locales/)
ERROR_PRODUCT_NOT_FOUND = "Product not found"
ERROR_PRODUCT_NOT_IN_CART = "Product not in cart"
ERROR_PRODUCT_OUT_OF_STOCK = "Requested amount out of stock"
ERROR_INVALID_AMOUNT = "Amount must be at least 1"
ERROR_INVENTORY_UNAVAILABLE = "Inventory service unavailable"


class ErrorKind(str, Enum):
    """Failure kinds an operation can end with."""
    NOT_FOUND = "not_found"
    OUT_OF_STOCK = "out_of_stock"
    INVALID_AMOUNT = "invalid_amount"
    TRANSPORT = "transport"


class CartError(Exception):
    """Base class for cart failures."""

    kind: ErrorKind = ErrorKind.TRANSPORT
    default_message = ERROR_INVENTORY_UNAVAILABLE

    def __init__(self, message: str | None = None, product_id=None):
        self.product_id = product_id
        super().__init__(message or self.default_message)


class NotFoundError(CartError):
    """Product missing from inventory (add) or from the cart (remove/update)."""

    kind = ErrorKind.NOT_FOUND
    default_message = ERROR_PRODUCT_NOT_FOUND


class OutOfStockError(CartError):
    kind = ErrorKind.OUT_OF_STOCK
    default_message = ERROR_PRODUCT_OUT_OF_STOCK


class InvalidAmountError(CartError):
    kind = ErrorKind.INVALID_AMOUNT
    default_message = ERROR_INVALID_AMOUNT


class TransportError(CartError):
    """Inventory query failed (network, decode, timeout)."""

    kind = ErrorKind.TRANSPORT
    default_message = ERROR_INVENTORY_UNAVAILABLE


__all__ = [
    "ERROR_PRODUCT_NOT_FOUND",
    "ERROR_PRODUCT_NOT_IN_CART",
    "ERROR_PRODUCT_OUT_OF_STOCK",
    "ERROR_INVALID_AMOUNT",
    "ERROR_INVENTORY_UNAVAILABLE",
    "ErrorKind",
    "CartError",
    "NotFoundError",
    "OutOfStockError",
    "InvalidAmountError",
    "TransportError",
]
