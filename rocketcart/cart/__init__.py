"""Cart package: models, storage, and controller."""
from rocketcart.errors import ErrorKind

from .models import CartSnapshot, OperationResult, Product, UpdateRequest
from .service import CartController, create_cart_controller
from .storage import MemoryCartStore, PersistenceStore, RedisCartStore

__all__ = [
    "CartController",
    "CartSnapshot",
    "ErrorKind",
    "MemoryCartStore",
    "OperationResult",
    "PersistenceStore",
    "Product",
    "RedisCartStore",
    "UpdateRequest",
    "create_cart_controller",
]
