"""Cart controller: the single authority over cart contents."""
import asyncio
from typing import Awaitable, Callable, Optional, Sequence

from rocketcart.errors import (
    ERROR_PRODUCT_NOT_IN_CART,
    CartError,
    ErrorKind,
    InvalidAmountError,
    NotFoundError,
    OutOfStockError,
    TransportError,
)
from rocketcart.i18n import get_text
from rocketcart.logging import get_logger, sanitize_id_for_logging
from rocketcart.models import ProductId, StockRecord
from rocketcart.services.inventory import InventoryService
from rocketcart.services.notifications import NotificationSink

from .models import CartSnapshot, OperationResult, Product, UpdateRequest
from .storage import CART_STORAGE_KEY, PersistenceStore, load_snapshot, save_snapshot

logger = get_logger(__name__)

OP_ADD = "add"
OP_REMOVE = "remove"
OP_UPDATE = "update"


def _message_key(operation: str, kind: ErrorKind) -> str:
    """Pick one of the five user-facing messages."""
    if kind is ErrorKind.OUT_OF_STOCK:
        return "cart.out_of_stock"
    if kind is ErrorKind.INVALID_AMOUNT:
        return "cart.invalid_amount"
    return f"cart.{operation}_failed"


class CartController:
    """
    Owns the shopper's cart.

    - Mutations only through add_product, remove_product and
      update_product_amount; reads through the `cart` snapshot
    - Operations are serialized by a per-controller lock, so each one
      sees a consistent cart across its inventory queries
    - Every successful mutation overwrites the persisted snapshot
    - Failures never raise: the shopper gets a notification and the
      caller gets an OperationResult carrying the error kind
    """

    def __init__(
        self,
        inventory: InventoryService,
        store: PersistenceStore,
        notifier: NotificationSink,
        snapshot: Optional[CartSnapshot] = None,
        storage_key: str = CART_STORAGE_KEY,
        language: Optional[str] = None,
        owns: Sequence = (),
    ):
        self.inventory = inventory
        self.store = store
        self.notifier = notifier
        self.storage_key = storage_key
        self.language = language
        self._cart = snapshot or CartSnapshot()
        self._lock = asyncio.Lock()
        self.last_result: Optional[OperationResult] = None
        # Collaborators closed by aclose()
        self._owned = tuple(owns)

    @classmethod
    async def load(
        cls,
        inventory: InventoryService,
        store: PersistenceStore,
        notifier: NotificationSink,
        storage_key: str = CART_STORAGE_KEY,
        language: Optional[str] = None,
        owns: Sequence = (),
    ) -> "CartController":
        """Create a controller seeded with the persisted cart (empty if none or malformed)."""
        snapshot = await load_snapshot(store, storage_key)
        logger.info(f"Cart loaded with {snapshot.size} products")
        return cls(inventory, store, notifier, snapshot, storage_key, language, owns)

    @property
    def cart(self) -> CartSnapshot:
        return self._cart

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------

    async def add_product(self, product_id: ProductId) -> OperationResult:
        """Add one unit of a product, appending it if not in the cart yet."""
        return await self._run(OP_ADD, product_id, lambda: self._add(product_id))

    async def remove_product(self, product_id: ProductId) -> OperationResult:
        return await self._run(OP_REMOVE, product_id, lambda: self._remove(product_id))

    async def update_product_amount(self, request: UpdateRequest) -> OperationResult:
        """Set the amount of a product already in the cart, within available stock."""
        return await self._run(
            OP_UPDATE, request.product_id, lambda: self._update(request.product_id, request.amount)
        )

    async def aclose(self) -> None:
        """Close the collaborators this controller was given ownership of."""
        owned, self._owned = self._owned, ()
        for resource in owned:
            try:
                await resource.aclose()
            except Exception:
                logger.exception(f"Failed to close {type(resource).__name__}")

    async def __aenter__(self) -> "CartController":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def _run(self, operation: str, product_id: ProductId, step: Callable[[], Awaitable[None]]) -> OperationResult:
        # The sink is called after the lock is released
        async with self._lock:
            try:
                await step()
            except CartError as e:
                result = self._fail(operation, product_id, e)
            except Exception as e:
                logger.exception(f"Unexpected error during cart {operation}")
                result = self._fail(operation, product_id, TransportError(str(e), product_id))
            else:
                result = self._succeed(operation, product_id)

        if result.notified is not None:
            await self._notify(result.notified)
        return result

    # ------------------------------------------------------------------
    # Steps (called with the lock held)
    # ------------------------------------------------------------------

    async def _remove(self, product_id: ProductId) -> None:
        if not self._cart.contains(product_id):
            raise NotFoundError(ERROR_PRODUCT_NOT_IN_CART, product_id)
        await self._commit(self._cart.without(product_id))

    async def _add(self, product_id: ProductId) -> None:
        # A stock record proves the product exists, even with amount 0
        try:
            stock = await self.inventory.get_stock(product_id)
        except Exception as e:
            raise NotFoundError(product_id=product_id) from e
        if stock is None:
            raise NotFoundError(product_id=product_id)

        existing = self._cart.find(product_id)
        if existing is not None:
            await self._update(product_id, existing.amount + 1, stock)
            return

        if stock.amount < 1:
            raise OutOfStockError(product_id=product_id)

        try:
            details = await self.inventory.get_product(product_id)
        except CartError:
            raise
        except Exception as e:
            raise TransportError(str(e), product_id) from e

        await self._commit(self._cart.with_product(Product.from_catalog(details, amount=1, product_id=product_id)))

    async def _update(self, product_id: ProductId, amount: int, stock: Optional[StockRecord] = None) -> None:
        if amount < 1:
            raise InvalidAmountError(product_id=product_id)
        if not self._cart.contains(product_id):
            raise NotFoundError(ERROR_PRODUCT_NOT_IN_CART, product_id)

        if stock is None:
            stock = await self._query_stock(product_id)
        if amount > stock.amount:
            raise OutOfStockError(product_id=product_id)

        await self._commit(self._cart.with_amount(product_id, amount))

    async def _query_stock(self, product_id: ProductId) -> StockRecord:
        try:
            stock = await self.inventory.get_stock(product_id)
        except CartError:
            raise
        except Exception as e:
            raise TransportError(str(e), product_id) from e
        if stock is None:
            raise TransportError(f"Empty stock record for {product_id}", product_id)
        return stock

    async def _commit(self, snapshot: CartSnapshot) -> None:
        self._cart = snapshot
        await save_snapshot(self.store, snapshot, self.storage_key)

    # ------------------------------------------------------------------
    # Outcomes
    # ------------------------------------------------------------------

    def _succeed(self, operation: str, product_id: ProductId) -> OperationResult:
        logger.info(f"Cart {operation} ok for product {sanitize_id_for_logging(product_id)}")
        self.last_result = OperationResult(operation, product_id, self._cart)
        return self.last_result

    def _fail(self, operation: str, product_id: ProductId, error: CartError) -> OperationResult:
        logger.warning(
            f"Cart {operation} failed for product {sanitize_id_for_logging(product_id)}: "
            f"{error.kind.value} ({error})"
        )
        text = get_text(_message_key(operation, error.kind), self.language)
        self.last_result = OperationResult(
            operation, product_id, self._cart,
            error_kind=error.kind, message=str(error), notified=text,
        )
        return self.last_result

    async def _notify(self, text: str) -> None:
        try:
            await self.notifier.send(text)
        except Exception:
            logger.exception("Notification sink failed")


async def create_cart_controller(
    inventory: Optional[InventoryService] = None,
    store: Optional[PersistenceStore] = None,
    notifier: Optional[NotificationSink] = None,
    storage_key: str = CART_STORAGE_KEY,
    language: Optional[str] = None,
) -> CartController:
    """
    Build a controller, filling missing collaborators from the environment.

    Redis store when Upstash is configured, in-memory otherwise;
    Telegram sink when a bot token and chat id are set, log sink otherwise.
    The inventory client created here is closed by the controller's aclose().
    """
    from rocketcart.db import redis_configured
    from rocketcart.services.inventory import InventoryClient
    from rocketcart.services.notifications import (
        LogNotificationSink,
        TelegramNotificationSink,
        telegram_configured,
    )

    from .storage import MemoryCartStore, RedisCartStore

    owns = []
    if inventory is None:
        inventory = InventoryClient()
        owns.append(inventory)
    if store is None:
        store = RedisCartStore() if redis_configured() else MemoryCartStore()
    if notifier is None:
        notifier = TelegramNotificationSink() if telegram_configured() else LogNotificationSink()

    return await CartController.load(inventory, store, notifier, storage_key, language, owns)
