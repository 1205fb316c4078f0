"""Cart models: immutable products and snapshots."""
from dataclasses import dataclass, field, replace
from decimal import Decimal
from typing import Iterator, Optional, Tuple

from rocketcart.errors import ErrorKind
from rocketcart.models import CatalogProduct, ProductId
from rocketcart.money import MAX_PRICE, add, format_money, multiply, round_money, to_decimal, to_float

# Upper bound for a stored amount
MAX_AMOUNT = 1_000_000


@dataclass(frozen=True)
class Product:
    """Catalog item plus the quantity held in the cart."""
    id: ProductId
    title: str
    price: Decimal
    image: str
    amount: int

    def __post_init__(self):
        object.__setattr__(self, "price", to_decimal(self.price))

    @property
    def subtotal(self) -> Decimal:
        """Price for all units of this entry."""
        return round_money(multiply(self.price, self.amount))

    def with_amount(self, amount: int) -> "Product":
        return replace(self, amount=amount)

    @classmethod
    def from_catalog(cls, product: CatalogProduct, amount: int = 1, product_id: Optional[ProductId] = None) -> "Product":
        """Build a cart entry; product_id keeps the id the cart was asked for."""
        return cls(
            id=product.id if product_id is None else product_id,
            title=product.title,
            price=product.price,
            image=product.image,
            amount=amount,
        )

    def to_dict(self) -> dict:
        """Convert to dictionary (price as string to keep precision)."""
        return {
            "id": self.id,
            "title": self.title,
            "price": str(self.price),
            "image": self.image,
            "amount": self.amount,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Product":
        """
        Create from a stored dictionary.

        Raises:
            KeyError: id or amount missing
            ValueError: amount is not an integer in 1..MAX_AMOUNT, or price is not a
                finite value between 0 and MAX_PRICE
            TypeError: data is not a mapping
        """
        amount = data["amount"]
        if isinstance(amount, bool) or not isinstance(amount, int):
            raise ValueError(f"amount must be an integer, got {amount!r}")
        if not 1 <= amount <= MAX_AMOUNT:
            raise ValueError(f"amount must be between 1 and {MAX_AMOUNT}, got {amount}")
        price = to_decimal(data.get("price"))
        if not price.is_finite() or not 0 <= price <= MAX_PRICE:
            raise ValueError(f"price out of range: {price}")
        return cls(
            id=data["id"],
            title=str(data.get("title", "")),
            price=price,
            image=str(data.get("image", "")),
            amount=amount,
        )


@dataclass(frozen=True)
class CartSnapshot:
    """
    Immutable, ordered view of the cart.

    Every mutation builds a new snapshot, so a snapshot handed out to
    a reader never changes underneath it.
    """
    items: Tuple[Product, ...] = ()

    def __iter__(self) -> Iterator[Product]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    @property
    def size(self) -> int:
        """Number of distinct products."""
        return len(self.items)

    @property
    def total_items(self) -> int:
        """Total number of units."""
        return sum(item.amount for item in self.items)

    @property
    def total(self) -> Decimal:
        result = Decimal("0")
        for item in self.items:
            result = add(result, item.subtotal)
        return round_money(result)

    def find(self, product_id: ProductId) -> Optional[Product]:
        return next((item for item in self.items if item.id == product_id), None)

    def contains(self, product_id: ProductId) -> bool:
        return self.find(product_id) is not None

    def with_product(self, product: Product) -> "CartSnapshot":
        """Append a product that is not in the cart yet."""
        if self.contains(product.id):
            raise ValueError(f"product {product.id!r} already in cart")
        return CartSnapshot(self.items + (product,))

    def with_amount(self, product_id: ProductId, amount: int) -> "CartSnapshot":
        """Replace the amount of one entry, keeping its position."""
        if not self.contains(product_id):
            raise KeyError(product_id)
        return CartSnapshot(tuple(
            item.with_amount(amount) if item.id == product_id else item
            for item in self.items
        ))

    def without(self, product_id: ProductId) -> "CartSnapshot":
        """Drop one entry, keeping the others in order."""
        if not self.contains(product_id):
            raise KeyError(product_id)
        return CartSnapshot(tuple(item for item in self.items if item.id != product_id))

    def to_list(self) -> list:
        return [item.to_dict() for item in self.items]

    @classmethod
    def from_list(cls, data: list) -> "CartSnapshot":
        """
        Create from a stored list of products.

        Raises:
            TypeError: data is not a list
            ValueError: an entry is invalid or ids repeat
            KeyError: an entry misses a required field
        """
        if not isinstance(data, list):
            raise TypeError(f"cart must be a list, got {type(data).__name__}")
        items = tuple(Product.from_dict(entry) for entry in data)
        ids = [item.id for item in items]
        if len(ids) != len(set(ids)):
            raise ValueError("duplicate product ids in cart")
        return cls(items)

    def summary(self) -> dict:
        """Plain summary for display layers."""
        return {
            "is_empty": not self.items,
            "size": self.size,
            "total_items": self.total_items,
            "items": [
                {
                    "id": item.id,
                    "title": item.title,
                    "amount": item.amount,
                    "price": to_float(item.price),
                    "subtotal": to_float(item.subtotal),
                }
                for item in self.items
            ],
            "total": to_float(self.total),
            "total_display": format_money(self.total),
        }


@dataclass(frozen=True)
class UpdateRequest:
    """Argument of update_product_amount."""
    product_id: ProductId
    amount: int


@dataclass(frozen=True)
class OperationResult:
    """
    Outcome of a cart operation.

    Failures are still reported to the shopper through the notification
    sink; this value lets code and tests see which failure it was.
    """
    operation: str
    product_id: ProductId
    snapshot: CartSnapshot
    error_kind: Optional[ErrorKind] = None
    message: Optional[str] = None
    notified: Optional[str] = field(default=None, compare=False)

    @property
    def ok(self) -> bool:
        return self.error_kind is None
