"""
Pydantic Models - Inventory API payloads

Schemas for what the inventory/catalog service returns. Parsing the
raw JSON through them is what turns a malformed response into a
TransportError instead of a half-filled product.
"""

from decimal import Decimal
from typing import Union

from pydantic import BaseModel, ConfigDict, Field

from rocketcart.money import MAX_PRICE

ProductId = Union[int, str]


class StockRecord(BaseModel):
    """Available quantity of a product (GET /stock/{id})."""
    model_config = ConfigDict(frozen=True)

    id: ProductId
    amount: int = Field(ge=0)


class CatalogProduct(BaseModel):
    """Catalog entry of a product (GET /products/{id}), without cart amount."""
    model_config = ConfigDict(frozen=True, extra="ignore")

    id: ProductId
    title: str = ""
    price: Decimal = Field(default=Decimal("0"), ge=0, le=MAX_PRICE)
    image: str = ""
