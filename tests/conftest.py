"""Pytest configuration and fixtures"""
import asyncio
import os
from typing import Dict, List
from unittest.mock import AsyncMock

import pytest

# Test environment: no Redis, no Telegram, Portuguese messages
os.environ.setdefault("INVENTORY_API_URL", "http://inventory.test")
os.environ.pop("UPSTASH_REDIS_REST_URL", None)
os.environ.pop("UPSTASH_REDIS_REST_TOKEN", None)
os.environ.pop("TELEGRAM_TOKEN", None)
os.environ.pop("TELEGRAM_CHAT_ID", None)
os.environ.pop("CART_LANGUAGE", None)

from rocketcart.cart import CartController, MemoryCartStore  # noqa: E402
from rocketcart.errors import NotFoundError  # noqa: E402
from rocketcart.models import CatalogProduct, StockRecord  # noqa: E402


class FakeInventory:
    """In-memory inventory; every query yields to the event loop."""

    def __init__(self, stock: Dict[int, int], catalog: Dict[int, dict]):
        self.stock = dict(stock)
        self.catalog = dict(catalog)
        self.stock_calls: List[int] = []
        self.product_calls: List[int] = []
        self.fail_with: Exception | None = None

    async def get_stock(self, product_id):
        self.stock_calls.append(product_id)
        await asyncio.sleep(0)
        if self.fail_with is not None:
            raise self.fail_with
        if product_id not in self.stock:
            raise NotFoundError(product_id=product_id)
        return StockRecord(id=product_id, amount=self.stock[product_id])

    async def get_product(self, product_id):
        self.product_calls.append(product_id)
        await asyncio.sleep(0)
        if product_id not in self.catalog:
            raise NotFoundError(product_id=product_id)
        return CatalogProduct(id=product_id, **self.catalog[product_id])


@pytest.fixture
def sample_catalog():
    """Catalog entries keyed by product id"""
    return {
        1: {"title": "Tênis de Caminhada Leve Confortável", "price": "179.90", "image": "https://cdn.test/1.jpg"},
        2: {"title": "Tênis VR Caminhada Confortável", "price": "139.90", "image": "https://cdn.test/2.jpg"},
        3: {"title": "Tênis Adidas Duramo Lite 2.0", "price": "219.90", "image": "https://cdn.test/3.jpg"},
        4: {"title": "Tênis Esgotado", "price": "99.00", "image": "https://cdn.test/4.jpg"},
    }


@pytest.fixture
def sample_stock():
    """Stock amounts keyed by product id"""
    return {1: 5, 2: 1, 3: 2, 4: 0}


@pytest.fixture
def inventory(sample_stock, sample_catalog):
    return FakeInventory(sample_stock, sample_catalog)


@pytest.fixture
def store():
    return MemoryCartStore()


@pytest.fixture
def notifier():
    """Notification sink mock"""
    sink = AsyncMock()
    sink.send = AsyncMock()
    return sink


@pytest.fixture
def controller(inventory, store, notifier):
    """Controller with an empty cart"""
    return CartController(inventory, store, notifier, language="pt")
