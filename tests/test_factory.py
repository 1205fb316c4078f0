"""Tests for create_cart_controller"""
from unittest.mock import AsyncMock

import pytest

from rocketcart.cart import CartController, MemoryCartStore, RedisCartStore, create_cart_controller
from rocketcart.services import InventoryClient, LogNotificationSink, TelegramNotificationSink
from rocketcart.services import notifications as notifications_module
from rocketcart import db as db_module


@pytest.mark.asyncio
async def test_defaults_without_redis_or_telegram():
    """Test the local fallbacks when nothing is configured"""
    async with await create_cart_controller() as controller:
        assert isinstance(controller, CartController)
        assert isinstance(controller.inventory, InventoryClient)
        assert isinstance(controller.store, MemoryCartStore)
        assert isinstance(controller.notifier, LogNotificationSink)
        assert len(controller.cart) == 0


@pytest.mark.asyncio
async def test_aclose_closes_created_inventory_client():
    """Test that the inventory client built by the factory is closed"""
    controller = await create_cart_controller()
    http_client = controller.inventory._client

    await controller.aclose()

    assert http_client.is_closed
    # A second close is a no-op
    await controller.aclose()


@pytest.mark.asyncio
async def test_aclose_leaves_injected_collaborators_open(inventory):
    inventory.aclose = AsyncMock()
    controller = await create_cart_controller(inventory=inventory)

    await controller.aclose()

    inventory.aclose.assert_not_awaited()


@pytest.mark.asyncio
async def test_configured_collaborators(monkeypatch, inventory):
    """Test Redis and Telegram are picked up when configured"""
    monkeypatch.setattr(db_module, "redis_configured", lambda: True)
    monkeypatch.setattr(notifications_module, "telegram_configured", lambda: True)

    class _Redis:
        async def get(self, key):
            return None

    monkeypatch.setattr(RedisCartStore, "redis", property(lambda self: _Redis()))

    controller = await create_cart_controller(inventory=inventory)

    assert controller.inventory is inventory
    assert isinstance(controller.store, RedisCartStore)
    assert isinstance(controller.notifier, TelegramNotificationSink)


@pytest.mark.asyncio
async def test_lazy_package_exports():
    import rocketcart

    assert rocketcart.CartController is CartController
    with pytest.raises(AttributeError):
        rocketcart.missing_name
