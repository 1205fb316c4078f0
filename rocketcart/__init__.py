"""
RocketCart

Client-side shopping cart for the RocketShoes storefront:
- cart: controller, immutable snapshots, persistence
- services: inventory client and notification sinks
- db: Upstash Redis client
- i18n: user-facing messages

Note: Imports are lazy so that importing a submodule does not pull in
the Redis and HTTP clients.
"""

__all__ = [
    "CartController",
    "UpdateRequest",
    "create_cart_controller",
]


def __getattr__(name):
    """Lazy attribute access."""
    if name in __all__:
        from rocketcart import cart
        return getattr(cart, name)
    raise AttributeError(f"module 'rocketcart' has no attribute '{name}'")
