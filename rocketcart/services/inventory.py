"""
Inventory Service Client

Read-only access to the storefront's stock and catalog endpoints:
- GET {base}/stock/{id}     -> StockRecord
- GET {base}/products/{id}  -> CatalogProduct

404 becomes NotFoundError; any other failure (status, network,
timeout, malformed payload) becomes TransportError.
"""

import os
from typing import Protocol, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from rocketcart.errors import NotFoundError, TransportError
from rocketcart.logging import get_logger, sanitize_id_for_logging
from rocketcart.models import CatalogProduct, ProductId, StockRecord

logger = get_logger(__name__)

INVENTORY_API_URL = os.environ.get("INVENTORY_API_URL", "http://localhost:3333")
INVENTORY_TIMEOUT = float(os.environ.get("INVENTORY_TIMEOUT", "10"))

# Connection-level failures only; HTTP errors are answers, not retried
RETRY_ATTEMPTS = 3

T = TypeVar("T", bound=BaseModel)


class InventoryService(Protocol):
    """What the cart needs from inventory."""

    async def get_stock(self, product_id: ProductId) -> StockRecord: ...

    async def get_product(self, product_id: ProductId) -> CatalogProduct: ...


class InventoryClient:
    """httpx client for the inventory REST API."""

    def __init__(
        self,
        base_url: str = INVENTORY_API_URL,
        timeout: float = INVENTORY_TIMEOUT,
        client: httpx.AsyncClient | None = None,
        retry_wait: float = 0.5,
    ):
        self.base_url = base_url.rstrip("/")
        self._client = client or httpx.AsyncClient(base_url=self.base_url, timeout=timeout)
        self._retry_wait = retry_wait

    async def __aenter__(self) -> "InventoryClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, path: str) -> httpx.Response:
        retrying = AsyncRetrying(
            stop=stop_after_attempt(RETRY_ATTEMPTS),
            wait=wait_exponential(multiplier=self._retry_wait, max=5),
            retry=retry_if_exception_type(httpx.TransportError),
            reraise=True,
        )
        async for attempt in retrying:
            with attempt:
                return await self._client.get(path)
        raise TransportError(f"No response for {path}")

    async def _get(self, path: str, model: Type[T], product_id: ProductId) -> T:
        safe_id = sanitize_id_for_logging(product_id)
        try:
            response = await self._request(path)
        except httpx.TimeoutException as e:
            logger.warning(f"Inventory timeout for {path.split('/')[0]} {safe_id}")
            raise TransportError(f"Timeout querying {path}", product_id) from e
        except httpx.HTTPError as e:
            logger.warning(f"Inventory unreachable for {path.split('/')[0]} {safe_id}: {e}")
            raise TransportError(f"Connection error querying {path}: {e}", product_id) from e

        if response.status_code == 404:
            raise NotFoundError(product_id=product_id)
        if response.status_code != 200:
            logger.warning(f"Inventory error for {safe_id}: status={response.status_code}")
            raise TransportError(f"HTTP {response.status_code} querying {path}", product_id)

        try:
            return model.model_validate_json(response.content)
        except ValidationError as e:
            logger.warning(f"Malformed inventory payload for {safe_id}: {e.error_count()} errors")
            raise TransportError(f"Malformed payload from {path}", product_id) from e

    async def get_stock(self, product_id: ProductId) -> StockRecord:
        return await self._get(f"stock/{product_id}", StockRecord, product_id)

    async def get_product(self, product_id: ProductId) -> CatalogProduct:
        return await self._get(f"products/{product_id}", CatalogProduct, product_id)
