"""
Storefront Client - Async REST client for the storefront backends.

Features:
- Product listing, featured, bestsellers, categories and search
- Cart/wishlist membership ids (bearer token)
- Retries on transport errors via tenacity
- Failures surface as RemoteUnavailableError
"""

from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import ValidationError
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from shopsearch.config.errors import RemoteUnavailableError
from shopsearch.domains.search.models import Category, Product

logger = logging.getLogger(__name__)

__all__ = ["StorefrontClient"]


def _item_id(item: Any) -> str | None:
    if isinstance(item, dict):
        raw = item.get("_id", item.get("id"))
        return str(raw) if raw is not None else None
    if item is None:
        return None
    return str(item)


class StorefrontClient:
    """
    Storefront backend client.

    Implements CatalogSource, RemoteSearch and MembershipProvider.

    Example:
        >>> client = StorefrontClient("http://localhost:3001/api/v1")
        >>> products = await client.search("sneakers")
    """

    def __init__(
        self,
        base_url: str = "http://localhost:3001/api/v1",
        account_base_url: str = "http://localhost:5001/api",
        auth_token: str | None = None,
        timeout: float = 10.0,
        retry_attempts: int = 3,
        featured_limit: int = 8,
        bestseller_limit: int = 8,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize storefront client.

        Args:
            base_url: Product/category API root
            account_base_url: Cart/wishlist API root
            auth_token: Bearer token for cart/wishlist
            timeout: Request timeout in seconds
            retry_attempts: Attempts per request on transport errors
            featured_limit: Featured products requested for the trending pool
            bestseller_limit: Bestsellers requested for the trending pool
            transport: Optional httpx transport (tests)
        """
        self.base_url = base_url.rstrip("/")
        self.account_base_url = account_base_url.rstrip("/")
        self.auth_token = auth_token
        self.timeout = timeout
        self.retry_attempts = retry_attempts
        self.featured_limit = featured_limit
        self.bestseller_limit = bestseller_limit
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                headers={"Content-Type": "application/json"},
                transport=self._transport,
            )
        return self._client

    async def _get_json(
        self,
        url: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """GET ``url`` and decode JSON, retrying transport errors."""
        client = await self._get_client()
        try:
            async for attempt in AsyncRetrying(
                retry=retry_if_exception_type(httpx.TransportError),
                stop=stop_after_attempt(self.retry_attempts),
                wait=wait_exponential(multiplier=0.1, max=2),
                reraise=True,
            ):
                with attempt:
                    response = await client.get(url, params=params, headers=headers)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            raise RemoteUnavailableError(
                f"Storefront returned {e.response.status_code} for {url}",
                {"status": e.response.status_code, "url": url},
            ) from e
        except (httpx.HTTPError, ValueError) as e:
            raise RemoteUnavailableError(
                f"Storefront request failed for {url}: {e}",
                {"url": url},
            ) from e

    async def _get_products(self, path: str, params: dict[str, Any] | None = None) -> list[Product]:
        body = await self._get_json(f"{self.base_url}{path}", params=params)
        return self._parse_products(self._data(body))

    @staticmethod
    def _data(body: Any) -> Any:
        """Unwrap the ``{"success": ..., "data": ...}`` envelope."""
        if isinstance(body, dict):
            return body.get("data") or []
        return body or []

    @staticmethod
    def _parse_products(items: Any) -> list[Product]:
        products: list[Product] = []
        for item in items if isinstance(items, list) else []:
            try:
                products.append(Product.model_validate(item))
            except ValidationError as e:
                logger.warning("Skipping malformed product: %s", e.errors()[0].get("msg"))
        return products

    # --- CatalogSource ---

    async def fetch_all_products(self) -> list[Product]:
        """Bulk product snapshot."""
        return await self._get_products("/products")

    async def fetch_product(self, product_id: str) -> Product | None:
        """Per-id lookup."""
        body = await self._get_json(f"{self.base_url}/products/{product_id}")
        data = body.get("data") if isinstance(body, dict) else None
        if not data:
            return None
        return Product.model_validate(data)

    async def fetch_featured_products(self) -> list[Product]:
        return await self._get_products("/products/featured", {"limit": self.featured_limit})

    async def fetch_bestseller_products(self) -> list[Product]:
        return await self._get_products(
            "/products", {"bestseller": "true", "limit": self.bestseller_limit}
        )

    async def fetch_categories(self) -> list[Category]:
        body = await self._get_json(f"{self.base_url}/categories")
        categories: list[Category] = []
        for item in self._data(body):
            try:
                categories.append(Category.model_validate(item))
            except ValidationError:
                logger.warning("Skipping malformed category: %r", item)
        return categories

    # --- RemoteSearch ---

    async def search(self, text: str) -> list[Product]:
        """Backend search for raw query text."""
        products = await self._get_products("/products", {"search": text})
        logger.debug("Remote search: q=%r -> %d products", text, len(products))
        return products

    # --- MembershipProvider ---

    def _auth_headers(self) -> dict[str, str]:
        if not self.auth_token:
            return {}
        return {"Authorization": f"Bearer {self.auth_token}"}

    async def cart_ids(self) -> set[str]:
        """Product ids in the signed-in user's cart."""
        if not self.auth_token:
            return set()
        body = await self._get_json(f"{self.account_base_url}/cart", headers=self._auth_headers())
        cart = self._data(body)
        items = cart.get("items", []) if isinstance(cart, dict) else []
        ids = set()
        for item in items:
            product = item.get("product") if isinstance(item, dict) else None
            product_id = _item_id(product)
            if product_id:
                ids.add(product_id)
        return ids

    async def wishlist_ids(self) -> set[str]:
        """Product ids in the signed-in user's wishlist."""
        if not self.auth_token:
            return set()
        body = await self._get_json(
            f"{self.account_base_url}/wishlist", headers=self._auth_headers()
        )
        items = self._data(body)
        if isinstance(items, dict):
            items = items.get("products") or items.get("items") or []
        return {pid for pid in (_item_id(item) for item in items) if pid}

    async def close(self) -> None:
        """Close HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None
