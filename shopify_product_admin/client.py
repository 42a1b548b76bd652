"""HTTP transport for the Shopify Admin GraphQL endpoint."""

import logging
from typing import Any, Dict, Optional

import httpx

from .config import AdminConfig
from .errors import CatalogCallError
from .rate_limiter import QueryCostLimiter

logger = logging.getLogger(__name__)


class ShopifyAdminClient:
    """
    Sends GraphQL documents to the Admin API of one shop.

    Only transport concerns live here: authentication, query cost
    limiting and turning HTTP or top-level GraphQL failures into
    ``CatalogCallError``. Mutation ``userErrors`` are left to the caller.
    """

    def __init__(self, config: AdminConfig, client: Optional[Any] = None):
        """
        Initialize the client.

        Args:
            config: Admin configuration
            client: Optional HTTP client (e.g., MockShopifyClient)
        """
        self.config = config
        self.limiter = QueryCostLimiter(
            bucket_size=config.rate_limit.bucket_size,
            restore_rate=config.rate_limit.restore_rate,
        )

        if client is not None:
            self.client = client
            self._owns_client = False
        else:
            self.client = httpx.AsyncClient(
                base_url=f"https://{config.shopify.shop_domain}",
                headers={
                    "X-Shopify-Access-Token": config.shopify.access_token,
                    "Content-Type": "application/json",
                },
                timeout=config.orchestrator.step_timeout_seconds,
            )
            self._owns_client = True

    async def close(self):
        """Close HTTP client."""
        if self._owns_client:
            await self.client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def execute(self, query: str, variables: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Run a GraphQL document and return its ``data`` object.

        Args:
            query: GraphQL query or mutation
            variables: GraphQL variables

        Returns:
            The ``data`` member of the response

        Raises:
            CatalogCallError: on HTTP failures, timeouts, unreadable bodies
                or top-level GraphQL errors
        """
        await self.limiter.acquire(self.config.rate_limit.request_cost)

        try:
            response = await self.client.request(
                "POST",
                self.config.shopify.graphql_path,
                json={"query": query, "variables": variables or {}},
            )
            response.raise_for_status()
        except httpx.TimeoutException as exc:
            logger.warning("shopify request timed out: %s", exc)
            raise CatalogCallError(transport_errors=[f"Request timed out: {exc}"], timed_out=True) from exc
        except httpx.HTTPStatusError as exc:
            logger.warning("shopify request failed status=%s", exc.response.status_code)
            raise CatalogCallError(
                transport_errors=[f"HTTP {exc.response.status_code} from Shopify Admin API"]
            ) from exc
        except httpx.RequestError as exc:
            logger.warning("shopify request error: %s", exc)
            raise CatalogCallError(transport_errors=[str(exc) or exc.__class__.__name__]) from exc

        try:
            body = response.json()
        except ValueError as exc:
            raise CatalogCallError(transport_errors=["Invalid JSON response from Shopify Admin API"]) from exc

        if not isinstance(body, dict):
            raise CatalogCallError(transport_errors=["Invalid JSON response from Shopify Admin API"])

        self.limiter.update(body.get("extensions"))

        errors = body.get("errors")
        if errors:
            if isinstance(errors, str):
                errors = [{"message": errors}]
            raise CatalogCallError(
                transport_errors=[e.get("message", "") if isinstance(e, dict) else str(e) for e in errors]
            )

        return body.get("data") or {}
