"""Query cost limiter for the Shopify Admin GraphQL API."""

import asyncio
import time
from typing import Any, Dict, Optional


class QueryCostLimiter:
    """
    Token bucket measured in GraphQL query cost points.

    Shopify restores a fixed number of cost points per second up to a
    maximum. The bucket is drained by an estimated cost before each
    request and corrected from the ``throttleStatus`` Shopify reports in
    the response extensions.
    """

    def __init__(self, bucket_size: float, restore_rate: float):
        """
        Initialize limiter.

        Args:
            bucket_size: Maximum available cost points
            restore_rate: Cost points restored per second
        """
        self.bucket_size = bucket_size
        self.restore_rate = restore_rate
        self.available = bucket_size
        self.last_update = time.monotonic()
        self._lock = asyncio.Lock()

    def _refill(self) -> None:
        now = time.monotonic()
        elapsed = now - self.last_update
        self.available = min(self.bucket_size, self.available + elapsed * self.restore_rate)
        self.last_update = now

    async def acquire(self, cost: float) -> None:
        """
        Reserve cost points, waiting until enough have been restored.

        Args:
            cost: Estimated cost of the next request
        """
        cost = min(cost, self.bucket_size)
        async with self._lock:
            while True:
                self._refill()
                if self.available >= cost:
                    self.available -= cost
                    return
                await asyncio.sleep((cost - self.available) / self.restore_rate)

    def update(self, extensions: Optional[Dict[str, Any]]) -> None:
        """
        Sync the bucket with the throttle status of a response.

        Args:
            extensions: ``extensions`` object of a GraphQL response
        """
        status = ((extensions or {}).get("cost") or {}).get("throttleStatus")
        if not status:
            return
        self.bucket_size = float(status.get("maximumAvailable", self.bucket_size))
        self.restore_rate = float(status.get("restoreRate", self.restore_rate))
        self.available = float(status.get("currentlyAvailable", self.available))
        self.last_update = time.monotonic()
