"""Create-or-update workflow for a single-variant, single-location product."""

import asyncio
import logging
from time import perf_counter
from typing import Awaitable, Callable, List, Optional, Sequence, TypeVar

from .catalog import BaseCatalog
from .config import OrchestratorConfig
from .errors import CatalogCallError, EmptyResultError, OrchestrationError, RemoteOperationError
from .models import (
    Location,
    OrchestrationErrorInfo,
    ProductDraft,
    ProductIdentity,
    ProductRecord,
    UpsertResult,
    VariantRecord,
    to_product_gid,
)
from .storage import IdempotencyStore
from .telemetry import get_step_duration_histogram

logger = logging.getLogger(__name__)

T = TypeVar("T")

STEP_UPSERT_PRODUCT = "upsert_product"
STEP_UPDATE_PRICE = "update_price"
STEP_RESOLVE_LOCATION = "resolve_location"
STEP_ENABLE_TRACKING = "enable_tracking"
STEP_SET_QUANTITY = "set_quantity"

STEPS = (
    STEP_UPSERT_PRODUCT,
    STEP_UPDATE_PRICE,
    STEP_RESOLVE_LOCATION,
    STEP_ENABLE_TRACKING,
    STEP_SET_QUANTITY,
)


def primary_variant(product: ProductRecord) -> VariantRecord:
    """
    The variant the workflow operates on: the first one Shopify returns.

    Raises:
        EmptyResultError: when the product has no variant or the variant
            has no inventory item
    """
    if not product.variants:
        raise EmptyResultError(STEP_UPSERT_PRODUCT, f"Product {product.id} has no variants")
    variant = product.variants[0]
    if not variant.inventory_item_id:
        raise EmptyResultError(STEP_UPSERT_PRODUCT, f"Variant {variant.id} has no inventory item")
    return variant


def default_location(locations: Sequence[Location]) -> Location:
    """
    The location inventory is set at: the first one Shopify lists.

    Raises:
        EmptyResultError: when the shop has no locations
    """
    if not locations:
        raise EmptyResultError(STEP_RESOLVE_LOCATION, "No locations available to stock inventory")
    return locations[0]


class ProductUpsertOrchestrator:
    """
    Runs the five dependent Admin API steps that create or update a product.

    Steps run one at a time and the first failure ends the run. Steps
    that already succeeded are not undone, and nothing is retried; the
    caller retries the whole operation. All failures are returned as
    data on the ``UpsertResult``.
    """

    def __init__(
        self,
        catalog: BaseCatalog,
        config: Optional[OrchestratorConfig] = None,
        idempotency_store: Optional[IdempotencyStore] = None,
    ):
        """
        Initialize the orchestrator.

        Args:
            catalog: Remote catalog the steps call
            config: Workflow settings (timeouts, location limit)
            idempotency_store: Optional store that makes create retries safe
        """
        self.catalog = catalog
        self.config = config or OrchestratorConfig()
        self.idempotency_store = idempotency_store
        self.duration_histogram = get_step_duration_histogram()

    async def _run_step(self, step: str, call: Callable[[], Awaitable[T]]) -> T:
        start = perf_counter()
        try:
            result = await asyncio.wait_for(call(), timeout=self.config.step_timeout_seconds)
        except asyncio.TimeoutError as exc:
            raise RemoteOperationError(
                step,
                f"Timed out after {self.config.step_timeout_seconds:g}s",
                timed_out=True,
            ) from exc
        except CatalogCallError as exc:
            raise RemoteOperationError(step, exc.message, timed_out=exc.timed_out) from exc
        finally:
            duration_ms = (perf_counter() - start) * 1000
            self.duration_histogram.record(duration_ms, attributes={"step": step})
        logger.info("step %s completed in %.1fms", step, duration_ms)
        return result

    async def upsert(
        self,
        draft: ProductDraft,
        existing_product_id: Optional[str] = None,
        idempotency_key: Optional[str] = None,
    ) -> UpsertResult:
        """
        Create or update a product so Shopify matches the draft.

        Args:
            draft: Merchant-supplied product data
            existing_product_id: Product to update; a new product is
                created when omitted
            idempotency_key: Key identifying one logical create across retries

        Returns:
            UpsertResult with the product identity on success, or the
            first error and the steps completed before it
        """
        completed: List[str] = []
        try:
            quantity = draft.validate_fields()
        except OrchestrationError as exc:
            logger.info("draft rejected: %s", exc.message)
            return UpsertResult(ok=False, error=OrchestrationErrorInfo.from_error(exc))

        if not existing_product_id and idempotency_key and self.idempotency_store:
            existing_product_id = self.idempotency_store.recall(idempotency_key)
            if existing_product_id:
                logger.info("idempotency key %s maps to %s, updating", idempotency_key, existing_product_id)

        created = not existing_product_id
        try:
            identity = await self._upsert_product(draft, existing_product_id, idempotency_key)
            completed.append(STEP_UPSERT_PRODUCT)

            await self._run_step(
                STEP_UPDATE_PRICE,
                lambda: self.catalog.update_variant_price(identity.product_id, identity.variant_id, draft.price.strip()),
            )
            completed.append(STEP_UPDATE_PRICE)

            locations = await self._run_step(
                STEP_RESOLVE_LOCATION,
                lambda: self.catalog.list_locations(self.config.location_limit),
            )
            location = default_location(locations)
            completed.append(STEP_RESOLVE_LOCATION)

            await self._run_step(
                STEP_ENABLE_TRACKING,
                lambda: self.catalog.set_inventory_tracked(identity.inventory_item_id, True),
            )
            completed.append(STEP_ENABLE_TRACKING)

            await self._run_step(
                STEP_SET_QUANTITY,
                lambda: self.catalog.set_inventory_quantity(
                    identity.inventory_item_id,
                    location.id,
                    quantity,
                    name="on_hand",
                    ignore_compare_quantity=True,
                ),
            )
            completed.append(STEP_SET_QUANTITY)
        except RemoteOperationError as exc:
            logger.warning(
                "product upsert failed at %s after %s: %s",
                exc.step,
                completed or "no steps",
                exc.message,
            )
            return UpsertResult(
                ok=False,
                error=OrchestrationErrorInfo.from_error(exc),
                completed_steps=completed,
                created=created and STEP_UPSERT_PRODUCT in completed,
            )

        logger.info(
            "product %s %s with quantity %d at %s",
            identity.product_id,
            "created" if created else "updated",
            quantity,
            location.id,
        )
        return UpsertResult(ok=True, identity=identity, completed_steps=completed, created=created)

    async def _upsert_product(
        self,
        draft: ProductDraft,
        existing_product_id: Optional[str],
        idempotency_key: Optional[str],
    ) -> ProductIdentity:
        if existing_product_id:
            product_id = to_product_gid(existing_product_id)
            product = await self._run_step(
                STEP_UPSERT_PRODUCT,
                lambda: self.catalog.update_product(product_id, draft.title, draft.description_html),
            )
        else:
            product = await self._run_step(
                STEP_UPSERT_PRODUCT,
                lambda: self.catalog.create_product(draft.title, draft.description_html),
            )
            if idempotency_key and self.idempotency_store:
                self.idempotency_store.remember(idempotency_key, product.id)

        variant = primary_variant(product)
        return ProductIdentity(
            product_id=product.id,
            variant_id=variant.id,
            inventory_item_id=variant.inventory_item_id,
        )
