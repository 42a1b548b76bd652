"""Product admin operations behind the list view and the edit form."""

import logging
from typing import Any, List, Mapping, Optional

from .catalog import BaseCatalog, ShopifyCatalog
from .client import ShopifyAdminClient
from .config import AdminConfig
from .errors import FALLBACK_ERROR_MESSAGE, CatalogCallError
from .inventory import InventoryQuantityReader
from .models import (
    DeleteResult,
    ProductDraft,
    ProductForm,
    ProductSummary,
    UpsertResult,
    to_product_gid,
)
from .orchestrator import ProductUpsertOrchestrator
from .storage import IdempotencyStore, SQLiteStorage

logger = logging.getLogger(__name__)

NEW_PRODUCT_ID = "new"


class ProductAdminService:
    """Entry point for the presentation layer."""

    def __init__(
        self,
        catalog: BaseCatalog,
        orchestrator: ProductUpsertOrchestrator,
        product_list_limit: int = 50,
    ):
        self.catalog = catalog
        self.orchestrator = orchestrator
        self.inventory_reader = InventoryQuantityReader(catalog)
        self.product_list_limit = product_list_limit

    async def list_products(self, limit: Optional[int] = None) -> List[ProductSummary]:
        """Products for the list view, each with its total quantity."""
        return await self.catalog.list_products(limit or self.product_list_limit)

    async def get_product_form(self, product_id: Optional[str]) -> ProductForm:
        """
        Values that pre-fill the form for a product.

        Args:
            product_id: Numeric id or GID; None or "new" yields a blank form

        Raises:
            LookupError: if the product does not exist
        """
        if not product_id or product_id == NEW_PRODUCT_ID:
            return ProductForm.blank()

        product = await self.catalog.get_product(to_product_gid(product_id))
        if product is None:
            raise LookupError(f"Product {product_id} not found")

        price = ""
        quantity = ""
        if product.variants:
            variant = product.variants[0]
            price = variant.price or ""
            if variant.inventory_item_id:
                quantity = str(await self.inventory_reader.read_quantity(variant.inventory_item_id))

        return ProductForm(
            id=product.id,
            title=product.title or "",
            description_html=product.description_html or "",
            price=price,
            quantity=quantity,
        )

    async def save_product(
        self,
        form: Mapping[str, Any],
        product_id: Optional[str] = None,
        idempotency_key: Optional[str] = None,
    ) -> UpsertResult:
        """Create the product, or update it when product_id is given."""
        draft = form if isinstance(form, ProductDraft) else ProductDraft.from_form(form)
        return await self.orchestrator.upsert(
            draft,
            existing_product_id=product_id or None,
            idempotency_key=idempotency_key,
        )

    async def delete_product(self, product_id: Optional[str]) -> DeleteResult:
        """
        Delete a product.

        Succeeds only when Shopify reports no errors and returns the
        deleted product id.
        """
        if not product_id:
            return DeleteResult(ok=False, error="No product ID")

        gid = to_product_gid(product_id)
        try:
            deleted_id = await self.catalog.delete_product(gid)
        except CatalogCallError as exc:
            logger.warning("delete of %s failed: %s", gid, exc.message)
            return DeleteResult(ok=False, error=exc.message)
        except Exception as exc:
            logger.exception("delete of %s raised", gid)
            return DeleteResult(ok=False, error=str(exc) or FALLBACK_ERROR_MESSAGE)

        if not deleted_id:
            return DeleteResult(ok=False, error=FALLBACK_ERROR_MESSAGE)

        logger.info("product %s deleted", deleted_id)
        return DeleteResult(ok=True, deleted_product_id=deleted_id)


def build_service(config: AdminConfig, client: ShopifyAdminClient) -> ProductAdminService:
    """Wire catalog, idempotency store and orchestrator for one shop."""
    storage = SQLiteStorage(config.idempotency_db) if config.idempotency_db else None
    catalog = ShopifyCatalog(client)
    orchestrator = ProductUpsertOrchestrator(
        catalog,
        config.orchestrator,
        idempotency_store=IdempotencyStore(storage, ttl_seconds=config.orchestrator.idempotency_ttl_seconds),
    )
    return ProductAdminService(
        catalog,
        orchestrator,
        product_list_limit=config.orchestrator.product_list_limit,
    )
