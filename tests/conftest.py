import asyncio
from typing import Dict, List, Optional

import pytest

from shopify_product_admin.catalog import BaseCatalog
from shopify_product_admin.config import AdminConfig
from shopify_product_admin.models import (
    InventoryLevel,
    Location,
    ProductRecord,
    ProductSummary,
    VariantRecord,
)


class RecordingCatalog(BaseCatalog):
    """Catalog test double that records calls and can fail or stall any of them."""

    def __init__(self):
        self.calls: List[tuple] = []
        self.locations = [Location(id="gid://shopify/Location/1", name="Main")]
        self.variants = [VariantRecord(id="gid://shopify/ProductVariant/11", inventory_item_id="gid://shopify/InventoryItem/21")]
        self.levels: List[InventoryLevel] = []
        self.deleted_id: Optional[str] = "gid://shopify/Product/1"
        self.product: Optional[ProductRecord] = None
        self.failures: Dict[str, Exception] = {}
        self.delays: Dict[str, float] = {}
        self._next_id = 1

    @property
    def call_names(self) -> List[str]:
        return [name for name, *_ in self.calls]

    async def _record(self, name: str, *args):
        self.calls.append((name, *args))
        if name in self.delays:
            await asyncio.sleep(self.delays[name])
        if name in self.failures:
            raise self.failures[name]

    def _product(self, product_id: str) -> ProductRecord:
        return ProductRecord(id=product_id, variants=list(self.variants))

    async def create_product(self, title, description_html):
        await self._record("create_product", title, description_html)
        product_id = f"gid://shopify/Product/{self._next_id}"
        self._next_id += 1
        return self._product(product_id)

    async def update_product(self, product_id, title, description_html):
        await self._record("update_product", product_id, title, description_html)
        return self._product(product_id)

    async def update_variant_price(self, product_id, variant_id, price):
        await self._record("update_variant_price", product_id, variant_id, price)

    async def list_locations(self, limit):
        await self._record("list_locations", limit)
        return list(self.locations[:limit])

    async def set_inventory_tracked(self, inventory_item_id, tracked):
        await self._record("set_inventory_tracked", inventory_item_id, tracked)

    async def set_inventory_quantity(self, inventory_item_id, location_id, quantity, name="on_hand", ignore_compare_quantity=True):
        await self._record("set_inventory_quantity", inventory_item_id, location_id, quantity, name, ignore_compare_quantity)

    async def get_inventory_levels(self, inventory_item_id):
        await self._record("get_inventory_levels", inventory_item_id)
        return list(self.levels)

    async def delete_product(self, product_id):
        await self._record("delete_product", product_id)
        return self.deleted_id

    async def list_products(self, limit):
        await self._record("list_products", limit)
        return [ProductSummary(id="gid://shopify/Product/1", title="Shirt", price="19.99", quantity=3)]

    async def get_product(self, product_id):
        await self._record("get_product", product_id)
        return self.product


def make_config(**orchestrator):
    return AdminConfig(
        shopify={
            "shop_domain": "mystore.myshopify.com",
            "access_token": "shpat_test",
            "api_version": "2024-10",
        },
        orchestrator=orchestrator,
    )


@pytest.fixture
def catalog():
    return RecordingCatalog()


@pytest.fixture
def config():
    return make_config()


@pytest.fixture
def config_factory():
    return make_config
