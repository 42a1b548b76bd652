"""Remote catalog operations backed by the Shopify Admin GraphQL API."""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from . import queries
from .client import ShopifyAdminClient
from .errors import CatalogCallError
from .inventory import sum_inventory_quantity
from .models import (
    InventoryLevel,
    Location,
    ProductRecord,
    ProductSummary,
    UserError,
    VariantRecord,
)


class BaseCatalog(ABC):
    """Operations the product workflows need from the remote catalog."""

    @abstractmethod
    async def create_product(self, title: str, description_html: str) -> ProductRecord:
        """Create a product and return it with its variants."""

    @abstractmethod
    async def update_product(self, product_id: str, title: str, description_html: str) -> ProductRecord:
        """Update title and description of an existing product."""

    @abstractmethod
    async def update_variant_price(self, product_id: str, variant_id: str, price: str) -> None:
        """Set the price of one variant."""

    @abstractmethod
    async def list_locations(self, limit: int) -> List[Location]:
        """Return locations in the order Shopify lists them."""

    @abstractmethod
    async def set_inventory_tracked(self, inventory_item_id: str, tracked: bool) -> None:
        """Turn inventory tracking on or off for an inventory item."""

    @abstractmethod
    async def set_inventory_quantity(
        self,
        inventory_item_id: str,
        location_id: str,
        quantity: int,
        name: str = "on_hand",
        ignore_compare_quantity: bool = True,
    ) -> None:
        """Set the absolute quantity of an inventory item at a location."""

    @abstractmethod
    async def get_inventory_levels(self, inventory_item_id: str) -> List[InventoryLevel]:
        """Return the inventory levels of an item across locations."""

    @abstractmethod
    async def delete_product(self, product_id: str) -> Optional[str]:
        """Delete a product and return the deleted id reported by Shopify."""

    @abstractmethod
    async def list_products(self, limit: int) -> List[ProductSummary]:
        """Return list rows with the primary variant's price and total quantity."""

    @abstractmethod
    async def get_product(self, product_id: str) -> Optional[ProductRecord]:
        """Return a product with its primary variant, or None when it does not exist."""


def _user_errors(payload: Optional[Dict[str, Any]]) -> List[UserError]:
    return [UserError(**e) for e in (payload or {}).get("userErrors") or []]


def _mutation_payload(data: Dict[str, Any], name: str) -> Dict[str, Any]:
    """Return a mutation payload, raising on embedded user errors."""
    payload = data.get(name)
    errors = _user_errors(payload)
    if errors:
        raise CatalogCallError(user_errors=errors)
    return payload or {}


def _edges(connection: Optional[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return [edge["node"] for edge in (connection or {}).get("edges") or [] if edge.get("node")]


def _parse_levels(connection: Optional[Dict[str, Any]]) -> List[InventoryLevel]:
    levels = []
    for node in _edges(connection):
        quantities = {
            q["name"]: q["quantity"]
            for q in node.get("quantities") or []
            if q.get("quantity") is not None
        }
        location = node.get("location") or {}
        levels.append(InventoryLevel(location_id=location.get("id"), quantities=quantities))
    return levels


def _parse_product(node: Dict[str, Any]) -> ProductRecord:
    variants = [
        VariantRecord(
            id=variant["id"],
            inventory_item_id=(variant.get("inventoryItem") or {}).get("id"),
            price=variant.get("price"),
        )
        for variant in _edges(node.get("variants"))
    ]
    return ProductRecord(
        id=node["id"],
        title=node.get("title"),
        description_html=node.get("descriptionHtml"),
        variants=variants,
    )


class ShopifyCatalog(BaseCatalog):
    """
    Catalog implementation over the Admin GraphQL API.

    Each method checks both failure channels: the client raises on
    transport errors and the payload's ``userErrors`` are raised here.
    """

    def __init__(self, client: ShopifyAdminClient):
        self.client = client
        self.inventory_level_limit = client.config.orchestrator.inventory_level_limit

    async def _product_mutation(self, document: str, name: str, product_input: Dict[str, Any]) -> ProductRecord:
        data = await self.client.execute(document, {"input": product_input})
        payload = _mutation_payload(data, name)
        product = payload.get("product")
        if not product:
            raise CatalogCallError(transport_errors=[f"{name} returned no product"])
        return _parse_product(product)

    async def create_product(self, title: str, description_html: str) -> ProductRecord:
        return await self._product_mutation(
            queries.PRODUCT_CREATE_MUTATION,
            "productCreate",
            {"title": title, "descriptionHtml": description_html},
        )

    async def update_product(self, product_id: str, title: str, description_html: str) -> ProductRecord:
        return await self._product_mutation(
            queries.PRODUCT_UPDATE_MUTATION,
            "productUpdate",
            {"id": product_id, "title": title, "descriptionHtml": description_html},
        )

    async def update_variant_price(self, product_id: str, variant_id: str, price: str) -> None:
        data = await self.client.execute(
            queries.VARIANTS_BULK_UPDATE_MUTATION,
            {"productId": product_id, "variants": [{"id": variant_id, "price": price}]},
        )
        _mutation_payload(data, "productVariantsBulkUpdate")

    async def list_locations(self, limit: int) -> List[Location]:
        data = await self.client.execute(queries.LOCATIONS_QUERY, {"first": limit})
        return [Location(**node) for node in _edges(data.get("locations"))]

    async def set_inventory_tracked(self, inventory_item_id: str, tracked: bool) -> None:
        data = await self.client.execute(
            queries.INVENTORY_ITEM_UPDATE_MUTATION,
            {"id": inventory_item_id, "input": {"tracked": tracked}},
        )
        _mutation_payload(data, "inventoryItemUpdate")

    async def set_inventory_quantity(
        self,
        inventory_item_id: str,
        location_id: str,
        quantity: int,
        name: str = "on_hand",
        ignore_compare_quantity: bool = True,
    ) -> None:
        data = await self.client.execute(
            queries.INVENTORY_SET_QUANTITIES_MUTATION,
            {
                "input": {
                    "name": name,
                    "reason": "correction",
                    "ignoreCompareQuantity": ignore_compare_quantity,
                    "quantities": [
                        {
                            "inventoryItemId": inventory_item_id,
                            "locationId": location_id,
                            "quantity": quantity,
                        }
                    ],
                }
            },
        )
        _mutation_payload(data, "inventorySetQuantities")

    async def get_inventory_levels(self, inventory_item_id: str) -> List[InventoryLevel]:
        data = await self.client.execute(
            queries.INVENTORY_LEVELS_QUERY,
            {"id": inventory_item_id, "first": self.inventory_level_limit},
        )
        item = data.get("inventoryItem") or {}
        return _parse_levels(item.get("inventoryLevels"))

    async def delete_product(self, product_id: str) -> Optional[str]:
        data = await self.client.execute(queries.PRODUCT_DELETE_MUTATION, {"input": {"id": product_id}})
        payload = _mutation_payload(data, "productDelete")
        return payload.get("deletedProductId") or None

    async def list_products(self, limit: int) -> List[ProductSummary]:
        data = await self.client.execute(
            queries.PRODUCTS_QUERY,
            {"first": limit, "levels": self.inventory_level_limit},
        )
        summaries = []
        for node in _edges(data.get("products")):
            variants = _edges(node.get("variants"))
            variant = variants[0] if variants else {}
            levels = _parse_levels((variant.get("inventoryItem") or {}).get("inventoryLevels"))
            summaries.append(
                ProductSummary(
                    id=node["id"],
                    title=node.get("title") or "",
                    price=variant.get("price") or "",
                    quantity=sum_inventory_quantity(levels),
                )
            )
        return summaries

    async def get_product(self, product_id: str) -> Optional[ProductRecord]:
        data = await self.client.execute(queries.PRODUCT_QUERY, {"id": product_id})
        node = data.get("product")
        if not node:
            return None
        return _parse_product(node)
