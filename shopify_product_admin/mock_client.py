"""Mock Shopify client for sandbox mode.

Answers the Admin GraphQL operations in ``queries`` from an in-memory
shop so the CLI, the server and the tests can run without a store.
"""

import re
from itertools import count
from typing import Any, Dict, List, Optional

import httpx

_OPERATION = re.compile(r"^\s*(?:query|mutation)\s+(\w+)")

LOCATION_PREFIX = "gid://shopify/Location/"


class MockResponse:
    """Minimal response object compatible with client usage."""

    def __init__(self, data: Dict[str, Any], status_code: int = 200, headers: Optional[Dict[str, str]] = None):
        self._data = data
        self.status_code = status_code
        self.headers = headers or {}

    def json(self) -> Dict[str, Any]:
        return self._data

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            request = httpx.Request("POST", "https://mock.myshopify.com/admin/api/graphql.json")
            response = httpx.Response(self.status_code, request=request)
            raise httpx.HTTPStatusError(
                f"Mock HTTP error {self.status_code}", request=request, response=response
            )


class MockShopifyClient:
    """
    In-memory shop behind an httpx-like ``request`` method.

    ``operations`` records the GraphQL operation names in call order.
    ``fail_operation`` makes the next calls of an operation fail with a
    user error, a top-level GraphQL error or an HTTP status.
    """

    def __init__(self, locations: Optional[List[Dict[str, str]]] = None):
        self.locations: List[Dict[str, str]] = (
            [{"id": f"{LOCATION_PREFIX}1", "name": "Main warehouse"}] if locations is None else locations
        )
        self.products: Dict[str, Dict[str, Any]] = {}
        self.inventory_items: Dict[str, Dict[str, Any]] = {}
        self.operations: List[str] = []
        self.requests: List[Dict[str, Any]] = []
        self._faults: Dict[str, Dict[str, Any]] = {}
        self._ids = count(1001)

    def fail_operation(
        self,
        operation: str,
        user_error: Optional[str] = None,
        transport_error: Optional[str] = None,
        status_code: Optional[int] = None,
    ) -> None:
        """Make calls of ``operation`` fail until cleared."""
        self._faults[operation] = {
            "user_error": user_error,
            "transport_error": transport_error,
            "status_code": status_code,
        }

    def clear_faults(self) -> None:
        self._faults.clear()

    def add_product(self, title: str, price: str = "0.00", quantity: int = 0, description_html: str = "") -> str:
        """Seed a product stocked at the first location; returns its GID."""
        product_id = self._create(title, description_html)
        product = self.products[product_id]
        product["price"] = price
        item = self.inventory_items[product["inventory_item_id"]]
        item["tracked"] = True
        if self.locations:
            item["levels"][self.locations[0]["id"]] = {"on_hand": quantity, "available": quantity}
        return product_id

    async def request(self, method: str, endpoint: str, json: Optional[Dict[str, Any]] = None, **_kwargs) -> MockResponse:
        body = json or {}
        match = _OPERATION.match(body.get("query", ""))
        operation = match.group(1) if match else ""
        variables = body.get("variables") or {}
        self.operations.append(operation)
        self.requests.append({"operation": operation, "variables": variables})

        fault = self._faults.get(operation)
        if fault:
            if fault["status_code"]:
                return MockResponse({}, status_code=fault["status_code"])
            if fault["transport_error"]:
                return MockResponse({"errors": [{"message": fault["transport_error"]}]})
            if fault["user_error"]:
                return MockResponse({"data": {operation: {"userErrors": [
                    {"field": None, "message": fault["user_error"]}
                ]}}})

        handler = getattr(self, f"_op_{operation}", None)
        if handler is None:
            return MockResponse({"errors": [{"message": f"Unknown operation '{operation}'"}]})
        return MockResponse({"data": handler(**variables), "extensions": self._cost()})

    async def aclose(self) -> None:
        return None

    def _cost(self) -> Dict[str, Any]:
        return {
            "cost": {
                "requestedQueryCost": 10,
                "throttleStatus": {"maximumAvailable": 1000.0, "currentlyAvailable": 990, "restoreRate": 50.0},
            }
        }

    def _create(self, title: str, description_html: str) -> str:
        n = next(self._ids)
        product_id = f"gid://shopify/Product/{n}"
        inventory_item_id = f"gid://shopify/InventoryItem/{n}"
        self.products[product_id] = {
            "id": product_id,
            "title": title,
            "descriptionHtml": description_html,
            "variant_id": f"gid://shopify/ProductVariant/{n}",
            "price": "0.00",
            "inventory_item_id": inventory_item_id,
        }
        self.inventory_items[inventory_item_id] = {"tracked": False, "levels": {}}
        return product_id

    def _levels(self, inventory_item_id: str, first: int = 20) -> Dict[str, Any]:
        levels = list(self.inventory_items[inventory_item_id]["levels"].items())[:first]
        return {
            "edges": [
                {
                    "node": {
                        "location": {"id": location_id},
                        "quantities": [{"name": name, "quantity": qty} for name, qty in quantities.items()],
                    }
                }
                for location_id, quantities in levels
            ]
        }

    def _node(self, product: Dict[str, Any], levels: Optional[int] = None) -> Dict[str, Any]:
        inventory_item: Dict[str, Any] = {"id": product["inventory_item_id"]}
        if levels is not None:
            inventory_item["inventoryLevels"] = self._levels(product["inventory_item_id"], levels)
        return {
            "id": product["id"],
            "title": product["title"],
            "descriptionHtml": product["descriptionHtml"],
            "variants": {
                "edges": [
                    {"node": {"id": product["variant_id"], "price": product["price"], "inventoryItem": inventory_item}}
                ]
            },
        }

    @staticmethod
    def _user_error(field: List[str], message: str) -> List[Dict[str, Any]]:
        return [{"field": field, "message": message}]

    def _op_productCreate(self, input: Dict[str, Any]) -> Dict[str, Any]:
        if not input.get("title"):
            return {"productCreate": {"product": None, "userErrors": self._user_error(["title"], "Title can't be blank")}}
        product_id = self._create(input["title"], input.get("descriptionHtml") or "")
        return {"productCreate": {"product": self._node(self.products[product_id]), "userErrors": []}}

    def _op_productUpdate(self, input: Dict[str, Any]) -> Dict[str, Any]:
        product = self.products.get(input.get("id"))
        if product is None:
            return {"productUpdate": {"product": None, "userErrors": self._user_error(["id"], "Product does not exist")}}
        product["title"] = input.get("title", product["title"])
        product["descriptionHtml"] = input.get("descriptionHtml", product["descriptionHtml"])
        return {"productUpdate": {"product": self._node(product), "userErrors": []}}

    def _op_productVariantsBulkUpdate(self, productId: str, variants: List[Dict[str, Any]]) -> Dict[str, Any]:
        product = self.products.get(productId)
        if product is None:
            return {"productVariantsBulkUpdate": {
                "productVariants": None,
                "userErrors": self._user_error(["productId"], "Product does not exist"),
            }}
        updated = []
        for variant in variants:
            if variant["id"] != product["variant_id"]:
                return {"productVariantsBulkUpdate": {
                    "productVariants": None,
                    "userErrors": self._user_error(["variants", "0", "id"], "Product variant does not exist"),
                }}
            product["price"] = variant["price"]
            updated.append({"id": variant["id"], "price": variant["price"]})
        return {"productVariantsBulkUpdate": {"productVariants": updated, "userErrors": []}}

    def _op_locations(self, first: int) -> Dict[str, Any]:
        return {"locations": {"edges": [{"node": dict(location)} for location in self.locations[:first]]}}

    def _op_inventoryItemUpdate(self, id: str, input: Dict[str, Any]) -> Dict[str, Any]:
        item = self.inventory_items.get(id)
        if item is None:
            return {"inventoryItemUpdate": {
                "inventoryItem": None,
                "userErrors": self._user_error(["id"], "Inventory item does not exist"),
            }}
        item["tracked"] = bool(input.get("tracked"))
        return {"inventoryItemUpdate": {"inventoryItem": {"id": id, "tracked": item["tracked"]}, "userErrors": []}}

    def _op_inventorySetQuantities(self, input: Dict[str, Any]) -> Dict[str, Any]:
        location_ids = {location["id"] for location in self.locations}
        for entry in input.get("quantities", []):
            item = self.inventory_items.get(entry["inventoryItemId"])
            if item is None or entry["locationId"] not in location_ids:
                return {"inventorySetQuantities": {
                    "inventoryAdjustmentGroup": None,
                    "userErrors": self._user_error(["input", "quantities"], "The specified inventory item could not be found."),
                }}
            level = item["levels"].setdefault(entry["locationId"], {})
            level[input["name"]] = entry["quantity"]
            level["available"] = entry["quantity"]
        return {"inventorySetQuantities": {
            "inventoryAdjustmentGroup": {"createdAt": "2024-01-01T00:00:00Z", "reason": input.get("reason")},
            "userErrors": [],
        }}

    def _op_inventoryLevels(self, id: str, first: int = 20) -> Dict[str, Any]:
        if id not in self.inventory_items:
            return {"inventoryItem": None}
        return {"inventoryItem": {"id": id, "inventoryLevels": self._levels(id, first)}}

    def _op_productDelete(self, input: Dict[str, Any]) -> Dict[str, Any]:
        product = self.products.pop(input.get("id"), None)
        if product is None:
            return {"productDelete": {"deletedProductId": None, "userErrors": self._user_error(["id"], "Product does not exist")}}
        self.inventory_items.pop(product["inventory_item_id"], None)
        return {"productDelete": {"deletedProductId": product["id"], "userErrors": []}}

    def _op_product(self, id: str) -> Dict[str, Any]:
        product = self.products.get(id)
        return {"product": self._node(product) if product else None}

    def _op_products(self, first: int, levels: int = 20) -> Dict[str, Any]:
        products = list(self.products.values())[:first]
        return {"products": {"edges": [{"node": self._node(p, levels)} for p in products]}}
