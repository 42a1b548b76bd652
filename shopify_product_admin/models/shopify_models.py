"""Pydantic models for Shopify Admin GraphQL payloads."""

from typing import Optional, List, Dict
from pydantic import BaseModel, Field, ConfigDict


class UserError(BaseModel):
    """Field-level error embedded in a mutation payload."""
    field: Optional[List[str]] = None
    message: str = ""


class Location(BaseModel):
    """Shopify fulfilment location."""
    id: str
    name: Optional[str] = None


class InventoryLevel(BaseModel):
    """Inventory quantities of one item at one location, keyed by quantity name."""
    location_id: Optional[str] = Field(None, alias="locationId")
    quantities: Dict[str, int] = Field(default_factory=dict)

    model_config = ConfigDict(populate_by_name=True)


class VariantRecord(BaseModel):
    """Variant as returned by productCreate / productUpdate."""
    id: str
    inventory_item_id: Optional[str] = Field(None, alias="inventoryItemId")
    price: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True)


class ProductRecord(BaseModel):
    """Product with its variants in the order Shopify returned them."""
    id: str
    title: Optional[str] = None
    description_html: Optional[str] = Field(None, alias="descriptionHtml")
    variants: List[VariantRecord] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True)
