"""Data models for Shopify payloads and product admin workflows."""

from .shopify_models import (
    UserError,
    Location,
    InventoryLevel,
    VariantRecord,
    ProductRecord,
)
from .product_models import (
    ProductDraft,
    ProductIdentity,
    ProductSummary,
    ProductForm,
    OrchestrationErrorInfo,
    UpsertResult,
    DeleteResult,
    to_product_gid,
    legacy_id,
)

__all__ = [
    "UserError",
    "Location",
    "InventoryLevel",
    "VariantRecord",
    "ProductRecord",
    "ProductDraft",
    "ProductIdentity",
    "ProductSummary",
    "ProductForm",
    "OrchestrationErrorInfo",
    "UpsertResult",
    "DeleteResult",
    "to_product_gid",
    "legacy_id",
]
