"""
Shopify Product Admin

Creates, updates, lists and deletes single-variant Shopify products
through the Admin GraphQL API, stocking them at the shop's default
location.
"""

__version__ = "0.1.0"

from .catalog import BaseCatalog, ShopifyCatalog
from .client import ShopifyAdminClient
from .config import AdminConfig
from .mock_client import MockShopifyClient
from .orchestrator import ProductUpsertOrchestrator
from .router import create_app, get_admin_router
from .service import ProductAdminService, build_service

__all__ = [
    "AdminConfig",
    "BaseCatalog",
    "MockShopifyClient",
    "ProductAdminService",
    "ProductUpsertOrchestrator",
    "ShopifyAdminClient",
    "ShopifyCatalog",
    "build_service",
    "create_app",
    "get_admin_router",
]
