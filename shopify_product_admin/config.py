"""Configuration management for the Shopify product admin."""

import json
from pathlib import Path
from typing import Optional, Union

from pydantic import BaseModel, Field, ConfigDict


class ShopifyConfig(BaseModel):
    """Shopify Admin API configuration."""
    shop_domain: str = Field(..., description="Shopify shop domain (e.g., 'mystore.myshopify.com')")
    access_token: str = Field(..., description="Shopify Admin API access token")
    api_version: str = Field("2024-10", description="Shopify Admin API version")

    @property
    def graphql_path(self) -> str:
        return f"/admin/api/{self.api_version}/graphql.json"


class RateLimitConfig(BaseModel):
    """GraphQL query cost budget, mirrored from Shopify's throttle status."""
    bucket_size: float = Field(1000.0, gt=0, description="Maximum available query cost points")
    restore_rate: float = Field(50.0, gt=0, description="Cost points restored per second")
    request_cost: float = Field(10.0, gt=0, description="Cost reserved for a request before its real cost is known")


class OrchestratorConfig(BaseModel):
    """Product upsert workflow settings."""
    step_timeout_seconds: float = Field(30.0, gt=0, description="Upper bound for a single remote step")
    location_limit: int = Field(1, gt=0, description="Locations requested when resolving the default location")
    inventory_level_limit: int = Field(20, gt=0, description="Inventory levels read per inventory item")
    product_list_limit: int = Field(50, gt=0, description="Products shown in the list view")
    idempotency_ttl_seconds: int = Field(3600, gt=0, description="Lifetime of a recorded idempotency key")


class AdminConfig(BaseModel):
    """Main configuration for the Shopify product admin."""
    shopify: ShopifyConfig
    rate_limit: RateLimitConfig = Field(default_factory=RateLimitConfig)
    orchestrator: OrchestratorConfig = Field(default_factory=OrchestratorConfig)
    log_level: str = Field("INFO", description="Root log level for CLI and server")
    idempotency_db: Optional[str] = Field(
        None,
        description="SQLite file for idempotency records (in-memory when unset)",
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "shopify": {
                    "shop_domain": "mystore.myshopify.com",
                    "access_token": "shpat_xxxxx",
                    "api_version": "2024-10"
                },
                "rate_limit": {
                    "bucket_size": 1000,
                    "restore_rate": 50,
                    "request_cost": 10
                },
                "orchestrator": {
                    "step_timeout_seconds": 30,
                    "location_limit": 1,
                    "inventory_level_limit": 20,
                    "product_list_limit": 50,
                    "idempotency_ttl_seconds": 3600
                },
                "log_level": "INFO"
            }
        }
    )

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "AdminConfig":
        """Load configuration from a JSON file."""
        with open(path) as f:
            return cls(**json.load(f))
