"""FastAPI router for the product list and the create/edit form."""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import APIRouter, FastAPI, Header, HTTPException
from fastapi.responses import JSONResponse

from .client import ShopifyAdminClient
from .config import AdminConfig
from .errors import CatalogCallError
from .models import ProductDraft, UpsertResult
from .service import ProductAdminService, build_service

logger = logging.getLogger(__name__)

LIST_PATH = "/admin/products"


def _upsert_response(result: UpsertResult) -> JSONResponse:
    if result.ok:
        return JSONResponse(
            status_code=201 if result.created else 200,
            content={
                "ok": True,
                "product_id": result.identity.product_id,
                "refetch": LIST_PATH,
            },
        )

    error = result.error
    if error.kind == "validation_error":
        status_code = 422
    elif error.timed_out:
        status_code = 504
    else:
        status_code = 502
    return JSONResponse(
        status_code=status_code,
        content={
            "ok": False,
            "error": error.model_dump(mode="json"),
            "completed_steps": result.completed_steps,
        },
    )


def _catalog_error_response(exc: CatalogCallError) -> JSONResponse:
    return JSONResponse(
        status_code=504 if exc.timed_out else 502,
        content={"ok": False, "error": {"message": exc.message, "timed_out": exc.timed_out}},
    )


def get_admin_router(service: ProductAdminService) -> APIRouter:
    """
    Create a FastAPI router for the product admin.

    Successful mutations answer with a ``refetch`` path; the client
    re-requests that list instead of reloading the page.

    Args:
        service: Product admin service instance

    Returns:
        APIRouter with async endpoints
    """
    router = APIRouter(prefix="/admin", tags=["products"])

    @router.get("/products")
    async def list_products(limit: Optional[int] = None):
        """List products with price and total quantity."""
        try:
            products = await service.list_products(limit)
        except CatalogCallError as exc:
            return _catalog_error_response(exc)
        return [
            {**p.model_dump(mode="json"), "legacy_id": p.legacy_id}
            for p in products
        ]

    @router.get("/products/{product_id}")
    async def get_product(product_id: str):
        """Form values for a product; 'new' returns a blank form."""
        try:
            form = await service.get_product_form(product_id)
        except LookupError as exc:
            raise HTTPException(status_code=404, detail=str(exc))
        except CatalogCallError as exc:
            return _catalog_error_response(exc)
        return {**form.model_dump(mode="json", by_alias=True), "is_editing": form.is_editing}

    @router.post("/products")
    async def create_product(
        draft: ProductDraft,
        idempotency_key: Optional[str] = Header(None, alias="Idempotency-Key"),
    ):
        """Create a product and stock it at the default location."""
        result = await service.save_product(draft, idempotency_key=idempotency_key)
        return _upsert_response(result)

    @router.put("/products/{product_id}")
    async def update_product(product_id: str, draft: ProductDraft):
        """Update a product's details, price and quantity."""
        result = await service.save_product(draft, product_id=product_id)
        return _upsert_response(result)

    @router.delete("/products/{product_id}")
    async def delete_product(product_id: str):
        """Delete a product."""
        result = await service.delete_product(product_id)
        content = result.model_dump(mode="json")
        if result.ok:
            content["refetch"] = LIST_PATH
            return JSONResponse(status_code=200, content=content)
        return JSONResponse(status_code=400, content=content)

    return router


def create_app(config: AdminConfig, http_client=None) -> FastAPI:
    """
    Create the admin FastAPI app.

    Args:
        config: Admin configuration
        http_client: Optional HTTP client (e.g., MockShopifyClient)

    Returns:
        FastAPI app ready to run
    """
    client = ShopifyAdminClient(config, client=http_client)

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        yield
        await client.close()

    app = FastAPI(title="Shopify Product Admin", lifespan=lifespan)
    app.include_router(get_admin_router(build_service(config, client)))

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy"}

    logger.info("admin app ready for %s", config.shopify.shop_domain)
    return app
