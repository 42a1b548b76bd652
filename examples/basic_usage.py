"""Example usage of the Shopify product admin."""

import asyncio
import json
from shopify_product_admin import AdminConfig, ShopifyAdminClient, build_service


async def main():
    """Example: create a product, update its stock, then list and delete it."""

    # Load configuration
    with open('config.json') as f:
        config_data = json.load(f)

    config = AdminConfig(**config_data)

    async with ShopifyAdminClient(config) as client:
        service = build_service(config, client)

        print("Creating product...")
        result = await service.save_product(
            {"title": "Premium T-Shirt", "descriptionHtml": "<p>Organic cotton</p>", "price": "29.99", "quantity": "25"},
            idempotency_key="example-premium-t-shirt",
        )
        if not result.ok:
            print(f"Failed at {result.error.step}: {result.error.message}")
            return
        product_id = result.identity.product_id
        print(f"Created {product_id}")

        print("\nUpdating stock to 40...")
        result = await service.save_product(
            {"title": "Premium T-Shirt", "price": "29.99", "quantity": "40"},
            product_id=product_id,
        )
        print("Updated" if result.ok else f"Update failed: {result.error.message}")

        print("\nProducts:")
        for p in await service.list_products(limit=5):
            print(f"- {p.title}: {p.price} ({p.quantity} in stock)")

        deleted = await service.delete_product(product_id)
        print(f"\nDeleted: {deleted.ok}")


if __name__ == "__main__":
    asyncio.run(main())
