import httpx
import pytest

from shopify_product_admin.catalog import ShopifyCatalog
from shopify_product_admin.client import ShopifyAdminClient
from shopify_product_admin.errors import CatalogCallError
from shopify_product_admin.mock_client import MockShopifyClient
from shopify_product_admin.models import ProductDraft
from shopify_product_admin.orchestrator import ProductUpsertOrchestrator
from shopify_product_admin.service import build_service


def make_catalog(config, mock):
    return ShopifyCatalog(ShopifyAdminClient(config, client=mock))


@pytest.mark.asyncio
async def test_create_product_end_to_end(config):
    mock = MockShopifyClient()
    catalog = make_catalog(config, mock)
    orchestrator = ProductUpsertOrchestrator(catalog, config.orchestrator)

    result = await orchestrator.upsert(ProductDraft(title="Shirt", price="19.99", quantity=10))

    assert result.ok
    assert mock.operations == [
        "productCreate",
        "productVariantsBulkUpdate",
        "locations",
        "inventoryItemUpdate",
        "inventorySetQuantities",
    ]
    set_quantities = mock.requests[-1]["variables"]["input"]
    assert set_quantities["name"] == "on_hand"
    assert set_quantities["ignoreCompareQuantity"] is True
    assert set_quantities["quantities"][0]["quantity"] == 10

    products = await catalog.list_products(10)
    assert [(p.title, p.price, p.quantity) for p in products] == [("Shirt", "19.99", 10)]
    assert mock.inventory_items[result.identity.inventory_item_id]["tracked"] is True


@pytest.mark.asyncio
async def test_no_locations_stops_before_inventory_mutations(config):
    mock = MockShopifyClient(locations=[])
    orchestrator = ProductUpsertOrchestrator(make_catalog(config, mock), config.orchestrator)

    result = await orchestrator.upsert(ProductDraft(title="Shirt", price="19.99", quantity=10))

    assert result.error.step == "resolve_location"
    assert mock.operations == ["productCreate", "productVariantsBulkUpdate", "locations"]


@pytest.mark.asyncio
async def test_user_errors_raise_catalog_error(config):
    mock = MockShopifyClient()
    product_id = mock.add_product("Shirt")
    mock.fail_operation("productVariantsBulkUpdate", user_error="Price must be greater than or equal to 0")
    catalog = make_catalog(config, mock)

    with pytest.raises(CatalogCallError) as exc_info:
        await catalog.update_variant_price(product_id, "gid://shopify/ProductVariant/1001", "-1")

    assert exc_info.value.message == "Price must be greater than or equal to 0"
    assert exc_info.value.transport_errors == []


@pytest.mark.asyncio
async def test_top_level_graphql_errors_are_transport_errors(config):
    mock = MockShopifyClient()
    mock.fail_operation("locations", transport_error="Throttled")

    with pytest.raises(CatalogCallError) as exc_info:
        await make_catalog(config, mock).list_locations(1)

    assert exc_info.value.transport_errors == ["Throttled"]


@pytest.mark.asyncio
async def test_http_status_error_is_transport_error(config):
    mock = MockShopifyClient()
    mock.fail_operation("productDelete", status_code=503)

    with pytest.raises(CatalogCallError) as exc_info:
        await make_catalog(config, mock).delete_product("gid://shopify/Product/1")

    assert exc_info.value.message == "HTTP 503 from Shopify Admin API"


@pytest.mark.asyncio
async def test_update_of_missing_product_reports_user_error(config):
    orchestrator = ProductUpsertOrchestrator(make_catalog(config, MockShopifyClient()), config.orchestrator)
    result = await orchestrator.upsert(
        ProductDraft(title="Shirt", price="1.00", quantity=1),
        existing_product_id="999",
    )
    assert result.error.step == "upsert_product"
    assert result.error.message == "Product does not exist"


@pytest.mark.asyncio
async def test_inventory_levels_parsed_with_locations(config):
    mock = MockShopifyClient()
    product_id = mock.add_product("Shirt", quantity=4)
    item_id = mock.products[product_id]["inventory_item_id"]

    levels = await make_catalog(config, mock).get_inventory_levels(item_id)

    assert len(levels) == 1
    assert levels[0].location_id == "gid://shopify/Location/1"
    assert levels[0].quantities == {"on_hand": 4, "available": 4}


@pytest.mark.asyncio
async def test_delete_through_service(config):
    mock = MockShopifyClient()
    product_id = mock.add_product("Shirt")
    service = build_service(config, ShopifyAdminClient(config, client=mock))

    deleted = await service.delete_product(product_id)
    missing = await service.delete_product(product_id)

    assert deleted.ok and deleted.deleted_product_id == product_id
    assert not missing.ok
    assert missing.error == "Product does not exist"


@pytest.mark.asyncio
async def test_edit_form_from_mock_shop(config):
    mock = MockShopifyClient()
    product_id = mock.add_product("Mug", price="8.00", quantity=3, description_html="<p>Ceramic</p>")
    service = build_service(config, ShopifyAdminClient(config, client=mock))

    form = await service.get_product_form(product_id.rsplit("/", 1)[-1])

    assert (form.title, form.price, form.quantity) == ("Mug", "8.00", "3")


@pytest.mark.asyncio
async def test_client_posts_graphql_to_versioned_endpoint(config):
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["body"] = request.read()
        return httpx.Response(200, json={"data": {"locations": {"edges": [{"node": {"id": "gid://shopify/Location/9"}}]}}})

    http = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="https://mystore.myshopify.com")
    async with ShopifyAdminClient(config, client=http) as client:
        locations = await ShopifyCatalog(client).list_locations(1)
    await http.aclose()

    assert seen["path"] == "/admin/api/2024-10/graphql.json"
    assert b"locations" in seen["body"]
    assert locations[0].id == "gid://shopify/Location/9"


@pytest.mark.asyncio
async def test_client_timeout_is_flagged(config):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("read timed out", request=request)

    http = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="https://mystore.myshopify.com")
    client = ShopifyAdminClient(config, client=http)

    with pytest.raises(CatalogCallError) as exc_info:
        await client.execute("query locations($first: Int!) { locations(first: $first) { edges { node { id } } } }", {"first": 1})
    await http.aclose()

    assert exc_info.value.timed_out


@pytest.mark.asyncio
async def test_non_object_json_body_is_transport_error(config):
    http = httpx.AsyncClient(
        transport=httpx.MockTransport(lambda request: httpx.Response(200, json=[])),
        base_url="https://mystore.myshopify.com",
    )
    client = ShopifyAdminClient(config, client=http)

    with pytest.raises(CatalogCallError) as exc_info:
        await client.execute("query { shop { name } }")

    orchestrator = ProductUpsertOrchestrator(ShopifyCatalog(client), config.orchestrator)
    result = await orchestrator.upsert(ProductDraft(title="Shirt", price="19.99", quantity=10))
    await http.aclose()

    assert exc_info.value.transport_errors == ["Invalid JSON response from Shopify Admin API"]
    assert result.ok is False
    assert result.error.step == "upsert_product"
    assert result.error.message == "Invalid JSON response from Shopify Admin API"
    assert result.completed_steps == []
