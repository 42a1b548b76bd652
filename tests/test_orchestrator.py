import pytest

from shopify_product_admin.config import OrchestratorConfig
from shopify_product_admin.errors import CatalogCallError
from shopify_product_admin.models import ProductDraft, UserError
from shopify_product_admin.orchestrator import ProductUpsertOrchestrator
from shopify_product_admin.storage import IdempotencyStore

FULL_RUN = [
    "create_product",
    "update_variant_price",
    "list_locations",
    "set_inventory_tracked",
    "set_inventory_quantity",
]


def shirt(**overrides):
    data = {"title": "Shirt", "price": "19.99", "quantity": "10"}
    data.update(overrides)
    return ProductDraft(**data)


@pytest.mark.asyncio
async def test_create_runs_all_steps_in_order(catalog):
    orchestrator = ProductUpsertOrchestrator(catalog)
    result = await orchestrator.upsert(shirt())

    assert result.ok
    assert result.created
    assert catalog.call_names == FULL_RUN
    assert result.completed_steps == [
        "upsert_product",
        "update_price",
        "resolve_location",
        "enable_tracking",
        "set_quantity",
    ]
    assert result.identity.product_id == "gid://shopify/Product/1"
    assert result.identity.variant_id == "gid://shopify/ProductVariant/11"
    assert result.identity.inventory_item_id == "gid://shopify/InventoryItem/21"


@pytest.mark.asyncio
async def test_step_arguments_follow_identity(catalog):
    orchestrator = ProductUpsertOrchestrator(catalog)
    await orchestrator.upsert(shirt(descriptionHtml="<p>Cotton</p>"))

    calls = {name: args for name, *args in catalog.calls}
    assert calls["create_product"] == ["Shirt", "<p>Cotton</p>"]
    assert calls["update_variant_price"] == [
        "gid://shopify/Product/1",
        "gid://shopify/ProductVariant/11",
        "19.99",
    ]
    assert calls["set_inventory_tracked"] == ["gid://shopify/InventoryItem/21", True]
    assert calls["set_inventory_quantity"] == [
        "gid://shopify/InventoryItem/21",
        "gid://shopify/Location/1",
        10,
        "on_hand",
        True,
    ]


@pytest.mark.asyncio
async def test_existing_product_is_updated_not_created(catalog):
    orchestrator = ProductUpsertOrchestrator(catalog)
    result = await orchestrator.upsert(shirt(), existing_product_id="42")

    assert result.ok
    assert not result.created
    assert "create_product" not in catalog.call_names
    assert catalog.calls[0] == ("update_product", "gid://shopify/Product/42", "Shirt", "")


@pytest.mark.asyncio
async def test_existing_gid_passes_through(catalog):
    orchestrator = ProductUpsertOrchestrator(catalog)
    await orchestrator.upsert(shirt(), existing_product_id="gid://shopify/Product/7")
    assert catalog.calls[0][1] == "gid://shopify/Product/7"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "overrides, field",
    [
        ({"title": ""}, "title"),
        ({"title": "   "}, "title"),
        ({"price": ""}, "price"),
        ({"quantity": ""}, "quantity"),
        ({"quantity": "-1"}, "quantity"),
        ({"quantity": "abc"}, "quantity"),
        ({"quantity": "1.5"}, "quantity"),
        ({"quantity": -3}, "quantity"),
    ],
)
async def test_invalid_draft_makes_no_remote_calls(catalog, overrides, field):
    orchestrator = ProductUpsertOrchestrator(catalog)
    result = await orchestrator.upsert(shirt(**overrides), existing_product_id="42")

    assert not result.ok
    assert result.error.kind == "validation_error"
    assert field in result.error.fields
    assert catalog.calls == []


@pytest.mark.asyncio
async def test_zero_quantity_is_valid(catalog):
    orchestrator = ProductUpsertOrchestrator(catalog)
    result = await orchestrator.upsert(shirt(quantity="0"))
    assert result.ok
    assert catalog.calls[-1][3] == 0


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "failing_call, step",
    [
        ("create_product", "upsert_product"),
        ("update_variant_price", "update_price"),
        ("list_locations", "resolve_location"),
        ("set_inventory_tracked", "enable_tracking"),
        ("set_inventory_quantity", "set_quantity"),
    ],
)
async def test_failure_stops_later_steps(catalog, failing_call, step):
    catalog.failures[failing_call] = CatalogCallError(user_errors=[UserError(message="Nope")])
    orchestrator = ProductUpsertOrchestrator(catalog)
    result = await orchestrator.upsert(shirt())

    position = FULL_RUN.index(failing_call)
    assert not result.ok
    assert catalog.call_names == FULL_RUN[: position + 1]
    assert result.error.kind == "remote_operation_error"
    assert result.error.step == step
    assert result.error.message == "Nope"
    assert len(result.completed_steps) == position


@pytest.mark.asyncio
async def test_empty_location_list_fails_loudly(catalog):
    catalog.locations = []
    orchestrator = ProductUpsertOrchestrator(catalog)
    result = await orchestrator.upsert(shirt())

    assert not result.ok
    assert result.error.kind == "empty_result_error"
    assert result.error.step == "resolve_location"
    assert catalog.call_names == FULL_RUN[:3]
    assert result.created


@pytest.mark.asyncio
async def test_product_without_variant_fails_at_upsert(catalog):
    catalog.variants = []
    orchestrator = ProductUpsertOrchestrator(catalog)
    result = await orchestrator.upsert(shirt())

    assert result.error.kind == "empty_result_error"
    assert result.error.step == "upsert_product"
    assert catalog.call_names == ["create_product"]


@pytest.mark.asyncio
async def test_transport_error_message_wins(catalog):
    catalog.failures["update_variant_price"] = CatalogCallError(
        transport_errors=["Throttled"],
        user_errors=[UserError(field=["price"], message="Price is invalid")],
    )
    orchestrator = ProductUpsertOrchestrator(catalog)
    result = await orchestrator.upsert(shirt())
    assert result.error.message == "Throttled"


@pytest.mark.asyncio
async def test_error_without_messages_uses_fallback(catalog):
    catalog.failures["set_inventory_tracked"] = CatalogCallError()
    orchestrator = ProductUpsertOrchestrator(catalog)
    result = await orchestrator.upsert(shirt())
    assert result.error.message == "Unknown error"


@pytest.mark.asyncio
async def test_slow_step_times_out(catalog):
    catalog.delays["list_locations"] = 1.0
    orchestrator = ProductUpsertOrchestrator(catalog, OrchestratorConfig(step_timeout_seconds=0.01))
    result = await orchestrator.upsert(shirt())

    assert not result.ok
    assert result.error.step == "resolve_location"
    assert result.error.timed_out
    assert "set_inventory_tracked" not in catalog.call_names


@pytest.mark.asyncio
async def test_location_limit_is_passed(catalog):
    orchestrator = ProductUpsertOrchestrator(catalog, OrchestratorConfig(location_limit=5))
    await orchestrator.upsert(shirt())
    assert ("list_locations", 5) in catalog.calls


@pytest.mark.asyncio
async def test_retry_with_idempotency_key_updates_created_product(catalog):
    store = IdempotencyStore()
    orchestrator = ProductUpsertOrchestrator(catalog, idempotency_store=store)
    catalog.failures["update_variant_price"] = CatalogCallError(transport_errors=["Internal error"])

    first = await orchestrator.upsert(shirt(), idempotency_key="form-1")
    assert not first.ok
    assert first.created

    del catalog.failures["update_variant_price"]
    catalog.calls.clear()
    second = await orchestrator.upsert(shirt(), idempotency_key="form-1")

    assert second.ok
    assert not second.created
    assert catalog.call_names[0] == "update_product"
    assert catalog.calls[0][1] == "gid://shopify/Product/1"


@pytest.mark.asyncio
async def test_new_idempotency_key_creates_again(catalog):
    orchestrator = ProductUpsertOrchestrator(catalog, idempotency_store=IdempotencyStore())
    await orchestrator.upsert(shirt(), idempotency_key="a")
    result = await orchestrator.upsert(shirt(), idempotency_key="b")
    assert result.created
    assert result.identity.product_id == "gid://shopify/Product/2"
