"""Command-line interface for the Shopify product admin."""

import asyncio
import json
from pathlib import Path
from typing import Optional
import typer
from rich.console import Console
from rich.table import Table

from .client import ShopifyAdminClient
from .config import AdminConfig
from .errors import CatalogCallError
from .mock_client import MockShopifyClient
from .models import UpsertResult
from .service import build_service
from .telemetry import configure_logging, init_metrics

app = typer.Typer(
    name="shopify-admin",
    help="Create, update, list and delete Shopify products"
)
console = Console()

SANDBOX_CONFIG = {
    "shopify": {
        "shop_domain": "sandbox.myshopify.com",
        "access_token": "shpat_sandbox",
    }
}


def load_config(config_path: str, sandbox: bool = False) -> AdminConfig:
    """Load configuration from JSON file."""
    config_file = Path(config_path)
    if not config_file.exists():
        if sandbox:
            return AdminConfig(**SANDBOX_CONFIG)
        console.print(f"[red]Error: Config file not found: {config_path}[/red]")
        raise typer.Exit(1)

    with open(config_file) as f:
        config_data = json.load(f)

    return AdminConfig(**config_data)


def _sandbox_client() -> MockShopifyClient:
    mock = MockShopifyClient()
    mock.add_product("Sample T-Shirt", price="19.99", quantity=10, description_html="<p>Soft cotton</p>")
    return mock


def _run(config: str, sandbox: bool, action):
    """Run an async action against a service built from the config."""
    cfg = load_config(config, sandbox)
    configure_logging(cfg.log_level)

    async def _main():
        async with ShopifyAdminClient(cfg, client=_sandbox_client() if sandbox else None) as client:
            return await action(build_service(cfg, client))

    try:
        return asyncio.run(_main())
    except CatalogCallError as exc:
        console.print(f"[red]✗ {exc.message}[/red]")
        raise typer.Exit(1)


def _report_upsert(result: UpsertResult) -> None:
    if result.ok:
        verb = "created" if result.created else "updated"
        console.print(f"[green]✓[/green] Product {verb}: {result.identity.product_id}")
        return

    error = result.error
    if error.fields:
        for field, problem in error.fields.items():
            console.print(f"[red]✗ {field}:[/red] {problem}")
    else:
        where = f" at step {error.step}" if error.step else ""
        console.print(f"[red]✗ Failed{where}:[/red] {error.message}")
    if result.completed_steps:
        console.print(f"[yellow]Completed before failure: {', '.join(result.completed_steps)}[/yellow]")
    raise typer.Exit(1)


@app.command()
def init(
    output: str = typer.Option("config.json", help="Output configuration file path")
):
    """Initialize a new configuration file with example values."""
    example_config = {
        "shopify": {
            "shop_domain": "your-store.myshopify.com",
            "access_token": "shpat_your_access_token_here",
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
        "log_level": "INFO",
        "idempotency_db": "idempotency.db"
    }

    output_path = Path(output)
    with open(output_path, 'w') as f:
        json.dump(example_config, f, indent=2)

    console.print(f"[green]✓[/green] Configuration file created: {output}")
    console.print("\n[yellow]⚠ Please edit the file and add your Shopify credentials![/yellow]")


@app.command()
def validate(
    config: str = typer.Option("config.json", help="Configuration file path"),
):
    """Validate configuration file."""
    try:
        cfg = load_config(config)
        console.print("[green]✓[/green] Configuration is valid!")
        console.print(f"\n[bold]Shop:[/bold] {cfg.shopify.shop_domain}")
        console.print(f"[bold]API version:[/bold] {cfg.shopify.api_version}")
        console.print(f"[bold]Step timeout:[/bold] {cfg.orchestrator.step_timeout_seconds}s")
    except typer.Exit:
        raise
    except Exception as e:
        console.print(f"[red]✗ Configuration error:[/red] {str(e)}")
        raise typer.Exit(1)


@app.command("list")
def list_products(
    config: str = typer.Option("config.json", help="Configuration file path"),
    limit: Optional[int] = typer.Option(None, help="Number of products to list"),
    sandbox: bool = typer.Option(False, help="Use the in-memory sandbox shop"),
):
    """List products with price and total quantity."""
    products = _run(config, sandbox, lambda service: service.list_products(limit))

    table = Table(title="Shopify Products")
    table.add_column("ID", style="cyan")
    table.add_column("Title", style="green")
    table.add_column("Price", justify="right", style="yellow")
    table.add_column("Quantity", justify="right", style="magenta")

    for product in products:
        table.add_row(
            product.legacy_id,
            product.title[:50] + "..." if len(product.title) > 50 else product.title,
            product.price,
            str(product.quantity),
        )

    console.print(table)


@app.command()
def show(
    product_id: str = typer.Argument(..., help="Product ID or GID"),
    config: str = typer.Option("config.json", help="Configuration file path"),
    sandbox: bool = typer.Option(False, help="Use the in-memory sandbox shop"),
):
    """Show the form values of a product."""
    try:
        form = _run(config, sandbox, lambda service: service.get_product_form(product_id))
    except LookupError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    console.print_json(json.dumps(form.model_dump(mode="json", by_alias=True)))


@app.command()
def create(
    title: str = typer.Option(..., help="Product title"),
    price: str = typer.Option(..., help="Variant price"),
    quantity: str = typer.Option(..., help="On-hand quantity at the default location"),
    description: str = typer.Option("", help="Description HTML"),
    idempotency_key: Optional[str] = typer.Option(None, help="Key that makes retries of this create safe"),
    config: str = typer.Option("config.json", help="Configuration file path"),
    sandbox: bool = typer.Option(False, help="Use the in-memory sandbox shop"),
):
    """Create a product and stock it at the default location."""
    form = {"title": title, "price": price, "quantity": quantity, "descriptionHtml": description}
    result = _run(config, sandbox, lambda service: service.save_product(form, idempotency_key=idempotency_key))
    _report_upsert(result)


@app.command()
def update(
    product_id: str = typer.Argument(..., help="Product ID or GID"),
    title: str = typer.Option(..., help="Product title"),
    price: str = typer.Option(..., help="Variant price"),
    quantity: str = typer.Option(..., help="On-hand quantity at the default location"),
    description: str = typer.Option("", help="Description HTML"),
    config: str = typer.Option("config.json", help="Configuration file path"),
    sandbox: bool = typer.Option(False, help="Use the in-memory sandbox shop"),
):
    """Update a product's details, price and quantity."""
    form = {"title": title, "price": price, "quantity": quantity, "descriptionHtml": description}
    result = _run(config, sandbox, lambda service: service.save_product(form, product_id=product_id))
    _report_upsert(result)


@app.command()
def delete(
    product_id: str = typer.Argument(..., help="Product ID or GID"),
    config: str = typer.Option("config.json", help="Configuration file path"),
    sandbox: bool = typer.Option(False, help="Use the in-memory sandbox shop"),
):
    """Delete a product."""
    result = _run(config, sandbox, lambda service: service.delete_product(product_id))
    if not result.ok:
        console.print(f"[red]✗ Delete failed:[/red] {result.error}")
        raise typer.Exit(1)
    console.print(f"[green]✓[/green] Deleted {result.deleted_product_id}")


@app.command()
def serve(
    config: str = typer.Option("config.json", help="Configuration file path"),
    host: str = typer.Option("0.0.0.0", help="Host to bind to"),
    port: int = typer.Option(8000, help="Port to bind to"),
    sandbox: bool = typer.Option(False, help="Use the in-memory sandbox shop"),
    metrics: bool = typer.Option(False, help="Export step duration metrics to the console"),
):
    """Start the admin HTTP server."""
    from .router import create_app
    import uvicorn

    cfg = load_config(config, sandbox)
    configure_logging(cfg.log_level)
    if metrics:
        init_metrics()
    admin_app = create_app(cfg, http_client=_sandbox_client() if sandbox else None)

    console.print(f"[green]Starting admin server on {host}:{port}[/green]")
    console.print(f"[blue]Products: http://{host}:{port}/admin/products[/blue]")

    uvicorn.run(admin_app, host=host, port=port)


if __name__ == "__main__":
    app()
