"""Typer CLI for Poolforge-Engine."""

import json
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from poolforge_engine.common.exceptions import PoolforgeError

app = typer.Typer(name="poolforge", help="Poolforge-Engine: entitlement pool derivation and resolution")
console = Console()


@app.callback()
def main(
    log_level: Optional[str] = typer.Option(None, help="Override POOLFORGE_LOG_LEVEL"),
):
    from poolforge_engine.common.config import get_settings
    from poolforge_engine.common.logging import setup_logging

    setup_logging(log_level or get_settings().log_level)


def _fail(exc: Exception) -> None:
    code = getattr(exc, "code", "INVALID_INPUT")
    console.print(f"[bold red]{code}[/bold red] — {escape(str(exc))}")
    raise typer.Exit(1)


def _load_subscription(path: Path):
    from poolforge_engine.pools.schemas import SubscriptionIn

    return SubscriptionIn.model_validate(json.loads(path.read_text())).to_subscription()


@app.command()
def quantity(
    value: str = typer.Argument(..., help="Quantity text, e.g. 10 or unlimited"),
    strict: bool = typer.Option(False, help="Reject unparseable input instead of using 0"),
):
    """Parse a pool quantity the way the pool factory does."""
    from poolforge_engine.common.config import get_settings
    from poolforge_engine.pools.quantity import get_quantity_policy

    settings = get_settings()
    policy = get_quantity_policy(
        "strict" if strict else settings.quantity_policy, settings.unlimited_token,
    )
    try:
        parsed = policy(value)
    except PoolforgeError as exc:
        _fail(exc)
    console.print(f"[bold]{parsed}[/bold]")


@app.command()
def resolve(
    catalog: Path = typer.Argument(..., exists=True, help="Catalog JSON file"),
    subscription: Path = typer.Argument(..., exists=True, help="Subscription JSON file"),
):
    """Resolve a subscription's owner and validate its products."""
    from poolforge_engine.catalog.store import load_catalog
    from poolforge_engine.resolution.resolver import ReferenceResolver

    try:
        store = load_catalog(catalog)
        sub = ReferenceResolver(store, store).resolve_subscription(_load_subscription(subscription))
    except (PoolforgeError, ValidationError, json.JSONDecodeError) as exc:
        _fail(exc)

    console.print(f"[bold green]RESOLVED[/bold green] — owner {sub.owner.key} ({sub.owner.id})")
    table = Table("Role", "Product ID", "UUID")
    table.add_row("product", sub.product.id, sub.product.uuid or "")
    if sub.derived_product is not None:
        table.add_row("derived", sub.derived_product.id, sub.derived_product.uuid or "")
    for pd in sub.provided_products:
        table.add_row("provided", pd.id, pd.uuid or "")
    for pd in sub.derived_provided_products:
        table.add_row("derived provided", pd.id, pd.uuid or "")
    console.print(table)


@app.command()
def derive(
    catalog: Path = typer.Argument(..., exists=True, help="Catalog JSON file"),
    subscription: Path = typer.Argument(..., exists=True, help="Subscription JSON file"),
    quantity: Optional[str] = typer.Option(None, help="Pool quantity (defaults to the subscription's)"),
):
    """Resolve a subscription and print the pool derived from it as JSON."""
    from poolforge_engine.catalog.store import load_catalog
    from poolforge_engine.pools.factory import PoolFactory
    from poolforge_engine.pools.schemas import PoolResponse
    from poolforge_engine.resolution.resolver import ReferenceResolver

    try:
        store = load_catalog(catalog)
        sub = ReferenceResolver(store, store).resolve_subscription(_load_subscription(subscription))
        pool = PoolFactory(store).create_pool_from_subscription(
            sub, sub.product.id, quantity if quantity is not None else sub.quantity,
        )
        store.create_pool(pool)
    except (PoolforgeError, ValidationError, json.JSONDecodeError) as exc:
        _fail(exc)

    typer.echo(PoolResponse.model_validate(pool).model_dump_json(indent=2))


@app.command()
def check(
    catalog: Path = typer.Argument(..., exists=True, help="Catalog JSON file"),
    subscription: Path = typer.Argument(..., exists=True, help="Subscription JSON file"),
    pool: Path = typer.Argument(..., exists=True, help="Existing pool JSON file"),
):
    """Report whether an existing pool must be regenerated for a subscription."""
    from poolforge_engine.catalog.store import load_catalog
    from poolforge_engine.pools.helper import PoolHelper
    from poolforge_engine.pools.schemas import PoolIn
    from poolforge_engine.resolution.resolver import ReferenceResolver

    try:
        store = load_catalog(catalog)
        sub = ReferenceResolver(store, store).resolve_subscription(_load_subscription(subscription))
        existing = PoolIn.model_validate(json.loads(pool.read_text())).to_pool()
        changed = PoolHelper(store, store).check_for_changed_products(existing, sub)
    except (PoolforgeError, ValidationError, json.JSONDecodeError) as exc:
        _fail(exc)

    if changed:
        console.print("[bold yellow]REGENERATE[/bold yellow] — product graph changed")
    else:
        console.print("[bold green]UNCHANGED[/bold green] — reconcile attributes in place")


if __name__ == "__main__":
    app()
