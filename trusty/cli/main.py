import asyncio
import json

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from trusty import __version__
from trusty.bootstrap import Trusty, build_store
from trusty.core.config import get_settings
from trusty.core.exceptions import TrustyError
from trusty.core.logging_config import configure_logging
from trusty.domain.rbac import IsAllowedRequest
from trusty.infrastructure.stores.sql_store import SqlDocumentStore

console = Console()


@click.group()
@click.version_option(version=__version__, prog_name="trusty")
def cli():
    """
    Trusty - multi-tenant authorization service

    Operator commands against the configured document store.
    """
    configure_logging(get_settings())


@cli.command("init-db")
def init_db():
    """Create the document table in DATABASE_URL"""
    settings = get_settings()
    store = build_store(settings)
    if not isinstance(store, SqlDocumentStore):
        console.print("[yellow]STORE_BACKEND is not 'sql'; nothing to initialize.[/yellow]")
        return

    async def _run():
        try:
            await store.db.init_schema()
        finally:
            await store.disconnect()

    asyncio.run(_run())
    console.print("[green]Database schema initialized.[/green]")


@cli.command()
def health():
    """Check that the document store is reachable"""
    settings = get_settings()

    async def _run() -> bool:
        store = build_store(settings)
        try:
            return await store.health_check()
        finally:
            await store.disconnect()

    healthy = asyncio.run(_run())
    table = Table(title="Health Check Results")
    table.add_column("Component", style="cyan")
    table.add_column("Status", style="green")
    style = "green" if healthy else "red"
    status = "healthy" if healthy else "unreachable"
    table.add_row(f"Store ({settings.STORE_BACKEND})", f"[{style}]{status}[/{style}]")
    console.print(table)
    if not healthy:
        raise SystemExit(1)


@cli.command("is-allowed")
@click.option("--user", "external_user_id", required=True, help="External user id")
@click.option("--tenant", required=True, help="Tenant id")
@click.option("--product", required=True, help="Product id")
@click.option("--resource", required=True, help="Resource name")
@click.option("--action", required=True, help="Action name")
@click.option("--namespace", default=None, help="Only resolve the user in this namespace")
def is_allowed(external_user_id, tenant, product, resource, action, namespace):
    """Evaluate an authorization query"""
    request = IsAllowedRequest(
        external_user_id=external_user_id,
        tenant=tenant,
        product=product,
        resource=resource,
        action=action,
    )

    async def _run():
        async with Trusty() as trusty:
            return await trusty.engine.is_allowed(request, namespace_id=namespace)

    try:
        result = asyncio.run(_run())
    except TrustyError as e:
        console.print(f"[red]Error ({e.status_code}): {e.message}[/red]")
        raise SystemExit(1)

    verdict = "[green]allowed[/green]" if result.result else "[red]denied[/red]"
    console.print(Panel.fit(
        f"{external_user_id} -> {request.permission} in tenant {tenant}: {verdict}",
        title="Access Decision"
    ))


@cli.command("user-info")
@click.argument("external_id")
def user_info(external_id: str):
    """Print the authorization view of a user as JSON"""

    async def _run():
        async with Trusty() as trusty:
            return await trusty.store.get_user_authorization_view(external_id)

    try:
        info = asyncio.run(_run())
    except TrustyError as e:
        console.print(f"[red]Error ({e.status_code}): {e.message}[/red]")
        raise SystemExit(1)

    console.print_json(json.dumps(info.model_dump(mode="json")))


if __name__ == "__main__":
    cli()
