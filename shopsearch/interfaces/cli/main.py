"""
CLI Main - Typer-based command-line interface.

Usage:
    shopsearch search "sneakers" --sort price
    shopsearch suggest "snea"
    shopsearch recent
    shopsearch serve
"""

from __future__ import annotations

import asyncio
import logging

import typer
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from shopsearch.domains.search import SearchOutcome, SearchSession, SortOrder

app = typer.Typer(
    name="shopsearch",
    help="ShopSearch - Storefront product search",
    add_completion=False,
)
console = Console()


@app.callback()
def configure(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Configure logging for every command."""
    from shopsearch.config import get_settings

    level = "DEBUG" if verbose else get_settings().log_level
    logging.basicConfig(level=level, format="%(levelname)s: %(name)s: %(message)s")


@app.command()
def search(
    query: str = typer.Argument(..., help="Search query"),
    sort: SortOrder = typer.Option(SortOrder.RELEVANCE, "--sort", "-s", help="Result order"),
    limit: int = typer.Option(20, "--limit", "-n", help="Rows to display"),
) -> None:
    """Search products (local fuzzy match merged with backend search)."""
    asyncio.run(_search_async(query, sort, limit))


async def _search_async(query: str, sort: SortOrder, limit: int) -> None:
    """Async search implementation."""
    session, client = _create_session()

    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
            transient=True,
        ) as progress:
            task = progress.add_task("Loading catalog...", total=None)
            await session.open()
            progress.update(task, description="Searching...")
            outcome = await session.search(query, sort)

        _print_outcome(session, outcome, limit)
    finally:
        await session.close()
        await client.close()


def _print_outcome(session: SearchSession, outcome: SearchOutcome, limit: int) -> None:
    if outcome.remote_error:
        console.print(f"[yellow]Backend search unavailable, showing local matches:[/yellow] {outcome.remote_error}")

    if outcome.empty:
        console.print(f"\n[yellow]No products found for[/yellow] {outcome.query!r}")
        alternatives = session.did_you_mean()
        if alternatives:
            console.print(f"[dim]Did you mean:[/dim] {', '.join(alternatives)}")
        return

    table = Table(title=f"Results for {outcome.query!r} ({outcome.sort.value})")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Product", style="cyan")
    table.add_column("Category")
    table.add_column("Price", justify="right", style="green")
    table.add_column("Rating", justify="right")
    table.add_column("", style="magenta")

    for i, product in enumerate(outcome.products[:limit], 1):
        badges = []
        if session.is_in_cart(product.id):
            badges.append("in cart")
        if session.is_in_wishlist(product.id):
            badges.append("wishlisted")
        table.add_row(
            str(i),
            product.name,
            product.category or "",
            f"{product.price:.2f}",
            f"{product.rating:.1f}" if product.rating is not None else "-",
            ", ".join(badges),
        )

    console.print(table)
    console.print(
        f"[dim]{len(outcome.products)} results "
        f"(local={outcome.local_count}, remote={outcome.remote_count})[/dim]"
    )


@app.command()
def suggest(
    query: str = typer.Argument(..., help="Partial query"),
) -> None:
    """Show product and category suggestions."""
    asyncio.run(_suggest_async(query))


async def _suggest_async(query: str) -> None:
    session, client = _create_session()
    try:
        await session.open()
        result = session.suggestions(query)
    finally:
        await session.close()
        await client.close()

    if not result.products and not result.categories:
        console.print("[dim]No suggestions[/dim]")
        return
    for product in result.products:
        console.print(f"  [cyan]{product.name}[/cyan]")
    for category in result.categories:
        console.print(f"  [magenta]{category.name}[/magenta] [dim](category)[/dim]")


@app.command()
def recent(
    clear: bool = typer.Option(False, "--clear", help="Forget recent searches"),
) -> None:
    """List recent searches."""
    from shopsearch.config import get_settings
    from shopsearch.interfaces.wiring import create_recent_store

    store = create_recent_store(get_settings())
    if clear:
        store.clear()
        console.print("[green]Recent searches cleared[/green]")
        return

    items = store.items
    if not items:
        console.print("[dim]No recent searches[/dim]")
        return
    for i, item in enumerate(items, 1):
        console.print(f"  {i}. {item}")


@app.command()
def serve(
    host: str | None = typer.Option(None, "--host", "-h", help="Host to bind"),
    port: int | None = typer.Option(None, "--port", "-p", help="Port to bind"),
    reload: bool = typer.Option(False, "--reload", "-r", help="Enable auto-reload"),
) -> None:
    """Start the API server."""
    import uvicorn

    from shopsearch.config import get_settings

    settings = get_settings()
    host = host or settings.api_host
    port = port or settings.api_port

    console.print("\n[green]Starting ShopSearch API server[/green]")
    console.print(f"[dim]http://{host}:{port}[/dim]\n")

    uvicorn.run(
        "shopsearch.interfaces.api:create_app",
        host=host,
        port=port,
        reload=reload,
        factory=True,
    )


@app.command()
def version() -> None:
    """Show version information."""
    from shopsearch import __version__

    console.print(f"ShopSearch v{__version__}")


def _create_session():
    from shopsearch.config import get_settings
    from shopsearch.interfaces.wiring import create_client, create_session

    settings = get_settings()
    client = create_client(settings)
    return create_session(settings, client=client), client


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
