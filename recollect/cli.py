import asyncio

import click
from rich.console import Console
from rich.table import Table

from recollect.config import Config
from recollect.logging import configure_logging, uvicorn_log_config
from recollect.utils import truncate

console = Console()


@click.group(invoke_without_command=True)
@click.pass_context
def main(ctx):
    """recollect - hybrid document and web search"""
    ctx.ensure_object(dict)
    try:
        ctx.obj["config"] = Config()
    except ValueError as e:
        ctx.obj["config_error"] = str(e)

    if ctx.invoked_subcommand is None:
        console.print("[bold]recollect[/bold] - hybrid document and web search\n")
        console.print("Run [cyan]recollect serve[/cyan] to start the server.")
        console.print("\nUse [cyan]recollect --help[/cyan] for all commands.")


def _require_config(ctx) -> Config:
    if "config_error" in ctx.obj:
        console.print(f"[red]Error:[/red] {ctx.obj['config_error']}")
        raise SystemExit(1)
    return ctx.obj["config"]


@main.command()
@click.pass_context
def status(ctx):
    """Show configuration and which sources are available."""
    config = _require_config(ctx)

    console.print("[bold]recollect status[/bold]")
    console.print()
    console.print(f"Persistence: [cyan]{config.persistence}[/cyan]")
    if config.persistence == "sqlite":
        console.print(f"Database: [cyan]{config.db_path}[/cyan]")
    docs = config.document_api_url or "[dim]not configured (RECOLLECT_DOCUMENT_API_URL)[/dim]"
    web = "[green]enabled[/green]" if config.exa_api_key else "[dim]not configured (EXA_API_KEY)[/dim]"
    console.print(f"Document API: {docs}")
    console.print(f"Web search: {web}")
    console.print(f"Default limits: {config.max_document_results} documents, {config.max_web_results} web")


@main.command()
@click.option("--host", default="127.0.0.1", help="Host to bind to")
@click.option("--port", default=8000, help="Port to bind to")
@click.option("--reload", is_flag=True, help="Enable auto-reload for development")
@click.pass_context
def serve(ctx, host: str, port: int, reload: bool):
    """Start the recollect API server."""
    config = _require_config(ctx)

    import uvicorn

    console.print(f"[bold]recollect server[/bold] starting on http://{host}:{port}")
    console.print("[dim]Press Ctrl+C to stop[/dim]")
    console.print()

    uvicorn.run(
        "recollect.server.app:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        log_config=uvicorn_log_config(config.log_json),
    )


@main.command()
@click.argument("query")
@click.option("--no-web", is_flag=True, help="Search documents only")
@click.pass_context
def search(ctx, query: str, no_web: bool):
    """Run one hybrid search and print the ranked results."""
    config = _require_config(ctx)
    configure_logging(config.log_level, config.log_json)
    asyncio.run(_search(config, query, include_web=False if no_web else None))


async def _search(config: Config, query: str, include_web: bool | None):
    from recollect.server.runtime import Runtime

    runtime = Runtime(config)
    await runtime.connect()
    try:
        result = await runtime.search.search(query, include_web=include_web)
    finally:
        await runtime.close()

    if not result.combined_results:
        console.print(f"[dim]No results for {query!r}[/dim]")
        return

    table = Table(title=f"{result.total_results} results in {result.search_time} ms")
    table.add_column("Score", justify="right")
    table.add_column("Source")
    table.add_column("Title")
    table.add_column("Location", overflow="fold")
    for item in result.combined_results:
        location = item.url if item.source == "web" else item.id
        table.add_row(f"{item.relevance_score:.2f}", item.source, truncate(item.title, 60), location)
    console.print(table)
