"""CLI entry point for unified dictionary search."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.text import Text

console = Console()

SOURCE_CHOICE = click.Choice(["AQELEI", "WARYAGHRI", "VERBS"], case_sensitive=False)


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _open_session(sources: tuple[str, ...] = ()):
    from unisearch.auth import AuthState
    from unisearch.config import get_api_token
    from unisearch.gateway import HttpDictionaryGateway
    from unisearch.models import Source
    from unisearch.session import SearchSession

    filters = None
    if sources:
        chosen = {Source.parse(s) for s in sources}
        filters = {s: s in chosen for s in Source}
    gateway = HttpDictionaryGateway()
    auth = AuthState(authenticated=get_api_token() is not None)
    return gateway, SearchSession(gateway, auth, filters=filters)


def _fail(message: str) -> None:
    console.print(Text(f"Error: {message}", style="red"))
    raise SystemExit(1)


@click.group()
@click.version_option(package_name="unisearch")
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging.")
def cli(verbose: bool):
    """unisearch - Search all dictionaries and verb tables at once."""
    _setup_logging(verbose)


# ---------------------------------------------------------------------------
# unisearch env
# ---------------------------------------------------------------------------


@cli.group(invoke_without_command=True)
@click.pass_context
def env(ctx):
    """Show or configure the backend connection.

    Run without arguments to see current status.
    Use `unisearch env set KEY value` to save a value to ~/.unisearch/.env.
    """
    if ctx.invoked_subcommand is not None:
        return

    from unisearch.config import PERSISTENT_ENV, check_env

    console.print("Configuration:")
    console.print()
    for var, value, is_default, info in check_env():
        if value is None:
            shown = Text("not set", style="red")
        else:
            shown = Text(value, style="dim" if is_default else "green")
            if is_default:
                shown.append(" (default)")
        console.print(Text(f"  {var}: ").append_text(shown))
        console.print(f"    {info['description']}", style="dim")

    console.print()
    console.print(f"Config file: {PERSISTENT_ENV}", style="dim")


@env.command("set")
@click.argument("key")
@click.argument("value")
def env_set(key: str, value: str):
    """Save a configuration value to ~/.unisearch/.env.

    KEY: one of UNISEARCH_API_URL, UNISEARCH_API_TOKEN, UNISEARCH_MAX_RESULTS, API_TIMEOUT
    VALUE: the value to store
    """
    from unisearch.config import VALID_KEYS, save_key

    key = key.upper()
    if key not in VALID_KEYS:
        console.print(f"[red]Unknown key: {key}[/red]")
        console.print(f"Valid keys: {', '.join(sorted(VALID_KEYS))}")
        raise SystemExit(1)

    try:
        path = save_key(key, value)
    except ValueError as e:
        _fail(str(e))
    console.print(f"Saved {key} to {path}")


# ---------------------------------------------------------------------------
# unisearch search / random / stats
# ---------------------------------------------------------------------------


@cli.command()
@click.argument("term")
@click.option("--source", "-s", "sources", multiple=True, type=SOURCE_CHOICE,
              help="Source to search (repeatable). Default: all dictionaries.")
@click.option("--limit", "-n", default=None, type=click.IntRange(min=1),
              help="Maximum number of results.")
def search(term: str, sources: tuple[str, ...], limit: Optional[int]):
    """Search entries across sources.

    TERM: word or translation to look up
    """
    from unisearch.renderer import render_results

    async def run():
        gateway, session = _open_session(sources)
        async with gateway:
            async with session:
                await session.perform_search(term, max_results=limit)
                await session.favorites.drain()
        return session

    try:
        session = asyncio.run(run())
    except Exception as e:
        _fail(str(e))
    if session.last_error is not None:
        _fail(f"search failed: {session.last_error}")
    render_results(
        session.results,
        summary=session.results_summary(),
        favorites=session.favorites.snapshot(),
    )


@cli.command()
@click.option("--source", "-s", "sources", multiple=True, type=SOURCE_CHOICE,
              help="Draw from these sources only (repeatable).")
def random(sources: tuple[str, ...]):
    """Show a random entry from one of the active sources."""
    from unisearch.renderer import render_results

    async def run():
        gateway, session = _open_session(sources)
        async with gateway:
            async with session:
                await session.get_random_entry()
                await session.favorites.drain()
        return session

    try:
        session = asyncio.run(run())
    except Exception as e:
        _fail(str(e))
    if session.last_error is not None:
        _fail(f"random entry failed: {session.last_error}")
    render_results(session.results, favorites=session.favorites.snapshot())


@cli.command()
def stats():
    """Show entry counts and entry types per source."""
    from unisearch.renderer import render_statistics

    async def run():
        gateway, session = _open_session()
        async with gateway:
            async with session:
                pass
        return session

    try:
        session = asyncio.run(run())
    except Exception as e:
        _fail(str(e))
    render_statistics(session.statistics)
