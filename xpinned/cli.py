"""Command-line interface for xpinned."""

import asyncio
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from xpinned import FetcherConfig, PinnedTweetFetcher, save_json, to_json, __version__
from xpinned.cache.sqlite_cache import SQLiteTokenCache
from xpinned.config import CacheBackend, LogFormat
from xpinned.exceptions import PinnedTweetError

app = typer.Typer(
    name="xpinned",
    help="Fetch pinned tweets of X/Twitter users",
    add_completion=False,
)
token_app = typer.Typer(help="Manage the persisted guest token")
app.add_typer(token_app, name="token")

# stdout carries the JSON records only
console = Console(stderr=True)


def version_callback(value: bool):
    if value:
        console.print(f"xpinned version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
):
    """xpinned - X/Twitter pinned tweet fetcher."""
    pass


@app.command()
def fetch(
    user_ids: list[int] = typer.Argument(..., help="Numeric X/Twitter user ids"),
    pretty: bool = typer.Option(False, "--pretty", help="Pretty print JSON output"),
    retry: Optional[int] = typer.Option(
        None, "--retry", min=0, help="Number of times to retry on HTTP errors"
    ),
    user_agent: Optional[str] = typer.Option(None, "--user-agent", help="User-Agent header"),
    bearer_token: Optional[str] = typer.Option(None, "--bearer-token", help="Application bearer token"),
    timeout: Optional[float] = typer.Option(None, "--timeout", help="Per-request timeout in seconds"),
    keep_going: bool = typer.Option(
        False, "--keep-going", "-k", help="Print successes even if some users fail"
    ),
    cache: Optional[CacheBackend] = typer.Option(None, "--cache", help="Guest token cache backend"),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Write JSON to this file instead of stdout"
    ),
    json_logs: bool = typer.Option(False, "--json-logs", help="Emit logs as JSON lines"),
):
    """Fetch the pinned tweet of each user and print them as a JSON array."""
    overrides = {
        "max_retries": retry,
        "user_agent": user_agent,
        "bearer_token": bearer_token,
        "timeout_seconds": timeout,
        "cache_backend": cache,
        "fail_fast": False if keep_going else None,
        "log_format": LogFormat.JSON if json_logs else None,
    }
    config = FetcherConfig(**{k: v for k, v in overrides.items() if v is not None})

    async def run():
        async with PinnedTweetFetcher(config) as fetcher:
            return await fetcher.fetch_many(user_ids)

    try:
        report = asyncio.run(run())
    except PinnedTweetError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    if output:
        save_json(report.tweets, output, pretty=pretty)
        console.print(f"[dim]Saved {len(report.tweets)} pinned tweets to {output}[/dim]")
    else:
        typer.echo(to_json(report.tweets, pretty=pretty))

    for failure in report.failures:
        console.print(
            f"[red]✗[/red] user {failure.user_id}: {failure.error_type}: {failure.message}"
        )
    if not report.success:
        raise typer.Exit(1)


@token_app.command("clear")
def token_clear():
    """Delete the guest token persisted by the sqlite cache backend."""
    config = FetcherConfig()

    async def run():
        async with SQLiteTokenCache(config.sqlite_path, config.token_ttl_seconds) as cache:
            await cache.clear()

    if not Path(config.sqlite_path).exists():
        console.print("No persisted guest token")
        return

    asyncio.run(run())
    console.print("[green]✓[/green] Cleared persisted guest token")


if __name__ == "__main__":
    app()
