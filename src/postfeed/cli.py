"""CLI entry point — Click command, flags, open-in-browser."""

import logging
import webbrowser

import click
from rich.console import Console
from rich.logging import RichHandler

from postfeed import config as cfg
from postfeed.cache import TtlCache
from postfeed.display import console, display_post, display_posts
from postfeed.errors import FetchError, HttpStatusError
from postfeed.fetcher import PostFetcher
from postfeed.present import build_document
from postfeed.store import FileStore

user_config = cfg.load()


def setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def build_fetcher() -> PostFetcher:
    """Fetcher backed by the on-disk cache."""
    return PostFetcher(TtlCache(FileStore()))


@click.command()
@click.argument("slug", required=False, default=None)
@click.option("--limit", "-l", default=None, type=int, help="Number of posts to list.")
@click.option("--no-subtitle", is_flag=True, help="Titles only, hide subtitles.")
@click.option("--no-cache", is_flag=True, help="Drop the cache and fetch fresh.")
@click.option("--open", "open_num", default=None, type=int, help="Open Nth post in browser.")
@click.option("--raw", is_flag=True, help="Print the post as plain Markdown.")
@click.option("--live", is_flag=True, help="Launch the interactive reader.")
@click.option("--verbose", "-v", is_flag=True, help="Log cache and HTTP activity.")
def main(
    slug: str | None,
    limit: int | None,
    no_subtitle: bool,
    no_cache: bool,
    open_num: int | None,
    raw: bool,
    live: bool,
    verbose: bool,
) -> None:
    """Read a publication's posts in your terminal."""
    setup_logging(verbose)
    limit = limit or user_config["limit"]
    show_subtitle = (not no_subtitle) and user_config["show_subtitle"]

    fetcher = build_fetcher()
    if no_cache:
        fetcher.invalidate_all()

    if live:
        from postfeed.app import run_live

        run_live(fetcher)
        return

    try:
        if slug:
            post = fetcher.fetch_item(slug)
        else:
            posts = fetcher.fetch_list()[:limit]
    except HttpStatusError as exc:
        if slug and exc.status == 404:
            console.print(f"[red]No post found: {slug}[/red]")
        else:
            console.print(f"[red]Request failed: {exc}[/red]")
        raise SystemExit(1)
    except FetchError as exc:
        console.print(f"[red]Could not load posts: {exc}[/red]")
        raise SystemExit(1)

    if slug:
        if raw:
            click.echo(build_document(post))
        else:
            display_post(post)
        return

    if open_num is not None:
        if 1 <= open_num <= len(posts):
            url = fetcher.post_url(posts[open_num - 1].slug)
            console.print(f"[dim]Opening post #{open_num} in browser…[/dim]")
            webbrowser.open(url)
        else:
            console.print(f"[red]Invalid post number: {open_num} (1-{len(posts)})[/red]")
        return

    display_posts(posts, show_subtitle)
