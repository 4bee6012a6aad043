"""Rich terminal display — post table and post detail."""

from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from postfeed.models import AccessTier, Post
from postfeed.present import access_label, build_document, build_summary
from postfeed.utils import time_ago, truncate

console = Console()

ACCESS_COLORS = {"Free": "bright_green", "Paid": "bright_yellow"}


def display_posts(posts: list[Post], show_subtitle: bool = True) -> int:
    """Display posts as a numbered table. Returns count of posts shown."""
    if not posts:
        console.print("[dim]No posts published yet.[/dim]")
        return 0

    table = Table(
        show_header=False,
        box=None,
        padding=(0, 1),
        expand=True,
    )
    table.add_column("#", style="dim", width=4, justify="right")
    table.add_column("Post", ratio=1)
    table.add_column("Access", width=6, justify="right")
    table.add_column("Time", style="dim", width=8, justify="right")

    for i, post in enumerate(posts):
        title = Text(post.title, style="bold bright_cyan")
        if show_subtitle and post.subtitle:
            title.append(f"\n{truncate(post.subtitle, 120)}", style="dim")

        label = access_label(post.audience)
        access = Text(label, style=ACCESS_COLORS[label])
        table.add_row(str(i + 1), title, access, time_ago(post.published_at))

    console.print(Panel(table, title="[bold]POSTS[/bold]", border_style="bright_cyan", padding=(0, 1)))
    return len(posts)


def display_post(post: Post) -> None:
    """Render a post body as Markdown followed by its summary panel."""
    console.print(Markdown(build_document(post)))
    console.print()

    summary = Table(show_header=False, box=None, padding=(0, 1))
    summary.add_column("Field", style="dim", justify="right")
    summary.add_column("Value")
    for label, value in build_summary(post):
        summary.add_row(label, value)

    color = "bright_green" if post.audience is AccessTier.OPEN else "bright_yellow"
    console.print(Panel(summary, title="[bold]DETAILS[/bold]", border_style=color, padding=(0, 1)))
