"""Textual TUI app — post list with a Markdown reading pane."""

import webbrowser
from datetime import datetime

from rich.text import Text
from textual import work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, VerticalScroll
from textual.reactive import reactive
from textual.widgets import DataTable, Footer, Markdown, Static

from postfeed.errors import FetchError
from postfeed.fetcher import PostFetcher
from postfeed.models import Post
from postfeed.present import access_label, build_document, build_summary
from postfeed.theme import DEFAULT_THEME, THEMES
from postfeed.utils import time_ago


class StatusBar(Static):
    """Bottom status bar with post count, last refresh time and errors."""

    post_count: reactive[int] = reactive(0)
    last_refresh: reactive[str] = reactive("—")
    error: reactive[str] = reactive("")

    def render(self) -> str:
        if self.error:
            return f" [red]{self.error}[/red] | r:Retry | q:Quit"
        return (
            f" {self.post_count} posts"
            f" | Last: {self.last_refresh}"
            f" | r:Refresh | enter:Read | o:Open | q:Quit"
        )


def summary_line(post: Post) -> str:
    """One-line metadata strip shown above a post body."""
    return " · ".join(f"{label}: {value}" for label, value in build_summary(post)[:7])


class PostfeedApp(App):
    """Interactive reader: pick a post on the left, read it on the right."""

    TITLE = "postfeed"

    CSS = """
    #post-table { width: 2fr; }
    #reader { width: 3fr; padding: 0 1; }
    #summary { color: $text-muted; margin-bottom: 1; }
    #status-bar { height: 1; dock: bottom; background: $surface; }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("r", "refresh", "Refresh"),
        Binding("o", "open_post", "Open"),
        Binding("t", "toggle_theme", "Theme"),
    ]

    def __init__(self, fetcher: PostFetcher) -> None:
        super().__init__()
        self.fetcher = fetcher
        self.posts: list[Post] = []
        self.current: Post | None = None
        for theme in THEMES:
            self.register_theme(theme)
        self.theme = DEFAULT_THEME

    def compose(self) -> ComposeResult:
        with Horizontal():
            yield DataTable(id="post-table", cursor_type="row")
            with VerticalScroll(id="reader"):
                yield Static("", id="summary")
                yield Markdown("", id="document")
        yield StatusBar(id="status-bar")
        yield Footer()

    def on_mount(self) -> None:
        table = self.query_one("#post-table", DataTable)
        table.add_columns("Title", "Access", "Time")
        self._load_posts()

    @work(thread=True, exclusive=True, group="list")
    def _load_posts(self) -> None:
        try:
            posts = self.fetcher.fetch_list()
        except FetchError as exc:
            self.call_from_thread(self._show_error, str(exc))
            return
        self.call_from_thread(self._ingest, posts)

    @work(thread=True, exclusive=True, group="item")
    def _load_post(self, slug: str) -> None:
        try:
            post = self.fetcher.fetch_item(slug)
        except FetchError as exc:
            self.call_from_thread(self._show_error, str(exc))
            return
        self.call_from_thread(self._show_post, post)

    def _ingest(self, posts: list[Post]) -> None:
        self.posts = posts
        table = self.query_one("#post-table", DataTable)
        table.clear()
        for post in posts:
            table.add_row(
                Text(post.title, style="bold"),
                access_label(post.audience),
                time_ago(post.published_at),
                key=post.slug,
            )
        status = self.query_one("#status-bar", StatusBar)
        status.error = ""
        status.post_count = len(posts)
        status.last_refresh = datetime.now().strftime("%H:%M:%S")

    async def _show_post(self, post: Post) -> None:
        self.current = post
        self.query_one("#summary", Static).update(summary_line(post))
        await self.query_one("#document", Markdown).update(build_document(post))
        self.query_one("#status-bar", StatusBar).error = ""

    def _show_error(self, message: str) -> None:
        self.query_one("#status-bar", StatusBar).error = message

    def on_data_table_row_selected(self, event: DataTable.RowSelected) -> None:
        """Load the selected post into the reading pane."""
        slug = str(event.row_key.value)
        if slug:
            self._load_post(slug)

    def action_refresh(self) -> None:
        """Drop the cache and refetch the post list."""
        self.fetcher.invalidate_all()
        self._load_posts()

    def action_open_post(self) -> None:
        """Open the post being read in the browser."""
        if self.current is not None:
            webbrowser.open(self.fetcher.post_url(self.current.slug))

    def action_toggle_theme(self) -> None:
        names = [theme.name for theme in THEMES]
        self.theme = names[(names.index(self.theme) + 1) % len(names)]


def run_live(fetcher: PostFetcher) -> None:
    """Entry point called from cli.py when --live is used."""
    PostfeedApp(fetcher).run()
