"""Paper-and-ink themes for the reader, one dark and one light."""

from textual.theme import Theme

INK = "#ff6719"

PALETTES = {
    "postfeed-dark": {
        "background": "#111111",
        "surface": "#1b1b1b",
        "panel": "#262626",
        "muted": "#9a9a9a",
        "dark": True,
    },
    "postfeed-light": {
        "background": "#fbf8f3",
        "surface": "#f1ece4",
        "panel": "#e6dfd4",
        "muted": "#6b6258",
        "dark": False,
    },
}


def build_theme(name: str) -> Theme:
    """Build a registered theme from its palette; the orange ink is shared."""
    palette = PALETTES[name]
    return Theme(
        name=name,
        primary=INK,
        accent=INK,
        background=palette["background"],
        surface=palette["surface"],
        panel=palette["panel"],
        dark=palette["dark"],
        variables={
            "block-cursor-background": INK,
            "block-cursor-foreground": palette["background"],
            "footer-key-foreground": INK,
            "footer-description-foreground": palette["muted"],
            "markdown-h1-color": INK,
        },
    )


THEMES = [build_theme(name) for name in PALETTES]
DEFAULT_THEME = "postfeed-dark"
