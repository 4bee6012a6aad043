"""HTML to Markdown conversion for post bodies.

The converter walks the parsed tree and never fails on unknown markup:
tags it has no rule for are unwrapped and their text kept. Formatting
choices are fixed so the output is stable for identical input:

- bullets are ``*``, ordered items ``N.``
- code blocks are always fenced with backticks
- strong is ``**``, emphasis is ``*``
"""

import re

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import Comment, Declaration, Doctype, ProcessingInstruction

# Dropped together with their content
SKIP_TAGS = {"script", "style", "head", "template", "noscript"}

# Unwrapped but laid out as separate blocks
CONTAINER_TAGS = {
    "html", "body", "div", "section", "article", "main", "header", "footer",
    "aside", "nav", "figure", "figcaption", "details", "summary", "center",
    "p", "li", "dl", "dt", "dd", "address",
}

HEADING_TAGS = {"h1": 1, "h2": 2, "h3": 3, "h4": 4, "h5": 5, "h6": 6}

BLOCK_TAGS = CONTAINER_TAGS | set(HEADING_TAGS) | {
    "ul", "ol", "pre", "blockquote", "hr", "table",
}

_IGNORED_STRINGS = (Comment, Declaration, Doctype, ProcessingInstruction)

_WHITESPACE = re.compile(r"\s+")
_LINE_BREAKS = re.compile(r"\s*\n\s*")


def to_markdown(html: str | None) -> str:
    """Convert an HTML fragment into Markdown text."""
    if not html:
        return ""
    soup = BeautifulSoup(html, "html.parser")
    try:
        return "\n\n".join(_render_blocks(soup))
    except RecursionError:
        return _plain_text(soup)


def _plain_text(soup: BeautifulSoup) -> str:
    """Text content only, for trees nested too deeply to walk."""
    for tag in soup.find_all(SKIP_TAGS):
        tag.decompose()
    lines = (" ".join(line.split()) for line in soup.get_text("\n").splitlines())
    return "\n\n".join(line for line in lines if line)


# ── block level ───────────────────────────────────────────────────────────────


def _render_blocks(node: Tag) -> list[str]:
    """Render the children of `node` as a list of Markdown blocks."""
    blocks: list[str] = []
    inline: list[str] = []

    def flush() -> None:
        text = _finish_inline("".join(inline))
        inline.clear()
        if text:
            blocks.append(text)

    for child in node.children:
        if isinstance(child, _IGNORED_STRINGS):
            continue
        if isinstance(child, NavigableString):
            inline.append(_collapse(str(child)))
            continue
        if not isinstance(child, Tag) or child.name in SKIP_TAGS:
            continue
        if child.name in BLOCK_TAGS:
            flush()
            blocks.extend(_render_block(child))
        else:
            inline.append(_render_inline(child))
    flush()
    return blocks


def _render_block(tag: Tag) -> list[str]:
    name = tag.name
    if name in HEADING_TAGS:
        text = _inline_text(tag)
        return [f"{'#' * HEADING_TAGS[name]} {text}"] if text else []
    if name in ("ul", "ol"):
        rendered = _render_list(tag)
        return [rendered] if rendered else []
    if name == "pre":
        return [_render_pre(tag)]
    if name == "blockquote":
        inner = "\n\n".join(_render_blocks(tag))
        if not inner:
            return []
        return ["\n".join(f"> {line}" if line else ">" for line in inner.split("\n"))]
    if name == "hr":
        return ["---"]
    if name == "table":
        rendered = _render_table(tag)
        return [rendered] if rendered else []
    return _render_blocks(tag)


def _render_list(tag: Tag) -> str:
    ordered = tag.name == "ol"
    try:
        number = int(tag.get("start", 1))
    except (TypeError, ValueError):
        number = 1

    items = []
    for li in tag.find_all("li", recursive=False):
        marker = f"{number}." if ordered else "*"
        number += 1
        content = "\n".join(_render_blocks(li))
        lines = content.split("\n") if content else [""]
        rest = [f"    {line}" if line else "" for line in lines[1:]]
        items.append("\n".join([f"{marker} {lines[0]}".rstrip(), *rest]))
    return "\n".join(items)


def _render_pre(tag: Tag) -> str:
    code = tag.find("code")
    language = ""
    for cls in (code or tag).get("class") or []:
        if cls.startswith("language-"):
            language = cls[len("language-"):]
            break
    for br in tag.find_all("br"):
        br.replace_with("\n")
    text = tag.get_text().strip("\n")
    fence = "```"
    while fence in text:
        fence += "`"
    return f"{fence}{language}\n{text}\n{fence}"


def _render_table(tag: Tag) -> str:
    rows = []
    for tr in tag.find_all("tr"):
        # rows of nested tables are flattened into their enclosing cell
        if tr.find_parent("table") is not tag:
            continue
        cells = [
            _inline_text(cell).replace("|", "\\|")
            for cell in tr.find_all(["th", "td"], recursive=False)
        ]
        if cells:
            rows.append(cells)
    if not rows:
        return ""

    width = max(len(row) for row in rows)
    lines = []
    for i, row in enumerate(rows):
        row = row + [""] * (width - len(row))
        lines.append("| " + " | ".join(row) + " |")
        if i == 0:
            lines.append("| " + " | ".join(["---"] * width) + " |")
    return "\n".join(lines)


# ── inline level ──────────────────────────────────────────────────────────────


def _render_inline(node) -> str:
    if isinstance(node, _IGNORED_STRINGS):
        return ""
    if isinstance(node, NavigableString):
        return _collapse(str(node))
    if not isinstance(node, Tag) or node.name in SKIP_TAGS:
        return ""

    name = node.name
    if name == "br":
        return "\n"
    if name == "img":
        src = node.get("src")
        if not src:
            return ""
        alt = _collapse(node.get("alt") or "").strip()
        return f"![{alt}]({_destination(src)})"
    if name == "code":
        return _code_span(node.get_text())

    inner = _inline_children(node)
    if name in ("strong", "b"):
        return _wrap(inner, "**")
    if name in ("em", "i"):
        return _wrap(inner, "*")
    if name in ("s", "del", "strike"):
        return _wrap(inner, "~~")
    if name == "a":
        href = node.get("href")
        text = inner.strip()
        if not href or not text:
            return inner
        return _wrap(inner, "[", f"]({_destination(href)})")
    return inner


def _inline_children(node: Tag) -> str:
    """Render children inline; block children land on their own lines."""
    parts = []
    has_blocks = False
    for child in node.children:
        text = _render_inline(child)
        if isinstance(child, Tag) and child.name in BLOCK_TAGS:
            has_blocks = True
            text = f"\n{text.strip()}\n" if text.strip() else ""
        parts.append(text)
    inner = "".join(parts)
    if has_blocks:
        inner = _LINE_BREAKS.sub("\n", inner)
    return inner


def _inline_text(tag: Tag) -> str:
    """Flatten a tag to a single line of inline Markdown."""
    return _collapse(_inline_children(tag)).strip()


def _destination(url: str) -> str:
    """Link target, angle-bracketed when it holds spaces or parentheses."""
    if any(c.isspace() or c in "()<>" for c in url):
        return "<" + url.replace("<", "%3C").replace(">", "%3E") + ">"
    return url


def _wrap(inner: str, opening: str, closing: str | None = None) -> str:
    """Wrap `inner` in delimiters, keeping surrounding whitespace outside them."""
    stripped = inner.strip()
    if not stripped:
        return inner
    lead = inner[: len(inner) - len(inner.lstrip())]
    trail = inner[len(inner.rstrip()):]
    return f"{lead}{opening}{stripped}{closing if closing is not None else opening}{trail}"


def _code_span(text: str) -> str:
    text = _collapse(text)
    if not text.strip():
        return ""
    ticks = "`"
    while ticks in text:
        ticks += "`"
    pad = " " if text.startswith("`") or text.endswith("`") else ""
    return f"{ticks}{pad}{text}{pad}{ticks}"


def _collapse(text: str) -> str:
    return _WHITESPACE.sub(" ", text)


def _finish_inline(text: str) -> str:
    """Normalize an inline run into paragraph text; line breaks become hard breaks."""
    lines = [" ".join(line.split()) for line in text.split("\n")]
    while lines and not lines[0]:
        lines.pop(0)
    while lines and not lines[-1]:
        lines.pop()
    return "  \n".join(lines)
