"""
md2slides - Convert a single markdown document into a self-contained HTML slide deck.

The document is split into slides on standalone ``---`` lines. An optional
front matter block at the very top (``---`` / ``title:`` / ``author:`` / ``---``)
sets the deck title and author. Each slide is converted with markdown-it-py and
the whole deck is rendered through a Jinja2 page template that bundles the
presentation styling and the keyboard navigation script.

Usage:
    uv run --with markdown-it-py,mdit-py-plugins,linkify-it-py,jinja2 python -m md2slides <input.md> [output.html]

If output path is not specified, uses the input filename with .html extension.

Slide conventions:
- A first line starting with ``#`` is the slide title and is not repeated in the body
- Any other first line doubles as the slide title and stays part of the body
- A slide that is only a heading renders the heading text as its body
- Slide ids are slugs of the slide titles (``slide-N`` when a title has no usable characters)
"""

import argparse
import re
import sys
import warnings
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from jinja2 import Environment, FileSystemLoader, StrictUndefined
from markdown_it import MarkdownIt
from markupsafe import Markup
from mdit_py_plugins.anchors import anchors_plugin

# ── Templates ────────────────────────────────────────────────────────────────
TEMPLATE_DIR = Path(__file__).resolve().parent / "templates"
PAGE_TEMPLATE = "page.html.j2"

# Asset files injected verbatim into the page, keyed by their template variable
ASSET_FILES = {
    "screen_css": "slides.css",
    "outline_css": "outline.css",
    "print_css": "print.css",
    "js": "slides.js",
}

SLIDE_ID_PREFIX = "slide-"

# ── Patterns ─────────────────────────────────────────────────────────────────
FRONT_MATTER_RE = re.compile(r"^---\s*\n(.*?)\n---\s*\n?", re.DOTALL)
SLIDE_SPLIT_RE = re.compile(r"^\s*---\s*$", re.MULTILINE)
NON_SLUG_RE = re.compile(r"[^a-z0-9]+")
ABSOLUTE_LINK_RE = re.compile(r"^(?:[a-z][a-z0-9+.-]*:|//)", re.IGNORECASE)

# ── Markdown engine options ──────────────────────────────────────────────────
MARKDOWN_OPTIONS = {
    "html": True,  # raw HTML passes through
    "linkify": True,  # bare URLs become links
    "typographer": True,  # smart quotes and dashes
}
MARKDOWN_RULES = ["table", "strikethrough", "linkify", "replacements", "smartquotes"]


# ── Data model ───────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Slide:
    """One slide: a (possibly empty) title and its rendered HTML body."""

    title: str
    body_html: str


@dataclass(frozen=True)
class Deck:
    """A parsed presentation. Slides are kept in document order."""

    title: str = ""
    author: str = ""
    slides: tuple[Slide, ...] = ()


# ── Markdown conversion ──────────────────────────────────────────────────────


def _render_link_open(self, tokens, idx, options, env):
    """Open absolute links in a new tab; relative links stay in the deck."""
    token = tokens[idx]
    if ABSOLUTE_LINK_RE.match(token.attrGet("href") or ""):
        token.attrSet("target", "_blank")
    return self.renderToken(tokens, idx, options, env)


class MarkdownConverter:
    """Markdown text → HTML fragment, backed by markdown-it-py."""

    def __init__(self):
        self.md = (
            MarkdownIt("commonmark", MARKDOWN_OPTIONS)
            .enable(MARKDOWN_RULES)
            .use(anchors_plugin, max_level=6)
        )
        self.md.add_render_rule("link_open", _render_link_open)

    def convert(self, text: str) -> str:
        trimmed = text.strip()
        if not trimmed:
            return ""
        return self.md.render(trimmed)


# ── Slugs ────────────────────────────────────────────────────────────────────


def slugify(text: str) -> str:
    """Lowercase *text* and collapse every run of non ``[a-z0-9]`` characters to one hyphen.

    >>> slugify("Hello, World!")
    'hello-world'
    """
    return NON_SLUG_RE.sub("-", text.lower()).strip("-")


# ── Front matter ─────────────────────────────────────────────────────────────


def parse_meta(block: str) -> tuple[str, str]:
    """Read ``title:`` and ``author:`` from a front matter block.

    Keys are case-insensitive, later lines win and anything else is ignored.
    """
    title = ""
    author = ""
    for line in block.split("\n"):
        line = line.strip()
        key = line[:7].lower()
        if key.startswith("title:"):
            title = line[6:].strip()
        if key == "author:":
            author = line[7:].strip()
    return title, author


def extract_front_matter(text: str) -> tuple[str, str, str]:
    """Split off an optional leading front matter block.

    Returns ``(title, author, body)``. Without a block, title and author are
    empty and the body is the whole (trimmed) text.
    """
    text = text.strip()
    match = FRONT_MATTER_RE.match(text)
    if not match:
        return "", "", text
    title, author = parse_meta(match.group(1))
    return title, author, text[match.end() :].strip()


# ── Slide splitting & building ───────────────────────────────────────────────


def split_slides(body: str) -> list[str]:
    """Split *body* on standalone ``---`` lines, dropping empty chunks."""
    chunks = []
    for part in SLIDE_SPLIT_RE.split(body):
        part = part.strip()
        if part:
            chunks.append(part)
    return chunks


def build_slide(chunk: str, converter: MarkdownConverter) -> Slide:
    """Build a slide from one chunk.

    A ``#`` heading on the first line becomes the title and is dropped from
    the body. Any other first line is used as the title *and* kept in the
    body. If the body renders to nothing, the title is rendered instead.
    """
    lines = chunk.split("\n")
    head = lines[0].strip()
    rest = lines[1:]

    title = head
    content_lines = rest
    if head.startswith("#"):
        title = head.lstrip("# ").strip()
    elif head:
        content_lines = lines

    body_html = converter.convert("\n".join(content_lines))
    if not body_html.strip():
        body_html = converter.convert(title)

    return Slide(title=title, body_html=body_html)


# ── Deck assembly ────────────────────────────────────────────────────────────


def parse_deck(text: str, converter: Optional[MarkdownConverter] = None) -> Deck:
    """Parse a whole markdown document into a :class:`Deck`."""
    if converter is None:
        converter = MarkdownConverter()

    text = text.replace("\r\n", "\n")
    title, author, body = extract_front_matter(text)

    slides = tuple(build_slide(chunk, converter) for chunk in split_slides(body))

    if not title and slides:
        title = slides[0].title

    return Deck(title=title, author=author, slides=slides)


# ── Page rendering ───────────────────────────────────────────────────────────


def slide_id(slide: Slide, index: int) -> str:
    """Anchor id for the slide at 0-based *index*.

    Duplicate titles give duplicate ids; only empty slugs fall back to position.
    """
    return slugify(slide.title) or f"{SLIDE_ID_PREFIX}{index + 1}"


def build_page_data(deck: Deck, assets: dict[str, str]) -> dict:
    """Map a deck and its verbatim assets to the page template variables."""
    data = {
        "title": deck.title,
        "author": deck.author,
        "slides": [
            {
                "id": slide_id(slide, i),
                "title": slide.title,
                "body": Markup(slide.body_html),
                "current": i == 0,
            }
            for i, slide in enumerate(deck.slides)
        ],
    }
    for name, content in assets.items():
        data[name] = Markup(content)
    return data


class PageRenderer:
    """Renders page data through the Jinja2 page template.

    Undefined template variables raise instead of rendering empty, so a
    template that does not match the page data fails the run.
    """

    def __init__(self, template_dir: Path = TEMPLATE_DIR):
        self.template_dir = Path(template_dir)
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=True,
            undefined=StrictUndefined,
            keep_trailing_newline=True,
        )
        self.assets = {
            name: (self.template_dir / filename).read_text(encoding="utf-8")
            for name, filename in ASSET_FILES.items()
        }

    def render(self, page_data: dict) -> str:
        template = self.env.get_template(PAGE_TEMPLATE)
        return template.render(**page_data)


def render_page(deck: Deck, renderer: Optional[PageRenderer] = None) -> str:
    """Render *deck* to the final HTML page."""
    if renderer is None:
        renderer = PageRenderer()
    return renderer.render(build_page_data(deck, renderer.assets))


def convert(text: str) -> tuple[Deck, str]:
    """Parse markdown *text* and render it. Returns the deck and the page HTML."""
    deck = parse_deck(text)
    if not deck.slides:
        warnings.warn(
            "No slides found in markdown. The page will render without slides."
        )
    return deck, render_page(deck)


# ── CLI entry point ──────────────────────────────────────────────────────────


def default_output_path(input_path: Path) -> Path:
    """``talk.md`` → ``talk.html``; a suffix-less name just gains ``.html``."""
    if input_path.suffix:
        return input_path.with_suffix(".html")
    return input_path.with_name(input_path.name + ".html")


def main(argv: Optional[list[str]] = None):
    parser = argparse.ArgumentParser(
        description="Convert a markdown document to a self-contained HTML slide deck."
    )
    parser.add_argument("input", help="Input markdown file path")
    parser.add_argument(
        "output", nargs="?", help="Output HTML file path (default: same name as input)"
    )

    args = parser.parse_args(argv)

    input_path = Path(args.input)
    if not input_path.exists():
        print(f"Error: Input file not found: {input_path}", file=sys.stderr)
        sys.exit(1)

    if args.output:
        output_path = Path(args.output)
    else:
        output_path = default_output_path(input_path)

    print(f"Converting: {input_path}")
    print(f"Output: {output_path}")

    markdown_text = input_path.read_text(encoding="utf-8-sig")
    deck, html = convert(markdown_text)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(html, encoding="utf-8")

    print(f"Done! Created {output_path} ({len(deck.slides)} slides)")


if __name__ == "__main__":
    main()
