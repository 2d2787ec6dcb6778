"""
Pytest configuration and shared fixtures.
"""

import pytest

from md2slides import MarkdownConverter, PageRenderer

DEMO_MARKDOWN = """---
title: Demo
author: A. Writer
---
# Welcome
Hello there

---
Second Slide
More text
"""


@pytest.fixture
def demo_markdown() -> str:
    """The two-slide document with front matter."""
    return DEMO_MARKDOWN


@pytest.fixture
def converter() -> MarkdownConverter:
    return MarkdownConverter()


@pytest.fixture
def renderer() -> PageRenderer:
    """Renderer over the shipped templates."""
    return PageRenderer()


@pytest.fixture
def template_dir(tmp_path):
    """A writable template directory with placeholder assets and no page template."""
    for name in ("slides.css", "outline.css", "print.css", "slides.js"):
        (tmp_path / name).write_text(f"/* {name} */", encoding="utf-8")
    return tmp_path
