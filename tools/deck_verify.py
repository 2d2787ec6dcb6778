#!/usr/bin/env python3
"""
HTML Slide Deck Verifier

Checks every slide section in a page rendered by md2slides. Slide ids are
slugs of the slide titles, so two slides with the same title share an anchor
and navigation can only reach the first one. This tool finds those, along
with slides that render no content and pages without exactly one initially
active slide.

Usage:
    python tools/deck_verify.py path/to/deck.html
    python tools/deck_verify.py path/to/directory/  # checks all .html files
"""

import sys
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path

from bs4 import BeautifulSoup, Tag

# Media elements count as content even without any text
CONTENT_TAGS = ["img", "svg", "video", "audio", "iframe", "object", "embed", "canvas"]


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------


@dataclass
class SlideIssue:
    """A detected problem on a single slide."""

    kind: str  # MISSING-ID, DUPLICATE-ID, EMPTY-BODY
    detail: str


@dataclass
class SlideReport:
    """Verification report for a single slide."""

    slide_num: int
    slide_id: str
    title: str
    current: bool
    issues: list[SlideIssue] = field(default_factory=list)

    @property
    def has_issues(self) -> bool:
        return len(self.issues) > 0


@dataclass
class DeckReport:
    """Verification report for an entire deck."""

    path: str
    total_slides: int
    current_slides: int = 0
    slides: list[SlideReport] = field(default_factory=list)

    @property
    def total_issues(self) -> int:
        return sum(len(s.issues) for s in self.slides) + int(self.bad_current)

    @property
    def slides_with_issues(self) -> int:
        return sum(1 for s in self.slides if s.has_issues)

    @property
    def bad_current(self) -> bool:
        """A non-empty deck must start on exactly one slide."""
        if self.total_slides == 0:
            return self.current_slides != 0
        return self.current_slides != 1


# ---------------------------------------------------------------------------
# Slide checks
# ---------------------------------------------------------------------------


def _has_content(section: Tag) -> bool:
    if section.get_text(strip=True):
        return True
    return section.find(CONTENT_TAGS) is not None


def verify_slide(section: Tag, slide_num: int, id_counts: Counter) -> SlideReport:
    """Check one ``section.slide`` element."""
    slide_id = section.get("id", "")
    report = SlideReport(
        slide_num=slide_num,
        slide_id=slide_id,
        title=section.get("data-title", ""),
        current="current" in section.get("class", []),
    )

    if not slide_id:
        report.issues.append(SlideIssue("MISSING-ID", "slide has no id attribute"))
    elif id_counts[slide_id] > 1:
        report.issues.append(
            SlideIssue(
                "DUPLICATE-ID",
                f'id "{slide_id}" is used by {id_counts[slide_id]} slides',
            )
        )

    if not _has_content(section):
        report.issues.append(SlideIssue("EMPTY-BODY", "slide renders no content"))

    return report


def verify_page(html: str, path: str = "<page>") -> DeckReport:
    """Verify all slides in a rendered page."""
    soup = BeautifulSoup(html, "lxml")
    sections = soup.find_all("section", class_="slide")
    id_counts = Counter(s.get("id", "") for s in sections)

    report = DeckReport(path=path, total_slides=len(sections))

    for i, section in enumerate(sections):
        slide_report = verify_slide(section, i + 1, id_counts)
        if slide_report.current:
            report.current_slides += 1
        report.slides.append(slide_report)

    return report


def verify_deck(path: str) -> DeckReport:
    """Verify a rendered deck file."""
    html = Path(path).read_text(encoding="utf-8")
    return verify_page(html, path)


# ---------------------------------------------------------------------------
# Report formatting
# ---------------------------------------------------------------------------


def format_report(report: DeckReport, verbose: bool = False) -> str:
    """Format a deck report as human-readable text."""
    lines = []
    name = Path(report.path).stem
    lines.append(f"\n{'=' * 70}")
    lines.append(f"{name}")
    lines.append(f"{'=' * 70}")

    if report.total_issues == 0:
        lines.append(f"  ALL CLEAN - {report.total_slides} slides, no issues detected")
        if verbose:
            for sr in report.slides:
                lines.append(f"\n  Slide {sr.slide_num} #{sr.slide_id}: CLEAN")
        return "\n".join(lines)

    lines.append(
        f"  {report.total_issues} issue(s) across "
        f"{report.slides_with_issues}/{report.total_slides} slides"
    )
    if report.bad_current:
        lines.append(
            f"  [CURRENT] {report.current_slides} slides marked as initially active"
        )

    for sr in report.slides:
        if not sr.has_issues:
            if verbose:
                lines.append(f"\n  Slide {sr.slide_num} #{sr.slide_id}: CLEAN")
            continue

        lines.append(f"\n  Slide {sr.slide_num} #{sr.slide_id}: {len(sr.issues)} issue(s)")
        if sr.title:
            lines.append(f'      "{sr.title}"')
        for issue in sr.issues:
            lines.append(f"    [{issue.kind}] {issue.detail}")

    return "\n".join(lines)


def main():
    """CLI entry point."""
    if len(sys.argv) < 2:
        print("Usage: python tools/deck_verify.py <file_or_dir> [--verbose]")
        sys.exit(1)

    path = Path(sys.argv[1])
    verbose = "--verbose" in sys.argv

    if path.is_dir():
        html_files = sorted(path.glob("*.html"))
    else:
        html_files = [path]

    if not html_files or not html_files[0].exists():
        print(f"No .html files found at {path}")
        sys.exit(1)

    total_issues = 0
    total_slides = 0
    total_clean = 0

    for html_file in html_files:
        report = verify_deck(str(html_file))
        print(format_report(report, verbose))
        total_issues += report.total_issues
        total_slides += report.total_slides
        total_clean += report.total_slides - report.slides_with_issues

    print(f"\n{'=' * 70}")
    print(f"SUMMARY: {total_issues} issues across {total_slides} slides")
    print(f"  Clean slides: {total_clean}/{total_slides}")
    print(f"{'=' * 70}")

    if total_issues:
        sys.exit(1)


if __name__ == "__main__":
    main()
