"""
Heading extraction.

Two extractors produce the same Heading list: one walks a parsed HTML
document, the other scans the markdown-like text returned by the rendering
proxy for client-rendered sites. Both hand (heading text, following text)
to build_heading so scoring is identical.
"""

import re
from dataclasses import dataclass, field
from typing import List
from bs4 import BeautifulSoup, Tag
from app.core.constants import (
    HEADING_TAGS,
    CONTENT_TAGS,
    FOLLOWING_CONTENT_SCAN_CHARS,
    FOLLOWING_CONTENT_MAX_CHARS,
    MIN_PARAGRAPH_LINE_LENGTH,
    RENDERED_CONTENT_MARKER,
)
from app.schemas.crawl import Heading
from app.services.analysis.bluf import build_heading

ATX_HEADING_PATTERN = re.compile(r"^(#{1,6})\s+(.+)$")
ATX_HEADING_START_PATTERN = re.compile(r"^#{1,6}\s")
SETEXT_H1_PATTERN = re.compile(r"^={3,}$")
SETEXT_H2_PATTERN = re.compile(r"^-{3,}$")
UNDERLINE_PATTERN = re.compile(r"^[-=]{3,}$")
MARKDOWN_CONTENT_PATTERN = re.compile(re.escape(RENDERED_CONTENT_MARKER) + r"\s*\n(.*)", re.IGNORECASE | re.DOTALL)


@dataclass
class RenderedContent:
    """Content parsed from the rendering proxy's text output."""
    headings: List[Heading] = field(default_factory=list)
    word_count: int = 0
    paragraph_count: int = 0


def _is_heading_tag(element: Tag) -> bool:
    return element.name in HEADING_TAGS

def get_following_content(heading: Tag) -> str:
    """
    Collect the text of the content elements that follow a heading.

    Walks the heading's element siblings until the next heading, stopping
    once enough text has been gathered to judge the opening statement.
    """
    parts = []
    char_count = 0
    sibling = heading.find_next_sibling()

    while sibling is not None and char_count < FOLLOWING_CONTENT_SCAN_CHARS:
        if _is_heading_tag(sibling):
            break

        if sibling.name in CONTENT_TAGS:
            text = sibling.get_text().strip()
            parts.append(text)
            char_count += len(text)

        sibling = sibling.find_next_sibling()

    return " ".join(parts).strip()

def extract_dom_headings(soup: BeautifulSoup) -> List[Heading]:
    """Extract h1-h6 headings in document order with their following content."""
    headings = []
    for element in soup.find_all(HEADING_TAGS):
        level = int(element.name[1])
        text = element.get_text().strip()
        headings.append(build_heading(level, text, get_following_content(element)))
    return headings

def get_following_lines_content(lines: List[str], start_index: int) -> str:
    """Join the non-empty lines after start_index up to the next heading."""
    following = []
    char_count = 0

    for line in lines[start_index + 1:]:
        if char_count >= FOLLOWING_CONTENT_MAX_CHARS:
            break
        stripped = line.strip()
        if ATX_HEADING_START_PATTERN.match(stripped) or UNDERLINE_PATTERN.match(stripped):
            break
        if stripped:
            following.append(stripped)
            char_count += len(stripped)

    return " ".join(following)[:FOLLOWING_CONTENT_MAX_CHARS]

def strip_rendered_preamble(text: str) -> str:
    """Drop the Title/URL Source metadata the rendering proxy puts before the content."""
    match = MARKDOWN_CONTENT_PATTERN.search(text)
    if match:
        return match.group(1)
    return text

def parse_rendered_text(text: str) -> RenderedContent:
    """
    Parse markdown-like text into headings, a word count and a paragraph count.

    Recognizes ATX headings (``# Title``) and setext headings (a line
    underlined with ``===`` or ``---``). Paragraphs are approximated by
    counting long lines that are neither headings nor underlines.
    """
    clean_text = strip_rendered_preamble(text)
    lines = clean_text.split("\n")
    result = RenderedContent()

    for index, line in enumerate(lines):
        stripped = line.strip()

        atx_match = ATX_HEADING_PATTERN.match(stripped)
        if atx_match:
            level = len(atx_match.group(1))
            following = get_following_lines_content(lines, index)
            result.headings.append(build_heading(level, atx_match.group(2).strip(), following))
            continue

        if stripped and index + 1 < len(lines):
            next_line = lines[index + 1].strip()
            setext_level = None
            if SETEXT_H1_PATTERN.match(next_line):
                setext_level = 1
            elif SETEXT_H2_PATTERN.match(next_line):
                setext_level = 2

            if setext_level:
                following = get_following_lines_content(lines, index + 1)
                result.headings.append(build_heading(setext_level, stripped, following))
                continue

        if len(stripped) > MIN_PARAGRAPH_LINE_LENGTH and not UNDERLINE_PATTERN.match(stripped):
            result.paragraph_count += 1

    result.word_count = len(clean_text.split())
    return result
