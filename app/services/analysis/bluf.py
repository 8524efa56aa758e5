"""
Bottom Line Up Front (BLUF) analysis.
Decides whether the text under a heading leads with the answer, and
scores a set of headings on that basis.
"""

import re
from typing import List
from app.core.constants import (
    MIN_DIRECT_ANSWER_LENGTH,
    MIN_CONCISE_SENTENCE_LENGTH,
    MAX_CONCISE_SENTENCE_LENGTH,
    FOLLOWING_CONTENT_MAX_CHARS,
)
from app.schemas.crawl import Heading, BlufAnalysis, DirectAnswer
from app.services.analysis.utils.score_utils import percentage

# Openers that state an answer. Checked in order, first match wins.
DIRECT_ANSWER_PATTERNS = [
    # "There are..." / "Here is..." introduce a topic rather than define one
    re.compile(r"^(?!(?:there|here)\b)[A-Z][^.!?]*\s+(is|are|was|were|means|refers to|describes|involves)\s+", re.IGNORECASE),
    re.compile(r"^(The|A|An)\s+\w+\s+(is|are|means|involves)", re.IGNORECASE),
    re.compile(r"^(Yes|No|Generally|Typically|Usually|Often|Sometimes),?\s+", re.IGNORECASE),
    re.compile(r"^(To|In order to)\s+\w+,?\s+", re.IGNORECASE),
    re.compile(r"^\d+[\s\w]*:"),
    re.compile(r"^(First|Second|Third|Finally|Lastly),?\s+", re.IGNORECASE),
]

def is_direct_answer(text: str) -> bool:
    """Check if a text span opens with a direct, citable answer."""
    if not text or len(text.strip()) < MIN_DIRECT_ANSWER_LENGTH:
        return False

    trimmed = text.strip()

    if any(pattern.search(trimmed) for pattern in DIRECT_ANSWER_PATTERNS):
        return True

    # A concise first sentence still reads as a statement
    first_sentence = re.split(r"[.!?]", trimmed)[0]
    return MIN_CONCISE_SENTENCE_LENGTH < len(first_sentence) < MAX_CONCISE_SENTENCE_LENGTH

def build_heading(level: int, text: str, following_content: str) -> Heading:
    """
    Build a Heading from a heading text and the content that follows it.

    Both the DOM and the rendered-text extractors reduce their input to this
    pair, so the direct-answer check is applied the same way for each.
    """
    return Heading(
        level=level,
        text=text,
        has_direct_answer=is_direct_answer(following_content),
        following_content=following_content[:FOLLOWING_CONTENT_MAX_CHARS],
    )

def build_bluf_analysis(headings: List[Heading]) -> BlufAnalysis:
    """Score headings by the share that are followed by a direct answer."""
    with_answers = [h for h in headings if h.has_direct_answer]
    return BlufAnalysis(
        score=percentage(len(with_answers), len(headings)),
        direct_answers=[DirectAnswer(heading=h.text, answer=h.following_content) for h in with_answers],
        total_headings=len(headings),
        headings_with_direct_answers=len(with_answers),
    )
