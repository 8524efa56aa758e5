"""
Readability scoring.
Flesch Reading Ease with a vowel-group syllable estimate.
"""

import re
from app.core.constants import DEFAULT_READABILITY_SCORE

VOWELS = "aeiouy"

def count_syllables(word: str) -> int:
    """Approximate the syllable count of a single word."""
    word = re.sub(r"[^a-z]", "", word.lower())
    if len(word) <= 3:
        return 1

    count = 0
    prev_was_vowel = False
    for char in word:
        is_vowel = char in VOWELS
        if is_vowel and not prev_was_vowel:
            count += 1
        prev_was_vowel = is_vowel

    # Silent e
    if word.endswith("e"):
        count -= 1

    return max(1, count)

def split_sentences(text: str) -> list:
    return [s for s in re.split(r"[.!?]+", text) if s.strip()]

def calculate_readability(text: str) -> float:
    """
    Calculate a Flesch Reading Ease score for the given text.

    Args:
        text: Raw text to score

    Returns:
        A score between 0 and 100, higher is easier to read. Text without
        sentences or with fewer than two words gets the neutral default.
    """
    sentences = split_sentences(text)
    words = text.split()

    if not sentences or len(words) < 2:
        return float(DEFAULT_READABILITY_SCORE)

    syllables = sum(count_syllables(word) for word in words)
    avg_sentence_length = len(words) / len(sentences)
    avg_syllables_per_word = syllables / len(words)

    score = 206.835 - (1.015 * avg_sentence_length) - (84.6 * avg_syllables_per_word)

    return max(0.0, min(100.0, score))
