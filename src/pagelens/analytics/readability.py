"""
Flesch Reading Ease over a flattened text blob.
"""

from __future__ import annotations

import re
from typing import List

from .analyzer import round_half_up

NEUTRAL_SCORE = 50

_SENTENCE_SPLIT = re.compile(r"[.!?]+")
_VOWEL_GROUP = re.compile(r"[aeiouy]+")


def split_sentences(text: str) -> List[str]:
    return [fragment for fragment in _SENTENCE_SPLIT.split(text) if fragment.strip()]


def count_syllables(word: str) -> int:
    """Vowel groups in the word, at least one."""
    return max(1, len(_VOWEL_GROUP.findall(word.lower())))


def flesch_reading_ease(text: str) -> int:
    """Score ``text`` on the 0-100 Flesch scale; 50 when there is nothing to measure."""
    sentences = split_sentences(text)
    words = text.split()
    if not sentences or not words:
        return NEUTRAL_SCORE

    avg_words_per_sentence = len(words) / len(sentences)
    avg_syllables_per_word = sum(count_syllables(word) for word in words) / len(words)

    score = 206.835 - (1.015 * avg_words_per_sentence) - (84.6 * avg_syllables_per_word)
    return round_half_up(max(0.0, min(100.0, score)))
