"""
Transcript cleaning.

Turns auto-generated caption text (no punctuation, no casing, stutters and
filler words) into readable prose. The cleaner is a fixed, ordered list of
string -> string passes; order matters because later passes rely on the
spacing and punctuation produced by earlier ones.

Cleaning is not guaranteed to be idempotent: re-running it over its own
output can change casing next to acronyms.
"""

from __future__ import annotations

import re
from typing import Callable, Iterable, List, Tuple

from .entities import decode_html_entities

Pass = Callable[[str], str]


# ----------------------------
# Patterns
# ----------------------------

_WHITESPACE_RE = re.compile(r"\s+")

_BRACKET_TS_RE = re.compile(r"\[\d+:\d+\]")
_PAREN_TS_RE = re.compile(r"\(\d+:\d+\)")
_BARE_TS_RE = re.compile(r"\d+:\d+")

# "the the", "cat, cat", "so. so so" -> single occurrence
_STUTTER_RE = re.compile(r"\b(\w+)(?:[.,!?]?\s+\1\b)+", flags=re.IGNORECASE)

FILLER_WORDS = (
    "um",
    "uh",
    "like",
    "so",
    "you know",
    "i mean",
    "basically",
    "actually",
    "literally",
    "right",
    "okay",
    "well",
)
_FILLER_RE = re.compile(
    r"\b(" + "|".join(re.escape(w) for w in FILLER_WORDS) + r")\b\s*",
    flags=re.IGNORECASE,
)

_ACRONYM_RE = re.compile(r"\b([A-Z])\.\s*([A-Z])\.\s*([A-Z])\.")
_REPEATED_PUNCT_RE = re.compile(r"([.,!?])[.,!?]+")
_PUNCT_SPACING_RE = re.compile(r"\s*([.,!?])\s*")
_MISSING_BREAK_RE = re.compile(r"(\w)\s+([A-Z])")
_PRONOUN_I_RE = re.compile(r"\bi\b")
_SENTENCE_SPLIT_RE = re.compile(r"(?<=[.!?])\s+")
_ALL_CAPS_RE = re.compile(r"^[A-Z]+$")
_PERIOD_SPACING_RE = re.compile(r"\.\s+")
_MULTI_PERIOD_RE = re.compile(r"\.{2,}")


# ----------------------------
# Passes
# ----------------------------

def collapse_whitespace(text: str) -> str:
    return _WHITESPACE_RE.sub(" ", text)


def strip_timestamps(text: str) -> str:
    """Remove [m:s] and (m:s) markers first, then any bare m:s left over."""
    text = _BRACKET_TS_RE.sub("", text)
    text = _PAREN_TS_RE.sub("", text)
    text = _BARE_TS_RE.sub("", text)
    return _WHITESPACE_RE.sub(" ", text)


def collapse_stutter(text: str) -> str:
    return _STUTTER_RE.sub(r"\1", text)


def remove_fillers(text: str) -> str:
    return _FILLER_RE.sub("", text)


def join_acronyms(text: str) -> str:
    """M. C. P. -> MCP"""
    return _ACRONYM_RE.sub(r"\1\2\3", text)


def collapse_repeated_punctuation(text: str) -> str:
    return _REPEATED_PUNCT_RE.sub(r"\1", text)


def normalize_punctuation_spacing(text: str) -> str:
    return _PUNCT_SPACING_RE.sub(r"\1 ", text)


def insert_sentence_breaks(text: str) -> str:
    """
    Best-effort sentence splitting: a word followed directly by a capitalized
    word gets a period between them.
    """
    return _MISSING_BREAK_RE.sub(r"\1. \2", text)


def capitalize_pronoun_i(text: str) -> str:
    return _PRONOUN_I_RE.sub("I", text).strip()


def _capitalize_sentence(sentence: str) -> str:
    sentence = sentence.strip()
    if not sentence:
        return ""
    first_word = sentence.split(" ", 1)[0]
    if _ALL_CAPS_RE.match(first_word):
        # acronym or shouted proper noun, keep as-is
        return sentence
    return sentence[0].upper() + sentence[1:]


def capitalize_sentences(text: str) -> str:
    # each sentence keeps its own terminator; "?" and "!" are not rewritten to "."
    sentences = (_capitalize_sentence(s) for s in _SENTENCE_SPLIT_RE.split(text))
    return " ".join(s for s in sentences if s).strip()


def final_cleanup(text: str) -> str:
    text = _PERIOD_SPACING_RE.sub(". ", text)
    text = _MULTI_PERIOD_RE.sub(".", text)
    return text.strip()


CLEANING_PASSES: List[Tuple[str, Pass]] = [
    ("collapse_whitespace", collapse_whitespace),
    ("strip_timestamps", strip_timestamps),
    ("collapse_stutter", collapse_stutter),
    ("remove_fillers", remove_fillers),
    ("join_acronyms", join_acronyms),
    ("collapse_repeated_punctuation", collapse_repeated_punctuation),
    ("normalize_punctuation_spacing", normalize_punctuation_spacing),
    ("insert_sentence_breaks", insert_sentence_breaks),
    ("capitalize_pronoun_i", capitalize_pronoun_i),
    ("capitalize_sentences", capitalize_sentences),
    ("final_cleanup", final_cleanup),
]


def clean_transcript(text: str) -> str:
    """
    Decode entities and run every cleaning pass in order.

    Args:
        text: Raw caption text (usually the space-joined caption items)

    Returns:
        Normalized prose
    """
    cleaned = decode_html_entities(text)
    for _name, apply in CLEANING_PASSES:
        cleaned = apply(cleaned)
    return cleaned


def join_captions(texts: Iterable[str]) -> str:
    """Space-join caption texts in their original order."""
    return " ".join(texts)
