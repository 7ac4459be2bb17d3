"""
Transcript chunker (sentence-aligned, even split).

Input: a cleaned transcript string and a character budget per chunk.

Output: ordered, contiguous, non-overlapping chunks. Boundaries start at an
even split of the text and are snapped to the nearest preceding sentence end
inside a fixed window, so no sentence is cut in half when avoidable.

Concatenating text[chunk.start:chunk.end] for all chunks reproduces the input
exactly; ``Chunk.text`` is the same slice with surrounding whitespace removed.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Callable, List, Optional

import tiktoken


# ----------------------------
# Data structures
# ----------------------------

@dataclass(frozen=True)
class Chunk:
    index: int
    start: int  # offset into the source text, inclusive
    end: int  # exclusive
    text: str  # trimmed slice

    def span(self, source: str) -> str:
        """Untrimmed slice of ``source`` covered by this chunk."""
        return source[self.start:self.end]


# ----------------------------
# Token estimation
# ----------------------------

CHARS_PER_TOKEN = 4.0

TokenCounter = Callable[[str], int]


def estimate_tokens(text: str, chars_per_token: float = CHARS_PER_TOKEN) -> int:
    """
    Approximate token count without a tokenizer (~4 characters per token).
    """
    if not text:
        return 0
    return int(math.ceil(len(text) / chars_per_token))


class TiktokenCounter:
    """Token counter backed by tiktoken's BPE encodings."""

    def __init__(self, model: str = "gpt-4o"):
        try:
            self._encoding = tiktoken.encoding_for_model(model)
        except KeyError:
            # Unknown model name, fall back to the general-purpose encoding
            self._encoding = tiktoken.get_encoding("cl100k_base")

    def __call__(self, text: str) -> int:
        return len(self._encoding.encode(text, disallowed_special=()))


def get_token_counter(name: str, model: str = "gpt-4o") -> TokenCounter:
    """
    Resolve a configured estimator name to a counter.

    Args:
        name: "chars" (length heuristic) or "tiktoken"
        model: Model name used to pick the tiktoken encoding

    Returns:
        Callable mapping text to an estimated token count
    """
    if name == "chars":
        return estimate_tokens
    if name == "tiktoken":
        return TiktokenCounter(model)
    raise ValueError(f"Unknown token estimator: {name!r} (expected 'chars' or 'tiktoken')")


# ----------------------------
# Boundary snapping
# ----------------------------

SNAP_WINDOW = 100

# Sentence terminator followed by whitespace; the boundary goes after both
_SENTENCE_END_RE = re.compile(r"[.!?]\s")


def find_sentence_boundary(text: str, target: int, lower: int, window: int = SNAP_WINDOW) -> int:
    """
    Snap ``target`` to the last sentence end within ``window`` characters.

    Returns the offset just past the last terminator-plus-space whose end lies
    in (lower, len(text)) and within ``target +/- window``. Falls back to
    ``target`` when no such sentence end exists.
    """
    lo = max(lower + 1, target - window)
    hi = min(len(text) - 1, target + window)

    best = None
    if lo <= hi:
        # A match may start one character before ``lo`` and still end inside
        for match in _SENTENCE_END_RE.finditer(text, max(0, lo - 2), hi):
            if lo <= match.end() <= hi:
                best = match.end()
    return best if best is not None else target


# ----------------------------
# Core chunking logic
# ----------------------------

def plan_chunks(text: str, char_budget: int, min_size: Optional[int] = None) -> List[Chunk]:
    """
    Split ``text`` into sentence-aligned chunks of roughly ``char_budget``.

    Args:
        text: Cleaned transcript
        char_budget: Target characters per chunk (must be > 0)
        min_size: Known lower bound on the text's size in characters; forces
            more chunks when larger than ``len(text)``

    Returns:
        At least one chunk; ordered, contiguous and non-overlapping
    """
    if char_budget <= 0:
        raise ValueError(f"char_budget must be positive, got {char_budget}")

    length = len(text)
    size = max(length, min_size or 0)
    count = max(1, int(math.ceil(size / char_budget)))
    # Never plan more chunks than there are characters to put in them
    count = min(count, max(1, length))

    target_len = length / count
    boundaries: List[int] = []
    prev = 0
    for i in range(1, count):
        even = int(round(i * target_len))
        cut = find_sentence_boundary(text, even, prev)
        if cut <= prev:
            cut = prev + 1
        if cut >= length:
            break
        boundaries.append(cut)
        prev = cut
    boundaries.append(length)

    chunks: List[Chunk] = []
    start = 0
    for idx, end in enumerate(boundaries):
        chunks.append(Chunk(index=idx, start=start, end=end, text=text[start:end].strip()))
        start = end
    return chunks
