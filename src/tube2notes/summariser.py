"""
Adaptive summarisation for cleaned YouTube transcripts.

The whole transcript is summarised in one request whenever the model accepts
it. Only when the service reports that the input is too large does the
summariser fall back to summarising sentence-aligned chunks one by one and
then combining the chunk summaries into the final result. A chunk that fails
is skipped; the run only fails when nothing usable can be produced.
"""

from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from .chunk import Chunk, TokenCounter, estimate_tokens, plan_chunks
from .config import Settings
from .llm_client import CapacityExceededError, CompletionRequest, LLMClient, LLMError
from .prompts import (
    CHUNK_SUMMARY_TEMPLATE,
    COMBINE_SUMMARIES_TEMPLATE,
    PLACEHOLDER_MARKERS,
    PLACEHOLDER_SUMMARY,
    SINGLE_SHOT_TEMPLATE,
)

logger = logging.getLogger(__name__)

# Output budget for a single chunk summary: half the configured maximum,
# never more than this
CHUNK_SUMMARY_MAX_TOKENS = 300


class SummarizationError(Exception):
    """No usable summary could be produced."""


class AllChunksFailedError(SummarizationError):
    """Every chunk request failed during the chunked fallback."""


class FinalCombineError(SummarizationError):
    """The request combining chunk summaries failed or returned nothing usable."""


@dataclass
class SummaryResult:
    text: str
    degraded: bool
    chunk_count: int = 0
    failed_chunks: List[int] = field(default_factory=list)


def is_placeholder(content: Optional[str]) -> bool:
    """True when a response carries no real summary."""
    if not content or not content.strip():
        return True
    if content.strip() == PLACEHOLDER_SUMMARY:
        return True
    return any(marker in content for marker in PLACEHOLDER_MARKERS)


class Summariser:
    """Single-shot summariser with a chunk-and-combine fallback."""

    def __init__(
        self,
        client: LLMClient,
        token_counter: TokenCounter = estimate_tokens,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Args:
            client: Completion adapter
            token_counter: Estimates tokens for a text; used to turn token
                budgets into character budgets
            sleep: Pacing function between chunk requests
        """
        self.client = client
        self.token_counter = token_counter
        self._sleep = sleep

    def summarize(self, transcript: str, settings: Settings) -> SummaryResult:
        """
        Summarise a cleaned transcript.

        Args:
            transcript: Output of ``clean_transcript``
            settings: Model, prompt and output budget for this call

        Returns:
            SummaryResult; ``degraded`` is True when the chunked path was used

        Raises:
            SummarizationError: when neither path produced a summary
        """
        prompt = SINGLE_SHOT_TEMPLATE.format(
            summary_prompt=settings.summary_prompt, transcript=transcript
        )
        try:
            text = self._request(prompt, settings.max_tokens, settings)
        except CapacityExceededError as e:
            logger.warning(
                "Transcript too long for a single request (%s requested tokens), "
                "falling back to chunked summarisation",
                e.requested_tokens if e.requested_tokens is not None else "unknown",
            )
            return self._summarize_chunked(transcript, settings, e.requested_tokens)
        except LLMError as e:
            raise SummarizationError(f"Failed to generate summary: {e}") from e

        if is_placeholder(text):
            raise SummarizationError(
                "Failed to generate summary: Invalid response from the language model"
            )
        return SummaryResult(text=text, degraded=False, chunk_count=1)

    # ----------------------------
    # Chunked fallback
    # ----------------------------

    def plan(self, transcript: str, settings: Settings, requested_tokens: Optional[int] = None) -> List[Chunk]:
        """
        Plan chunks sized to ``settings.chunk_token_budget``.

        The token budget is converted to characters with the ratio observed by
        the configured token counter on this transcript. A token count reported
        by the failed single-shot request raises the minimum chunk count.
        """
        chars_per_token = self._chars_per_token(transcript)
        char_budget = max(1, int(settings.chunk_token_budget * chars_per_token))
        min_size = None
        if requested_tokens:
            min_size = int(math.ceil(requested_tokens * chars_per_token))
        return plan_chunks(transcript, char_budget, min_size=min_size)

    def _summarize_chunked(
        self, transcript: str, settings: Settings, requested_tokens: Optional[int]
    ) -> SummaryResult:
        chunks = self.plan(transcript, settings, requested_tokens)
        chunk_max_tokens = min(max(1, settings.max_tokens // 2), CHUNK_SUMMARY_MAX_TOKENS)
        logger.info("Summarising %d chunks", len(chunks))

        summaries: List[str] = []
        failed: List[int] = []
        for chunk in chunks:
            if chunk.index > 0:
                self._sleep(settings.pacing_delay)
            prompt = CHUNK_SUMMARY_TEMPLATE.format(
                part=chunk.index + 1, total=len(chunks), chunk=chunk.text
            )
            try:
                text = self._request(prompt, chunk_max_tokens, settings)
            except LLMError as e:
                logger.warning("Chunk %d/%d failed: %s", chunk.index + 1, len(chunks), e)
                failed.append(chunk.index)
                continue
            if is_placeholder(text):
                logger.warning("Chunk %d/%d returned no summary", chunk.index + 1, len(chunks))
                failed.append(chunk.index)
                continue
            logger.debug("Chunk %d/%d summarised (%d chars)", chunk.index + 1, len(chunks), len(text))
            summaries.append(text)

        if not summaries:
            raise AllChunksFailedError(
                f"Failed to generate summary: no chunk summaries produced ({len(chunks)} chunks failed)"
            )

        prompt = COMBINE_SUMMARIES_TEMPLATE.format(
            summary_prompt=settings.summary_prompt, summaries="\n\n".join(summaries)
        )
        try:
            text = self._request(prompt, settings.max_tokens, settings)
        except LLMError as e:
            raise FinalCombineError(f"Failed to combine chunk summaries: {e}") from e
        if is_placeholder(text):
            raise FinalCombineError(
                "Failed to combine chunk summaries: Invalid response from the language model"
            )

        return SummaryResult(
            text=text, degraded=True, chunk_count=len(chunks), failed_chunks=failed
        )

    # ----------------------------
    # Helpers
    # ----------------------------

    def _request(self, prompt: str, max_tokens: int, settings: Settings) -> str:
        completion = self.client.complete(
            CompletionRequest(prompt_text=prompt, max_output_tokens=max_tokens, model_id=settings.model)
        )
        return completion.content

    def _chars_per_token(self, text: str) -> float:
        tokens = self.token_counter(text)
        if not text or tokens <= 0:
            return 1.0
        return len(text) / tokens
