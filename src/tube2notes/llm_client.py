"""
Chat completion adapter around the OpenAI API.

The summariser only talks to ``LLMClient.complete``. Every service failure is
translated here into ``LLMError``; an input that is too large for the model's
context window becomes ``CapacityExceededError`` so callers can react to it
by type instead of reading error messages.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Optional, Protocol

from openai import BadRequestError, OpenAI, OpenAIError

from .prompts import SUMMARY_SYSTEM_MESSAGE

logger = logging.getLogger(__name__)


class LLMError(Exception):
    """A completion request failed."""


class CapacityExceededError(LLMError):
    """The request exceeded the model's input size limit."""

    def __init__(self, message: str, requested_tokens: Optional[int] = None):
        super().__init__(message)
        self.requested_tokens = requested_tokens


@dataclass(frozen=True)
class CompletionRequest:
    prompt_text: str
    max_output_tokens: int
    model_id: str


@dataclass(frozen=True)
class Completion:
    content: str
    input_tokens: int = 0
    output_tokens: int = 0


class LLMClient(Protocol):
    def complete(self, request: CompletionRequest) -> Completion:
        ...


# ----------------------------
# Error classification
# ----------------------------

CONTEXT_LENGTH_CODE = "context_length_exceeded"

_CAPACITY_MESSAGE_RE = re.compile(r"maximum context length|context_length_exceeded", re.IGNORECASE)
# "However, your messages resulted in 150123 tokens" / "you requested 150623 tokens"
_REQUESTED_TOKENS_RE = re.compile(r"(?:requested|resulted in)\s+(\d+)\s+tokens", re.IGNORECASE)


def parse_requested_tokens(message: str) -> Optional[int]:
    match = _REQUESTED_TOKENS_RE.search(message or "")
    return int(match.group(1)) if match else None


def classify_error(error: OpenAIError) -> LLMError:
    """Map an OpenAI SDK exception onto the adapter's error types."""
    message = str(error)
    if isinstance(error, BadRequestError):
        code = getattr(error, "code", None)
        if code == CONTEXT_LENGTH_CODE or _CAPACITY_MESSAGE_RE.search(message):
            return CapacityExceededError(message, parse_requested_tokens(message))
    return LLMError(message)


# ----------------------------
# OpenAI implementation
# ----------------------------

class OpenAIChatClient:
    """Chat-completions adapter with OpenAI API."""

    def __init__(
        self,
        api_key: str,
        system_message: str = SUMMARY_SYSTEM_MESSAGE,
        temperature: float = 0.7,
        client: Optional[OpenAI] = None,
    ):
        """
        Args:
            api_key: OpenAI API key
            system_message: System prompt sent with every request
            temperature: Sampling temperature
            client: Pre-built SDK client (tests inject a mock here)
        """
        if not api_key and client is None:
            raise ValueError(
                "OpenAI API key required. Set OPENAI_API_KEY environment variable "
                "or pass api_key parameter."
            )
        self.client = client or OpenAI(api_key=api_key)
        self.system_message = system_message
        self.temperature = temperature

    def complete(self, request: CompletionRequest) -> Completion:
        messages = [
            {"role": "system", "content": self.system_message},
            {"role": "user", "content": request.prompt_text},
        ]
        try:
            response = self.client.chat.completions.create(
                model=request.model_id,
                messages=messages,
                max_tokens=request.max_output_tokens,
                temperature=self.temperature,
            )
        except OpenAIError as e:
            raise classify_error(e) from e

        content = ""
        if response.choices:
            content = (response.choices[0].message.content or "").strip()

        input_tokens = output_tokens = 0
        if getattr(response, "usage", None):
            input_tokens = getattr(response.usage, "prompt_tokens", 0) or 0
            output_tokens = getattr(response.usage, "completion_tokens", 0) or 0
        logger.debug(
            "Completion finished (%s input, %s output tokens)", input_tokens, output_tokens
        )
        return Completion(content=content, input_tokens=input_tokens, output_tokens=output_tokens)
