"""Application settings loaded from the environment (and a .env file)."""

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

DEFAULT_SUMMARY_PROMPT = (
    "Create a concise bullet-point summary of the following video transcript, "
    "highlighting the key points and main ideas:"
)


@dataclass(frozen=True)
class Settings:
    openai_api_key: str = ""
    model: str = "gpt-4o"
    max_tokens: int = 500
    summary_prompt: str = DEFAULT_SUMMARY_PROMPT
    transcript_folder: str = "YouTube Transcripts"
    # Seconds to wait between consecutive chunk requests
    pacing_delay: float = 1.0
    # Well under the 128k context window of the default model
    chunk_token_budget: int = 12_000
    token_estimator: str = "chars"
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if self.max_tokens <= 0:
            raise ValueError(f"max_tokens must be positive, got {self.max_tokens}")
        if self.chunk_token_budget <= 0:
            raise ValueError(
                f"chunk_token_budget must be positive, got {self.chunk_token_budget}"
            )
        if self.pacing_delay < 0:
            raise ValueError(f"pacing_delay must not be negative, got {self.pacing_delay}")
        if self.token_estimator not in ("chars", "tiktoken"):
            raise ValueError(
                f"token_estimator must be 'chars' or 'tiktoken', got {self.token_estimator!r}"
            )


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


def load_settings(dotenv: bool = True) -> Settings:
    """
    Build settings from environment variables.

    Args:
        dotenv: Load a .env file from the working directory first

    Returns:
        Validated settings
    """
    if dotenv:
        load_dotenv()

    defaults = Settings()
    return Settings(
        openai_api_key=os.getenv("OPENAI_API_KEY", defaults.openai_api_key),
        model=os.getenv("TUBE2NOTES_MODEL") or defaults.model,
        max_tokens=_env_int("TUBE2NOTES_MAX_TOKENS", defaults.max_tokens),
        summary_prompt=os.getenv("TUBE2NOTES_SUMMARY_PROMPT") or defaults.summary_prompt,
        transcript_folder=os.getenv("TUBE2NOTES_TRANSCRIPT_FOLDER") or defaults.transcript_folder,
        pacing_delay=_env_float("TUBE2NOTES_PACING_DELAY", defaults.pacing_delay),
        chunk_token_budget=_env_int("TUBE2NOTES_CHUNK_TOKEN_BUDGET", defaults.chunk_token_budget),
        token_estimator=os.getenv("TUBE2NOTES_TOKEN_ESTIMATOR") or defaults.token_estimator,
        log_level=os.getenv("TUBE2NOTES_LOG_LEVEL") or defaults.log_level,
    )
