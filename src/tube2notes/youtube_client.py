"""YouTube caption and metadata access."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import List, Optional, Sequence

from pytube import YouTube
from youtube_transcript_api import (
    CouldNotRetrieveTranscript,
    NoTranscriptFound,
    YouTubeTranscriptApi,
)

logger = logging.getLogger(__name__)

PREFERRED_LANGUAGES = ("en-US", "en")

_VIDEO_URL_PATTERNS = [
    re.compile(r"(?:https?://)?(?:www\.)?youtube\.com/watch\?v=([^&\s]+)"),
    re.compile(r"(?:https?://)?(?:www\.)?youtu\.be/([^?\s]+)"),
    re.compile(r"(?:https?://)?(?:www\.)?youtube\.com/embed/([^?\s]+)"),
]
_TIMESTAMP_PARAM_RE = re.compile(r"[&?]t=.*$")
_TRAILING_EQUALS_RE = re.compile(r"=+$")


class NoCaptionsError(Exception):
    """No caption track could be fetched for a video."""


@dataclass(frozen=True)
class CaptionItem:
    text: str
    offset_ms: float
    duration_ms: float


def clean_video_id(video_id: str) -> str:
    """Drop a trailing timestamp parameter and stray '=' from a video ID."""
    return _TRAILING_EQUALS_RE.sub("", _TIMESTAMP_PARAM_RE.sub("", video_id))


def extract_video_ids(text: str) -> List[str]:
    """
    Find YouTube video IDs in free text.

    Recognises watch, youtu.be and embed URLs. IDs are returned as they
    appear in the URL (not cleaned), de-duplicated, in pattern order.
    """
    seen: List[str] = []
    for pattern in _VIDEO_URL_PATTERNS:
        for match in pattern.finditer(text):
            if match.group(1) not in seen:
                seen.append(match.group(1))
    return seen


def watch_url(video_id: str) -> str:
    return f"https://www.youtube.com/watch?v={clean_video_id(video_id)}"


class YoutubeClient:
    def __init__(self, languages: Sequence[str] = PREFERRED_LANGUAGES, client: Optional[YouTubeTranscriptApi] = None):
        self.languages = tuple(languages)
        self.client = client or YouTubeTranscriptApi()

    def get_captions(self, video_id: str) -> List[CaptionItem]:
        """
        Fetch the caption track for a video.

        Prefers en-US, then en, then whatever track is listed first.

        Raises:
            NoCaptionsError: if no track is available or fetching fails
        """
        video_id = clean_video_id(video_id)
        try:
            try:
                fetched = self.client.fetch(video_id, languages=self.languages)
            except NoTranscriptFound:
                logger.info("No %s captions for %s, using first available track", "/".join(self.languages), video_id)
                first = next(iter(self.client.list(video_id)), None)
                if first is None:
                    raise NoCaptionsError(f"No caption tracks available for {video_id}")
                fetched = first.fetch()
        except CouldNotRetrieveTranscript as e:
            raise NoCaptionsError(f"No caption tracks available for {video_id}") from e

        items = [
            CaptionItem(
                text=snippet.text,
                offset_ms=snippet.start * 1000,
                duration_ms=snippet.duration * 1000,
            )
            for snippet in fetched
        ]
        if not items:
            raise NoCaptionsError(f"Caption track for {video_id} is empty")
        logger.debug("Fetched %d caption items for %s", len(items), video_id)
        return items

    def get_video_title(self, video_id: str) -> str:
        """
        Get the video title using pytube.
        Falls back to "Video <id>" when metadata can't be fetched.
        """
        video_id = clean_video_id(video_id)
        try:
            title = YouTube(watch_url(video_id)).title
        except Exception as e:
            logger.warning("Could not fetch title for %s: %s", video_id, e)
            return f"Video {video_id}"
        return title or f"Video {video_id}"
