"""
Per-video processing: captions -> cleaned transcript -> summary.

Videos are handled strictly one after another. A video that has no captions
or can't be summarised, or hits any other error, gets a placeholder result
and the batch moves on.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterable

from .cleaner import clean_transcript, join_captions
from .config import Settings
from .summariser import SummarizationError, Summariser
from .youtube_client import NoCaptionsError, YoutubeClient, clean_video_id

logger = logging.getLogger(__name__)


@dataclass
class VideoResult:
    title: str
    summary: str
    transcript: str
    degraded: bool = False
    failed: bool = False


def fetch_transcript(video_id: str, youtube: YoutubeClient) -> str:
    """Fetch captions and return the cleaned, space-joined transcript."""
    items = youtube.get_captions(video_id)
    return clean_transcript(join_captions(item.text for item in items))


def process_video(
    video_id: str, youtube: YoutubeClient, summariser: Summariser, settings: Settings
) -> VideoResult:
    """
    Summarise one video.

    Raises:
        NoCaptionsError: no caption track could be fetched
        SummarizationError: no summary could be produced
    """
    video_id = clean_video_id(video_id)
    title = youtube.get_video_title(video_id)
    transcript = fetch_transcript(video_id, youtube)
    logger.info("Got transcript for %r (%d chars)", title, len(transcript))

    result = summariser.summarize(transcript, settings)
    if result.degraded:
        logger.info(
            "Summary for %r built from %d chunks (%d failed)",
            title, result.chunk_count, len(result.failed_chunks),
        )
    return VideoResult(
        title=title, summary=result.text, transcript=transcript, degraded=result.degraded
    )


def process_videos(
    video_ids: Iterable[str], youtube: YoutubeClient, summariser: Summariser, settings: Settings
) -> Dict[str, VideoResult]:
    """
    Summarise videos in order, isolating failures per video.

    Returns:
        Results keyed by the video ID as given, in input order
    """
    results: Dict[str, VideoResult] = {}
    for video_id in video_ids:
        logger.info("Processing video %s", video_id)
        try:
            results[video_id] = process_video(video_id, youtube, summariser, settings)
        except (NoCaptionsError, SummarizationError) as e:
            logger.error("Error processing video %s: %s", video_id, e)
            results[video_id] = _failed_result(video_id, youtube, e)
        except Exception as e:
            # network or unexpected errors still only fail this video
            logger.exception("Unexpected error processing video %s", video_id)
            results[video_id] = _failed_result(video_id, youtube, e)
    return results


def _failed_result(video_id: str, youtube: YoutubeClient, error: Exception) -> VideoResult:
    return VideoResult(
        title=youtube.get_video_title(video_id),
        summary=f"Error: {error}",
        transcript="",
        failed=True,
    )
