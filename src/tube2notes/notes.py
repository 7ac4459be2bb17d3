"""
Markdown note output.

Writes one transcript note per video and rewrites the note that linked the
videos: each video URL is replaced by a section holding its summary and a
wiki-link to the transcript note.
"""

from __future__ import annotations

import datetime as dt
import logging
import re
from pathlib import Path
from typing import Dict, List, Optional

from .pipeline import VideoResult
from .youtube_client import clean_video_id

logger = logging.getLogger(__name__)

SENTENCES_PER_PARAGRAPH = 5

_ILLEGAL_CHARS_RE = re.compile(r'[/\\:*?"<>|]')
_NON_WORD_RE = re.compile(r"[^\w-]")
_HYPHENS_RE = re.compile(r"-+")
_SENTENCE_SPLIT_RE = re.compile(r"[.!?]\s+")
_BLANK_RUN_RE = re.compile(r"\n\s*\n")


def sanitize_filename(text: str) -> str:
    text = _ILLEGAL_CHARS_RE.sub("", text)
    text = re.sub(r"\s+", "-", text)
    text = _NON_WORD_RE.sub("", text)
    return _HYPHENS_RE.sub("-", text).strip()


def _paragraphs(transcript: str) -> str:
    sentences = _SENTENCE_SPLIT_RE.split(transcript)
    groups = [
        sentences[i:i + SENTENCES_PER_PARAGRAPH]
        for i in range(0, len(sentences), SENTENCES_PER_PARAGRAPH)
    ]
    return "\n\n".join(". ".join(group) for group in groups)


def render_transcript_note(
    title: str, url: str, transcript: str, date: Optional[dt.date] = None
) -> str:
    """Front-matter, a title heading and the transcript in 5-sentence paragraphs."""
    date = date or dt.date.today()
    return (
        "---\n"
        f'title: "{title}"\n'
        f"url: {url}\n"
        f"date_processed: {date.isoformat()}\n"
        "---\n"
        "\n"
        f"# {title}\n"
        "\n"
        f"{_paragraphs(transcript)}"
    )


def write_transcript_note(folder: Path, title: str, url: str, transcript: str) -> Path:
    """
    Write a transcript note into ``folder`` (created if missing).

    Returns:
        Path of the written note; an existing note with the same name is replaced
    """
    folder = Path(folder)
    folder.mkdir(parents=True, exist_ok=True)
    path = folder / f"{sanitize_filename(title) or 'transcript'}.md"
    path.write_text(render_transcript_note(title, url, transcript), encoding="utf-8")
    logger.info("Transcript note written to %s", path)
    return path


def render_summary_block(title: str, summary: str, transcript_link: str) -> str:
    return f"\n## {title}\n\n{summary}\n\n[[{transcript_link}|Full Transcript]]\n"


def _url_patterns(video_id: str) -> List[re.Pattern]:
    vid = re.escape(video_id)
    return [
        re.compile(rf"https?://(?:www\.)?youtube\.com/watch\?v={vid}(?![\w-])[^\s]*"),
        re.compile(rf"https?://(?:www\.)?youtu\.be/{vid}(?![\w-])[^\s]*"),
        re.compile(rf"https?://(?:www\.)?youtube\.com/embed/{vid}(?![\w-])[^\s]*"),
    ]


def _collapse_blank_lines(content: str) -> str:
    return _BLANK_RUN_RE.sub("\n\n", content)


def apply_summaries(content: str, results: Dict[str, VideoResult], note_dir: Path, transcript_folder: str) -> str:
    """
    Replace video URLs in a note with summary sections.

    Args:
        content: Markdown note text
        results: Per-video results keyed by the video ID found in the note
        note_dir: Directory of the note; transcript links are relative to it
        transcript_folder: Folder (relative to ``note_dir``) for transcript notes

    Returns:
        Rewritten note content ending with two newlines
    """
    folder = Path(note_dir) / transcript_folder
    for video_id, result in results.items():
        url_found = False
        for pattern in _url_patterns(video_id):
            urls = list(dict.fromkeys(pattern.findall(content)))
            if not urls:
                continue
            url_found = True
            content = pattern.sub("", content).strip()
            for full_url in urls:
                path = write_transcript_note(folder, result.title, full_url, result.transcript)
                content += render_summary_block(result.title, result.summary, _link(path, note_dir))

        if not url_found:
            url = f"https://youtube.com/watch?v={clean_video_id(video_id)}"
            path = write_transcript_note(folder, result.title, url, result.transcript)
            content = content.strip() + render_summary_block(result.title, result.summary, _link(path, note_dir))

    return _collapse_blank_lines(content).strip() + "\n\n"


def _link(path: Path, note_dir: Path) -> str:
    try:
        path = Path(path).relative_to(Path(note_dir))
    except ValueError:
        # transcript folder lies outside the note directory
        pass
    return Path(path).with_suffix("").as_posix()
