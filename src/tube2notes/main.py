"""Main entry point for the application."""

from __future__ import annotations

import argparse
import dataclasses
import sys
from pathlib import Path
from typing import List, Optional

from .chunk import get_token_counter
from .cleaner import clean_transcript, join_captions
from .config import Settings, load_settings
from .llm_client import OpenAIChatClient
from .logging_config import configure_logging
from .notes import apply_summaries
from .pipeline import VideoResult, process_videos
from .summariser import Summariser
from .youtube_client import NoCaptionsError, YoutubeClient, extract_video_ids


def resolve_video_id(url_or_id: str) -> str:
    """Accept either a YouTube URL or a bare video ID."""
    found = extract_video_ids(url_or_id)
    return found[0] if found else url_or_id.strip()


def build_summariser(settings: Settings) -> Summariser:
    client = OpenAIChatClient(api_key=settings.openai_api_key)
    return Summariser(client, token_counter=get_token_counter(settings.token_estimator, settings.model))


def _require_api_key(settings: Settings) -> bool:
    if not settings.openai_api_key:
        print("OpenAI API key required. Set the OPENAI_API_KEY environment variable.", file=sys.stderr)
        return False
    return True


def _print_result(result: VideoResult) -> None:
    print(f"## {result.title}\n")
    if result.degraded:
        print("_Summary built from transcript parts; detail may be reduced._\n")
    print(result.summary)
    print()


def summarize_videos(urls: List[str], settings: Settings) -> int:
    """Summarise each video and print the results."""
    if not _require_api_key(settings):
        return 1

    video_ids = [resolve_video_id(u) for u in urls]
    print(f"Processing {len(video_ids)} video(s)...")
    results = process_videos(video_ids, YoutubeClient(), build_summariser(settings), settings)
    for result in results.values():
        _print_result(result)

    failed = sum(1 for r in results.values() if r.failed)
    if failed:
        print(f"{failed} of {len(results)} video(s) failed.", file=sys.stderr)
    return 0 if failed < len(results) else 1


def print_transcript(url: str) -> int:
    """Print the cleaned transcript of a video."""
    video_id = resolve_video_id(url)
    try:
        items = YoutubeClient().get_captions(video_id)
    except NoCaptionsError as e:
        print(f"Could not fetch transcript: {e}", file=sys.stderr)
        return 1
    print(clean_transcript(join_captions(item.text for item in items)))
    return 0


def summarize_note(path: str, settings: Settings, verbose: bool = False) -> int:
    """Summarise every video linked from a markdown note and rewrite the note."""
    if not _require_api_key(settings):
        return 1

    note_path = Path(path)
    try:
        content = note_path.read_text(encoding="utf-8")
    except OSError as e:
        print(f"Could not read note {note_path}: {e}", file=sys.stderr)
        return 1

    video_ids = extract_video_ids(content)
    if not video_ids:
        print("No YouTube URLs found in the note")
        return 0

    print(f"Processing {len(video_ids)} video(s)...")
    results = process_videos(video_ids, YoutubeClient(), build_summariser(settings), settings)
    if verbose:
        for video_id, result in results.items():
            status = "failed" if result.failed else ("degraded" if result.degraded else "ok")
            print(f"  {video_id}: {result.title} [{status}]")

    updated = apply_summaries(content, results, note_path.parent, settings.transcript_folder)
    note_path.write_text(updated, encoding="utf-8")
    print(f"Note updated: {note_path}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point with subcommands."""
    parser = argparse.ArgumentParser(
        description="tube2notes - Clean and summarize YouTube transcripts",
        prog="tube2notes",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose output")
    parser.add_argument("--model", help="Override the model used for summaries")
    parser.add_argument("--max-tokens", type=int, help="Override the summary length budget")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    summarize_parser = subparsers.add_parser("summarize", help="Summarize YouTube videos")
    summarize_parser.add_argument("urls", nargs="+", help="YouTube video URLs or IDs")

    transcript_parser = subparsers.add_parser("transcript", help="Print a cleaned transcript")
    transcript_parser.add_argument("url", help="YouTube video URL or ID")

    note_parser = subparsers.add_parser("note", help="Summarize every video linked in a markdown note")
    note_parser.add_argument("path", help="Path to the markdown note")

    args = parser.parse_args(argv)

    try:
        settings = load_settings()
        overrides = {}
        if args.model:
            overrides["model"] = args.model
        if args.max_tokens is not None:
            overrides["max_tokens"] = args.max_tokens
        settings = dataclasses.replace(settings, **overrides)
    except ValueError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 1

    configure_logging("DEBUG" if args.verbose else settings.log_level)

    if args.command == "summarize":
        return summarize_videos(args.urls, settings)
    if args.command == "transcript":
        return print_transcript(args.url)
    if args.command == "note":
        return summarize_note(args.path, settings, verbose=args.verbose)
    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
