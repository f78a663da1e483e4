"""SmartSkip command-line interface with subcommands.

Usage:
    smartskip-cli analyze <transcript.json> --video-id ID [--provider claude] [--model haiku] [--threshold 0.85]
    smartskip-cli cache stats
    smartskip-cli cache sweep [--max-age-days 30]
    smartskip-cli cache invalidate <video_id>
    smartskip-cli cache clear
"""

import argparse
import asyncio
import json
import sys
from datetime import timedelta
from pathlib import Path
from typing import Any

from smartskip.config import Settings, settings
from smartskip.errors import SmartSkipError, ValidationError
from smartskip.logging_config import configure_logging
from smartskip.models.transcript import Transcript
from smartskip.services.factory import build_cache, build_orchestrator


def _load_transcript(path: Path, video_id: str | None) -> Transcript:
    """Read a transcript file.

    Accepts either a bare list of ``{time, text}`` lines or an object with
    ``lines`` (and optionally ``videoId``).
    """
    try:
        with open(path, encoding="utf-8") as f:
            data: Any = json.load(f)
    except json.JSONDecodeError as exc:
        raise ValidationError(f"Transcript file is not valid JSON: {exc}", field="transcript") from exc

    if isinstance(data, list):
        lines = data
    elif isinstance(data, dict):
        lines = data.get("lines") or data.get("transcript") or []
        video_id = video_id or data.get("videoId") or data.get("video_id")
    else:
        raise ValidationError(f"Unsupported transcript format in {path}", field="transcript")

    return Transcript.from_lines(video_id or path.stem, lines)


def _settings_from_args(args: argparse.Namespace) -> Settings:
    overrides: dict[str, Any] = {}
    if getattr(args, "store", None):
        overrides["store_path"] = Path(args.store)
    if getattr(args, "provider", None):
        overrides["provider"] = args.provider
    if getattr(args, "model", None):
        overrides["model"] = args.model
    if getattr(args, "threshold", None) is not None:
        overrides["confidence_threshold"] = args.threshold
    return settings.model_copy(update=overrides) if overrides else settings


# --- analyze ---


async def cmd_analyze(args: argparse.Namespace) -> None:
    """Classify a transcript and print the skip segments."""
    transcript_path = Path(args.input).resolve()
    if not transcript_path.exists():
        print(f"Error: transcript not found: {transcript_path}", file=sys.stderr)
        sys.exit(1)

    cfg = _settings_from_args(args)
    cfg.ensure_directories()
    transcript = _load_transcript(transcript_path, args.video_id)
    orchestrator = build_orchestrator(cfg)

    print(f"Analyzing {transcript.video_id} ({transcript.word_count} words)")
    print(f"  Provider: {cfg.provider} ({orchestrator.client.model_id})")
    result = await orchestrator.analyze(transcript, cfg.default_preferences())

    if args.json:
        print(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))
        return

    if result.is_empty:
        print("No skippable segments found.")
        return
    for segment in result.segments:
        print(f"  {segment.time_range:<15} {segment.category:<12} {segment.confidence:.2f}  {segment.description}")
    summary = result.summary()
    print(f"Total: {summary['segmentCount']} segments, {summary['formattedDuration']} skippable")


# --- cache ---


async def cmd_cache(args: argparse.Namespace) -> None:
    """Inspect or maintain the analysis cache."""
    cfg = _settings_from_args(args)
    cache = build_cache(cfg)

    if args.cache_command == "stats":
        stats = await cache.stats()
        print(json.dumps(stats.model_dump(mode="json"), indent=2))
    elif args.cache_command == "sweep":
        max_age = timedelta(days=args.max_age_days) if args.max_age_days is not None else None
        deleted = await cache.sweep_stale(max_age)
        print(f"Deleted {deleted} stale entries")
    elif args.cache_command == "invalidate":
        await cache.invalidate(args.video_id)
        print(f"Invalidated {args.video_id}")
    elif args.cache_command == "clear":
        deleted = await cache.clear()
        print(f"Cleared {deleted} entries")


# --- Main CLI ---


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="smartskip-cli",
        description="SmartSkip - detect skippable segments in video transcripts",
    )
    parser.add_argument("--store", type=str, help="Path of the JSON store (default: SMARTSKIP_STORE_PATH)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- analyze ---
    p_analyze = subparsers.add_parser("analyze", help="Classify a transcript")
    p_analyze.add_argument("input", type=str, help="Transcript JSON file")
    p_analyze.add_argument("--video-id", type=str, help="Video identifier (default: from file)")
    p_analyze.add_argument("--provider", choices=["claude", "openai"], help="Classifier provider")
    p_analyze.add_argument("--model", type=str, help="Model alias or id")
    p_analyze.add_argument("--threshold", type=float, help="Confidence threshold (0-1)")
    p_analyze.add_argument("--json", action="store_true", help="Print the result as JSON")

    # --- cache ---
    p_cache = subparsers.add_parser("cache", help="Manage the analysis cache")
    cache_sub = p_cache.add_subparsers(dest="cache_command", help="Cache commands")
    cache_sub.add_parser("stats", help="Show cache statistics")
    p_sweep = cache_sub.add_parser("sweep", help="Delete stale entries")
    p_sweep.add_argument("--max-age-days", type=int, help="Maximum entry age in days")
    p_invalidate = cache_sub.add_parser("invalidate", help="Delete one video's entry")
    p_invalidate.add_argument("video_id", type=str, help="Video identifier")
    cache_sub.add_parser("clear", help="Delete every entry")

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command or (args.command == "cache" and not args.cache_command):
        parser.print_help()
        sys.exit(1)

    configure_logging("DEBUG" if args.verbose else settings.log_level)

    try:
        if args.command == "analyze":
            asyncio.run(cmd_analyze(args))
        elif args.command == "cache":
            asyncio.run(cmd_cache(args))
    except SmartSkipError as exc:
        print(f"Error: {exc.user_message}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
