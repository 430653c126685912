#!/usr/bin/env python3
"""CLI for discovering moments and resolving clips from the terminal.

Usage:
    # Propose moments for a whole video
    python -m cli.moments analyze "https://youtu.be/dQw4w9WgXcQ"

    # Find one specific moment
    python -m cli.moments find "https://youtu.be/dQw4w9WgXcQ" "the dance break around 1:05"

    # Resolve a clip from raw timestamps
    python -m cli.moments clip "https://youtu.be/dQw4w9WgXcQ" 00:01:05 00:01:20
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add src to path for imports
src_path = Path(__file__).parent.parent
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from rich.console import Console
from rich.table import Table

from models.clip import ClipDescriptor
from models.moment import DiscoveryResult, MomentRecord
from services.pipeline import ViralCutPipeline
from utils.config import load_config, setup_console_logging, validate_config
from utils.errors import ViralCutError


console = Console()


def show_moments(result: DiscoveryResult) -> None:
    """Render discovered moments as a table."""
    table = Table(title="Fallback Moments" if result.used_fallback else "Discovered Moments")
    table.add_column("#", justify="right")
    table.add_column("Start")
    table.add_column("End")
    table.add_column("Secs", justify="right")
    table.add_column("Description")
    table.add_column("Caption hook", style="cyan")

    for moment in result.moments:
        table.add_row(
            str(moment.moment_id),
            moment.timestamp_start,
            moment.timestamp_end,
            str(moment.duration_seconds),
            moment.description,
            moment.caption_hook,
        )

    console.print(table)
    if result.used_fallback:
        console.print("[yellow]⚠ Model unavailable, showing canned moments[/yellow]")
    elif result.rejected_count:
        console.print(f"[dim]{result.rejected_count} inconsistent moments discarded[/dim]")


def show_moment(moment: MomentRecord) -> None:
    """Render a single moment."""
    console.print(f"\n[bold]{moment.description}[/bold]")
    console.print(f"  {moment.timestamp_start} → {moment.timestamp_end} ({moment.duration_seconds}s)")
    console.print(f"  [dim]{moment.viral_rationale}[/dim]")
    console.print(f"  [cyan]{moment.caption_hook}[/cyan]")


def show_clip(descriptor: ClipDescriptor) -> None:
    """Render a resolved clip."""
    marker = "[yellow]degraded[/yellow]" if descriptor.degraded else "[green]ok[/green]"
    console.print(f"\n[bold]{descriptor.title}[/bold] ({descriptor.mode.value}, {marker})")
    console.print(f"  Clip:      {descriptor.locator}")
    console.print(f"  Share:     {descriptor.share_url}")
    console.print(f"  Thumbnail: {descriptor.thumbnail_url}")
    console.print(f"  Span:      {descriptor.start_seconds}s-{descriptor.end_seconds}s")


async def run(args: argparse.Namespace, pipeline: ViralCutPipeline) -> None:
    if args.command == "analyze":
        show_moments(await pipeline.analyze(args.url))
    elif args.command == "find":
        moment = await pipeline.discover_one(args.url, args.instruction)
        show_moment(moment)
        if args.resolve:
            show_clip(await pipeline.resolve_clip(args.url, moment))
    elif args.command == "clip":
        show_clip(await pipeline.resolve_clip_times(args.url, args.start, args.end))


def main() -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Find viral-worthy moments in YouTube videos",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--log-level", default="WARNING", help="Logging level (default: WARNING)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    analyze_parser = subparsers.add_parser("analyze", help="Propose 5-8 moments for a video")
    analyze_parser.add_argument("url", help="YouTube video URL")

    find_parser = subparsers.add_parser("find", help="Find one moment matching an instruction")
    find_parser.add_argument("url", help="YouTube video URL")
    find_parser.add_argument("instruction", help="What to look for")
    find_parser.add_argument("--resolve", action="store_true", help="Also resolve the moment into a clip")

    clip_parser = subparsers.add_parser("clip", help="Resolve a clip from timestamps")
    clip_parser.add_argument("url", help="YouTube video URL")
    clip_parser.add_argument("start", help="Start timecode (HH:MM:SS or MM:SS)")
    clip_parser.add_argument("end", help="End timecode (HH:MM:SS or MM:SS)")

    args = parser.parse_args()
    setup_console_logging(args.log_level)

    config = load_config()
    errors = validate_config(config)
    if errors and args.command != "clip":
        for error in errors:
            console.print(f"[red]✗ {error}[/red]")
        sys.exit(1)

    pipeline = ViralCutPipeline.from_config(config)
    try:
        asyncio.run(run(args, pipeline))
    except ViralCutError as e:
        console.print(f"[red]✗ {e.message}[/red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
