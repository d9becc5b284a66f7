"""Command line access to leaderboards and exports from a stored snapshot."""

import argparse
import json
import sys
from datetime import UTC, datetime
from pathlib import Path

from vc_attendance.adapters.config import AppConfig
from vc_attendance.adapters.export import export_filename, render_xlsx
from vc_attendance.adapters.persistence import JsonSnapshotStore
from vc_attendance.application.services import LeaderboardService
from vc_attendance.domain.models import LeaderboardWindow


def build_leaderboard_service(config: AppConfig, data_file: str | None = None) -> LeaderboardService:
    """Create a leaderboard service over the snapshot stored on disk."""
    store = JsonSnapshotStore(data_file or config.data_file, history_limit=config.history_limit)
    state = store.load()
    return LeaderboardService(state.copy, lambda: datetime.now(UTC), config.tz)


def format_leaderboard(rows: list[tuple[str, str]]) -> str:
    """Render leaderboard rows as an aligned text table."""
    if not rows:
        return "No attendance recorded for this window."
    width = max(len("User"), *(len(user) for user, _ in rows))
    lines = [f"{'#':>3}  {'User':<{width}}  VC Time"]
    for rank, (user, time) in enumerate(rows, start=1):
        lines.append(f"{rank:>3}  {user:<{width}}  {time}")
    return "\n".join(lines)


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        description="Voice channel attendance leaderboards",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Show today's leaderboard
  vc-attendance leaderboard --window daily

  # Export the weekly leaderboard
  vc-attendance export --window weekly --output week.xlsx
        """,
    )
    parser.add_argument("--data-file", help="Snapshot file (defaults to DATA_FILE)")

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")
    windows = [w.value for w in LeaderboardWindow]

    leaderboard_parser = subparsers.add_parser("leaderboard", help="Print a leaderboard")
    leaderboard_parser.add_argument("--window", choices=windows, default="all")
    leaderboard_parser.add_argument("--json", action="store_true", help="Output as JSON")

    export_parser = subparsers.add_parser("export", help="Write a leaderboard to an XLSX file")
    export_parser.add_argument("--window", choices=windows, default="all")
    export_parser.add_argument(
        "--output", help="Output path (defaults to attendance_<window>.xlsx)"
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    try:
        config = AppConfig()
        service = build_leaderboard_service(config, args.data_file)
        window = LeaderboardWindow(args.window)

        if args.command == "leaderboard":
            entries = service.for_window(window)
            if args.json:
                print(json.dumps([{"user": e.user, "time": e.time} for e in entries], indent=2))
            else:
                print(format_leaderboard([(e.user, e.time) for e in entries]))

        elif args.command == "export":
            output = Path(args.output or export_filename(window.value))
            output.write_bytes(render_xlsx(service.export_table(window), creator=config.export_creator))
            print(f"Wrote {output}")

    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


def cli_main() -> None:
    """Synchronous entry point for the CLI command."""
    sys.exit(main())


if __name__ == "__main__":
    cli_main()
