"""Command-line interface for managing settings and sending test publishes."""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

from mutagen import MutagenError

from . import __version__
from .doctor import render_report, run_doctor
from .errors import SettingsError, SettingsInvalidError
from .file_host import AudioFileHost
from .host import HostPlayState
from .logging_utils import setup_logging
from .paths import config_dir, log_dir
from .plugin import PostPublicMusicPlugin
from .publisher import Publisher
from .runtime_config import resolve_log_level, resolve_timeout
from .settings_store import SettingsStore, parse_settings
from .snapshot import PlayState
from .version import build_help_epilog

logger = logging.getLogger(__name__)

_STATE_CHOICES = {
    "playing": HostPlayState.PLAYING,
    "paused": HostPlayState.PAUSED,
    "stopped": HostPlayState.STOPPED,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="post-public-music",
        description="Publish now-playing snapshots to a web endpoint.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=build_help_epilog(),
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument("--verbose", action="store_true", help="Enable verbose output")
    parser.add_argument(
        "--quiet", action="store_true", help="Only show warnings and errors"
    )
    parser.add_argument("--log-file", help="Write logs to a file path")
    parser.add_argument(
        "--storage-dir",
        help="Directory holding the settings file (defaults to the user config dir).",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    settings = commands.add_parser("settings", help="Show or change settings.")
    settings_cmds = settings.add_subparsers(dest="settings_command", required=True)
    settings_cmds.add_parser("show", help="Print settings with the API key masked.")
    set_cmd = settings_cmds.add_parser("set", help="Write settings non-interactively.")
    set_cmd.add_argument("--server-url", required=True)
    set_cmd.add_argument("--api-key", required=True)
    settings_cmds.add_parser("edit", help="Edit settings in a terminal form.")
    settings_cmds.add_parser("delete", help="Remove the settings file.")

    commands.add_parser("doctor", help="Check settings and dependencies.")

    publish = commands.add_parser(
        "publish", help="Publish one snapshot built from an audio file's tags."
    )
    publish.add_argument("file", help="Audio file to report as now playing")
    publish.add_argument(
        "--state", choices=tuple(_STATE_CHOICES), default="playing"
    )
    publish.add_argument("--position-ms", type=int, default=0)
    publish.add_argument(
        "--offline",
        action="store_true",
        help="Send the shutdown snapshot (playState Offline).",
    )
    publish.add_argument(
        "--timeout", type=float, help="Request timeout in seconds (default 5)."
    )
    return parser


def mask_key(api_key: str) -> str:
    if len(api_key) <= 4:
        return "*" * len(api_key)
    return f"{'*' * (len(api_key) - 4)}{api_key[-4:]}"


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        level = resolve_log_level(verbose=args.verbose, quiet=args.quiet)
        setup_logging(
            log_dir=log_dir(),
            level=level,
            log_file=Path(args.log_file) if args.log_file else None,
        )
        storage_dir = Path(args.storage_dir) if args.storage_dir else config_dir()
        if args.command == "settings":
            return _run_settings(args, SettingsStore(storage_dir))
        if args.command == "doctor":
            report = run_doctor(storage_dir)
            print(render_report(report))
            return report.exit_code
        return _run_publish(args, storage_dir)
    except Exception as exc:  # pragma: no cover - top-level safety net
        logger.exception("Unhandled error: %s", exc)
        print("Unexpected error. Re-run with --verbose for details.", file=sys.stderr)
        return 1


def _run_settings(args: argparse.Namespace, store: SettingsStore) -> int:
    command = args.settings_command
    if command == "show":
        try:
            settings = store.load()
        except SettingsError as exc:
            print(str(exc), file=sys.stderr)
            return 2
        print(f"file:      {store.path}")
        print(f"serverUrl: {settings.server_url}")
        print(f"apiKey:    {mask_key(settings.api_key)}")
        return 0
    if command == "set":
        try:
            settings = parse_settings(
                {"serverUrl": args.server_url, "apiKey": args.api_key}
            )
        except SettingsInvalidError as exc:
            print(str(exc), file=sys.stderr)
            return 2
        store.save(settings)
        print(f"Saved settings to {store.path}")
        return 0
    if command == "edit":
        from .ui.settings_editor import SettingsEditorApp

        result = SettingsEditorApp(store).run()
        print("Settings saved." if result is not None else "No changes saved.")
        return 0
    removed = store.delete()
    print("Settings deleted." if removed else "No settings file to delete.")
    return 0


def _run_publish(args: argparse.Namespace, storage_dir: Path) -> int:
    try:
        host = AudioFileHost.from_path(
            Path(args.file),
            storage_dir=storage_dir,
            play_state=_STATE_CHOICES[args.state],
            position_ms=args.position_ms,
        )
    except (MutagenError, OSError) as exc:
        print(f"Could not read audio file: {exc}", file=sys.stderr)
        return 1
    plugin = PostPublicMusicPlugin(
        publisher=Publisher(timeout_s=resolve_timeout(args.timeout))
    )
    plugin.initialise(host)
    override = PlayState.OFFLINE if args.offline else None
    if not plugin.publish_current(play_state=override):
        print("Publish failed; see log for details.", file=sys.stderr)
        return 1
    print("Published.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
