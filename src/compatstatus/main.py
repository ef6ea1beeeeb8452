"""
Compat Status Main Entry Point

Modes:
  --once          Export once and exit (default).
  --daemon        Export at startup, then on every timer tick.

Examples:
  compatstatus --objects data/objects.json --export-dir /var/cache/status
  compatstatus --daemon --interval 15
"""

import argparse
import logging
import signal
import sys
from pathlib import Path

from compatstatus import __version__
from compatstatus.config import Settings, get_settings
from compatstatus.context import ApplicationContext
from compatstatus.export.exporter import StatusSnapshotExporter
from compatstatus.scheduler import create_scheduler
from compatstatus.store import InMemoryObjectStore

logger = logging.getLogger("compatstatus")


def configure_logging(settings: Settings) -> None:
    """Console logging plus an optional log file."""
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if settings.log_file:
        Path(settings.log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(settings.log_file, encoding="utf-8"))

    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=handlers,
    )


def build_exporter(settings: Settings, context: ApplicationContext | None = None) -> StatusSnapshotExporter:
    """Exporter reading the object graph file afresh on every run."""
    objects_file = Path(settings.objects_file)

    def load_store() -> InMemoryObjectStore:
        return InMemoryObjectStore.from_file(objects_file)

    return StatusSnapshotExporter(
        store=load_store,
        context=context or ApplicationContext(),
        status_path=settings.status_path,
        objects_path=settings.objects_path,
    )


def _positive_int(value: str) -> int:
    """argparse type for intervals: an integer of at least 1."""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: {value!r}")
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="compatstatus",
        description="Export status.dat and objects.cache from a monitoring object graph",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__.split("Examples:")[1] if "Examples:" in __doc__ else "",
    )
    mode = p.add_mutually_exclusive_group()
    mode.add_argument(
        "--once",
        action="store_true",
        default=True,
        help="Export once and exit (default).",
    )
    mode.add_argument(
        "--daemon",
        action="store_true",
        help="Export at startup, then keep exporting on a timer.",
    )
    p.add_argument(
        "--interval",
        type=_positive_int,
        default=None,
        metavar="SECONDS",
        help="In daemon mode: seconds between exports (default: from settings).",
    )
    p.add_argument(
        "--objects",
        type=str,
        default=None,
        metavar="PATH",
        help="JSON object graph to export (default: from settings).",
    )
    p.add_argument(
        "--export-dir",
        type=str,
        default=None,
        metavar="DIR",
        help="Directory for status.dat and objects.cache (default: from settings).",
    )
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return p.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)

    overrides = {}
    if args.objects:
        overrides["objects_file"] = args.objects
    if args.export_dir:
        overrides["export_dir"] = args.export_dir
    if args.interval is not None:
        overrides["export_interval_seconds"] = args.interval
    # Rebuild rather than model_copy so overrides are validated too
    settings = Settings(**{**get_settings().model_dump(), **overrides})

    configure_logging(settings)
    logger.info(f"🚀 Starting compatstatus v.{__version__}")

    exporter = build_exporter(settings)

    if not args.daemon:
        # --- One-shot mode ---
        result = exporter.run()
        return 0 if result.success else 1

    # --- Daemon mode ---
    scheduler = create_scheduler(
        exporter,
        interval_seconds=settings.export_interval_seconds,
        timezone_name=settings.scheduler_timezone,
    )

    def _handle_signal(signum, _frame):
        logger.info(f"Received signal {signal.Signals(signum).name}")
        scheduler.shutdown(wait=False)

    signal.signal(signal.SIGINT, _handle_signal)
    signal.signal(signal.SIGTERM, _handle_signal)

    try:
        scheduler.start()
    except KeyboardInterrupt:
        pass

    logger.info("👋 compatstatus exiting")
    return 0


if __name__ == "__main__":
    sys.exit(main())
