import argparse
import sys
from pathlib import Path

from comfysync import __version__
from comfysync.core.app_config import AppConfigManager
from comfysync.exceptions import AppBaseError
from comfysync.logger import configure_logging, get_logger
from comfysync.models.config import AppConfig
from comfysync.services import ServerLauncher, SyncOrchestrator

logger = get_logger(__name__)

BANNER = "=================================="


def run(config: AppConfig) -> int:
    """Sync everything, then hand the process over to ComfyUI if configured.

    Returns:
        Process exit code (only reached when the server is not started)
    """
    print(BANNER, flush=True)
    logger.info("ComfyUI Model & Node Sync")
    print(BANNER, flush=True)

    try:
        SyncOrchestrator(config).run()
        print(BANNER, flush=True)
        ServerLauncher(config).launch()
    except AppBaseError as e:
        logger.error(str(e), error_type=type(e).__name__, retriable=e.retriable)
        return e.exit_code
    except KeyboardInterrupt:
        logger.warning("Interrupted")
        return 130

    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point with CLI argument parsing."""
    parser = argparse.ArgumentParser(
        prog="comfysync",
        description="Sync custom nodes and models into a ComfyUI installation, then start it",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  comfysync                        # Configure from environment variables only
  comfysync sync_config.yaml       # Load a YAML config (overrides environment)
  comfysync config.yaml --no-start # Sync without starting ComfyUI
        """,
    )

    parser.add_argument(
        "config",
        nargs="?",
        type=Path,
        metavar="CONFIG_FILE",
        help="YAML configuration file",
    )

    parser.add_argument(
        "--no-start",
        action="store_true",
        help="Do not start ComfyUI after syncing",
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        type=str.upper,
        help="Override the configured log level",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"comfysync {__version__}",
    )

    args = parser.parse_args(argv)

    # Default logging until the configuration says otherwise
    configure_logging()

    try:
        config = AppConfigManager(args.config).load()
    except AppBaseError as e:
        logger.error(str(e))
        return e.exit_code

    if args.no_start:
        config.server.start = False
    if args.log_level:
        config.advanced.log_level = args.log_level
    configure_logging(config.advanced.log_level, config.advanced.log_format)

    return run(config)


if __name__ == "__main__":
    sys.exit(main())
