"""QuickChat - console messaging application

Register an account, log in, and send short validated messages that are
kept in a JSON file or a relational database.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from quickchat.core.config import LOG_LEVELS, Settings, settings
from quickchat.core.dependencies import create_chat_session
from quickchat.presentation.console import ConsoleApp

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging for the console application"""
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[
            logging.StreamHandler(sys.stderr),
        ],
    )

    # Set specific loggers
    logging.getLogger("quickchat").setLevel(level.upper())
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="quickchat", description="Console messaging application")
    parser.add_argument("--backend", choices=["json", "sql"], help="Store backend")
    parser.add_argument("--database-url", help="SQLAlchemy URL for the sql backend")
    parser.add_argument("--data-dir", type=Path, help="Directory holding the JSON documents")
    parser.add_argument(
        "--scheme", choices=["sha256", "shorthand"], help="Message fingerprint scheme"
    )
    parser.add_argument(
        "--unique-ids",
        action="store_true",
        default=None,
        help="Redraw message IDs that are already in use",
    )
    parser.add_argument(
        "--log-level", type=str.upper, choices=LOG_LEVELS, help="Logging level, e.g. DEBUG or WARNING"
    )
    return parser.parse_args(argv)


def build_settings(args: argparse.Namespace, base: Settings = settings) -> Settings:
    """Apply command line overrides to the loaded settings"""
    overrides = {
        "store_backend": args.backend,
        "database_url": args.database_url,
        "data_dir": args.data_dir,
        "fingerprint_scheme": args.scheme,
        "unique_message_ids": args.unique_ids,
        "log_level": args.log_level,
    }
    return base.model_copy(update={key: value for key, value in overrides.items() if value is not None})


def create_application(argv: Optional[List[str]] = None) -> ConsoleApp:
    """Create and configure the console application"""
    config = build_settings(parse_args(argv))
    configure_logging(config.log_level)

    logger.info(f"Starting {config.app_name} {config.version} with {config.store_backend} store")
    return ConsoleApp(create_chat_session(config))


def start(argv: Optional[List[str]] = None) -> int:
    """Run the console application"""
    app = create_application(argv)
    try:
        app.run()
    except KeyboardInterrupt:
        app.shutdown()
    return 0


if __name__ == "__main__":
    sys.exit(start())
