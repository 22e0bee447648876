"""Entry point for the nexus-pos Textual app."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from nexus_pos.config import DEBUG_LOG_PATH, DECREMENT_STOCK_ON_SALE
from nexus_pos.pos_app import NexusPosApp
from nexus_pos.state import AppState


def configure_logging(path: str = DEBUG_LOG_PATH, level: int = logging.INFO) -> None:
    """Send log records to a file so they never draw over the terminal UI."""
    log_file = Path(path)
    log_file.parent.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        filename=log_file,
        level=level,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def main(argv: list[str] | None = None) -> None:
    """Run the Textual application."""
    parser = argparse.ArgumentParser(prog="nexus-pos", description="Restaurant point of sale")
    parser.add_argument("--debug", action="store_true", help="log at DEBUG level")
    parser.add_argument(
        "--decrement-stock",
        action="store_true",
        default=DECREMENT_STOCK_ON_SALE,
        help="take sold quantities off catalog stock at checkout",
    )
    args = parser.parse_args(argv)

    configure_logging(level=logging.DEBUG if args.debug else logging.INFO)
    state = AppState.bootstrap(decrement_stock_on_sale=args.decrement_stock)
    NexusPosApp(state).run()


if __name__ == "__main__":
    main()
