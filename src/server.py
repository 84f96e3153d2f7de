"""Protean Engine runner for the sharing domain.

In production the domain processes events asynchronously; the Engine
publishes outbox records to the broker and feeds subscribed handlers
(realtime fanout, inbound community events, the inbox projector).

Usage:
    PROTEAN_ENV=production python src/server.py
    python src/server.py --test-mode    # drain pending messages and exit
"""

import argparse

import structlog
from protean.server.engine import Engine
from sharing.domain import sharing

logger = structlog.get_logger(__name__)


def main():
    parser = argparse.ArgumentParser(description="Sharing Engine runner")
    parser.add_argument(
        "--test-mode",
        action="store_true",
        help="Process pending messages once and exit",
    )
    args = parser.parse_args()

    sharing.init()
    logger.info("Starting engine", domain=sharing.name, test_mode=args.test_mode)
    Engine(sharing, test_mode=args.test_mode).run()


if __name__ == "__main__":
    main()
