#!/usr/bin/env python3
"""
Main entry point for the hop crawler.
"""

import argparse
import asyncio
import logging
import sys
from typing import Optional

from hopcrawler import __version__
from hopcrawler.crawler.scheduler import CrawlerScheduler
from hopcrawler.utils.config import Config, ConfigError, load_config
from hopcrawler.utils.logger import setup_logging
from hopcrawler.utils.monitoring import initialize_monitoring


class UsageArgumentParser(argparse.ArgumentParser):
    """Argument parser that exits with status 1 on usage errors."""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def non_negative_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"hop count must be an integer, got {value!r}") from None
    if number < 0:
        raise argparse.ArgumentTypeError(f"hop count must be non-negative, got {number}")
    return number


class CrawlerApp:
    """Main application class for the hop crawler."""

    def __init__(self):
        self.scheduler: Optional[CrawlerScheduler] = None
        self.logger = logging.getLogger(__name__)

    async def run(self, config: Config, start_url: str, hops: int) -> int:
        """Run one crawl and return the process exit status."""
        monitor = None
        if config.monitoring.metrics_enabled:
            monitor = initialize_monitoring(True, config.monitoring.prometheus_port)

        self.logger.debug(f"Start URL: {start_url}")
        self.logger.debug(f"Hop budget: {hops}")
        self.logger.debug(f"Retries: {config.crawler.retries}")

        self.scheduler = CrawlerScheduler(config.crawler, hops, monitor=monitor)
        try:
            await self.scheduler.crawl(start_url)
        finally:
            await self.scheduler.close()

        self.logger.debug(f"Crawl stats: {self.scheduler.get_stats()}")
        return 0


def build_parser() -> argparse.ArgumentParser:
    parser = UsageArgumentParser(
        description="Bounded-depth web crawler",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py http://example.com 5                      # Crawl 5 hops from example.com
  python main.py http://example.com 5 --config crawl.yaml  # Use custom config
  python main.py http://example.com 0 --log-level DEBUG    # Fetch only the seed, verbosely
        """
    )

    parser.add_argument('start_url', help='URL to start crawling from')

    parser.add_argument(
        'hops',
        type=non_negative_int,
        help='Number of successful page visits to make after the seed'
    )

    parser.add_argument(
        '--config',
        help='Path to a YAML configuration file (defaults apply without one)'
    )

    parser.add_argument(
        '--log-level',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        help='Override the configured log level'
    )

    parser.add_argument(
        '--json-logs',
        action='store_true',
        help='Emit structured JSON log lines'
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'Hop Crawler {__version__}'
    )

    return parser


def main(argv=None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    try:
        config = load_config(args.config)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.log_level:
        config.logging.level = args.log_level
    if args.json_logs:
        config.logging.json = True
    setup_logging(config.logging)

    app = CrawlerApp()
    try:
        return asyncio.run(app.run(config, args.start_url, args.hops))
    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
