"""
Crawler scheduler that drives the hop-bounded traversal loop.
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Awaitable, Callable, Dict, Optional, Set

from .extractor import LinkExtractor
from .fetcher import FetchError, FetchOutcome, FetchResult, WebFetcher
from .url_frontier import create_frontier, normalize_url
from ..utils.config import CrawlerConfig
from ..utils.logger import get_crawler_logger
from ..utils.monitoring import CrawlerMonitor


@dataclass
class CrawlStats:
    """Statistics for crawl operations."""
    start_time: float
    pages_visited: int = 0
    redirects: int = 0
    server_errors: int = 0
    errors: int = 0
    retry_cap_skips: int = 0
    duplicates_skipped: int = 0

    @property
    def elapsed_time(self) -> float:
        return time.time() - self.start_time


class CrawlerScheduler:
    """
    Single-task crawler bounded by a hop budget.

    Each iteration takes one URL from the frontier, skips it when already
    visited, and otherwise fetches it after the current backoff delay. A hop
    is counted only for a page fetched with status 200.
    """

    def __init__(self, config: CrawlerConfig, hops: int, fetcher: Optional[WebFetcher] = None,
                 monitor: Optional[CrawlerMonitor] = None,
                 sleep: Callable[[float], Awaitable[None]] = asyncio.sleep):
        self.config = config
        self.hops = hops
        self.retries = config.retries
        self.per_url_retries = config.retry_scope == 'per_url'
        self.logger = get_crawler_logger(__name__)

        self.frontier = create_frontier(config.frontier_policy)
        self.extractor = LinkExtractor()
        self.fetcher = fetcher or WebFetcher(
            user_agent=config.user_agent,
            request_timeout=config.request_timeout,
            max_content_size=config.max_content_size
        )
        self.monitor = monitor
        self._sleep = sleep

        # Crawl state
        self.visited: Set[str] = set()
        self.curr_hops = 0
        self.prev_url = ""
        self.delay = 0
        self.stats = CrawlStats(start_time=time.time())

    async def crawl(self, start_url: str) -> int:
        """
        Crawl from ``start_url`` until the hop budget or the frontier runs out.

        Returns the final hop count.
        """
        self.frontier.seed(normalize_url(start_url))
        self.stats = CrawlStats(start_time=time.time())
        self.logger.debug(f"Crawl started at {start_url} with {self.hops} hops, "
                          f"{self.frontier.policy} frontier, {self.config.retry_scope} retry scope")

        while self.curr_hops <= self.hops and not self.frontier.is_empty():
            task = self.frontier.take_next()
            if task is None:
                break

            curr_url = task.url
            tmp_link = normalize_url(curr_url)

            if self.per_url_retries and curr_url != self.prev_url:
                self.prev_url, self.delay = "", 0

            if self.delay >= self.retries:
                # Retry cap reached: reset and let this URL fall out of the crawl
                self.logger.debug(f"Retry cap reached, skipping {curr_url}")
                self.prev_url, self.delay = "", 0
                self.stats.retry_cap_skips += 1
                if self.monitor:
                    self.monitor.record_retry_cap_skip()
            elif tmp_link not in self.visited:
                if curr_url != self.prev_url:
                    self.delay = 0
                if await self.visit_url(curr_url, self.delay):
                    self.curr_hops += 1
                self.delay += 1
                self.prev_url = curr_url
            else:
                self.stats.duplicates_skipped += 1

            if self.monitor:
                self.monitor.update_sizes(len(self.frontier), len(self.visited))

        self._log_final_stats()
        return self.curr_hops

    async def visit_url(self, url: str, delay: int) -> bool:
        """
        Visit a page to find anchor links.

        Args:
            url: URL of the page to visit
            delay: seconds to wait before the attempt

        Returns:
            True if the page was fetched with status 200, False otherwise
        """
        success = False
        try:
            await self._sleep(delay)
            result = await self.fetcher.fetch(url)
        except FetchError as e:
            self.logger.log_hop_event(logging.WARNING, self.curr_hops, "Error while visiting", url,
                                      url=url, error=str(e))
            self._record_error('transport')
        else:
            if result.outcome is FetchOutcome.OK:
                success = self._handle_page(url, result)
            elif result.outcome is FetchOutcome.REDIRECT:
                if self._handle_redirect(url, result):
                    self._mark_visited(url)
                    return False
            elif result.outcome is FetchOutcome.SERVER_ERROR:
                if self._handle_server_error(url, result, delay):
                    return False
            else:
                self.logger.log_hop_event(logging.WARNING, self.curr_hops, "Error from",
                                          f"{url}\tResponse Code: {result.status_code}",
                                          url=url, status_code=result.status_code)
                self._record_error(f"http_{result.status_code}")

        self._mark_visited(url)
        return success

    def _handle_page(self, url: str, result: FetchResult) -> bool:
        links = self.extractor.extract_all(result.lines)
        self.frontier.push_links(links)
        self.logger.log_hop_event(logging.INFO, self.curr_hops, "Visited",
                                  f"{url}\tFound {len(links)} URLs",
                                  url=url, links_found=len(links))
        self.stats.pages_visited += 1
        if self.monitor:
            self.monitor.record_page_visited(result.fetch_time)
        return True

    def _handle_redirect(self, url: str, result: FetchResult) -> bool:
        """Queue an absolute redirect target; returns False when the redirect is dropped."""
        location = result.location
        self.logger.log_hop_event(logging.INFO, self.curr_hops, "Redirecting from",
                                  f"{url} to {location}",
                                  url=url, location=location, status_code=result.status_code)
        self.stats.redirects += 1
        if self.monitor:
            self.monitor.record_redirect()

        if location and location.startswith('http'):
            self.frontier.push_priority(location)
            return True

        self.logger.debug(f"Dropping non-absolute redirect from {url}: {location!r}")
        return False

    def _handle_server_error(self, url: str, result: FetchResult, delay: int) -> bool:
        """Queue ``url`` for another attempt; returns True while retries remain."""
        attempt = delay + 1
        self.logger.log_hop_event(logging.WARNING, self.curr_hops, "Error from",
                                  f"{url}\tResponse Code: {result.status_code}\tRetry: {attempt}",
                                  url=url, status_code=result.status_code, retry=attempt)
        self.stats.server_errors += 1
        self.frontier.push_priority(url)
        if self.monitor:
            self.monitor.record_error('server_error')

        if attempt < self.retries:
            if self.monitor:
                self.monitor.record_retry()
            return True
        return False

    def _record_error(self, error_type: str):
        self.stats.errors += 1
        if self.monitor:
            self.monitor.record_error(error_type)

    def _mark_visited(self, url: str):
        self.visited.add(normalize_url(url))

    def _log_final_stats(self):
        """Log final crawl statistics."""
        frontier_stats = self.frontier.get_stats()

        self.logger.debug("=== CRAWL COMPLETED ===")
        self.logger.debug(f"Hops: {self.curr_hops} (budget {self.hops})")
        self.logger.debug(f"Pages visited: {self.stats.pages_visited}")
        self.logger.debug(f"Redirects: {self.stats.redirects}")
        self.logger.debug(f"Server errors: {self.stats.server_errors}")
        self.logger.debug(f"Other errors: {self.stats.errors}")
        self.logger.debug(f"Retry cap skips: {self.stats.retry_cap_skips}")
        self.logger.debug(f"Already visited skips: {self.stats.duplicates_skipped}")
        self.logger.debug(f"Visited set size: {len(self.visited)}")
        self.logger.debug(f"URLs remaining in frontier: {frontier_stats['total_queued']}")
        self.logger.debug(f"Total time: {self.stats.elapsed_time:.2f} seconds")

    def get_stats(self) -> Dict:
        """Get current crawl statistics."""
        return {
            'hops': self.curr_hops,
            'pages_visited': self.stats.pages_visited,
            'redirects': self.stats.redirects,
            'server_errors': self.stats.server_errors,
            'errors': self.stats.errors,
            'retry_cap_skips': self.stats.retry_cap_skips,
            'duplicates_skipped': self.stats.duplicates_skipped,
            'visited': len(self.visited),
            'urls_in_frontier': len(self.frontier),
            'elapsed_time': self.stats.elapsed_time
        }

    async def close(self):
        """Close the fetcher session."""
        await self.fetcher.close()
