"""
Web crawler core components.
"""

from .url_frontier import (BreadthFirstFrontier, DepthFirstFrontier, URLTask,
                           create_frontier, normalize_url)
from .fetcher import FetchError, FetchOutcome, FetchResult, WebFetcher
from .extractor import LinkExtractor
from .scheduler import CrawlerScheduler, CrawlStats

__all__ = [
    'DepthFirstFrontier', 'BreadthFirstFrontier', 'URLTask', 'create_frontier', 'normalize_url',
    'WebFetcher', 'FetchResult', 'FetchOutcome', 'FetchError',
    'LinkExtractor',
    'CrawlerScheduler', 'CrawlStats'
]
