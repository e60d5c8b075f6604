"""
Web page fetcher that performs single non-redirecting GET requests
and classifies the response.
"""

import asyncio
import codecs
import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

import aiohttp
from aiohttp import ClientError, ClientSession, ClientTimeout


class FetchError(Exception):
    """Raised when a page cannot be fetched at the transport level."""

    def __init__(self, url: str, message: str):
        super().__init__(f"{message} ({url})")
        self.url = url


class FetchOutcome(Enum):
    """Classification of an HTTP response."""
    OK = 'ok'
    REDIRECT = 'redirect'
    SERVER_ERROR = 'server_error'
    OTHER = 'other'


REDIRECT_CODES = (301, 302)


def classify_status(status_code: int) -> FetchOutcome:
    """Map an HTTP status code onto a fetch outcome."""
    if status_code == 200:
        return FetchOutcome.OK
    if status_code in REDIRECT_CODES:
        return FetchOutcome.REDIRECT
    if 500 <= status_code < 600:
        return FetchOutcome.SERVER_ERROR
    return FetchOutcome.OTHER


@dataclass
class FetchResult:
    """Result of a fetch operation."""
    url: str
    status_code: int
    outcome: FetchOutcome
    lines: List[str] = field(default_factory=list)
    location: Optional[str] = None
    fetch_time: float = 0.0
    content_type: Optional[str] = None


class WebFetcher:
    """
    Fetches web pages one at a time without following redirects.
    """

    def __init__(self, user_agent: str, request_timeout: int = 30,
                 max_content_size: int = 10 * 1024 * 1024):
        self.user_agent = user_agent
        self.request_timeout = request_timeout
        self.max_content_size = max_content_size

        self.logger = logging.getLogger(__name__)
        self.session: Optional[ClientSession] = None

        # Statistics
        self.stats = {
            'total_requests': 0,
            'successful_requests': 0,
            'failed_requests': 0,
            'total_bytes_downloaded': 0
        }

    async def __aenter__(self):
        """Async context manager entry."""
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()

    async def start(self):
        """Initialize the fetcher session."""
        if self.session is None:
            timeout = ClientTimeout(total=self.request_timeout)
            headers = {'User-Agent': self.user_agent}

            self.session = aiohttp.ClientSession(timeout=timeout, headers=headers)
            self.logger.debug("WebFetcher session started")

    async def close(self):
        """Close the fetcher session."""
        if self.session:
            await self.session.close()
            self.session = None
            self.logger.debug("WebFetcher session closed")

    async def fetch(self, url: str) -> FetchResult:
        """
        Fetch a single URL with one GET request.

        Args:
            url: The URL to fetch

        Returns:
            FetchResult classified by status code. Only 200 responses carry
            body lines; 301/302 responses carry the Location header.

        Raises:
            FetchError: on connection, timeout or payload failures
        """
        if self.session is None:
            await self.start()

        start_time = time.time()
        self.stats['total_requests'] += 1

        try:
            async with self.session.get(url, allow_redirects=False) as response:
                outcome = classify_status(response.status)
                result = FetchResult(
                    url=url,
                    status_code=response.status,
                    outcome=outcome,
                    content_type=response.headers.get('Content-Type')
                )

                if outcome is FetchOutcome.OK:
                    content = await self._read_content_safely(response)
                    result.lines = content.splitlines()
                    self.stats['successful_requests'] += 1
                elif outcome is FetchOutcome.REDIRECT:
                    result.location = response.headers.get('Location')

                result.fetch_time = time.time() - start_time
                self.logger.debug(f"Fetched {url}: {response.status} in {result.fetch_time:.2f}s")
                return result

        except asyncio.TimeoutError:
            self.stats['failed_requests'] += 1
            self.logger.debug(f"Timeout fetching {url}")
            raise FetchError(url, "Request timeout") from None

        except (ClientError, ValueError) as e:
            self.stats['failed_requests'] += 1
            self.logger.debug(f"Client error fetching {url}: {e}")
            raise FetchError(url, f"Client error: {e}") from e

    async def _read_content_safely(self, response) -> str:
        """
        Read response content up to ``max_content_size`` bytes.

        Bytes beyond the limit are dropped so the page can still be scanned.
        A multi-byte character cut at the limit is dropped with them.
        """
        content_bytes = b''
        truncated = False
        async for chunk in response.content.iter_chunked(8192):
            content_bytes += chunk
            if len(content_bytes) > self.max_content_size:
                self.logger.warning(f"Content exceeded size limit, truncating: {response.url}")
                content_bytes = content_bytes[:self.max_content_size]
                truncated = True
                break

        self.stats['total_bytes_downloaded'] += len(content_bytes)

        encoding = response.charset or 'utf-8'
        try:
            return self._decode(content_bytes, encoding, truncated)
        except (UnicodeDecodeError, LookupError):
            # Try common encodings
            for fallback_encoding in ['utf-8', 'cp1252']:
                try:
                    return self._decode(content_bytes, fallback_encoding, truncated)
                except UnicodeDecodeError:
                    continue

            return content_bytes.decode('latin-1')

    @staticmethod
    def _decode(content_bytes: bytes, encoding: str, truncated: bool) -> str:
        # a non-final incremental decode holds back an incomplete trailing sequence
        decoder = codecs.getincrementaldecoder(encoding)()
        return decoder.decode(content_bytes, final=not truncated)

    def get_stats(self) -> Dict[str, int]:
        """Get fetcher statistics."""
        return self.stats.copy()

    def reset_stats(self):
        """Reset statistics counters."""
        for key in self.stats:
            self.stats[key] = 0
