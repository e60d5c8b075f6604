"""
Line-oriented anchor link extraction.
"""

import re
from typing import Iterable, List


class LinkExtractor:
    """
    Finds absolute http(s) links in anchor tags, one raw response line at a time.

    No document model is built: each line is scanned with a regular expression
    for ``<a ... href="http...">`` and every match is returned in left-to-right
    order.
    """

    ANCHOR_PATTERN = re.compile(
        r'<a\s(?:[^>]*?\s)?href\s*=\s*(["\'])http(.*?)\1',
        re.IGNORECASE
    )

    def extract(self, line: str) -> List[str]:
        """Return every absolute link found in anchor tags on ``line``."""
        return ['http' + match.group(2) for match in self.ANCHOR_PATTERN.finditer(line)]

    def extract_all(self, lines: Iterable[str]) -> List[str]:
        """Extract links from each line, preserving per-line then in-line order."""
        links = []
        for line in lines:
            links.extend(self.extract(line))
        return links
