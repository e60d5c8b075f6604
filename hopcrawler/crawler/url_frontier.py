"""
URL Frontier implementations for managing URLs to crawl.
Provides a depth-first stack of per-page queues and a breadth-first alternative.
"""

import heapq
import itertools
import logging
import time
from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Dict, Iterable, List, Optional, Tuple


def normalize_url(url: str) -> str:
    """Normalize a URL for visited-set membership by ensuring a trailing slash."""
    return url if url.endswith('/') else url + '/'


@dataclass
class URLTask:
    """Represents a URL waiting in the frontier."""
    url: str
    depth: int
    parent_url: Optional[str] = None
    discovered_time: float = field(default_factory=time.time)


class DepthFirstFrontier:
    """
    Stack of per-page queues.

    Every ``take_next`` pushes a fresh queue that collects the links of the page
    about to be fetched, so the most recently discovered page's links are
    explored before its siblings. Queue order keeps each page's links in the
    order they were found.
    """

    policy = 'depth_first'

    def __init__(self):
        self.logger = logging.getLogger(__name__)
        # index 0 is the bottom of the stack
        self.levels: List[Deque[URLTask]] = []
        self._current: Optional[URLTask] = None

    def seed(self, url: str):
        """Place the seed URL as the only entry of a new bottom queue."""
        self.levels = [deque([URLTask(url=url, depth=0)])]
        self._current = None
        self.logger.debug(f"Seeded frontier with {url}")

    def _pop_exhausted(self):
        while self.levels and not self.levels[-1]:
            self.levels.pop()

    def is_empty(self) -> bool:
        """Check if the frontier holds no pending URL."""
        self._pop_exhausted()
        return not self.levels

    def take_next(self) -> Optional[URLTask]:
        """
        Dequeue the next URL to fetch.

        Returns None when every queue is exhausted. Otherwise a new empty queue
        is pushed on top to hold the links of the returned page.
        """
        self._pop_exhausted()
        if not self.levels:
            return None

        task = self.levels[-1].popleft()
        self.levels.append(deque())
        self._current = task
        self.logger.debug(f"Retrieved URL from frontier: {task.url} (stack depth {len(self.levels)})")
        return task

    def push_links(self, urls: Iterable[str]):
        """Append discovered links to the back of the top queue, in order."""
        if not self.levels:
            self.levels.append(deque())
        parent = self._current.url if self._current else None
        depth = self._current.depth + 1 if self._current else 0
        top = self.levels[-1]
        for url in urls:
            top.append(URLTask(url=url, depth=depth, parent_url=parent))

    def push_priority(self, url: str):
        """Insert a URL at the front of the top queue so it is taken next."""
        if not self.levels:
            self.levels.append(deque())
        parent = self._current.url if self._current else None
        depth = self._current.depth if self._current else 0
        self.levels[-1].appendleft(URLTask(url=url, depth=depth, parent_url=parent))

    def __len__(self) -> int:
        return sum(len(queue) for queue in self.levels)

    def get_stats(self) -> Dict[str, int]:
        """Get frontier statistics."""
        return {
            'total_queued': len(self),
            'stack_depth': len(self.levels)
        }


class BreadthFirstFrontier:
    """
    Heap ordered by ascending hop depth, ties broken by discovery order.

    Redirect targets and retries bypass the heap and are served first.
    """

    policy = 'breadth_first'

    def __init__(self):
        self.logger = logging.getLogger(__name__)
        self.heap: List[Tuple[int, int, URLTask]] = []
        self.priority: Deque[URLTask] = deque()
        self._counter = itertools.count()
        self._current: Optional[URLTask] = None

    def seed(self, url: str):
        """Reset the frontier to hold only the seed URL."""
        self.heap = []
        self.priority = deque()
        self._current = None
        self._push(URLTask(url=url, depth=0))
        self.logger.debug(f"Seeded frontier with {url}")

    def _push(self, task: URLTask):
        heapq.heappush(self.heap, (task.depth, next(self._counter), task))

    def is_empty(self) -> bool:
        """Check if the frontier holds no pending URL."""
        return not self.priority and not self.heap

    def take_next(self) -> Optional[URLTask]:
        """Dequeue a priority URL if any, otherwise the shallowest one."""
        if self.priority:
            task = self.priority.popleft()
        elif self.heap:
            task = heapq.heappop(self.heap)[2]
        else:
            return None

        self._current = task
        self.logger.debug(f"Retrieved URL from frontier: {task.url} (depth {task.depth})")
        return task

    def push_links(self, urls: Iterable[str]):
        """Queue discovered links one hop deeper than the current page."""
        parent = self._current.url if self._current else None
        depth = self._current.depth + 1 if self._current else 0
        for url in urls:
            self._push(URLTask(url=url, depth=depth, parent_url=parent))

    def push_priority(self, url: str):
        """Serve a URL before anything else in the frontier."""
        parent = self._current.url if self._current else None
        depth = self._current.depth if self._current else 0
        self.priority.appendleft(URLTask(url=url, depth=depth, parent_url=parent))

    def __len__(self) -> int:
        return len(self.priority) + len(self.heap)

    def get_stats(self) -> Dict[str, int]:
        """Get frontier statistics."""
        return {
            'total_queued': len(self),
            'priority_queued': len(self.priority)
        }


FRONTIER_POLICIES = {
    DepthFirstFrontier.policy: DepthFirstFrontier,
    BreadthFirstFrontier.policy: BreadthFirstFrontier,
}


def create_frontier(policy: str = 'depth_first'):
    """Build an empty frontier for the named traversal policy."""
    try:
        return FRONTIER_POLICIES[policy]()
    except KeyError:
        raise ValueError(f"Unknown frontier policy: {policy}") from None
