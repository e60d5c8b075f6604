import pytest

from hopcrawler.crawler.fetcher import FetchOutcome, FetchResult, classify_status


class FakeFetcher:
    """Serves canned responses per URL; the last response for a URL repeats."""

    def __init__(self, responses):
        self.responses = {url: list(items) for url, items in responses.items()}
        self.calls = []
        self.closed = False

    async def fetch(self, url):
        self.calls.append(url)
        queue = self.responses.get(url)
        if not queue:
            return status(url, 404)
        response = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(response, Exception):
            raise response
        return response

    async def close(self):
        self.closed = True


class SleepRecorder:
    def __init__(self):
        self.delays = []

    async def __call__(self, delay):
        self.delays.append(delay)


def page(url, *lines):
    return FetchResult(url=url, status_code=200, outcome=FetchOutcome.OK, lines=list(lines))


def redirect(url, location, code=302):
    return FetchResult(url=url, status_code=code, outcome=FetchOutcome.REDIRECT, location=location)


def status(url, code):
    return FetchResult(url=url, status_code=code, outcome=classify_status(code))


def anchor(url):
    return f'<a href="{url}">link</a>'


@pytest.fixture
def sleeper():
    return SleepRecorder()
