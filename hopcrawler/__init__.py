"""
Hop Crawler

A bounded-depth web crawler that follows anchor links for a fixed number of hops.
"""

__version__ = "1.0.0"
__description__ = "A bounded-depth web crawler with redirect priority and 5xx retry backoff"
