"""
Feed Aggregator - build-time merging of RSS/Atom feeds.

Fetches a configured list of feeds, resolves their authors, removes duplicate
entries and produces one newest-first aggregate with an author roster for a
site renderer.
"""

__version__ = "0.1.0"
