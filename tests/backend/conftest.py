import asyncio

import pytest

from utils.fetcher import RetrievalError
from utils.session import LookupSession

SHEET_URL = "https://sheets.example.test/pub?output=csv"


class FakeFetcher:
    """Stands in for fetch_csv_text; records every call."""

    def __init__(self, text=None, error=None, delay=0.0):
        self.text = text
        self.error = error
        self.delay = delay
        self.calls = []

    async def __call__(self, url, timeout=None):
        self.calls.append(url)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.text


@pytest.fixture
def make_session(sample_csv):
    """Factory for sessions backed by a fake fetcher (no network)."""
    def _make(text=None, error=None, delay=0.0, debounce_ms=20, **kwargs):
        fetcher = FakeFetcher(text=sample_csv if text is None and error is None else text, error=error, delay=delay)
        session = LookupSession(
            source_url=SHEET_URL,
            required_key="fromContent",
            required_headers=["fromContent", "toContent"],
            search_fields=["fromContent", "toContent"],
            debounce_ms=debounce_ms,
            fetcher=fetcher,
            **kwargs,
        )
        session.fetcher_stub = fetcher
        return session
    return _make


@pytest.fixture
def loaded_session(make_session):
    session = make_session()
    asyncio.run(session.load())
    return session


@pytest.fixture
def retrieval_error():
    return RetrievalError("HTTP error! status: 404", status_code=404)
