import logging
from typing import Optional

import httpx

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

USER_AGENT = "sheet-dictionary-lookup/0.1"


class RetrievalError(Exception):
    """Raised when the published CSV cannot be fetched (network fault or non-2xx)."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


async def fetch_csv_text(
    url: str,
    timeout: float = 20.0,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> str:
    """GET the published CSV and return its body as text.

    No retry and no cached fallback: any failure raises RetrievalError.
    `transport` lets tests substitute an httpx.MockTransport.
    """
    if not url or not url.strip():
        raise RetrievalError("No CSV URL configured")

    try:
        async with httpx.AsyncClient(
            follow_redirects=True,
            timeout=timeout,
            headers={"User-Agent": USER_AGENT, "Accept": "text/csv, text/plain;q=0.9, */*;q=0.5"},
            transport=transport,
        ) as client:
            r = await client.get(url)
    except httpx.HTTPError as e:
        logger.error(f"Fetch error for {url}: {e}")
        raise RetrievalError(f"Network error: {e}") from e

    if not r.is_success:
        logger.error(f"Fetch error for {url}: HTTP {r.status_code}")
        raise RetrievalError(f"HTTP error! status: {r.status_code}", status_code=r.status_code)

    text = r.text
    logger.info(f"Fetched {len(text)} characters from {url}")
    return text
