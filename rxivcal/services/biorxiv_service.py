"""bioRxiv details-API client: pages through a whole month of preprints."""

import logging
from typing import Any, Optional

import httpx

from rxivcal.models.paper import MonthQuery, Paper

logger = logging.getLogger(__name__)

BIORXIV_DETAILS_URL = "https://api.biorxiv.org/details"
PAGE_SIZE = 100  # fixed by the API
MAX_PAPERS = 2000
TIMEOUT = 30.0


class BiorxivService:
    """Async client for ``/details/{server}/{start}/{end}/{cursor}/json``.

    Pages are requested strictly one after another.  Every failure mode
    (HTTP error status, malformed payload, transport error) ends the
    loop early and the records gathered so far are returned; nothing is
    raised to the caller.
    """

    def __init__(
        self,
        base_url: str = BIORXIV_DETAILS_URL,
        server: str = "biorxiv",
        max_papers: int = MAX_PAPERS,
        timeout: float = TIMEOUT,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """Initialize the service.

        Args:
            base_url: Details endpoint root (without server segment)
            server: ``biorxiv`` or ``medrxiv``
            max_papers: Safety cap on accumulated records per month
            timeout: Per-request timeout in seconds
            client: Optional pre-built ``httpx.AsyncClient`` (tests inject
                one backed by ``httpx.MockTransport``); it is not closed here
        """
        self.base_url = base_url.rstrip("/")
        self.server = server
        self.max_papers = max_papers
        self.timeout = timeout
        self._client = client

    def page_url(self, start: str, end: str, cursor: int) -> str:
        return f"{self.base_url}/{self.server}/{start}/{end}/{cursor}/json"

    async def fetch_papers_by_month(self, year: int, month: int) -> list[Paper]:
        """Fetch every paper whose record date falls in (year, zero-based month).

        Args:
            year: Calendar year
            month: Zero-based month (0 = January)

        Returns:
            All records retrieved before the loop stopped. Partial on error.
        """
        query = MonthQuery(year, month)
        if self._client is not None:
            return await self._fetch_range(self._client, query)
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await self._fetch_range(client, query)

    async def _fetch_range(
        self, client: httpx.AsyncClient, query: MonthQuery
    ) -> list[Paper]:
        papers: list[Paper] = []
        cursor = 0
        total = 0
        pages = 0
        stop_reason = "complete"

        try:
            while True:
                url = self.page_url(query.start_str, query.end_str, cursor)
                response = await client.get(url)
                pages += 1

                if not response.is_success:
                    logger.warning(
                        "bioRxiv API error at cursor %d: %s %s",
                        cursor, response.status_code, response.reason_phrase,
                    )
                    stop_reason = f"http {response.status_code}"
                    break

                collection, page_total = _parse_page(response)
                if collection is None:
                    logger.warning("Malformed bioRxiv payload at cursor %d", cursor)
                    stop_reason = "malformed payload"
                    break
                if page_total is not None:
                    total = page_total

                papers.extend(Paper.from_api(r) for r in collection if isinstance(r, dict))
                cursor += len(collection)

                if len(papers) >= self.max_papers:
                    logger.warning(
                        "Reached maximum paper limit (%d) for %s", self.max_papers, query.key
                    )
                    stop_reason = "safety cap"
                    break
                if not collection:
                    stop_reason = "empty page"
                    break
                if cursor >= total:
                    break
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.error("Failed to fetch bioRxiv papers for %s: %s", query.key, e)
            stop_reason = f"transport error ({type(e).__name__})"

        logger.info(
            "Fetched %d papers for %s in %d request(s) [%s]",
            len(papers), query.key, pages, stop_reason,
        )
        return papers


def _parse_page(response: httpx.Response) -> tuple[Optional[list[Any]], Optional[int]]:
    """Extract ``(collection, total)`` from a page response.

    ``collection`` is None when the payload is malformed.  ``total`` is
    None when the ``messages`` record is missing or unparsable (the API
    sends it as a number or a numeric string).
    """
    try:
        data = response.json()
    except ValueError:
        return None, None
    if not isinstance(data, dict):
        return None, None

    collection = data.get("collection")
    if not isinstance(collection, list):
        return None, None

    total: Optional[int] = None
    messages = data.get("messages")
    if isinstance(messages, list) and messages and isinstance(messages[0], dict):
        try:
            total = int(messages[0].get("total"))
        except (TypeError, ValueError):
            total = None
    return collection, total


async def fetch_papers_by_month(year: int, month: int) -> list[Paper]:
    """Module-level shortcut using default settings."""
    return await BiorxivService().fetch_papers_by_month(year, month)
