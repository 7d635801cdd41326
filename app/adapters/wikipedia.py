"""Wikipedia adapter: search for a page title, then fetch its intro extract."""

from __future__ import annotations

from typing import Any, Dict, Optional

import requests

from app.cache import TTLCache
from app.domain.models import CityDescription
from app.logging import get_logger
from app.utils.text import shorten_extract

from .base import BaseAdapter
from .exceptions import AdapterError, AdapterResponseError

logger = get_logger(__name__, component="adapter")

SEARCH_CACHE_PREFIX = "wiki_desc_search_"


class WikipediaAdapter(BaseAdapter):
    """Adapter for the MediaWiki action API.

    A lookup is two calls:
    1. list=search with srlimit=1 resolves the best-matching title
    2. prop=extracts (intro, plain text, redirects followed) for that title

    Successful lookups are cached per query string. Failures never raise;
    they are logged and reported as None so the caller can try the next
    query in its cascade.
    """

    ADAPTER_NAME = "wikipedia"

    def __init__(
        self,
        cache: TTLCache,
        api_url: str = "https://en.wikipedia.org/w/api.php",
        cache_ttl_seconds: int = 3600,
        max_description_length: int = 250,
        timeout: int = 30,
        user_agent: str = "UrbanAirQualityInsightsAPI/1.0",
        session: Optional[requests.Session] = None,
    ) -> None:
        super().__init__(timeout=timeout, user_agent=user_agent, session=session)
        self.cache = cache
        self.api_url = api_url
        self.cache_ttl_seconds = cache_ttl_seconds
        self.max_description_length = max_description_length

    def fetch_city_description(self, query: str) -> Optional[CityDescription]:
        """Look up a short description for a free-text query.

        Args:
            query: Search text, e.g. "Warsaw, PL"

        Returns:
            CityDescription, or None when nothing usable was found or the
            lookup failed
        """
        cache_key = f"{SEARCH_CACHE_PREFIX}{query}"
        cached = self.cache.get(cache_key)
        if cached is not None:
            return cached

        try:
            title = self._search_top_title(query)
            if title is None:
                logger.debug(
                    "No Wikipedia search results",
                    extra={"event": "wikipedia.search.empty", "query": query},
                )
                return None

            page = self._fetch_intro_extract(title)
        except (AdapterError, KeyError, TypeError, AttributeError) as e:
            logger.error(
                f"Error fetching Wikipedia description for \"{query}\": {e}",
                extra={
                    "event": "wikipedia.fetch.error",
                    "query": query,
                    "error_type": type(e).__name__,
                },
            )
            return None

        if page is None:
            return None

        extract = page.get("extract")
        page_title = page.get("title")
        if "missing" in page or not isinstance(extract, str) or not isinstance(page_title, str):
            return None
        if not extract.strip() or not page_title.strip():
            return None

        result = CityDescription(
            description=shorten_extract(extract, self.max_description_length),
            title=page_title,
        )
        self.cache.set(cache_key, result, self.cache_ttl_seconds)
        return result

    def _search_top_title(self, query: str) -> Optional[str]:
        """Return the title of the top search hit, or None."""
        data = self._make_request(
            self.api_url,
            params={
                "action": "query",
                "list": "search",
                "srsearch": query,
                "srlimit": 1,
                "format": "json",
            },
        )
        results = data["query"]["search"]
        if not results:
            return None
        return results[0]["title"]

    def _fetch_intro_extract(self, title: str) -> Optional[Dict[str, Any]]:
        """Return the first page object of an extracts query for title."""
        data = self._make_request(
            self.api_url,
            params={
                "action": "query",
                "prop": "extracts",
                "exintro": "true",
                "explaintext": "true",
                "redirects": 1,
                "format": "json",
                "titles": title,
            },
        )
        pages = data["query"]["pages"]
        if not isinstance(pages, dict):
            raise AdapterResponseError(
                f"Expected 'pages' to be an object, got {type(pages).__name__}"
            )
        if not pages:
            return None
        page = next(iter(pages.values()))
        if not isinstance(page, dict):
            raise AdapterResponseError(
                f"Expected page to be an object, got {type(page).__name__}"
            )
        return page
