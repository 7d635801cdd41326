"""Description resolution for normalized city candidates.

For each candidate a cascade of Wikipedia queries is tried, most specific
first. The first cached or accepted description wins; later queries in the
cascade are never sent.
"""

import logging
from typing import List, Optional

from app.adapters.wikipedia import WikipediaAdapter
from app.cache import TTLCache
from app.domain.models import NormalizedCity
from app.logging import get_logger

from .relevance import evaluate_relevance

logger = get_logger(__name__, component="enrichment")

DESCRIPTION_CACHE_PREFIX = "wiki_"


def build_query_cascade(original_name: str, country: str, lookup_name: str) -> List[str]:
    """Ordered Wikipedia queries for a city, most specific first.

    Example:
        >>> build_query_cascade("wArSAW (Capital)", "PL", "Warsaw")
        ['wArSAW (Capital), PL', 'Warsaw, PL', 'wArSAW (Capital)', 'Warsaw']
    """
    return [
        f"{original_name}, {country}",
        f"{lookup_name}, {country}",
        original_name,
        lookup_name,
    ]


class DescriptionResolver:
    """Finds a relevant short description for a city, or None.

    Responsibilities:
    - Walk the query cascade
    - Serve accepted descriptions from the cache
    - Apply the relevance policy to fresh Wikipedia results
    - Cache accepted descriptions per query
    """

    def __init__(
        self,
        wikipedia: WikipediaAdapter,
        cache: TTLCache,
        cache_ttl_seconds: int = 3600,
        logger_instance: Optional[logging.Logger] = None,
    ):
        """Initialize DescriptionResolver.

        Args:
            wikipedia: Adapter performing the search/extract lookups
            cache: Shared cache store
            cache_ttl_seconds: Lifetime of accepted descriptions
            logger_instance: Logger instance (defaults to module logger)
        """
        self.wikipedia = wikipedia
        self.cache = cache
        self.cache_ttl_seconds = cache_ttl_seconds
        self.logger = logger_instance or logger

    def resolve(self, original_name: str, country: str, lookup_name: str) -> Optional[str]:
        """Return an accepted description for the city, or None.

        Args:
            original_name: City name as delivered by the pollution source
            country: Country code
            lookup_name: Normalized lookup name
        """
        for query in build_query_cascade(original_name, country, lookup_name):
            cache_key = f"{DESCRIPTION_CACHE_PREFIX}{query}"
            cached = self.cache.get(cache_key)
            if cached:
                self.logger.debug(
                    "Serving description from cache",
                    extra={"event": "enrichment.description.cache_hit", "query": query},
                )
                return cached

            result = self.wikipedia.fetch_city_description(query)
            if result is None or not result.description:
                continue

            verdict = evaluate_relevance(
                result.description, result.title, original_name, lookup_name, country
            )
            if verdict.accepted:
                self.cache.set(cache_key, result.description, self.cache_ttl_seconds)
                self.logger.debug(
                    "Accepted Wikipedia description",
                    extra={
                        "event": "enrichment.description.accepted",
                        "query": query,
                        "title": result.title,
                    },
                )
                return result.description

            self.logger.warning(
                f"Wikipedia description for \"{query}\" filtered due to: {verdict.summary()}",
                extra={
                    "event": "enrichment.description.rejected",
                    "query": query,
                    "title": result.title,
                },
            )

        return None

    def resolve_city(self, city: NormalizedCity) -> Optional[str]:
        """Convenience wrapper around resolve() for a NormalizedCity."""
        return self.resolve(city.original_name, city.country, city.lookup_name)

    def close(self) -> None:
        """Close the Wikipedia adapter's HTTP session."""
        self.wikipedia.close()
