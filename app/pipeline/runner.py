"""Pipeline orchestration for GET /cities requests."""

import re
from concurrent.futures import ThreadPoolExecutor
from typing import Any, List, Optional, Tuple
from uuid import uuid4

from app.cache import TTLCache
from app.domain.exceptions import InvalidRequestError, InvalidRequestReason
from app.domain.models import CitiesResponse, EnrichedCity, NormalizedCity, PollutionPage
from app.enrichment.service import DescriptionResolver
from app.logging import get_logger
from app.logging.context import log_context
from app.normalization.service import CityNormalizer
from app.pollution.service import PollutionAggregator
from app.utils.concurrency import submit_with_context
from app.utils.timestamps import utc_now

from .assembler import assemble_response
from .models import PipelineRunStats

logger = get_logger(__name__, component="pipeline")

POLLUTION_CACHE_PREFIX = "pollution"
PAGINATION_ERROR_MESSAGE = "Page and limit must be positive integers."

_DECIMAL = re.compile(r"^\d+$")


def _parse_positive_int(value: Any, default: int) -> int:
    if value is None:
        return default
    if isinstance(value, bool):
        raise InvalidRequestError(PAGINATION_ERROR_MESSAGE, InvalidRequestReason.BAD_PAGINATION)
    if isinstance(value, int):
        number = value
    elif isinstance(value, str) and _DECIMAL.match(value.strip()):
        number = int(value.strip())
    else:
        raise InvalidRequestError(PAGINATION_ERROR_MESSAGE, InvalidRequestReason.BAD_PAGINATION)

    if number < 1:
        raise InvalidRequestError(PAGINATION_ERROR_MESSAGE, InvalidRequestReason.BAD_PAGINATION)
    return number


def parse_pagination(
    page: Any = None, limit: Any = None, default_page: int = 1, default_limit: int = 10
) -> Tuple[int, int]:
    """Validate page/limit query values.

    Accepts ints or decimal strings; None falls back to the defaults.

    Raises:
        InvalidRequestError: If either value is not a positive integer
    """
    return _parse_positive_int(page, default_page), _parse_positive_int(limit, default_limit)


def pollution_cache_key(country: Optional[str], page: int, limit: int) -> str:
    """Cache key for an aggregated pollution page.

    Example:
        >>> pollution_cache_key(None, 1, 10)
        'pollution_default_p1_l10'
    """
    return f"{POLLUTION_CACHE_PREFIX}_{country or 'default'}_p{page}_l{limit}"


class CityInsightsPipeline:
    """
    Orchestrates a single GET /cities request.

    Flow: validate pagination, load the pollution page (cache, then
    aggregator), normalize, resolve descriptions concurrently, assemble.
    """

    def __init__(
        self,
        aggregator: PollutionAggregator,
        normalizer: CityNormalizer,
        resolver: DescriptionResolver,
        cache: TTLCache,
        pollution_ttl_seconds: int = 600,
        max_workers: int = 8,
        default_page: int = 1,
        default_limit: int = 10,
    ):
        """
        Initialize the pipeline.

        Args:
            aggregator: Fetches pollution pages from the upstream source
            normalizer: Turns raw records into lookup candidates
            resolver: Finds accepted descriptions for candidates
            cache: Shared cache store for aggregated pollution pages
            pollution_ttl_seconds: Lifetime of cached pollution pages
            max_workers: Upper bound on concurrent description lookups
            default_page: Page used when the request omits it
            default_limit: Limit used when the request omits it
        """
        self.aggregator = aggregator
        self.normalizer = normalizer
        self.resolver = resolver
        self.cache = cache
        self.pollution_ttl_seconds = pollution_ttl_seconds
        self.max_workers = max_workers
        self.default_page = default_page
        self.default_limit = default_limit

    def close(self) -> None:
        """Release the HTTP sessions held by the upstream adapters."""
        self.aggregator.close()
        self.resolver.close()
        logger.info("Upstream sessions closed", extra={"event": "pipeline.closed"})

    def get_polluted_cities(
        self, country: Optional[str] = None, page: Any = None, limit: Any = None
    ) -> CitiesResponse:
        """
        Produce the sorted, enriched city list for one request.

        Args:
            country: Country code (case-insensitive); all configured countries when omitted
            page: Page number as int or decimal string
            limit: Page size as int or decimal string

        Returns:
            CitiesResponse with `total` equal to the number of returned cities

        Raises:
            InvalidRequestError: If page or limit is not a positive integer
            UpstreamError: If the pollution source cannot be read
        """
        parsed_page, parsed_limit = parse_pagination(
            page, limit, self.default_page, self.default_limit
        )
        country_code = country.strip().upper() if country and country.strip() else None

        stats = PipelineRunStats(
            request_id=uuid4().hex,
            country=country_code,
            page=parsed_page,
            limit=parsed_limit,
            run_started_at=utc_now(),
        )

        with log_context(request_id=stats.request_id, country=country_code or "default"):
            pollution_page = self._load_pollution_page(country_code, parsed_page, parsed_limit, stats)
            stats.fetched_count = len(pollution_page.cities)

            candidates = self.normalizer.normalize_batch(pollution_page.cities)
            stats.normalized_count = len(candidates)

            enriched = self._enrich(candidates, stats)
            stats.enriched_count = len(enriched)

            response = assemble_response(parsed_page, parsed_limit, enriched)

            stats.finish(utc_now())
            logger.info(
                "Pipeline run completed",
                extra={
                    "event": "pipeline.run.completed",
                    "page": stats.page,
                    "limit": stats.limit,
                    "duration_ms": int(stats.duration_seconds * 1000),
                    "pollution_cache_hit": stats.pollution_cache_hit,
                    "fetched": stats.fetched_count,
                    "normalized": stats.normalized_count,
                    "enriched": stats.enriched_count,
                    "dropped": stats.dropped_count,
                    "failed": stats.failed_count,
                },
            )
            return response

    def _load_pollution_page(
        self, country: Optional[str], page: int, limit: int, stats: PipelineRunStats
    ) -> PollutionPage:
        cache_key = pollution_cache_key(country, page, limit)
        label = country or "all default countries"

        cached = self.cache.get(cache_key)
        if cached is not None:
            stats.pollution_cache_hit = True
            logger.info(
                f"Serving pollution data for {label} (page {page}, limit {limit}) from cache",
                extra={"event": "pipeline.pollution.cache_hit", "cache_key": cache_key},
            )
            return cached

        logger.info(
            f"Pollution data for {label} (page {page}, limit {limit}) not in cache, fetching",
            extra={"event": "pipeline.pollution.cache_miss", "cache_key": cache_key},
        )
        pollution_page = self.aggregator.fetch_pollution_data(country, page, limit)
        self.cache.set(cache_key, pollution_page, self.pollution_ttl_seconds)
        return pollution_page

    def _enrich(self, candidates: List[NormalizedCity], stats: PipelineRunStats) -> List[EnrichedCity]:
        if not candidates:
            return []

        enriched: List[EnrichedCity] = []
        with ThreadPoolExecutor(max_workers=min(self.max_workers, len(candidates))) as executor:
            futures = [
                (city, submit_with_context(executor, self.resolver.resolve_city, city))
                for city in candidates
            ]
            for city, future in futures:
                try:
                    description = future.result()
                except Exception as e:
                    # One failed lookup drops that city only
                    stats.failed_count += 1
                    logger.error(
                        f"Description lookup failed for \"{city.original_name}\" ({city.country}): {e}",
                        extra={
                            "event": "pipeline.description.failed",
                            "city": city.original_name,
                            "error_type": type(e).__name__,
                        },
                        exc_info=True,
                    )
                    continue

                if not description:
                    logger.warning(
                        f"City \"{city.original_name}\" ({city.country}) filtered out due to "
                        f"no relevant Wikipedia description",
                        extra={"event": "pipeline.city.filtered", "city": city.original_name},
                    )
                    continue

                enriched.append(
                    EnrichedCity(
                        name=city.original_name,
                        country=city.country,
                        pollution=city.pollution_value,
                        description=description,
                    )
                )
        return enriched
