"""Pollution data aggregation across countries.

The aggregator fans out one request per country on a thread pool and joins
them all-or-nothing: either every country page is merged into a single
PollutionPage, or the whole call fails with UpstreamError.
"""

from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, List, Optional, Sequence, Tuple

from app.adapters.exceptions import AdapterError, AdapterHTTPError
from app.adapters.pollution import PollutionApiAdapter
from app.auth.service import TokenAuthenticator
from app.domain.exceptions import AuthError, UpstreamError, UpstreamErrorReason
from app.domain.models import CountryCode, PollutionPage, RawCityRecord
from app.logging import get_logger
from app.logging.context import log_context
from app.utils.concurrency import submit_with_context

logger = get_logger(__name__, component="pollution")

AUTH_FAILURE_HINT = (
    "Authentication failed for pollution API: token might be expired or invalid. "
    "Please check login credentials."
)


class PollutionAggregator:
    """Fetches one page of pollution readings per country and merges them."""

    def __init__(
        self,
        adapter: PollutionApiAdapter,
        authenticator: TokenAuthenticator,
        countries: Optional[Sequence[str]] = None,
        max_workers: int = 4,
    ):
        """Initialize PollutionAggregator.

        Args:
            adapter: Pollution API adapter
            authenticator: Source of bearer tokens
            countries: Countries queried when none is requested (defaults to all supported)
            max_workers: Upper bound on concurrent country fetches
        """
        self.adapter = adapter
        self.authenticator = authenticator
        self.countries = [str(c) for c in (countries or [c.value for c in CountryCode])]
        self.max_workers = max_workers

    def close(self) -> None:
        self.adapter.close()

    def fetch_pollution_data(
        self, country_code: Optional[str] = None, page: int = 1, limit: int = 10
    ) -> PollutionPage:
        """Fetch and merge pollution readings.

        Args:
            country_code: Single country to query (case-insensitive); all
                configured countries when omitted
            page: Upstream page number
            limit: Upstream page size

        Returns:
            PollutionPage with country-tagged records and the summed total

        Raises:
            UpstreamError: If authentication or any country fetch fails
        """
        requested = [country_code.strip().upper()] if country_code else list(self.countries)
        targets = self._select_supported(requested)

        if not targets:
            return PollutionPage(cities=[], page=page, limit=limit, total=0)

        token = self._acquire_token()

        results: List[Tuple[List[RawCityRecord], int]] = []
        with ThreadPoolExecutor(max_workers=min(self.max_workers, len(targets))) as executor:
            futures = [
                submit_with_context(executor, self._fetch_country, country, page, limit, token)
                for country in targets
            ]
            # result() re-raises the first failure; the executor still waits for the rest
            for future in futures:
                results.append(future.result())

        cities: List[RawCityRecord] = []
        total = 0
        for country_cities, country_total in results:
            cities.extend(country_cities)
            total += country_total

        logger.info(
            f"Fetched {len(cities)} pollution records for {', '.join(targets)}",
            extra={
                "event": "pollution.fetch.completed",
                "countries": targets,
                "page": page,
                "limit": limit,
                "count": len(cities),
                "total": total,
            },
        )
        return PollutionPage(cities=cities, page=page, limit=limit, total=total)

    def _select_supported(self, requested: List[str]) -> List[str]:
        """Drop (with a warning) codes outside the supported set."""
        supported = []
        for country in requested:
            if not CountryCode.is_supported(country):
                logger.warning(
                    f"Skipping invalid or unsupported country code: {country}",
                    extra={"event": "pollution.country.unsupported", "country": country},
                )
                continue
            supported.append(country)
        return supported

    def _acquire_token(self) -> str:
        try:
            return self.authenticator.get_token()
        except AuthError as e:
            raise UpstreamError(
                f"Failed to fetch pollution data from API: {e}",
                UpstreamErrorReason.UNAUTHORIZED,
                detail=AUTH_FAILURE_HINT,
            ) from e

    def _fetch_country(
        self, country: str, page: int, limit: int, token: str
    ) -> Tuple[List[RawCityRecord], int]:
        """Fetch one country page; returns (tagged records, total)."""
        with log_context(country=country):
            logger.info(
                f"Fetching pollution data for {country}: page {page}, limit {limit}",
                extra={"event": "pollution.country.fetch", "page": page, "limit": limit},
            )

            try:
                payload = self.adapter.fetch_pollution_page(country, page, limit, token)
            except AdapterHTTPError as e:
                if e.status_code == 401:
                    # The cached token was rejected; the next request logs in again
                    self.authenticator.invalidate()
                raise self._translate_http_error(e, country) from e
            except AdapterError as e:
                logger.error(
                    f"Error fetching pollution data for {country}: {e}",
                    extra={"event": "pollution.country.failed", "error_type": type(e).__name__},
                )
                raise UpstreamError(
                    "Failed to fetch pollution data from API.",
                    UpstreamErrorReason.NETWORK_FAILURE,
                    detail=str(e),
                ) from e

            return self._parse_payload(payload, country, limit)

    @staticmethod
    def _parse_payload(payload: Dict[str, Any], country: str, limit: int) -> Tuple[List[RawCityRecord], int]:
        meta = payload.get("meta") or {}
        total_pages = meta.get("totalPages") if isinstance(meta, dict) else None
        if not isinstance(total_pages, int) or isinstance(total_pages, bool) or total_pages < 0:
            total_pages = 0
        total = total_pages * limit

        results = payload.get("results")
        if not isinstance(results, list):
            logger.debug(
                f"No results for {country}",
                extra={"event": "pollution.country.empty", "meta": meta},
            )
            return [], total

        cities = []
        for entry in results:
            if not isinstance(entry, dict):
                logger.warning(
                    "Skipping non-object pollution entry",
                    extra={"event": "pollution.entry.invalid", "entry": repr(entry)},
                )
                continue
            cities.append(RawCityRecord.model_validate({**entry, "country": country}))

        return cities, total

    @staticmethod
    def _translate_http_error(error: AdapterHTTPError, country: str) -> UpstreamError:
        if error.status_code == 401:
            logger.error(
                AUTH_FAILURE_HINT,
                extra={"event": "pollution.country.unauthorized", "status_code": 401},
            )
            return UpstreamError(
                "Failed to fetch pollution data from API.",
                UpstreamErrorReason.UNAUTHORIZED,
                detail=AUTH_FAILURE_HINT,
                status_code=401,
            )

        if error.status_code == 400:
            upstream_message = None
            if isinstance(error.body, dict):
                upstream_message = error.body.get("error")
            logger.error(
                f"API returned 400 for country code {country}. Error: {upstream_message}",
                extra={"event": "pollution.country.bad_request", "status_code": 400},
            )
            return UpstreamError(
                "Failed to fetch pollution data from API.",
                UpstreamErrorReason.BAD_REQUEST,
                detail=upstream_message or str(error),
                status_code=400,
            )

        logger.error(
            f"Error fetching pollution data for {country}: {error}",
            extra={"event": "pollution.country.failed", "status_code": error.status_code},
        )
        return UpstreamError(
            "Failed to fetch pollution data from API.",
            UpstreamErrorReason.NETWORK_FAILURE,
            detail=str(error),
            status_code=error.status_code,
        )
