"""Unit tests for the request pipeline.

Tests the CityInsightsPipeline orchestration including:
- Pagination validation
- Pollution page caching
- Concurrent description resolution and per-city failure isolation
- Response assembly and ordering
"""

from unittest.mock import Mock

import pytest

from app.cache import TTLCache
from app.domain.exceptions import (
    InvalidRequestError,
    InvalidRequestReason,
    UpstreamError,
    UpstreamErrorReason,
)
from app.domain.models import EnrichedCity, PollutionPage, RawCityRecord
from app.enrichment.service import DescriptionResolver
from app.normalization.service import CityNormalizer
from app.pipeline import (
    CityInsightsPipeline,
    PipelineRunStats,
    assemble_response,
    parse_pagination,
    pollution_cache_key,
)
from app.pollution.service import PollutionAggregator
from app.utils.timestamps import utc_now


def record(name, pollution, country="PL"):
    return RawCityRecord(name=name, country=country, pollution=pollution)


def enriched(name, pollution):
    return EnrichedCity(name=name, country="PL", pollution=pollution, description=f"{name} is a city.")


@pytest.fixture
def cache():
    return TTLCache()


@pytest.fixture
def aggregator():
    mock = Mock(spec=PollutionAggregator)
    mock.fetch_pollution_data.return_value = PollutionPage(
        cities=[
            record("Kraków", 50),
            record("Warsaw", 80.5),
            record(None, 10),
            record("Łódź", "50"),
        ],
        page=1,
        limit=10,
        total=10,
    )
    return mock


@pytest.fixture
def resolver():
    mock = Mock(spec=DescriptionResolver)
    mock.resolve_city.side_effect = lambda city: f"{city.lookup_name} is a city in Poland."
    return mock


@pytest.fixture
def pipeline(aggregator, resolver, cache):
    return CityInsightsPipeline(
        aggregator=aggregator,
        normalizer=CityNormalizer(),
        resolver=resolver,
        cache=cache,
        pollution_ttl_seconds=600,
        max_workers=4,
    )


class TestParsePagination:
    """Tests for parse_pagination."""

    def test_defaults(self):
        assert parse_pagination() == (1, 10)
        assert parse_pagination(None, None, default_page=2, default_limit=5) == (2, 5)

    @pytest.mark.parametrize(
        "page,limit,expected",
        [(1, 10, (1, 10)), ("3", "25", (3, 25)), (" 2 ", "7", (2, 7)), ("007", "1", (7, 1))],
    )
    def test_valid(self, page, limit, expected):
        assert parse_pagination(page, limit) == expected

    @pytest.mark.parametrize(
        "page,limit",
        [
            (0, 10),
            (1, 0),
            (-1, 10),
            ("0", "10"),
            ("-2", "10"),
            ("abc", "10"),
            ("1", "ten"),
            ("1.5", "10"),
            ("", "10"),
            (True, 10),
            (1.0, 10),
        ],
    )
    def test_invalid(self, page, limit):
        with pytest.raises(InvalidRequestError) as exc_info:
            parse_pagination(page, limit)

        assert exc_info.value.reason == InvalidRequestReason.BAD_PAGINATION
        assert str(exc_info.value) == "Page and limit must be positive integers."


class TestAssembleResponse:
    """Tests for assemble_response."""

    def test_sorted_by_pollution_then_name(self):
        response = assemble_response(1, 10, [enriched("A", 10), enriched("B", 30), enriched("C", 30)])

        assert [c.name for c in response.cities] == ["B", "C", "A"]

    def test_total_counts_returned_cities(self):
        response = assemble_response(2, 5, [enriched("A", 1), enriched("B", 2)])

        assert response.page == 2
        assert response.limit == 5
        assert response.total == 2

    def test_empty(self):
        response = assemble_response(1, 10, [])
        assert response.cities == []
        assert response.total == 0

    def test_ordering_invariant(self):
        cities = [enriched(n, p) for n, p in [("E", 5), ("D", 5), ("Z", 1), ("Y", 99), ("X", 5)]]
        ordered = assemble_response(1, 10, cities).cities

        for left, right in zip(ordered, ordered[1:]):
            assert left.pollution > right.pollution or (
                left.pollution == right.pollution and left.name <= right.name
            )


def test_pollution_cache_key():
    assert pollution_cache_key(None, 1, 10) == "pollution_default_p1_l10"
    assert pollution_cache_key("PL", 2, 5) == "pollution_PL_p2_l5"


def test_run_stats_duration_and_dropped():
    started = utc_now()
    stats = PipelineRunStats(request_id="r", country=None, page=1, limit=10, run_started_at=started)
    stats.fetched_count = 5
    stats.enriched_count = 2

    stats.finish(started)

    assert stats.duration_seconds == 0.0
    assert stats.dropped_count == 3


class TestCityInsightsPipeline:
    """Tests for CityInsightsPipeline.get_polluted_cities."""

    def test_end_to_end_with_mocks(self, pipeline):
        response = pipeline.get_polluted_cities("pl", "1", "10")

        assert response.page == 1
        assert response.limit == 10
        assert [c.name for c in response.cities] == ["Warsaw", "Kraków", "Łódź"]
        assert response.total == 3
        assert response.cities[0].description == "Warsaw is a city in Poland."
        assert response.cities[0].pollution == 80.5

    def test_country_uppercased_for_aggregator(self, pipeline, aggregator):
        pipeline.get_polluted_cities("de", 2, 5)

        aggregator.fetch_pollution_data.assert_called_once_with("DE", 2, 5)

    def test_missing_country_queries_all(self, pipeline, aggregator):
        pipeline.get_polluted_cities(None)
        pipeline.get_polluted_cities("  ")

        aggregator.fetch_pollution_data.assert_called_once_with(None, 1, 10)

    def test_pollution_page_cached(self, pipeline, aggregator, cache):
        pipeline.get_polluted_cities("PL", 1, 10)
        pipeline.get_polluted_cities("pl", "1", "10")

        assert aggregator.fetch_pollution_data.call_count == 1
        assert cache.get("pollution_PL_p1_l10") is not None

    def test_cache_key_varies_with_pagination(self, pipeline, aggregator):
        pipeline.get_polluted_cities("PL", 1, 10)
        pipeline.get_polluted_cities("PL", 2, 10)
        pipeline.get_polluted_cities("PL", 1, 20)

        assert aggregator.fetch_pollution_data.call_count == 3

    def test_invalid_pagination_makes_no_upstream_call(self, pipeline, aggregator):
        with pytest.raises(InvalidRequestError):
            pipeline.get_polluted_cities("PL", "0", "10")

        aggregator.fetch_pollution_data.assert_not_called()

    def test_upstream_error_propagates_and_is_not_cached(self, pipeline, aggregator, cache):
        aggregator.fetch_pollution_data.side_effect = UpstreamError(
            "down", UpstreamErrorReason.NETWORK_FAILURE
        )

        with pytest.raises(UpstreamError):
            pipeline.get_polluted_cities("PL")

        assert len(cache) == 0

    def test_city_without_description_dropped(self, pipeline, resolver):
        resolver.resolve_city.side_effect = lambda city: None if city.lookup_name == "Kraków" else "Desc."

        response = pipeline.get_polluted_cities("PL")

        assert [c.name for c in response.cities] == ["Warsaw", "Łódź"]
        assert response.total == 2

    def test_resolution_error_drops_only_that_city(self, pipeline, resolver):
        def resolve(city):
            if city.lookup_name == "Warsaw":
                raise RuntimeError("boom")
            return "Desc."

        resolver.resolve_city.side_effect = resolve

        response = pipeline.get_polluted_cities("PL")

        assert [c.name for c in response.cities] == ["Kraków", "Łódź"]

    def test_no_candidates_skips_resolution(self, pipeline, aggregator, resolver):
        aggregator.fetch_pollution_data.return_value = PollutionPage(cities=[], page=1, limit=10, total=0)

        response = pipeline.get_polluted_cities("PL")

        assert response.cities == []
        resolver.resolve_city.assert_not_called()

    def test_default_pagination_from_constructor(self, aggregator, resolver, cache):
        pipeline = CityInsightsPipeline(
            aggregator, CityNormalizer(), resolver, cache, default_page=3, default_limit=25
        )

        response = pipeline.get_polluted_cities("PL")

        aggregator.fetch_pollution_data.assert_called_once_with("PL", 3, 25)
        assert (response.page, response.limit) == (3, 25)

    def test_close_releases_upstream_sessions(self, pipeline, aggregator, resolver):
        pipeline.close()

        aggregator.close.assert_called_once()
        resolver.close.assert_called_once()
