"""End-to-end tests: real wiring, stubbed HTTP session.

Every component is built by build_pipeline around one shared cache; only
requests.Session.request is replaced by a router that fakes the pollution
API and the MediaWiki API.
"""

from unittest.mock import Mock

import pytest
import requests
from fastapi.testclient import TestClient

from app.api import build_pipeline
from app.cache import TTLCache
from app.config.environment import EnvironmentConfig
from app.config.models import AppConfig
from app.main import create_app

POLLUTION_BASE = "https://pollution.test"
WIKI_API = "https://en.wikipedia.org/w/api.php"

POLLUTION_DATA = {
    "PL": [
        {"name": "wArSAW (Capital)", "pollution": 80},
        {"name": "Kraków", "pollution": "65.2"},
        {"name": "123", "pollution": 5},
        {"name": "Monitoring Station", "pollution": 40},
    ],
    "DE": [
        {"name": "Berlin", "pollution": 65.2},
        {"name": "", "pollution": 3},
        {"name": "Mercury", "pollution": 90},
        {"name": "Hamburg", "pollution": -1},
    ],
}

SEARCH_TITLES = {
    "warsaw (capital)": "Warsaw",
    "warsaw": "Warsaw",
    "kraków": "Kraków",
    "berlin": "Berlin",
    "monitoring station": "Monitoring station",
    "mercury": "Mercury",
}

EXTRACTS = {
    "Warsaw": "Warsaw is the capital and largest city of Poland. It stands on the Vistula.",
    "Kraków": "Kraków is the second-largest city in Poland. It was the royal capital.",
    "Berlin": "Berlin is the capital and largest city of Germany. It is also a state.",
    "Monitoring station": "A monitoring station is a facility for sampling air. They are common.",
    "Mercury": "Mercury may refer to:\nMercury (planet)",
}


def json_response(payload, status_code=200):
    response = Mock(spec=requests.Response)
    response.status_code = status_code
    response.reason = "OK" if status_code < 400 else "Error"
    response.text = ""
    response.json.return_value = payload
    return response


class FakeUpstream:
    """Routes Session.request calls to canned responses and counts them."""

    def __init__(self):
        self.login_calls = 0
        self.pollution_calls = []
        self.wiki_calls = 0
        self.login_status = 200

    def __call__(self, method, url, headers=None, params=None, json=None, timeout=None):
        if url == f"{POLLUTION_BASE}/auth/login":
            self.login_calls += 1
            if self.login_status != 200:
                return json_response({"error": "Unauthorized"}, status_code=self.login_status)
            return json_response({"token": "tok-123", "expiresIn": 3600})

        if url == f"{POLLUTION_BASE}/pollution":
            assert headers["Authorization"] == "Bearer tok-123"
            self.pollution_calls.append(params["country"])
            return json_response(
                {"meta": {"page": params["page"], "totalPages": 1}, "results": POLLUTION_DATA[params["country"]]}
            )

        if url == WIKI_API:
            self.wiki_calls += 1
            if params.get("list") == "search":
                base = params["srsearch"].split(",")[0].strip().lower()
                title = SEARCH_TITLES.get(base)
                return json_response({"query": {"search": [{"title": title}] if title else []}})
            title = params["titles"]
            return json_response({"query": {"pages": {"1": {"title": title, "extract": EXTRACTS[title]}}}})

        raise AssertionError(f"Unexpected request: {method} {url}")


@pytest.fixture
def upstream():
    return FakeUpstream()


@pytest.fixture
def cache():
    return TTLCache(name="integration")


@pytest.fixture
def client(upstream, cache):
    session = requests.Session()
    session.request = Mock(side_effect=upstream)

    app_config = AppConfig(countries=["PL", "DE"])
    env_config = EnvironmentConfig(
        pollution_api_username="user",
        pollution_api_password="secret",
        pollution_api_base_url=POLLUTION_BASE,
    )
    pipeline = build_pipeline(app_config, env_config, cache, session=session)
    return TestClient(create_app(pipeline), raise_server_exceptions=False)


class TestEndToEnd:
    """Full request flow through the HTTP route."""

    def test_all_countries(self, client, upstream):
        response = client.get("/cities")

        assert response.status_code == 200
        body = response.json()
        assert body["page"] == 1
        assert body["limit"] == 10
        assert body["total"] == 3
        assert [c["name"] for c in body["cities"]] == ["wArSAW (Capital)", "Berlin", "Kraków"]
        assert body["cities"][0] == {
            "name": "wArSAW (Capital)",
            "country": "PL",
            "pollution": 80.0,
            "description": "Warsaw is the capital and largest city of Poland.",
        }
        assert sorted(upstream.pollution_calls) == ["DE", "PL"]
        assert upstream.login_calls == 1

    def test_single_country(self, client, upstream):
        response = client.get("/cities", params={"country": "de", "page": "1", "limit": "5"})

        body = response.json()
        assert [c["name"] for c in body["cities"]] == ["Berlin"]
        assert body["limit"] == 5
        assert upstream.pollution_calls == ["DE"]

    def test_repeat_request_served_from_cache(self, client, upstream):
        first = client.get("/cities").json()
        wiki_calls = upstream.wiki_calls

        second = client.get("/cities").json()

        assert first == second
        assert upstream.login_calls == 1
        assert len(upstream.pollution_calls) == 2
        # Every lookup that found a page is cached, rejected ones included
        assert wiki_calls > 0
        assert upstream.wiki_calls == wiki_calls

    def test_cache_clear_forces_refetch(self, client, upstream, cache):
        client.get("/cities", params={"country": "PL"})
        cache.clear()
        client.get("/cities", params={"country": "PL"})

        assert upstream.login_calls == 2
        assert upstream.pollution_calls == ["PL", "PL"]

    def test_unsupported_country_is_empty(self, client, upstream):
        response = client.get("/cities", params={"country": "US"})

        assert response.status_code == 200
        assert response.json() == {"page": 1, "limit": 10, "total": 0, "cities": []}
        assert upstream.login_calls == 0

    @pytest.mark.parametrize("query", ["page=0", "limit=-3", "page=abc", "limit=2.5"])
    def test_bad_pagination(self, client, upstream, query):
        response = client.get(f"/cities?{query}")

        assert response.status_code == 400
        assert response.json() == {"error": "Page and limit must be positive integers."}
        assert upstream.login_calls == 0

    def test_login_rejected(self, client, upstream):
        upstream.login_status = 401

        response = client.get("/cities")

        assert response.status_code == 502
        assert "error" in response.json()
        assert upstream.pollution_calls == []
