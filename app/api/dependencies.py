"""Wiring of the pipeline and its collaborators for the HTTP layer.

build_pipeline() creates one object graph around a single shared cache.
The FastAPI app keeps the result on app.state; get_pipeline() hands it to
route functions through Depends.
"""

from typing import Optional

import requests
from fastapi import Request

from app.adapters.pollution import PollutionApiAdapter
from app.adapters.wikipedia import WikipediaAdapter
from app.auth.service import TokenAuthenticator
from app.cache import TTLCache
from app.config.environment import EnvironmentConfig
from app.config.models import AppConfig
from app.enrichment.service import DescriptionResolver
from app.normalization.service import CityNormalizer
from app.pipeline.runner import CityInsightsPipeline
from app.pollution.service import PollutionAggregator


def build_pipeline(
    app_config: AppConfig,
    env_config: EnvironmentConfig,
    cache: TTLCache,
    session: Optional[requests.Session] = None,
) -> CityInsightsPipeline:
    """
    Build the request pipeline.

    Args:
        app_config: Application configuration
        env_config: Environment configuration (credentials, base URL)
        cache: Cache store shared by every caching component
        session: Optional HTTP session shared by both adapters

    Returns:
        Fully wired CityInsightsPipeline
    """
    advanced = app_config.advanced
    cache_config = app_config.cache

    pollution_adapter = PollutionApiAdapter(
        base_url=env_config.pollution_api_base_url,
        timeout=advanced.http_request_timeout,
        user_agent=advanced.user_agent,
        session=session,
    )
    wikipedia_adapter = WikipediaAdapter(
        cache=cache,
        api_url=app_config.wikipedia.api_url,
        cache_ttl_seconds=cache_config.description_ttl_seconds,
        max_description_length=app_config.wikipedia.max_description_length,
        timeout=advanced.http_request_timeout,
        user_agent=advanced.user_agent,
        session=session,
    )

    authenticator = TokenAuthenticator(
        adapter=pollution_adapter,
        cache=cache,
        username=env_config.pollution_api_username,
        password=env_config.pollution_api_password,
        refresh_buffer_seconds=app_config.auth.refresh_buffer_seconds,
        min_token_ttl_seconds=app_config.auth.min_token_ttl_seconds,
    )
    aggregator = PollutionAggregator(
        adapter=pollution_adapter,
        authenticator=authenticator,
        countries=app_config.countries,
        max_workers=advanced.max_workers,
    )
    resolver = DescriptionResolver(
        wikipedia=wikipedia_adapter,
        cache=cache,
        cache_ttl_seconds=cache_config.description_ttl_seconds,
    )

    return CityInsightsPipeline(
        aggregator=aggregator,
        normalizer=CityNormalizer(),
        resolver=resolver,
        cache=cache,
        pollution_ttl_seconds=cache_config.pollution_ttl_seconds,
        max_workers=advanced.max_workers,
        default_page=app_config.pagination.default_page,
        default_limit=app_config.pagination.default_limit,
    )


def get_pipeline(request: Request) -> CityInsightsPipeline:
    """FastAPI dependency returning the pipeline attached to the app."""
    return request.app.state.pipeline
