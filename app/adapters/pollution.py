"""Pollution source adapter: login and paginated pollution readings."""

from __future__ import annotations

from typing import Any, Dict, Optional

import requests

from app.logging import get_logger

from .base import BaseAdapter
from .exceptions import AdapterConfigurationError, AdapterResponseError

logger = get_logger(__name__, component="adapter")


class PollutionApiAdapter(BaseAdapter):
    """Adapter for the third-party pollution API.

    API Details:
        Login:    POST {base}/auth/login  {username, password} -> {token, expiresIn}
        Readings: GET  {base}/pollution?country=CC&page=N&limit=N
                  Authorization: Bearer <token>
                  -> {meta: {totalPages, ...}, results: [{name, pollution, ...}]}
    """

    ADAPTER_NAME = "pollution"

    def __init__(
        self,
        base_url: str,
        timeout: int = 30,
        user_agent: str = "UrbanAirQualityInsightsAPI/1.0",
        session: Optional[requests.Session] = None,
    ) -> None:
        super().__init__(timeout=timeout, user_agent=user_agent, session=session)
        if not base_url or not base_url.strip():
            raise AdapterConfigurationError("base_url cannot be empty")
        self.base_url = base_url.strip().rstrip("/")

    def login(self, username: str, password: str) -> Dict[str, Any]:
        """Exchange credentials for a bearer token.

        Returns:
            Raw login payload (expected keys: token, expiresIn)

        Raises:
            AdapterHTTPError: 401 on bad credentials, other statuses on failure
            AdapterResponseError: If the body is not a JSON object
        """
        url = f"{self.base_url}/auth/login"
        logger.info(
            "Logging in to pollution API",
            extra={"event": "adapter.pollution.login", "url": url},
        )

        data = self._make_request(
            url,
            method="POST",
            headers={"Content-Type": "application/json"},
            json_data={"username": username, "password": password},
        )
        if not isinstance(data, dict):
            raise AdapterResponseError(
                f"Expected JSON object from login, got {type(data).__name__}"
            )
        return data

    def fetch_pollution_page(self, country: str, page: int, limit: int, token: str) -> Dict[str, Any]:
        """Fetch one page of pollution readings for a country.

        Returns:
            Raw payload with 'meta' and 'results'

        Raises:
            AdapterHTTPError: On HTTP or connection failure
            AdapterTimeoutError: On timeout
            AdapterResponseError: If the body is not a JSON object
        """
        url = f"{self.base_url}/pollution"
        data = self._make_request(
            url,
            params={"country": country, "page": page, "limit": limit},
            headers={
                "Content-Type": "application/json",
                "Authorization": f"Bearer {token}",
            },
        )
        if not isinstance(data, dict):
            raise AdapterResponseError(
                f"Expected JSON object from pollution endpoint, got {type(data).__name__}"
            )
        return data
