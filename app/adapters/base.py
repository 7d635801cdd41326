"""Base adapter class with shared HTTP handling for upstream APIs.

Both the pollution source and Wikipedia adapters inherit from BaseAdapter,
which owns the requests.Session, timeout, User-Agent and the translation of
transport failures into the adapter exception hierarchy.
"""

import logging
from typing import Any, Dict, Optional

import requests

from app.logging import get_logger

from .exceptions import (
    AdapterConfigurationError,
    AdapterHTTPError,
    AdapterResponseError,
    AdapterTimeoutError,
)

logger = get_logger(__name__, component="adapter")


class BaseAdapter:
    """Base class for upstream HTTP adapters.

    Attributes:
        timeout: HTTP request timeout in seconds
        user_agent: User-Agent header for HTTP requests
    """

    ADAPTER_NAME = "base"

    def __init__(
        self,
        timeout: int = 30,
        user_agent: str = "UrbanAirQualityInsightsAPI/1.0",
        session: Optional[requests.Session] = None,
    ) -> None:
        """Initialize adapter with configuration.

        Args:
            timeout: HTTP request timeout in seconds (range 5-300)
            user_agent: User-Agent header for requests
            session: Optional pre-built session (tests inject a mock here)

        Raises:
            AdapterConfigurationError: If timeout is outside valid range or user_agent is empty
        """
        if not 5 <= timeout <= 300:
            raise AdapterConfigurationError(
                f"Timeout must be between 5 and 300 seconds, got: {timeout}"
            )
        if not user_agent or not user_agent.strip():
            raise AdapterConfigurationError("user_agent cannot be empty")

        self.timeout = timeout
        self.user_agent = user_agent.strip()

        self._session = session or requests.Session()
        self._session.headers.update({"User-Agent": self.user_agent})

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self._session.close()

    def _make_request(
        self,
        url: str,
        method: str = "GET",
        headers: Optional[Dict[str, str]] = None,
        params: Optional[Dict[str, Any]] = None,
        json_data: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """Make HTTP request with error handling.

        Args:
            url: URL to request
            method: HTTP method (default "GET")
            headers: Additional headers (merged with session defaults)
            params: Query parameters
            json_data: JSON body for POST requests

        Returns:
            Parsed JSON response

        Raises:
            AdapterHTTPError: On 4xx/5xx status or connection failure (status_code=0)
            AdapterTimeoutError: On request timeout
            AdapterResponseError: On invalid JSON
        """
        request_headers = dict(self._session.headers)
        if headers:
            request_headers.update(headers)

        try:
            logger.debug(
                f"HTTP {method} request to {url}",
                extra={
                    "event": "adapter.fetch.request",
                    "adapter": self.ADAPTER_NAME,
                    "method": method,
                    "url": url,
                    "timeout": self.timeout,
                },
            )

            response = self._session.request(
                method=method,
                url=url,
                headers=request_headers,
                params=params,
                json=json_data,
                timeout=self.timeout,
            )
        except requests.exceptions.Timeout as e:
            logger.warning(
                f"Request to {url} timed out after {self.timeout} seconds",
                extra={
                    "event": "adapter.fetch.timeout",
                    "adapter": self.ADAPTER_NAME,
                    "url": url,
                    "timeout": self.timeout,
                },
            )
            raise AdapterTimeoutError(
                f"Request to {url} timed out after {self.timeout} seconds",
                url=url,
            ) from e
        except requests.exceptions.RequestException as e:
            logger.error(
                f"Request to {url} failed: {e}",
                extra={
                    "event": "adapter.fetch.error",
                    "adapter": self.ADAPTER_NAME,
                    "error_type": type(e).__name__,
                    "url": url,
                },
            )
            raise AdapterHTTPError(
                f"Request to {url} failed: {e}",
                status_code=0,
                url=url,
            ) from e

        if response.status_code >= 400:
            is_server_error = response.status_code >= 500
            logger.log(
                logging.WARNING if is_server_error else logging.ERROR,
                f"HTTP {response.status_code} error from {url}",
                extra={
                    "event": "adapter.fetch.http_error",
                    "adapter": self.ADAPTER_NAME,
                    "status_code": response.status_code,
                    "url": url,
                },
            )
            raise AdapterHTTPError(
                f"HTTP {response.status_code}: {response.reason}",
                status_code=response.status_code,
                url=url,
                body=self._safe_body(response),
            )

        try:
            data = response.json()
        except ValueError as e:
            logger.error(
                f"Failed to parse JSON response from {url}",
                extra={
                    "event": "adapter.fetch.error",
                    "adapter": self.ADAPTER_NAME,
                    "error_type": "JSONDecodeError",
                    "url": url,
                },
            )
            raise AdapterResponseError(
                f"Failed to parse JSON response from {url}: {e}"
            ) from e

        logger.debug(
            "HTTP request succeeded",
            extra={
                "event": "adapter.fetch.succeeded",
                "adapter": self.ADAPTER_NAME,
                "status_code": response.status_code,
                "url": url,
            },
        )
        return data

    @staticmethod
    def _safe_body(response: requests.Response) -> Any:
        """Best-effort decode of an error body for diagnostics."""
        try:
            return response.json()
        except ValueError:
            return response.text[:500] if response.text else None
