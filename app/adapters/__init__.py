"""HTTP adapters for the upstream services.

- PollutionApiAdapter: login and paginated pollution readings
- WikipediaAdapter: search-then-extract description lookup

Exception handling:
    from app.adapters.exceptions import AdapterError, AdapterHTTPError, AdapterTimeoutError, AdapterResponseError
"""

from .base import BaseAdapter
from .exceptions import (
    AdapterConfigurationError,
    AdapterError,
    AdapterHTTPError,
    AdapterResponseError,
    AdapterTimeoutError,
)
from .pollution import PollutionApiAdapter
from .wikipedia import WikipediaAdapter

__all__ = [
    "BaseAdapter",
    "PollutionApiAdapter",
    "WikipediaAdapter",
    # Exceptions
    "AdapterError",
    "AdapterHTTPError",
    "AdapterTimeoutError",
    "AdapterResponseError",
    "AdapterConfigurationError",
]
