"""Final ordering and response shaping for enriched cities."""

from typing import Iterable

from app.domain.models import CitiesResponse, EnrichedCity


def sort_cities(cities: Iterable[EnrichedCity]) -> list:
    """Pollution descending, then name ascending."""
    return sorted(cities, key=lambda city: (-city.pollution, city.name))


def assemble_response(page: int, limit: int, enriched: Iterable[EnrichedCity]) -> CitiesResponse:
    """Build the GET /cities body.

    `total` counts the cities actually returned, not the upstream total.

    Example:
        >>> assemble_response(1, 10, []).total
        0
    """
    ordered = sort_cities(enriched)
    return CitiesResponse(page=page, limit=limit, total=len(ordered), cities=ordered)
