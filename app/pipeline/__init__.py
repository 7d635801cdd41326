"""Pipeline orchestration: pollution fetch, normalization, enrichment, assembly."""

from .assembler import assemble_response, sort_cities
from .models import PipelineRunStats
from .runner import CityInsightsPipeline, parse_pagination, pollution_cache_key

__all__ = [
    "CityInsightsPipeline",
    "PipelineRunStats",
    "assemble_response",
    "sort_cities",
    "parse_pagination",
    "pollution_cache_key",
]
