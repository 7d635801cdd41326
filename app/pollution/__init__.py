"""Pollution data aggregation across the supported countries."""

from .service import PollutionAggregator

__all__ = ["PollutionAggregator"]
