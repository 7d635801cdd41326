"""Description enrichment: Wikipedia lookups filtered by relevance heuristics.

- DescriptionResolver: query cascade with caching
- evaluate_relevance / RelevanceVerdict: the acceptance policy
"""

from .relevance import (
    COUNTRY_TERMS,
    STRONG_NEGATIVE_KEYWORDS,
    RelevanceVerdict,
    contains_negative_keyword,
    evaluate_relevance,
)
from .service import DescriptionResolver, build_query_cascade

__all__ = [
    "DescriptionResolver",
    "build_query_cascade",
    "evaluate_relevance",
    "contains_negative_keyword",
    "RelevanceVerdict",
    "COUNTRY_TERMS",
    "STRONG_NEGATIVE_KEYWORDS",
]
