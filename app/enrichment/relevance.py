"""Heuristic acceptance policy for Wikipedia descriptions.

A description/title pair is accepted for a city only when:
- no negative keyword occurs in the description or the title, and
- the country is mentioned (name, adjective or raw code), and
- the original or lookup city name is mentioned.

All checks are lowercase substring tests. Duplicates in the keyword list
are harmless; tuning it changes which cities reach the response.
"""

from dataclasses import dataclass
from typing import Dict, List, Tuple

STRONG_NEGATIVE_KEYWORDS: Tuple[str, ...] = (
    "may refer to:", "disambiguation page", "film", "album", "number", "symbol",
    "species", "river", "mountain range", "historical region", "concept", "theory",
    "organization", "company", "product", "mathematical", "scientific", "list of",
    "is a character in", "is a fictional", "is an abstract", "is a type of", "refers to",
    "is a genus of", "is a surname", "is a given name", "is a song", "is an episode",
    "is a novel by", "is a play by", "is a television series", "is a video game",
    "is a computer program", "is an acronym for", "is a chemical element", "is a unit of",
    "dictator", "tank series", "medicine", "monitoring", "political party", "streaming service",
    "election", "polling",
    "aircraft", "military", "weapon", "vehicle", "disease", "condition", "medical parameter",
    "observation of", "historical figure",
    "fictional character", "fictional place", "fictional entity", "corporate entity", "software",
    "platform", "service",
    # Non-city places and generic single-letter disambiguations
    "industrial region", "power plant", "monitoring station", "industrial zone", "unknown point",
    "facility", "station", "complex", "area (disambiguation)", "site (disambiguation)",
    "point (disambiguation)",
    "alpha (disambiguation)", "b (disambiguation)", "c (disambiguation)", "d (disambiguation)",
    "e (disambiguation)",
    "number (disambiguation)", "number theory", "mathematical constant", "mathematical concept",
    "medical condition", "medical device", "medical procedure", "medical treatment", "medical system",
    "military unit", "military base", "military operation", "military vehicle", "military aircraft",
    "political party", "political movement", "political organization", "political system",
    "political theory",
    "streaming service", "television series", "video game", "software platform", "software service",
    "historical event", "historical period", "historical figure", "historical site",
    "geological feature", "body of water", "mountain range", "natural feature",
    # Any disambiguation marker, whatever precedes it
    "(disambiguation)",
)

COUNTRY_TERMS: Dict[str, List[str]] = {
    "PL": ["Poland", "Polish"],
    "DE": ["Germany", "German"],
    "ES": ["Spain", "Spanish"],
    "FR": ["France", "French"],
}


@dataclass(frozen=True)
class RelevanceVerdict:
    """Outcome of the four relevance predicates for one description."""

    country_relevant: bool
    content_relevant: bool
    negative_in_description: bool
    negative_in_title: bool

    @property
    def accepted(self) -> bool:
        return (
            self.country_relevant
            and self.content_relevant
            and not self.negative_in_description
            and not self.negative_in_title
        )

    def summary(self) -> str:
        return (
            f"CountryRelevant: {self.country_relevant}, "
            f"ContentRelevantToQuery: {self.content_relevant}, "
            f"StrongNegativeMatch: {self.negative_in_description}, "
            f"TitleStrongNegativeMatch: {self.negative_in_title}."
        )


def contains_negative_keyword(text: str) -> bool:
    """True if any strong negative keyword occurs in the lowercased text."""
    lowered = text.lower()
    return any(keyword in lowered for keyword in STRONG_NEGATIVE_KEYWORDS)


def country_terms(country: str) -> List[str]:
    """Lowercased name/adjective forms for a country code (empty if unknown)."""
    return [term.lower() for term in COUNTRY_TERMS.get(country.upper(), [])]


def evaluate_relevance(
    description: str,
    title: str,
    original_name: str,
    lookup_name: str,
    country: str,
) -> RelevanceVerdict:
    """Run the acceptance predicates on a (description, title) pair.

    Args:
        description: Short description from Wikipedia
        title: Wikipedia page title
        original_name: City name as delivered by the pollution source
        lookup_name: Normalized lookup name
        country: Country code, e.g. "PL"

    Returns:
        RelevanceVerdict; check .accepted
    """
    lower_desc = description.lower()
    lower_title = title.lower()
    lower_country = country.lower()

    def mentioned(term: str) -> bool:
        return term in lower_desc or term in lower_title

    country_relevant = any(mentioned(term) for term in country_terms(country)) or mentioned(lower_country)
    content_relevant = mentioned(original_name.lower()) or mentioned(lookup_name.lower())

    return RelevanceVerdict(
        country_relevant=country_relevant,
        content_relevant=content_relevant,
        negative_in_description=contains_negative_keyword(description),
        negative_in_title=contains_negative_keyword(title),
    )
