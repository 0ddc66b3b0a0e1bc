"""
Name Matching Rules

Finds the registry name an imported patient or professional name refers to.

Rules, applied in order (first hit wins):
1. Exact: normalised names are equal
2. Contains: the registry name contains the candidate or the reverse
3. Fuzzy: edit-distance similarity strictly above the threshold

Each rule is checked against the whole registry before the next one runs,
so the cheap comparisons short-circuit the edit-distance pass.
"""

from dataclasses import dataclass
from typing import Dict, Any, Optional, Sequence

from reconciliation.match_profiles import NameMatchType
from reconciliation.matching_rules.string_similarity import similarity

DEFAULT_SIMILARITY_THRESHOLD = 0.80


def normalize_name(value: Optional[str]) -> str:
    """Lowercase and trim a name for comparison."""
    return (value or "").lower().strip()


@dataclass
class NameMatch:
    """
    Result of a successful name match.
    """
    candidate: str
    matched: str
    match_type: NameMatchType
    score: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "candidate": self.candidate,
            "matched": self.matched,
            "match_type": self.match_type.value,
            "score": round(self.score, 4)
        }


class NameMatcher:
    """
    Matches normalised personal names against a registry of names.

    Tuned for spelling variants of people's names (missing accents,
    typos, partial names), not arbitrary text.
    """

    def __init__(self, threshold: float = DEFAULT_SIMILARITY_THRESHOLD):
        self.threshold = threshold

    def match(self, candidate: str, registry: Sequence[str]) -> Optional[NameMatch]:
        """
        Find the best registry entry for a candidate name.

        Args:
            candidate: Normalised (lowercased, trimmed) name
            registry: Normalised registry names, in priority order

        Returns:
            NameMatch describing the rule that fired, or None
        """
        # A blank entry is contained in every name
        registry = [registered for registered in registry if registered]

        for registered in registry:
            if registered == candidate:
                return NameMatch(candidate, registered, NameMatchType.EXACT, 1.0)

        for registered in registry:
            if candidate in registered or registered in candidate:
                return NameMatch(
                    candidate,
                    registered,
                    NameMatchType.CONTAINS,
                    similarity(candidate, registered)
                )

        for registered in registry:
            score = similarity(candidate, registered)
            if score > self.threshold:
                return NameMatch(candidate, registered, NameMatchType.FUZZY, score)

        return None

    def find_closest_match(self, candidate: str, registry: Sequence[str]) -> Optional[str]:
        """Return the matching registry name, or None when no rule fires."""
        result = self.match(candidate, registry)
        return result.matched if result else None
