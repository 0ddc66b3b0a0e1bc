"""
Matching Rules Module
"""

from .string_similarity import levenshtein_distance, similarity
from .name_rules import NameMatcher, NameMatch, normalize_name, DEFAULT_SIMILARITY_THRESHOLD

__all__ = [
    "levenshtein_distance",
    "similarity",
    "NameMatcher",
    "NameMatch",
    "normalize_name",
    "DEFAULT_SIMILARITY_THRESHOLD",
]
