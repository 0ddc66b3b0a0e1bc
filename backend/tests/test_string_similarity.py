"""
Unit Tests for String Similarity

Tests:
- Levenshtein edit distance
- Normalised similarity score (bounds, symmetry, empty strings)

Run with: pytest tests/test_string_similarity.py -v
"""

import pytest

from reconciliation.matching_rules.string_similarity import levenshtein_distance, similarity


class TestLevenshteinDistance:
    """Test edit distance computation."""

    @pytest.mark.parametrize("a,b,expected", [
        ("", "", 0),
        ("abc", "", 3),
        ("", "abc", 3),
        ("kitten", "sitting", 3),
        ("flaw", "lawn", 2),
        ("joao silva", "joão silva", 1),
        ("same", "same", 0),
    ])
    def test_known_distances(self, a, b, expected):
        """Test distances for well-known pairs."""
        assert levenshtein_distance(a, b) == expected

    def test_distance_is_symmetric(self):
        """Test that argument order does not change the distance."""
        assert levenshtein_distance("helena prado", "elena pardo") == levenshtein_distance("elena pardo", "helena prado")


class TestSimilarity:
    """Test similarity score."""

    def test_identical_strings(self):
        """Test identical strings score 1.0."""
        assert similarity("maria souza", "maria souza") == 1.0

    def test_both_empty(self):
        """Test two empty strings score 1.0."""
        assert similarity("", "") == 1.0

    def test_one_empty(self):
        """Test empty vs non-empty scores 0.0."""
        assert similarity("", "abc") == 0.0

    def test_missing_accent(self):
        """Test a single accent difference over ten characters."""
        assert similarity("joao silva", "joão silva") == pytest.approx(0.9)

    @pytest.mark.parametrize("a,b", [
        ("carlos mendes", "carlos mendez"),
        ("ana", "mariana"),
        ("dr. rui barros", "rui"),
        ("xyzzy unknown", "maria souza"),
    ])
    def test_symmetric_and_bounded(self, a, b):
        """Test symmetry and [0, 1] bounds."""
        score = similarity(a, b)
        assert score == similarity(b, a)
        assert 0.0 <= score <= 1.0

    def test_completely_different(self):
        """Test strings with nothing in common score 0.0."""
        assert similarity("abc", "xyz") == 0.0
