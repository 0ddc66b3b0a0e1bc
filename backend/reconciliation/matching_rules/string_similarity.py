"""
String Similarity

Edit-distance scoring used by the name matching rules.

- levenshtein_distance: insertions, deletions and substitutions cost 1
- similarity: distance normalised by the longer string, in [0, 1]
"""

from typing import List


def levenshtein_distance(a: str, b: str) -> int:
    """
    Compute the edit distance between two strings.

    The table has len(b) + 1 rows and len(a) + 1 columns; each cell
    holds the cheapest edit of the prefixes that end there.
    """
    matrix: List[List[int]] = [[i] + [0] * len(a) for i in range(len(b) + 1)]
    for j in range(len(a) + 1):
        matrix[0][j] = j

    for i in range(1, len(b) + 1):
        for j in range(1, len(a) + 1):
            cost = 0 if b[i - 1] == a[j - 1] else 1
            matrix[i][j] = min(
                matrix[i - 1][j - 1] + cost,  # substitution
                matrix[i][j - 1] + 1,         # insertion
                matrix[i - 1][j] + 1          # deletion
            )

    return matrix[len(b)][len(a)]


def similarity(a: str, b: str) -> float:
    """
    Score how alike two strings are.

    Returns:
        1.0 for identical strings (including two empty strings),
        0.0 when nothing lines up
    """
    longest = max(len(a), len(b))
    if longest == 0:
        return 1.0

    return (longest - levenshtein_distance(a, b)) / longest
