"""Edit-distance similarity for duplicate block detection.

    similarity(A, B) = (len(longer) - levenshtein(A, B)) / len(longer)

1.0 means identical, 0.0 means nothing in common. Two empty strings are
identical.
"""


def levenshtein_distance(a: str, b: str) -> int:
    """Minimum number of single-character edits turning ``a`` into ``b``."""
    if a == b:
        return 0
    if len(a) < len(b):
        a, b = b, a
    if not b:
        return len(a)

    previous = list(range(len(b) + 1))
    for i, char_a in enumerate(a, 1):
        current = [i]
        for j, char_b in enumerate(b, 1):
            cost = 0 if char_a == char_b else 1
            current.append(min(previous[j] + 1, current[j - 1] + 1, previous[j - 1] + cost))
        previous = current
    return previous[-1]


def similarity(a: str, b: str) -> float:
    longer, shorter = (a, b) if len(a) >= len(b) else (b, a)
    if not longer:
        return 1.0
    return (len(longer) - levenshtein_distance(longer, shorter)) / len(longer)


def may_reach(len_a: int, len_b: int, threshold: float) -> bool:
    """Upper bound check: can two strings of these lengths reach ``threshold``?

    The distance is at least the length difference, so similarity never
    exceeds ``shorter / longer``.
    """
    longer = max(len_a, len_b)
    if longer == 0:
        return True
    return min(len_a, len_b) / longer >= threshold
