from rapidfuzz.distance import Levenshtein

from rentintel.parsing import round_half_up


def similarity(a: str, b: str) -> int:
    """
    Edit-distance similarity of two strings on a 0-100 scale.

    Args:
        a (str): First string (normally already normalized).
        b (str): Second string.

    Returns:
        int: round((max_len - levenshtein) / max_len * 100). Two empty strings
             are identical (100); one empty string against a non-empty one is 0.
    """
    a = a or ""
    b = b or ""
    max_len = max(len(a), len(b))
    if max_len == 0:
        return 100
    if not a or not b:
        return 0
    if a == b:
        return 100

    distance = Levenshtein.distance(a, b)
    return round_half_up((max_len - distance) / max_len * 100)
