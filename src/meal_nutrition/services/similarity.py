"""String similarity scoring."""


def levenshtein_distance(a: str, b: str) -> int:
    """Return the edit distance with unit insert, delete and substitute costs."""
    previous = list(range(len(b) + 1))
    for i, char_a in enumerate(a, start=1):
        current = [i]
        for j, char_b in enumerate(b, start=1):
            cost = 0 if char_a == char_b else 1
            current.append(
                min(
                    previous[j] + 1,
                    current[j - 1] + 1,
                    previous[j - 1] + cost,
                )
            )
        previous = current
    return previous[-1]


def similarity(a: str, b: str) -> float:
    """Score two normalized strings in [0, 1].

    Normalized edit distance, plus a bonus when one string contains the
    other. The bonus is added before clamping, so a close containment match
    can reach 1.0 without the strings being equal.
    """
    if not a or not b:
        return 0.0
    if a == b:
        return 1.0

    longest = max(len(a), len(b))
    score = 1 - levenshtein_distance(a, b) / longest
    if a in b or b in a:
        score += 0.1 + (min(len(a), len(b)) / longest) * 0.1
    return max(0.0, min(1.0, score))
