"""Edit distance used to rank fix candidates."""

from __future__ import annotations


def levenshtein(a: str, b: str) -> int:
    """Minimum single-character inserts, deletes and substitutions turning *a* into *b*.

    Case-sensitive; compares codepoints.
    """
    if a == b:
        return 0
    if len(a) < len(b):
        a, b = b, a
    if not b:
        return len(a)

    previous = list(range(len(b) + 1))
    for i, char_a in enumerate(a, start=1):
        current = [i]
        for j, char_b in enumerate(b, start=1):
            current.append(
                min(
                    previous[j] + 1,  # delete
                    current[j - 1] + 1,  # insert
                    previous[j - 1] + (char_a != char_b),  # substitute
                )
            )
        previous = current
    return previous[-1]
