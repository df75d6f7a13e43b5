from string import ascii_uppercase

_BASE = len(ascii_uppercase)


def layer_label(ordinal: int) -> str:
    """
    Returns the bijective base-26 label for a 0-indexed layer ordinal.

    0 -> "A", 25 -> "Z", 26 -> "AA", 701 -> "ZZ", 702 -> "AAA".
    """
    if ordinal < 0:
        raise ValueError("Layer ordinals must be non-negative.")

    label = ""
    n = ordinal
    while n >= 0:
        label = ascii_uppercase[n % _BASE] + label
        n = n // _BASE - 1
    return label
