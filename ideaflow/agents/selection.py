"""Parsing of numeric idea selections."""

import re

_SEPARATORS = re.compile(r"[,\s]+")


def parse_selection(text: str) -> list[int]:
    """
    Parse a list of idea numbers such as "1, 3" or "2 3".

    Tokens that are not integers are dropped. Parsing never fails; an empty
    result is left for the caller to reject.

    Args:
        text (str): Raw selection input.

    Returns:
        list[int]: Unique numbers in ascending order.
    """
    numbers: set[int] = set()
    for token in _SEPARATORS.split(text.strip()):
        try:
            numbers.add(int(token))
        except ValueError:
            continue
    return sorted(numbers)


def is_valid_selection(numbers: list[int], count: int = 3) -> bool:
    """
    Check a parsed selection against the number of available ideas.

    Args:
        numbers (list[int]): Parsed selection.
        count (int, optional): Number of ideas on offer. Defaults to 3.

    Returns:
        bool: True if non-empty and every number lies in [1, count].
    """
    return bool(numbers) and all(1 <= n <= count for n in numbers)
