"""Trello identifier validation."""

import re

# Trello ids follow one pattern across all entities (boards, lists, cards).
TRELLO_ID_PATTERN = re.compile(r'[0-9a-fA-F]{24}')


def is_valid_id(value: object) -> bool:
    """Check whether a value is a well-formed Trello id.

    Args:
        value: Candidate id.

    Returns:
        True if value is a string of exactly 24 hexadecimal characters.
    """
    if not isinstance(value, str):
        return False
    return TRELLO_ID_PATTERN.fullmatch(value) is not None
