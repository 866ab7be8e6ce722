"""Tests for Trello id validation."""

import pytest

from trello_github.utils.ids import is_valid_id


@pytest.mark.parametrize('value', [
    '5f1b2c3d4e5f6a7b8c9d0e1f',
    'ABCDEFabcdef012345678901',
    '0' * 24,
])
def test_is_valid_id_accepts_24_hex_characters(value: str) -> None:
    """Test that 24 hexadecimal characters are a valid id."""
    assert is_valid_id(value) is True


@pytest.mark.parametrize('value', [
    '',
    '5f1b2c3d4e5f6a7b8c9d0e1',  # 23 characters
    '5f1b2c3d4e5f6a7b8c9d0e1f0',  # 25 characters
    '5f1b2c3d4e5f6a7b8c9d0e1g',  # non-hex
    ' 5f1b2c3d4e5f6a7b8c9d0e1f',
    '5f1b2c3d4e5f6a7b8c9d0e1f\n',
    'list=5f1b2c3d4e5f6a7b8c9d0e1f',
])
def test_is_valid_id_rejects_other_strings(value: str) -> None:
    """Test that anything but exactly 24 hex characters is rejected."""
    assert is_valid_id(value) is False


def test_is_valid_id_rejects_non_strings() -> None:
    """Test that non-string values are rejected without raising."""
    assert is_valid_id(None) is False
    assert is_valid_id(123456789012345678901234) is False
