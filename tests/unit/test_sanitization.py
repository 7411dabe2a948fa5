"""
Unit tests for free-text sanitisation.

Key SDET Concepts Demonstrated:
- XSS-style payload neutralisation
- Boundary testing on the 1000-character cap
"""

from __future__ import annotations

import pytest

from taskhub.sanitization import normalize_email, sanitize_string, sanitize_tags

pytestmark = pytest.mark.unit


def test_angle_brackets_are_stripped():
    """Test that markup characters are removed, not escaped."""
    # Act & Assert
    assert sanitize_string("<script>hi</script>") == "scripthi/script"


def test_value_is_trimmed_after_stripping():
    """Test trimming happens after bracket removal."""
    # Act & Assert
    assert sanitize_string("  < padded >  ") == "padded"


def test_length_is_capped_at_1000():
    """Test the length cap boundary."""
    # Act & Assert
    assert len(sanitize_string("x" * 1000)) == 1000
    assert len(sanitize_string("x" * 1001)) == 1000


@pytest.mark.parametrize("value", [None, 5, ["a"], {"a": 1}])
def test_non_string_becomes_empty(value):
    """Test that non-string input sanitises to an empty string."""
    # Act & Assert
    assert sanitize_string(value) == ""


def test_tags_keep_order_and_duplicates():
    """Test that tag order and duplicates survive sanitisation."""
    # Act & Assert
    assert sanitize_tags(["work", "home", "work"]) == ["work", "home", "work"]


def test_tags_drop_non_strings_and_empties():
    """Test that junk entries are discarded."""
    # Act & Assert
    assert sanitize_tags(["ok", 3, None, "  ", "<>", " <b>x</b> "]) == ["ok", "bx/b"]


@pytest.mark.parametrize("value", [None, "work", {"a": 1}])
def test_non_list_tags_become_empty(value):
    """Test that anything but a list yields no tags."""
    # Act & Assert
    assert sanitize_tags(value) == []


def test_normalize_email_lowercases_and_trims():
    """Test email normalisation."""
    # Act & Assert
    assert normalize_email("  Alice@Example.COM ") == "alice@example.com"
    assert normalize_email(None) == ""
