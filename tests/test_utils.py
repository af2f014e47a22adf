"""Tests for image_to_code/utils.py."""

from __future__ import annotations

import pytest

from image_to_code.utils import parse_bool, parse_int, strip_or_none


@pytest.mark.parametrize("value", ["1", "true", " YES ", "on"])
def test_parse_bool_truthy(value):
    assert parse_bool(value) is True


def test_parse_bool_default():
    assert parse_bool(None, default=True) is True
    assert parse_bool("off", default=True) is False


def test_parse_int():
    assert parse_int("42", 0) == 42
    assert parse_int("4.2", 7) == 7
    assert parse_int(None, 3) == 3


def test_strip_or_none():
    assert strip_or_none("  x ") == "x"
    assert strip_or_none("   ") is None
    assert strip_or_none(None) is None

