"""Tests for helper functions."""

from blogapi.utils.helpers import normalize_tag_names


def test_normalize_strips_and_dedupes() -> None:
    assert normalize_tag_names([" go ", "infra", "go", "", "   "]) == ["go", "infra"]


def test_normalize_keeps_case() -> None:
    assert normalize_tag_names(["Go", "go"]) == ["Go", "go"]


def test_normalize_empty() -> None:
    assert normalize_tag_names([]) == []
