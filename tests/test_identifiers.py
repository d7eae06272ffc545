"""Tests for buildgroups.identifiers."""

from __future__ import annotations

import pytest

from buildgroups.identifiers import normalize_identifier


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("@x/a", "x-a"),
        ("@My/Lib!!", "my-lib"),
        ("web", "web"),
        ("@acme/ui-kit", "acme-ui-kit"),
        ("--Leading and trailing--", "leading-and-trailing"),
        ("snake_case_name", "snake_case_name"),
        ("Ünïcode Name", "n-code-name"),
        ("", ""),
        ("@/!!", ""),
    ],
)
def test_normalize_identifier_examples(value: str, expected: str) -> None:
    assert normalize_identifier(value) == expected


@pytest.mark.parametrize(
    "value",
    ["@x/a", "@My/Lib!!", "a--b", "  spaced  out ", "_under_", "Ünïcode", "", "!!!"],
)
def test_normalize_identifier_is_idempotent(value: str) -> None:
    once = normalize_identifier(value)
    assert normalize_identifier(once) == once


def test_normalize_identifier_collapses_symbol_runs() -> None:
    assert normalize_identifier("a  /@@ b") == "a-b"
