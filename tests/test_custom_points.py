import logging
import sys
from pathlib import Path

import pytest

# Ensure repository root is on sys.path for module imports
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from ranking_logic import parse_custom_points, resolve_points


@pytest.mark.parametrize(
    "details, expected",
    [
        ('{"customPoints": 25}', 25),
        ('{"customPoints": 2.5, "note": "bonus"}', 2.5),
        ('{"customPoints": 0}', 0),
        ('{"customPoints": -5}', -5),
        ({"customPoints": 12}, 12),
        (b'{"customPoints": 7}', 7),
    ],
)
def test_parse_custom_points_valid(details, expected):
    assert parse_custom_points(details) == expected


@pytest.mark.parametrize(
    "details",
    [None, "", float("nan"), '{"note": "no override"}', '{"customPoints": null}'],
)
def test_parse_custom_points_absent_is_silent(details, caplog):
    with caplog.at_level(logging.WARNING):
        assert parse_custom_points(details) is None
    assert caplog.text == ""


@pytest.mark.parametrize(
    "details",
    [
        "{not json",
        "[1, 2, 3]",
        "42",
        '{"customPoints": "25"}',
        '{"customPoints": true}',
        '{"customPoints": NaN}',
        '{"customPoints": Infinity}',
        12,
    ],
)
def test_parse_custom_points_bad_payload_warns(details, caplog):
    with caplog.at_level(logging.WARNING):
        assert parse_custom_points(details) is None
    assert caplog.records
    assert all(r.levelno == logging.WARNING for r in caplog.records)


def test_resolve_points_override_replaces_base():
    assert resolve_points(10, '{"customPoints": 25}') == 25


def test_resolve_points_override_to_zero():
    assert resolve_points(10, '{"customPoints": 0}') == 0


def test_resolve_points_falls_back_to_base():
    assert resolve_points(10, "oops") == 10
    assert resolve_points(10, None) == 10


@pytest.mark.parametrize("base", [None, float("nan"), "10", True])
def test_resolve_points_missing_base_is_zero(base):
    assert resolve_points(base) == 0
