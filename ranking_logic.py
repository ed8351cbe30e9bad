"""Helper functions for ranking students by the points they earned at events."""

from __future__ import annotations

import json
import logging
import math
import numbers
import unicodedata
from collections.abc import Iterable, Mapping
from typing import Any

import pandas as pd

from utils import full_name

STUDENT_COLUMNS = ["id", "first_name", "last_name", "is_male", "house_id"]
PARTICIPATION_COLUMNS = ["student_id", "points", "event_details"]
RANKING_COLUMNS = [
    "id",
    "first_name",
    "last_name",
    "total_points",
    "rank",
    "is_male",
    "house_id",
]

CUSTOM_POINTS_KEY = "customPoints"

Records = pd.DataFrame | Iterable[Mapping[str, Any]]


class NoDataError(Exception):
    """Raised when there are no eligible students to rank."""


def _is_points_value(value: Any) -> bool:
    # bool is an int subclass but never a point value
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return False
    return math.isfinite(value)


def parse_custom_points(event_details: Any) -> float | int | None:
    """Return the ``customPoints`` override stored in *event_details*.

    ``event_details`` is the free-form JSON text attached to an event log
    entry. An already decoded mapping is accepted as well. ``None`` is
    returned whenever there is no usable override: the payload is missing or
    empty, is not valid JSON, is not a JSON object, or its ``customPoints``
    field is absent or not a finite number. Bad payloads are logged and never
    raised.
    """
    if event_details is None:
        return None

    if isinstance(event_details, Mapping):
        details = event_details
    else:
        if isinstance(event_details, str) and not event_details:
            return None
        if pd.api.types.is_scalar(event_details) and pd.isna(event_details):
            return None
        try:
            details = json.loads(event_details)
        except (TypeError, ValueError) as exc:
            logging.warning("Failed to parse event_details JSON: %s", exc)
            return None

    if not isinstance(details, Mapping):
        logging.warning("Ignoring event_details that is not a JSON object: %r", details)
        return None

    value = details.get(CUSTOM_POINTS_KEY)
    if value is None:
        return None
    if not _is_points_value(value):
        logging.warning("Ignoring non-numeric %s value: %r", CUSTOM_POINTS_KEY, value)
        return None
    return value


def resolve_points(base_points: Any, event_details: Any = None) -> float | int:
    """Points one participation is worth.

    A valid ``customPoints`` override replaces the event type's points, it is
    never added to them. Missing base points count as 0.
    """
    points = base_points if _is_points_value(base_points) else 0
    custom = parse_custom_points(event_details)
    return points if custom is None else custom


def _as_frame(data: Records | None, columns: list[str]) -> pd.DataFrame:
    """Copy *data* into a new frame holding exactly *columns*."""
    if data is None:
        return pd.DataFrame(columns=columns)
    if isinstance(data, pd.DataFrame):
        df = data.copy()
    else:
        df = pd.DataFrame([dict(row) for row in data])
    for col in columns:
        if col not in df.columns:
            df[col] = None
    return df[columns].reset_index(drop=True)


def _total_points(roster: pd.DataFrame, events: pd.DataFrame) -> pd.Series:
    """Sum resolved points per eligible student; everyone starts at 0."""
    totals = dict.fromkeys(roster["id"], 0)
    skipped = 0

    for student_id, base, details in zip(
        events["student_id"], events["points"], events["event_details"]
    ):
        if student_id not in totals:
            skipped += 1
            continue
        totals[student_id] += resolve_points(base, details)

    if skipped:
        logging.info("Ignored %d participations of students not on the roster", skipped)

    result = roster["id"].map(totals).astype(float)
    # keep whole-number totals as integers, never truncate fractional ones
    if (result % 1 == 0).all():
        result = result.astype("int64")
    return result


def _collation_key(name: str) -> str:
    """Case- and accent-insensitive sort key, so "émile" sorts with "emile"."""
    decomposed = unicodedata.normalize("NFKD", name.casefold())
    return "".join(c for c in decomposed if not unicodedata.combining(c))


def _rank_partition(group: pd.DataFrame) -> pd.DataFrame:
    ordered = group.sort_values(
        ["total_points", "_name_key", "_name_exact", "_order"],
        ascending=[False, True, True, True],
    ).reset_index(drop=True)
    # "min" gives competition ranks: 1 + number of students strictly ahead
    ordered["rank"] = (
        ordered["total_points"].rank(method="min", ascending=False).astype("int64")
    )
    return ordered


def compute_student_rankings(
    students: Records,
    participations: Records | None = None,
) -> pd.DataFrame:
    """Rank eligible *students* by their event points, boys and girls separately.

    Parameters
    ----------
    students:
        Eligible students with ``id``, ``first_name``, ``last_name``,
        ``is_male`` and ``house_id``. Must not be empty.
    participations:
        Event participation rows with ``student_id``, ``points`` and
        ``event_details``. ``None`` means the rows could not be loaded; every
        student then ranks with 0 points.

    Returns
    -------
    ``pandas.DataFrame`` with the columns in ``RANKING_COLUMNS``. Male students
    come first, then female students, each group ordered by ``total_points``
    (descending) and full name, with competition ranks (1, 2, 2, 4)
    computed inside the group only.

    Raises
    ------
    NoDataError
        If there is no student to rank.
    """
    roster = _as_frame(students, STUDENT_COLUMNS)
    if roster.empty:
        raise NoDataError("No active students found")

    events = _as_frame(participations, PARTICIPATION_COLUMNS)

    roster["total_points"] = _total_points(roster, events)
    roster["_order"] = range(len(roster))
    names = [full_name(f, l) for f, l in zip(roster["first_name"], roster["last_name"])]
    roster["_name_key"] = [_collation_key(n) for n in names]
    roster["_name_exact"] = [n.casefold() for n in names]

    is_male = roster["is_male"]
    unflagged = ~is_male.isin([True, False])
    if unflagged.any():
        logging.warning("Skipping %d students without is_male", int(unflagged.sum()))

    groups = [
        _rank_partition(roster[is_male.isin([True])]),
        _rank_partition(roster[is_male.isin([False])]),
    ]
    groups = [g for g in groups if not g.empty]
    if not groups:
        raise NoDataError("No active students found")

    ranked = pd.concat(groups, ignore_index=True)
    ranked["is_male"] = ranked["is_male"].astype(bool)
    return ranked[RANKING_COLUMNS]


def _native(value: Any) -> Any:
    if hasattr(value, "item"):
        return value.item()
    return value


def rankings_to_records(rankings: pd.DataFrame) -> list[dict[str, Any]]:
    """Convert a rankings frame to JSON-serialisable dicts."""
    return [
        {key: _native(value) for key, value in row.items()}
        for row in rankings[RANKING_COLUMNS].to_dict(orient="records")
    ]
