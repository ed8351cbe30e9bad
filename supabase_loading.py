# supabase_loading.py
from __future__ import annotations

import logging
from urllib.parse import quote

import pandas as pd
import requests

from config import load_supabase_config
from ranking_logic import PARTICIPATION_COLUMNS, STUDENT_COLUMNS

STUDENTS_TABLE = "students"
PARTICIPATIONS_TABLE = "event_participants"

# Current students only; dev accounts have no house.
# Offset paging needs a stable order, so both queries sort by primary key.
STUDENTS_QUERY = {
    "select": ",".join(STUDENT_COLUMNS),
    "current_student": "eq.true",
    "house_id": "not.is.null",
    "order": "id",
}

PARTICIPATIONS_QUERY = {
    "select": "student_id,event_log!inner(event_details,event_types!inner(points))",
    "order": "id",
}

_HEADERS = {
    "Accept": "application/json",
    "Cache-Control": "no-cache",
    "Pragma": "no-cache",
    "User-Agent": "student-leaderboard/1.0 (+streamlit)",
}


class UpstreamUnavailable(Exception):
    """Raised when Supabase cannot be reached or returns something unusable."""


def _rest_url(base_url: str, table: str) -> str:
    return f"{base_url.rstrip('/')}/rest/v1/{quote(table)}"


def _auth_headers(anon_key: str) -> dict:
    return {**_HEADERS, "apikey": anon_key, "Authorization": f"Bearer {anon_key}"}


def _fetch_rows(table: str, query: dict, settings: dict | None = None) -> list[dict]:
    """Fetch every row of *table* matching *query*, one page at a time."""
    settings = settings or load_supabase_config()
    if not settings.get("url") or not settings.get("anon_key"):
        raise ValueError("Supabase url and anon_key must be configured")

    url = _rest_url(settings["url"], table)
    headers = _auth_headers(settings["anon_key"])
    page_size = settings["page_size"]

    rows: list[dict] = []
    offset = 0
    while True:
        params = {**query, "limit": page_size, "offset": offset}
        try:
            resp = requests.get(url, params=params, headers=headers, timeout=settings["timeout"])
            resp.raise_for_status()
            page = resp.json()
        except (requests.RequestException, ValueError) as exc:
            raise UpstreamUnavailable(f"Failed to load {table}: {exc}") from exc

        if not isinstance(page, list):
            raise UpstreamUnavailable(f"Expected a list of {table} rows, got {type(page).__name__}")
        if not all(isinstance(row, dict) for row in page):
            raise UpstreamUnavailable(f"Expected {table} rows to be JSON objects")

        rows.extend(page)
        if len(page) < page_size:
            return rows
        offset += page_size


def _embedded(value) -> dict:
    # PostgREST embeds to-one relations as objects and to-many as lists
    if isinstance(value, list):
        value = value[0] if value else None
    return value if isinstance(value, dict) else {}


def _flatten_participation(row: dict) -> dict:
    event_log = _embedded(row.get("event_log"))
    event_type = _embedded(event_log.get("event_types"))
    return {
        "student_id": row.get("student_id"),
        "points": event_type.get("points"),
        "event_details": event_log.get("event_details"),
    }


def fetch_eligible_students(settings: dict | None = None) -> pd.DataFrame:
    """Load current students that belong to a house."""
    rows = _fetch_rows(STUDENTS_TABLE, STUDENTS_QUERY, settings)
    logging.info("Found students: %d", len(rows))
    return pd.DataFrame(rows, columns=STUDENT_COLUMNS)


def fetch_event_participations(settings: dict | None = None) -> pd.DataFrame:
    """Load event participations with their event type points and details."""
    rows = _fetch_rows(PARTICIPATIONS_TABLE, PARTICIPATIONS_QUERY, settings)
    logging.info("Event data found: %d", len(rows))
    return pd.DataFrame(
        [_flatten_participation(row) for row in rows],
        columns=PARTICIPATION_COLUMNS,
    )
