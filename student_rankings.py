"""Build the student rankings payload served to the leaderboard."""

from __future__ import annotations

import json
import logging
import sys

from ranking_logic import NoDataError, compute_student_rankings, rankings_to_records
from supabase_loading import (
    UpstreamUnavailable,
    fetch_eligible_students,
    fetch_event_participations,
)

NO_DATA_MESSAGE = "No active students found"
INTERNAL_ERROR_MESSAGE = "Internal server error"


def get_student_rankings(
    fetch_students=fetch_eligible_students,
    fetch_participations=fetch_event_participations,
) -> tuple[dict, int]:
    """Return ``(payload, status_code)`` for the current rankings.

    ``payload`` is ``{"success": True, "data": [...]}`` on success and
    ``{"success": False, "error": "..."}`` otherwise. The status is 404 when
    there are no eligible students and 500 for any other failure. Failing to
    load participations is not an error: everyone is ranked with 0 points.
    """
    try:
        try:
            students = fetch_students()
        except (UpstreamUnavailable, ValueError) as exc:
            logging.error("Error fetching students: %s", exc)
            return {"success": False, "error": str(exc)}, 500

        try:
            participations = fetch_participations()
        except (UpstreamUnavailable, ValueError) as exc:
            logging.error("Error fetching event data: %s", exc)
            participations = None

        rankings = compute_student_rankings(students, participations)
    except NoDataError:
        return {"success": False, "error": NO_DATA_MESSAGE}, 404
    except Exception:
        logging.exception("Unexpected error while ranking students")
        return {"success": False, "error": INTERNAL_ERROR_MESSAGE}, 500

    data = rankings_to_records(rankings)
    logging.info("Total rankings created: %d", len(data))
    return {"success": True, "data": data}, 200


def main() -> int:
    logging.basicConfig(level=logging.INFO, stream=sys.stderr)
    payload, status = get_student_rankings()
    print(json.dumps(payload, indent=2, ensure_ascii=False))
    return 0 if status == 200 else 1


if __name__ == "__main__":
    sys.exit(main())
