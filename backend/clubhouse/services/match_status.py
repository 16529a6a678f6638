"""
Match status lifecycle: UPCOMING → COMPLETED.

A match is due for completion once its end instant (date + end of the time
range, shifted a day when the range wraps past midnight) lies strictly before
"now". Every write path derives status through resolve_match_status(); the
sweep reuses the same end-instant computation for matches that age out
passively.

Guarantees:
    - One-directional: COMPLETED is never reverted
    - Fails open: unparsable time ranges keep their current status
    - Idempotent sweep (second run with no intervening writes returns 0)
"""
import logging
from datetime import date, datetime
from typing import List, Optional, Union

from sqlmodel import Session, select

from clubhouse.config import utc_now
from clubhouse.models.match import Match
from clubhouse.utils.statuses import MATCH_COMPLETED, MATCH_UPCOMING, normalize_match_status
from clubhouse.utils.time_range import match_end_datetime

logger = logging.getLogger(__name__)


def _coerce_date(value: Union[date, datetime, str, None]) -> Optional[date]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip()[:10])
    except ValueError:
        return None


def resolve_match_status(
    match_date: Union[date, datetime, str, None],
    time_range: Optional[str],
    current_status: Optional[str],
    now: datetime,
) -> str:
    """Decide the status a match should carry at ``now``.

    Pure function of its inputs. Returns ``current_status`` untouched when it
    is not UPCOMING or when the date/time range cannot be parsed.
    """
    try:
        status = normalize_match_status(current_status or MATCH_UPCOMING)
    except ValueError:
        return current_status
    if status != MATCH_UPCOMING:
        return status

    day = _coerce_date(match_date)
    if day is None:
        return status

    end_at = match_end_datetime(day, time_range)
    if end_at is None:
        return status

    return MATCH_COMPLETED if end_at < now else MATCH_UPCOMING


def run_status_sweep(session: Session, now: datetime) -> int:
    """
    Complete every UPCOMING match whose end instant is before ``now``.

    Candidates are limited to matches dated on or before today; a match
    dated in the future cannot have ended yet. Transitions are committed
    together in one transaction, and nothing is written when no match is due.

    Returns:
        Number of matches transitioned to COMPLETED.
    """
    candidates = session.exec(
        select(Match)
        .where(Match.status == MATCH_UPCOMING, Match.date <= now.date())
        .order_by(Match.id)
    ).all()

    due: List[Match] = []
    for match in candidates:
        end_at = match_end_datetime(match.date, match.time)
        if end_at is None:
            logger.warning("Skipping match %s: invalid time range %r", match.id, match.time)
            continue
        if end_at < now:
            due.append(match)

    if not due:
        return 0

    labels = [(match.id, match.title) for match in due]
    try:
        for match in due:
            match.status = MATCH_COMPLETED
            match.updated_at = utc_now()
            session.add(match)
        session.commit()
    except Exception:
        session.rollback()
        logger.exception("Status sweep failed; rolled back %d pending transitions", len(due))
        raise

    for match_id, title in labels:
        logger.info("Auto-completed match: %s (%s)", title, match_id)

    return len(due)
