from __future__ import annotations

import logging
from typing import Callable, Dict, List, Tuple

from sqlalchemy import Table, select, update
from sqlalchemy.engine import Engine

from clubhouse.utils.statuses import (
    normalize_match_status,
    normalize_payment_status,
    normalize_player_status,
    normalize_setor_status,
)

logger = logging.getLogger(__name__)


def _status_columns() -> List[Tuple[Table, str, Callable[[str], str]]]:
    """(table, column, normalizer) for every status-like column."""
    from clubhouse.models.match import Match
    from clubhouse.models.match_player import MatchPlayer
    from clubhouse.models.payment import Payment
    from clubhouse.models.player import Player

    return [
        (Match.__table__, "status", normalize_match_status),
        (Player.__table__, "status", normalize_player_status),
        (Payment.__table__, "status", normalize_payment_status),
        (MatchPlayer.__table__, "payment_status", normalize_setor_status),
    ]


def normalize_status_columns(engine: Engine) -> Dict[str, int]:
    """
    Idempotently rewrites legacy status spellings ("active", "Paid",
    "belum setor", ...) to their canonical values.
    Safe to run at every startup. Values that cannot be mapped are left
    alone and logged.

    Returns:
        {"table.column": rows_rewritten}
    """
    rewritten: Dict[str, int] = {}
    for table, column_name, normalize in _status_columns():
        column = table.c[column_name]
        key = f"{table.name}.{column_name}"
        rewritten[key] = 0
        with engine.begin() as conn:
            for (raw,) in conn.execute(select(column).distinct()).fetchall():
                if raw is None:
                    continue
                try:
                    canonical = normalize(raw)
                except ValueError:
                    logger.warning("Unmapped %s value %r left as-is", key, raw)
                    continue
                if canonical == raw:
                    continue
                res = conn.execute(update(table).where(column == raw).values({column_name: canonical}))
                rewritten[key] += res.rowcount or 0
        if rewritten[key]:
            logger.info("Normalized %d legacy values in %s", rewritten[key], key)
    return rewritten
