"""
SQL helpers for aggregate query results.

SQLModel/SQLAlchemy may hand back COUNT results as a bare int or as a
1-tuple/Row depending on how the select was built.
"""
from typing import Any


def scalar_int(x: Any) -> int:
    """Coerce a COUNT/aggregate result (int, 1-tuple or Row) to int."""
    try:
        return int(x[0])
    except (TypeError, IndexError, KeyError):
        return int(x)
