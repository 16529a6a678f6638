"""
Canonical status vocabularies.

Older dashboard builds wrote statuses in mixed casing ("active", "Paid") and
with localized spellings ("belum setor"). Everything entering the API or
already sitting in the database is folded onto the sets below.
"""
from typing import Dict, Iterable, Optional

# Match lifecycle (one-directional: UPCOMING -> COMPLETED)
MATCH_UPCOMING = "UPCOMING"
MATCH_COMPLETED = "COMPLETED"
MATCH_STATUSES = (MATCH_UPCOMING, MATCH_COMPLETED)

PLAYER_ACTIVE = "ACTIVE"
PLAYER_INACTIVE = "INACTIVE"
PLAYER_TENTATIVE = "TENTATIVE"
PLAYER_STATUSES = (PLAYER_ACTIVE, PLAYER_INACTIVE, PLAYER_TENTATIVE)

PAYMENT_PENDING = "PENDING"
PAYMENT_PAID = "PAID"
PAYMENT_CANCELLED = "CANCELLED"
PAYMENT_STATUSES = (PAYMENT_PENDING, PAYMENT_PAID, PAYMENT_CANCELLED)

# Per-player, per-match contribution ("setor" = hand in the fee)
SETOR_BELUM = "BELUM_SETOR"
SETOR_SUDAH = "SUDAH_SETOR"
SETOR_STATUSES = (SETOR_BELUM, SETOR_SUDAH)

MATCH_ALIASES: Dict[str, str] = {
    "DONE": MATCH_COMPLETED,
    "FINISHED": MATCH_COMPLETED,
    "SCHEDULED": MATCH_UPCOMING,
}

PLAYER_ALIASES: Dict[str, str] = {
    "INACTIVE_PLAYER": PLAYER_INACTIVE,
    "MAYBE": PLAYER_TENTATIVE,
}

PAYMENT_ALIASES: Dict[str, str] = {
    "UNPAID": PAYMENT_PENDING,
    "CANCELED": PAYMENT_CANCELLED,
}

SETOR_ALIASES: Dict[str, str] = {
    "UNPAID": SETOR_BELUM,
    "PAID": SETOR_SUDAH,
    "BELUMSETOR": SETOR_BELUM,
    "SUDAHSETOR": SETOR_SUDAH,
}


def _fold(value: str) -> str:
    return "_".join(value.strip().upper().replace("-", " ").split())


def normalize_status(
    value: Optional[str],
    allowed: Iterable[str],
    aliases: Optional[Dict[str, str]] = None,
) -> str:
    """Map a raw status token onto its canonical spelling.

    Raises ValueError for unknown tokens so pydantic validators can surface
    the message as a field error.
    """
    allowed = tuple(allowed)
    if value is None or not str(value).strip():
        raise ValueError(f"status must be one of: {', '.join(allowed)}")
    folded = _fold(str(value))
    if folded in allowed:
        return folded
    if aliases and folded in aliases:
        return aliases[folded]
    raise ValueError(f"status must be one of: {', '.join(allowed)}")


def normalize_match_status(value: Optional[str]) -> str:
    return normalize_status(value, MATCH_STATUSES, MATCH_ALIASES)


def normalize_player_status(value: Optional[str]) -> str:
    return normalize_status(value, PLAYER_STATUSES, PLAYER_ALIASES)


def normalize_payment_status(value: Optional[str]) -> str:
    return normalize_status(value, PAYMENT_STATUSES, PAYMENT_ALIASES)


def normalize_setor_status(value: Optional[str]) -> str:
    return normalize_status(value, SETOR_STATUSES, SETOR_ALIASES)


def normalize_player_name(name: str) -> str:
    """Display form: trimmed, internal whitespace collapsed."""
    return " ".join(name.split())


def player_name_key(name: str) -> str:
    """Uniqueness key for player names (case and whitespace insensitive)."""
    return normalize_player_name(name).casefold()
