import hashlib
import logging
import math
from datetime import datetime, timezone
from typing import Iterable, List, Optional

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 24 * 60 * 60


def normalize_text(value: Optional[str]) -> str:
    """Lowercase, trim and collapse internal whitespace."""
    if not value:
        return ""
    return " ".join(str(value).strip().lower().split())


def normalize_all(values: Optional[Iterable[str]]) -> List[str]:
    """Normalize a collection of strings, dropping blanks and duplicates (order kept)."""
    out: List[str] = []
    seen = set()
    for v in values or []:
        n = normalize_text(v)
        if n and n not in seen:
            seen.add(n)
            out.append(n)
    return out


def round_half_up(x: float) -> int:
    """Round to the nearest integer with .5 going up (Python's round() is banker's)."""
    return int(math.floor(x + 0.5))


def clamp(x: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, x))


def clamp_score(x: float) -> int:
    """Round and clamp a dimension or final score into [0, 100]."""
    if x is None or math.isnan(x):
        return 0
    return int(clamp(round_half_up(x), 0, 100))


def ensure_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Return a timezone-aware UTC datetime; naive values are read as UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def ensure_aware(value: Optional[datetime]) -> Optional[datetime]:
    """Attach UTC to naive values; aware values keep their own timezone."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def days_between(earlier: datetime, later: datetime) -> float:
    """Fractional days from earlier to later (negative if earlier is after later)."""
    return (ensure_utc(later) - ensure_utc(earlier)).total_seconds() / SECONDS_PER_DAY


def fingerprint(parts: Iterable[str]) -> str:
    """
    Deterministic SHA256 over an unordered collection of identifiers.

    Parts are sorted first so that the same set always produces the same hash.
    """
    raw_string = "|".join(sorted(str(p) for p in parts))
    return hashlib.sha256(raw_string.encode('utf-8')).hexdigest()
