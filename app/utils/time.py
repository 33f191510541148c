"""Time utilities (UTC)."""

from datetime import datetime, timezone


def now_utc_naive() -> datetime:
    """
    Current time in UTC, returned as naive datetime for DB storage.

    Ledger ordering compares these values directly, so every writer must
    use this clock.
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)
