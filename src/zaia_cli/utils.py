"""Utility functions for the ZAIA CLI."""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone

from zaia_cli.errors import INVALID_ENV_FORMAT, INVALID_PARAMETER, ZaiaError

_RELATIVE_SINCE = re.compile(r"^(\d+)(m|h|d)$")
_FRACTION = re.compile(r"\.(\d+)")

# Allowed range per unit for relative --since values
SINCE_BOUNDS = {
    "m": (1, 1440),
    "h": (1, 168),
    "d": (1, 30),
}

_UNIT_DELTAS = {
    "m": lambda n: timedelta(minutes=n),
    "h": lambda n: timedelta(hours=n),
    "d": lambda n: timedelta(days=n),
}


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse an RFC3339 timestamp into an aware datetime, or ``None``."""
    if not value:
        return None
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    # fromisoformat accepts at most microseconds
    text = _FRACTION.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), text, count=1)
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def parse_since(value: str, now: datetime | None = None) -> datetime:
    """Parse a ``--since`` value: ``30m``, ``2h``, ``7d`` or an RFC3339 timestamp.

    Raises:
        ZaiaError: INVALID_PARAMETER for anything else or an out-of-range amount
    """
    now = now or datetime.now(timezone.utc)

    match = _RELATIVE_SINCE.match(value)
    if match:
        amount, unit = int(match.group(1)), match.group(2)
        low, high = SINCE_BOUNDS[unit]
        if not low <= amount <= high:
            raise ZaiaError(
                INVALID_PARAMETER,
                f"Invalid --since value: {value} ({unit} must be between {low} and {high})",
                "Use e.g. 30m, 1h, 7d or an RFC3339 timestamp",
            )
        return now - _UNIT_DELTAS[unit](amount)

    parsed = parse_timestamp(value) if "T" in value else None
    if parsed is None:
        raise ZaiaError(
            INVALID_PARAMETER,
            f"Invalid --since value: {value}",
            "Use e.g. 30m, 1h, 7d or an RFC3339 timestamp",
        )
    return parsed


def parse_env_pairs(pairs: tuple[str, ...] | list[str]) -> list[tuple[str, str]]:
    """Split ``KEY=value`` arguments on the first ``=``.

    Raises:
        ZaiaError: INVALID_ENV_FORMAT for a missing ``=`` or an empty key
    """
    parsed = []
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise ZaiaError(
                INVALID_ENV_FORMAT,
                f"Invalid env format: '{pair}'",
                "Use KEY=value format",
            )
        parsed.append((key, value))
    return parsed


def format_duration(start: str | None, finish: str | None) -> str:
    """Human duration between two timestamps: ``45s``, ``2m5s`` or ``1h3m``.

    Empty when either side is missing or unparsable, or when finish precedes start.
    """
    started = parse_timestamp(start)
    finished = parse_timestamp(finish)
    if started is None or finished is None:
        return ""

    elapsed = (finished - started).total_seconds()
    if elapsed < 0:
        return ""

    seconds = int(elapsed)
    if seconds < 60:
        return f"{seconds}s"
    if seconds < 3600:
        return f"{seconds // 60}m{seconds % 60}s"
    return f"{seconds // 3600}h{(seconds % 3600) // 60}m"
