"""
Duration parsing.

Converts ISO 8601 style tokens ("PT1H30M") and human phrases
("1 hour 30 minutes") into whole minutes.
"""
from __future__ import annotations

import logging
import math
import re

_LOGGER = logging.getLogger(__name__)

_MACHINE = re.compile(
    r"^P(?:(?P<days>\d+)D)?"
    r"(?:T(?:(?P<hours>\d+)H)?(?:(?P<minutes>\d+)M)?(?:(?P<seconds>\d+(?:\.\d+)?)S)?)?$",
    re.IGNORECASE,
)
# Hour and minute words must not run into further letters ("2 hamburgers")
_HUMAN_HOURS = re.compile(
    r"(\d+(?:[.,]\d+)?)\s*(?:hours?|hrs?|h)(?![a-z])", re.IGNORECASE)
_HUMAN_MINUTES = re.compile(
    r"(\d+(?:[.,]\d+)?)\s*(?:minutes?|mins?|m)(?![a-z])", re.IGNORECASE)
_BARE_INTEGER = re.compile(r"^\d+$")


def _to_float(value: str) -> float:
    return float(value.replace(",", "."))


def _parse_machine(text: str) -> int | None:
    match = _MACHINE.match(text)
    if not match or not any(match.groupdict().values()):
        return None
    days = int(match.group("days") or 0)
    hours = int(match.group("hours") or 0)
    minutes = int(match.group("minutes") or 0)
    seconds = float(match.group("seconds") or 0)
    if not math.isfinite(seconds):
        return None
    return days * 24 * 60 + hours * 60 + minutes + int(seconds // 60)


def _parse_human(text: str) -> int | None:
    hours = _HUMAN_HOURS.search(text)
    minutes = _HUMAN_MINUTES.search(text)
    if not hours and not minutes:
        return None
    total = 0.0
    if hours:
        total += _to_float(hours.group(1)) * 60
    if minutes:
        total += _to_float(minutes.group(1))
    return int(round(total)) if math.isfinite(total) else None


def parse_duration(value: str | int | float | None) -> int | None:
    """Convert a duration expression to minutes.

    Args:
        value: An ISO 8601 duration, a human phrase, or a number of minutes

    Returns:
        Non-negative whole minutes, or None if the value is not a duration.
        "0" and "PT0M" give 0, which is distinct from None.

    Examples:
        >>> parse_duration("PT1H30M")
        90
        >>> parse_duration("45 minutes")
        45
        >>> parse_duration("garbage") is None
        True
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, (int, float)):
        return int(value) if value >= 0 else None

    text = str(value).strip()
    if not text:
        return None

    minutes = _parse_machine(text)
    if minutes is None:
        minutes = _parse_human(text)
    if minutes is None and _BARE_INTEGER.match(text):
        minutes = int(text)

    if minutes is None:
        _LOGGER.debug("Unparseable duration: %r", text)
    return minutes
