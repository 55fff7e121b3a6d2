"""Time zone descriptor resolution.

Elasticsearch date bucketing takes a ``time_zone`` as a signed ``+HH:MM``
offset. Descriptors accepted here:

- a fixed offset such as ``-08:00`` (returned unchanged)
- an IANA zone name such as ``Asia/Kathmandu`` (offset evaluated at a point in
  time, so daylight-saving state is whatever applies then)
- nothing, meaning the process zone from ``TZ`` or the platform local zone
"""

from __future__ import annotations

import os
import re
from datetime import datetime, tzinfo

from dateutil import tz

from EsQuery.core.errors import TimeZoneError
from EsQuery.utils.log import log


_RE_OFFSET = re.compile(r"^[+-](?:[01]\d|2[0-3]):[0-5]\d$")


def is_offset(value: str) -> bool:
    """Return True if value is a fixed ``[+-]HH:MM`` offset."""
    return bool(_RE_OFFSET.match(value.strip()))


def resolve_zone(name: str | None = None) -> tzinfo:
    """Resolve a zone name, or the process zone when name is None.

    Raises:
        TimeZoneError: If the name (or ``TZ``) is not a known zone.
    """
    from_env = name is None
    if from_env:
        name = os.environ.get("TZ", "").lstrip(":")
        if not name.strip():
            return tz.tzlocal()

    # POSIX allows TZ=:/etc/localtime; explicit names must not be file paths.
    name = name.strip()
    if not name or (os.path.isabs(name) and not from_env):
        raise TimeZoneError(f"Unknown time zone: {name!r}")
    try:
        zone = tz.gettz(name)
    except (ValueError, OSError) as e:
        raise TimeZoneError(f"Unknown time zone: {name!r}") from e
    if zone is None:
        raise TimeZoneError(f"Unknown time zone: {name!r}")
    return zone


def format_offset(zone: tzinfo, at: datetime | None = None) -> str:
    """Format the UTC offset of zone at the given instant as ``+HH:MM``.

    Raises:
        TimeZoneError: If the zone yields no offset or one outside +-24h.
    """
    try:
        moment = at.astimezone(zone) if at is not None else datetime.now(zone)
        offset = moment.utcoffset()
    except ValueError as e:
        raise TimeZoneError(f"Time zone {zone!r} has an invalid UTC offset") from e
    if offset is None:
        raise TimeZoneError(f"Time zone {zone!r} has no UTC offset")
    minutes = int(offset.total_seconds()) // 60
    sign = "-" if minutes < 0 else "+"
    hours, minutes = divmod(abs(minutes), 60)
    return f"{sign}{hours:02d}:{minutes:02d}"


def resolve_offset(name: str | None = None, *, at: datetime | None = None) -> str:
    """Resolve a zone descriptor to a ``+HH:MM`` offset.

    Args:
        name: Fixed offset, zone name, or None for the process zone.
        at: Instant used for daylight-saving evaluation. Defaults to now.
            Naive datetimes are read as local time.

    Returns:
        Signed offset string.

    Raises:
        TimeZoneError: If the descriptor cannot be resolved.
    """
    if name is not None and is_offset(name):
        return name.strip()
    offset = format_offset(resolve_zone(name), at)
    log.debug("Resolved time zone %r to %s", name or os.environ.get("TZ") or "local", offset)
    return offset
