"""
Value Domains
==============
Predicates for the value domains used by the dictionary validators, plus
the PDF date parser (§7.9.4).
"""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone

# D:YYYYMMDDHHmmSSOHH'mm' with every part after the year optional.
_PDF_DATE_RE = re.compile(
    r"^D:(?P<year>\d{4})"
    r"(?:(?P<month>\d{2})"
    r"(?:(?P<day>\d{2})"
    r"(?:(?P<hour>\d{2})"
    r"(?:(?P<minute>\d{2})"
    r"(?:(?P<second>\d{2}))?"
    r")?"
    r")?"
    r")?"
    r")?"
    r"(?:(?P<tz>[Z+\-])"
    r"(?:(?P<tzh>\d{2})'?"
    r"(?:(?P<tzm>\d{2})'?)?"
    r")?"
    r")?$"
)

_URL_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*:\S+$")

TRANSITION_STYLES = frozenset({"Split", "Blinds", "Box", "Wipe", "Dissolve", "Glitter", "R"})
TRANSITION_STYLES_V15 = TRANSITION_STYLES | {"Fly", "Push", "Cover", "Uncover", "Fade"}


def parse_date(s: str) -> datetime | None:
    """
    Parse a PDF date string.

    Returns ``None`` when the string does not follow the date syntax or a
    field is out of range. A missing time zone yields a naive datetime.
    """
    m = _PDF_DATE_RE.match(s.strip())
    if m is None:
        return None
    parts = m.groupdict()
    try:
        dt = datetime(
            int(parts["year"]),
            int(parts["month"] or 1),
            int(parts["day"] or 1),
            int(parts["hour"] or 0),
            int(parts["minute"] or 0),
            int(parts["second"] or 0),
        )
    except ValueError:
        return None

    tz = parts["tz"]
    if tz is None:
        return dt
    if tz == "Z":
        return dt.replace(tzinfo=timezone.utc)
    hours = int(parts["tzh"] or 0)
    minutes = int(parts["tzm"] or 0)
    if hours > 23 or minutes > 59:
        return None
    offset = timedelta(hours=hours, minutes=minutes)
    return dt.replace(tzinfo=timezone(offset if tz == "+" else -offset))


def validate_rotate(i: int) -> bool:
    return i in (0, 90, 180, 270)


def validate_transition_style(s: str) -> bool:
    return s in TRANSITION_STYLES


def validate_transition_style_v15(s: str) -> bool:
    return s in TRANSITION_STYLES_V15


def validate_transition_dimension(s: str) -> bool:
    return s in ("H", "V")


def validate_transition_direction_of_motion(s: str) -> bool:
    return s in ("I", "O")


def validate_di(i: int) -> bool:
    return i in (0, 90, 180, 270, 315)


def validate_guideline_style(s: str) -> bool:
    return s in ("S", "D")


def validate_file_spec_string(s: str) -> bool:
    """
    File specification strings (§7.11.2): components separated by solidus,
    no embedded NUL, not empty.
    """
    return bool(s) and "\x00" not in s


def validate_url_string(s: str) -> bool:
    """URL file system strings (§7.11.5): 7-bit ASCII, scheme-qualified."""
    return s.isascii() and _URL_SCHEME_RE.match(s) is not None
