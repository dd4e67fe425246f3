"""
Document Versions and Validation Modes
=======================================
PDF versions form a total order; every optional feature records the
version that introduced it (ISO 32000-1 Annex H / ISO 32000-2 §7.5.2).

Relaxed validation lowers a handful of those thresholds for files written
by producers that used features early. The lowering is looked up once per
call site through :func:`effective_min_version`; the entry framework itself
only ever compares two versions.
"""

from __future__ import annotations

from enum import Enum, IntEnum


class PDFVersion(IntEnum):
    """Ordered PDF versions."""
    V10 = 10
    V11 = 11
    V12 = 12
    V13 = 13
    V14 = 14
    V15 = 15
    V16 = 16
    V17 = 17
    V20 = 20

    @classmethod
    def parse(cls, text: str) -> "PDFVersion":
        """
        Parse a header (``"1.4"``) or catalog (``"/1.4"``) version string.

        Raises ``ValueError`` for anything else.
        """
        s = text.strip().lstrip("/")
        major, sep, minor = s.partition(".")
        if not sep or not major.isdigit() or len(minor) != 1 or not minor.isdigit():
            raise ValueError(f"invalid PDF version: {text!r}")
        try:
            return cls(int(major) * 10 + int(minor))
        except ValueError:
            raise ValueError(f"unknown PDF version: {text!r}") from None

    def __str__(self) -> str:
        return f"{self.value // 10}.{self.value % 10}"


class ValidationMode(str, Enum):
    """Strict follows ISO 32000 to the letter; Relaxed tolerates common producer quirks."""
    STRICT = "Strict"
    RELAXED = "Relaxed"


def effective_min_version(
    nominal: PDFVersion,
    mode: ValidationMode,
    relaxed: PDFVersion | None = None,
) -> PDFVersion:
    """Return the minimum version to enforce for a feature under ``mode``."""
    if mode == ValidationMode.RELAXED and relaxed is not None:
        return relaxed
    return nominal
