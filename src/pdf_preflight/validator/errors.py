"""
Validation Errors
==================
Every rule violation is raised as one exception and aborts the run. The
exception names the dictionary role (``"pageDict"``, ``"fileSpecDict"``),
the entry and the rule, which is enough to locate the offending object.

Resolver faults (broken or cyclic references) form a separate branch so
that they are never mistaken for a rule violation.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    MISSING_REQUIRED_FIELD = "MissingRequiredField"
    TYPE_MISMATCH = "TypeMismatch"
    MALFORMED_VALUE = "MalformedValue"
    CONSTRAINT_VIOLATED = "ConstraintViolated"
    VERSION_TOO_LOW = "VersionTooLow"
    STRUCTURAL_INCONSISTENCY = "StructuralInconsistency"
    UNSUPPORTED_FEATURE = "UnsupportedFeature"
    RESOLUTION_FAILURE = "ResolutionFailure"


class PDFValidationError(Exception):
    """Base class for rule violations found in the object graph."""
    kind: ErrorKind

    def __init__(self, message: str, dict_name: str | None = None, entry_name: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.dict_name = dict_name
        self.entry_name = entry_name

    def location(self) -> str:
        if self.dict_name and self.entry_name:
            return f"{self.dict_name}/{self.entry_name}"
        return self.dict_name or self.entry_name or ""


class MissingRequiredEntryError(PDFValidationError):
    kind = ErrorKind.MISSING_REQUIRED_FIELD

    def __init__(self, dict_name: str, entry_name: str) -> None:
        super().__init__(f"dict={dict_name} required entry={entry_name} missing", dict_name, entry_name)


class TypeMismatchError(PDFValidationError):
    kind = ErrorKind.TYPE_MISMATCH

    def __init__(self, dict_name: str | None, entry_name: str | None, expected: str, found: str | None = None) -> None:
        msg = f"dict={dict_name} entry={entry_name}: expected {expected}"
        if found:
            msg += f", got {found}"
        super().__init__(msg, dict_name, entry_name)
        self.expected = expected
        self.found = found


class MalformedValueError(PDFValidationError):
    kind = ErrorKind.MALFORMED_VALUE


class ConstraintViolationError(PDFValidationError):
    kind = ErrorKind.CONSTRAINT_VIOLATED

    def __init__(self, dict_name: str | None, entry_name: str | None, value: Any, message: str | None = None) -> None:
        super().__init__(
            message or f"dict={dict_name} entry={entry_name}: invalid value {value!r}",
            dict_name,
            entry_name,
        )
        self.value = value


class VersionTooLowError(PDFValidationError):
    kind = ErrorKind.VERSION_TOO_LOW

    def __init__(self, dict_name: str | None, entry_name: str, min_version: Any, actual: Any) -> None:
        super().__init__(
            f"dict={dict_name} entry={entry_name}: unsupported in version {actual}, "
            f"available since {min_version}",
            dict_name,
            entry_name,
        )
        self.min_version = min_version
        self.actual = actual


class StructuralInconsistencyError(PDFValidationError):
    kind = ErrorKind.STRUCTURAL_INCONSISTENCY


class UnsupportedFeatureError(PDFValidationError):
    kind = ErrorKind.UNSUPPORTED_FEATURE


# ---------------------------------------------------------------------------
# Resolver faults
# ---------------------------------------------------------------------------


class ResolutionError(Exception):
    """An indirect reference could not be followed."""
    kind = ErrorKind.RESOLUTION_FAILURE


class BrokenReferenceError(ResolutionError):
    def __init__(self, ref: Any) -> None:
        super().__init__(f"reference {ref} points to no object")
        self.ref = ref


class CyclicReferenceError(ResolutionError):
    def __init__(self, ref: Any) -> None:
        super().__init__(f"reference {ref} resolves to itself")
        self.ref = ref
