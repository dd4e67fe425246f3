"""
Entry Validation Framework
===========================
One function per expected value kind. Each fetches a named entry from a
dictionary and applies the same sequence of checks:

1. absent or null       -> ``MissingRequiredEntryError`` if required, else ``None``
2. dereference          -> resolver faults propagate unchanged
3. kind check           -> ``TypeMismatchError`` (``MalformedValueError`` for
                           a rectangle or date of the wrong shape)
4. version check        -> ``VersionTooLowError`` if the document predates
                           ``since_version``
5. optional predicate   -> ``ConstraintViolationError``
6. return the typed value

Mode-dependent thresholds are resolved by the caller with
:func:`~pdf_preflight.models.version.effective_min_version`; the framework
never consults the validation mode.

Example::

    rotate = validate_integer_entry(
        xref, page, "pageDict", "Rotate", OPTIONAL, PDFVersion.V10, validate_rotate
    )
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Callable

from ..models.cos import (
    Array,
    Dictionary,
    Object,
    ObjectKind,
    Rectangle,
    Stream,
    is_number,
    kind_of,
)
from ..models.version import PDFVersion
from ..pdf.xref import XRefTable
from .errors import (
    ConstraintViolationError,
    MalformedValueError,
    MissingRequiredEntryError,
    TypeMismatchError,
    VersionTooLowError,
)
from .values import parse_date

REQUIRED = True
OPTIONAL = False

Predicate = Callable[[Any], bool]
Converter = Callable[[XRefTable, Object, str, str], Any]


def _validate_entry(
    xref: XRefTable,
    d: Dictionary,
    dict_name: str,
    entry_name: str,
    required: bool,
    since_version: PDFVersion,
    convert: Converter,
    validate: Predicate | None,
) -> Any:
    obj = d.get(entry_name)
    if obj is not None:
        obj = xref.dereference(obj)

    if obj is None:
        if required:
            raise MissingRequiredEntryError(dict_name, entry_name)
        return None

    value = convert(xref, obj, dict_name, entry_name)

    if xref.version < since_version:
        raise VersionTooLowError(dict_name, entry_name, since_version, xref.version)

    if validate is not None and not validate(value):
        raise ConstraintViolationError(dict_name, entry_name, value)

    return value


def _expect(obj: Object, kind: ObjectKind, dict_name: str, entry_name: str, expected: str | None = None) -> None:
    found = kind_of(obj)
    if found != kind:
        raise TypeMismatchError(dict_name, entry_name, expected or kind.value, found.value)


# ---------------------------------------------------------------------------
# Converters
# ---------------------------------------------------------------------------


def _to_boolean(xref: XRefTable, obj: Object, dict_name: str, entry_name: str) -> bool:
    _expect(obj, ObjectKind.BOOLEAN, dict_name, entry_name)
    return obj  # type: ignore[return-value]


def _to_integer(xref: XRefTable, obj: Object, dict_name: str, entry_name: str) -> int:
    _expect(obj, ObjectKind.INTEGER, dict_name, entry_name)
    return obj  # type: ignore[return-value]


def _to_number(xref: XRefTable, obj: Object, dict_name: str, entry_name: str) -> float:
    if not is_number(obj):
        raise TypeMismatchError(dict_name, entry_name, "number", kind_of(obj).value)
    return float(obj)  # type: ignore[arg-type]


def _to_name(xref: XRefTable, obj: Object, dict_name: str, entry_name: str) -> str:
    _expect(obj, ObjectKind.NAME, dict_name, entry_name)
    return obj.value  # type: ignore[union-attr]


def _to_string(xref: XRefTable, obj: Object, dict_name: str, entry_name: str) -> str:
    _expect(obj, ObjectKind.STRING, dict_name, entry_name)
    return obj.value  # type: ignore[union-attr]


def _to_name_or_string(xref: XRefTable, obj: Object, dict_name: str, entry_name: str) -> str:
    if kind_of(obj) not in (ObjectKind.NAME, ObjectKind.STRING):
        raise TypeMismatchError(dict_name, entry_name, "name or string", kind_of(obj).value)
    return obj.value  # type: ignore[union-attr]


def _to_dict(xref: XRefTable, obj: Object, dict_name: str, entry_name: str) -> Dictionary:
    _expect(obj, ObjectKind.DICTIONARY, dict_name, entry_name)
    return obj  # type: ignore[return-value]


def _to_array(xref: XRefTable, obj: Object, dict_name: str, entry_name: str) -> Array:
    _expect(obj, ObjectKind.ARRAY, dict_name, entry_name)
    return obj  # type: ignore[return-value]


def _to_stream(xref: XRefTable, obj: Object, dict_name: str, entry_name: str) -> Stream:
    _expect(obj, ObjectKind.STREAM, dict_name, entry_name)
    return obj  # type: ignore[return-value]


def _to_rectangle(xref: XRefTable, obj: Object, dict_name: str, entry_name: str) -> Rectangle:
    _expect(obj, ObjectKind.ARRAY, dict_name, entry_name, "rectangle")
    coords = [xref.dereference(v) for v in obj]  # type: ignore[union-attr]
    if len(coords) != 4 or not all(c is not None and is_number(c) for c in coords):
        raise MalformedValueError(
            f"dict={dict_name} entry={entry_name}: rectangle must be an array of 4 numbers",
            dict_name,
            entry_name,
        )
    return Rectangle(*(float(c) for c in coords))  # type: ignore[arg-type]


def _to_date(xref: XRefTable, obj: Object, dict_name: str, entry_name: str) -> datetime:
    _expect(obj, ObjectKind.STRING, dict_name, entry_name, "date")
    dt = parse_date(obj.value)  # type: ignore[union-attr]
    if dt is None:
        raise MalformedValueError(
            f"dict={dict_name} entry={entry_name}: invalid date {obj.value!r}",  # type: ignore[union-attr]
            dict_name,
            entry_name,
        )
    return dt


def _to_ind_ref_array(xref: XRefTable, obj: Object, dict_name: str, entry_name: str) -> Array:
    _expect(obj, ObjectKind.ARRAY, dict_name, entry_name, "indirect reference array")
    for v in obj:  # type: ignore[union-attr]
        if kind_of(v) != ObjectKind.REFERENCE:
            raise TypeMismatchError(dict_name, entry_name, "indirect reference array", kind_of(v).value)
    return obj  # type: ignore[return-value]


def _homogeneous(kinds: tuple[ObjectKind, ...], label: str, extract: Callable[[Any], Any]) -> Converter:
    def convert(xref: XRefTable, obj: Object, dict_name: str, entry_name: str) -> list[Any]:
        _expect(obj, ObjectKind.ARRAY, dict_name, entry_name, label)
        values = []
        for v in obj:  # type: ignore[union-attr]
            o = xref.dereference(v)
            if o is None:
                continue
            if kind_of(o) not in kinds:
                raise TypeMismatchError(dict_name, entry_name, label, kind_of(o).value)
            values.append(extract(o))
        return values

    return convert


_to_string_array = _homogeneous((ObjectKind.STRING,), "string array", lambda o: o.value)
_to_name_array = _homogeneous((ObjectKind.NAME,), "name array", lambda o: o.value)
_to_number_array = _homogeneous((ObjectKind.INTEGER, ObjectKind.REAL), "number array", float)
_to_integer_array = _homogeneous((ObjectKind.INTEGER,), "integer array", int)


# ---------------------------------------------------------------------------
# Public entry validators
# ---------------------------------------------------------------------------


def validate_boolean_entry(
    xref: XRefTable, d: Dictionary, dict_name: str, entry_name: str,
    required: bool, since_version: PDFVersion, validate: Predicate | None = None,
) -> bool | None:
    return _validate_entry(xref, d, dict_name, entry_name, required, since_version, _to_boolean, validate)


def validate_integer_entry(
    xref: XRefTable, d: Dictionary, dict_name: str, entry_name: str,
    required: bool, since_version: PDFVersion, validate: Predicate | None = None,
) -> int | None:
    return _validate_entry(xref, d, dict_name, entry_name, required, since_version, _to_integer, validate)


def validate_number_entry(
    xref: XRefTable, d: Dictionary, dict_name: str, entry_name: str,
    required: bool, since_version: PDFVersion, validate: Predicate | None = None,
) -> float | None:
    return _validate_entry(xref, d, dict_name, entry_name, required, since_version, _to_number, validate)


def validate_name_entry(
    xref: XRefTable, d: Dictionary, dict_name: str, entry_name: str,
    required: bool, since_version: PDFVersion, validate: Predicate | None = None,
) -> str | None:
    return _validate_entry(xref, d, dict_name, entry_name, required, since_version, _to_name, validate)


def validate_string_entry(
    xref: XRefTable, d: Dictionary, dict_name: str, entry_name: str,
    required: bool, since_version: PDFVersion, validate: Predicate | None = None,
) -> str | None:
    return _validate_entry(xref, d, dict_name, entry_name, required, since_version, _to_string, validate)


def validate_name_or_string_entry(
    xref: XRefTable, d: Dictionary, dict_name: str, entry_name: str,
    required: bool, since_version: PDFVersion, validate: Predicate | None = None,
) -> str | None:
    return _validate_entry(xref, d, dict_name, entry_name, required, since_version, _to_name_or_string, validate)


def validate_dict_entry(
    xref: XRefTable, d: Dictionary, dict_name: str, entry_name: str,
    required: bool, since_version: PDFVersion, validate: Predicate | None = None,
) -> Dictionary | None:
    return _validate_entry(xref, d, dict_name, entry_name, required, since_version, _to_dict, validate)


def validate_array_entry(
    xref: XRefTable, d: Dictionary, dict_name: str, entry_name: str,
    required: bool, since_version: PDFVersion, validate: Predicate | None = None,
) -> Array | None:
    return _validate_entry(xref, d, dict_name, entry_name, required, since_version, _to_array, validate)


def validate_stream_dict_entry(
    xref: XRefTable, d: Dictionary, dict_name: str, entry_name: str,
    required: bool, since_version: PDFVersion, validate: Predicate | None = None,
) -> Stream | None:
    return _validate_entry(xref, d, dict_name, entry_name, required, since_version, _to_stream, validate)


def validate_rectangle_entry(
    xref: XRefTable, d: Dictionary, dict_name: str, entry_name: str,
    required: bool, since_version: PDFVersion, validate: Predicate | None = None,
) -> Rectangle | None:
    return _validate_entry(xref, d, dict_name, entry_name, required, since_version, _to_rectangle, validate)


def validate_date_entry(
    xref: XRefTable, d: Dictionary, dict_name: str, entry_name: str,
    required: bool, since_version: PDFVersion, validate: Predicate | None = None,
) -> datetime | None:
    return _validate_entry(xref, d, dict_name, entry_name, required, since_version, _to_date, validate)


def validate_ind_ref_array_entry(
    xref: XRefTable, d: Dictionary, dict_name: str, entry_name: str,
    required: bool, since_version: PDFVersion, validate: Predicate | None = None,
) -> Array | None:
    return _validate_entry(xref, d, dict_name, entry_name, required, since_version, _to_ind_ref_array, validate)


def validate_string_array_entry(
    xref: XRefTable, d: Dictionary, dict_name: str, entry_name: str,
    required: bool, since_version: PDFVersion, validate: Predicate | None = None,
) -> list[str] | None:
    return _validate_entry(xref, d, dict_name, entry_name, required, since_version, _to_string_array, validate)


def validate_name_array_entry(
    xref: XRefTable, d: Dictionary, dict_name: str, entry_name: str,
    required: bool, since_version: PDFVersion, validate: Predicate | None = None,
) -> list[str] | None:
    return _validate_entry(xref, d, dict_name, entry_name, required, since_version, _to_name_array, validate)


def validate_number_array_entry(
    xref: XRefTable, d: Dictionary, dict_name: str, entry_name: str,
    required: bool, since_version: PDFVersion, validate: Predicate | None = None,
) -> list[float] | None:
    return _validate_entry(xref, d, dict_name, entry_name, required, since_version, _to_number_array, validate)


def validate_integer_array_entry(
    xref: XRefTable, d: Dictionary, dict_name: str, entry_name: str,
    required: bool, since_version: PDFVersion, validate: Predicate | None = None,
) -> list[int] | None:
    return _validate_entry(xref, d, dict_name, entry_name, required, since_version, _to_integer_array, validate)
