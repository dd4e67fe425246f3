"""
File Specification Validator
=============================
Validates file specifications (ISO 32000-1 §7.11): plain file specification
strings, file specification dictionaries, embedded file streams and their
parameter dictionaries, and the pairing between the ``/EF`` (embedded
files) and ``/RF`` (related files) dictionaries.

Rules implemented for a file specification dictionary:

- /FS selects the grammar of /F (``URL`` -> URL string, else a path)
- /F is required unless one of /DOS, /Mac, /Unix is present
- /UF since 1.7 (1.4 in relaxed mode)
- /ID pair of strings since 1.1, /V boolean since 1.2
- /EF, /RF since 1.3; /EF required when /RF is present
- /Type required when /EF is present; must be /Filespec (or /F, relaxed only)
- /EF keys limited to F, UF, DOS, Mac, Unix; each value an embedded file stream
- every /RF key must also be an /EF key; /RF arrays alternate
  (embedded file stream, string) and have even length
- /Desc since 1.6 (1.0 in relaxed mode), /CI since 1.7
"""

from __future__ import annotations

import logging

from ..models.cos import Dictionary, Object, ObjectKind, Stream, kind_of
from ..models.version import PDFVersion, ValidationMode, effective_min_version
from ..pdf.xref import XRefTable
from .entries import (
    OPTIONAL,
    REQUIRED,
    validate_boolean_entry,
    validate_date_entry,
    validate_dict_entry,
    validate_integer_entry,
    validate_name_entry,
    validate_rectangle_entry,
    validate_stream_dict_entry,
    validate_string_array_entry,
    validate_string_entry,
)
from .errors import (
    ConstraintViolationError,
    MalformedValueError,
    MissingRequiredEntryError,
    StructuralInconsistencyError,
    TypeMismatchError,
    VersionTooLowError,
)
from .values import validate_file_spec_string, validate_url_string

logger = logging.getLogger(__name__)

EF_KEYS = frozenset({"F", "UF", "DOS", "Mac", "Unix"})


# ---------------------------------------------------------------------------
# Embedded file streams (§7.11.4)
# ---------------------------------------------------------------------------


def validate_embedded_file_stream_mac_parameter_dict(xref: XRefTable, d: Dictionary) -> None:
    dict_name = "embeddedFileStreamMacParameterDict"

    # Subtype: Mac OS file type, integer
    validate_integer_entry(xref, d, dict_name, "Subtype", OPTIONAL, PDFVersion.V10)

    # Creator: Mac OS creator signature, integer
    validate_integer_entry(xref, d, dict_name, "Creator", OPTIONAL, PDFVersion.V10)

    # ResFork: resource fork contents
    validate_stream_dict_entry(xref, d, dict_name, "ResFork", OPTIONAL, PDFVersion.V10)


def validate_embedded_file_stream_parameter_dict(xref: XRefTable, obj: Object) -> None:
    d = xref.dereference_dict(obj)
    if d is None:
        return

    dict_name = "embeddedFileStreamParmDict"

    validate_integer_entry(xref, d, dict_name, "Size", OPTIONAL, PDFVersion.V10, lambda i: i >= 0)
    validate_date_entry(xref, d, dict_name, "CreationDate", OPTIONAL, PDFVersion.V10)
    validate_date_entry(xref, d, dict_name, "ModDate", OPTIONAL, PDFVersion.V10)

    mac = validate_dict_entry(xref, d, dict_name, "Mac", OPTIONAL, PDFVersion.V10)
    if mac is not None:
        validate_embedded_file_stream_mac_parameter_dict(xref, mac)

    validate_string_entry(xref, d, dict_name, "CheckSum", OPTIONAL, PDFVersion.V10)


def validate_embedded_file_stream_dict(xref: XRefTable, sd: Stream) -> None:
    logger.debug("validateEmbeddedFileStreamDict begin")

    dict_name = "embeddedFileStreamDict"

    validate_name_entry(xref, sd.dict, dict_name, "Type", OPTIONAL, PDFVersion.V10, lambda s: s == "EmbeddedFile")

    # Subtype: MIME media type, encoded as a name
    validate_name_entry(xref, sd.dict, dict_name, "Subtype", OPTIONAL, PDFVersion.V10)

    if sd.dict.get("Params") is not None:
        validate_embedded_file_stream_parameter_dict(xref, sd.dict["Params"])

    logger.debug("validateEmbeddedFileStreamDict end")


def _validate_embedded_file_stream(xref: XRefTable, obj: Object, dict_name: str, entry_name: str) -> None:
    try:
        sd = xref.dereference_stream(obj)
    except TypeMismatchError as e:
        raise TypeMismatchError(dict_name, entry_name, "embedded file stream", e.found) from None
    if sd is None:
        raise MissingRequiredEntryError(dict_name, entry_name)
    validate_embedded_file_stream_dict(xref, sd)


# ---------------------------------------------------------------------------
# EF / RF pairing (§7.11.4.2)
# ---------------------------------------------------------------------------


def validate_ef_dict(xref: XRefTable, ef: Dictionary) -> None:
    for k, obj in ef.items():
        if k not in EF_KEYS:
            raise ConstraintViolationError("efDict", k, k, f"efDict: invalid key: {k}")
        _validate_embedded_file_stream(xref, obj, "efDict", k)


def validate_related_files_array(xref: XRefTable, arr: list, key: str) -> None:
    """
    Validate one /RF array: pairs of (embedded file stream, file name string).

    Null or unresolvable pair members are rejected, not skipped.
    """
    if len(arr) % 2 > 0:
        raise MalformedValueError(f"rfDict entry={key}: related files array has odd length {len(arr)}", "rfDict", key)

    for i, v in enumerate(arr):
        obj = xref.dereference(v)
        if obj is None:
            raise MalformedValueError(f"rfDict entry={key}: array element {i} is null", "rfDict", key)

        if i % 2 > 0:
            if kind_of(obj) != ObjectKind.STRING:
                raise MalformedValueError(
                    f"rfDict entry={key}: array element {i} must be a string, got {kind_of(obj).value}",
                    "rfDict",
                    key,
                )
        else:
            if kind_of(obj) != ObjectKind.STREAM:
                raise MalformedValueError(
                    f"rfDict entry={key}: array element {i} must be an embedded file stream, got {kind_of(obj).value}",
                    "rfDict",
                    key,
                )
            _validate_embedded_file_stream(xref, obj, "rfDict", key)


def validate_ef_and_rf(xref: XRefTable, ef: Dictionary | None, rf: Dictionary | None) -> None:
    logger.debug("validateFileSpecDictEntriesEFAndRF begin")

    if ef is None:
        raise MissingRequiredEntryError("fileSpecDict", "EF")

    validate_ef_dict(xref, ef)

    if rf is not None:
        for k, val in rf.items():
            if k not in ef:
                raise StructuralInconsistencyError(
                    f"rfDict entry={k} missing corresponding efDict entry", "rfDict", k
                )
            try:
                arr = xref.dereference_array(val)
            except TypeMismatchError as e:
                raise TypeMismatchError("rfDict", k, "related files array", e.found) from None
            if arr is None:
                continue
            validate_related_files_array(xref, arr, k)

    logger.debug("validateFileSpecDictEntriesEFAndRF end")


def _file_spec_type_predicate(mode: ValidationMode):
    def validate(s: str) -> bool:
        return s == "Filespec" or (mode == ValidationMode.RELAXED and s == "F")
    return validate


def validate_file_spec_dict_ef_and_rf(xref: XRefTable, d: Dictionary, dict_name: str) -> None:
    # RF: related files arrays, since 1.3
    rf = validate_dict_entry(xref, d, dict_name, "RF", OPTIONAL, PDFVersion.V13)

    # EF: embedded file streams, required if RF present, since 1.3
    ef = validate_dict_entry(xref, d, dict_name, "EF", rf is not None, PDFVersion.V13)

    # Type: required if EF present
    validate_name_entry(
        xref, d, dict_name, "Type", ef is not None, PDFVersion.V10, _file_spec_type_predicate(xref.mode)
    )

    if ef is not None:
        validate_ef_and_rf(xref, ef, rf)


# ---------------------------------------------------------------------------
# File specification dictionaries and strings
# ---------------------------------------------------------------------------


def validate_file_spec_dict(xref: XRefTable, d: Dictionary) -> None:
    logger.debug("validateFileSpecDict begin")

    dict_name = "fileSpecDict"

    fs = validate_name_entry(xref, d, dict_name, "FS", OPTIONAL, PDFVersion.V10)

    # DOS, Mac, Unix: obsolescent platform specific byte strings
    required_f = not any(k in d for k in ("DOS", "Mac", "Unix"))

    validate = validate_url_string if fs == "URL" else validate_file_spec_string
    validate_string_entry(xref, d, dict_name, "F", required_f, PDFVersion.V10, validate)

    since = effective_min_version(PDFVersion.V17, xref.mode, relaxed=PDFVersion.V14)
    validate_string_entry(xref, d, dict_name, "UF", OPTIONAL, since, validate_file_spec_string)

    validate_string_array_entry(xref, d, dict_name, "ID", OPTIONAL, PDFVersion.V11, lambda a: len(a) == 2)

    validate_boolean_entry(xref, d, dict_name, "V", OPTIONAL, PDFVersion.V12)

    validate_file_spec_dict_ef_and_rf(xref, d, dict_name)

    since = effective_min_version(PDFVersion.V16, xref.mode, relaxed=PDFVersion.V10)
    validate_string_entry(xref, d, dict_name, "Desc", OPTIONAL, since)

    # CI: collection item dict
    validate_dict_entry(xref, d, dict_name, "CI", OPTIONAL, PDFVersion.V17)

    logger.debug("validateFileSpecDict end")


def _validate_file_spec_string(s: str, where: str) -> None:
    if not validate_file_spec_string(s):
        raise ConstraintViolationError(None, where, s, f"{where}: invalid file spec string: {s!r}")


def validate_file_specification(xref: XRefTable, obj: Object) -> Object:
    """Validate a file specification given as a string or a dictionary."""
    obj = xref.dereference(obj)

    kind = kind_of(obj)
    if kind == ObjectKind.STRING:
        _validate_file_spec_string(obj.value, "fileSpecification")  # type: ignore[union-attr]
    elif kind == ObjectKind.DICTIONARY:
        validate_file_spec_dict(xref, obj)  # type: ignore[arg-type]
    else:
        raise TypeMismatchError(None, "fileSpecification", "string or dictionary", kind.value)

    return obj


def validate_file_spec_entry(
    xref: XRefTable,
    d: Dictionary,
    dict_name: str,
    entry_name: str,
    required: bool,
    since_version: PDFVersion,
) -> Object:
    """Entry-style wrapper: fetch ``entry_name`` and validate it as a file specification."""
    obj = d.get(entry_name)
    if obj is not None:
        obj = xref.dereference(obj)
    if obj is None:
        if required:
            raise MissingRequiredEntryError(dict_name, entry_name)
        return None

    if kind_of(obj) not in (ObjectKind.STRING, ObjectKind.DICTIONARY):
        raise TypeMismatchError(dict_name, entry_name, "file specification", kind_of(obj).value)

    if xref.version < since_version:
        raise VersionTooLowError(dict_name, entry_name, since_version, xref.version)

    return validate_file_specification(xref, obj)


def validate_form_stream_dict(xref: XRefTable, sd: Stream) -> None:
    """Minimal form XObject check (§8.10): Subtype /Form and a /BBox."""
    dict_name = "formStreamDict"
    validate_name_entry(xref, sd.dict, dict_name, "Type", OPTIONAL, PDFVersion.V10, lambda s: s == "XObject")
    validate_name_entry(xref, sd.dict, dict_name, "Subtype", REQUIRED, PDFVersion.V10, lambda s: s == "Form")
    validate_rectangle_entry(xref, sd.dict, dict_name, "BBox", REQUIRED, PDFVersion.V10)


def validate_file_specification_or_form_object(xref: XRefTable, obj: Object) -> Object:
    """A file specification, or a form XObject standing in for one (e.g. /Ref in reference XObjects)."""
    obj = xref.dereference(obj)

    kind = kind_of(obj)
    if kind == ObjectKind.STRING:
        _validate_file_spec_string(obj.value, "fileSpecificationOrFormObject")  # type: ignore[union-attr]
    elif kind == ObjectKind.DICTIONARY:
        validate_file_spec_dict(xref, obj)  # type: ignore[arg-type]
    elif kind == ObjectKind.STREAM:
        validate_form_stream_dict(xref, obj)  # type: ignore[arg-type]
    else:
        raise TypeMismatchError(None, "fileSpecificationOrFormObject", "string, dictionary or stream", kind.value)

    return obj
