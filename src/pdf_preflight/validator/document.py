"""
Document Validator
===================
Entry point for validating a whole document: the catalog, the page tree,
the embedded files name tree and the catalog's associated files.

Validation is fail-fast. The first rule violation or resolver fault ends
the run and is reported as the single issue of the returned
:class:`ValidationResult`.

Example::

    from pdf_preflight.validator.document import validate_file

    result = validate_file("report.pdf")
    print(result)
    if not result.passed:
        print(result.error.kind, result.error.message)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from ..models.config import ValidationConfig
from ..models.cos import Dictionary, ObjectKind, Reference, kind_of
from ..models.version import PDFVersion, ValidationMode, effective_min_version
from ..pdf.reader import PDFLoader
from ..pdf.xref import XRefTable
from .entries import (
    OPTIONAL,
    validate_array_entry,
    validate_dict_entry,
    validate_name_entry,
    validate_string_array_entry,
)
from .errors import (
    ErrorKind,
    MalformedValueError,
    PDFValidationError,
    ResolutionError,
    StructuralInconsistencyError,
    TypeMismatchError,
)
from .filespec import validate_file_specification
from .pages import PageNode, validate_pages

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------


@dataclass
class ValidationIssue:
    kind: ErrorKind
    message: str
    dict_name: str | None = None
    entry_name: str | None = None

    @classmethod
    def from_exception(cls, exc: PDFValidationError | ResolutionError) -> "ValidationIssue":
        if isinstance(exc, PDFValidationError):
            return cls(exc.kind, exc.message, exc.dict_name, exc.entry_name)
        return cls(exc.kind, str(exc))

    def __str__(self) -> str:
        return f"[{self.kind.value}] {self.message}"


@dataclass
class ValidationResult:
    """Result of a document validation run."""
    passed: bool
    version: PDFVersion
    mode: ValidationMode
    page_count: int | None = None
    pages: list[PageNode] = field(default_factory=list)
    error: ValidationIssue | None = None
    source: str | None = None

    @property
    def errors(self) -> list[ValidationIssue]:
        return [self.error] if self.error is not None else []

    def __str__(self) -> str:
        status = "PASS" if self.passed else "FAIL"
        s = f"[{status}] PDF {self.version} ({self.mode.value}) – {len(self.pages)} page(s)"
        if self.error is not None:
            s += f", {self.error}"
        return s


# ---------------------------------------------------------------------------
# Catalog level checks
# ---------------------------------------------------------------------------


def validate_embedded_files_name_tree(
    xref: XRefTable, d: Dictionary, visited: set[tuple[int, int]] | None = None
) -> int:
    """
    Validate a node of the embedded files name tree (§7.9.6); every value
    must be a file specification. Returns the number of entries found.
    """
    logger.debug("validateEmbeddedFilesNameTree begin")

    if visited is None:
        visited = set()

    dict_name = "embeddedFilesNameTreeNode"
    entries = 0

    validate_string_array_entry(xref, d, dict_name, "Limits", OPTIONAL, PDFVersion.V10, lambda a: len(a) == 2)

    kids = validate_array_entry(xref, d, dict_name, "Kids", OPTIONAL, PDFVersion.V10)
    for obj in kids or []:
        if obj is None:
            continue
        if not isinstance(obj, Reference):
            raise StructuralInconsistencyError(f"{dict_name}: kid must be an indirect reference", dict_name, "Kids")
        if obj.objgen in visited:
            raise StructuralInconsistencyError(f"{dict_name}: node {obj} reached twice", dict_name, "Kids")
        visited.add(obj.objgen)
        try:
            kid = xref.dereference_dict(obj)
        except TypeMismatchError as e:
            raise TypeMismatchError(dict_name, "Kids", "name tree node", e.found) from None
        if kid is not None:
            entries += validate_embedded_files_name_tree(xref, kid, visited)

    names = validate_array_entry(xref, d, dict_name, "Names", OPTIONAL, PDFVersion.V10)
    if names is not None:
        if len(names) % 2 > 0:
            raise MalformedValueError(f"{dict_name}: \"Names\" array has odd length {len(names)}", dict_name, "Names")
        for i in range(0, len(names), 2):
            key = xref.dereference(names[i])
            if kind_of(key) != ObjectKind.STRING:
                raise TypeMismatchError(dict_name, "Names", "string key", kind_of(key).value)
            validate_file_specification(xref, names[i + 1])
            entries += 1

    logger.debug("validateEmbeddedFilesNameTree end")

    return entries


def validate_names(xref: XRefTable, root: Dictionary) -> None:
    names = validate_dict_entry(xref, root, "rootDict", "Names", OPTIONAL, PDFVersion.V12)
    if names is None:
        return

    ef = validate_dict_entry(xref, names, "namesDict", "EmbeddedFiles", OPTIONAL, PDFVersion.V14)
    if ef is not None:
        n = validate_embedded_files_name_tree(xref, ef)
        logger.info("embedded files name tree: %d entr%s", n, "y" if n == 1 else "ies")


def validate_associated_files(xref: XRefTable, root: Dictionary) -> None:
    """Catalog /AF: an array of file specification dictionaries (ISO 32000-2 §14.13)."""
    since = effective_min_version(PDFVersion.V20, xref.mode, relaxed=PDFVersion.V17)
    arr = validate_array_entry(xref, root, "rootDict", "AF", OPTIONAL, since)
    if arr is None:
        return

    for v in arr:
        obj = xref.dereference(v)
        if obj is None:
            continue
        if kind_of(obj) != ObjectKind.DICTIONARY:
            raise TypeMismatchError("rootDict", "AF", "file specification dictionary", kind_of(obj).value)
        validate_file_specification(xref, obj)


def validate_root_object(xref: XRefTable) -> list[PageNode]:
    logger.debug("validateRootObject begin")

    root = xref.catalog()

    validate_name_entry(xref, root, "rootDict", "Type", OPTIONAL, PDFVersion.V10, lambda s: s == "Catalog")

    pages = validate_pages(xref, root)
    validate_names(xref, root)
    validate_associated_files(xref, root)

    logger.debug("validateRootObject end")

    return pages


# ---------------------------------------------------------------------------
# Entry points
# ---------------------------------------------------------------------------


class DocumentValidator:
    """
    Validates documents under one configuration.

    :meth:`validate` runs on an already built table and uses the table's
    own configuration; :meth:`validate_file` loads with ``config``.
    """

    def __init__(self, config: ValidationConfig | None = None) -> None:
        self.config = config or ValidationConfig()

    def validate(self, xref: XRefTable, source: str | None = None) -> ValidationResult:
        logger.info("validating %s as PDF %s (%s)", source or "document", xref.version, xref.mode.value)

        pages: list[PageNode] = []
        error: ValidationIssue | None = None
        try:
            pages = validate_root_object(xref)
        except (PDFValidationError, ResolutionError) as e:
            error = ValidationIssue.from_exception(e)
            logger.info("validation failed: %s", error)

        return ValidationResult(
            passed=error is None,
            version=xref.version,
            mode=xref.mode,
            page_count=xref.page_count,
            pages=pages,
            error=error,
            source=source,
        )

    def validate_file(self, path: str | Path) -> ValidationResult:
        with PDFLoader(path) as loader:
            xref = loader.xref_table(self.config)
        return self.validate(xref, source=str(path))


def validate_xref_table(xref: XRefTable) -> ValidationResult:
    return DocumentValidator(xref.config).validate(xref)


def validate_file(path: str | Path, config: ValidationConfig | None = None) -> ValidationResult:
    return DocumentValidator(config).validate_file(path)
