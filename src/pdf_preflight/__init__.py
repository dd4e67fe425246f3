"""
pdf-preflight – PDF Object Graph Validator
===========================================
Validates the semantic structure of a PDF's object graph: the page tree
with its inheritable attributes, file specifications and embedded files.
Each optional feature is checked against the PDF version that introduced
it, in a strict or a relaxed mode.

Quick Start::

    from pdf_preflight import ValidationConfig, ValidationMode, validate_file

    result = validate_file("report.pdf", ValidationConfig(mode=ValidationMode.RELAXED))
    print(result)
    for page in result.pages:
        print(page.index, page.attributes.media_box, page.attributes.rotate)
"""

__version__ = "0.1.0"

# Object model
from .models.cos import (
    Array,
    Dictionary,
    Name,
    ObjectKind,
    Rectangle,
    Reference,
    Stream,
    String,
    kind_of,
)
from .models.version import PDFVersion, ValidationMode, effective_min_version
from .models.config import ValidationConfig

# Object graph
from .pdf.xref import XRefTable
from .pdf.reader import PDFLoader, load_xref_table

# Validators
from .validator.errors import (
    BrokenReferenceError,
    ConstraintViolationError,
    CyclicReferenceError,
    ErrorKind,
    MalformedValueError,
    MissingRequiredEntryError,
    PDFValidationError,
    ResolutionError,
    StructuralInconsistencyError,
    TypeMismatchError,
    UnsupportedFeatureError,
    VersionTooLowError,
)
from .validator.pages import InheritedAttributes, PageNode, validate_pages
from .validator.filespec import validate_file_specification
from .validator.document import (
    DocumentValidator,
    ValidationIssue,
    ValidationResult,
    validate_file,
    validate_xref_table,
)

__all__ = [
    # Object model
    "Array",
    "Dictionary",
    "Name",
    "ObjectKind",
    "Rectangle",
    "Reference",
    "Stream",
    "String",
    "kind_of",
    "PDFVersion",
    "ValidationMode",
    "effective_min_version",
    "ValidationConfig",
    # Object graph
    "XRefTable",
    "PDFLoader",
    "load_xref_table",
    # Errors
    "BrokenReferenceError",
    "ConstraintViolationError",
    "CyclicReferenceError",
    "ErrorKind",
    "MalformedValueError",
    "MissingRequiredEntryError",
    "PDFValidationError",
    "ResolutionError",
    "StructuralInconsistencyError",
    "TypeMismatchError",
    "UnsupportedFeatureError",
    "VersionTooLowError",
    # Validation
    "InheritedAttributes",
    "PageNode",
    "validate_pages",
    "validate_file_specification",
    "DocumentValidator",
    "ValidationIssue",
    "ValidationResult",
    "validate_file",
    "validate_xref_table",
]
