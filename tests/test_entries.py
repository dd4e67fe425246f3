"""
Test Suite for the entry framework
===================================
Object model, versions, configuration, resolver and the generic
``validate_<kind>_entry`` functions.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from pathlib import Path

import pytest

import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from pydantic import ValidationError

from pdf_preflight.models.config import ValidationConfig
from pdf_preflight.models.cos import (
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
from pdf_preflight.models.version import PDFVersion, ValidationMode, effective_min_version
from pdf_preflight.pdf.xref import XRefTable
from pdf_preflight.validator.entries import (
    OPTIONAL,
    REQUIRED,
    validate_array_entry,
    validate_boolean_entry,
    validate_date_entry,
    validate_dict_entry,
    validate_ind_ref_array_entry,
    validate_integer_array_entry,
    validate_integer_entry,
    validate_name_entry,
    validate_name_or_string_entry,
    validate_number_array_entry,
    validate_number_entry,
    validate_rectangle_entry,
    validate_stream_dict_entry,
    validate_string_array_entry,
    validate_string_entry,
)
from pdf_preflight.validator.errors import (
    BrokenReferenceError,
    ConstraintViolationError,
    CyclicReferenceError,
    ErrorKind,
    MalformedValueError,
    MissingRequiredEntryError,
    PDFValidationError,
    ResolutionError,
    TypeMismatchError,
    VersionTooLowError,
)
from pdf_preflight.validator.values import parse_date, validate_rotate


# ===========================================================================
# Fixtures
# ===========================================================================


@pytest.fixture
def xref() -> XRefTable:
    return XRefTable(version=PDFVersion.V17)


@pytest.fixture
def xref_v13() -> XRefTable:
    return XRefTable(version=PDFVersion.V13)


# ===========================================================================
# Object model
# ===========================================================================


class TestObjectModel:
    def test_bool_is_not_integer(self) -> None:
        assert kind_of(True) == ObjectKind.BOOLEAN
        assert kind_of(1) == ObjectKind.INTEGER

    def test_reals(self) -> None:
        assert kind_of(1.5) == ObjectKind.REAL
        assert kind_of(Decimal("2.25")) == ObjectKind.REAL

    def test_composites(self) -> None:
        assert kind_of(None) == ObjectKind.NULL
        assert kind_of(Name("Page")) == ObjectKind.NAME
        assert kind_of(String("x")) == ObjectKind.STRING
        assert kind_of(Array()) == ObjectKind.ARRAY
        assert kind_of(Dictionary()) == ObjectKind.DICTIONARY
        assert kind_of(Stream(Dictionary(), b"")) == ObjectKind.STREAM
        assert kind_of(Reference(1)) == ObjectKind.REFERENCE

    def test_foreign_value_rejected(self) -> None:
        with pytest.raises(TypeError):
            kind_of(object())
        with pytest.raises(TypeError):
            kind_of(b"bytes")

    def test_dictionary_discriminators(self) -> None:
        d = Dictionary(Type=Name("Page"), Subtype=String("not a name"))
        assert d.type_name() == "Page"
        assert d.subtype_name() is None
        assert Dictionary().type_name() is None

    def test_rectangle_dimensions(self) -> None:
        r = Rectangle(612, 792, 0, 0)
        assert r.width == 612
        assert r.height == 792

    def test_reference_str(self) -> None:
        assert str(Reference(12, 3)) == "12 3 R"
        assert Reference(12).objgen == (12, 0)


# ===========================================================================
# Versions and configuration
# ===========================================================================


class TestVersions:
    def test_order(self) -> None:
        assert PDFVersion.V10 < PDFVersion.V17 < PDFVersion.V20

    @pytest.mark.parametrize("text,expected", [
        ("1.4", PDFVersion.V14),
        ("/1.7", PDFVersion.V17),
        ("2.0", PDFVersion.V20),
    ])
    def test_parse(self, text: str, expected: PDFVersion) -> None:
        assert PDFVersion.parse(text) == expected

    @pytest.mark.parametrize("text", ["", "1", "1.8", "abc", "1.x", "1.10", "/1.04"])
    def test_parse_invalid(self, text: str) -> None:
        with pytest.raises(ValueError):
            PDFVersion.parse(text)

    def test_str(self) -> None:
        assert str(PDFVersion.V15) == "1.5"
        assert str(PDFVersion.V20) == "2.0"

    def test_effective_min_version(self) -> None:
        assert effective_min_version(PDFVersion.V17, ValidationMode.STRICT, PDFVersion.V14) == PDFVersion.V17
        assert effective_min_version(PDFVersion.V17, ValidationMode.RELAXED, PDFVersion.V14) == PDFVersion.V14
        assert effective_min_version(PDFVersion.V17, ValidationMode.RELAXED) == PDFVersion.V17


class TestValidationConfig:
    def test_defaults(self) -> None:
        config = ValidationConfig()
        assert config.mode == ValidationMode.STRICT
        assert config.version is None
        assert config.check_page_count is True
        assert not config.relaxed

    def test_frozen(self) -> None:
        config = ValidationConfig()
        with pytest.raises(ValidationError):
            config.mode = ValidationMode.RELAXED  # type: ignore[misc]

    def test_version_override(self) -> None:
        xref = XRefTable(version=PDFVersion.V17, config=ValidationConfig(version=PDFVersion.V13))
        assert xref.version == PDFVersion.V13
        assert xref.document_version == PDFVersion.V17


# ===========================================================================
# Resolver
# ===========================================================================


class TestXRefTable:
    def test_add_and_dereference(self, xref: XRefTable) -> None:
        ref = xref.add(Dictionary(Type=Name("Page")))
        assert xref.dereference_dict(ref) == Dictionary(Type=Name("Page"))
        assert len(xref) == 1

    def test_auto_numbering(self, xref: XRefTable) -> None:
        xref.add(1, number=5)
        assert xref.add(2) == Reference(6)

    def test_chain(self, xref: XRefTable) -> None:
        xref.add(42, number=1)
        xref.add(Reference(1), number=2)
        assert xref.dereference(Reference(2)) == 42

    def test_broken_reference(self, xref: XRefTable) -> None:
        with pytest.raises(BrokenReferenceError):
            xref.dereference(Reference(99))

    def test_cyclic_reference(self, xref: XRefTable) -> None:
        xref.add(Reference(2), number=1)
        xref.add(Reference(1), number=2)
        with pytest.raises(CyclicReferenceError):
            xref.dereference(Reference(1))

    def test_resolution_errors_are_not_rule_violations(self) -> None:
        assert not issubclass(BrokenReferenceError, PDFValidationError)
        assert issubclass(CyclicReferenceError, ResolutionError)

    def test_typed_dereference_mismatch(self, xref: XRefTable) -> None:
        ref = xref.add(Name("X"))
        with pytest.raises(TypeMismatchError) as exc:
            xref.dereference_dict(ref)
        assert exc.value.expected == "dictionary"
        assert exc.value.found == "name"

    def test_typed_dereference_null(self, xref: XRefTable) -> None:
        assert xref.dereference_array(None) is None

    def test_page_count_first_write_wins(self, xref: XRefTable) -> None:
        assert xref.page_count is None
        xref.record_page_count(3)
        xref.record_page_count(5)
        assert xref.page_count == 3

    def test_catalog_required(self, xref: XRefTable) -> None:
        with pytest.raises(MissingRequiredEntryError):
            xref.catalog()
        xref.set_root(Dictionary(Type=Name("Catalog")))
        assert xref.catalog().type_name() == "Catalog"


# ===========================================================================
# Entry framework
# ===========================================================================


class TestPresence:
    def test_absent_optional(self, xref: XRefTable) -> None:
        assert validate_integer_entry(xref, Dictionary(), "d", "N", OPTIONAL, PDFVersion.V10) is None

    def test_absent_required(self, xref: XRefTable) -> None:
        with pytest.raises(MissingRequiredEntryError) as exc:
            validate_integer_entry(xref, Dictionary(), "pageDict", "N", REQUIRED, PDFVersion.V10)
        assert exc.value.kind == ErrorKind.MISSING_REQUIRED_FIELD
        assert exc.value.dict_name == "pageDict"
        assert exc.value.entry_name == "N"

    def test_explicit_null_is_absent(self, xref: XRefTable) -> None:
        d = Dictionary(N=None)
        assert validate_integer_entry(xref, d, "d", "N", OPTIONAL, PDFVersion.V10) is None
        with pytest.raises(MissingRequiredEntryError):
            validate_integer_entry(xref, d, "d", "N", REQUIRED, PDFVersion.V10)

    def test_reference_to_null_is_absent(self, xref: XRefTable) -> None:
        ref = xref.add(None)
        with pytest.raises(MissingRequiredEntryError):
            validate_integer_entry(xref, Dictionary(N=ref), "d", "N", REQUIRED, PDFVersion.V10)

    def test_absent_entry_never_checks_version(self, xref_v13: XRefTable) -> None:
        assert validate_name_entry(xref_v13, Dictionary(), "d", "Tabs", OPTIONAL, PDFVersion.V15) is None


class TestVersionGate:
    def test_too_low(self, xref_v13: XRefTable) -> None:
        with pytest.raises(VersionTooLowError) as exc:
            validate_integer_entry(xref_v13, Dictionary(N=1), "d", "N", OPTIONAL, PDFVersion.V14)
        assert exc.value.min_version == PDFVersion.V14
        assert exc.value.actual == PDFVersion.V13

    def test_equal_is_enough(self, xref_v13: XRefTable) -> None:
        assert validate_integer_entry(xref_v13, Dictionary(N=1), "d", "N", OPTIONAL, PDFVersion.V13) == 1

    def test_kind_checked_before_version(self, xref_v13: XRefTable) -> None:
        with pytest.raises(TypeMismatchError):
            validate_integer_entry(xref_v13, Dictionary(N=Name("x")), "d", "N", OPTIONAL, PDFVersion.V15)

    def test_version_checked_before_predicate(self, xref_v13: XRefTable) -> None:
        with pytest.raises(VersionTooLowError):
            validate_integer_entry(
                xref_v13, Dictionary(N=45), "d", "N", OPTIONAL, PDFVersion.V15, validate_rotate
            )


class TestKinds:
    def test_type_mismatch(self, xref: XRefTable) -> None:
        with pytest.raises(TypeMismatchError) as exc:
            validate_integer_entry(xref, Dictionary(N=Name("x")), "d", "N", OPTIONAL, PDFVersion.V10)
        assert exc.value.expected == "integer"
        assert exc.value.found == "name"
        assert exc.value.kind == ErrorKind.TYPE_MISMATCH

    def test_boolean_is_not_integer(self, xref: XRefTable) -> None:
        with pytest.raises(TypeMismatchError):
            validate_integer_entry(xref, Dictionary(N=True), "d", "N", OPTIONAL, PDFVersion.V10)

    def test_indirect_value(self, xref: XRefTable) -> None:
        ref = xref.add(90)
        assert validate_integer_entry(xref, Dictionary(Rotate=ref), "d", "Rotate", OPTIONAL, PDFVersion.V10) == 90

    def test_broken_reference_propagates(self, xref: XRefTable) -> None:
        with pytest.raises(BrokenReferenceError):
            validate_integer_entry(xref, Dictionary(N=Reference(7)), "d", "N", OPTIONAL, PDFVersion.V10)

    def test_boolean(self, xref: XRefTable) -> None:
        assert validate_boolean_entry(xref, Dictionary(V=False), "d", "V", OPTIONAL, PDFVersion.V10) is False

    def test_number_accepts_integer_and_real(self, xref: XRefTable) -> None:
        d = Dictionary(A=2, B=Decimal("0.5"))
        assert validate_number_entry(xref, d, "d", "A", OPTIONAL, PDFVersion.V10) == 2.0
        assert validate_number_entry(xref, d, "d", "B", OPTIONAL, PDFVersion.V10) == 0.5

    def test_name_and_string(self, xref: XRefTable) -> None:
        d = Dictionary(N=Name("Fly"), S=String("hello"))
        assert validate_name_entry(xref, d, "d", "N", OPTIONAL, PDFVersion.V10) == "Fly"
        assert validate_string_entry(xref, d, "d", "S", OPTIONAL, PDFVersion.V10) == "hello"
        with pytest.raises(TypeMismatchError):
            validate_string_entry(xref, d, "d", "N", OPTIONAL, PDFVersion.V10)

    def test_name_or_string(self, xref: XRefTable) -> None:
        d = Dictionary(N=Name("Cyan"), S=String("Cyan"), I=3)
        assert validate_name_or_string_entry(xref, d, "d", "N", OPTIONAL, PDFVersion.V10) == "Cyan"
        assert validate_name_or_string_entry(xref, d, "d", "S", OPTIONAL, PDFVersion.V10) == "Cyan"
        with pytest.raises(TypeMismatchError):
            validate_name_or_string_entry(xref, d, "d", "I", OPTIONAL, PDFVersion.V10)

    def test_dict_array_stream(self, xref: XRefTable) -> None:
        sd = Stream(Dictionary(Length=0), b"")
        d = Dictionary(D=Dictionary(), A=Array([1]), S=xref.add(sd))
        assert validate_dict_entry(xref, d, "d", "D", OPTIONAL, PDFVersion.V10) == {}
        assert validate_array_entry(xref, d, "d", "A", OPTIONAL, PDFVersion.V10) == [1]
        assert validate_stream_dict_entry(xref, d, "d", "S", OPTIONAL, PDFVersion.V10) is sd
        with pytest.raises(TypeMismatchError):
            validate_dict_entry(xref, d, "d", "S", OPTIONAL, PDFVersion.V10)


class TestPredicates:
    def test_constraint_violation(self, xref: XRefTable) -> None:
        with pytest.raises(ConstraintViolationError) as exc:
            validate_integer_entry(xref, Dictionary(Rotate=45), "pageDict", "Rotate", OPTIONAL,
                                   PDFVersion.V10, validate_rotate)
        assert exc.value.value == 45
        assert exc.value.kind == ErrorKind.CONSTRAINT_VIOLATED

    def test_predicate_passes(self, xref: XRefTable) -> None:
        assert validate_integer_entry(xref, Dictionary(Rotate=270), "pageDict", "Rotate", OPTIONAL,
                                      PDFVersion.V10, validate_rotate) == 270


class TestRectangle:
    def test_valid(self, xref: XRefTable) -> None:
        d = Dictionary(MediaBox=Array([0, 0, Decimal("612.5"), xref.add(792)]))
        r = validate_rectangle_entry(xref, d, "d", "MediaBox", REQUIRED, PDFVersion.V10)
        assert r == Rectangle(0.0, 0.0, 612.5, 792.0)

    def test_wrong_length(self, xref: XRefTable) -> None:
        with pytest.raises(MalformedValueError):
            validate_rectangle_entry(xref, Dictionary(R=Array([0, 0, 1])), "d", "R", OPTIONAL, PDFVersion.V10)

    def test_non_numbers(self, xref: XRefTable) -> None:
        d = Dictionary(R=Array([0, 0, Name("a"), 1]))
        with pytest.raises(MalformedValueError):
            validate_rectangle_entry(xref, d, "d", "R", OPTIONAL, PDFVersion.V10)

    def test_not_an_array(self, xref: XRefTable) -> None:
        with pytest.raises(TypeMismatchError):
            validate_rectangle_entry(xref, Dictionary(R=5), "d", "R", OPTIONAL, PDFVersion.V10)


class TestDate:
    def test_valid(self, xref: XRefTable) -> None:
        d = Dictionary(ModDate=String("D:20240315101500Z"))
        dt = validate_date_entry(xref, d, "d", "ModDate", OPTIONAL, PDFVersion.V10)
        assert dt == datetime(2024, 3, 15, 10, 15, 0, tzinfo=timezone.utc)

    def test_malformed(self, xref: XRefTable) -> None:
        with pytest.raises(MalformedValueError):
            validate_date_entry(xref, Dictionary(M=String("yesterday")), "d", "M", OPTIONAL, PDFVersion.V10)

    def test_not_a_string(self, xref: XRefTable) -> None:
        with pytest.raises(TypeMismatchError):
            validate_date_entry(xref, Dictionary(M=Name("D:2024")), "d", "M", OPTIONAL, PDFVersion.V10)

    def test_parse_partial(self) -> None:
        assert parse_date("D:2024") == datetime(2024, 1, 1)
        assert parse_date("D:202403") == datetime(2024, 3, 1)

    def test_parse_offset(self) -> None:
        dt = parse_date("D:20240101120000+05'30'")
        assert dt is not None
        assert dt.utcoffset() == timedelta(hours=5, minutes=30)
        dt = parse_date("D:20240101120000-08'00")
        assert dt is not None
        assert dt.utcoffset() == -timedelta(hours=8)

    @pytest.mark.parametrize("s", ["20240101", "D:24", "D:20240230", "D:20241301", "D:2024010125"])
    def test_parse_invalid(self, s: str) -> None:
        assert parse_date(s) is None


class TestArrays:
    def test_ind_ref_array(self, xref: XRefTable) -> None:
        d = Dictionary(B=Array([Reference(1), Reference(2)]))
        assert validate_ind_ref_array_entry(xref, d, "d", "B", OPTIONAL, PDFVersion.V10) == [Reference(1), Reference(2)]

    def test_ind_ref_array_direct_element(self, xref: XRefTable) -> None:
        d = Dictionary(B=Array([Reference(1), Dictionary()]))
        with pytest.raises(TypeMismatchError):
            validate_ind_ref_array_entry(xref, d, "d", "B", OPTIONAL, PDFVersion.V10)

    def test_string_array_skips_null(self, xref: XRefTable) -> None:
        d = Dictionary(ID=Array([String("a"), None, xref.add(String("b"))]))
        assert validate_string_array_entry(xref, d, "d", "ID", OPTIONAL, PDFVersion.V10) == ["a", "b"]

    def test_string_array_mismatch(self, xref: XRefTable) -> None:
        d = Dictionary(ID=Array([String("a"), 1]))
        with pytest.raises(TypeMismatchError):
            validate_string_array_entry(xref, d, "d", "ID", OPTIONAL, PDFVersion.V10)

    def test_number_and_integer_arrays(self, xref: XRefTable) -> None:
        d = Dictionary(C=Array([1, Decimal("0.5"), 0.25]), D=Array([3, 2]))
        assert validate_number_array_entry(xref, d, "d", "C", OPTIONAL, PDFVersion.V10) == [1.0, 0.5, 0.25]
        assert validate_integer_array_entry(xref, d, "d", "D", OPTIONAL, PDFVersion.V10) == [3, 2]
        with pytest.raises(TypeMismatchError):
            validate_integer_array_entry(xref, d, "d", "C", OPTIONAL, PDFVersion.V10)

    def test_array_predicate(self, xref: XRefTable) -> None:
        d = Dictionary(C=Array([1, 0, 0, 1]))
        with pytest.raises(ConstraintViolationError):
            validate_number_array_entry(xref, d, "d", "C", OPTIONAL, PDFVersion.V10, lambda a: len(a) == 3)
