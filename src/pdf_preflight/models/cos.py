"""
COS Object Model
=================
Python representation of the document object graph (ISO 32000-1 §7.3).

The graph is a tagged union over ten kinds. Scalars use plain Python
values, everything else a small class::

    Null        None
    Boolean     bool
    Integer     int
    Real        float (or decimal.Decimal)
    Name        Name("Page")
    String      String("Hello") / String("0A0B", hex=True)
    Array       Array([...])
    Dictionary  Dictionary({"Type": Name("Page"), ...})
    Stream      Stream(Dictionary(...), b"...")
    Reference   Reference(12, 0)

Every dispatch over a value goes through :func:`kind_of`, which rejects
anything outside the union.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, NamedTuple, Union


class ObjectKind(str, Enum):
    """The value kinds of the COS model (§7.3)."""
    NULL = "null"
    BOOLEAN = "boolean"
    INTEGER = "integer"
    REAL = "real"
    NAME = "name"
    STRING = "string"
    ARRAY = "array"
    DICTIONARY = "dictionary"
    STREAM = "stream"
    REFERENCE = "reference"


@dataclass(frozen=True)
class Name:
    """A name object. The value is stored without the leading solidus."""
    value: str

    def __str__(self) -> str:
        return f"/{self.value}"


@dataclass(frozen=True)
class String:
    """A literal or hexadecimal string object, already decoded to text."""
    value: str
    hex: bool = False

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Reference:
    """Indirect reference (``12 0 R``)."""
    object_number: int
    generation: int = 0

    @property
    def objgen(self) -> tuple[int, int]:
        return (self.object_number, self.generation)

    def __str__(self) -> str:
        return f"{self.object_number} {self.generation} R"


class Array(list):
    """Ordered sequence of objects."""

    def __repr__(self) -> str:
        return f"Array({list.__repr__(self)})"


class Dictionary(dict):
    """
    Mapping from entry name (without solidus) to object.

    An entry mapped to ``None`` is an explicit null, which callers keep
    apart from an absent entry.
    """

    def type_name(self) -> str | None:
        """The ``/Type`` discriminator, if it is a direct name."""
        return _name_value(self.get("Type"))

    def subtype_name(self) -> str | None:
        """The ``/Subtype`` discriminator, if it is a direct name."""
        return _name_value(self.get("Subtype"))

    def __repr__(self) -> str:
        return f"Dictionary({dict.__repr__(self)})"


@dataclass
class Stream:
    """A stream dictionary paired with its (undecoded) payload."""
    dict: Dictionary = field(default_factory=Dictionary)
    data: bytes = b""

    def type_name(self) -> str | None:
        return self.dict.type_name()

    def subtype_name(self) -> str | None:
        return self.dict.subtype_name()


Object = Union[None, bool, int, float, Decimal, Name, String, Array, Dictionary, Stream, Reference]


class Rectangle(NamedTuple):
    """A rectangle given by two diagonally opposite corners (§7.9.5)."""
    llx: float
    lly: float
    urx: float
    ury: float

    @property
    def width(self) -> float:
        return abs(self.urx - self.llx)

    @property
    def height(self) -> float:
        return abs(self.ury - self.lly)


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------


def kind_of(obj: Any) -> ObjectKind:
    """
    Classify a graph value.

    Raises ``TypeError`` for any value outside the COS union, so that a
    foreign object handed in by a loader never passes as some kind by
    accident.
    """
    if obj is None:
        return ObjectKind.NULL
    # bool is a subclass of int and must be tested first.
    if isinstance(obj, bool):
        return ObjectKind.BOOLEAN
    if isinstance(obj, int):
        return ObjectKind.INTEGER
    if isinstance(obj, (float, Decimal)):
        return ObjectKind.REAL
    if isinstance(obj, Name):
        return ObjectKind.NAME
    if isinstance(obj, String):
        return ObjectKind.STRING
    if isinstance(obj, Array):
        return ObjectKind.ARRAY
    if isinstance(obj, Dictionary):
        return ObjectKind.DICTIONARY
    if isinstance(obj, Stream):
        return ObjectKind.STREAM
    if isinstance(obj, Reference):
        return ObjectKind.REFERENCE
    raise TypeError(f"not a COS object: {type(obj).__name__}")


def is_number(obj: Any) -> bool:
    return kind_of(obj) in (ObjectKind.INTEGER, ObjectKind.REAL)


def _name_value(obj: Any) -> str | None:
    return obj.value if isinstance(obj, Name) else None
