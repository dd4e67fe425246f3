"""
Cross-Reference Table
======================
The object resolver every validator goes through. Holds the materialized
object graph keyed by ``(object number, generation)``, the trailer's root
reference, the document version and the run configuration.

Example::

    xref = XRefTable(version=PDFVersion.V17)
    page_ref = xref.add(Dictionary(Type=Name("Page")))
    page = xref.dereference_dict(page_ref)
"""

from __future__ import annotations

import logging
from typing import Any

from ..models.config import ValidationConfig
from ..models.cos import (
    Array,
    Dictionary,
    Name,
    Object,
    ObjectKind,
    Reference,
    Stream,
    kind_of,
)
from ..models.version import PDFVersion, ValidationMode
from ..validator.errors import (
    BrokenReferenceError,
    CyclicReferenceError,
    MissingRequiredEntryError,
    TypeMismatchError,
)

logger = logging.getLogger(__name__)


class XRefTable:
    """In-memory object table with typed dereferencing."""

    def __init__(
        self,
        objects: dict[tuple[int, int], Object] | None = None,
        *,
        root: Reference | None = None,
        version: PDFVersion = PDFVersion.V17,
        config: ValidationConfig | None = None,
    ) -> None:
        self.objects: dict[tuple[int, int], Object] = dict(objects or {})
        self.root = root
        self.config = config or ValidationConfig()
        self._document_version = version
        self._page_count: int | None = None

    # ------------------------------------------------------------------
    # Table maintenance
    # ------------------------------------------------------------------

    def add(self, obj: Object, number: int | None = None, generation: int = 0) -> Reference:
        """Register ``obj`` as an indirect object and return its reference."""
        if number is None:
            number = max((n for n, _ in self.objects), default=0) + 1
        self.objects[(number, generation)] = obj
        return Reference(number, generation)

    def set_root(self, catalog: Dictionary | Reference) -> Reference:
        if not isinstance(catalog, Reference):
            catalog = self.add(catalog)
        self.root = catalog
        return catalog

    # ------------------------------------------------------------------
    # Run-wide properties
    # ------------------------------------------------------------------

    @property
    def version(self) -> PDFVersion:
        """Effective version: the configured override, else the document's own."""
        return self.config.version or self._document_version

    @property
    def document_version(self) -> PDFVersion:
        return self._document_version

    @property
    def mode(self) -> ValidationMode:
        return self.config.mode

    @property
    def page_count(self) -> int | None:
        return self._page_count

    def record_page_count(self, count: int) -> None:
        """Record the document's page count. The first write wins."""
        if self._page_count is not None:
            logger.debug("page count already recorded as %d, ignoring %d", self._page_count, count)
            return
        self._page_count = count

    # ------------------------------------------------------------------
    # Dereferencing
    # ------------------------------------------------------------------

    def dereference(self, obj: Object) -> Object:
        """Follow ``obj`` through any chain of references to a concrete value."""
        seen: set[tuple[int, int]] = set()
        while isinstance(obj, Reference):
            if obj.objgen in seen:
                raise CyclicReferenceError(obj)
            seen.add(obj.objgen)
            if obj.objgen not in self.objects:
                raise BrokenReferenceError(obj)
            obj = self.objects[obj.objgen]
        return obj

    def _dereference_kind(self, obj: Object, kind: ObjectKind) -> Any:
        o = self.dereference(obj)
        if o is None:
            return None
        found = kind_of(o)
        if found != kind:
            raise TypeMismatchError(None, None, kind.value, found.value)
        return o

    def dereference_dict(self, obj: Object) -> Dictionary | None:
        return self._dereference_kind(obj, ObjectKind.DICTIONARY)

    def dereference_array(self, obj: Object) -> Array | None:
        return self._dereference_kind(obj, ObjectKind.ARRAY)

    def dereference_stream(self, obj: Object) -> Stream | None:
        return self._dereference_kind(obj, ObjectKind.STREAM)

    def dereference_name(self, obj: Object) -> Name | None:
        return self._dereference_kind(obj, ObjectKind.NAME)

    def dereference_integer(self, obj: Object) -> int | None:
        return self._dereference_kind(obj, ObjectKind.INTEGER)

    def catalog(self) -> Dictionary:
        """The resolved document catalog."""
        if self.root is None:
            raise MissingRequiredEntryError("trailerDict", "Root")
        d = self.dereference_dict(self.root)
        if d is None:
            raise MissingRequiredEntryError("trailerDict", "Root")
        return d

    def __len__(self) -> int:
        return len(self.objects)

    def __repr__(self) -> str:
        return (
            f"XRefTable(objects={len(self.objects)}, root={self.root}, "
            f"version={self.version}, mode={self.mode.value})"
        )
