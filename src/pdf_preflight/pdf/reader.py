"""
PDF Loader
===========
Opens a PDF with pikepdf and materializes its object graph as an
:class:`~pdf_preflight.pdf.xref.XRefTable`.

Indirect objects stay indirect: every indirect pikepdf object becomes a
:class:`~pdf_preflight.models.cos.Reference` and is converted exactly once,
through a work list seeded with the catalog. Only objects reachable from
the catalog are loaded.

Example::

    from pdf_preflight.pdf.reader import PDFLoader

    with PDFLoader("document.pdf") as loader:
        xref = loader.xref_table()
        print(xref.version, len(xref))
"""

from __future__ import annotations

import logging
from collections import deque
from decimal import Decimal
from pathlib import Path
from typing import Any

import pikepdf

from ..models.config import ValidationConfig
from ..models.cos import Array, Dictionary, Name, Object, Reference, Stream, String
from ..models.version import PDFVersion
from .xref import XRefTable

logger = logging.getLogger(__name__)


class PDFLoader:
    """
    Context-manager-based loader around a ``pikepdf.Pdf``.

    ``source`` is a path, or an already open ``pikepdf.Pdf`` which the
    loader then leaves open on exit.
    """

    def __init__(self, source: str | Path | pikepdf.Pdf) -> None:
        if isinstance(source, pikepdf.Pdf):
            self._pdf = source
            self._owned = False
            self._path = Path(source.filename) if source.filename else None
        else:
            self._path = Path(source)
            self._pdf = pikepdf.open(str(source))
            self._owned = True

    def __enter__(self) -> "PDFLoader":
        return self

    def __exit__(self, *_: Any) -> None:
        if self._owned:
            self._pdf.close()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def pdf(self) -> pikepdf.Pdf:
        return self._pdf

    @property
    def path(self) -> Path | None:
        return self._path

    def document_version(self) -> PDFVersion:
        """The greater of the header version and the catalog's /Version."""
        version = PDFVersion.parse(self._pdf.pdf_version)

        catalog_version = self._pdf.Root.get("/Version")
        if catalog_version is not None:
            try:
                version = max(version, PDFVersion.parse(str(catalog_version)))
            except ValueError:
                logger.warning("ignoring unparsable catalog version %s", catalog_version)

        return version

    def xref_table(self, config: ValidationConfig | None = None) -> XRefTable:
        """Convert every object reachable from the catalog into an XRefTable."""
        xref = XRefTable(version=self.document_version(), config=config)

        root = self._pdf.Root
        queue: deque[pikepdf.Object] = deque([root])
        queued: set[tuple[int, int]] = {root.objgen}

        while queue:
            obj = queue.popleft()
            number, generation = obj.objgen
            xref.add(self._convert(obj, queue, queued, top=True), number, generation)

        xref.root = Reference(*root.objgen)

        logger.info(
            "loaded %d objects from %s (version %s)",
            len(xref), self._path or "<memory>", xref.document_version,
        )
        return xref

    # ------------------------------------------------------------------
    # Conversion
    # ------------------------------------------------------------------

    def _convert(
        self,
        obj: Any,
        queue: deque[pikepdf.Object],
        queued: set[tuple[int, int]],
        top: bool = False,
    ) -> Object:
        # pikepdf hands back null, booleans, integers and reals as Python values.
        if obj is None or isinstance(obj, (bool, int, float, Decimal)):
            return obj

        if not top and obj.is_indirect:
            objgen = obj.objgen
            if objgen not in queued:
                queued.add(objgen)
                queue.append(obj)
            return Reference(*objgen)

        if isinstance(obj, pikepdf.Name):
            return Name(str(obj)[1:])

        if isinstance(obj, pikepdf.String):
            return String(str(obj), hex=bytes(obj.unparse()).startswith(b"<"))

        if isinstance(obj, pikepdf.Stream):
            d = self._convert_dict(obj.stream_dict, queue, queued)
            return Stream(d, obj.read_raw_bytes())

        if isinstance(obj, pikepdf.Dictionary):
            return self._convert_dict(obj, queue, queued)

        if isinstance(obj, pikepdf.Array):
            return Array(self._convert(v, queue, queued) for v in obj)

        raise TypeError(f"unsupported pikepdf object: {obj!r}")

    def _convert_dict(
        self, obj: pikepdf.Dictionary, queue: deque[pikepdf.Object], queued: set[tuple[int, int]]
    ) -> Dictionary:
        return Dictionary(
            (key[1:], self._convert(value, queue, queued)) for key, value in obj.items()
        )


def load_xref_table(source: str | Path | pikepdf.Pdf, config: ValidationConfig | None = None) -> XRefTable:
    """Open ``source`` and return its object graph."""
    with PDFLoader(source) as loader:
        return loader.xref_table(config)
