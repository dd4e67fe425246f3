"""
Page Tree Validator
====================
Walks the page tree (ISO 32000-1 §7.7.3) depth first, carrying the
inheritable attributes (/Resources, /MediaBox, /CropBox, /Rotate) from
each /Pages node down to its leaves, and validates every /Page leaf.

Rules implemented beyond the per-entry checks:

- the catalog's /Pages entry is an indirect reference
- every node below the root carries /Parent pointing back at the node it
  was reached from
- a node reached twice (a /Kids or /Parent cycle) is rejected
- /Kids is a non-empty array of indirect references to /Pages or /Page
  dictionaries
- /Count agrees with the number of leaves beneath the node
- a page with content has /Resources, locally or inherited
- a page has a /MediaBox, locally or inherited
- /PieceInfo requires /LastModified (strict mode only)
- /PresSteps is not supported
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable

from ..models.cos import Array, Dictionary, ObjectKind, Rectangle, Reference, kind_of
from ..models.version import PDFVersion, ValidationMode, effective_min_version
from ..pdf.xref import XRefTable
from .entries import (
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
    validate_string_entry,
)
from .errors import (
    ConstraintViolationError,
    MalformedValueError,
    MissingRequiredEntryError,
    StructuralInconsistencyError,
    TypeMismatchError,
    UnsupportedFeatureError,
)
from .filespec import validate_file_spec_entry
from .values import (
    validate_di,
    validate_guideline_style,
    validate_rotate,
    validate_transition_dimension,
    validate_transition_direction_of_motion,
    validate_transition_style,
    validate_transition_style_v15,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Traversal state
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class InheritedAttributes:
    """Inheritable page attributes in effect at a node (§7.7.3.4)."""
    resources: Dictionary | None = None
    media_box: Rectangle | None = None
    crop_box: Rectangle | None = None
    rotate: int | None = None

    def merge(
        self,
        resources: Dictionary | None = None,
        media_box: Rectangle | None = None,
        crop_box: Rectangle | None = None,
        rotate: int | None = None,
    ) -> "InheritedAttributes":
        """Return a copy overridden by the values a node declares itself."""
        return InheritedAttributes(
            resources=resources if resources is not None else self.resources,
            media_box=media_box if media_box is not None else self.media_box,
            crop_box=crop_box if crop_box is not None else self.crop_box,
            rotate=rotate if rotate is not None else self.rotate,
        )


@dataclass(frozen=True)
class PageNode:
    """A validated page leaf and the attributes in effect for it."""
    index: int
    ref: Reference
    attributes: InheritedAttributes = field(default_factory=InheritedAttributes)


def _wrap_mismatch(e: TypeMismatchError, dict_name: str, entry_name: str, expected: str) -> TypeMismatchError:
    return TypeMismatchError(dict_name, entry_name, expected, e.found)


# ---------------------------------------------------------------------------
# Resources and contents
# ---------------------------------------------------------------------------


RESOURCE_CATEGORIES: dict[str, PDFVersion] = {
    "ExtGState": PDFVersion.V10,
    "Font": PDFVersion.V10,
    "XObject": PDFVersion.V10,
    "Properties": PDFVersion.V10,
    "ColorSpace": PDFVersion.V10,
    "Pattern": PDFVersion.V10,
    "Shading": PDFVersion.V13,
}


def validate_resource_dict(xref: XRefTable, d: Dictionary) -> None:
    """Each resource category must be a dictionary; the resources themselves are not inspected."""
    for category, since in RESOURCE_CATEGORIES.items():
        validate_dict_entry(xref, d, "resourceDict", category, OPTIONAL, since)


def validate_resources_entry(xref: XRefTable, d: Dictionary, dict_name: str) -> Dictionary | None:
    res = validate_dict_entry(xref, d, dict_name, "Resources", OPTIONAL, PDFVersion.V10)
    if res is not None:
        validate_resource_dict(xref, res)
    return res


def validate_page_contents(xref: XRefTable, d: Dictionary) -> bool:
    """Validate /Contents; return True if the page has at least one content stream."""
    obj = d.get("Contents")
    if obj is None:
        return False

    obj = xref.dereference(obj)
    if obj is None:
        return False

    kind = kind_of(obj)
    if kind == ObjectKind.STREAM:
        return True

    if kind != ObjectKind.ARRAY:
        raise TypeMismatchError("pageDict", "Contents", "stream or array", kind.value)

    has_contents = False
    for v in obj:
        try:
            sd = xref.dereference_stream(v)
        except TypeMismatchError as e:
            raise _wrap_mismatch(e, "pageDict", "Contents", "content stream") from None
        if sd is None:
            continue
        has_contents = True

    return has_contents


def validate_page_resources(
    xref: XRefTable, d: Dictionary, inherited: InheritedAttributes, has_contents: bool
) -> Dictionary | None:
    res = validate_resources_entry(xref, d, "pageDict")
    if res is None and inherited.resources is None and has_contents:
        raise StructuralInconsistencyError(
            'pageDict: missing required entry "Resources" - should be inherited', "pageDict", "Resources"
        )
    return res


# ---------------------------------------------------------------------------
# Boundary boxes and rotation
# ---------------------------------------------------------------------------


def validate_page_entry_media_box(
    xref: XRefTable, d: Dictionary, required: bool, since_version: PDFVersion, dict_name: str = "pageDict"
) -> Rectangle | None:
    return validate_rectangle_entry(xref, d, dict_name, "MediaBox", required, since_version)


def validate_page_entry_crop_box(
    xref: XRefTable, d: Dictionary, required: bool, since_version: PDFVersion, dict_name: str = "pageDict"
) -> Rectangle | None:
    return validate_rectangle_entry(xref, d, dict_name, "CropBox", required, since_version)


def validate_page_entry_bleed_box(xref: XRefTable, d: Dictionary, required: bool, since_version: PDFVersion) -> None:
    validate_rectangle_entry(xref, d, "pageDict", "BleedBox", required, since_version)


def validate_page_entry_trim_box(xref: XRefTable, d: Dictionary, required: bool, since_version: PDFVersion) -> None:
    validate_rectangle_entry(xref, d, "pageDict", "TrimBox", required, since_version)


def validate_page_entry_art_box(xref: XRefTable, d: Dictionary, required: bool, since_version: PDFVersion) -> None:
    validate_rectangle_entry(xref, d, "pageDict", "ArtBox", required, since_version)


def validate_page_entry_rotate(
    xref: XRefTable, d: Dictionary, required: bool, since_version: PDFVersion, dict_name: str = "pageDict"
) -> int | None:
    return validate_integer_entry(xref, d, dict_name, "Rotate", required, since_version, validate_rotate)


def validate_box_style_dict_entry(
    xref: XRefTable, d: Dictionary, dict_name: str, entry_name: str, required: bool, since_version: PDFVersion
) -> Dictionary | None:
    bs = validate_dict_entry(xref, d, dict_name, entry_name, required, since_version)
    if bs is None:
        return None

    dict_name = "boxStyleDict"

    # C: RGB colour of the guidelines
    validate_number_array_entry(xref, bs, dict_name, "C", OPTIONAL, since_version, lambda a: len(a) == 3)

    # W: guideline width
    validate_number_entry(xref, bs, dict_name, "W", OPTIONAL, since_version, lambda f: f >= 0)

    # S: solid or dashed
    validate_name_entry(xref, bs, dict_name, "S", OPTIONAL, since_version, validate_guideline_style)

    # D: dash array
    validate_integer_array_entry(xref, bs, dict_name, "D", OPTIONAL, since_version)

    return bs


def validate_page_box_color_info(xref: XRefTable, d: Dictionary, required: bool, since_version: PDFVersion) -> None:
    # see 14.11.2.2
    bci = validate_dict_entry(xref, d, "pageDict", "BoxColorInfo", required, since_version)
    if bci is None:
        return

    for box in ("CropBox", "BleedBox", "TrimBox", "ArtBox"):
        validate_box_style_dict_entry(xref, bci, "boxColorInfoDict", box, OPTIONAL, since_version)


# ---------------------------------------------------------------------------
# Group, thumbnail, beads, metadata
# ---------------------------------------------------------------------------


def validate_group_attributes_dict(xref: XRefTable, d: Dictionary) -> None:
    dict_name = "groupAttributesDict"
    validate_name_entry(xref, d, dict_name, "Type", OPTIONAL, PDFVersion.V10, lambda s: s == "Group")
    validate_name_entry(xref, d, dict_name, "S", REQUIRED, PDFVersion.V10, lambda s: s == "Transparency")
    validate_boolean_entry(xref, d, dict_name, "I", OPTIONAL, PDFVersion.V10)
    validate_boolean_entry(xref, d, dict_name, "K", OPTIONAL, PDFVersion.V10)


def validate_page_entry_group(xref: XRefTable, d: Dictionary, required: bool, since_version: PDFVersion) -> None:
    g = validate_dict_entry(xref, d, "pageDict", "Group", required, since_version)
    if g is not None:
        validate_group_attributes_dict(xref, g)


def validate_thumbnail_image_dict(xref: XRefTable, d: Dictionary) -> None:
    """Thumbnails are image XObjects (§12.3.4)."""
    dict_name = "thumbImageDict"
    validate_name_entry(xref, d, dict_name, "Type", OPTIONAL, PDFVersion.V10, lambda s: s == "XObject")
    validate_name_entry(xref, d, dict_name, "Subtype", OPTIONAL, PDFVersion.V10, lambda s: s == "Image")
    validate_integer_entry(xref, d, dict_name, "Width", REQUIRED, PDFVersion.V10, lambda i: i > 0)
    validate_integer_entry(xref, d, dict_name, "Height", REQUIRED, PDFVersion.V10, lambda i: i > 0)
    validate_integer_entry(
        xref, d, dict_name, "BitsPerComponent", OPTIONAL, PDFVersion.V10, lambda i: i in (1, 2, 4, 8, 16)
    )


def validate_page_entry_thumb(xref: XRefTable, d: Dictionary, required: bool, since_version: PDFVersion) -> None:
    sd = validate_stream_dict_entry(xref, d, "pageDict", "Thumb", required, since_version)
    if sd is not None:
        validate_thumbnail_image_dict(xref, sd.dict)


def validate_page_entry_b(xref: XRefTable, d: Dictionary, required: bool, since_version: PDFVersion) -> None:
    # Only meaningful together with /Threads in the catalog.
    validate_ind_ref_array_entry(xref, d, "pageDict", "B", required, since_version)


def validate_page_entry_dur(xref: XRefTable, d: Dictionary, required: bool, since_version: PDFVersion) -> None:
    validate_number_entry(xref, d, "pageDict", "Dur", required, since_version)


def validate_page_entry_metadata(xref: XRefTable, d: Dictionary, required: bool, since_version: PDFVersion) -> None:
    sd = validate_stream_dict_entry(xref, d, "pageDict", "Metadata", required, since_version)
    if sd is None:
        return
    dict_name = "metadataDict"
    validate_name_entry(xref, sd.dict, dict_name, "Type", REQUIRED, since_version, lambda s: s == "Metadata")
    validate_name_entry(xref, sd.dict, dict_name, "Subtype", REQUIRED, since_version, lambda s: s == "XML")


# ---------------------------------------------------------------------------
# Transitions (§12.4.4.1)
# ---------------------------------------------------------------------------


def validate_transition_dict_entry_di(xref: XRefTable, d: Dictionary, dict_name: str) -> None:
    obj = d.get("Di")
    if obj is not None:
        obj = xref.dereference(obj)
    if obj is None:
        return

    kind = kind_of(obj)
    if kind == ObjectKind.INTEGER:
        if not validate_di(obj):
            raise ConstraintViolationError(dict_name, "Di", obj)
    elif kind == ObjectKind.NAME:
        if obj.value != "None":
            raise ConstraintViolationError(dict_name, "Di", obj.value)
    else:
        raise TypeMismatchError(dict_name, "Di", "integer or name", kind.value)


def validate_transition_dict(xref: XRefTable, d: Dictionary) -> None:
    logger.debug("validateTransitionDict begin")

    dict_name = "transitionDict"

    validate_style = validate_transition_style
    if xref.version >= PDFVersion.V15:
        validate_style = validate_transition_style_v15
    style = validate_name_entry(xref, d, dict_name, "S", OPTIONAL, PDFVersion.V10, validate_style)

    # D: duration
    validate_number_entry(xref, d, dict_name, "D", OPTIONAL, PDFVersion.V10, lambda f: f > 0)

    # Dm: Split and Blinds only
    validate_name_entry(
        xref, d, dict_name, "Dm", OPTIONAL, PDFVersion.V10,
        lambda s: validate_transition_dimension(s) and style in ("Split", "Blinds"),
    )

    # M: Split, Box and Fly only
    validate_name_entry(
        xref, d, dict_name, "M", OPTIONAL, PDFVersion.V10,
        lambda s: validate_transition_direction_of_motion(s) and style in ("Split", "Box", "Fly"),
    )

    validate_transition_dict_entry_di(xref, d, dict_name)

    # SS, B: Fly only
    validate_number_entry(xref, d, dict_name, "SS", OPTIONAL, PDFVersion.V15, lambda f: style == "Fly")
    validate_boolean_entry(xref, d, dict_name, "B", OPTIONAL, PDFVersion.V15, lambda b: style == "Fly")

    logger.debug("validateTransitionDict end")


def validate_page_entry_trans(xref: XRefTable, d: Dictionary, required: bool, since_version: PDFVersion) -> None:
    t = validate_dict_entry(xref, d, "pageDict", "Trans", required, since_version)
    if t is not None:
        validate_transition_dict(xref, t)


# ---------------------------------------------------------------------------
# Simple page entries
# ---------------------------------------------------------------------------


def validate_page_entry_struct_parents(xref: XRefTable, d: Dictionary, required: bool, since_version: PDFVersion) -> None:
    validate_integer_entry(xref, d, "pageDict", "StructParents", required, since_version)


def validate_page_entry_id(xref: XRefTable, d: Dictionary, required: bool, since_version: PDFVersion) -> None:
    validate_string_entry(xref, d, "pageDict", "ID", required, since_version)


def validate_page_entry_pz(xref: XRefTable, d: Dictionary, required: bool, since_version: PDFVersion) -> None:
    # Preferred zoom factor
    validate_number_entry(xref, d, "pageDict", "PZ", required, since_version)


def validate_page_entry_tabs(xref: XRefTable, d: Dictionary, required: bool, since_version: PDFVersion) -> None:
    # W (widget order) is widely written before 2.0; A arrived with 2.0.
    allowed = {"R", "C", "S", "W"}
    if xref.version >= PDFVersion.V20 or xref.mode == ValidationMode.RELAXED:
        allowed.add("A")
    validate_name_entry(xref, d, "pageDict", "Tabs", required, since_version, lambda s: s in allowed)


def validate_page_entry_template_instantiated(
    xref: XRefTable, d: Dictionary, required: bool, since_version: PDFVersion
) -> None:
    # see 12.7.6
    validate_name_entry(xref, d, "pageDict", "TemplateInstantiated", required, since_version)


def validate_page_entry_pres_steps(xref: XRefTable, d: Dictionary, required: bool, since_version: PDFVersion) -> None:
    # see 12.4.4.2
    ps = validate_dict_entry(xref, d, "pageDict", "PresSteps", required, since_version)
    if ps is not None:
        raise UnsupportedFeatureError("pageDict: presentation steps are not supported", "pageDict", "PresSteps")


def validate_page_entry_user_unit(xref: XRefTable, d: Dictionary, required: bool, since_version: PDFVersion) -> None:
    validate_number_entry(xref, d, "pageDict", "UserUnit", required, since_version, lambda f: f > 0)


# ---------------------------------------------------------------------------
# Separation info (§14.11.4)
# ---------------------------------------------------------------------------


def validate_separation_color_space_array(arr: Array) -> None:
    family = arr[0] if arr else None
    name = family.value if kind_of(family) == ObjectKind.NAME else None
    if name not in ("Separation", "DeviceN"):
        raise ConstraintViolationError("separationDict", "ColorSpace", name)
    if len(arr) not in ((4,) if name == "Separation" else (4, 5)):
        raise MalformedValueError(
            f"separationDict entry=ColorSpace: {name} color space array has length {len(arr)}",
            "separationDict",
            "ColorSpace",
        )


def validate_page_entry_separation_info(xref: XRefTable, d: Dictionary, required: bool, since_version: PDFVersion) -> None:
    si = validate_dict_entry(xref, d, "pageDict", "SeparationInfo", required, since_version)
    if si is None:
        return

    dict_name = "separationDict"

    validate_ind_ref_array_entry(xref, si, dict_name, "Pages", REQUIRED, since_version)
    validate_name_or_string_entry(xref, si, dict_name, "DeviceColorant", required, since_version)

    arr = validate_array_entry(xref, si, dict_name, "ColorSpace", OPTIONAL, since_version)
    if arr is not None:
        validate_separation_color_space_array(arr)


# ---------------------------------------------------------------------------
# Viewports and measurement (§12.9)
# ---------------------------------------------------------------------------


def validate_number_format_dict(xref: XRefTable, d: Dictionary, since_version: PDFVersion) -> None:
    dict_name = "numberFormatDict"

    validate_name_entry(xref, d, dict_name, "Type", OPTIONAL, since_version, lambda s: s == "NumberFormat")
    validate_string_entry(xref, d, dict_name, "U", REQUIRED, since_version)
    validate_number_entry(xref, d, dict_name, "C", REQUIRED, since_version)
    validate_name_entry(xref, d, dict_name, "F", OPTIONAL, since_version, lambda s: s in ("D", "F", "R", "T"))
    validate_integer_entry(xref, d, dict_name, "D", OPTIONAL, since_version)
    validate_boolean_entry(xref, d, dict_name, "FD", OPTIONAL, since_version)
    validate_string_entry(xref, d, dict_name, "RT", OPTIONAL, since_version)
    validate_string_entry(xref, d, dict_name, "RD", OPTIONAL, since_version)
    validate_string_entry(xref, d, dict_name, "PS", OPTIONAL, since_version)
    validate_string_entry(xref, d, dict_name, "SS", OPTIONAL, since_version)
    validate_name_entry(xref, d, dict_name, "O", OPTIONAL, since_version, lambda s: s in ("S", "P"))


def validate_number_format_array_entry(
    xref: XRefTable, d: Dictionary, dict_name: str, entry_name: str, required: bool, since_version: PDFVersion
) -> None:
    arr = validate_array_entry(xref, d, dict_name, entry_name, required, since_version)
    if arr is None:
        return

    for v in arr:
        try:
            nf = xref.dereference_dict(v)
        except TypeMismatchError as e:
            raise _wrap_mismatch(e, dict_name, entry_name, "number format dictionary") from None
        if nf is None:
            continue
        validate_number_format_dict(xref, nf, since_version)


def validate_measure_dict(xref: XRefTable, d: Dictionary, since_version: PDFVersion) -> None:
    dict_name = "measureDict"

    validate_name_entry(xref, d, dict_name, "Type", OPTIONAL, since_version, lambda s: s == "Measure")
    validate_name_entry(xref, d, dict_name, "Subtype", OPTIONAL, since_version, lambda s: s == "RL")

    # R: scale ratio
    validate_string_entry(xref, d, dict_name, "R", REQUIRED, since_version)

    # X, D, A required; Y, T, S optional
    for entry_name, required in (("X", REQUIRED), ("Y", OPTIONAL), ("D", REQUIRED),
                                 ("A", REQUIRED), ("T", OPTIONAL), ("S", OPTIONAL)):
        validate_number_format_array_entry(xref, d, dict_name, entry_name, required, since_version)

    # O: origin of the measurement coordinate system
    validate_number_array_entry(xref, d, dict_name, "O", OPTIONAL, since_version, lambda a: len(a) == 2)

    validate_number_entry(xref, d, dict_name, "CYX", OPTIONAL, since_version)


def validate_viewport_dict(xref: XRefTable, d: Dictionary, since_version: PDFVersion) -> None:
    dict_name = "viewportDict"

    validate_name_entry(xref, d, dict_name, "Type", OPTIONAL, since_version, lambda s: s == "Viewport")
    validate_rectangle_entry(xref, d, dict_name, "BBox", REQUIRED, since_version)
    validate_string_entry(xref, d, dict_name, "Name", OPTIONAL, since_version)

    m = validate_dict_entry(xref, d, dict_name, "Measure", OPTIONAL, since_version)
    if m is not None:
        validate_measure_dict(xref, m, since_version)


def validate_page_entry_vp(xref: XRefTable, d: Dictionary, required: bool, since_version: PDFVersion) -> None:
    # see table 260
    arr = validate_array_entry(xref, d, "pageDict", "VP", required, since_version)
    if arr is None:
        return

    for v in arr:
        try:
            vp = xref.dereference_dict(v)
        except TypeMismatchError as e:
            raise _wrap_mismatch(e, "pageDict", "VP", "viewport dictionary") from None
        if vp is None:
            continue
        validate_viewport_dict(xref, vp, since_version)


# ---------------------------------------------------------------------------
# Annotations, actions, page-piece dictionaries
# ---------------------------------------------------------------------------


def validate_page_entry_annots(xref: XRefTable, d: Dictionary, required: bool, since_version: PDFVersion) -> None:
    """
    Only file attachment annotations are inspected here, for their /FS file
    specification; other annotation types are left to their own validators.
    """
    arr = validate_array_entry(xref, d, "pageDict", "Annots", required, since_version)
    if arr is None:
        return

    for v in arr:
        try:
            annot = xref.dereference_dict(v)
        except TypeMismatchError as e:
            raise _wrap_mismatch(e, "pageDict", "Annots", "annotation dictionary") from None
        if annot is None:
            continue
        if annot.subtype_name() == "FileAttachment":
            validate_file_spec_entry(xref, annot, "fileAttachmentAnnotDict", "FS", REQUIRED, PDFVersion.V13)


def validate_action_dict(xref: XRefTable, d: Dictionary) -> None:
    dict_name = "actionDict"
    validate_name_entry(xref, d, dict_name, "Type", OPTIONAL, PDFVersion.V10, lambda s: s == "Action")
    validate_name_entry(xref, d, dict_name, "S", REQUIRED, PDFVersion.V10)


def validate_page_additional_actions(xref: XRefTable, d: Dictionary, required: bool, since_version: PDFVersion) -> None:
    aa = validate_dict_entry(xref, d, "pageDict", "AA", required, since_version)
    if aa is None:
        return

    for k, v in aa.items():
        if k not in ("O", "C"):
            raise ConstraintViolationError("additionalActionsDict", k, k, f"additionalActionsDict: invalid key: {k}")
        try:
            action = xref.dereference_dict(v)
        except TypeMismatchError as e:
            raise _wrap_mismatch(e, "additionalActionsDict", k, "action dictionary") from None
        if action is not None:
            validate_action_dict(xref, action)


def validate_piece_info(xref: XRefTable, d: Dictionary, dict_name: str, required: bool, since_version: PDFVersion) -> bool:
    """Validate /PieceInfo (§14.5); return True if present."""
    pi = validate_dict_entry(xref, d, dict_name, "PieceInfo", required, since_version)
    if pi is None:
        return False

    for k, v in pi.items():
        try:
            data = xref.dereference_dict(v)
        except TypeMismatchError as e:
            raise _wrap_mismatch(e, "pieceInfoDict", k, "data dictionary") from None
        if data is None:
            continue
        validate_date_entry(xref, data, "pageInfoDataDict", "LastModified", REQUIRED, since_version)

    return True


# ---------------------------------------------------------------------------
# Page tree nodes
# ---------------------------------------------------------------------------


PageEntryValidator = Callable[[XRefTable, Dictionary, bool, PDFVersion], None]

PAGE_ENTRY_VALIDATORS: list[tuple[PageEntryValidator, bool, PDFVersion]] = [
    (validate_page_entry_bleed_box, OPTIONAL, PDFVersion.V13),
    (validate_page_entry_trim_box, OPTIONAL, PDFVersion.V13),
    (validate_page_entry_art_box, OPTIONAL, PDFVersion.V13),
    (validate_page_box_color_info, OPTIONAL, PDFVersion.V14),
    (validate_page_entry_group, OPTIONAL, PDFVersion.V14),
    (validate_page_entry_thumb, OPTIONAL, PDFVersion.V10),
    (validate_page_entry_b, OPTIONAL, PDFVersion.V11),
    (validate_page_entry_dur, OPTIONAL, PDFVersion.V11),
    (validate_page_entry_trans, OPTIONAL, PDFVersion.V11),
    (validate_page_entry_annots, OPTIONAL, PDFVersion.V10),
    (validate_page_entry_metadata, OPTIONAL, PDFVersion.V14),
    (validate_page_entry_struct_parents, OPTIONAL, PDFVersion.V10),
    (validate_page_entry_id, OPTIONAL, PDFVersion.V13),
    (validate_page_entry_pz, OPTIONAL, PDFVersion.V13),
    (validate_page_entry_separation_info, OPTIONAL, PDFVersion.V13),
    (validate_page_entry_tabs, OPTIONAL, PDFVersion.V15),
    (validate_page_entry_template_instantiated, OPTIONAL, PDFVersion.V15),
    (validate_page_entry_pres_steps, OPTIONAL, PDFVersion.V15),
    (validate_page_entry_user_unit, OPTIONAL, PDFVersion.V16),
    (validate_page_entry_vp, OPTIONAL, PDFVersion.V16),
]


def _validate_parent(d: Dictionary, dict_name: str, parent_ref: Reference) -> None:
    parent = d.get("Parent")
    if parent is None:
        raise StructuralInconsistencyError(f"{dict_name}: missing parent", dict_name, "Parent")
    if not isinstance(parent, Reference):
        raise StructuralInconsistencyError(
            f"{dict_name}: parent must be an indirect reference", dict_name, "Parent"
        )
    if parent != parent_ref:
        raise StructuralInconsistencyError(
            f"{dict_name}: parent {parent} does not match {parent_ref}", dict_name, "Parent"
        )


def validate_page_dict(
    xref: XRefTable,
    d: Dictionary,
    ref: Reference,
    parent_ref: Reference,
    inherited: InheritedAttributes,
    index: int,
) -> PageNode:
    logger.debug("validatePageDict begin: obj#%d", ref.object_number)

    _validate_parent(d, "pageDict", parent_ref)

    has_contents = validate_page_contents(xref, d)

    resources = validate_page_resources(xref, d, inherited, has_contents)

    media_box = validate_page_entry_media_box(xref, d, inherited.media_box is None, PDFVersion.V10)
    crop_box = validate_page_entry_crop_box(xref, d, OPTIONAL, PDFVersion.V10)
    rotate = validate_page_entry_rotate(xref, d, OPTIONAL, PDFVersion.V10)

    since = effective_min_version(PDFVersion.V13, xref.mode, relaxed=PDFVersion.V10)
    has_piece_info = validate_piece_info(xref, d, "pageDict", OPTIONAL, since)

    last_modified = validate_date_entry(xref, d, "pageDict", "LastModified", OPTIONAL, PDFVersion.V13)

    if has_piece_info and last_modified is None and xref.mode == ValidationMode.STRICT:
        raise StructuralInconsistencyError(
            'pageDict: missing "LastModified" (required by "PieceInfo")', "pageDict", "LastModified"
        )

    validate_page_additional_actions(xref, d, OPTIONAL, PDFVersion.V14)

    for validate, required, since_version in PAGE_ENTRY_VALIDATORS:
        validate(xref, d, required, since_version)

    logger.debug("validatePageDict end: obj#%d", ref.object_number)

    return PageNode(
        index=index,
        ref=ref,
        attributes=inherited.merge(resources=resources, media_box=media_box, crop_box=crop_box, rotate=rotate),
    )


def validate_pages_dict_general_entries(xref: XRefTable, d: Dictionary) -> InheritedAttributes:
    """Validate the inheritable entries a /Pages node declares itself."""
    return InheritedAttributes(
        resources=validate_resources_entry(xref, d, "pagesDict"),
        media_box=validate_page_entry_media_box(xref, d, OPTIONAL, PDFVersion.V10, "pagesDict"),
        crop_box=validate_page_entry_crop_box(xref, d, OPTIONAL, PDFVersion.V10, "pagesDict"),
        rotate=validate_page_entry_rotate(xref, d, OPTIONAL, PDFVersion.V10, "pagesDict"),
    )


def _page_node_type(d: Dictionary | None, ref: Reference) -> str:
    if d is None:
        raise StructuralInconsistencyError(f"pagesDict: kid {ref} is null", "pagesDict", "Kids")
    dict_type = d.type_name()
    if dict_type is None:
        raise StructuralInconsistencyError(f"pagesDict: kid {ref} has no type", "pagesDict", "Kids")
    return dict_type


def validate_pages_dict(
    xref: XRefTable,
    d: Dictionary,
    ref: Reference,
    parent_ref: Reference | None,
    inherited: InheritedAttributes,
    visited: set[tuple[int, int]],
    pages: list[PageNode],
) -> int:
    """
    Validate a /Pages node and its subtree, appending leaves to ``pages``.

    Returns the number of leaves found beneath the node.
    """
    logger.debug("validatePagesDict begin: obj#%d", ref.object_number)

    if parent_ref is not None:
        _validate_parent(d, "pagesDict", parent_ref)

    count = validate_integer_entry(xref, d, "pagesDict", "Count", REQUIRED, PDFVersion.V10, lambda i: i >= 0)

    inherited = inherited.merge(**vars(validate_pages_dict_general_entries(xref, d)))

    kids = validate_array_entry(xref, d, "pagesDict", "Kids", REQUIRED, PDFVersion.V10)
    if len(kids) == 0:
        raise MalformedValueError("pagesDict: empty \"Kids\"", "pagesDict", "Kids")

    leaves = 0
    for obj in kids:
        if obj is None:
            logger.debug("validatePagesDict: kid is null")
            continue

        if not isinstance(obj, Reference):
            raise StructuralInconsistencyError(
                "pagesDict: missing indirect reference for kid", "pagesDict", "Kids"
            )

        if obj.objgen in visited:
            raise StructuralInconsistencyError(
                f"pagesDict: page tree node {obj} reached twice", "pagesDict", "Kids"
            )
        visited.add(obj.objgen)

        try:
            kid = xref.dereference_dict(obj)
        except TypeMismatchError as e:
            raise _wrap_mismatch(e, "pagesDict", "Kids", "page tree node dictionary") from None

        dict_type = _page_node_type(kid, obj)

        if dict_type == "Pages":
            leaves += validate_pages_dict(xref, kid, obj, ref, inherited, visited, pages)
        elif dict_type == "Page":
            pages.append(validate_page_dict(xref, kid, obj, ref, inherited, len(pages)))
            leaves += 1
        else:
            raise StructuralInconsistencyError(
                f"pagesDict: unexpected dict type: {dict_type}", "pagesDict", "Kids"
            )

    if xref.config.check_page_count and leaves != count:
        raise StructuralInconsistencyError(
            f"pagesDict obj#{ref.object_number}: Count={count} but {leaves} page(s) found",
            "pagesDict",
            "Count",
        )

    logger.debug("validatePagesDict end: obj#%d", ref.object_number)

    return leaves


def validate_pages(xref: XRefTable, root: Dictionary) -> list[PageNode]:
    """Validate the page tree reachable from the catalog ``root``; return its leaves in order."""
    logger.debug("validatePages begin")

    obj = root.get("Pages")
    if obj is None:
        raise MissingRequiredEntryError("rootDict", "Pages")
    if not isinstance(obj, Reference):
        raise StructuralInconsistencyError(
            "rootDict: missing indirect obj for pages dict", "rootDict", "Pages"
        )

    try:
        root_node = xref.dereference_dict(obj)
    except TypeMismatchError as e:
        raise _wrap_mismatch(e, "rootDict", "Pages", "page tree node dictionary") from None
    if root_node is None:
        raise StructuralInconsistencyError("rootDict: cannot dereference pageNodeDict", "rootDict", "Pages")

    if root_node.type_name() != "Pages":
        raise StructuralInconsistencyError(
            f"rootDict: page tree root must be /Pages, got {root_node.type_name()}", "rootDict", "Pages"
        )

    # Recorded once, before the walk; the walk only reads it.
    count = validate_integer_entry(xref, root_node, "pagesDict", "Count", REQUIRED, PDFVersion.V10, lambda i: i >= 0)
    xref.record_page_count(count)

    pages: list[PageNode] = []
    validate_pages_dict(xref, root_node, obj, None, InheritedAttributes(), {obj.objgen}, pages)

    logger.debug("validatePages end: %d page(s)", len(pages))

    return pages
