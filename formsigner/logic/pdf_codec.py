"""
PDF <-> FormDocument.

Reading builds the page/annotation model from /Annots (button widgets, ink
annotations, everything else as pass-through). Writing clones the source PDF
with pypdf and rebuilds every page's /Annots in model order:

  • source annotations are kept by index, /Rect rewritten if they moved
  • new ink annotations become /Subtype /Ink dictionaries with /InkList
  • widgets dropped by the sanitizer are detached from /AcroForm /Fields
  • optionally ink is flattened into page content (reportlab overlay)
"""
from __future__ import annotations
import logging
from io import BytesIO
from typing import Any, Iterable, List, Optional, Set

from pypdf import PdfReader, PdfWriter
from pypdf.generic import (
    ArrayObject,
    DictionaryObject,
    FloatObject,
    IndirectObject,
    NameObject,
    NumberObject,
)
from reportlab.pdfgen import canvas

from ..exceptions.errors import UnparseableDocumentError
from ..models.annotation import Annotation, ButtonAnnotation, InkAnnotation, OtherAnnotation, PathSegment
from ..models.form_document import FormDocument, Page
from ..models.form_enums import AnnotationKind, SegmentKind
from ..models.geometry import Point, Rect

logger = logging.getLogger(__name__)

_MAX_PARENT_DEPTH = 32
_PRINT_FLAG = 4


def _resolve(obj: Any) -> Any:
    if isinstance(obj, IndirectObject):
        return obj.get_object()
    return obj


def _text(obj: Any) -> Optional[str]:
    obj = _resolve(obj)
    if obj is None:
        return None
    return str(obj)


def _inherited(annot: DictionaryObject, key: str) -> Any:
    """Look up a field attribute on the widget or up its /Parent chain."""
    node: Any = annot
    for _ in range(_MAX_PARENT_DEPTH):
        if not isinstance(node, DictionaryObject):
            return None
        if key in node:
            return _resolve(node[key])
        node = _resolve(node.get("/Parent"))
    return None


def _rect_of(annot: DictionaryObject) -> Rect:
    raw = _resolve(annot.get("/Rect"))
    if not isinstance(raw, ArrayObject) or len(raw) < 4:
        return Rect(0.0, 0.0, 0.0, 0.0)
    x0, y0, x1, y1 = (float(_resolve(v)) for v in raw[:4])
    return Rect.from_corners(x0, y0, x1, y1)


def _rect_array(r: Rect) -> ArrayObject:
    return ArrayObject([FloatObject(v) for v in r.as_pdf_array()])


# --------------------------------------------------------------------------- #
#  Reading
# --------------------------------------------------------------------------- #

def _parse_ink(annot: DictionaryObject, bounds: Rect, index: int) -> InkAnnotation:
    path: List[PathSegment] = []
    ink_list = _resolve(annot.get("/InkList"))
    if isinstance(ink_list, ArrayObject):
        for stroke in ink_list:
            coords = [float(_resolve(v)) for v in (_resolve(stroke) or [])]
            for i in range(0, len(coords) - 1, 2):
                local = Point(coords[i] - bounds.x, coords[i + 1] - bounds.y)
                kind = SegmentKind.MOVE_TO if i == 0 else SegmentKind.LINE_TO
                path.append(PathSegment(kind, local))

    color = (0, 0, 0)
    c = _resolve(annot.get("/C"))
    if isinstance(c, ArrayObject) and len(c) == 3:
        color = tuple(int(round(float(_resolve(v)) * 255)) for v in c)  # type: ignore[assignment]

    width = 1.0
    bs = _resolve(annot.get("/BS"))
    if isinstance(bs, DictionaryObject) and "/W" in bs:
        width = float(_resolve(bs["/W"]))

    return InkAnnotation(bounds=bounds, path=path, color_rgb=color, line_width=width, source_index=index)


def _parse_annotation(annot: DictionaryObject, index: int) -> Annotation:
    bounds = _rect_of(annot)
    subtype = _text(annot.get("/Subtype")) or ""
    if subtype == "/Widget" and _text(_inherited(annot, "/FT")) == "/Btn":
        value = _text(_inherited(annot, "/V")) or _text(annot.get("/AS"))
        return ButtonAnnotation(
            field_name=_text(_inherited(annot, "/T")) or "",
            value=value,
            bounds=bounds,
            source_index=index,
        )
    if subtype == "/Ink":
        return _parse_ink(annot, bounds, index)
    return OtherAnnotation(subtype=subtype.lstrip("/"), bounds=bounds, source_index=index)


def _parse_page(index: int, page) -> Page:
    mb = page.mediabox
    model = Page(
        index=index,
        media_box=Rect(float(mb.left), float(mb.bottom), float(mb.width), float(mb.height)),
    )
    annots = _resolve(page.get("/Annots"))
    if not isinstance(annots, ArrayObject):
        return model
    for i, entry in enumerate(annots):
        annot = _resolve(entry)
        if not isinstance(annot, DictionaryObject):
            continue
        model.add_annotation(_parse_annotation(annot, i))
    return model


def parse_document(raw: bytes) -> FormDocument:
    """Parse PDF bytes into a FormDocument. Raises UnparseableDocumentError."""
    if not raw:
        raise UnparseableDocumentError("Empty payload.")
    try:
        reader = PdfReader(BytesIO(raw))
        pages = [_parse_page(i, p) for i, p in enumerate(reader.pages)]
    except Exception as ex:
        # pypdf surfaces corrupt structure as arbitrary exception types
        raise UnparseableDocumentError(f"Not a readable PDF: {type(ex).__name__}: {ex}") from ex
    if not pages:
        raise UnparseableDocumentError("PDF has no pages.")
    return FormDocument(pages=pages, source_bytes=bytes(raw))


# --------------------------------------------------------------------------- #
#  Writing
# --------------------------------------------------------------------------- #

def _ink_list(ink: InkAnnotation) -> ArrayObject:
    return ArrayObject([
        ArrayObject([FloatObject(v) for p in stroke for v in (p.x, p.y)])
        for stroke in ink.page_strokes()
    ])


def _ink_dictionary(ink: InkAnnotation) -> DictionaryObject:
    r, g, b = ink.color_rgb
    border = DictionaryObject()
    border.update({
        NameObject("/W"): FloatObject(ink.line_width),
        NameObject("/S"): NameObject("/S"),
    })
    annot = DictionaryObject()
    annot.update({
        NameObject("/Type"): NameObject("/Annot"),
        NameObject("/Subtype"): NameObject("/Ink"),
        NameObject("/Rect"): _rect_array(ink.bounds),
        NameObject("/InkList"): _ink_list(ink),
        NameObject("/C"): ArrayObject([FloatObject(r / 255.0), FloatObject(g / 255.0), FloatObject(b / 255.0)]),
        NameObject("/BS"): border,
        NameObject("/F"): NumberObject(_PRINT_FLAG),
    })
    return annot


def _sync_source(annot: DictionaryObject, model: Annotation) -> None:
    if _rect_of(annot) == model.bounds:
        return
    annot[NameObject("/Rect")] = _rect_array(model.bounds)
    if model.kind == AnnotationKind.INK:
        annot[NameObject("/InkList")] = _ink_list(model)


def _detach_widget(entry: Any, removed: Set[int]) -> None:
    """Record a dropped widget (and an emptied parent field) for /Fields pruning."""
    if isinstance(entry, IndirectObject):
        removed.add(entry.idnum)
    widget = _resolve(entry)
    if not isinstance(widget, DictionaryObject):
        return
    parent_ref = widget.get("/Parent")
    parent = _resolve(parent_ref)
    if not isinstance(parent, DictionaryObject):
        return
    kids = _resolve(parent.get("/Kids"))
    if isinstance(kids, ArrayObject):
        kids[:] = [k for k in kids if not (isinstance(k, IndirectObject) and k.idnum in removed)]
        if not kids and isinstance(parent_ref, IndirectObject):
            removed.add(parent_ref.idnum)


def _prune_fields(writer: PdfWriter, removed: Set[int]) -> None:
    if not removed:
        return
    acro = _resolve(writer.root_object.get("/AcroForm"))
    if not isinstance(acro, DictionaryObject):
        return
    fields = _resolve(acro.get("/Fields"))
    if isinstance(fields, ArrayObject):
        fields[:] = [f for f in fields if not (isinstance(f, IndirectObject) and f.idnum in removed)]


def _make_ink_overlay(page_w: float, page_h: float, inks: Iterable[InkAnnotation]) -> bytes:
    """
    One-page PDF (same size as the target page) with the ink strokes drawn
    as plain vector paths in page coordinates.
    """
    buf = BytesIO()
    c = canvas.Canvas(buf, pagesize=(page_w, page_h))
    for ink in inks:
        r, g, b = ink.color_rgb
        c.setStrokeColorRGB(r / 255.0, g / 255.0, b / 255.0)
        c.setLineWidth(max(0.1, float(ink.line_width)))
        c.setLineCap(1)
        c.setLineJoin(1)
        for stroke in ink.page_strokes():
            path = c.beginPath()
            path.moveTo(stroke[0].x, stroke[0].y)
            # a single sample still shows up as a round dot
            for p in (stroke[1:] or stroke[:1]):
                path.lineTo(p.x, p.y)
            c.drawPath(path, stroke=1, fill=0)
    c.save()
    return buf.getvalue()


def serialize_document(document: FormDocument, *, flatten_ink: bool = False) -> bytes:
    """Write the model back onto a clone of the source PDF and return the bytes."""
    writer = PdfWriter(clone_from=PdfReader(BytesIO(document.source_bytes)))
    removed: Set[int] = set()

    for model in document.pages:
        wpage = writer.pages[model.index]
        original = _resolve(wpage.get("/Annots"))
        original = list(original) if isinstance(original, ArrayObject) else []

        kept = {a.source_index for a in model.annotations if a.source_index is not None}
        for idx, entry in enumerate(original):
            if idx not in kept:
                _detach_widget(entry, removed)

        flattened: List[InkAnnotation] = []
        rebuilt = ArrayObject()
        wpage[NameObject("/Annots")] = ArrayObject()
        for a in model.annotations:
            if flatten_ink and a.kind == AnnotationKind.INK:
                flattened.append(a)
                continue
            if a.source_index is not None and a.source_index < len(original):
                entry = original[a.source_index]
                annot = _resolve(entry)
                if isinstance(annot, DictionaryObject):
                    _sync_source(annot, a)
                rebuilt.append(entry)
            elif a.kind == AnnotationKind.INK:
                writer.add_annotation(page_number=model.index, annotation=_ink_dictionary(a))
                rebuilt.append(wpage["/Annots"][-1])
        wpage[NameObject("/Annots")] = rebuilt

        if flattened:
            overlay = _make_ink_overlay(model.media_box.max_x, model.media_box.max_y, flattened)
            wpage.merge_page(PdfReader(BytesIO(overlay)).pages[0])

    _prune_fields(writer, removed)

    buf = BytesIO()
    writer.write(buf)
    return buf.getvalue()
