"""In-memory PDF forms for the tests (built with pypdf, no files on disk)."""
from __future__ import annotations

from io import BytesIO
from typing import Iterable, List, Sequence, Tuple

from pypdf import PdfWriter
from pypdf.generic import (
    ArrayObject,
    DictionaryObject,
    FloatObject,
    NameObject,
    NumberObject,
    TextStringObject,
)

PAGE_W = 612.0
PAGE_H = 792.0

RectT = Tuple[float, float, float, float]  # llx, lly, urx, ury


def _rect(r: RectT) -> ArrayObject:
    return ArrayObject([FloatObject(v) for v in r])


def button(name: str, rect: RectT = (50, 50, 150, 80)) -> DictionaryObject:
    d = DictionaryObject()
    d.update({
        NameObject("/Type"): NameObject("/Annot"),
        NameObject("/Subtype"): NameObject("/Widget"),
        NameObject("/FT"): NameObject("/Btn"),
        NameObject("/Ff"): NumberObject(65536),
        NameObject("/T"): TextStringObject(name),
        NameObject("/Rect"): _rect(rect),
    })
    return d


def text_field(name: str, rect: RectT = (50, 300, 250, 320)) -> DictionaryObject:
    d = DictionaryObject()
    d.update({
        NameObject("/Type"): NameObject("/Annot"),
        NameObject("/Subtype"): NameObject("/Widget"),
        NameObject("/FT"): NameObject("/Tx"),
        NameObject("/T"): TextStringObject(name),
        NameObject("/Rect"): _rect(rect),
    })
    return d


def ink(rect: RectT, strokes: Sequence[Sequence[Tuple[float, float]]]) -> DictionaryObject:
    d = DictionaryObject()
    d.update({
        NameObject("/Type"): NameObject("/Annot"),
        NameObject("/Subtype"): NameObject("/Ink"),
        NameObject("/Rect"): _rect(rect),
        NameObject("/InkList"): ArrayObject([
            ArrayObject([FloatObject(v) for p in s for v in p]) for s in strokes
        ]),
    })
    return d


def build_pdf(pages: Iterable[List[DictionaryObject]], *, size: Tuple[float, float] = (PAGE_W, PAGE_H)) -> bytes:
    """
    One page per entry; widgets are also registered in /AcroForm /Fields.
    """
    writer = PdfWriter()
    fields = ArrayObject()
    for i, annots in enumerate(pages):
        writer.add_blank_page(width=size[0], height=size[1])
        for annot in annots:
            writer.add_annotation(page_number=i, annotation=annot)
            if annot.get("/Subtype") == "/Widget":
                fields.append(writer.pages[i]["/Annots"][-1])
    if fields:
        acro = DictionaryObject()
        acro.update({NameObject("/Fields"): fields})
        writer.root_object[NameObject("/AcroForm")] = acro
    buf = BytesIO()
    writer.write(buf)
    return buf.getvalue()
