from __future__ import annotations

import unittest

from formsigner.config.config_service import DEFAULT_DENYLIST
from formsigner.logic.sanitizer import remove_button_annotations
from formsigner.models.annotation import ButtonAnnotation, OtherAnnotation
from formsigner.models.form_document import FormDocument, Page
from formsigner.models.geometry import Rect


def _doc(*pages: list) -> FormDocument:
    return FormDocument(pages=[
        Page(index=i, media_box=Rect(0, 0, 612, 792), annotations=list(annots))
        for i, annots in enumerate(pages)
    ])


def _names(page: Page) -> list:
    return [getattr(a, "field_name", getattr(a, "subtype", None)) for a in page.annotations]


class TestSanitizer(unittest.TestCase):
    def test_removes_denylisted_button(self) -> None:
        doc = _doc([ButtonAnnotation("Name"), ButtonAnnotation("Print"), ButtonAnnotation("Agree")])
        removed = remove_button_annotations(doc, DEFAULT_DENYLIST)
        self.assertEqual([(i, a.field_name) for i, a in removed], [(0, "Print")])
        self.assertEqual(_names(doc.pages[0]), ["Name", "Agree"])

    def test_first_match_only_stops_for_whole_document(self) -> None:
        doc = _doc(
            [ButtonAnnotation("Reset Form"), ButtonAnnotation("Print")],
            [ButtonAnnotation("Signature Required")],
        )
        removed = remove_button_annotations(doc, DEFAULT_DENYLIST)
        self.assertEqual(len(removed), 1)
        self.assertEqual(_names(doc.pages[0]), ["Print"])
        self.assertEqual(_names(doc.pages[1]), ["Signature Required"])

    def test_remove_all_matches_when_requested(self) -> None:
        doc = _doc(
            [ButtonAnnotation("Reset Form"), ButtonAnnotation("Print"), ButtonAnnotation("Keep")],
            [ButtonAnnotation("Signature Required")],
        )
        removed = remove_button_annotations(doc, DEFAULT_DENYLIST, first_match_only=False)
        self.assertEqual(len(removed), 3)
        self.assertEqual(_names(doc.pages[0]), ["Keep"])
        self.assertEqual(doc.pages[1].annotations, [])

    def test_non_buttons_with_denylisted_name_untouched(self) -> None:
        doc = _doc([OtherAnnotation(subtype="Print", bounds=Rect(0, 0, 1, 1))])
        self.assertEqual(remove_button_annotations(doc, ["Print"]), [])
        self.assertEqual(len(doc.pages[0].annotations), 1)

    def test_idempotent(self) -> None:
        doc = _doc([ButtonAnnotation("Name"), ButtonAnnotation("Print")], [ButtonAnnotation("Other")])
        remove_button_annotations(doc, DEFAULT_DENYLIST)
        once = [_names(p) for p in doc.pages]
        self.assertEqual(remove_button_annotations(doc, DEFAULT_DENYLIST), [])
        self.assertEqual([_names(p) for p in doc.pages], once)


if __name__ == "__main__":
    unittest.main()
