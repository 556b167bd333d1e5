from __future__ import annotations

import unittest

from formsigner.logic.drag_controller import DragController, hit_test
from formsigner.models.annotation import ButtonAnnotation, InkAnnotation, PathSegment
from formsigner.models.form_document import Page
from formsigner.models.form_enums import DragState, PointerPhase, SegmentKind
from formsigner.models.geometry import Point, Rect


class TestDragController(unittest.TestCase):
    def setUp(self) -> None:
        self.page = Page(index=0, media_box=Rect(0, 0, 612, 792))
        self.ink = InkAnnotation(bounds=Rect(10, 10, 50, 20))
        self.page.add_annotation(self.ink)
        self.ctrl = DragController()

    def test_drag_scenario(self) -> None:
        c = self.ctrl
        c.handle_event(PointerPhase.BEGIN, self.page, Point(20, 20))
        self.assertEqual(c.state, DragState.DRAGGING)
        self.assertEqual(c.session.annotation_id, self.ink.annotation_id)

        moved = c.handle_event(PointerPhase.MOVE, self.page, Point(25, 30))
        self.assertTrue(moved)
        self.assertEqual(self.ink.bounds, Rect(15, 20, 50, 20))

        c.handle_event(PointerPhase.END, self.page, Point(25, 30))
        self.assertEqual(c.state, DragState.IDLE)
        self.assertFalse(c.handle_event(PointerPhase.MOVE, self.page, Point(100, 100)))
        self.assertEqual(self.ink.bounds, Rect(15, 20, 50, 20))

    def test_deltas_accumulate(self) -> None:
        c = self.ctrl
        c.handle_event(PointerPhase.BEGIN, self.page, Point(20, 20))
        c.handle_event(PointerPhase.MOVE, self.page, Point(21, 20))
        c.handle_event(PointerPhase.MOVE, self.page, Point(23, 17))
        self.assertEqual(self.ink.bounds, Rect(13, 7, 50, 20))

    def test_miss_stays_idle(self) -> None:
        self.ctrl.handle_event(PointerPhase.BEGIN, self.page, Point(300, 300))
        self.assertEqual(self.ctrl.state, DragState.IDLE)
        self.assertFalse(self.ctrl.handle_event(PointerPhase.MOVE, self.page, Point(301, 301)))

    def test_topmost_wins(self) -> None:
        top = ButtonAnnotation(field_name="Over", bounds=Rect(0, 0, 100, 100))
        self.page.add_annotation(top)
        self.assertIs(hit_test(self.page, Point(20, 20)), top)
        self.ctrl.handle_event(PointerPhase.BEGIN, self.page, Point(20, 20))
        self.assertEqual(self.ctrl.session.annotation_id, top.annotation_id)

    def test_edges_count_as_hit(self) -> None:
        self.assertIs(hit_test(self.page, Point(60, 30)), self.ink)
        self.assertIsNone(hit_test(self.page, Point(60.01, 30)))

    def test_second_pointer_ignored(self) -> None:
        c = self.ctrl
        c.handle_event(PointerPhase.BEGIN, self.page, Point(20, 20), pointer_id=1)
        c.handle_event(PointerPhase.BEGIN, self.page, Point(500, 500), pointer_id=2)
        c.handle_event(PointerPhase.MOVE, self.page, Point(520, 520), pointer_id=2)
        c.handle_event(PointerPhase.END, self.page, Point(520, 520), pointer_id=2)
        self.assertEqual(c.state, DragState.DRAGGING)
        self.assertEqual(self.ink.bounds, Rect(10, 10, 50, 20))
        c.handle_event(PointerPhase.MOVE, self.page, Point(21, 21), pointer_id=1)
        self.assertEqual(self.ink.bounds, Rect(11, 11, 50, 20))

    def test_cancel_returns_to_idle(self) -> None:
        self.ctrl.handle_event(PointerPhase.BEGIN, self.page, Point(20, 20))
        self.ctrl.handle_event(PointerPhase.CANCEL, self.page, Point(20, 20))
        self.assertEqual(self.ctrl.state, DragState.IDLE)

    def test_removed_annotation_ends_drag(self) -> None:
        self.ctrl.handle_event(PointerPhase.BEGIN, self.page, Point(20, 20))
        self.page.remove_annotation(self.ink)
        self.assertFalse(self.ctrl.handle_event(PointerPhase.MOVE, self.page, Point(30, 30)))
        self.assertEqual(self.ctrl.state, DragState.IDLE)
        self.assertEqual(self.ink.bounds, Rect(10, 10, 50, 20))

    def test_move_on_other_page_is_ignored(self) -> None:
        other = Page(index=1, media_box=Rect(0, 0, 612, 792))
        self.ctrl.handle_event(PointerPhase.BEGIN, self.page, Point(20, 20))
        self.assertFalse(self.ctrl.handle_event(PointerPhase.MOVE, other, Point(40, 40)))
        self.assertEqual(self.ctrl.state, DragState.DRAGGING)
        self.assertEqual(self.ink.bounds, Rect(10, 10, 50, 20))

    def test_path_moves_with_bounds(self) -> None:
        self.ink.path = [PathSegment(SegmentKind.MOVE_TO, Point(1, 2))]
        self.ctrl.handle_event(PointerPhase.BEGIN, self.page, Point(20, 20))
        self.ctrl.handle_event(PointerPhase.MOVE, self.page, Point(30, 25))
        self.assertEqual(self.ink.page_strokes(), [[Point(21, 17)]])


if __name__ == "__main__":
    unittest.main()
