from __future__ import annotations

import unittest

from formsigner.logic.capture_session import SignatureCaptureSession


class TestSignatureCaptureSession(unittest.TestCase):
    def setUp(self) -> None:
        self._t = 0.0

        def clock() -> float:
            self._t += 0.01
            return self._t

        self.session = SignatureCaptureSession(clock=clock)

    def test_strokes_accumulate_in_order(self) -> None:
        s = self.session
        s.begin_stroke(1, 2)
        s.add_point(3, 4)
        s.end_stroke()
        s.begin_stroke(10, 10)
        s.end_stroke()
        drawing = s.current_drawing()
        self.assertEqual(len(drawing.strokes), 2)
        self.assertEqual([(p.x, p.y) for p in drawing.strokes[0].points], [(1.0, 2.0), (3.0, 4.0)])
        stamps = [smp.timestamp for smp in drawing.strokes[0].samples]
        self.assertLess(stamps[0], stamps[1])

    def test_snapshot_is_not_live(self) -> None:
        s = self.session
        s.begin_stroke(0, 0)
        s.end_stroke()
        snap = s.current_drawing()
        s.begin_stroke(5, 5)
        s.end_stroke()
        self.assertEqual(len(snap.strokes), 1)
        s.reset()
        self.assertEqual(len(snap.strokes), 1)

    def test_open_stroke_is_included(self) -> None:
        self.session.begin_stroke(0, 0)
        self.session.add_point(1, 1)
        self.assertEqual(self.session.stroke_count, 1)
        self.assertEqual(len(self.session.current_drawing().strokes[0]), 2)

    def test_moves_without_stroke_are_ignored(self) -> None:
        self.session.add_point(1, 1)
        self.session.end_stroke()
        self.assertTrue(self.session.is_empty)
        self.assertTrue(self.session.current_drawing().is_empty)

    def test_cancel_and_reset(self) -> None:
        s = self.session
        s.begin_stroke(0, 0)
        s.cancel_stroke()
        self.assertTrue(s.is_empty)
        s.begin_stroke(0, 0)
        s.end_stroke()
        s.reset()
        self.assertTrue(s.is_empty)
        self.assertEqual(s.current_drawing().strokes, ())


if __name__ == "__main__":
    unittest.main()
