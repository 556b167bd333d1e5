from __future__ import annotations
import time
from typing import List, Optional

from ..models.drawing import Drawing, StrokeCapture, StrokeSample


class SignatureCaptureSession:
    """
    Accumulates freehand strokes as raw pointer samples.

    Pointer-down opens a stroke, moves append to it, pointer-up closes it.
    No validation happens here; an empty drawing is the transform's concern.
    """

    def __init__(self, *, clock=time.monotonic) -> None:
        self._clock = clock
        self._strokes: List[List[StrokeSample]] = []
        self._current: Optional[List[StrokeSample]] = None

    def _sample(self, x: float, y: float) -> StrokeSample:
        return StrokeSample(float(x), float(y), self._clock())

    # Pointer handlers
    def begin_stroke(self, x: float, y: float) -> None:
        if self._current:
            self.end_stroke()
        self._current = [self._sample(x, y)]

    def add_point(self, x: float, y: float) -> None:
        if self._current is not None:
            self._current.append(self._sample(x, y))

    def end_stroke(self) -> None:
        if self._current:
            self._strokes.append(self._current)
        self._current = None

    def cancel_stroke(self) -> None:
        self._current = None

    # Actions
    def reset(self) -> None:
        self._strokes.clear()
        self._current = None

    @property
    def is_empty(self) -> bool:
        return not self._strokes and not self._current

    @property
    def stroke_count(self) -> int:
        return len(self._strokes) + (1 if self._current else 0)

    def current_drawing(self) -> Drawing:
        """Immutable snapshot including a stroke that is still being drawn."""
        strokes = list(self._strokes)
        if self._current:
            strokes.append(self._current)
        return Drawing(tuple(StrokeCapture(tuple(s)) for s in strokes))
