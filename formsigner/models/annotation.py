# formsigner/models/annotation.py
from __future__ import annotations
import itertools
from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union

from .form_enums import AnnotationKind, SegmentKind
from .geometry import Point, Rect

_ids = itertools.count(1)


def _next_id() -> int:
    return next(_ids)


@dataclass(frozen=True)
class PathSegment:
    kind: SegmentKind
    point: Point


@dataclass
class ButtonAnnotation:
    """Push button / checkbox / radio widget (/FT /Btn)."""
    field_name: str
    value: Optional[str] = None
    bounds: Rect = Rect(0.0, 0.0, 0.0, 0.0)
    source_index: Optional[int] = None
    annotation_id: int = field(default_factory=_next_id)
    kind: AnnotationKind = field(default=AnnotationKind.BUTTON, init=False)


@dataclass
class InkAnnotation:
    """
    Freehand vector overlay.

    `path` is stored relative to the lower-left corner of `bounds`, so the
    strokes move together with the rectangle when `bounds` is translated.
    """
    bounds: Rect
    path: List[PathSegment] = field(default_factory=list)
    color_rgb: Tuple[int, int, int] = (0, 0, 0)  # RGB 0–255
    line_width: float = 2.0
    source_index: Optional[int] = None
    annotation_id: int = field(default_factory=_next_id)
    kind: AnnotationKind = field(default=AnnotationKind.INK, init=False)

    def strokes(self) -> List[List[Point]]:
        """Path split at every MOVE_TO, in bounds-local coordinates."""
        out: List[List[Point]] = []
        for seg in self.path:
            if seg.kind == SegmentKind.MOVE_TO or not out:
                out.append([seg.point])
            else:
                out[-1].append(seg.point)
        return out

    def page_strokes(self) -> List[List[Point]]:
        """Same as strokes() but shifted into page space."""
        origin = Point(self.bounds.x, self.bounds.y)
        return [[p + origin for p in stroke] for stroke in self.strokes()]


@dataclass
class OtherAnnotation:
    """Annotation the editor does not interpret (text widgets, links, ...)."""
    subtype: str
    bounds: Rect
    source_index: Optional[int] = None
    annotation_id: int = field(default_factory=_next_id)
    kind: AnnotationKind = field(default=AnnotationKind.OTHER, init=False)


Annotation = Union[ButtonAnnotation, InkAnnotation, OtherAnnotation]
