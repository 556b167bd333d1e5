from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .geometry import Point, Rect


@dataclass(frozen=True)
class StrokeSample:
    """One raw pointer sample in input-canvas space (origin top-left)."""
    x: float
    y: float
    timestamp: Optional[float] = None

    @property
    def point(self) -> Point:
        return Point(self.x, self.y)


@dataclass(frozen=True)
class StrokeCapture:
    samples: Tuple[StrokeSample, ...] = ()

    def __len__(self) -> int:
        return len(self.samples)

    @property
    def points(self) -> List[Point]:
        return [s.point for s in self.samples]


@dataclass(frozen=True)
class Drawing:
    strokes: Tuple[StrokeCapture, ...] = field(default_factory=tuple)

    @classmethod
    def from_points(cls, strokes: List[List[Tuple[float, float]]]) -> "Drawing":
        """Convenience builder from plain (x, y) lists."""
        return cls(tuple(
            StrokeCapture(tuple(StrokeSample(float(x), float(y)) for x, y in stroke))
            for stroke in strokes
        ))

    @property
    def is_empty(self) -> bool:
        return not any(len(s) for s in self.strokes)

    @property
    def bounds(self) -> Optional[Rect]:
        return Rect.bounding(p for s in self.strokes for p in s.points)
