from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, Optional


@dataclass(frozen=True)
class Point:
    x: float
    y: float

    def __sub__(self, other: "Point") -> "Point":
        return Point(self.x - other.x, self.y - other.y)

    def __add__(self, other: "Point") -> "Point":
        return Point(self.x + other.x, self.y + other.y)


@dataclass(frozen=True)
class Rect:
    """
    Axis-aligned rectangle (x, y, width, height).

    In page space the origin is bottom-left (PDF convention), in input-canvas
    space it is top-left; the rectangle itself does not care.
    """
    x: float
    y: float
    width: float
    height: float

    @property
    def min_x(self) -> float:
        return self.x

    @property
    def min_y(self) -> float:
        return self.y

    @property
    def max_x(self) -> float:
        return self.x + self.width

    @property
    def max_y(self) -> float:
        return self.y + self.height

    @property
    def mid_x(self) -> float:
        return self.x + self.width / 2.0

    @property
    def mid_y(self) -> float:
        return self.y + self.height / 2.0

    def contains(self, p: Point) -> bool:
        """Closed-interval containment (edges count as inside)."""
        return self.min_x <= p.x <= self.max_x and self.min_y <= p.y <= self.max_y

    def translated(self, dx: float, dy: float) -> "Rect":
        return Rect(self.x + dx, self.y + dy, self.width, self.height)

    def as_pdf_array(self) -> tuple[float, float, float, float]:
        """[llx, lly, urx, ury] as used by /Rect."""
        return (self.min_x, self.min_y, self.max_x, self.max_y)

    @classmethod
    def from_corners(cls, x0: float, y0: float, x1: float, y1: float) -> "Rect":
        return cls(min(x0, x1), min(y0, y1), abs(x1 - x0), abs(y1 - y0))

    @classmethod
    def bounding(cls, points: Iterable[Point]) -> Optional["Rect"]:
        """Union bounding box of *points*; None if there are none."""
        xs: list[float] = []
        ys: list[float] = []
        for p in points:
            xs.append(p.x)
            ys.append(p.y)
        if not xs:
            return None
        return cls.from_corners(min(xs), min(ys), max(xs), max(ys))
