from __future__ import annotations
from dataclasses import dataclass

from ..models.geometry import Point, Rect


@dataclass
class Viewport:
    """
    Display <-> page mapping for one page shown at `zoom` with the page's
    top-left corner at `offset` (display pixels, y down).
    """
    page_box: Rect
    zoom: float = 1.0
    offset_x: float = 0.0
    offset_y: float = 0.0

    @classmethod
    def fit(cls, page_box: Rect, canvas_w: float, canvas_h: float) -> "Viewport":
        """Largest zoom that shows the whole page, centered on the canvas."""
        zoom = min(canvas_w / page_box.width, canvas_h / page_box.height)
        cw, ch = page_box.width * zoom, page_box.height * zoom
        return cls(page_box, zoom, (canvas_w - cw) / 2, (canvas_h - ch) / 2)

    def display_from_page(self, p: Point) -> Point:
        return Point(
            self.offset_x + (p.x - self.page_box.min_x) * self.zoom,
            self.offset_y + (self.page_box.max_y - p.y) * self.zoom,
        )

    def page_from_display(self, x: float, y: float) -> Point:
        return Point(
            self.page_box.min_x + (x - self.offset_x) / self.zoom,
            self.page_box.max_y - (y - self.offset_y) / self.zoom,
        )

    def display_rect(self, r: Rect) -> tuple[float, float, float, float]:
        """(x0, y0, x1, y1) display box of a page-space rectangle, top-left first."""
        top_left = self.display_from_page(Point(r.min_x, r.max_y))
        bottom_right = self.display_from_page(Point(r.max_x, r.min_y))
        return top_left.x, top_left.y, bottom_right.x, bottom_right.y
