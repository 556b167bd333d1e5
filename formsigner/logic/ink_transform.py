"""
Stroke capture -> ink annotation.

Maps a Drawing from input-canvas space (origin top-left, y down) into a
target rectangle in page space (origin bottom-left, y up):

  • uniform scale = min(sx, sy), extent guarded with max(extent, 1)
  • centered inside the target rectangle
  • y flipped against the drawing's bounding box

Path points are emitted relative to the target rectangle's lower-left
corner; the annotation's bounds are exactly the target rectangle.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import List, Tuple

from ..config.config_service import SignatureConfig
from ..exceptions.errors import EmptyDrawingError, InvalidTargetRectError
from ..models.annotation import InkAnnotation, PathSegment
from ..models.drawing import Drawing
from ..models.form_enums import SegmentKind
from ..models.geometry import Point, Rect


@dataclass(frozen=True)
class TransformParams:
    drawing_bounds: Rect
    scale: float
    offset_x: float
    offset_y: float

    def forward(self, p: Point) -> Point:
        nx = p.x - self.drawing_bounds.min_x
        ny = p.y - self.drawing_bounds.min_y
        flipped_y = self.drawing_bounds.height - ny
        return Point(self.offset_x + nx * self.scale, self.offset_y + flipped_y * self.scale)

    def inverse(self, local: Point) -> Point:
        nx = (local.x - self.offset_x) / self.scale
        flipped_y = (local.y - self.offset_y) / self.scale
        ny = self.drawing_bounds.height - flipped_y
        return Point(nx + self.drawing_bounds.min_x, ny + self.drawing_bounds.min_y)


def _check_target(target: Rect) -> None:
    if not (target.width > 0 and target.height > 0):
        raise InvalidTargetRectError(
            f"Target rectangle must have positive size, got {target.width}x{target.height}."
        )


def compute_params(drawing: Drawing, target: Rect) -> TransformParams:
    _check_target(target)
    db = drawing.bounds
    if db is None:
        raise EmptyDrawingError("Drawing contains no points.")

    sx = target.width / max(db.width, 1.0)
    sy = target.height / max(db.height, 1.0)
    scale = min(sx, sy)
    return TransformParams(
        drawing_bounds=db,
        scale=scale,
        offset_x=(target.width - db.width * scale) / 2.0,
        offset_y=(target.height - db.height * scale) / 2.0,
    )


def transform_drawing(drawing: Drawing, target: Rect) -> Tuple[List[PathSegment], TransformParams]:
    params = compute_params(drawing, target)
    path: List[PathSegment] = []
    for stroke in drawing.strokes:
        points = stroke.points
        if not points:
            continue
        path.append(PathSegment(SegmentKind.MOVE_TO, params.forward(points[0])))
        for p in points[1:]:
            path.append(PathSegment(SegmentKind.LINE_TO, params.forward(p)))
    return path, params


def build_ink_annotation(
    drawing: Drawing,
    target: Rect,
    *,
    color_rgb: Tuple[int, int, int] = (0, 0, 0),
    line_width: float = 2.0,
) -> InkAnnotation:
    path, _ = transform_drawing(drawing, target)
    return InkAnnotation(bounds=target, path=path, color_rgb=color_rgb, line_width=line_width)


def default_signature_rect(media_box: Rect, cfg: SignatureConfig) -> Rect:
    """Horizontally centered on the page, `bottom_offset` pt above its bottom edge."""
    return Rect(
        x=media_box.mid_x - cfg.target_width / 2.0,
        y=media_box.min_y + cfg.bottom_offset,
        width=float(cfg.target_width),
        height=float(cfg.target_height),
    )


def hex_to_rgb(hexstr: str) -> Tuple[int, int, int]:
    """
    Convert hex color (#RRGGBB or #RGB) into an RGB tuple.
    """
    s = (hexstr or "#000000").strip()
    if not s.startswith("#"):
        s = "#" + s
    if len(s) == 4:
        r = int(s[1] * 2, 16)
        g = int(s[2] * 2, 16)
        b = int(s[3] * 2, 16)
    else:
        r = int(s[1:3], 16)
        g = int(s[3:5], 16)
        b = int(s[5:7], 16)
    return (r, g, b)
