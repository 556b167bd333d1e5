"""DragController - hit-testing and single-pointer drag of page annotations."""

from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Optional

from ..models.annotation import Annotation
from ..models.form_document import Page
from ..models.form_enums import DragState, PointerPhase
from ..models.geometry import Point

logger = logging.getLogger(__name__)


@dataclass
class DragSession:
    page_index: int
    annotation_id: int
    pointer_id: int
    last_point: Point


def hit_test(page: Page, point: Point) -> Optional[Annotation]:
    """Topmost annotation whose bounds contain *point* (page space)."""
    for annotation in reversed(page.annotations):
        if annotation.bounds.contains(point):
            return annotation
    return None


class DragController:
    """
    Explicit state machine: IDLE <-> DRAGGING.

    Points are page-space coordinates; display-to-page conversion happens in
    the viewer (see Viewport). The session refers to the annotation by id and
    looks it up on every move, so removing it mid-drag ends the drag.
    """

    def __init__(self) -> None:
        self._session: Optional[DragSession] = None

    @property
    def state(self) -> DragState:
        return DragState.DRAGGING if self._session else DragState.IDLE

    @property
    def session(self) -> Optional[DragSession]:
        return self._session

    def handle_event(self, phase: PointerPhase, page: Page, point: Point, *, pointer_id: int = 0) -> bool:
        """Feed one pointer event. Returns True if an annotation was moved."""
        if phase == PointerPhase.BEGIN:
            self._begin(page, point, pointer_id)
            return False
        if self._session is None or pointer_id != self._session.pointer_id:
            return False
        if phase == PointerPhase.MOVE:
            return self._move(page, point)
        # END / CANCEL
        self._session = None
        return False

    def cancel(self) -> None:
        self._session = None

    # ------------------------------------------------------------------ #
    def _begin(self, page: Page, point: Point, pointer_id: int) -> None:
        if self._session is not None:
            # second pointer while dragging
            return
        hit = hit_test(page, point)
        if hit is None:
            return
        self._session = DragSession(
            page_index=page.index,
            annotation_id=hit.annotation_id,
            pointer_id=pointer_id,
            last_point=point,
        )
        logger.debug(f"Drag start: annotation {hit.annotation_id} on page {page.index}")

    def _move(self, page: Page, point: Point) -> bool:
        session = self._session
        if page.index != session.page_index:
            # pointer wandered onto another page; deltas there are meaningless
            return False
        annotation = page.find(session.annotation_id)
        if annotation is None:
            logger.debug(f"Drag target {session.annotation_id} gone; session dropped")
            self._session = None
            return False
        delta = point - session.last_point
        annotation.bounds = annotation.bounds.translated(delta.x, delta.y)
        session.last_point = point
        return True
