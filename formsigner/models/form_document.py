from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional

from .annotation import Annotation
from .geometry import Rect


@dataclass
class Page:
    index: int
    media_box: Rect
    annotations: List[Annotation] = field(default_factory=list)

    def add_annotation(self, annotation: Annotation) -> None:
        """Append on top of the z-order."""
        self.annotations.append(annotation)

    def remove_annotation(self, annotation: Annotation) -> bool:
        for i, a in enumerate(self.annotations):
            if a.annotation_id == annotation.annotation_id:
                del self.annotations[i]
                return True
        return False

    def find(self, annotation_id: int) -> Optional[Annotation]:
        for a in self.annotations:
            if a.annotation_id == annotation_id:
                return a
        return None


@dataclass
class FormDocument:
    """
    Parsed form: page/annotation model plus the original PDF bytes.

    The bytes are the base the writer clones on export; all edits live in
    the model until then.
    """
    pages: List[Page] = field(default_factory=list)
    source_bytes: bytes = b""

    @property
    def page_count(self) -> int:
        return len(self.pages)

    def page(self, index: int) -> Page:
        return self.pages[index]
