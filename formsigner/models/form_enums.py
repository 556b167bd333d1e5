# formsigner/models/form_enums.py
from __future__ import annotations
from enum import Enum


class AnnotationKind(str, Enum):
    """Annotation variants the editor distinguishes."""
    BUTTON = "button"
    INK = "ink"
    OTHER = "other"   # any other /Subtype, passed through on export


class SegmentKind(str, Enum):
    MOVE_TO = "move_to"
    LINE_TO = "line_to"


class PointerPhase(str, Enum):
    BEGIN = "begin"
    MOVE = "move"
    END = "end"
    CANCEL = "cancel"


class DragState(str, Enum):
    IDLE = "idle"
    DRAGGING = "dragging"


class LoadState(str, Enum):
    EMPTY = "empty"
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"
