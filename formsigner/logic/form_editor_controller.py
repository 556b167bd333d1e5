"""FormEditorController - orchestrates load, sign, drag and export of one form."""

from __future__ import annotations
import logging
import threading
from typing import Callable, Optional

from ..config.config_service import AppConfig
from ..exceptions.errors import (
    EmptyDrawingError,
    FormSignerError,
    InvalidTargetRectError,
    NetworkFailureError,
    UnparseableDocumentError,
)
from ..models.annotation import InkAnnotation
from ..models.drawing import Drawing
from ..models.form_document import FormDocument, Page
from ..models.form_enums import LoadState, PointerPhase
from ..models.geometry import Point
from .drag_controller import DragController
from .export_service import ExportService
from .form_loader import FormLoader
from .pdf_codec import serialize_document
from .ink_transform import build_ink_annotation, default_signature_rect, hex_to_rgb

logger = logging.getLogger(__name__)

Dispatch = Callable[[Callable[[], None]], None]


def _run_inline(fn: Callable[[], None]) -> None:
    fn()


class FormEditorController:
    """
    Explicit view state for the form editor.

    All document mutation runs on the caller's (UI) thread. `load_pdf_async`
    fetches on a worker thread and hands the bytes back through `dispatch`
    (the GUI passes `lambda fn: widget.after(0, fn)`); results of superseded
    loads are dropped.
    """

    def __init__(
        self,
        *,
        config: AppConfig,
        loader: Optional[FormLoader] = None,
        exporter: Optional[ExportService] = None,
        dispatch: Dispatch = _run_inline,
        on_change: Optional[Callable[[], None]] = None,
    ) -> None:
        self._cfg = config
        self._loader = loader or FormLoader(loader_cfg=config.loader, sanitizer_cfg=config.sanitizer)
        self._exporter = exporter or ExportService(config.export)
        self._dispatch = dispatch
        self._on_change = on_change
        self._generation = 0

        self.document: Optional[FormDocument] = None
        self.state: LoadState = LoadState.EMPTY
        self.last_error: Optional[str] = None
        self.current_page_index: int = 0
        self.drag = DragController()

    # ------------------------------------------------------------------ #
    def _changed(self) -> None:
        if self._on_change:
            self._on_change()

    def _fail(self, message: str) -> None:
        self.last_error = message
        self._changed()

    @property
    def current_page(self) -> Optional[Page]:
        if self.document is None or not self.document.pages:
            return None
        idx = max(0, min(self.current_page_index, self.document.page_count - 1))
        return self.document.page(idx)

    def set_current_page(self, index: int) -> None:
        if self.document is None:
            return
        self.current_page_index = max(0, min(index, self.document.page_count - 1))
        self.drag.cancel()
        self._changed()

    # ---------- loading ------------------------------------------------------
    def _begin_load(self) -> int:
        self._generation += 1
        self.drag.cancel()
        self.state = LoadState.LOADING
        self.last_error = None
        self._changed()
        return self._generation

    def _finish_load(self, generation: int, raw: Optional[bytes], error: Optional[Exception]) -> None:
        if generation != self._generation:
            logger.info(f"Discarding stale load result (generation {generation})")
            return
        if error is None and raw is not None:
            try:
                document = self._loader.prepare(raw)
            except UnparseableDocumentError as ex:
                error = ex
            else:
                self.document = document
                self.current_page_index = 0
                self.state = LoadState.READY
                logger.info(f"Form loaded: {document.page_count} page(s)")
                self._changed()
                return
        logger.error(f"Failed to load PDF: {error}")
        self.state = LoadState.ERROR
        self._fail(str(error))

    def load_pdf(self, url: str) -> bool:
        generation = self._begin_load()
        try:
            raw = self._loader.fetch(url)
        except NetworkFailureError as ex:
            self._finish_load(generation, None, ex)
        else:
            self._finish_load(generation, raw, None)
        return self.state == LoadState.READY

    def load_pdf_async(self, url: str) -> threading.Thread:
        generation = self._begin_load()

        def worker() -> None:
            try:
                raw = self._loader.fetch(url)
            except NetworkFailureError as ex:
                self._dispatch(lambda err=ex: self._finish_load(generation, None, err))
                return
            self._dispatch(lambda: self._finish_load(generation, raw, None))

        t = threading.Thread(target=worker, daemon=True)
        t.start()
        return t

    def load_bytes(self, raw: bytes) -> bool:
        """Load an already fetched form (local file, tests)."""
        generation = self._begin_load()
        self._finish_load(generation, raw, None)
        return self.state == LoadState.READY

    # ---------- signing ------------------------------------------------------
    def add_signature(self, drawing: Drawing) -> Optional[InkAnnotation]:
        """Place *drawing* on the current page. No-op (None) for an empty drawing."""
        page = self.current_page
        if page is None:
            return None
        sig = self._cfg.signature
        target = default_signature_rect(page.media_box, sig)
        try:
            ink = build_ink_annotation(
                drawing, target, color_rgb=hex_to_rgb(sig.color), line_width=sig.line_width
            )
        except EmptyDrawingError:
            logger.info("Signature confirmed without strokes; nothing added")
            return None
        except InvalidTargetRectError as ex:
            logger.error(f"Cannot place signature: {ex}")
            self._fail(str(ex))
            return None
        page.add_annotation(ink)
        b = ink.bounds
        logger.info(
            f"Signature added on page {page.index + 1} at ({b.x:.1f}, {b.y:.1f}, {b.width:.1f}, {b.height:.1f}), "
            f"{len(drawing.strokes)} stroke(s)"
        )
        self._changed()
        return ink

    # ---------- dragging -----------------------------------------------------
    def handle_pointer(self, phase: PointerPhase, point: Point, *, pointer_id: int = 0) -> bool:
        page = self.current_page
        if page is None:
            return False
        moved = self.drag.handle_event(phase, page, point, pointer_id=pointer_id)
        if moved:
            self._changed()
        return moved

    # ---------- export -------------------------------------------------------
    @property
    def output_path(self):
        return self._exporter.output_path

    def save(self) -> bool:
        if self.document is None:
            return False
        ok = self._exporter.save(self.document)
        if not ok:
            self._fail("Failed to save PDF")
        return ok

    def print_document(self) -> bool:
        if self.document is None:
            return False
        ok = self._exporter.print_document(self.document)
        if not ok:
            self._fail("Failed to print PDF")
        return ok

    def document_bytes(self, *, flatten_ink: bool = False) -> bytes:
        if self.document is None:
            raise FormSignerError("No document loaded.")
        return serialize_document(self.document, flatten_ink=flatten_ink)
