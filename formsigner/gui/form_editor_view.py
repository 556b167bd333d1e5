from __future__ import annotations
import tkinter as tk
from tkinter import ttk, messagebox
from typing import Optional

import pypdfium2 as pdfium
from PIL import ImageTk

from ..config.config_service import AppConfig
from ..logic.form_editor_controller import FormEditorController
from ..logic.viewport import Viewport
from ..models.drawing import Drawing
from ..models.form_enums import AnnotationKind, LoadState, PointerPhase
from .signature_capture_dialog import SignatureCaptureDialog


class FormEditorView(ttk.Frame):
    """
    Page preview with draggable annotations and a Sign / Save / Print toolbar.

      • page content rendered by pypdfium2 without annotations
      • annotations drawn on top from the model (ink as polylines, others as boxes)
      • pointer events converted to page space through a Viewport
    """

    CANVAS_MAX_W = 620
    CANVAS_MAX_H = 800

    def __init__(self, parent: tk.Misc, *, config: AppConfig) -> None:
        super().__init__(parent)
        self._cfg = config
        self.controller = FormEditorController(
            config=config,
            dispatch=lambda fn: self.after(0, fn),
            on_change=self._on_model_change,
        )
        self._pdf: Optional[pdfium.PdfDocument] = None
        self._rendered_doc = None
        self._bg_img_tk: Optional[ImageTk.PhotoImage] = None
        self._rendered_page: Optional[int] = None
        self._viewport: Optional[Viewport] = None
        self._page_var = tk.IntVar(value=1)

        # ---------- UI
        bar = ttk.Frame(self)
        bar.grid(row=0, column=0, sticky="ew", padx=10, pady=(10, 4))
        self.columnconfigure(0, weight=1)
        self.rowconfigure(1, weight=1)

        ttk.Label(bar, text="Page").pack(side="left")
        self._page_spin = ttk.Spinbox(bar, from_=1, to=1, textvariable=self._page_var, width=4,
                                      command=self._on_page_change)
        self._page_spin.pack(side="left", padx=(6, 12))
        self._status = ttk.Label(bar, text="")
        self._status.pack(side="left")
        ttk.Button(bar, text="Save", command=self._save).pack(side="right")
        ttk.Button(bar, text="Print", command=self._print).pack(side="right", padx=(0, 6))
        ttk.Button(bar, text="Sign", command=self._sign).pack(side="right", padx=(0, 6))

        self._canvas = tk.Canvas(
            self, width=self.CANVAS_MAX_W, height=self.CANVAS_MAX_H, bg="#f8f8f8",
            highlightthickness=1, highlightbackground="#888"
        )
        self._canvas.grid(row=1, column=0, padx=10, pady=(4, 10))
        self._canvas.bind("<ButtonPress-1>", lambda e: self._on_pointer(PointerPhase.BEGIN, e))
        self._canvas.bind("<B1-Motion>", lambda e: self._on_pointer(PointerPhase.MOVE, e))
        self._canvas.bind("<ButtonRelease-1>", lambda e: self._on_pointer(PointerPhase.END, e))

        self._on_model_change()

    # ---------------- Loading
    def load(self, url: str) -> None:
        self.controller.load_pdf_async(url)

    def load_bytes(self, raw: bytes) -> None:
        self.controller.load_bytes(raw)

    # ---------------- Render
    def _on_model_change(self) -> None:
        c = self.controller
        if c.state == LoadState.LOADING:
            self._status.config(text="Loading…")
        elif c.state == LoadState.ERROR:
            self._status.config(text=f"Error: {c.last_error}")
        elif c.last_error:
            self._status.config(text=c.last_error)
        else:
            self._status.config(text="")

        if c.document is None:
            self._canvas.delete("all")
            self._close_pdf()
            self._rendered_doc = None
            self._rendered_page = None
            return
        if self._rendered_doc is not c.document:
            self._close_pdf()
            self._pdf = pdfium.PdfDocument(c.document.source_bytes)
            self._rendered_doc = c.document
            self._rendered_page = None
            self._page_spin.config(to=c.document.page_count)
        self._refresh_canvas()

    def _close_pdf(self) -> None:
        if self._pdf is not None:
            self._pdf.close()
            self._pdf = None

    def destroy(self) -> None:
        self._close_pdf()
        super().destroy()

    def _refresh_canvas(self) -> None:
        page = self.controller.current_page
        if page is None:
            return
        if self._rendered_page != page.index or self._viewport is None:
            self._viewport = Viewport.fit(page.media_box, self.CANVAS_MAX_W, self.CANVAS_MAX_H)
            bm = self._pdf[page.index].render(scale=self._viewport.zoom, draw_annots=False)
            self._bg_img_tk = ImageTk.PhotoImage(bm.to_pil())
            self._rendered_page = page.index

        vp = self._viewport
        self._canvas.delete("all")
        self._canvas.create_image(vp.offset_x, vp.offset_y, image=self._bg_img_tk, anchor="nw")

        for a in page.annotations:
            if a.kind == AnnotationKind.INK:
                col = "#%02X%02X%02X" % a.color_rgb
                width = max(1, int(a.line_width * vp.zoom))
                for stroke in a.page_strokes():
                    coords = []
                    for p in stroke:
                        d = vp.display_from_page(p)
                        coords.extend((d.x, d.y))
                    if len(coords) == 2:
                        coords.extend((coords[0] + 1, coords[1] + 1))
                    self._canvas.create_line(*coords, fill=col, width=width, capstyle="round")
            else:
                x0, y0, x1, y1 = vp.display_rect(a.bounds)
                outline = "#0A84FF" if a.kind == AnnotationKind.BUTTON else "#999999"
                self._canvas.create_rectangle(x0, y0, x1, y1, outline=outline, dash=(3, 2))

    # ---------------- Events
    def _on_pointer(self, phase: PointerPhase, e) -> None:
        if self._viewport is None:
            return
        point = self._viewport.page_from_display(e.x, e.y)
        self.controller.handle_pointer(phase, point)

    def _on_page_change(self) -> None:
        try:
            idx = int(self._page_var.get()) - 1
        except (tk.TclError, ValueError):
            idx = 0
        self.controller.set_current_page(idx)

    # ---------------- Actions
    def _sign(self) -> None:
        if self.controller.current_page is None:
            return
        SignatureCaptureDialog(self, on_confirm=self._on_signature)

    def _on_signature(self, drawing: Drawing) -> None:
        self.controller.add_signature(drawing)

    def _save(self) -> None:
        if self.controller.save():
            messagebox.showinfo("Saved", f"Saved to {self.controller.output_path}", parent=self)
        else:
            messagebox.showerror("Error", "Failed to save PDF.", parent=self)

    def _print(self) -> None:
        if not self.controller.print_document():
            messagebox.showerror("Error", "Failed to print PDF.", parent=self)
