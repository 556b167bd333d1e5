# formsigner/gui/signature_capture_dialog.py
from __future__ import annotations
import tkinter as tk
from tkinter import ttk
from typing import Callable, Optional

from ..logic.capture_session import SignatureCaptureSession
from ..models.drawing import Drawing


class SignatureCaptureDialog(tk.Toplevel):
    """
    Freehand signature pad (Tk canvas with spline smoothing for display only).

    Raw samples go to a SignatureCaptureSession; "Confirm" hands a snapshot
    of the drawing to `on_confirm` and closes the sheet.
    """
    CANVAS_W = 600
    CANVAS_H = 300

    def __init__(self, parent: tk.Misc, *, on_confirm: Callable[[Drawing], None], stroke_width: int = 3) -> None:
        super().__init__(parent)
        self.title("Sign")
        self.transient(parent)
        self.grab_set()
        self.resizable(True, False)

        self._on_confirm = on_confirm
        self._session = SignatureCaptureSession()
        self._line: Optional[int] = None
        self._stroke_width = stroke_width

        self.columnconfigure(0, weight=1)

        # Canvas
        self.canvas = tk.Canvas(
            self, width=self.CANVAS_W, height=self.CANVAS_H, bg="white",
            highlightthickness=1, highlightbackground="#888"
        )
        self.canvas.grid(row=0, column=0, sticky="nsew", padx=10, pady=(10, 4))
        self.canvas.bind("<ButtonPress-1>", self._on_down)
        self.canvas.bind("<B1-Motion>", self._on_move)
        self.canvas.bind("<ButtonRelease-1>", self._on_up)

        # Footer
        btns = ttk.Frame(self)
        btns.grid(row=1, column=0, sticky="e", padx=10, pady=(4, 10))
        ttk.Button(btns, text="Clear", command=self._clear).pack(side="left")
        ttk.Button(btns, text="Cancel", command=self.destroy).pack(side="left", padx=(6, 0))
        ttk.Button(btns, text="Confirm", command=self._confirm).pack(side="left", padx=(6, 0))

    # Canvas handlers
    def _on_down(self, e):
        self._session.begin_stroke(e.x, e.y)
        self._points = [e.x, e.y]
        self._line = self.canvas.create_line(
            e.x, e.y, e.x + 1, e.y + 1,
            fill="black",
            width=self._stroke_width,
            capstyle="round",
            smooth=True,
            splinesteps=24
        )

    def _on_move(self, e):
        if self._line is None:
            return
        self._session.add_point(e.x, e.y)
        self._points.extend((e.x, e.y))
        self.canvas.coords(self._line, *self._points)

    def _on_up(self, e):
        self._session.end_stroke()
        self._line = None

    # Actions
    def _clear(self):
        self.canvas.delete("all")
        self._session.reset()
        self._line = None

    def _confirm(self):
        drawing = self._session.current_drawing()
        self.destroy()
        self._on_confirm(drawing)
