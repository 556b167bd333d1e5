import logging
import sys
import tkinter as tk

from formsigner.config.config_service import config_service
from formsigner.gui.form_editor_view import FormEditorView

class MainWindow(tk.Tk):
    def __init__(self, url: str):
        super().__init__()
        cfg = config_service.snapshot()

        self.title(cfg.general.app_name or "FormSigner")
        self.geometry("700x900")

        self.editor = FormEditorView(self, config=cfg)
        self.editor.pack(fill="both", expand=True)
        if url:
            self.editor.load(url)

def main(argv: list[str]) -> int:
    cfg = config_service.snapshot()
    logging.basicConfig(
        level=getattr(logging, cfg.general.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    url = argv[1] if len(argv) > 1 else cfg.loader.form_url
    MainWindow(url).mainloop()
    return 0

def run() -> int:
    return main(sys.argv)

if __name__ == "__main__":
    sys.exit(run())
