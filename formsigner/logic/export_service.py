"""
===============================================================================
ExportService – save and print the filled form
-------------------------------------------------------------------------------
save     Serialize the FormDocument and write it to <output_dir>/<file_name>
         (overwrite, no versioning).
print    Serialize (ink flattened into page content if configured), write to a
         temp file and hand it to the platform print command. Fire-and-forget.

Temp cleanup: print files live in one spool dir and are deleted after a delay
in a background thread; leftovers older than a day are swept at exit.
A file whose spooling failed is removed right away.

Both return True/False; failures are logged, never raised to the UI.
===============================================================================
"""
from __future__ import annotations

import atexit
import hashlib
import logging
import os
import shlex
import subprocess
import sys
import tempfile
import threading
import time
from pathlib import Path
from typing import Optional

from ..config.config_service import ExportConfig
from ..exceptions.errors import PrintFailureError, SaveFailureError
from ..models.form_document import FormDocument
from .pdf_codec import serialize_document

logger = logging.getLogger(__name__)


class ExportService:
    PRINT_CLEANUP_DELAY_SEC = 30 * 60
    PRINT_MAX_AGE_SEC = 24 * 3600

    def __init__(self, cfg: ExportConfig, *, spool_dir: Optional[Path] = None) -> None:
        self._cfg = cfg
        self._spool_dir = spool_dir or Path(tempfile.gettempdir()) / "formsigner_print"
        atexit.register(self.cleanup_spool_dir)

    @property
    def output_path(self) -> Path:
        return self._cfg.output_path.expanduser()

    @property
    def spool_dir(self) -> Path:
        return self._spool_dir

    # ---------- save ---------------------------------------------------------
    def write(self, document: FormDocument) -> Path:
        """Raising variant of save()."""
        target = self.output_path
        try:
            data = serialize_document(document)
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)
        except Exception as ex:
            raise SaveFailureError(f"Could not write {target}: {ex}") from ex
        logger.info(f"Saved form to {target} (sha256={hashlib.sha256(data).hexdigest()})")
        return target

    def save(self, document: FormDocument) -> bool:
        try:
            self.write(document)
        except SaveFailureError as ex:
            logger.error(f"Failed to save PDF: {ex}")
            return False
        return True

    # ---------- print --------------------------------------------------------
    def print_bytes(self, data: bytes) -> Path:
        """Raising variant of print_document() for already serialized bytes."""
        path: Optional[Path] = None
        try:
            self._spool_dir.mkdir(parents=True, exist_ok=True)
            fd, name = tempfile.mkstemp(prefix="formsigner_", suffix=".pdf", dir=self._spool_dir)
            path = Path(name)
            with os.fdopen(fd, "wb") as fh:
                fh.write(data)
            self._spool(path)
        except (OSError, ValueError) as ex:
            if path is not None:
                self._delete(path)
            raise PrintFailureError(f"Could not print: {ex}") from ex
        logger.info(f"Sent {path} to printer")
        self._delayed_delete(path, delay_sec=self.PRINT_CLEANUP_DELAY_SEC)
        return path

    def print_document(self, document: FormDocument) -> bool:
        try:
            data = serialize_document(document, flatten_ink=self._cfg.flatten_for_print)
            self.print_bytes(data)
        except PrintFailureError as ex:
            logger.error(f"Failed to print PDF: {ex}")
            return False
        except Exception as ex:
            logger.error(f"Failed to prepare PDF for printing: {ex}")
            return False
        return True

    def _spool(self, path: Path) -> None:
        if sys.platform.startswith("win"):
            os.startfile(str(path), "print")  # type: ignore[attr-defined]
        else:
            subprocess.Popen([*shlex.split(self._cfg.print_command), str(path)])

    # ---------- temp cleanup -------------------------------------------------
    @staticmethod
    def _delete(path: Path) -> None:
        try:
            path.unlink(missing_ok=True)
        except OSError as ex:
            logger.warning(f"Could not remove print file {path}: {ex}")

    def _delayed_delete(self, path: Path, *, delay_sec: float) -> None:
        """Delete *path* after the print command had time to read it."""
        def _delete_job() -> None:
            time.sleep(delay_sec)
            self._delete(path)
        threading.Thread(target=_delete_job, daemon=True).start()

    def cleanup_spool_dir(self) -> int:
        """Remove print files older than PRINT_MAX_AGE_SEC. Returns the count."""
        if not self._spool_dir.is_dir():
            return 0
        cutoff = time.time() - self.PRINT_MAX_AGE_SEC
        removed = 0
        for p in self._spool_dir.glob("formsigner_*.pdf"):
            try:
                if p.stat().st_mtime < cutoff:
                    p.unlink()
                    removed += 1
            except OSError as ex:
                logger.warning(f"Could not remove print file {p}: {ex}")
        return removed
