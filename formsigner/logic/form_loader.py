"""
FormLoader – fetch a remote PDF form and prepare it for signing
-------------------------------------------------------------------------------
fetch:     HTTP GET via requests (timeout, non-2xx -> NetworkFailureError).
           Produces immutable bytes; safe to run on a worker thread.
parse:     bytes -> FormDocument (UnparseableDocumentError).
sanitize:  strip denylisted button widgets.

Parsing and sanitizing mutate the document and belong on the UI thread.
"""
from __future__ import annotations
import logging
from typing import Iterable, Optional

import requests

from ..config.config_service import LoaderConfig, SanitizerConfig
from ..exceptions.errors import NetworkFailureError
from ..models.form_document import FormDocument
from .pdf_codec import parse_document
from .sanitizer import remove_button_annotations

logger = logging.getLogger(__name__)


def fetch_bytes(url: str, *, timeout: float = 30.0, session: Optional[requests.Session] = None) -> bytes:
    http = session or requests
    try:
        response = http.get(url, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as ex:
        logger.error(f"Failed to load PDF from {url}: {ex}")
        raise NetworkFailureError(f"Could not fetch {url}: {ex}") from ex
    logger.debug(f"Fetched {len(response.content)} bytes from {url}")
    return response.content


def load_and_sanitize(
    raw: bytes,
    denylist: Iterable[str],
    *,
    first_match_only: bool = True,
) -> FormDocument:
    document = parse_document(raw)
    remove_button_annotations(document, denylist, first_match_only=first_match_only)
    return document


class FormLoader:
    """Binds the loader and sanitizer settings; `load(url)` does both steps in one go."""

    def __init__(self, *, loader_cfg: LoaderConfig, sanitizer_cfg: SanitizerConfig,
                 session: Optional[requests.Session] = None) -> None:
        self._loader_cfg = loader_cfg
        self._sanitizer_cfg = sanitizer_cfg
        self._session = session

    def fetch(self, url: str) -> bytes:
        return fetch_bytes(url, timeout=self._loader_cfg.timeout_sec, session=self._session)

    def prepare(self, raw: bytes) -> FormDocument:
        return load_and_sanitize(
            raw,
            self._loader_cfg.denylist,
            first_match_only=self._sanitizer_cfg.first_match_only,
        )

    def load(self, url: str) -> FormDocument:
        return self.prepare(self.fetch(url))
