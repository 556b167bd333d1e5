"""Form signer exceptions."""
from __future__ import annotations


class FormSignerError(Exception):
    """Base exception for the form signer."""


class NetworkFailureError(FormSignerError):
    """Raised when the form bytes cannot be fetched."""


class UnparseableDocumentError(FormSignerError):
    """Raised when fetched bytes are not a readable PDF."""


class EmptyDrawingError(FormSignerError):
    """Raised when a drawing without any points is turned into an annotation."""


class InvalidTargetRectError(FormSignerError):
    """Raised when the target rectangle has a non-positive width or height."""


class SaveFailureError(FormSignerError):
    """Raised when the filled form cannot be written."""


class PrintFailureError(FormSignerError):
    """Raised when the filled form cannot be handed to the print command."""
