"""Org-style outline presentations: page navigation, masking, aux windows, notes."""

from epresent.errors import ConfigParseError, EpresentError, InvalidDocumentError, NotFoundError
from epresent.session import Session

__all__ = [
    "ConfigParseError",
    "EpresentError",
    "InvalidDocumentError",
    "NotFoundError",
    "Session",
]
