"""vcard-parser: read vCard 2.1/3.0 text into ordered records and write it back."""
from __future__ import annotations

from .card import VCard
from .errors import InvalidDocument, NoContentProvided, PathUnreachable, VCardError
from .model import Mode, MultiText, Nested, Scalar, Structured, Typed

__all__ = [
    "VCard",
    "Mode",
    "Scalar",
    "Typed",
    "Structured",
    "MultiText",
    "Nested",
    "VCardError",
    "NoContentProvided",
    "PathUnreachable",
    "InvalidDocument",
]

__version__ = "0.4.8"
