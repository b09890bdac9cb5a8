from __future__ import annotations

import logging
import quopri

from .model import MultiText, PropertyValue, Scalar, Structured, Typed
from .params import ParameterSet
from .registry import MULTI_VALUE_ELEMENTS, STRUCTURED_ELEMENTS, UTF8_CHARSETS

logger = logging.getLogger(__name__)

_ESCAPES = (("\\:", ":"), ("\\;", ";"), ("\\,", ","), ("\n", ""))


def unescape(text: str) -> str:
    for escaped, plain in _ESCAPES:
        text = text.replace(escaped, plain)
    return text


# ── Transfer decoding ──────────────────────────────────────────────────────────

def _to_bytes(value: str) -> bytes:
    # Undecodable input bytes survive file reading as surrogates; give them back.
    return value.encode("utf-8", errors="surrogateescape")


def decode_value(value: str, encoding: str | None, charset: str | None) -> str:
    """Apply quoted-printable and charset decoding; base64 payloads are left as-is."""
    qp = encoding == "quoted-printable"
    transcode = charset is not None and charset not in UTF8_CHARSETS
    if not (qp or transcode):
        return value

    data = _to_bytes(value)
    if qp:
        data = quopri.decodestring(data)

    target = charset if transcode else "utf-8"
    try:
        return data.decode(target, errors="replace")
    except LookupError:
        logger.warning("Unknown charset %r, value kept undecoded", charset)
        return data.decode("utf-8", errors="replace")


# ── Shaping ────────────────────────────────────────────────────────────────────

def parse_structured(key: str, text: str) -> dict[str, str | None]:
    pieces = [p.strip() for p in text.split(";")]
    parts = STRUCTURED_ELEMENTS[key]
    # Empty and missing parts are both None; surplus source parts are dropped.
    return {name: (pieces[i] or None) if i < len(pieces) else None for i, name in enumerate(parts)}


def parse_multiple(text: str) -> list[str]:
    return text.split(",")


def normalize(key: str, value: str, params: ParameterSet | None = None) -> PropertyValue:
    """Shape a decoded value by its property key and parameters."""
    params = params or ParameterSet()
    encoding = params.encoding

    if key in STRUCTURED_ELEMENTS:
        return Structured(parse_structured(key, value), type=list(params.type), encoding=encoding)
    if key in MULTI_VALUE_ELEMENTS:
        return MultiText(parse_multiple(value), encoding=encoding)
    if params.type:
        return Typed(value, type=list(params.type), encoding=encoding)
    if encoding:
        return Typed(value, encoding=encoding)
    return Scalar(value)
