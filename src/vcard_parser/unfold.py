"""Line unfolding: turn raw vCard text into one logical property per line.

Soft-wrapped continuations are not simply deleted; the fold point is kept as
WRAP so embedded AGENT cards can be re-split into physical lines later.
"""
from __future__ import annotations

import re

WRAP = "\x00wrap\x00"
_BASE64_EQ = "\x00b64eq\x00"

_NEWLINES = re.compile(r"\n+")
# Trailing "=" on a base64 continuation line (one that starts with whitespace)
_BASE64_TAIL = re.compile(r"(\n\s.+)=(\n)")
# Trailing "=" on the first line of a value declared ENCODING=b / BASE64
_BASE64_HEAD = re.compile(
    r"^([^:\n]*;encoding=(?:b|base64)\b[^:\n]*:.*)=$",
    re.IGNORECASE | re.MULTILINE,
)


def normalize_newlines(text: str) -> str:
    """CR and CRLF become LF; runs of blank lines collapse to one break."""
    return _NEWLINES.sub("\n", text.replace("\r", "\n"))


def unfold(text: str) -> str:
    text = normalize_newlines(text)
    text = _BASE64_TAIL.sub(lambda m: m.group(1) + _BASE64_EQ + m.group(2), text)
    text = _BASE64_HEAD.sub(lambda m: m.group(1) + _BASE64_EQ, text)
    # quoted-printable hard wraps (vCard 2.1)
    text = text.replace("=\n", "")
    text = text.replace("\n ", WRAP).replace("\n\t", WRAP)
    return text.replace(_BASE64_EQ, "=")


def strip_wraps(value: str) -> str:
    return value.replace(WRAP, "")


def restore_wraps(value: str) -> str:
    return value.replace(WRAP, "\n")
