from __future__ import annotations

import logging
import re
from typing import Callable

from .errors import InvalidDocument
from .model import Mode, PropertyValue
from .params import ParameterSet, parse_parameters
from .registry import FILE_ELEMENTS
from .unfold import restore_wraps, strip_wraps, unfold
from .values import decode_value, normalize, unescape

logger = logging.getLogger(__name__)

_BEGIN = re.compile(r"^BEGIN:VCARD", re.IGNORECASE | re.MULTILINE)
_END = re.compile(r"^END:VCARD", re.IGNORECASE | re.MULTILINE)
_ITEM_PREFIX = re.compile(r"^item(\d+)\.(.+)$")
_AGENT_ESCAPES = (("\\n", "\n"), ("\\N", "\n"), ("\\:", ":"), ("\\;", ";"), ("\\,", ","))

Properties = dict[str, list[PropertyValue]]


# ── Card splitting ─────────────────────────────────────────────────────────────

def count_markers(text: str) -> tuple[int, int]:
    return len(_BEGIN.findall(text)), len(_END.findall(text))


def resolve_mode(text: str) -> Mode:
    """Single for one BEGIN/END pair, Multiple for more; anything else is invalid."""
    begins, ends = count_markers(text)
    if begins != ends or not begins:
        raise InvalidDocument(begins, ends)
    return Mode.SINGLE if begins == 1 else Mode.MULTIPLE


def split_cards(text: str) -> list[str]:
    """Split newline-normalised text into one fragment per card, in source order.

    Each fragment gets its BEGIN marker back. Text before the first marker and
    blank fragments are dropped.
    """
    fragments = _BEGIN.split(text)[1:]
    return ["BEGIN:VCARD\n" + frag.lstrip("\n") for frag in fragments if frag.strip()]


# ── Property parsing ───────────────────────────────────────────────────────────

def _agent_text(value: str) -> str:
    # Anything ahead of the embedded BEGIN marker would hide it from the splitter
    value = value[value.lower().index("begin:vcard"):]
    text = restore_wraps(value)
    for escaped, plain in _AGENT_ESCAPES:
        text = text.replace(escaped, plain)
    return text


def _split_key(key_part: str) -> tuple[str, list[str]]:
    key, *tokens = key_part.split(";")
    match = _ITEM_PREFIX.match(key)
    if match:
        # Apple "itemN." grouping; the group number is not kept.
        key = match.group(2)
    return key, tokens


def parse_properties(text: str, make_nested: Callable[[str], PropertyValue]) -> Properties:
    """Tokenise one card's worth of text into an ordered key -> values mapping.

    ``make_nested`` parses the text of an embedded AGENT card.
    """
    data: Properties = {}
    skipped = 0

    for line in unfold(text).split("\n"):
        if ":" not in line:
            if line.strip():
                skipped += 1
            continue

        key_part, value = line.split(":", 1)
        key_part = unescape(key_part).strip().lower()
        if key_part in ("begin", "end"):
            continue

        if key_part.startswith("agent") and "begin:vcard" in value.lower():
            data.setdefault("agent", []).append(make_nested(_agent_text(value)))
            continue

        value = unescape(strip_wraps(value)).strip()
        key, tokens = _split_key(key_part)
        params = parse_parameters(key, tokens) if tokens else ParameterSet()

        # Apple Address Book prefixes base64 file data with colon-separated
        # metadata (e.g. X-ABCROP-RECTANGLE); the payload is the last segment.
        if key in FILE_ELEMENTS and params.encoding == "b" and ":" in value:
            value = value.rsplit(":", 1)[-1]

        value = decode_value(value, params.encoding, params.charset)
        data.setdefault(key, []).append(normalize(key, value, params))

    if skipped:
        logger.debug("Skipped %d line(s) without a colon", skipped)
    return data
