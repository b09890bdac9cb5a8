from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable

from .registry import BASE64_ENCODINGS, ELEMENT_TYPES, KNOWN_ENCODINGS

logger = logging.getLogger(__name__)


@dataclass
class ParameterSet:
    type: list[str] = field(default_factory=list)
    encoding: str | None = None
    charset: str | None = None


def _is_inline_type(key: str, token: str) -> bool:
    # vCard 2.1 allows "TEL;WORK;VOICE:..." without TYPE=. EMAIL takes any token.
    return token in ELEMENT_TYPES.get(key, ()) or key == "email"


def parse_parameters(key: str, tokens: Iterable[str]) -> ParameterSet:
    """Decode the ``;``-separated parameter tokens that follow a property name.

    Unknown parameter names are ignored. A token holding several ``name=value``
    groups (``type=work,type=voice``) is re-parsed piecewise and only its types
    are kept.
    """
    result = ParameterSet()
    for raw in tokens:
        parts = raw.lower().split("=")
        if len(parts) == 1:
            token = parts[0].strip()
            if token and _is_inline_type(key, token):
                result.type.append(token)
        elif len(parts) > 2:
            nested = parse_parameters(key, raw.split(","))
            result.type.extend(nested.type or [])
        else:
            name, value = parts[0].strip(), parts[1].strip()
            if name == "encoding":
                if value in KNOWN_ENCODINGS:
                    result.encoding = "b" if value in BASE64_ENCODINGS else value
            elif name == "charset":
                result.charset = value
            elif name == "type":
                result.type.extend(value.split(","))
            elif name == "value":
                if value == "url":
                    result.encoding = "uri"
            else:
                logger.debug("Ignoring parameter %r on %s", name, key)
    return result
