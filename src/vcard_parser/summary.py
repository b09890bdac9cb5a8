"""Flatten parsed cards into a fixed contact shape (names, phones, emails...).

Only the public ``VCard.get`` contract is used here.
"""
from __future__ import annotations

import json
from typing import Any

from .card import VCard
from .errors import InvalidDocument
from .model import Mode, PropertyValue, Scalar, Structured, Typed


def _entries(card: VCard, key: str) -> list[PropertyValue]:
    found = card.get(key)
    # collapse=True hands back a lone entry unwrapped
    return found if isinstance(found, list) else [found]


def _text(entry: PropertyValue) -> str | None:
    if isinstance(entry, (Scalar, Typed)):
        return entry.value
    return None


def _type_label(entry: PropertyValue) -> str:
    types = getattr(entry, "type", None)
    return ", ".join(types) if types else "other"


def _name_part(card: VCard, part: str) -> str | None:
    for name in _entries(card, "n"):
        if isinstance(name, Structured):
            return name[part]
    return None


def _full_name(card: VCard) -> str | None:
    for name in _entries(card, "n"):
        if isinstance(name, Structured):
            return f"{name.get('FirstName', '')} {name.get('LastName', '')}"
    return None


def _photo(card: VCard) -> str | None:
    result = None
    for photo in _entries(card, "photo"):
        if isinstance(photo, Typed) and photo.encoding == "b":
            image_type = photo.type[0].lower() if photo.type else "jpeg"
            return f"data:image/{image_type};base64,{photo.value}"
        result = _text(photo)
    return result


def _organization(card: VCard) -> str | None:
    for org in _entries(card, "org"):
        if not isinstance(org, Structured):
            return _text(org)
        # TODO: confirm with product whether this should test Name alone; the
        # joined string never includes Name.
        if org["Name"] or org["Unit2"]:
            return ", ".join([org.get("Unit1", ""), org.get("Unit2", "")])
        return None
    return None


def _phones(card: VCard) -> list[dict[str, Any]]:
    return [
        {"phoneNumber": _text(tel), "type": _type_label(tel)}
        for tel in _entries(card, "tel")
    ]


def _emails(card: VCard) -> list[dict[str, Any]]:
    return [
        {"email": _text(email), "type": _type_label(email)}
        for email in _entries(card, "email")
    ]


def _urls(card: VCard) -> list[dict[str, Any]]:
    return [{"url": _text(url)} for url in _entries(card, "url")]


def _addresses(card: VCard) -> list[dict[str, Any]]:
    out = []
    for adr in _entries(card, "adr"):
        if not isinstance(adr, Structured):
            continue
        out.append({
            "type": _type_label(adr),
            "StreetAddress": adr.get("StreetAddress", ""),
            "PoBox": adr.get("POBox", ""),
            "ExtendedAddress": adr.get("ExtendedAddress", ""),
            "Locality": adr.get("Locality", ""),
            "Region": adr.get("Region", ""),
            "PostCode": adr.get("PostalCode", ""),
            "Country": adr.get("Country", ""),
        })
    return out


def summarize_card(card: VCard) -> dict[str, Any]:
    return {
        "firstName": _name_part(card, "FirstName"),
        "lastName": _name_part(card, "LastName"),
        "fullName": _full_name(card),
        "photo": _photo(card),
        "organization": _organization(card),
        "phones": _phones(card),
        "emails": _emails(card),
        "urls": _urls(card),
        "addresses": _addresses(card),
    }


def summarize(card: VCard) -> dict[str, Any] | list[dict[str, Any]]:
    """Single cards give one summary; multi-card documents give ``[{"vCard": ...}]``."""
    if not card.count():
        raise InvalidDocument(0, 0)
    if card.mode is Mode.MULTIPLE:
        return [{"vCard": summarize_card(child)} for child in card]
    return summarize_card(card)


def summarize_json(card: VCard) -> str:
    return json.dumps(summarize(card), indent=4, ensure_ascii=False)
