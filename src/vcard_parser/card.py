from __future__ import annotations

import base64
import binascii
import logging
import os
from pathlib import Path
from typing import Iterator

from .errors import InvalidDocument, NoContentProvided, PathUnreachable, VCardError
from .model import Mode, MultiText, Nested, PropertyValue, Scalar, Structured, Typed
from .parser import parse_properties, resolve_mode, split_cards
from .registry import ELEMENT_TYPES, FILE_ELEMENTS, STRUCTURED_ELEMENTS
from .unfold import normalize_newlines

logger = logging.getLogger(__name__)

_SKIP_ON_OUTPUT = ("photo", "version")


class VCard:
    """One vCard, or a document of several, parsed from a file or raw text.

    A document with a single BEGIN/END pair holds properties directly. One with
    several pairs holds no properties of its own; its cards are reached by
    iterating over it.

    ``collapse=True`` makes ``get()`` return a lone entry by itself instead of
    a one-element list.
    """

    def __init__(
        self,
        path: str | os.PathLike[str] | None = None,
        raw: str | None = None,
        *,
        collapse: bool = False,
    ) -> None:
        if path and raw:
            raise ValueError("vCard: give either a path or raw text, not both")

        if path:
            self.path: Path | None = Path(path)
            raw = _read_text(self.path)
        elif raw:
            self.path = None
        else:
            raise NoContentProvided()

        self.collapse = collapse
        self._data: dict[str, list[PropertyValue]] = {}
        self._children: list[VCard] = []

        text = normalize_newlines(raw)
        self.mode = resolve_mode(text)

        if self.mode is Mode.MULTIPLE:
            self._children = [VCard(raw=frag, collapse=collapse) for frag in split_cards(text)]
            logger.debug("Parsed %d cards", len(self._children))
        else:
            self._data = parse_properties(text, self._parse_agent)

    @classmethod
    def from_text(cls, raw: str, *, collapse: bool = False) -> VCard:
        return cls(raw=raw, collapse=collapse)

    def _parse_agent(self, text: str) -> PropertyValue:
        try:
            agent = VCard(raw=text, collapse=self.collapse)
        except InvalidDocument as exc:
            logger.warning("Embedded AGENT card kept as text: %s", exc)
            return Scalar(text.replace("\n", "\\n"))
        records = list(agent) if agent.mode is Mode.MULTIPLE else [agent]
        return Nested(records)

    # ── Accessors ──────────────────────────────────────────────────────────────

    def get(self, key: str) -> list[PropertyValue] | PropertyValue:
        """Return the entries stored for ``key`` in source order.

        Missing keys give an empty list. File elements (PHOTO, LOGO, SOUND)
        whose payload starts with ``uri:`` come back as URI-encoded entries.
        """
        key = key.lower()
        entries = self._data.get(key)
        if not entries:
            return []
        if key == "agent":
            return list(entries)
        if key in FILE_ELEMENTS:
            return [_promote_uri(entry) for entry in entries]
        if self.collapse and len(entries) == 1:
            return entries[0]
        return list(entries)

    def keys(self) -> list[str]:
        return list(self._data)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and bool(self._data.get(key.lower()))

    # ── Mutator ────────────────────────────────────────────────────────────────

    def append(self, key: str, value: str, *types: str) -> VCard:
        """Add a value under ``key`` and return the card for chaining.

        ``card.append("n", "Doe", "LastName")`` fills a part of the last N
        entry, or starts a new entry when that part is already set.
        ``card.append("tel", "555-1234", "work", "voice")`` adds a typed value.
        """
        if self.mode is Mode.MULTIPLE:
            raise TypeError("vCard: cannot add properties to a multi-card document")

        key = key.lower()
        if not types and not value:
            return self
        entries = self._data.setdefault(key, [])

        if not types:
            entries.append(Scalar(value))
            return self

        parts = STRUCTURED_ELEMENTS.get(key, ())
        if types[0] in parts:
            part = types[0]
            last = entries[-1] if entries else None
            if isinstance(last, Structured) and not last.parts.get(part):
                last.parts[part] = value
            else:
                fresh: dict[str, str | None] = dict.fromkeys(parts)
                fresh[part] = value
                entries.append(Structured(fresh))
        elif key in ELEMENT_TYPES:
            entries.append(Typed(value, type=list(types)))
        else:
            logger.debug("append(%r): types %r ignored, nothing added", key, types)
        return self

    # ── Serialisation ──────────────────────────────────────────────────────────

    def serialize(self) -> str:
        if self.mode is Mode.MULTIPLE:
            return "".join(child.serialize() for child in self._children)

        lines = ["BEGIN:VCARD", "VERSION:3.0"]
        for key, entries in self._data.items():
            if key in _SKIP_ON_OUTPUT:
                continue
            for entry in entries:
                lines.extend(_entry_lines(key, entry))
        lines.append("END:VCARD")
        return "\n".join(lines) + "\n"

    def __str__(self) -> str:
        return self.serialize()

    def __repr__(self) -> str:
        if self.mode is Mode.MULTIPLE:
            return f"<VCard multiple: {len(self._children)} cards>"
        return f"<VCard single: {', '.join(self._data) or 'empty'}>"

    # ── Iteration / count ──────────────────────────────────────────────────────

    def count(self) -> int:
        if self.mode is Mode.SINGLE:
            return 1
        if self.mode is Mode.MULTIPLE:
            return len(self._children)
        return 0

    def __len__(self) -> int:
        return self.count()

    def __iter__(self) -> Iterator[VCard]:
        if self.mode is Mode.MULTIPLE:
            return iter(self._children)
        return iter(())

    # ── Embedded files ─────────────────────────────────────────────────────────

    def save_file(self, key: str, index: int = 0, target: str | os.PathLike[str] = "") -> bool:
        """Write an embedded PHOTO/LOGO/SOUND payload to ``target``.

        Returns False when there is no such entry or it only points to a URI.
        """
        key = key.lower()
        entries = self._data.get(key) or []
        if not 0 <= index < len(entries):
            return False

        entry = _promote_uri(entries[index])
        if not isinstance(entry, (Scalar, Typed)):
            return False
        encoding = entry.encoding if isinstance(entry, Typed) else None
        if encoding == "uri":
            return False

        target = Path(target)
        writable = os.access(target if target.exists() else target.parent, os.W_OK)
        if not target.name or not writable:
            raise PathUnreachable(target, f"cannot save {key}, target path not writable")

        if encoding == "b":
            content = _decode_base64(key, entry.value)
        else:
            content = entry.value.encode("utf-8", errors="surrogateescape")
        target.write_bytes(content)
        logger.debug("Saved %s[%d] to %s (%d bytes)", key, index, target, len(content))
        return True


# ── Helpers ────────────────────────────────────────────────────────────────────

def _read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8", errors="surrogateescape")
    except OSError as exc:
        raise PathUnreachable(path, exc.strerror) from exc


def _decode_base64(key: str, payload: str) -> bytes:
    # Some exporters drop the trailing padding
    payload = "".join(payload.split())
    payload += "=" * (-len(payload) % 4)
    try:
        return base64.b64decode(payload)
    except binascii.Error as exc:
        raise VCardError(f"vCard: {key} payload is not valid base64: {exc}") from exc


def _promote_uri(entry: PropertyValue) -> PropertyValue:
    if isinstance(entry, (Scalar, Typed)) and entry.value[:4].lower() == "uri:":
        types = list(entry.type) if isinstance(entry, Typed) else []
        return Typed(entry.value[4:], type=types, encoding="uri")
    return entry


def _type_suffix(types: list[str]) -> str:
    return ";TYPE=" + ",".join(t.upper() for t in types) if types else ""


def _entry_lines(key: str, entry: PropertyValue) -> list[str]:
    name = key.upper()
    if isinstance(entry, Structured):
        parts = STRUCTURED_ELEMENTS.get(key, tuple(entry.parts))
        body = ";".join(entry.parts.get(part) or "" for part in parts)
        return [f"{name}{_type_suffix(entry.type)}:{body}"]
    if isinstance(entry, Typed):
        return [f"{name}{_type_suffix(entry.type)}:{entry.value}"]
    if isinstance(entry, MultiText):
        return [f"{name}:{','.join(entry.values)}"]
    if isinstance(entry, Nested):
        # Embedded cards go on one line with escaped newlines (RFC 2426 AGENT form)
        return [
            f"{name}:" + record.serialize().rstrip("\n").replace("\n", "\\n")
            for record in entry.records
        ]
    return [f"{name}:{entry.value}"]
