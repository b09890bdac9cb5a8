from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Union

if TYPE_CHECKING:
    from .card import VCard


class Mode(str, Enum):
    SINGLE = "single"
    MULTIPLE = "multiple"
    ERROR = "error"


@dataclass
class Scalar:
    value: str


@dataclass
class Typed:
    value: str
    type: list[str] = field(default_factory=list)
    encoding: str | None = None


@dataclass
class Structured:
    parts: dict[str, str | None]
    type: list[str] = field(default_factory=list)   # reserved "Type" slot
    encoding: str | None = None

    def __getitem__(self, part: str) -> str | None:
        return self.parts.get(part)

    def get(self, part: str, default: str | None = None) -> str | None:
        value = self.parts.get(part)
        return default if value is None else value


@dataclass
class MultiText:
    values: list[str]
    encoding: str | None = None


@dataclass
class Nested:
    records: list[VCard] = field(default_factory=list)


PropertyValue = Union[Scalar, Typed, Structured, MultiText, Nested]
