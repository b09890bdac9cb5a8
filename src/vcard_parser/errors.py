from __future__ import annotations


class VCardError(Exception):
    """Base class for fatal vCard construction errors."""


class NoContentProvided(VCardError):
    def __init__(self) -> None:
        super().__init__("vCard: No content provided")


class PathUnreachable(VCardError, OSError):
    def __init__(self, path: object, reason: str | None = None) -> None:
        self.path = path
        msg = f"vCard: Path not accessible ({path})"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class InvalidDocument(VCardError):
    def __init__(self, begin_count: int, end_count: int) -> None:
        self.begin_count = begin_count
        self.end_count = end_count
        super().__init__(
            f"vCard: invalid vCard ({begin_count} BEGIN, {end_count} END marker(s))"
        )
