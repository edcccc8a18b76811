"""Shared data structures for the review reference corpus."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class InvalidCategory(ValueError):
    """Raised when a request category is outside the fixed set."""

    def __init__(self, value: object) -> None:
        self.value = value
        valid = ", ".join(category.value for category in Category)
        super().__init__(f"Unknown review category {value!r}. Expected one of: {valid}.")


class UnknownDocumentError(LookupError):
    """Raised when a document id does not resolve to a loaded document."""


class Category(str, Enum):
    """Request categories the reference corpus is organised by."""

    REVIEW = "review"
    SECURITY = "security"
    PERFORMANCE = "performance"
    MODERNIZATION = "modernization"
    ARCHITECTURE = "architecture"

    @classmethod
    def parse(cls, value: "Category | str") -> "Category":
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise InvalidCategory(value)
        try:
            return cls(value.strip().lower())
        except ValueError as exc:
            raise InvalidCategory(value) from exc


class Severity(str, Enum):
    """Ordinal issue severity, P0 being the most urgent."""

    P0 = "P0"
    P1 = "P1"
    P2 = "P2"
    P3 = "P3"

    @property
    def label(self) -> str:
        return _SEVERITY_LABELS[self][0]

    @property
    def description(self) -> str:
        return _SEVERITY_LABELS[self][1]

    @property
    def rank(self) -> int:
        return int(self.value[1:])


_SEVERITY_LABELS: dict[Severity, tuple[str, str]] = {
    Severity.P0: ("Critical", "Undefined behaviour, memory corruption or exploitable flaw; block the merge."),
    Severity.P1: ("High", "Likely bug, leak or data race under realistic use; fix before release."),
    Severity.P2: ("Medium", "Maintainability or performance problem with a clear fix; schedule it."),
    Severity.P3: ("Low", "Style, naming or minor modernization suggestion; optional."),
}


@dataclass(frozen=True)
class Document:
    """A single reference document from the corpus."""

    doc_id: str
    title: str
    body: str
