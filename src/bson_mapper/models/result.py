"""Result types produced by the per-record mapping routine."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

# Generic document representation handed to a document-store driver.
DocumentMap = Dict[str, Any]


class ResultKind(str, Enum):
    SHORT_CIRCUITED = "short_circuited"
    NORMAL = "normal"
    EMPTY = "empty"


@dataclass(frozen=True)
class MappingResult:
    """Outcome of mapping one record.

    `SHORT_CIRCUITED` means the identifier shortcut fired and `document` holds
    only the `_id` entry. The kind is informational for the caller of the
    record routine only; it never propagates past the record it describes.
    """

    kind: ResultKind
    document: Optional[DocumentMap] = None

    @classmethod
    def empty(cls) -> "MappingResult":
        return cls(kind=ResultKind.EMPTY)

    @classmethod
    def short_circuited(cls, key: str, value: Any) -> "MappingResult":
        return cls(kind=ResultKind.SHORT_CIRCUITED, document={key: value})

    @classmethod
    def from_document(cls, document: DocumentMap) -> "MappingResult":
        if not document:
            return cls.empty()
        return cls(kind=ResultKind.NORMAL, document=document)

    @property
    def is_empty(self) -> bool:
        return self.kind is ResultKind.EMPTY


__all__ = ["DocumentMap", "MappingResult", "ResultKind"]
