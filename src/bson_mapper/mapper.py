"""Public facade for record to document-map conversion.

This module provides the stable public API for converting records
(dataclasses, pydantic models and registered classes) into generic document
maps usable as document-store filters, insert payloads or patch documents.
All mapping logic is delegated to bson_mapper.mapping.orchestrator and its
helpers in the bson_mapper.mapping package.

Public Functions:
    convert_record_to_document: Map a record, returning None for non-records
    new_record_mapper: Wrap a record in a RecordMapper handle
    get_default_tag_name / set_default_tag_name: process-wide default tag

Public Classes:
    RecordMapper: Handle allowing the tag name to be overridden before mapping

Example:

    @dataclass
    class User:
        id: str = field(metadata={"bson": "_id,omitempty"})
        first_name: str = field(metadata={"bson": "firstName"})
        nickname: str = field(default="", metadata={"bson": "nickname,omitempty"})

    convert_record_to_document(User(id="", first_name="Jane"))
    # -> {"firstName": "Jane"}
"""
from __future__ import annotations

import logging
import threading
from typing import Any, List, Optional

from .config import get_settings
from .mapping.fields import FieldDescriptor, is_record, record_fields, record_value
from .mapping.mapping_context import MappingContext
from .mapping.orchestrator import _map_record
from .models.options import MappingOptions
from .models.result import DocumentMap

logger = logging.getLogger(__name__)

__all__ = [
    "RecordMapper",
    "convert_record_to_document",
    "get_default_tag_name",
    "new_record_mapper",
    "set_default_tag_name",
]

# Explicit override of the settings-provided default; None means "use settings".
_default_tag_name: Optional[str] = None
_default_tag_lock = threading.Lock()


def get_default_tag_name() -> str:
    """Return the tag name new RecordMapper handles start with."""
    if _default_tag_name is not None:
        return _default_tag_name
    return get_settings().DEFAULT_TAG_NAME


def set_default_tag_name(tag_name: Optional[str]) -> None:
    """Set the process-wide default tag name.

    Meant to be called once during startup before any mapping happens.
    Handles that already exist keep the tag name they were created with.
    Passing None restores the configured default (``BSON_MAPPER_DEFAULT_TAG_NAME``).
    """
    global _default_tag_name
    with _default_tag_lock:
        _default_tag_name = tag_name
    logger.debug("Default tag name set to %s", tag_name)


class RecordMapper:
    """A record wrapped for mapping, together with the tag name to read.

    Raises NotARecordError on construction if `record` is not a record.
    """

    def __init__(self, record: Any, tag_name: Optional[str] = None) -> None:
        self.raw = record
        self.value = record_value(record)
        self.tag_name = tag_name or get_default_tag_name()

    def set_tag_name(self, tag_name: str) -> None:
        self.tag_name = tag_name

    def fields(self) -> List[FieldDescriptor]:
        """Mappable fields of the wrapped record under the current tag name."""
        return record_fields(self.value, self.tag_name)

    def to_document(self, opts: Optional[MappingOptions] = None) -> Optional[DocumentMap]:
        """Map the wrapped record, recursing into nested data structures.

        Args:
            opts: Mapping options; None behaves like MappingOptions()

        Returns:
            The document map, or None when no field produced an entry.
        """
        ctx = MappingContext.build(self.tag_name, opts)
        return _map_record(self.value, ctx).document

    def __repr__(self) -> str:
        return f"RecordMapper({type(self.value).__name__}, tag_name={self.tag_name!r})"


def new_record_mapper(record: Any, tag_name: Optional[str] = None) -> RecordMapper:
    """Wrap `record` for mapping, using the default tag name unless one is given."""
    return RecordMapper(record, tag_name=tag_name)


def convert_record_to_document(
    record: Any,
    opts: Optional[MappingOptions] = None,
    *,
    tag_name: Optional[str] = None,
) -> Optional[DocumentMap]:
    """Convert a record to a document map, factoring in the mapping options.

    Directives are read from each field's metadata under the tag name
    (``bson`` by default):

        "name"        use "name" as the document key
        "-"           never map this field
        "omitempty"   skip the field when its value is empty
        "omitnested"  use the raw value instead of mapping nested records
        "flatten"     merge the nested document into this one
        "string"      emit str(value) for values with their own text form

    Args:
        record: Record to map
        opts: Mapping options; None behaves like MappingOptions()
        tag_name: Tag name override; defaults to get_default_tag_name()

    Returns:
        The document map; None when `record` is not a record or when no field
        produced an entry. Non-records never raise here.
    """
    if not is_record(record):
        logger.debug("Not a record, nothing to map: %s", type(record).__name__)
        return None
    return new_record_mapper(record, tag_name=tag_name).to_document(opts)
