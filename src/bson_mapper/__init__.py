"""Package initialization for bson-mapper.

Re-exports the public mapping API so callers can write
``from bson_mapper import convert_record_to_document, MappingOptions``.
"""
from __future__ import annotations

from .mapper import (
    RecordMapper,
    convert_record_to_document,
    get_default_tag_name,
    new_record_mapper,
    set_default_tag_name,
)
from .mapping.fields import NotARecordError, register_record, unregister_record
from .mapping.orchestrator import FlattenShapeError
from .mapping.tags import parse_tag
from .models.options import MappingOptions

__all__ = [
    "FlattenShapeError",
    "MappingOptions",
    "NotARecordError",
    "RecordMapper",
    "convert_record_to_document",
    "get_default_tag_name",
    "new_record_mapper",
    "parse_tag",
    "register_record",
    "set_default_tag_name",
    "unregister_record",
]
