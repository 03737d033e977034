"""Central mapping orchestration for record to document-map conversion.

This module walks a record's fields in declaration order and assembles the
resulting document map. It maintains the tag name and options via
MappingContext and recurses into nested records, mappings of records and
sequences of records.

Core function `_map_record` applies these steps per field:
    1. Effective key: directive key override, else the declared field name
    2. Identifier shortcut: with `use_id_if_available`, a non-empty ``_id``
       field makes the whole record map to ``{"_id": value}`` immediately
    3. Identifier removal: with `remove_id`, ``_id`` fields are dropped
    4. Omission: ``omitempty`` (or `generate_filter_or_patch`) drops empty values
    5. String coercion: ``string`` emits ``str(value)`` for values with their
       own text form and silently drops the field otherwise
    6. Recursion: unless ``omitnested``, nested records and containers of
       records are mapped with the same context
    7. Flatten: ``flatten`` merges a nested document into the enclosing one
       (last write wins on key collisions); otherwise plain assignment

A record that ends up with no entries yields an EMPTY MappingResult, which
the facade reports as None.

Helper Functions:
    _nested_data: Resolve a field value, recursing into records and containers
    _merge_flattened: Merge a nested document into its parent

Design Notes:
    - Pure functions only; records are read, never modified
    - The identifier shortcut is confined to the record it fires in; a parent
      record receives the short-circuited document as an ordinary value
"""
from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Optional

from ..models.result import DocumentMap, MappingResult
from .fields import FieldDescriptor, record_fields
from .mapping_context import MappingContext
from .tags import FLATTEN, OMIT_EMPTY, OMIT_NESTED, STRING
from .values import (
    ValueShape,
    child_hint,
    classify,
    element_shape,
    is_empty,
    is_stringer,
    is_sub_document,
)

logger = logging.getLogger(__name__)

__all__ = ["ID_KEY", "FlattenShapeError", "_map_record", "_nested_data"]

# Reserved document identifier key.
ID_KEY = "_id"


class FlattenShapeError(AssertionError):
    """A flatten target resolved to something other than a document.

    Happens when a nested record maps to nothing and its raw value is kept;
    such a value has no keys to merge into the parent.
    """


def _nested_data(value: Any, hint: Optional[Any], ctx: MappingContext) -> Any:
    """Resolve a field value, mapping nested records with the same context.

    Args:
        value: Raw field value (or container element)
        hint: Declared annotation for `value`, used to find element types
        ctx: Active mapping context

    Returns:
        A document for records that map to something, the raw record for
        records that map to nothing, a new dict/list for containers of
        records, and `value` unchanged for everything else.
    """
    shape = classify(value)
    if shape is ValueShape.RECORD:
        result = _map_record(value, ctx)
        return value if result.is_empty else result.document

    if shape is ValueShape.MAPPING:
        if element_shape(value, hint) is not ValueShape.RECORD:
            return value
        elem_hint = child_hint(hint, shape)
        return {k: _nested_data(v, elem_hint, ctx) for k, v in value.items()}

    if shape is ValueShape.SEQUENCE:
        if element_shape(value, hint) is not ValueShape.RECORD:
            return value
        elem_hint = child_hint(hint, shape)
        return [_nested_data(item, elem_hint, ctx) for item in value]

    return value


def _merge_flattened(out: DocumentMap, key: str, resolved: Any) -> None:
    if not isinstance(resolved, Mapping):
        raise FlattenShapeError(
            f"flatten on field {key!r} resolved to {type(resolved).__name__}, not a document"
        )
    for k, v in resolved.items():
        if k in out:
            logger.debug("Flattened field %s overwrites key %s", key, k)
        out[k] = v


def _map_field(fd: FieldDescriptor, key: str, out: DocumentMap, ctx: MappingContext) -> None:
    _name, tag_opts = fd.directive
    value = fd.value

    if tag_opts.has(STRING):
        if is_stringer(value):
            out[key] = str(value)
        else:
            logger.debug("Field %s has no text form; dropped", fd.name)
        return

    if tag_opts.has(OMIT_NESTED):
        out[key] = value
        return

    resolved = _nested_data(value, fd.type_hint, ctx)
    if tag_opts.has(FLATTEN) and is_sub_document(resolved):
        _merge_flattened(out, key, resolved)
    else:
        out[key] = resolved


def _map_record(record: Any, ctx: MappingContext) -> MappingResult:
    """Map one record to a MappingResult.

    Args:
        record: Record instance (dataclass, pydantic model or registered class)
        ctx: Tag name and options shared by every recursion level

    Returns:
        SHORT_CIRCUITED with ``{"_id": value}`` when the identifier shortcut
        fires, NORMAL with the assembled document, or EMPTY when no field
        produced an entry.
    """
    opts = ctx.opts
    out: DocumentMap = {}

    for fd in record_fields(record, ctx.tag_name):
        override, tag_opts = fd.directive
        key = override or fd.name

        if key == ID_KEY:
            if opts.use_id_if_available and not is_empty(fd.value):
                logger.debug("Identifier shortcut on %s", type(record).__name__)
                return MappingResult.short_circuited(ID_KEY, fd.value)
            if opts.remove_id:
                continue

        if (tag_opts.has(OMIT_EMPTY) or opts.generate_filter_or_patch) and is_empty(fd.value):
            continue

        _map_field(fd, key, out, ctx)

    return MappingResult.from_document(out)
