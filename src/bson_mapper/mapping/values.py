"""Value shape classification and emptiness rules.

The mapper needs three answers about any field value:

- its shape (record, mapping, sequence or plain scalar), which decides whether
  the value is descended into
- whether it is empty, which gates ``omitempty`` and the identifier shortcut
- whether it has its own text form, which gates the ``string`` flag

Python has no pointers, so ``Optional[X]`` is the single reference level that
gets unwrapped when reading declared element types, and ``None`` is the
absent reference.
"""
from __future__ import annotations

import numbers
import types
import typing
from collections.abc import Mapping, Sequence, Sized
from enum import Enum
from typing import Any, Iterable, Optional, Union

from pydantic import BaseModel

from .fields import all_field_values, is_record, is_record_type

__all__ = [
    "ValueShape",
    "child_hint",
    "classify",
    "element_shape",
    "is_empty",
    "is_stringer",
    "is_sub_document",
    "unwrap_optional",
]

# Types whose text form is their value, not a separate representation.
_PLAIN_SCALARS = (str, bytes, bytearray, int, float, complex, bool, type(None))
_TEXT_TYPES = (str, bytes, bytearray, memoryview)
# Classes whose __str__ is a generic dump, not a defined text form.
_GENERIC_STR_OWNERS = (object, BaseModel)


class ValueShape(str, Enum):
    RECORD = "record"
    MAPPING = "mapping"
    SEQUENCE = "sequence"
    SCALAR = "scalar"


def classify(value: Any) -> ValueShape:
    if value is None:
        return ValueShape.SCALAR
    if is_record(value):
        return ValueShape.RECORD
    if isinstance(value, Mapping):
        return ValueShape.MAPPING
    if isinstance(value, Sequence) and not isinstance(value, _TEXT_TYPES):
        return ValueShape.SEQUENCE
    return ValueShape.SCALAR


def is_sub_document(value: Any) -> bool:
    """True when `value` would become (or already is) a nested document."""
    return classify(value) in (ValueShape.RECORD, ValueShape.MAPPING)


def is_empty(value: Any) -> bool:
    """Return True if `value` is the zero value of its type.

    Empty values: None, False, numeric zero, empty text/bytes, any container
    with no entries, and a record whose every field (hidden fields included)
    is itself empty.
    """
    if value is None:
        return True
    if isinstance(value, bool):
        return not value
    if isinstance(value, numbers.Number):
        return value == 0
    if is_record(value):
        return all(is_empty(v) for v in all_field_values(value))
    if isinstance(value, Sized):
        return len(value) == 0
    return False


def _str_owner(cls: type) -> type:
    for klass in cls.__mro__:
        if "__str__" in vars(klass):
            return klass
    return object


def is_stringer(value: Any) -> bool:
    """True when the value's class defines its own ``__str__``.

    Plain scalars are excluded: their ``str()`` is the value itself rather
    than a text representation of a richer type. The generic field dump
    pydantic gives every model does not count either; a model is a stringer
    only if it overrides ``__str__`` itself.
    """
    if type(value) in _PLAIN_SCALARS:
        return False
    return _str_owner(type(value)) not in _GENERIC_STR_OWNERS


def unwrap_optional(hint: Any) -> Any:
    """Strip one ``Optional[...]`` layer from a type hint."""
    origin = typing.get_origin(hint)
    if origin is Union or origin is getattr(types, "UnionType", None):
        args = [a for a in typing.get_args(hint) if a is not type(None)]
        if len(args) == 1:
            return args[0]
    return hint


def _is_container_hint(hint: Any, container: type) -> bool:
    origin = typing.get_origin(hint)
    return isinstance(origin, type) and issubclass(origin, container)


def child_hint(hint: Any, shape: ValueShape) -> Any:
    """Declared type of the values held by a mapping/sequence hint, or None."""
    hint = unwrap_optional(hint)
    args = typing.get_args(hint)
    if shape is ValueShape.MAPPING and _is_container_hint(hint, Mapping) and len(args) == 2:
        return args[1]
    if shape is ValueShape.SEQUENCE and _is_container_hint(hint, Sequence) and args:
        return args[0]
    return None


def _element_hint(hint: Any, shape: ValueShape) -> Any:
    """Declared element class of a mapping/sequence hint, or None if unknown."""
    value_hint = child_hint(hint, shape)
    if value_hint is None:
        return None
    elem = unwrap_optional(value_hint)
    if shape is ValueShape.MAPPING:
        # One sequence level is looked through: Dict[str, List[Record]].
        if _is_container_hint(elem, Sequence) and typing.get_args(elem):
            elem = unwrap_optional(typing.get_args(elem)[0])
    return elem


def _is_concrete_class(hint: Any) -> bool:
    # typing.Any is a class on newer interpreters; it still means "unknown".
    if hint is Any or hint is object:
        return False
    return isinstance(hint, type) and typing.get_origin(hint) is None


def _all_records(items: Iterable[Any], *, through_sequences: bool) -> bool:
    present = [item for item in items if item is not None]
    if not present:
        return False
    for item in present:
        if is_record(item):
            continue
        if through_sequences and classify(item) is ValueShape.SEQUENCE:
            if _all_records(item, through_sequences=False):
                continue
        return False
    return True


def element_shape(value: Any, hint: Optional[Any] = None) -> ValueShape:
    """Return the shape of the elements held by a mapping or sequence value.

    The declared hint wins when it names a concrete element class; otherwise
    (no hint, ``Any``, unions, unresolved forward references) the runtime
    elements decide: RECORD only if every non-None element is a record.

    Args:
        value: Mapping or sequence value
        hint: Declared annotation of the field holding `value`, if known

    Returns:
        ValueShape.RECORD when elements should be mapped recursively,
        otherwise ValueShape.SCALAR.
    """
    shape = classify(value)
    if shape not in (ValueShape.MAPPING, ValueShape.SEQUENCE):
        return ValueShape.SCALAR
    elem = _element_hint(hint, shape) if hint is not None else None
    if _is_concrete_class(elem):
        return ValueShape.RECORD if is_record_type(elem) else ValueShape.SCALAR
    items = value.values() if shape is ValueShape.MAPPING else value
    if _all_records(items, through_sequences=shape is ValueShape.MAPPING):
        return ValueShape.RECORD
    return ValueShape.SCALAR
