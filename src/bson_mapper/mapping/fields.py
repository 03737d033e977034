"""Record introspection: which values count as records and what fields they expose.

Three kinds of record are understood:

1. ``dataclasses`` dataclasses. Directives live in the field metadata:
   ``field(metadata={"bson": "name,omitempty"})``.
2. pydantic ``BaseModel`` subclasses. Directives live in the field's
   ``json_schema_extra`` dict: ``Field(json_schema_extra={"bson": "name"})``.
3. Any other class registered through `register_record`, which declares the
   field order and directives explicitly.

Fields whose name starts with an underscore are hidden and never mapped.
Fields whose directive key override is ``-`` are suppressed. Descriptors are
built fresh on every call; only resolved type hints are cached per class.

Public Functions:
    is_record / is_record_type: record detection
    record_value: validate a record argument (raises NotARecordError)
    record_fields: ordered, mappable FieldDescriptors of a record
    record_type_fields: mappable (name, directive) pairs declared by a record type
    all_field_values: every field value, hidden ones included (emptiness check)
    register_record / unregister_record: explicit per-type registration
"""
from __future__ import annotations

import dataclasses
import logging
import threading
import typing
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple

from pydantic import BaseModel

from .tags import SKIP, TagOptions, parse_tag

logger = logging.getLogger(__name__)

__all__ = [
    "FieldDescriptor",
    "NotARecordError",
    "RecordSpec",
    "all_field_values",
    "is_record",
    "is_record_type",
    "record_fields",
    "record_type_fields",
    "record_value",
    "register_record",
    "unregister_record",
]


class NotARecordError(TypeError):
    """Raised when a record was required but something else was supplied."""


@dataclass(frozen=True)
class FieldDescriptor:
    """One mappable field of a record, resolved for a single tag name."""

    name: str
    tag: str
    value: Any
    # Declared annotation when it could be resolved, else None.
    type_hint: Any = None

    @property
    def directive(self) -> Tuple[str, TagOptions]:
        return parse_tag(self.tag)


@dataclass(frozen=True)
class RecordSpec:
    """Field layout declared for a registered (non-dataclass, non-pydantic) class."""

    fields: Tuple[str, ...]
    # field name -> {tag name -> directive string}
    tags: Mapping[str, Mapping[str, str]] = field(default_factory=dict)
    hints: Mapping[str, Any] = field(default_factory=dict)


_REGISTRY: Dict[type, RecordSpec] = {}
_REGISTRY_LOCK = threading.Lock()


def register_record(
    cls: type,
    fields: Iterable[str],
    *,
    tags: Optional[Mapping[str, Mapping[str, str]]] = None,
    hints: Optional[Mapping[str, Any]] = None,
) -> type:
    """Declare the mappable layout of a plain class.

    Intended to run once per type at import/startup time, before the class is
    mapped. Re-registering a class replaces its previous layout.

    Args:
        cls: Class whose instances should be treated as records
        fields: Attribute names in mapping order
        tags: Optional ``{field: {tag_name: directive}}`` directives
        hints: Optional ``{field: annotation}`` used to find container element
            types; defaults to the class annotations when resolvable

    Returns:
        The class itself, so the call can be used inline after a definition.
    """
    if not isinstance(cls, type):
        raise TypeError(f"register_record expects a class, got {type(cls).__name__}")
    names = tuple(fields)
    tag_map = {name: dict(per_tag) for name, per_tag in (tags or {}).items()}
    unknown = set(tag_map) - set(names)
    if unknown:
        raise TypeError(
            f"directives given for undeclared fields of {cls.__name__}: {sorted(unknown)}"
        )
    spec = RecordSpec(fields=names, tags=tag_map, hints=dict(hints or {}))
    with _REGISTRY_LOCK:
        _REGISTRY[cls] = spec
    logger.debug("Registered record type %s with %d fields", cls.__qualname__, len(names))
    return cls


def unregister_record(cls: type) -> None:
    with _REGISTRY_LOCK:
        _REGISTRY.pop(cls, None)


def _registered_spec(cls: type) -> Optional[RecordSpec]:
    for klass in cls.__mro__:
        spec = _REGISTRY.get(klass)
        if spec is not None:
            return spec
    return None


def is_record_type(cls: Any) -> bool:
    if not isinstance(cls, type) or typing.get_origin(cls) is not None:
        return False
    if dataclasses.is_dataclass(cls) or issubclass(cls, BaseModel):
        return True
    return _registered_spec(cls) is not None


def is_record(value: Any) -> bool:
    """True for record instances (never for record classes themselves)."""
    return not isinstance(value, type) and is_record_type(type(value))


def record_value(obj: Any) -> Any:
    """Return `obj` if it is a record, else fail loudly.

    Passing a non-record here is caller misuse of the handle API rather than
    a data condition, hence an exception instead of an empty result.
    """
    if not is_record(obj):
        raise NotARecordError(f"not a record: {type(obj).__name__}")
    return obj


@lru_cache(maxsize=None)
def _type_hints(cls: type) -> Dict[str, Any]:
    # Locally defined classes under postponed annotations may not resolve;
    # unresolved hints fall back to runtime inspection of values.
    try:
        return typing.get_type_hints(cls)
    except (NameError, TypeError, AttributeError) as e:
        logger.debug("Could not resolve type hints for %s: %s", cls.__qualname__, e)
        return {}


def _json_schema_tags(info: Any) -> Mapping[str, Any]:
    extra = getattr(info, "json_schema_extra", None)
    return extra if isinstance(extra, dict) else {}


def _iter_declared(cls: type, tag_name: str) -> Iterator[Tuple[str, str, Any]]:
    """Yield (name, directive, hint) for every declared field, hidden ones included."""
    if issubclass(cls, BaseModel):
        for name, info in cls.model_fields.items():
            yield name, str(_json_schema_tags(info).get(tag_name, "")), info.annotation
        return
    if dataclasses.is_dataclass(cls):
        hints = _type_hints(cls)
        for f in dataclasses.fields(cls):
            hint = hints.get(f.name)
            if hint is None and not isinstance(f.type, str):
                hint = f.type
            yield f.name, str(f.metadata.get(tag_name, "")), hint
        return
    spec = _registered_spec(cls)
    if spec is None:
        raise NotARecordError(f"not a record type: {cls.__name__}")
    hints = spec.hints or _type_hints(cls)
    for name in spec.fields:
        yield name, spec.tags.get(name, {}).get(tag_name, ""), hints.get(name)


def _iter_raw_fields(record: Any, tag_name: str) -> Iterator[Tuple[str, str, Any, Any]]:
    for name, tag, hint in _iter_declared(type(record), tag_name):
        yield name, tag, getattr(record, name), hint


def _is_mappable(cls: type, name: str, tag: str) -> bool:
    if name.startswith("_"):
        return False
    override, _opts = parse_tag(tag)
    if override == SKIP:
        logger.debug("Field %s.%s suppressed by directive", cls.__name__, name)
        return False
    return True


def record_type_fields(cls: type, tag_name: str) -> List[Tuple[str, str]]:
    """Return (name, directive) for the mappable fields declared by a record type."""
    if not is_record_type(cls):
        raise NotARecordError(f"not a record type: {cls!r}")
    return [
        (name, tag)
        for name, tag, _hint in _iter_declared(cls, tag_name)
        if _is_mappable(cls, name, tag)
    ]


def all_field_values(record: Any) -> List[Any]:
    return [value for _name, _tag, value, _hint in _iter_raw_fields(record, "")]


def record_fields(record: Any, tag_name: str) -> List[FieldDescriptor]:
    """Return the mappable fields of `record` in declaration order.

    Hidden (underscore-prefixed) fields and fields whose directive key is
    ``-`` are skipped. Only the key segment is checked, so ``"-,omitempty"``
    suppresses the field as well.

    Args:
        record: A record instance (see `is_record`)
        tag_name: Metadata key under which directives are stored

    Returns:
        List of FieldDescriptor in source order
    """
    record_value(record)
    out: List[FieldDescriptor] = []
    cls = type(record)
    for name, tag, value, hint in _iter_raw_fields(record, tag_name):
        if not _is_mappable(cls, name, tag):
            continue
        out.append(FieldDescriptor(name=name, tag=tag, value=value, type_hint=hint))
    return out
