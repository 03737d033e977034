"""Mapping state container threaded through recursive record mapping.

This module defines the MappingContext dataclass carrying everything a
recursive call needs besides the value being mapped. Using a dedicated
context object keeps the recursion signatures small and makes explicit that
nested records are mapped with exactly the same settings as their parent.

State Fields:
    tag_name: Metadata key under which field directives are looked up
    opts: MappingOptions applied at every nesting level

Design Note:
    The context is frozen; one instance is shared by every recursion level of
    a single mapping call and never modified along the way.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..models.options import MappingOptions

__all__ = ["MappingContext"]


@dataclass(frozen=True)
class MappingContext:
    tag_name: str
    opts: MappingOptions = field(default_factory=MappingOptions)

    @classmethod
    def build(cls, tag_name: str, opts: Optional[MappingOptions] = None) -> "MappingContext":
        return cls(tag_name=tag_name, opts=opts if opts is not None else MappingOptions())
