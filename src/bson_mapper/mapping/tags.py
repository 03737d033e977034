"""Field directive (tag) parsing.

A directive is the comma-separated string stored under the active tag name
in a field's metadata, e.g. ``"firstName,omitempty"``. The first segment is
the key override (empty means "use the declared field name", ``-`` means
"never map this field"); every further segment is a flag.

Recognised flags:
    omitempty: skip the field when its value is empty
    omitnested: use the raw value instead of mapping nested records
    flatten: merge a nested document into the enclosing one
    string: emit ``str(value)`` for values with their own text form

Unknown flags are kept but have no effect. Parsing never fails.
"""
from __future__ import annotations

from typing import Iterable, Tuple

__all__ = [
    "OMIT_EMPTY",
    "OMIT_NESTED",
    "FLATTEN",
    "STRING",
    "SKIP",
    "TagOptions",
    "parse_tag",
]

OMIT_EMPTY = "omitempty"
OMIT_NESTED = "omitnested"
FLATTEN = "flatten"
STRING = "string"
# Override name that suppresses a field entirely.
SKIP = "-"


class TagOptions(frozenset):
    """Set of flags parsed from a directive string."""

    def __new__(cls, options: Iterable[str] = ()) -> "TagOptions":
        return super().__new__(cls, options)

    def has(self, opt: str) -> bool:
        return opt in self

    def __repr__(self) -> str:
        return f"TagOptions({sorted(self)!r})"


def parse_tag(tag: str) -> Tuple[str, TagOptions]:
    """Split a directive string into its key override and flags.

    Empty segments after the first are preserved as the empty-string flag,
    so ``"name,,omitempty"`` yields ``{"", "omitempty"}``.

    Args:
        tag: Raw directive string, possibly empty.

    Returns:
        Tuple of (override name, TagOptions). ``""`` gives ``("", TagOptions())``.
    """
    name, *options = tag.split(",")
    return name, TagOptions(options)
