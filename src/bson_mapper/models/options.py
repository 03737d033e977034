"""Pydantic model for the switches that drive record-to-document mapping.

A single `MappingOptions` instance is threaded unchanged through every
recursive call of one mapping run. The model is frozen so no step of the
engine can alter the options another step observes.
"""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class MappingOptions(BaseModel):
    """Options controlling how a record is mapped to a document map.

    All switches default to False, which is also what passing `None` instead
    of an options instance means.

    The camel-case names (`UseIDifAvailable`, `RemoveID`,
    `GenerateFilterOrPatch`) are accepted as aliases so option payloads can be
    loaded from existing configuration.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    # Return {"_id": value} for a record whose identifier field is non-empty,
    # ignoring every other field of that record. Applies per record, so a
    # nested record with its own identifier collapses the same way.
    use_id_if_available: bool = Field(default=False, alias="UseIDifAvailable")
    # Drop "_id" entries at every nesting level.
    remove_id: bool = Field(default=False, alias="RemoveID")
    # Treat every field as if it were tagged omitempty (filters and patches).
    # Applied after the two identifier switches above.
    generate_filter_or_patch: bool = Field(default=False, alias="GenerateFilterOrPatch")


__all__ = ["MappingOptions"]
