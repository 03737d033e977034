"""Typed models shared by the mapping engine and its public facade."""
from __future__ import annotations

from .options import MappingOptions
from .result import DocumentMap, MappingResult, ResultKind

__all__ = ["DocumentMap", "MappingOptions", "MappingResult", "ResultKind"]
