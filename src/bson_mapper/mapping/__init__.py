"""Internal mapping subpackage for decomposed record-to-document logic.

This package contains the implementation of record to document-map mapping,
decomposed into focused, single-responsibility modules. All functions within
this package are pure (no I/O) and deterministic.

The public API lives in the top-level `mapper.py` facade. Callers should not
import directly from this package unless accessing internal helpers for
testing purposes.

Modules:
    orchestrator: Recursive per-record mapping pipeline
    fields: Record detection, field enumeration and the record registry
    values: Value shape classification and emptiness rules
    tags: Field directive parsing
    mapping_context: Tag name and options shared across recursion levels

Design Invariants:
    - Records are never mutated
    - Identical inputs always produce equal documents
    - An empty mapping result is reported as None, never as {}
"""
from __future__ import annotations

from . import fields as fields  # noqa: F401
from . import tags as tags  # noqa: F401
from . import values as values  # noqa: F401

__all__ = ["fields", "tags", "values"]
