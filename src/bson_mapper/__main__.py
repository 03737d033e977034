"""Main CLI entry point for bson-mapper.

This module provides a command-line interface using Typer to inspect how a
record type maps to a document:

1.  ``map``: load a JSON object, build an instance of the given record type
    from it, map the instance and print the resulting document as JSON.
2.  ``fields``: list the mappable fields of a record type together with
    their effective document keys and directive flags.

Record types are addressed as ``package.module:ClassName``.
"""
from __future__ import annotations

import importlib
import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional

import typer
from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, ValidationError

# Load .env file if present (before any config access)
env_file = find_dotenv(usecwd=True)
if env_file:
    load_dotenv(env_file)

from .config import get_settings
from .mapper import convert_record_to_document, get_default_tag_name
from .mapping.fields import is_record_type, record_type_fields
from .mapping.tags import parse_tag
from .models.options import MappingOptions

app = typer.Typer(help="Map records to document-store documents")
logger = logging.getLogger(__name__)


def _load_record_type(target: str) -> type:
    """Import ``module:ClassName`` and check it is a record type."""
    module_name, sep, attr = target.partition(":")
    if not sep or not module_name or not attr:
        raise typer.BadParameter(f"expected MODULE:CLASS, got {target!r}")
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise typer.BadParameter(f"cannot import {module_name}: {e}") from e
    obj: Any = module
    for part in attr.split("."):
        obj = getattr(obj, part, None)
        if obj is None:
            raise typer.BadParameter(f"{module_name} has no attribute {attr}")
    if not is_record_type(obj):
        raise typer.BadParameter(f"{target} is not a dataclass, pydantic model or registered record")
    return obj


def _read_payload(path: Optional[Path]) -> Any:
    raw = sys.stdin.read() if path is None or str(path) == "-" else path.read_text(encoding="utf-8")
    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        raise typer.BadParameter(f"input is not valid JSON: {e}") from e


def _build_record(cls: type, payload: Any) -> Any:
    """Instantiate `cls` from a decoded JSON object.

    Pydantic models are validated (nested models included); other record
    types are constructed with the top-level keys as keyword arguments.
    """
    if not isinstance(payload, dict):
        raise typer.BadParameter("input must be a JSON object")
    if issubclass(cls, BaseModel):
        try:
            return cls.model_validate(payload)
        except ValidationError as e:
            raise typer.BadParameter(f"input does not match {cls.__name__}: {e}") from e
    try:
        return cls(**payload)
    except TypeError as e:
        raise typer.BadParameter(f"cannot construct {cls.__name__}: {e}") from e


@app.callback()
def main() -> None:  # pragma: no cover - simple callback
    """bson-mapper CLI.

    Use a subcommand like 'map' or 'fields'.
    """
    settings = get_settings()
    logging.basicConfig(level=settings.LOG_LEVEL)


@app.command("map", help="Map a JSON object through a record type and print the document.")
def map_command(
    record_type: str = typer.Argument(..., help="Record type as MODULE:CLASS"),
    input_file: Optional[Path] = typer.Option(
        None, "--input", "-i", help="JSON file to read (defaults to stdin)"
    ),
    tag_name: Optional[str] = typer.Option(
        None, help="Tag name holding field directives (defaults to BSON_MAPPER_DEFAULT_TAG_NAME)"
    ),
    use_id: bool = typer.Option(
        False,
        "--use-id/--no-use-id",
        help="Map a record with a non-empty _id field to {_id: value} only.",
    ),
    remove_id: bool = typer.Option(
        False, "--remove-id/--no-remove-id", help="Drop _id fields at every nesting level."
    ),
    generate_filter: bool = typer.Option(
        False,
        "--filter/--no-filter",
        help="Omit every empty field, as if all fields were tagged omitempty.",
    ),
) -> None:
    cls = _load_record_type(record_type)
    record = _build_record(cls, _read_payload(input_file))
    opts = MappingOptions(
        use_id_if_available=use_id,
        remove_id=remove_id,
        generate_filter_or_patch=generate_filter,
    )
    document = convert_record_to_document(record, opts, tag_name=tag_name)
    if document is None:
        logger.debug("%s mapped to an empty document", cls.__name__)
    typer.echo(json.dumps(document, default=str, indent=2, ensure_ascii=False))


@app.command("fields", help="List the mappable fields of a record type.")
def fields_command(
    record_type: str = typer.Argument(..., help="Record type as MODULE:CLASS"),
    tag_name: Optional[str] = typer.Option(None, help="Tag name holding field directives"),
) -> None:
    cls = _load_record_type(record_type)
    effective_tag = tag_name or get_default_tag_name()
    for name, tag in record_type_fields(cls, effective_tag):
        override, opts = parse_tag(tag)
        flags = ",".join(sorted(opts))
        typer.echo(f"{name}\t{override or name}\t{flags}")


if __name__ == "__main__":  # pragma: no cover
    app()
