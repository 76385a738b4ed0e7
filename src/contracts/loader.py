"""Schema loading utilities for the engine contracts."""

from __future__ import annotations

import copy
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Tuple

import jsonschema

_SCHEMA_ROOT = Path(__file__).resolve().parent / "schemas"
_CATALOG_PATH = _SCHEMA_ROOT / "catalog.json"


@dataclass(frozen=True)
class SchemaDescriptor:
    """Descriptor describing a schema entry from the catalog."""

    contract: str
    version: str
    schema_id: str
    schema_path: str


_catalog_cache: Dict[str, SchemaDescriptor] | None = None
_schema_cache: Dict[Tuple[str, str], Dict[str, Any]] = {}
_compiled_cache: Dict[str, Any] = {}


def load_catalog() -> Dict[str, SchemaDescriptor]:
    """Load and cache the schema catalog."""

    global _catalog_cache
    if _catalog_cache is not None:
        return _catalog_cache

    raw_catalog = json.loads(_CATALOG_PATH.read_text("utf-8"))
    catalog: Dict[str, SchemaDescriptor] = {}
    for contract, payload in raw_catalog.items():
        catalog[contract] = SchemaDescriptor(
            contract=contract,
            version=payload["version"],
            schema_id=payload["schema_id"],
            schema_path=payload["schema_path"],
        )
    _catalog_cache = catalog
    return catalog


def get_descriptor(contract: str) -> SchemaDescriptor:
    """Return the :class:`SchemaDescriptor` for *contract*."""

    catalog = load_catalog()
    if contract not in catalog:
        raise KeyError(f"Unknown contract: {contract}")
    return catalog[contract]


def load_schema(descriptor: SchemaDescriptor) -> Dict[str, Any]:
    """Load the JSON schema described by *descriptor* from the local catalog."""

    if "://" in descriptor.schema_path:
        raise ValueError("Remote schema paths are not permitted")

    resolved = (_SCHEMA_ROOT / descriptor.schema_path).resolve()
    if not str(resolved).startswith(str(_SCHEMA_ROOT)):
        raise ValueError("Schema path escapes the schemas directory")

    cache_key = (descriptor.schema_id, descriptor.schema_path)
    if cache_key in _schema_cache:
        return copy.deepcopy(_schema_cache[cache_key])

    schema = json.loads(resolved.read_text("utf-8"))
    if "$id" in schema and schema["$id"] != descriptor.schema_id:
        raise ValueError(
            f"Schema id mismatch: catalog has {descriptor.schema_id!r}, schema has {schema['$id']!r}"
        )

    _schema_cache[cache_key] = schema
    return copy.deepcopy(schema)


def get_validator(contract: str) -> jsonschema.protocols.Validator:
    """Return a compiled, cached validator for *contract*."""

    if contract in _compiled_cache:
        return _compiled_cache[contract]

    schema_dict = load_schema(get_descriptor(contract))
    validator_cls = jsonschema.validators.validator_for(schema_dict)
    validator_cls.check_schema(schema_dict)
    validator = validator_cls(schema_dict)
    _compiled_cache[contract] = validator
    return validator


__all__ = [
    "SchemaDescriptor",
    "get_descriptor",
    "get_validator",
    "load_catalog",
    "load_schema",
]
