"""
Schema records produced by one derivation pass.

All records are immutable value objects. ``ReferenceSpec.model_name`` and
``AssociationSchema.model_name`` are name-based back references, resolved by
the consumer against the final model list.
"""

from __future__ import annotations

import enum
import uuid
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any


def _plain(value):
    """Fresh dicts/lists for a nested read-only structure."""
    if isinstance(value, Mapping):
        return {key: _plain(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(item) for item in value]
    return value


def json_value(value):
    """JSON-native form of a column default value."""
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, (Decimal, uuid.UUID)):
        return str(value)
    if isinstance(value, enum.Enum):
        return value.name
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value).hex()
    if isinstance(value, (set, frozenset)):
        return [json_value(item) for item in sorted(value, key=repr)]
    return _plain(value)


# ── Validators ───────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Required:
    def to_dict(self) -> dict:
        return {"required": True}


@dataclass(frozen=True)
class Includes:
    values: tuple

    def to_dict(self) -> dict:
        return {"includes": list(self.values)}


@dataclass(frozen=True)
class Format:
    source: str
    flags: str = ""

    def to_dict(self) -> dict:
        return {"format": {"source": self.source, "flags": self.flags}}


@dataclass(frozen=True)
class Length:
    bounds: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {"length": dict(self.bounds)}


@dataclass(frozen=True)
class Numeric:
    constraints: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {"numeric": dict(self.constraints)}


ValidatorSpec = Required | Includes | Format | Length | Numeric


# ── Columns & relationships ──────────────────────────────────────────────


@dataclass(frozen=True)
class ReferenceSpec:
    name: str
    model_name: str | None
    reference_type: str
    foreign_key: str | None
    polymorphic: bool = False

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "model_name": self.model_name,
            "reference_type": self.reference_type,
            "foreign_key": self.foreign_key,
            "polymorphic": self.polymorphic,
        }


@dataclass(frozen=True)
class ColumnSchema:
    name: str
    display_name: str
    column_type: str
    access_type: str
    is_array: bool = False
    default_value: Any = None
    validators: tuple = ()
    reference: ReferenceSpec | None = None
    format: dict = field(default_factory=dict)
    virtual: bool = False

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "display_name": self.display_name,
            "column_type": self.column_type,
            "is_array": self.is_array,
            "access_type": self.access_type,
            "default_value": json_value(self.default_value),
            "validators": [v.to_dict() for v in self.validators],
            "reference": self.reference.to_dict() if self.reference else None,
            "format": _plain(self.format),
            "virtual": self.virtual,
        }


@dataclass(frozen=True)
class AssociationSchema:
    name: str
    display_name: str
    slug: str
    model_name: str
    foreign_key: str | None
    polymorphic: bool = False
    visible: bool = True

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "display_name": self.display_name,
            "slug": self.slug,
            "model_name": self.model_name,
            "foreign_key": self.foreign_key,
            "polymorphic": self.polymorphic,
            "visible": self.visible,
        }


@dataclass(frozen=True)
class ScopeSchema:
    name: str
    display_name: str
    scope_type: str
    visible: bool = True
    preferences: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "display_name": self.display_name,
            "scope_type": self.scope_type,
            "visible": self.visible,
            "preferences": _plain(self.preferences),
        }


# ── Model ────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class ModelSchema:
    name: str
    slug: str
    table_name: str
    class_name: str
    primary_key: str | tuple | None
    display_name: str
    display_column: str | None
    columns: tuple = ()
    associations: tuple = ()
    scopes: tuple = ()
    actions: tuple = ()
    tabs: tuple = ()
    visible: bool = True

    def column(self, name: str) -> ColumnSchema | None:
        for col in self.columns:
            if col.name == name:
                return col
        return None

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "slug": self.slug,
            "table_name": self.table_name,
            "class_name": self.class_name,
            "primary_key": list(self.primary_key) if isinstance(self.primary_key, tuple) else self.primary_key,
            "display_name": self.display_name,
            "display_column": self.display_column,
            "columns": [c.to_dict() for c in self.columns],
            "associations": [a.to_dict() for a in self.associations],
            "scopes": [s.to_dict() for s in self.scopes],
            "actions": _plain(self.actions),
            "tabs": _plain(self.tabs),
            "visible": self.visible,
        }
