"""
SQLAlchemy implementation of MetadataProvider.

Reads mapped classes below a declarative base (``db.Model`` by default):

    columns         Mapper.column_attrs, inherited tables included
    relationships   Mapper.relationships (direction + uselist → kind)
    enums           sqlalchemy.Enum columns
    scopes          @scope classmethods
    validators      Column.info["validators"] and __validators__
"""

from __future__ import annotations

import enum
import importlib
import logging
import pkgutil

import sqlalchemy as sa
from sqlalchemy import exc as sa_exc
from sqlalchemy.orm import configure_mappers
from sqlalchemy.orm.interfaces import MANYTOMANY, MANYTOONE, ONETOMANY

from admin_schema.core.exceptions import TargetUnresolvable
from admin_schema.models import db
from admin_schema.models.audit import AuditLog
from admin_schema.models.base import AdminRecord
from admin_schema.models.scopes import defined_scopes
from admin_schema.models.storage import StorageAttachment, StorageBlob, StorageVariantRecord
from admin_schema.models.validation import declared_rules
from admin_schema.schema.provider import (
    BELONGS_TO,
    HAS_AND_BELONGS_TO_MANY,
    HAS_MANY,
    HAS_MANY_THROUGH,
    HAS_ONE,
    ColumnInfo,
    MetadataProvider,
    RelationshipInfo,
)

logger = logging.getLogger(__name__)

MIGRATION_TABLES = frozenset({"alembic_version"})


def native_type_name(type_) -> str:
    """SQLAlchemy visit name of *type_*, unwrapping decorators and arrays."""
    if isinstance(type_, sa.types.TypeDecorator):
        type_ = type_.impl
    if isinstance(type_, sa.ARRAY):
        type_ = type_.item_type
    name = getattr(type_, "__visit_name__", None) or type(type_).__name__
    return name.lower()


def storage_columns(model):
    """(attribute key, Column) for every mapped table column, inherited tables included.

    Joined-table inheritance maps one attribute onto several columns (the
    shared primary key); each column name is reported once.
    """
    seen = set()
    result = []
    for prop in sa.inspect(model).column_attrs:
        for column in prop.columns:
            if not isinstance(column, sa.Column) or column.name in seen:
                continue
            seen.add(column.name)
            result.append((prop.key, column))
    return result


def _descendants(cls):
    for sub in cls.__subclasses__():
        yield sub
        yield from _descendants(sub)


class SQLAlchemyMetadataProvider(MetadataProvider):
    """MetadataProvider over the mapped subclasses of a declarative base.

    Args:
        base: Declarative base whose subclasses form the registry.
        modules: Module or package names imported by ``load()``; packages
                 are walked recursively.
        excluded: Extra class names treated as infrastructure.
    """

    def __init__(self, base=None, modules=(), excluded=()):
        self.base = base if base is not None else db.Model
        self.modules = tuple(modules)
        self.excluded = frozenset(excluded)

    # ── Lifecycle ────────────────────────────────────────────────────────

    def load(self):
        for module_name in self.modules:
            module = importlib.import_module(module_name)
            if hasattr(module, "__path__"):
                for info in pkgutil.walk_packages(module.__path__, prefix=f"{module.__name__}."):
                    importlib.import_module(info.name)
        configure_mappers()
        logger.debug("Loaded %d model classes from %s", len(self.models()), self.modules or "(preloaded)")

    def models(self):
        ordered = []
        for cls in _descendants(self.base):
            if cls not in ordered:
                ordered.append(cls)
        return ordered

    # ── Classification ───────────────────────────────────────────────────

    def is_abstract(self, model):
        if model.__dict__.get("__abstract__", False):
            return True
        return sa.inspect(model, raiseerr=False) is None

    def is_admin_model(self, model):
        return issubclass(model, AdminRecord)

    def is_audit_model(self, model):
        return model is AuditLog

    def is_infrastructure_model(self, model):
        if model in (StorageBlob, StorageVariantRecord):
            return True
        if model.__name__ in self.excluded:
            return True
        return self.table_name(model) in MIGRATION_TABLES

    def is_attachment_model(self, model):
        return model is StorageAttachment

    def is_blob_model(self, model):
        return model is StorageBlob

    # ── Model metadata ───────────────────────────────────────────────────

    def model_name(self, model):
        return model.__name__

    def qualified_name(self, model):
        return f"{model.__module__}.{model.__qualname__}"

    def table_name(self, model):
        return sa.inspect(model).local_table.fullname

    def primary_key(self, model):
        names = [col.name for col in sa.inspect(model).primary_key]
        if not names:
            return None
        return names[0] if len(names) == 1 else tuple(names)

    def columns(self, model):
        return [
            ColumnInfo(
                name=column.name,
                native_type=native_type_name(column.type),
                is_array=isinstance(column.type, sa.ARRAY),
            )
            for _, column in storage_columns(model)
        ]

    def relationships(self, model):
        result = []
        for prop in sa.inspect(model).relationships:
            kind = self._kind(prop)
            result.append(
                RelationshipInfo(
                    name=prop.key,
                    kind=kind,
                    foreign_key=self._foreign_key(prop),
                    polymorphic=bool(prop.info.get("polymorphic", False)),
                    optional=self._optional(prop),
                    handle=prop,
                )
            )
        return result

    def resolve_target(self, relationship):
        prop = relationship.handle
        try:
            return prop.mapper.class_
        except (sa_exc.InvalidRequestError, sa_exc.ArgumentError, NameError) as exc:
            raise TargetUnresolvable(prop.parent.class_.__name__, relationship.name, str(exc)) from exc

    def enums(self, model):
        return {
            column.name: list(column.type.enums)
            for _, column in storage_columns(model)
            if isinstance(column.type, sa.Enum)
        }

    def scopes(self, model):
        return defined_scopes(model)

    def validation_rules(self, model, name):
        rules = []
        for _, column in storage_columns(model):
            if column.name == name:
                rules.extend(column.info.get("validators", ()))
        rules.extend(declared_rules(model, name))
        return rules

    def default_values(self, model):
        instance = model()
        values = {}
        for key, column in storage_columns(model):
            value = getattr(instance, key, None)
            if value is None and column.default is not None and column.default.is_scalar:
                value = column.default.arg
            if isinstance(value, enum.Enum):
                value = value.name
            values[column.name] = value
        return values

    # ── Helpers ──────────────────────────────────────────────────────────

    def _kind(self, prop):
        if prop.direction is MANYTOONE:
            return BELONGS_TO
        if prop.direction is ONETOMANY:
            return HAS_MANY if prop.uselist else HAS_ONE
        if prop.direction is MANYTOMANY:
            return HAS_MANY_THROUGH if self._is_mapped_table(prop.secondary) else HAS_AND_BELONGS_TO_MANY
        return HAS_MANY

    def _is_mapped_table(self, table):
        if table is None:
            return False
        return any(
            sa.inspect(cls).local_table is table
            for cls in self.models()
            if not self.is_abstract(cls)
        )

    @staticmethod
    def _foreign_key(prop):
        pairs = list(prop.local_remote_pairs or ())
        if not pairs:
            return None
        local, remote = pairs[0]
        return local.name if prop.direction is MANYTOONE else remote.name

    @staticmethod
    def _optional(prop):
        if "optional" in prop.info:
            return bool(prop.info["optional"])
        if prop.direction is not MANYTOONE:
            return True
        return any(col.nullable for col in prop.local_columns)
