"""
Model-to-schema derivation.

Pipeline per pass:

    ModelLoader.enumerate()              eligible models, registry order
      → try_build_model_schema(model)     one ModelSchema, or None on failure
          fetch_columns                   reference columns ++ table columns
          fetch_associations              collection relationships
          fetch_scopes                    named query scopes
      → list[ModelSchema]

A failure while building one model never affects another: the model is
logged and left out. Only LoadFailure escapes ``derive_schema``.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor

from admin_schema.core.exceptions import ModelIntrospectionFailed
from admin_schema.models.storage import ATTACHED_SCOPE_PREFIX
from admin_schema.schema.constants import (
    ATTACHMENT_SCHEMA,
    COLUMN_NAME_ACCESS_TYPES,
    DEFAULT_ACTIONS,
    DEFAULT_SCOPE_TYPE,
    DEFAULT_TABS,
    UNIFIED_TYPES,
    ColumnAccessType,
)
from admin_schema.schema.loader import ModelLoader
from admin_schema.schema.provider import (
    BELONGS_TO,
    COLLECTION_KINDS,
    HAS_ONE,
    MetadataProvider,
    RelationshipInfo,
    resolve_or_none,
)
from admin_schema.schema.types import (
    AssociationSchema,
    ColumnSchema,
    ModelSchema,
    ReferenceSpec,
    ScopeSchema,
)
from admin_schema.schema.validators import fetch_validators
from admin_schema.services.display_column import find_display_column
from admin_schema.utils.inflector import humanize, pluralize, slugify_model, titleize, underscore

logger = logging.getLogger(__name__)


def derive_schema(
    provider: MetadataProvider,
    loader: ModelLoader | None = None,
    *,
    display_column=find_display_column,
    workers: int = 1,
) -> list[ModelSchema]:
    """Derive the schema of every eligible model.

    Args:
        provider: Metadata source.
        loader: Loader to enumerate with; a fresh one is created when omitted.
        display_column: ``(provider, model) -> column name`` heuristic.
        workers: Build models on a thread pool when greater than 1.

    Raises:
        LoadFailure: model definitions could not be loaded.
    """
    loader = loader or ModelLoader(provider)
    models = loader.enumerate()

    def build(model):
        return try_build_model_schema(provider, model, display_column=display_column)

    if workers > 1 and len(models) > 1:
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="schema") as pool:
            results = list(pool.map(build, models))
    else:
        results = [build(model) for model in models]

    schemas = [schema for schema in results if schema is not None]
    logger.info("Derived schema for %d of %d models", len(schemas), len(models))
    return schemas


def try_build_model_schema(provider, model, *, display_column=find_display_column) -> ModelSchema | None:
    """Build one model's schema, or return ``None`` when introspection fails."""
    try:
        return build_model_schema(provider, model, display_column=display_column)
    except Exception as exc:
        if not provider.is_audit_model(model):
            failure = ModelIntrospectionFailed(provider.model_name(model), exc)
            logger.error("%s", failure, exc_info=exc, extra={"model": failure.model, "stage": "build"})
        return None


def schema_identifier(provider, model) -> str:
    """Short model name, or the qualified name when another model shares it."""
    name = provider.model_name(model)
    for other in provider.models():
        if other is not model and not provider.is_abstract(other) and provider.model_name(other) == name:
            return provider.qualified_name(model)
    return name


def build_model_schema(provider, model, *, display_column=find_display_column) -> ModelSchema:
    if provider.is_attachment_model(model):
        return ATTACHMENT_SCHEMA

    model_name = provider.model_name(model)
    identifier = schema_identifier(provider, model)

    return ModelSchema(
        name=underscore(identifier),
        slug=slugify_model(identifier),
        table_name=provider.table_name(model),
        class_name=provider.qualified_name(model),
        primary_key=provider.primary_key(model),
        display_name=pluralize(titleize(model_name)),
        display_column=display_column(provider, model),
        columns=fetch_columns(provider, model),
        associations=fetch_associations(provider, model),
        scopes=fetch_scopes(provider, model),
        actions=DEFAULT_ACTIONS,
        tabs=DEFAULT_TABS,
        visible=True,
    )


# ── Scopes ───────────────────────────────────────────────────────────────


def fetch_scopes(provider, model) -> tuple:
    return tuple(
        ScopeSchema(
            name=name,
            display_name=humanize(name),
            scope_type=DEFAULT_SCOPE_TYPE,
            visible=True,
            preferences={},
        )
        for name in provider.scopes(model)
        if not name.startswith(ATTACHED_SCOPE_PREFIX)
    )


# ── Columns ──────────────────────────────────────────────────────────────


def fetch_columns(provider, model) -> tuple:
    default_attrs = provider.default_values(model)

    reference_columns = fetch_reference_columns(provider, model, default_attrs)
    claimed = {col.name for col in reference_columns}

    table_columns = [
        build_table_column(provider, model, column, default_attrs)
        for column in provider.columns(model)
        if column.name not in claimed
    ]

    return tuple(reference_columns) + tuple(table_columns)


def build_table_column(provider, model, column, default_attrs) -> ColumnSchema:
    is_enum = column.name in provider.enums(model)

    return ColumnSchema(
        name=column.name,
        display_name=humanize(column.name),
        column_type="string" if is_enum else UNIFIED_TYPES.get(column.native_type, column.native_type),
        is_array=column.is_array,
        access_type=COLUMN_NAME_ACCESS_TYPES.get(column.name, ColumnAccessType.READ_WRITE.value),
        default_value=default_attrs.get(column.name),
        validators=fetch_validators(provider, model, column.name),
        reference=None,
        format={},
        virtual=False,
    )


def fetch_reference_columns(provider, model, default_attrs) -> list[ColumnSchema]:
    columns = []
    for rel in provider.relationships(model):
        if not rel.is_singular:
            continue

        target = resolve_or_none(provider, model, rel)
        if target is None or provider.is_blob_model(target):
            continue

        column = build_reference_column(provider, model, rel, target, default_attrs)
        # Two relationships over the same foreign key describe one column.
        if all(existing.name != column.name for existing in columns):
            columns.append(column)
    return columns


def build_reference_column(provider, model, rel: RelationshipInfo, target, default_attrs) -> ColumnSchema:
    column_name = rel.foreign_key if rel.is_belongs_to else rel.name
    is_attachment = provider.is_attachment_model(target)
    if rel.is_belongs_to or is_attachment:
        access_type = ColumnAccessType.READ_WRITE.value
    else:
        access_type = ColumnAccessType.READ_ONLY.value

    return ColumnSchema(
        name=column_name,
        display_name=humanize(column_name),
        column_type="file" if is_attachment else "integer",
        is_array=False,
        access_type=access_type,
        default_value=default_attrs.get(column_name),
        validators=fetch_validators(provider, model, column_name, rel),
        reference=ReferenceSpec(
            name=rel.name,
            model_name=underscore(schema_identifier(provider, target)),
            reference_type=BELONGS_TO if rel.is_belongs_to else HAS_ONE,
            foreign_key=rel.foreign_key,
            polymorphic=rel.polymorphic or is_attachment,
        ),
        format={},
        virtual=False,
    )


# ── Associations ─────────────────────────────────────────────────────────


def fetch_associations(provider, model) -> tuple:
    associations = []
    for rel in provider.relationships(model):
        if rel.kind not in COLLECTION_KINDS:
            continue

        target = resolve_or_none(provider, model, rel)
        if target is None or provider.is_blob_model(target):
            continue

        associations.append(
            AssociationSchema(
                name=rel.name,
                display_name=humanize(rel.name),
                slug=underscore(rel.name),
                model_name=underscore(schema_identifier(provider, target)),
                foreign_key=rel.foreign_key,
                polymorphic=rel.polymorphic or provider.is_attachment_model(target),
                visible=True,
            )
        )
    return tuple(associations)
