"""
MetadataProvider — the capability set the schema builder reads.

The derivation core never touches the ORM directly. Any persistence layer
can be described by implementing this interface; SQLAlchemy support lives in
``admin_schema.schema.sqlalchemy_provider``.

Model handles are opaque to the core (for SQLAlchemy they are the mapped
classes); they are only ever passed back to the provider.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from admin_schema.core.exceptions import TargetUnresolvable

logger = logging.getLogger(__name__)

BELONGS_TO = "belongs_to"
HAS_ONE = "has_one"
HAS_MANY = "has_many"
HAS_MANY_THROUGH = "has_many_through"
HAS_AND_BELONGS_TO_MANY = "has_and_belongs_to_many"

SINGULAR_KINDS = frozenset({BELONGS_TO, HAS_ONE})
COLLECTION_KINDS = frozenset({HAS_MANY, HAS_MANY_THROUGH, HAS_AND_BELONGS_TO_MANY})


@dataclass(frozen=True)
class ColumnInfo:
    """One storage column."""
    name: str
    native_type: str
    is_array: bool = False


@dataclass(frozen=True)
class RelationshipInfo:
    """One declared relationship.

    ``handle`` is provider-private data used by ``resolve_target``.
    """
    name: str
    kind: str
    foreign_key: str | None = None
    polymorphic: bool = False
    optional: bool = True
    handle: Any = field(default=None, compare=False, repr=False)

    @property
    def is_singular(self) -> bool:
        return self.kind in SINGULAR_KINDS

    @property
    def is_belongs_to(self) -> bool:
        return self.kind == BELONGS_TO


class MetadataProvider(ABC):
    """Read-only view over a model registry."""

    # ── Lifecycle ────────────────────────────────────────────────────────

    @abstractmethod
    def load(self) -> None:
        """Load every model definition. Errors propagate."""

    @abstractmethod
    def models(self) -> list:
        """All model handles, in registry order (abstract ones included)."""

    # ── Classification ───────────────────────────────────────────────────

    @abstractmethod
    def is_abstract(self, model) -> bool: ...

    @abstractmethod
    def is_admin_model(self, model) -> bool:
        """True for models of the admin's own persistence layer."""

    @abstractmethod
    def is_audit_model(self, model) -> bool: ...

    @abstractmethod
    def is_infrastructure_model(self, model) -> bool:
        """Migration bookkeeping, blob storage and blob variants."""

    @abstractmethod
    def is_attachment_model(self, model) -> bool: ...

    @abstractmethod
    def is_blob_model(self, model) -> bool: ...

    # ── Model metadata ───────────────────────────────────────────────────

    @abstractmethod
    def model_name(self, model) -> str:
        """Short type name, e.g. ``"BlogPost"``."""

    @abstractmethod
    def qualified_name(self, model) -> str: ...

    @abstractmethod
    def table_name(self, model) -> str: ...

    @abstractmethod
    def primary_key(self, model): ...

    @abstractmethod
    def columns(self, model) -> list[ColumnInfo]: ...

    @abstractmethod
    def relationships(self, model) -> list[RelationshipInfo]: ...

    @abstractmethod
    def resolve_target(self, relationship: RelationshipInfo):
        """Return the relationship's target model or raise TargetUnresolvable."""

    @abstractmethod
    def enums(self, model) -> dict[str, list[str]]:
        """Column name → enumerated value names."""

    @abstractmethod
    def scopes(self, model) -> list[str]: ...

    @abstractmethod
    def validation_rules(self, model, name: str) -> list:
        """Declared rule descriptors for a column or relationship name."""

    @abstractmethod
    def default_values(self, model) -> dict[str, Any]:
        """Column name → default value of a blank instance."""


def resolve_or_none(provider: MetadataProvider, model, relationship: RelationshipInfo):
    """Resolve a relationship target, or ``None`` when it cannot be resolved."""
    try:
        return provider.resolve_target(relationship)
    except TargetUnresolvable as exc:
        logger.debug("Ignoring relationship %s.%s: %s",
                     provider.model_name(model), relationship.name, exc)
        return None
