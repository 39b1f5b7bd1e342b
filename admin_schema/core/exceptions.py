"""
Schema builder exception hierarchy.

Failures are isolated to the smallest unit that can fail:

    TargetUnresolvable        one relationship → treated as absent
    ModelIntrospectionFailed  one model        → omitted from the schema
    LoadFailure               whole model set  → propagates to the caller

Usage:
    from admin_schema.core.exceptions import LoadFailure

    try:
        schemas = load_schema()
    except LoadFailure as exc:
        logger.error("Schema unavailable: %s", exc)
"""


class SchemaError(Exception):
    """Base class for every schema builder error."""


class TargetUnresolvable(SchemaError):
    """Raised by a MetadataProvider when a relationship's target type cannot be resolved.

    Args:
        model: Name of the model declaring the relationship.
        relationship: Relationship name.
        reason: Optional detail from the persistence layer.
    """

    def __init__(self, model: str, relationship: str, reason: str | None = None) -> None:
        self.model = model
        self.relationship = relationship
        self.reason = reason
        msg = f"{model}.{relationship}: target type cannot be resolved"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg)


class ModelIntrospectionFailed(SchemaError):
    """Describes a model that was skipped because building its schema raised.

    Args:
        model: Name of the skipped model.
        cause: The original exception.
    """

    def __init__(self, model: str, cause: BaseException) -> None:
        self.model = model
        self.cause = cause
        super().__init__(f"Skipping model {model}: {type(cause).__name__}: {cause}")


class LoadFailure(SchemaError):
    """Raised when model definitions cannot be loaded. Never recovered locally."""
