"""
Declarative validation rules for model columns.

Rules are plain descriptors; they are read by the admin (to render client-side
validation) and never enforced on flush here.

Attach them per column:

    title = db.Column(db.String(200), info={"validators": [Presence(), Length(maximum=200)]})

or per model, keyed by column or relationship name:

    __validators__ = {
        "email": [Format(re.compile(r"\\A[^@\\s]+@[^@\\s]+\\Z"))],
        "avatar_attachment": [Presence()],
    }
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Presence:
    """Value must be present."""


@dataclass(frozen=True)
class Inclusion:
    """Value must be one of ``values``."""
    values: tuple

    def __init__(self, values):
        object.__setattr__(self, "values", tuple(values))


@dataclass(frozen=True)
class Format:
    """Value must match ``pattern`` (a string or compiled ``re`` pattern)."""
    pattern: Any

    @property
    def regex(self) -> re.Pattern:
        if isinstance(self.pattern, re.Pattern):
            return self.pattern
        return re.compile(self.pattern)


@dataclass(frozen=True)
class Length:
    """Length bounds. ``is_`` is an exact length."""
    minimum: int | None = None
    maximum: int | None = None
    is_: int | None = None

    def options(self) -> dict:
        bounds = {"minimum": self.minimum, "maximum": self.maximum, "is": self.is_}
        return {k: v for k, v in bounds.items() if v is not None}


@dataclass(frozen=True)
class Numericality:
    """Numeric constraints, e.g. ``Numericality(only_integer=True, greater_than=0)``."""
    options: dict = field(default_factory=dict)

    def __init__(self, **options):
        object.__setattr__(self, "options", dict(options))


def declared_rules(model, name: str) -> list:
    """Rules listed for *name* in ``__validators__`` across the model's MRO."""
    rules: list = []
    for klass in reversed(model.__mro__):
        mapping = vars(klass).get("__validators__") or {}
        rules.extend(mapping.get(name, ()))
    return rules
