"""
Named query scopes.

A scope is a reusable query filter declared on a model. Decorated
classmethods are picked up by the schema builder and offered to the UI as
filters.

Usage:
    class Post(db.Model):
        @scope
        def published(cls):
            return cls.query.filter_by(status="published")

    Post.published().all()
"""

SCOPE_MARKER = "__admin_scope__"


def scope(func):
    """Mark *func* as a named scope and expose it as a classmethod."""
    setattr(func, SCOPE_MARKER, True)
    return classmethod(func)


def is_scope(attr) -> bool:
    """True for class attributes created by :func:`scope`."""
    func = getattr(attr, "__func__", attr)
    return bool(getattr(func, SCOPE_MARKER, False))


def defined_scopes(model) -> list[str]:
    """Scope names declared on *model* and its bases, base classes first."""
    names: list[str] = []
    for klass in reversed(model.__mro__):
        for name, attr in vars(klass).items():
            if is_scope(attr) and name not in names:
                names.append(name)
    return names
