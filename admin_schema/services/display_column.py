"""Pick the column best suited as a record's human-readable label."""

import re

from admin_schema.schema.constants import UNIFIED_TYPES
from admin_schema.schema.provider import MetadataProvider

PREFERRED_COLUMNS = (
    "display_name",
    "name",
    "full_name",
    "fullname",
    "title",
    "label",
    "email",
    "username",
    "login",
    "subject",
    "code",
)

_LABEL_SUFFIX = re.compile(r"(name|title)$", re.IGNORECASE)


def find_display_column(provider: MetadataProvider, model):
    """Well-known label column, else any ``*name``/``*title`` string column, else the primary key."""
    string_columns = [
        col.name
        for col in provider.columns(model)
        if not col.is_array and UNIFIED_TYPES.get(col.native_type) == "string"
    ]
    lowered = {name.lower(): name for name in string_columns}

    for candidate in PREFERRED_COLUMNS:
        if candidate in lowered:
            return lowered[candidate]

    for name in string_columns:
        if _LABEL_SUFFIX.search(name):
            return name

    primary_key = provider.primary_key(model)
    if isinstance(primary_key, tuple):
        return primary_key[0]
    return primary_key
