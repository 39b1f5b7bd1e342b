"""
Fixed configuration shared by the schema builder.

- ColumnAccessType: how the UI may treat a column
- COLUMN_NAME_ACCESS_TYPES: per-column-name overrides
- UNIFIED_TYPES: SQLAlchemy type visit name → portable type tag
- DEFAULT_ACTIONS / DEFAULT_TABS / DEFAULT_SCOPE_TYPE: UI defaults
- ATTACHMENT_SCHEMA: fixed description of the attachment model
"""

from enum import Enum
from types import MappingProxyType

from admin_schema.schema.types import ColumnSchema, ModelSchema, ReferenceSpec


class ColumnAccessType(str, Enum):
    READ_WRITE = "read_write"
    READ_ONLY = "read_only"
    WRITE_ONLY = "write_only"
    HIDDEN = "hidden"


COLUMN_NAME_ACCESS_TYPES = {
    "id": ColumnAccessType.READ_ONLY.value,
    "created_at": ColumnAccessType.READ_ONLY.value,
    "updated_at": ColumnAccessType.READ_ONLY.value,
    "deleted_at": ColumnAccessType.READ_ONLY.value,
    "password_digest": ColumnAccessType.HIDDEN.value,
    "encrypted_password": ColumnAccessType.HIDDEN.value,
}

UNIFIED_TYPES = {
    # strings
    "string": "string",
    "unicode": "string",
    "text": "string",
    "unicode_text": "string",
    "varchar": "string",
    "nvarchar": "string",
    "char": "string",
    "nchar": "string",
    "clob": "string",
    "citext": "string",
    "uuid": "string",
    "enum": "string",
    # integers
    "integer": "integer",
    "small_integer": "integer",
    "big_integer": "integer",
    "int": "integer",
    "smallint": "integer",
    "bigint": "integer",
    # decimals
    "float": "float",
    "numeric": "float",
    "decimal": "float",
    "real": "float",
    "double": "float",
    "double_precision": "float",
    # others
    "boolean": "boolean",
    "date": "date",
    "datetime": "datetime",
    "timestamp": "datetime",
    "time": "time",
    "json": "json",
    "jsonb": "json",
    "large_binary": "binary",
    "blob": "binary",
    "binary": "binary",
}

DEFAULT_SCOPE_TYPE = "default"


def _frozen(**fields):
    """Read-only mapping; shared by every schema of every pass."""
    return MappingProxyType({
        key: _frozen(**value) if isinstance(value, dict) else value
        for key, value in fields.items()
    })


DEFAULT_ACTIONS = (
    _frozen(
        name="create",
        display_name="Create",
        action_type="default",
        apply_on="collection",
        visible=True,
        preferences={},
    ),
    _frozen(
        name="edit",
        display_name="Edit",
        action_type="default",
        apply_on="member",
        visible=True,
        preferences={},
    ),
    _frozen(
        name="remove",
        display_name="Remove",
        action_type="default",
        apply_on="member",
        visible=True,
        preferences={},
    ),
)

DEFAULT_TABS = (
    _frozen(
        name="details",
        display_name="Details",
        tab_type="default",
        visible=True,
        preferences={},
    ),
)


def _read_only(name, display_name, column_type, reference=None, virtual=False):
    return ColumnSchema(
        name=name,
        display_name=display_name,
        column_type=column_type,
        access_type=ColumnAccessType.READ_ONLY.value,
        reference=reference,
        virtual=virtual,
    )


ATTACHMENT_SCHEMA = ModelSchema(
    name="storage_attachment",
    slug="storage_attachments",
    table_name="storage_attachments",
    class_name="admin_schema.models.storage.StorageAttachment",
    primary_key="id",
    display_name="Attachments",
    display_column="filename",
    columns=(
        _read_only("id", "Id", "integer"),
        _read_only("path", "Path", "string", virtual=True),
        _read_only("name", "Name", "string"),
        _read_only(
            "record",
            "Record",
            "integer",
            reference=ReferenceSpec(
                name="record",
                model_name=None,
                reference_type="belongs_to",
                foreign_key="record_id",
                polymorphic=True,
            ),
        ),
        _read_only("filename", "Filename", "string", virtual=True),
        _read_only("created_at", "Created at", "datetime"),
    ),
    associations=(),
    scopes=(),
    actions=DEFAULT_ACTIONS,
    tabs=DEFAULT_TABS,
    visible=True,
)
