"""
Admin configuration store.

Models:
    - SchemaConfig: key/value JSON document owned by the admin
      (e.g. the last derived schema snapshot under key="schema").
"""

from admin_schema.models import db
from admin_schema.models.base import AdminRecord


class SchemaConfig(AdminRecord):
    """One JSON document per key."""

    __tablename__ = AdminRecord.admin_table_name("configs")

    id = db.Column(db.Integer, primary_key=True)
    key = db.Column(db.String(120), nullable=False, unique=True, index=True)
    value = db.Column(db.JSON, nullable=False, default=dict)

    def to_dict(self):
        return {
            "id": self.id,
            "key": self.key,
            "value": self.value,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
