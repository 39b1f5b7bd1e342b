"""
Admin Schema Builder
Audit domain model.

Models:
    - AuditLog: append-only trail of admin edits. Storage of the trail is
      handled elsewhere; the schema builder only needs the model's identity
      so it can leave it out of the derived schema.
"""

import json
from datetime import UTC, datetime

from admin_schema.models import db


class AuditLog(db.Model):
    """
    One row per audited change.

    ``audited_changes`` carries the old→new snapshot of the changed fields.
    """

    __tablename__ = "admin_audits"
    __table_args__ = (
        db.Index("idx_admin_audit_auditable", "auditable_type", "auditable_id"),
        db.Index("idx_admin_audit_created", "created_at"),
    )

    id = db.Column(db.Integer, primary_key=True)

    # Polymorphic record reference
    auditable_type = db.Column(db.String(120), nullable=False)
    auditable_id = db.Column(db.String(36), nullable=False)

    action = db.Column(
        db.String(20), nullable=False,
        comment="create | update | destroy",
    )
    user_type = db.Column(db.String(120), nullable=True)
    user_id = db.Column(db.String(36), nullable=True)
    version = db.Column(db.Integer, nullable=False, default=1)
    audited_changes = db.Column(db.Text, default="{}")

    created_at = db.Column(
        db.DateTime(timezone=True), nullable=False,
        default=lambda: datetime.now(UTC),
    )

    @property
    def changes(self) -> dict:
        """Deserialise *audited_changes* to a Python dict."""
        try:
            return json.loads(self.audited_changes or "{}")
        except (json.JSONDecodeError, TypeError):
            return {}

    def __repr__(self):
        return f"<AuditLog {self.id}: {self.action} on {self.auditable_type}/{self.auditable_id}>"
