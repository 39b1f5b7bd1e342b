"""
AdminRecord — Abstract base class for the admin's own tables.

Every table the admin itself persists (stored schema snapshots, settings)
inherits from AdminRecord instead of db.Model directly. The schema builder
drops all AdminRecord descendants so the admin never describes itself.
"""

from datetime import datetime, timezone

from admin_schema.models import db


class AdminRecord(db.Model):
    """Abstract base for admin-owned tables."""
    __abstract__ = True

    created_at = db.Column(
        db.DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at = db.Column(
        db.DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    @classmethod
    def admin_table_name(cls, name):
        """Prefix used for every admin-owned table."""
        return f"admin_{name}"
