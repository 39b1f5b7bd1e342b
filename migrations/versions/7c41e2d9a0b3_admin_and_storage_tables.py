"""admin_and_storage_tables

Creates the tables owned by the admin itself and the attachment framework:
  - admin_configs            — JSON documents (schema snapshot, settings)
  - admin_audits             — audit trail of admin edits
  - storage_blobs            — stored files
  - storage_attachments      — record ↔ blob join rows (polymorphic)
  - storage_variant_records  — processed blob variants

Tables created conditionally so the migration also runs against databases
that already received them via db.create_all() in development.

Revision ID: 7c41e2d9a0b3
Revises:
Create Date: 2026-10-12 09:41:27.118205
"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect as sa_inspect


# revision identifiers, used by Alembic.
revision = '7c41e2d9a0b3'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    bind = op.get_bind()
    inspector = sa_inspect(bind)
    existing = set(inspector.get_table_names())

    # ── Admin-owned ──────────────────────────────────────────────────────
    if "admin_configs" not in existing:
        op.create_table(
            "admin_configs",
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("key", sa.String(length=120), nullable=False),
            sa.Column("value", sa.JSON(), nullable=False),
            sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
            sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
            sa.PrimaryKeyConstraint("id"),
        )
        op.create_index("ix_admin_configs_key", "admin_configs", ["key"], unique=True)

    if "admin_audits" not in existing:
        op.create_table(
            "admin_audits",
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("auditable_type", sa.String(length=120), nullable=False),
            sa.Column("auditable_id", sa.String(length=36), nullable=False),
            sa.Column("action", sa.String(length=20), nullable=False,
                      comment="create | update | destroy"),
            sa.Column("user_type", sa.String(length=120), nullable=True),
            sa.Column("user_id", sa.String(length=36), nullable=True),
            sa.Column("version", sa.Integer(), nullable=False),
            sa.Column("audited_changes", sa.Text(), nullable=True),
            sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
            sa.PrimaryKeyConstraint("id"),
        )
        op.create_index("idx_admin_audit_auditable", "admin_audits",
                        ["auditable_type", "auditable_id"])
        op.create_index("idx_admin_audit_created", "admin_audits", ["created_at"])

    # ── Attachments ──────────────────────────────────────────────────────
    if "storage_blobs" not in existing:
        op.create_table(
            "storage_blobs",
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("key", sa.String(length=255), nullable=False),
            sa.Column("filename", sa.String(length=255), nullable=False),
            sa.Column("content_type", sa.String(length=255), nullable=True),
            sa.Column("metadata", sa.JSON(), nullable=True),
            sa.Column("service_name", sa.String(length=60), nullable=False),
            sa.Column("byte_size", sa.BigInteger(), nullable=False),
            sa.Column("checksum", sa.String(length=64), nullable=True),
            sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
            sa.PrimaryKeyConstraint("id"),
            sa.UniqueConstraint("key"),
        )

    if "storage_attachments" not in existing:
        op.create_table(
            "storage_attachments",
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("name", sa.String(length=120), nullable=False),
            sa.Column("record_type", sa.String(length=120), nullable=False),
            sa.Column("record_id", sa.Integer(), nullable=False),
            sa.Column("blob_id", sa.Integer(), nullable=False),
            sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
            sa.ForeignKeyConstraint(["blob_id"], ["storage_blobs.id"], ondelete="CASCADE"),
            sa.PrimaryKeyConstraint("id"),
            sa.UniqueConstraint("record_type", "record_id", "name", "blob_id",
                                name="uq_storage_attachments_record_blob"),
        )
        op.create_index("ix_storage_attachments_record_id", "storage_attachments", ["record_id"])
        op.create_index("ix_storage_attachments_blob_id", "storage_attachments", ["blob_id"])

    if "storage_variant_records" not in existing:
        op.create_table(
            "storage_variant_records",
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("blob_id", sa.Integer(), nullable=False),
            sa.Column("variation_digest", sa.String(length=64), nullable=False),
            sa.ForeignKeyConstraint(["blob_id"], ["storage_blobs.id"], ondelete="CASCADE"),
            sa.PrimaryKeyConstraint("id"),
            sa.UniqueConstraint("blob_id", "variation_digest", name="uq_storage_variant_digest"),
        )


def downgrade():
    op.drop_table("storage_variant_records")
    op.drop_index("ix_storage_attachments_blob_id", table_name="storage_attachments")
    op.drop_index("ix_storage_attachments_record_id", table_name="storage_attachments")
    op.drop_table("storage_attachments")
    op.drop_table("storage_blobs")
    op.drop_index("idx_admin_audit_created", table_name="admin_audits")
    op.drop_index("idx_admin_audit_auditable", table_name="admin_audits")
    op.drop_table("admin_audits")
    op.drop_index("ix_admin_configs_key", table_name="admin_configs")
    op.drop_table("admin_configs")
