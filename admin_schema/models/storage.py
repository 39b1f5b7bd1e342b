"""
File-attachment framework.

Models:
    - StorageBlob: one stored file (key, filename, content type, size).
    - StorageAttachment: join row between any record and a blob
      (polymorphic via record_type + record_id).
    - StorageVariantRecord: processed variants of a blob (thumbnails, …).

Blob and variant rows are infrastructure and never shown by the admin;
attachments are described with a fixed schema.

Usage:
    class User(db.Model):
        ...

    has_one_attached(User, "avatar")      # User.avatar_attachment, User.with_attached_avatar()
    has_many_attached(User, "documents")  # User.documents_attachments
"""

from datetime import datetime, timezone

import sqlalchemy as sa
from sqlalchemy.orm import foreign, selectinload

from admin_schema.models import db
from admin_schema.models.scopes import SCOPE_MARKER

ATTACHED_SCOPE_PREFIX = "with_attached"


class StorageBlob(db.Model):
    __tablename__ = "storage_blobs"

    id = db.Column(db.Integer, primary_key=True)
    key = db.Column(db.String(255), nullable=False, unique=True)
    filename = db.Column(db.String(255), nullable=False)
    content_type = db.Column(db.String(255), nullable=True)
    metadata_json = db.Column("metadata", db.JSON, nullable=True)
    service_name = db.Column(db.String(60), nullable=False, default="local")
    byte_size = db.Column(db.BigInteger, nullable=False)
    checksum = db.Column(db.String(64), nullable=True)
    created_at = db.Column(
        db.DateTime(timezone=True), nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )


class StorageAttachment(db.Model):
    __tablename__ = "storage_attachments"
    __table_args__ = (
        db.UniqueConstraint(
            "record_type", "record_id", "name", "blob_id",
            name="uq_storage_attachments_record_blob",
        ),
    )

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    record_type = db.Column(db.String(120), nullable=False)
    record_id = db.Column(db.Integer, nullable=False, index=True)
    blob_id = db.Column(
        db.Integer,
        db.ForeignKey("storage_blobs.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    created_at = db.Column(
        db.DateTime(timezone=True), nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    blob = db.relationship("StorageBlob")

    @property
    def filename(self):
        return self.blob.filename if self.blob else None


class StorageVariantRecord(db.Model):
    __tablename__ = "storage_variant_records"
    __table_args__ = (
        db.UniqueConstraint("blob_id", "variation_digest", name="uq_storage_variant_digest"),
    )

    id = db.Column(db.Integer, primary_key=True)
    blob_id = db.Column(
        db.Integer,
        db.ForeignKey("storage_blobs.id", ondelete="CASCADE"),
        nullable=False,
    )
    variation_digest = db.Column(db.String(64), nullable=False)


# ── Declaration helpers ──────────────────────────────────────────────────


def _attachment_relationship(model, name, uselist):
    return db.relationship(
        StorageAttachment,
        primaryjoin=lambda: sa.and_(
            foreign(StorageAttachment.record_id) == model.id,
            StorageAttachment.record_type == model.__name__,
            StorageAttachment.name == name,
        ),
        uselist=uselist,
        viewonly=True,
    )


def _attached_scope(relationship_name):
    def loader(cls):
        return cls.query.options(selectinload(getattr(cls, relationship_name)))

    setattr(loader, SCOPE_MARKER, True)
    return classmethod(loader)


def has_one_attached(model, name):
    """Declare a single attached file ``<name>_attachment`` on *model*."""
    relationship_name = f"{name}_attachment"
    setattr(model, relationship_name, _attachment_relationship(model, name, uselist=False))
    setattr(model, f"{ATTACHED_SCOPE_PREFIX}_{name}", _attached_scope(relationship_name))
    return model


def has_many_attached(model, name):
    """Declare a collection of attached files ``<name>_attachments`` on *model*."""
    relationship_name = f"{name}_attachments"
    setattr(model, relationship_name, _attachment_relationship(model, name, uselist=True))
    setattr(model, f"{ATTACHED_SCOPE_PREFIX}_{name}", _attached_scope(relationship_name))
    return model
