"""
Schema service — runs the derivation for a Flask application.

Each app gets one SQLAlchemyMetadataProvider + ModelLoader pair (kept in
``app.extensions``), so model loading happens once per process no matter how
many callers ask for the schema.

Usage:
    from admin_schema.services.schema_service import load_schema, schema_as_dicts

    schemas = load_schema()                 # inside an app context
    payload = schema_as_dicts(schemas)
"""

import logging
import time

from flask import current_app

from admin_schema.models import db
from admin_schema.models.config import SchemaConfig
from admin_schema.schema.builder import derive_schema
from admin_schema.schema.loader import ModelLoader
from admin_schema.schema.sqlalchemy_provider import SQLAlchemyMetadataProvider

logger = logging.getLogger(__name__)

EXTENSION_KEY = "admin_schema"
SNAPSHOT_KEY = "schema"


def init_schema_loader(app):
    """Attach the provider/loader pair for *app*."""
    provider = SQLAlchemyMetadataProvider(
        modules=app.config.get("SCHEMA_MODEL_MODULES", ()),
        excluded=app.config.get("SCHEMA_EXCLUDED_MODELS", ()),
    )
    app.extensions[EXTENSION_KEY] = ModelLoader(provider)
    return app.extensions[EXTENSION_KEY]


def get_loader(app=None) -> ModelLoader:
    app = app or current_app
    loader = app.extensions.get(EXTENSION_KEY)
    if loader is None:
        loader = init_schema_loader(app)
    return loader


def load_schema(app=None):
    """Derive the schema of every eligible model of *app*.

    Raises:
        LoadFailure: the configured model modules could not be loaded.
    """
    app = app or current_app
    loader = get_loader(app)
    t0 = time.perf_counter()
    schemas = derive_schema(
        loader.provider,
        loader,
        workers=app.config.get("SCHEMA_BUILD_WORKERS", 1),
    )
    duration_ms = (time.perf_counter() - t0) * 1000
    logger.info("Schema derived: %d models", len(schemas),
                extra={"models": len(schemas), "duration_ms": round(duration_ms, 1)})
    return schemas


def schema_as_dicts(schemas) -> list[dict]:
    return [schema.to_dict() for schema in schemas]


def save_schema_snapshot(schemas) -> SchemaConfig:
    """Store *schemas* as the admin's current snapshot. Caller commits."""
    payload = schema_as_dicts(schemas)
    snapshot = SchemaConfig.query.filter_by(key=SNAPSHOT_KEY).first()
    if snapshot is None:
        snapshot = SchemaConfig(key=SNAPSHOT_KEY, value=payload)
        db.session.add(snapshot)
    else:
        snapshot.value = payload
    db.session.flush()
    logger.info("Saved schema snapshot (%d models)", len(payload))
    return snapshot
