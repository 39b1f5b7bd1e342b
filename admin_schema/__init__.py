"""
Admin Schema Builder
Flask Application Factory.

Usage:
    from admin_schema import create_app
    app = create_app()           # defaults to "development"
    app = create_app("testing")  # explicit config
"""

import json
import logging
import os

import click
from flask import Flask
from flask_migrate import Migrate

from admin_schema.config import config
from admin_schema.middleware.logging_config import configure_logging
from admin_schema.models import db

logger = logging.getLogger(__name__)

migrate = Migrate()


def create_app(config_name=None):
    """
    Create and configure the Flask application.

    Args:
        config_name: Configuration environment name.
                     One of: "development", "testing", "production".
                     Defaults to APP_ENV env var, or "development" if unset.

    Returns:
        Configured Flask application instance.
    """
    if config_name is None:
        config_name = os.getenv("APP_ENV", "development")

    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(config[config_name])

    # ── Structured logging (must be first) ───────────────────────────────
    configure_logging(app)

    # ── Extensions ───────────────────────────────────────────────────────
    db.init_app(app)
    migrate.init_app(app, db)

    # Admin-owned and attachment tables must be mapped before any derivation
    from admin_schema.models import audit, config as config_models, storage  # noqa: F401
    from admin_schema.services.schema_service import init_schema_loader
    init_schema_loader(app)

    # ── CLI commands ─────────────────────────────────────────────────────
    @app.cli.command("dump-schema")
    @click.option("--save", is_flag=True, help="Also store the result as the admin schema snapshot.")
    @click.option("--indent", default=2, show_default=True, help="JSON indentation.")
    def dump_schema_cmd(save, indent):
        """Derive the admin schema from the loaded models and print it as JSON."""
        from admin_schema.services.schema_service import (
            load_schema,
            save_schema_snapshot,
            schema_as_dicts,
        )
        schemas = load_schema()
        if save:
            save_schema_snapshot(schemas)
            db.session.commit()
        click.echo(json.dumps(schema_as_dicts(schemas), indent=indent, default=str))

    return app
