"""
Shared pytest fixtures for the Admin Schema Builder test suite.

Provides:
    - app: Flask application (session-scoped) whose schema loader reads
      the sample blog models in ``tests/blog_models.py``
    - _setup_db: Database table creation/teardown (session-scoped)
    - session: Per-test app context with table recreate (autouse)
    - cli_runner: Flask CLI runner
"""

import pytest

from admin_schema import create_app
from admin_schema.models import db as _db
from admin_schema.services.schema_service import init_schema_loader

BLOG_MODULES = ["blog_models"]


# ── App & DB fixtures ────────────────────────────────────────────────────


@pytest.fixture(scope="session")
def app():
    """Create the Flask application once per test session."""
    application = create_app("testing")
    application.config["SCHEMA_MODEL_MODULES"] = BLOG_MODULES
    init_schema_loader(application)
    return application


@pytest.fixture(scope="session")
def _setup_db(app):
    """Create all tables at session start, drop at end."""
    import blog_models  # noqa: F401

    with app.app_context():
        _db.create_all()
    yield
    with app.app_context():
        _db.drop_all()


@pytest.fixture(autouse=True)
def session(app, _setup_db):
    """Per-test: open app context, rollback after test, recreate tables."""
    with app.app_context():
        yield
        _db.session.rollback()
        _db.drop_all()
        _db.create_all()


@pytest.fixture()
def cli_runner(app):
    """Flask CLI runner."""
    return app.test_cli_runner()
