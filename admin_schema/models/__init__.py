"""
Admin Schema Builder
Shared SQLAlchemy instance and model-layer declarations.

Application models subclass ``db.Model``; that class hierarchy is the model
registry the schema builder introspects.

Usage:
    from admin_schema.models import db

    class Post(db.Model):
        __tablename__ = "posts"
        id = db.Column(db.Integer, primary_key=True)
"""

from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()
