"""Sample application models used by the schema builder tests."""

import enum
import re
from datetime import datetime, timezone
from decimal import Decimal

from admin_schema.models import db
from admin_schema.models.scopes import scope
from admin_schema.models.storage import has_many_attached, has_one_attached
from admin_schema.models.validation import Format, Inclusion, Length, Numericality, Presence


class PostStatus(enum.Enum):
    draft = "draft"
    published = "published"


user_tags = db.Table(
    "blog_user_tags",
    db.Column("user_id", db.Integer, db.ForeignKey("blog_users.id"), primary_key=True),
    db.Column("tag_id", db.Integer, db.ForeignKey("blog_tags.id"), primary_key=True),
)


class User(db.Model):
    __tablename__ = "blog_users"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    email = db.Column(
        db.String(255),
        nullable=False,
        info={"validators": [Format(re.compile(r"\A[^@\s]+@[^@\s]+\Z"))]},
    )
    password_digest = db.Column(db.String(255), nullable=True)
    created_at = db.Column(
        db.DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )

    posts = db.relationship("Post", back_populates="author")
    profile = db.relationship("Profile", uselist=False, back_populates="user")
    tags = db.relationship("Tag", secondary=user_tags)

    @scope
    def recent(cls):
        return cls.query.order_by(cls.created_at.desc())


has_one_attached(User, "avatar")
has_many_attached(User, "documents")


class Profile(db.Model):
    __tablename__ = "blog_profiles"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("blog_users.id"), nullable=True)
    bio = db.Column(db.Text, default="")

    user = db.relationship("User", back_populates="profile")


class Post(db.Model):
    __tablename__ = "blog_posts"
    __validators__ = {
        "title": [Presence(), Length(maximum=200)],
        "status": [Inclusion(["draft", "published"])],
    }

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(200), nullable=False)
    author_id = db.Column(db.Integer, db.ForeignKey("blog_users.id"), nullable=False)
    status = db.Column(db.Enum(PostStatus), nullable=False, default=PostStatus.draft)

    author = db.relationship("User", back_populates="posts")
    comments = db.relationship("Comment", back_populates="post")

    @scope
    def published(cls):
        return cls.query.filter_by(status=PostStatus.published)


class Comment(db.Model):
    __tablename__ = "blog_comments"

    id = db.Column(db.Integer, primary_key=True)
    post_id = db.Column(db.Integer, db.ForeignKey("blog_posts.id"), nullable=False)
    body = db.Column(db.Text, nullable=False)
    score = db.Column(
        db.Integer,
        default=0,
        info={"validators": [Numericality(only_integer=True, greater_than_or_equal_to=0)]},
    )

    post = db.relationship("Post", back_populates="comments")


class Tag(db.Model):
    __tablename__ = "blog_tags"

    id = db.Column(db.Integer, primary_key=True)
    label = db.Column(db.String(60), nullable=False, unique=True)
    weight = db.Column(db.Numeric(6, 2), default=Decimal("1.00"))


class Person(db.Model):
    __tablename__ = "blog_people"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    kind = db.Column(db.String(30), nullable=False)

    __mapper_args__ = {"polymorphic_on": kind, "polymorphic_identity": "person"}


class Engineer(Person):
    __tablename__ = "blog_engineers"

    id = db.Column(db.Integer, db.ForeignKey("blog_people.id"), primary_key=True)
    level = db.Column(
        db.Integer,
        default=1,
        info={"validators": [Numericality(greater_than=0)]},
    )

    __mapper_args__ = {"polymorphic_identity": "engineer"}
