"""
Schema derivation core — driven by an in-memory MetadataProvider.

Covers the end-to-end blog scenario, reference precedence, validator
de-duplication, failure isolation, scope filtering and the attachment
shortcut.
"""

import json
import logging
import uuid
from datetime import date
from decimal import Decimal

import pytest

from admin_schema.models.validation import Inclusion, Presence
from admin_schema.schema.builder import (
    build_model_schema,
    derive_schema,
    fetch_associations,
    fetch_columns,
    fetch_scopes,
    try_build_model_schema,
)
from admin_schema.schema.constants import ATTACHMENT_SCHEMA, DEFAULT_ACTIONS, DEFAULT_TABS
from admin_schema.schema.types import Includes, Required
from schema_fakes import (
    FakeModel,
    FakeProvider,
    belongs_to,
    blog_models,
    col,
    has_many,
    has_one,
)


@pytest.fixture()
def provider():
    return FakeProvider(blog_models())


def _schema(schemas, name):
    return next(s for s in schemas if s.name == name)


# ── End-to-end ───────────────────────────────────────────────────────────


def test_post_schema_end_to_end(provider):
    post = _schema(derive_schema(provider), "post")

    assert [c.name for c in post.columns] == ["author_id", "id", "title", "status"]

    author = post.columns[0]
    assert author.reference.model_name == "user"
    assert author.reference.reference_type == "belongs_to"
    assert author.reference.name == "author"
    assert author.reference.foreign_key == "author_id"
    assert author.reference.polymorphic is False
    assert author.column_type == "integer"
    assert author.validators == (Required(),)

    status = post.column("status")
    assert status.column_type == "string"
    assert status.validators == (Includes(("draft", "published")),)
    assert status.default_value == "draft"
    assert status.reference is None

    assert [(a.name, a.model_name, a.foreign_key) for a in post.associations] == [
        ("comments", "comment", "post_id"),
    ]
    assert [s.name for s in post.scopes] == ["published"]


def test_model_level_fields(provider):
    post = build_model_schema(provider, provider.by_name("Post"))

    assert post.slug == "posts"
    assert post.table_name == "posts"
    assert post.class_name == "fake.Post"
    assert post.primary_key == "id"
    assert post.display_name == "Posts"
    assert post.display_column == "title"
    assert post.actions == DEFAULT_ACTIONS
    assert post.tabs == DEFAULT_TABS
    assert post.visible is True


def test_display_name_is_pluralized_title():
    provider = FakeProvider([FakeModel(name="BlogCategory", columns=[col("id")])])
    schema = build_model_schema(provider, provider.by_name("BlogCategory"))
    assert schema.name == "blog_category"
    assert schema.display_name == "Blog Categories"
    assert schema.slug == "blog_categories"


def test_display_column_heuristic_is_pluggable(provider):
    schemas = derive_schema(provider, display_column=lambda p, m: "custom")
    assert {s.display_column for s in schemas} == {"custom"}


# ── Columns ──────────────────────────────────────────────────────────────


def test_reference_column_wins_over_raw_foreign_key(provider):
    columns = fetch_columns(provider, provider.by_name("Post"))
    matching = [c for c in columns if c.name == "author_id"]

    assert len(matching) == 1
    assert matching[0].reference is not None
    assert matching[0].access_type == "read_write"


def test_columns_never_repeat_a_name():
    model = FakeModel(
        name="Invoice",
        columns=[col("id"), col("customer_id")],
        relationships=[
            belongs_to("customer", "Customer", "customer_id"),
            belongs_to("billing_customer", "Customer", "customer_id", optional=True),
        ],
    )
    provider = FakeProvider([model, FakeModel(name="Customer", columns=[col("id")])])

    for schema in derive_schema(provider):
        names = [c.name for c in schema.columns]
        assert len(names) == len(set(names))


def test_table_column_mapping():
    model = FakeModel(
        name="Event",
        columns=[
            col("id"),
            col("tags", "string", is_array=True),
            col("starts_at", "datetime"),
            col("duration", "interval"),
            col("created_at", "datetime"),
            col("password_digest", "string"),
        ],
        defaults={"duration": None, "tags": []},
    )
    provider = FakeProvider([model])
    columns = {c.name: c for c in fetch_columns(provider, model)}

    assert columns["id"].access_type == "read_only"
    assert columns["tags"].is_array is True
    assert columns["tags"].column_type == "string"
    assert columns["tags"].default_value == []
    assert columns["starts_at"].column_type == "datetime"
    assert columns["starts_at"].access_type == "read_write"
    assert columns["duration"].column_type == "interval"
    assert columns["created_at"].access_type == "read_only"
    assert columns["password_digest"].access_type == "hidden"
    assert all(c.virtual is False and c.format == {} for c in columns.values())


def test_has_one_reference_is_read_only_and_keyed_by_relationship_name():
    user = FakeModel(
        name="User",
        columns=[col("id")],
        relationships=[has_one("profile", "Profile", "user_id")],
    )
    profile = FakeModel(name="Profile", columns=[col("id"), col("user_id")])
    provider = FakeProvider([user, profile])

    column = fetch_columns(provider, user)[0]
    assert column.name == "profile"
    assert column.access_type == "read_only"
    assert column.column_type == "integer"
    assert column.reference.reference_type == "has_one"
    assert column.reference.foreign_key == "user_id"
    assert column.validators == ()


def test_attachment_reference_is_writable_polymorphic_file():
    user = FakeModel(
        name="User",
        columns=[col("id")],
        relationships=[has_one("avatar_attachment", "StorageAttachment", "record_id")],
    )
    attachment = FakeModel(name="StorageAttachment", attachment=True)
    provider = FakeProvider([user, attachment])

    column = fetch_columns(provider, user)[0]
    assert column.column_type == "file"
    assert column.access_type == "read_write"
    assert column.reference.polymorphic is True
    assert column.reference.model_name == "storage_attachment"


def test_blob_targets_are_ignored():
    user = FakeModel(
        name="User",
        columns=[col("id")],
        relationships=[
            has_one("avatar_blob", "StorageBlob", "record_id"),
            has_many("blobs", "StorageBlob", "record_id"),
        ],
    )
    blob = FakeModel(name="StorageBlob", blob=True, infrastructure=True)
    provider = FakeProvider([user, blob])

    assert [c.name for c in fetch_columns(provider, user)] == ["id"]
    assert fetch_associations(provider, user) == ()


# ── Validators ───────────────────────────────────────────────────────────


def test_validators_are_deduplicated():
    model = FakeModel(
        name="Post",
        columns=[col("id"), col("status", "enum"), col("author_id")],
        relationships=[belongs_to("author", "User", "author_id")],
        enums={"status": ["draft", "published"]},
        rules={
            "status": [Inclusion(["draft", "published"]), Presence(), Presence()],
            "author_id": [Presence()],
        },
    )
    provider = FakeProvider([model, FakeModel(name="User", columns=[col("id")])])
    columns = {c.name: c for c in fetch_columns(provider, model)}

    assert columns["status"].validators == (Includes(("draft", "published")), Required())
    assert columns["author_id"].validators == (Required(),)


def test_optional_belongs_to_is_not_required():
    comment = FakeModel(
        name="Comment",
        columns=[col("id"), col("parent_id")],
        relationships=[belongs_to("parent", "Comment", "parent_id", optional=True)],
    )
    provider = FakeProvider([comment])
    assert fetch_columns(provider, comment)[0].validators == ()


# ── Associations ─────────────────────────────────────────────────────────


def test_associations_keep_declaration_order_and_flags():
    user = FakeModel(
        name="User",
        columns=[col("id")],
        relationships=[
            has_many("posts", "Post", "author_id"),
            has_many("events", "Event", "owner_id", polymorphic=True),
            has_many("documents_attachments", "StorageAttachment", "record_id"),
        ],
    )
    models = [
        user,
        FakeModel(name="Post"),
        FakeModel(name="Event"),
        FakeModel(name="StorageAttachment", attachment=True),
    ]
    provider = FakeProvider(models)
    associations = fetch_associations(provider, user)

    assert [a.name for a in associations] == ["posts", "events", "documents_attachments"]
    assert [a.polymorphic for a in associations] == [False, True, True]
    assert associations[2].display_name == "Documents attachments"
    assert associations[2].slug == "documents_attachments"
    assert all(a.visible for a in associations)


# ── Scopes ───────────────────────────────────────────────────────────────


def test_attachment_eager_loading_scopes_are_hidden():
    model = FakeModel(
        name="User",
        scopes=["with_attached_avatar", "published", "with_attached_documents", "active_today"],
    )
    scopes = fetch_scopes(FakeProvider([model]), model)

    assert [s.name for s in scopes] == ["published", "active_today"]
    assert scopes[1].display_name == "Active today"
    assert scopes[0].scope_type == "default"
    assert scopes[0].preferences == {}


# ── Attachment shortcut ──────────────────────────────────────────────────


def test_attachment_model_uses_fixed_schema():
    attachment = FakeModel(
        name="StorageAttachment",
        attachment=True,
        columns=[col("id"), col("whatever", "string"), col("blob_id")],
        broken=True,
    )
    provider = FakeProvider([attachment])

    assert derive_schema(provider) == [ATTACHMENT_SCHEMA]


# ── Enumeration & failure isolation ──────────────────────────────────────


def test_excluded_models_are_not_described():
    models = blog_models() + [
        FakeModel(name="ApplicationRecord", abstract=True),
        FakeModel(name="SchemaConfig", admin=True, columns=[col("id")]),
        FakeModel(name="AuditLog", audit=True, columns=[col("id")]),
        FakeModel(name="AlembicVersion", infrastructure=True, columns=[col("version_num", "string")]),
    ]
    names = {s.name for s in derive_schema(FakeProvider(models))}
    assert names == {"user", "post", "comment"}


def test_one_bad_model_never_aborts_the_pass(caplog):
    models = blog_models()
    models[1].relationships.append(has_many("reviews", "Review", "post_id"))
    models[1].relationships.append(belongs_to("editor", "Editor", "editor_id"))
    models.append(FakeModel(name="Broken", broken=True))
    provider = FakeProvider(models)

    with caplog.at_level(logging.ERROR):
        schemas = derive_schema(provider)

    assert [s.name for s in schemas] == ["user", "post", "comment"]
    post = _schema(schemas, "post")
    assert [a.name for a in post.associations] == ["comments"]
    assert "editor_id" not in [c.name for c in post.columns]
    assert any("Broken" in r.getMessage() for r in caplog.records)


def test_audit_model_failures_are_not_logged(caplog):
    audit = FakeModel(name="AuditTrail", audit=True, broken=True)
    provider = FakeProvider([audit])

    with caplog.at_level(logging.ERROR):
        result = try_build_model_schema(provider, audit)

    assert result is None
    assert not [r for r in caplog.records if r.levelno >= logging.ERROR]


# ── Determinism & parallelism ────────────────────────────────────────────


def test_repeated_derivation_is_identical(provider):
    first = [s.to_dict() for s in derive_schema(provider)]
    second = [s.to_dict() for s in derive_schema(provider)]
    assert first == second


def test_parallel_build_matches_sequential(provider):
    sequential = derive_schema(provider)
    parallel = derive_schema(provider, workers=4)
    assert parallel == sequential


# ── Shared defaults & serialization ──────────────────────────────────────


def test_serialized_payload_does_not_alias_shared_defaults(provider):
    payload = derive_schema(provider)[0].to_dict()
    payload["actions"][0]["preferences"]["pinned"] = True
    payload["tabs"][0]["visible"] = False

    assert dict(DEFAULT_ACTIONS[0]["preferences"]) == {}
    assert DEFAULT_TABS[0]["visible"] is True
    assert derive_schema(provider)[0].to_dict()["actions"][0]["preferences"] == {}


def test_default_actions_are_read_only():
    with pytest.raises(TypeError):
        DEFAULT_ACTIONS[0]["preferences"]["pinned"] = True
    with pytest.raises(TypeError):
        DEFAULT_TABS[0]["name"] = "overview"


def test_non_json_defaults_serialize_as_text():
    token = uuid.UUID("12345678-1234-5678-1234-567812345678")
    invoice = FakeModel(
        name="Invoice",
        columns=[col("id"), col("amount", "numeric"), col("issued_on", "date"), col("token", "uuid")],
        defaults={"amount": Decimal("0.00"), "issued_on": date(2024, 1, 31), "token": token},
    )
    payload = derive_schema(FakeProvider([invoice]))[0].to_dict()

    defaults = {c["name"]: c["default_value"] for c in payload["columns"]}
    assert defaults == {
        "id": None,
        "amount": "0.00",
        "issued_on": "2024-01-31",
        "token": "12345678-1234-5678-1234-567812345678",
    }
    json.dumps(payload)


# ── Naming ───────────────────────────────────────────────────────────────


def test_models_sharing_a_class_name_get_qualified_names():
    blog_user = FakeModel(name="User", module="blog", columns=[col("id")])
    admin_user = FakeModel(name="User", module="admin", columns=[col("id")])
    post = FakeModel(
        name="Post",
        columns=[col("id"), col("author_id")],
        relationships=[belongs_to("author", admin_user, "author_id")],
    )
    schemas = derive_schema(FakeProvider([blog_user, admin_user, post]))

    assert [(s.name, s.slug) for s in schemas] == [
        ("blog/user", "blog__users"),
        ("admin/user", "admin__users"),
        ("post", "posts"),
    ]
    assert schemas[0].display_name == "Users"
    assert _schema(schemas, "post").column("author_id").reference.model_name == "admin/user"
