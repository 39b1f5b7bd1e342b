"""
Validator Resolver.

Turns declared constraint metadata into the closed set of ValidatorSpec
variants understood by the UI:

    non-optional belongs-to  → Required
    enumerated column        → Includes(value names)
    Inclusion                → Includes(values)
    Presence                 → Required
    Format                   → Format(source, flags)   (JavaScript dialect)
    Length                   → Length(bounds)
    Numericality             → Numeric(constraints)

Unknown rule kinds produce nothing. The result never holds two equal entries.
"""

from admin_schema.models import validation as rules
from admin_schema.schema.provider import MetadataProvider, RelationshipInfo
from admin_schema.schema.types import Format, Includes, Length, Numeric, Required
from admin_schema.utils.js_regex import to_js_regex


def build_validator(rule):
    """Map one declared rule to a ValidatorSpec, or ``None`` for unknown kinds."""
    if isinstance(rule, rules.Inclusion):
        return Includes(tuple(rule.values))
    if isinstance(rule, rules.Presence):
        return Required()
    if isinstance(rule, rules.Format):
        js = to_js_regex(rule.regex)
        return Format(source=js["source"], flags=js["flags"])
    if isinstance(rule, rules.Length):
        return Length(rule.options())
    if isinstance(rule, rules.Numericality):
        return Numeric(dict(rule.options))
    return None


def fetch_validators(
    provider: MetadataProvider,
    model,
    column_name: str,
    relationship: RelationshipInfo | None = None,
) -> tuple:
    validators = []

    if relationship is not None and relationship.is_belongs_to and not relationship.optional:
        validators.append(Required())

    enum_values = provider.enums(model).get(column_name)
    if enum_values is not None:
        validators.append(Includes(tuple(enum_values)))

    for rule in provider.validation_rules(model, column_name):
        validator = build_validator(rule)
        if validator is not None:
            validators.append(validator)

    unique = []
    for validator in validators:
        if validator not in unique:
            unique.append(validator)
    return tuple(unique)
