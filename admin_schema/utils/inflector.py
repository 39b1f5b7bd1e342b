"""Text transforms for model and column labels.

underscore:  "BlogPost"   → "blog_post"
humanize:    "author_id"  → "Author"
titleize:    "BlogPost"   → "Blog Post"
pluralize:   "Blog Post"  → "Blog Posts"
slugify_model: "BlogPost" → "blog_posts"
"""

import re

_UNCOUNTABLE = {
    "equipment", "information", "rice", "money", "species",
    "series", "fish", "sheep", "jeans", "police", "metadata",
}

_IRREGULAR = {
    "person": "people",
    "man": "men",
    "woman": "women",
    "child": "children",
    "sex": "sexes",
    "move": "moves",
    "zombie": "zombies",
}

# First match wins.
_PLURAL_RULES = [
    (r"(quiz)$", r"\1zes"),
    (r"^(oxen)$", r"\1"),
    (r"^(ox)$", r"\1en"),
    (r"^(m|l)ice$", r"\1ice"),
    (r"^(m|l)ouse$", r"\1ice"),
    (r"(matr|vert|ind)(?:ix|ex)$", r"\1ices"),
    (r"(x|ch|ss|sh)$", r"\1es"),
    (r"([^aeiouy]|qu)y$", r"\1ies"),
    (r"(hive)$", r"\1s"),
    (r"(?:([^f])fe|([lr])f)$", r"\1\2ves"),
    (r"sis$", "ses"),
    (r"([ti])a$", r"\1a"),
    (r"([ti])um$", r"\1a"),
    (r"(buffal|tomat)o$", r"\1oes"),
    (r"(bu)s$", r"\1ses"),
    (r"(alias|status)$", r"\1es"),
    (r"(octop|vir)i$", r"\1i"),
    (r"(octop|vir)us$", r"\1i"),
    (r"(ax|test)is$", r"\1es"),
    (r"s$", "s"),
    (r"$", "s"),
]
_PLURAL_RULES = [(re.compile(p, re.IGNORECASE), r) for p, r in _PLURAL_RULES]


def underscore(word: str) -> str:
    word = word.replace(".", "/")
    word = re.sub(r"([A-Z\d]+)([A-Z][a-z])", r"\1_\2", word)
    word = re.sub(r"([a-z\d])([A-Z])", r"\1_\2", word)
    return word.replace("-", "_").lower()


def humanize(word: str) -> str:
    """Drop a trailing ``_id``, turn underscores into spaces, capitalize."""
    result = re.sub(r"_id$", "", word)
    result = result.replace("_", " ").strip()
    if not result:
        return word
    return result[0].upper() + result[1:].lower()


def titleize(word: str) -> str:
    return re.sub(
        r"\b([a-z])",
        lambda m: m.group(1).upper(),
        humanize(underscore(word)),
    )


def pluralize(word: str) -> str:
    """Pluralize the last word of *word*."""
    if not word:
        return word
    match = re.search(r"([A-Za-z]+)$", word)
    if not match:
        return word
    last = match.group(1)
    lower = last.lower()
    head = word[: match.start(1)]

    if lower in _UNCOUNTABLE:
        return word
    if lower in _IRREGULAR:
        plural = _IRREGULAR[lower]
        return head + (plural[0].upper() + plural[1:] if last[0].isupper() else plural)
    if lower in _IRREGULAR.values():
        return word

    for rule, replacement in _PLURAL_RULES:
        if rule.search(last):
            return head + rule.sub(replacement, last, count=1)
    return word


def slugify_model(name: str) -> str:
    """URL-safe plural identifier; dotted names map to ``__`` separators."""
    return pluralize(underscore(name)).replace("/", "__")
