"""Translate Python ``re`` patterns into JavaScript ``RegExp`` source + flags.

Handles the constructs that differ between the two dialects:

    \\A, \\Z       → ^, $
    (?P<name>…)  → (?<name>…)
    (?P=name)    → \\k<name>
    (?i) (?ms)   → moved into the flags string
    re.VERBOSE   → whitespace and ``#`` comments stripped

Everything else is passed through unchanged.
"""

from __future__ import annotations

import re

_LEADING_FLAGS = re.compile(r"^\(\?[aiLmsux]+\)")

_JS_FLAGS = (
    (re.IGNORECASE, "i"),
    (re.MULTILINE, "m"),
    (re.DOTALL, "s"),
)


def to_js_regex(pattern: str | re.Pattern) -> dict:
    """Return ``{"source": ..., "flags": ...}`` for *pattern*."""
    if not isinstance(pattern, re.Pattern):
        pattern = re.compile(pattern)

    source = pattern.pattern
    if isinstance(source, bytes):
        source = source.decode("utf-8")
    source = _LEADING_FLAGS.sub("", source)

    verbose = bool(pattern.flags & re.VERBOSE)
    flags = "".join(letter for flag, letter in _JS_FLAGS if pattern.flags & flag)
    return {"source": _translate(source, verbose), "flags": flags}


def _translate(source: str, verbose: bool) -> str:
    out: list[str] = []
    i = 0
    n = len(source)
    in_class = False

    while i < n:
        ch = source[i]

        if ch == "\\" and i + 1 < n:
            nxt = source[i + 1]
            if not in_class and nxt == "A":
                out.append("^")
            elif not in_class and nxt in "Zz":
                out.append("$")
            else:
                out.append(source[i:i + 2])
            i += 2
            continue

        if in_class:
            if ch == "]":
                in_class = False
            out.append(ch)
            i += 1
            continue

        if ch == "[":
            in_class = True
            out.append(ch)
            i += 1
            if source.startswith("^", i):
                out.append("^")
                i += 1
            # A leading "]" is literal in Python but closes the class in JS.
            if source.startswith("]", i):
                out.append("\\]")
                i += 1
            continue

        if source.startswith("(?P<", i):
            out.append("(?<")
            i += 4
            continue

        if source.startswith("(?P=", i):
            end = source.index(")", i)
            out.append(f"\\k<{source[i + 4:end]}>")
            i = end + 1
            continue

        if source.startswith("(?#", i):
            end = source.find(")", i)
            i = n if end == -1 else end + 1
            continue

        if verbose:
            if ch.isspace():
                i += 1
                continue
            if ch == "#":
                end = source.find("\n", i)
                i = n if end == -1 else end + 1
                continue

        out.append(ch)
        i += 1

    return "".join(out)
