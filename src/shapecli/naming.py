"""Name conversion and documentation cleanup shared by the parser and generator.

Operation names, parameter flags, table columns, and resource nouns all go
through :func:`to_kebab_case`, so the same model member always produces the
same CLI-facing name.  Positional parameters additionally need a valid
variable name, produced by :func:`to_identifier`.

Model documentation is HTML; :func:`strip_html` and :func:`summarize` turn it
into single-line comment text.
"""

from __future__ import annotations

import html
import re

# Separator before an uppercase letter that follows a lowercase letter or digit.
_LOWER_UPPER_RE = re.compile(r"([a-z0-9])([A-Z])")
# Separator between an acronym run and the capitalised word after it.
_ACRONYM_RE = re.compile(r"([A-Z]+)([A-Z][a-z])")
_NON_ALNUM_RE = re.compile(r"[^a-zA-Z0-9]+")

_TAG_RE = re.compile(r"<[^>]+>")
_WHITESPACE_RE = re.compile(r"\s+")
_SENTENCE_END_RE = re.compile(r"(?<=[.!?])\s")

# Variable names the host shell reserves.
_RESERVED_IDENTIFIERS = frozenset({"in", "env", "nu", "it", "args"})


def to_kebab_case(name: str) -> str:
    """Convert a model name to kebab-case.

    A separator is inserted before an uppercase letter preceded by a
    lowercase letter or digit, and between an acronym and the word that
    follows it.  Any run of non-alphanumeric characters becomes a single
    separator, and the result is lowercased.  Already-kebab input passes
    through unchanged, so the conversion is idempotent.

    Args:
        name: A raw name such as ``"DBInstanceID"`` or ``"list_buckets"``.

    Returns:
        The kebab-case form, e.g. ``"db-instance-id"``.  Empty input yields
        an empty string.

    Example::

        >>> to_kebab_case("DBInstanceID")
        'db-instance-id'
        >>> to_kebab_case("MaxKeys")
        'max-keys'
    """
    if not name:
        return ""
    result = _LOWER_UPPER_RE.sub(r"\1-\2", name)
    result = _ACRONYM_RE.sub(r"\1-\2", result)
    result = _NON_ALNUM_RE.sub("-", result).strip("-")
    return result.lower()


def to_identifier(name: str) -> str:
    """Convert a model name to a snake_case variable name.

    Used for positional parameters, whose names must be valid variables in
    the generated source.  Reserved names get a trailing underscore, a
    leading digit gets a leading underscore, and an empty result becomes
    ``"param"``.

    Example::

        >>> to_identifier("BucketName")
        'bucket_name'
        >>> to_identifier("in")
        'in_'
    """
    result = to_kebab_case(name).replace("-", "_")
    if not result:
        return "param"
    if result[0].isdigit():
        result = f"_{result}"
    if result in _RESERVED_IDENTIFIERS:
        result = f"{result}_"
    return result


def strip_html(text: str | None) -> str:
    """Remove HTML tags and entities and collapse whitespace."""
    if not text:
        return ""
    text = _TAG_RE.sub(" ", text)
    text = html.unescape(text)
    return _WHITESPACE_RE.sub(" ", text).strip()


def summarize(text: str | None, limit: int = 120) -> str:
    """Return the first sentence of *text* (HTML stripped), truncated to *limit* characters."""
    plain = strip_html(text)
    if not plain:
        return ""
    first = _SENTENCE_END_RE.split(plain, maxsplit=1)[0]
    if len(first) > limit:
        first = first[: limit - 3].rstrip() + "..."
    return first
