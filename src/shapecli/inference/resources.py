"""Group operations into resources by the noun left after a CRUD verb.

``ListFunctions``, ``GetFunction`` and ``DeleteFunction`` all reduce to the
noun ``function`` and are grouped into one :class:`~shapecli.models.Resource`.
Operations without a recognised leading verb (``InvokeFunction``) or without
a noun after it contribute to no resource.

Singularization is deliberately simple and can mis-handle irregular
plurals; the result is an annotation, not an authoritative grouping.
"""

from __future__ import annotations

from shapecli.models import Operation, Resource

CRUD_VERBS = ("list", "create", "describe", "update", "delete", "get")


def infer_resources(operations: list[Operation]) -> list[Resource]:
    """Return resources in order of first appearance.

    Args:
        operations: Canonical operations, in model order.

    Returns:
        One :class:`~shapecli.models.Resource` per derived noun, each listing
        the original names of its operations.
    """
    groups: dict[str, list[str]] = {}
    for operation in operations:
        noun = derive_noun(operation.name)
        if noun is None:
            continue
        groups.setdefault(noun, []).append(operation.original_name)
    return [Resource(name=noun, operations=names) for noun, names in groups.items()]


def derive_noun(kebab_name: str) -> str | None:
    """Return the singular noun of a kebab-case operation name, or ``None``.

    Example::

        >>> derive_noun("list-policy-versions")
        'policy-version'
        >>> derive_noun("invoke") is None
        True
    """
    parts = kebab_name.split("-")
    if len(parts) < 2 or parts[0] not in CRUD_VERBS:
        return None
    words = parts[1:]
    words[-1] = singularize(words[-1])
    return "-".join(words)


def singularize(word: str) -> str:
    """Reduce a plural English word to its singular form."""
    if len(word) > 3 and word.endswith("ies"):
        return word[:-3] + "y"
    if word.endswith("sses"):
        return word[:-2]
    if word.endswith(("ches", "shes", "xes", "zes")):
        return word[:-2]
    if word.endswith("s") and not word.endswith(("ss", "us", "is")):
        return word[:-1]
    return word
