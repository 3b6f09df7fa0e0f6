"""Canonical string forms for dispatch rules and criteria.

Rules keep their declared order. Criteria are always serialized in sorted
key order, so two observers extracting the same pairs in a different order
produce byte-identical keys.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from dispatch_criteria._types import DispatchCriteria, DispatchRule

RULE_SEPARATOR = " && "

# Segment markers for path-style and query-style criteria.
PATH_MARKER = "/"
QUERY_MARKER = "?"


def join_rule(names: Iterable[str]) -> DispatchRule:
    """Join variable names into a rule, keeping their order."""
    return RULE_SEPARATOR.join(names)


def split_rule(rule: DispatchRule) -> list[str]:
    """Split a rule back into its variable names.

    Tolerates missing spaces around ``&&`` and drops blank names.

    >>> split_rule("x && y")
    ['x', 'y']
    """
    return [name for name in (part.strip() for part in rule.split("&&")) if name]


def format_criteria(
    pairs: Mapping[str, str], marker: str = PATH_MARKER
) -> DispatchCriteria:
    """Serialize pairs as ``<marker>name=value`` segments sorted by name.

    >>> format_criteria({"y": "20", "x": "10"})
    '/x=10/y=20'
    >>> format_criteria({"foo": "1", "bar": "2"}, QUERY_MARKER)
    '?bar=2?foo=1'
    """
    return "".join(f"{marker}{name}={pairs[name]}" for name in sorted(pairs))
