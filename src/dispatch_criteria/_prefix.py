"""Prefix inference and positional parts over sets of example URIs.

When a mock operation is defined by example requests rather than a template,
nothing is known about the meaning of the variable path segments. The
examples are compared to find the path they share, and every segment after
that path becomes a positional variable: ``part1``, ``part2``, ...

Given ``/s/r/f/d/m/s`` and ``/s/r/f/d``, the shared path is ``/s/r/f`` and
the rule is ``part1 && part2 && part3``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from dispatch_criteria._canonical import format_criteria, join_rule
from dispatch_criteria._types import DispatchError

if TYPE_CHECKING:
    from collections.abc import Sequence

    from dispatch_criteria._types import DispatchCriteria, DispatchRule


class EmptyExamplesError(DispatchError, ValueError):
    """An operation that infers from example URIs was given none."""

    def __init__(self, operation: str) -> None:
        self.operation = operation
        super().__init__(f"{operation} requires at least one example URI")


def extract_common_prefix(uris: Sequence[str]) -> str:
    """Return the longest path prefix shared by all *uris*.

    The first URI is the reference. Characters are compared position by
    position; at the first position where any other URI differs (or ends),
    the shared text is cut back to the last ``/`` before that position, so
    the prefix always ends on a segment boundary. When nothing diverges the
    reference itself is returned.

    Raises:
        EmptyExamplesError: If *uris* is empty.

    >>> extract_common_prefix(["/a/b/c", "/a/b/d"])
    '/a/b'
    """
    if not uris:
        raise EmptyExamplesError("extract_common_prefix")

    reference = uris[0]
    others = uris[1:]
    for position, char in enumerate(reference):
        for other in others:
            if position >= len(other) or other[position] != char:
                return _cut_to_boundary(other[:position])
    return reference


def extract_parts_from_uris(uris: Sequence[str]) -> DispatchRule:
    """Return a positional rule covering the variable segments of *uris*.

    Examples may instantiate a different number of trailing segments, so
    the rule names the largest count seen across all of them.

    Raises:
        EmptyExamplesError: If *uris* is empty.

    >>> extract_parts_from_uris(["/a/b/1/2", "/a/b/1"])
    'part1 && part2'
    """
    if not uris:
        raise EmptyExamplesError("extract_parts_from_uris")

    prefix = extract_common_prefix(uris)
    count = max(len(_split_parts(uri[len(prefix) + 1 :])) for uri in uris)
    return join_rule(f"part{i}" for i in range(1, count + 1))


def extract_from_uri_parts(prefix: str, uri: str) -> DispatchCriteria:
    """Return positional criteria for the segments of *uri* after *prefix*.

    This is the request-time counterpart of extract_parts_from_uris(): the
    same prefix and numbering produce ``/part1=<v1>/part2=<v2>...``. A URI
    outside *prefix* has no criteria.

    >>> extract_from_uri_parts("/a/b", "/a/b/1/2")
    '/part1=1/part2=2'
    """
    if uri != prefix and not uri.startswith(prefix + "/"):
        return ""
    parts = _split_parts(uri[len(prefix) + 1 :])
    return format_criteria({f"part{i}": part for i, part in enumerate(parts, start=1)})


def _cut_to_boundary(text: str) -> str:
    """Cut *text* back to the last ``/`` (exclusive), or to nothing."""
    boundary = text.rfind("/")
    if boundary < 0:
        return ""
    return text[:boundary]


def _split_parts(remainder: str) -> list[str]:
    """Split the text after a prefix into segments.

    Inner empty segments count (``a//b`` has three), trailing ones do not.
    """
    parts = remainder.split("/")
    while parts and not parts[-1]:
        parts.pop()
    return parts
