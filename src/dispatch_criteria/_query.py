"""Query parameter decoding for dispatch rules and criteria.

Rules and criteria read the same ``key=value`` pairs but keep different
orders: a rule lists parameter names in first-seen order, while criteria
are sorted by name so they can serve as stable lookup keys.

Keys and values are form-decoded (``+`` is a space, ``%XX`` is a UTF-8
byte). Decoding is best effort: a pair that does not decode is reported on
QueryParams.errors, logged, and skipped.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING
from urllib.parse import unquote_plus

import re2

from dispatch_criteria._canonical import QUERY_MARKER, format_criteria, join_rule, split_rule
from dispatch_criteria._types import DispatchError

if TYPE_CHECKING:
    from dispatch_criteria._types import DispatchCriteria, DispatchRule

logger = logging.getLogger(__name__)

_ESCAPE = re2.compile(r"%[0-9A-Fa-f]{2}")


class QueryDecodeError(DispatchError):
    """A query parameter pair could not be decoded."""

    def __init__(self, pair: str, reason: str) -> None:
        self.pair = pair
        self.reason = reason
        super().__init__(f"cannot decode query parameter {pair!r}: {reason}")


@dataclass(frozen=True, slots=True)
class QueryParams:
    """Decoded query parameters of a URI.

    pairs holds every pair that decoded, in query order (repeats kept).
    errors holds one QueryDecodeError per pair that was skipped.
    """

    pairs: tuple[tuple[str, str], ...] = ()
    errors: tuple[QueryDecodeError, ...] = ()

    def keys(self) -> list[str]:
        """Parameter names in first-seen order."""
        return [key for key, _ in self.pairs]

    def to_dict(self) -> dict[str, str]:
        """Pairs as a mapping; a repeated key keeps its last value."""
        return dict(self.pairs)


def parse_query(uri: str) -> QueryParams:
    """Decode the ``key=value`` pairs after the first ``?`` of *uri*.

    A URI without both ``?`` and ``=`` has no parameters. Empty pairs and
    pairs with an empty key are ignored; a pair without ``=`` has an empty
    value.
    """
    if "?" not in uri or "=" not in uri:
        return QueryParams()

    query = uri.split("?", 1)[1]
    pairs: list[tuple[str, str]] = []
    errors: list[QueryDecodeError] = []
    for raw in query.split("&"):
        raw_key, _, raw_value = raw.partition("=")
        if not raw_key:
            continue
        try:
            pairs.append((_decode(raw, raw_key), _decode(raw, raw_value)))
        except QueryDecodeError as e:
            logger.warning("Skipping query parameter %r: %s", raw, e.reason)
            errors.append(e)
    return QueryParams(pairs=tuple(pairs), errors=tuple(errors))


def extract_params_from_uri(uri: str) -> DispatchRule:
    """Return the query parameter names of *uri* as a dispatch rule.

    Names keep their first-seen order; they are not sorted.

    >>> extract_params_from_uri("/a?foo=1&bar=2")
    'foo && bar'
    """
    return join_rule(parse_query(uri).keys())


def extract_from_uri_params(
    rule: DispatchRule, uri: str, *, substring_match: bool = False
) -> DispatchCriteria:
    """Return sorted ``?key=value`` criteria for the parameters *rule* names.

    By default a parameter is kept when its name is one of the rule's names.
    With substring_match=True it is kept when its name occurs anywhere in
    the rule text, so a rule naming ``userid`` also keeps ``id``.

    >>> extract_from_uri_params("foo && bar", "/a?bar=2&foo=1")
    '?bar=2?foo=1'
    """
    values = parse_query(uri).to_dict()
    if substring_match:
        selected = {key: value for key, value in values.items() if key in rule}
    else:
        names = set(split_rule(rule))
        selected = {key: value for key, value in values.items() if key in names}
    return format_criteria(selected, QUERY_MARKER)


def _decode(pair: str, component: str) -> str:
    """Form-decode one key or value of *pair*."""
    if component.count("%") != len(_ESCAPE.findall(component)):
        raise QueryDecodeError(pair, "malformed percent-escape")
    try:
        return unquote_plus(component, errors="strict")
    except UnicodeDecodeError as e:
        raise QueryDecodeError(pair, "escaped bytes are not valid UTF-8") from e
