"""Dispatchers: a dispatch style paired with the rule it produced.

A mock operation is defined once, from a template or from example requests.
infer_dispatcher() picks the style and rule at that point; at request time
DispatcherConfig.criteria() turns each incoming URI into the criteria key
the mock engine looks up.

| Style          | Rule                          | Criteria                 |
|----------------|-------------------------------|--------------------------|
| URI_PARTS      | ``x && y``                    | ``/x=1/y=2``             |
| URI_PARAMS     | ``foo && bar``                | ``?bar=2?foo=1``         |
| URI_ELEMENTS   | ``x && y ?? foo && bar``      | ``/x=1/y=2?bar=2?foo=1`` |

Config-driven construction path:
  dict → parse_dispatcher_config() → DispatcherConfig
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Literal, TypeAlias

from dispatch_criteria._canonical import join_rule
from dispatch_criteria._prefix import (
    extract_common_prefix,
    extract_from_uri_parts,
    extract_parts_from_uris,
)
from dispatch_criteria._query import extract_from_uri_params, parse_query
from dispatch_criteria._template import (
    compile_template,
    extract_from_uri_pattern,
    extract_parts_from_uri_pattern,
)
from dispatch_criteria._types import DispatchError

if TYPE_CHECKING:
    from collections.abc import Sequence

    from dispatch_criteria._types import DispatchCriteria, DispatchRule

logger = logging.getLogger(__name__)

DispatchStyle: TypeAlias = Literal["URI_PARTS", "URI_PARAMS", "URI_ELEMENTS"]

DISPATCH_STYLES = frozenset({"URI_PARTS", "URI_PARAMS", "URI_ELEMENTS"})

# Separates the parts rule from the params rule in URI_ELEMENTS rules.
ELEMENTS_SEPARATOR = " ?? "


class ConfigParseError(DispatchError):
    """Error parsing a config dict into a DispatcherConfig."""


@dataclass(frozen=True, slots=True)
class DispatcherConfig:
    """How requests for one mock operation are turned into criteria.

    Path criteria come from template when it is set, otherwise from the
    positional parts after prefix. With neither, path criteria are empty.

    Raises:
        ConfigParseError: If style is not one of DISPATCH_STYLES.
    """

    style: DispatchStyle
    rules: DispatchRule
    template: str | None = None
    prefix: str | None = None

    def __post_init__(self) -> None:
        if self.style not in DISPATCH_STYLES:
            expected = sorted(DISPATCH_STYLES)
            msg = f"unknown dispatcher {self.style!r}, expected one of {expected}"
            raise ConfigParseError(msg)

    @property
    def parts_rule(self) -> DispatchRule:
        """The rule naming path variables ("" for URI_PARAMS)."""
        match self.style:
            case "URI_PARTS":
                return self.rules
            case "URI_ELEMENTS":
                return self.rules.partition("??")[0].strip()
        return ""

    @property
    def params_rule(self) -> DispatchRule:
        """The rule naming query parameters ("" for URI_PARTS)."""
        match self.style:
            case "URI_PARAMS":
                return self.rules
            case "URI_ELEMENTS":
                return self.rules.partition("??")[2].strip()
        return ""

    def criteria(self, uri: str) -> DispatchCriteria:
        """Compute the dispatch criteria of a request *uri*."""
        path = uri.split("?", 1)[0]
        match self.style:
            case "URI_PARTS":
                return self._path_criteria(path)
            case "URI_PARAMS":
                return extract_from_uri_params(self.params_rule, uri)
            case "URI_ELEMENTS":
                return self._path_criteria(path) + extract_from_uri_params(
                    self.params_rule, uri
                )
        return ""  # pragma: no cover

    def _path_criteria(self, path: str) -> DispatchCriteria:
        if self.template is not None:
            return extract_from_uri_pattern(self.template, path)
        if self.prefix is not None:
            return extract_from_uri_parts(self.prefix, path)
        return ""


def infer_dispatcher(
    template: str | None = None, examples: Sequence[str] = ()
) -> DispatcherConfig | None:
    """Pick a dispatcher for an operation from its template and examples.

    - Placeholders in the template give a named URI_PARTS rule.
    - Otherwise, examples with differing paths give a positional rule
      under their common prefix.
    - Query parameters in the examples (or the template) add a params rule,
      making the style URI_ELEMENTS when there is also a parts rule.

    Returns None when nothing about the requests varies.
    """
    path_template = template.split("?", 1)[0] if template is not None else None
    sources = list(examples) or ([template] if template is not None else [])
    params_rule = join_rule(
        dict.fromkeys(key for uri in sources for key in parse_query(uri).keys())
    )

    parts_rule = ""
    prefix = None
    if path_template is not None and compile_template(path_template).names:
        parts_rule = extract_parts_from_uri_pattern(path_template)
    else:
        path_template = None
        paths = list(dict.fromkeys(uri.split("?", 1)[0] for uri in examples))
        if len(paths) > 1:
            prefix = extract_common_prefix(paths)
            parts_rule = extract_parts_from_uris(paths)

    if parts_rule and params_rule:
        style: DispatchStyle = "URI_ELEMENTS"
        rules = parts_rule + ELEMENTS_SEPARATOR + params_rule
    elif parts_rule:
        style, rules = "URI_PARTS", parts_rule
    elif params_rule:
        style, rules = "URI_PARAMS", params_rule
    else:
        logger.debug("No variable parts or parameters in %d example(s)", len(sources))
        return None

    logger.debug("Inferred %s dispatcher with rules %r", style, rules)
    return DispatcherConfig(style=style, rules=rules, template=path_template, prefix=prefix)


def parse_dispatcher_config(data: dict[str, Any]) -> DispatcherConfig:
    """Parse a dict into a DispatcherConfig.

    Expected shape::

        {"dispatcher": "URI_PARTS", "rules": "x && y", "template": "/a/{x}/{y}"}

    "template" and "prefix" are optional strings.

    Raises:
        ConfigParseError: If the dict is malformed.
    """
    if not isinstance(data, dict):
        msg = f"expected dict, got {type(data).__name__}"
        raise ConfigParseError(msg)

    style = data.get("dispatcher")
    if style is None:
        msg = "missing required field 'dispatcher'"
        raise ConfigParseError(msg)
    if not isinstance(style, str):
        msg = f"'dispatcher' must be a string, got {type(style).__name__}"
        raise ConfigParseError(msg)

    rules = data.get("rules", "")
    if not isinstance(rules, str):
        msg = f"'rules' must be a string, got {type(rules).__name__}"
        raise ConfigParseError(msg)

    template = _optional_str(data, "template")
    prefix = _optional_str(data, "prefix")
    return DispatcherConfig(style=style, rules=rules, template=template, prefix=prefix)  # type: ignore[arg-type]


def _optional_str(data: dict[str, Any], key: str) -> str | None:
    value = data.get(key)
    if value is not None and not isinstance(value, str):
        msg = f"'{key}' must be a string, got {type(value).__name__}"
        raise ConfigParseError(msg)
    return value
