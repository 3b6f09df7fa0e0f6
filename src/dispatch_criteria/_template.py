"""URI templates with ``{name}`` placeholders.

A template is tokenized once into literal runs and placeholders. The
placeholder names give the dispatch rule; the compiled matcher projects the
template onto a real URI to recover one value per placeholder.

Matching uses ``google-re2`` for guaranteed linear-time matching: templates
are compiled against request URIs that come straight off the wire. Literal
runs are escaped, so ``.`` or ``?`` in a template match only themselves.
Each placeholder matches one or more characters, greedily, leftmost first.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from functools import lru_cache
from typing import TYPE_CHECKING, TypeAlias

import re2

from dispatch_criteria._canonical import format_criteria, join_rule
from dispatch_criteria._types import DispatchError

if TYPE_CHECKING:
    from dispatch_criteria._types import DispatchCriteria, DispatchRule

logger = logging.getLogger(__name__)

MAX_TEMPLATE_LENGTH = 8192

# Placeholder capture: greedy, at least one character.
_VALUE_GROUP = "(.+)"


class TemplateTooLongError(DispatchError):
    """A template exceeds the length limit."""

    def __init__(self, length: int, max_: int) -> None:
        self.length = length
        self.max = max_
        super().__init__(f"template length {length} exceeds maximum {max_}")


@dataclass(frozen=True, slots=True)
class LiteralRun:
    """Template text that must appear verbatim in a matching URI."""

    text: str


@dataclass(frozen=True, slots=True)
class Placeholder:
    """A ``{name}`` variable segment."""

    name: str


Segment: TypeAlias = LiteralRun | Placeholder


@dataclass(frozen=True, slots=True)
class UriTemplate:
    """A compiled URI template.

    Placeholder names need not be unique. When a name repeats, the value
    captured last wins in match().

    Raises:
        TemplateTooLongError: If the template exceeds MAX_TEMPLATE_LENGTH.

    >>> t = UriTemplate("/pets/{kind}/{id}")
    >>> t.names
    ('kind', 'id')
    >>> t.match("/pets/cat/42")
    {'kind': 'cat', 'id': '42'}
    """

    pattern: str
    segments: tuple[Segment, ...] = field(init=False, repr=False, compare=False)
    _compiled: re2.Pattern[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if len(self.pattern) > MAX_TEMPLATE_LENGTH:
            raise TemplateTooLongError(len(self.pattern), MAX_TEMPLATE_LENGTH)
        segments = _tokenize(self.pattern)
        object.__setattr__(self, "segments", segments)
        object.__setattr__(self, "_compiled", re2.compile(_to_regex(segments)))

    @property
    def names(self) -> tuple[str, ...]:
        """Placeholder names in template order."""
        return tuple(s.name for s in self.segments if isinstance(s, Placeholder))

    @property
    def prefix(self) -> str:
        """Literal text before the first placeholder."""
        if self.segments and isinstance(self.segments[0], LiteralRun):
            return self.segments[0].text
        return ""

    def match(self, uri: str) -> dict[str, str] | None:
        """Project this template onto *uri*.

        Returns the captured value for each placeholder name, or None if
        *uri* does not match the template as a whole.
        """
        m = self._compiled.fullmatch(uri)
        if m is None:
            return None
        return dict(zip(self.names, m.groups(), strict=True))


@lru_cache(maxsize=512)
def compile_template(pattern: str) -> UriTemplate:
    """Compile *pattern*, reusing earlier compilations of the same text."""
    return UriTemplate(pattern)


def extract_parts_from_uri_pattern(pattern: str) -> DispatchRule:
    """Return the placeholder names of *pattern* as a dispatch rule.

    >>> extract_parts_from_uri_pattern("/a/{x}/{y}")
    'x && y'
    >>> extract_parts_from_uri_pattern("/a/b")
    ''
    """
    return join_rule(compile_template(pattern).names)


def extract_from_uri_pattern(pattern: str, real_uri: str) -> DispatchCriteria:
    """Return sorted ``/name=value`` criteria for *real_uri* under *pattern*.

    An empty string means the URI and the template are incompatible; the
    caller should treat this candidate as not applicable.

    >>> extract_from_uri_pattern("/a/{y}/{x}", "/a/20/10")
    '/x=10/y=20'
    >>> extract_from_uri_pattern("/a/{x}", "/b/10")
    ''
    """
    values = compile_template(pattern).match(real_uri)
    if values is None:
        logger.debug("URI %r does not match template %r", real_uri, pattern)
        return ""
    return format_criteria(values)


def _tokenize(pattern: str) -> tuple[Segment, ...]:
    """Split *pattern* into literal runs and placeholders in one pass.

    ``{}`` and an unclosed ``{`` are literal text. A placeholder name runs
    up to the first ``}``, so ``{a{b}`` names ``a{b``.
    """
    segments: list[Segment] = []
    literal_start = 0
    cursor = 0
    while (open_at := pattern.find("{", cursor)) != -1:
        close_at = pattern.find("}", open_at + 1)
        if close_at == -1:
            break
        if close_at == open_at + 1:
            cursor = close_at + 1
            continue
        if open_at > literal_start:
            segments.append(LiteralRun(pattern[literal_start:open_at]))
        segments.append(Placeholder(pattern[open_at + 1 : close_at]))
        literal_start = cursor = close_at + 1
    if literal_start < len(pattern):
        segments.append(LiteralRun(pattern[literal_start:]))
    return tuple(segments)


def _to_regex(segments: tuple[Segment, ...]) -> str:
    parts: list[str] = []
    for segment in segments:
        match segment:
            case LiteralRun(text=text):
                parts.append(re2.escape(text))
            case Placeholder():
                parts.append(_VALUE_GROUP)
    return "".join(parts)
