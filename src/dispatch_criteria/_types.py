"""Core type aliases and the base error for dispatch_criteria.

A dispatch rule names the variables that matter when matching a class of
requests. Dispatch criteria instantiate those variables for one request.
Both are plain strings so a mock engine can store them as lookup keys and
compare them with ``==``.
"""

from __future__ import annotations

from typing import TypeAlias

# " && "-joined variable names, e.g. "x && y" or "part1 && part2".
DispatchRule: TypeAlias = str

# Sorted "/name=value" or "?name=value" segments, e.g. "/x=10/y=20".
DispatchCriteria: TypeAlias = str


class DispatchError(Exception):
    """Errors from dispatch rule and criteria extraction."""
