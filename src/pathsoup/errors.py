"""Exception types and centralized error messages for pathsoup.

Every failure raised by this package is a `PathSoupError`. Each concrete
kind also inherits from the builtin exception a caller would naturally
catch for it, so `hasattr()` and `except ValueError` keep working.
"""

from __future__ import annotations

from typing import Any


def generate_error_message(code: str, **context: Any) -> str:
    """Generate a human-readable message from an error code.

    Args:
        code: The error code string (kebab-case format)
        context: Values interpolated into the message

    Returns:
        Human-readable error message string
    """
    messages = {
        # Classification
        "unknown-node-kind": "Query returned a node of unknown kind: {kind}",
        "not-a-node-set": "Query did not select a node-set (got {kind}): {query}",
        # Facade access
        "search-on-leaf": "{kind} nodes cannot be searched",
        "no-such-property": "{kind} has no property {prop!r}",
        "property-failed": "Property {prop!r} of {kind} could not be resolved",
        # Filter normalization
        "unsupported-name": "Unsupported tag name filter: {value!r}",
        "unsupported-attrs": "Unsupported attribute filter: {value!r}",
        "unsupported-attr-value": "Unsupported value for attribute {attr!r}: {value!r}",
        "unsupported-text": "Unsupported text filter: {value!r}",
        "negative-limit": "limit must be zero or positive, got {value!r}",
        "unknown-variant": "Cannot compile filter variant: {value!r}",
        # Query evaluation
        "invalid-query": "Invalid XPath query {query!r}: {reason}",
    }

    template = messages.get(code)
    if template is None:
        return code
    return template.format(**context)


class PathSoupError(Exception):
    """Base class for all pathsoup errors."""

    code: str

    def __init__(self, code: str, **context: Any) -> None:
        self.code = code
        super().__init__(generate_error_message(code, **context))


class UnknownNodeKind(PathSoupError, TypeError):
    """Raised when the query engine returns a node that has no facade."""


class UnsupportedOperation(PathSoupError, AttributeError):
    """Raised for searches on text/comment nodes and unknown facade properties."""


class InvalidFilterCombination(PathSoupError, ValueError):
    """Raised when filter arguments cannot be canonicalized or compiled."""


class QueryError(PathSoupError, ValueError):
    """Raised when a raw XPath query is malformed."""
