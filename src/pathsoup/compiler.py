# XPath query compiler for pathsoup
# Turns a normalized FilterSpec into a single XPath 1.0 expression

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

from .constants import LIST_ATTRIBUTES
from .errors import InvalidFilterCombination
from .filters import Absent, AnyValue, Exact, OneOf, Present, WildcardValues

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .filters import AttributeFilter, AttributeMap, FilterSpec, NameFilter, TextFilter

logger = logging.getLogger(__name__)

# XPath NCName: names outside this shape are matched through name() instead.
_NCNAME_PATTERN = re.compile(r"[^\W\d][\w.\-]*\Z")

# Characters stripped and collapsed by XPath normalize-space().
_XPATH_SPACE_PATTERN = re.compile(r"[ \t\r\n]+")

NEVER = "false()"


def xpath_literal(value: str) -> str:
    """Quote a string as an XPath 1.0 literal.

    XPath has no escape sequences, so a value holding both quote kinds is
    built with concat().
    """
    if '"' not in value:
        return f'"{value}"'
    if "'" not in value:
        return f"'{value}'"
    parts = value.split('"')
    pieces: list[str] = []
    for i, part in enumerate(parts):
        if i:
            pieces.append("'\"'")
        if part:
            pieces.append(f'"{part}"')
    return "concat(" + ", ".join(pieces) + ")"


def _normalize_space(value: str) -> str:
    return _XPATH_SPACE_PATTERN.sub(" ", value).strip(" ")


def scope_prefix(document_scope: bool, recursive: bool) -> str:
    if document_scope:
        return "//" if recursive else "/"
    return ".//" if recursive else "./"


def _any_of(predicates: Iterable[str]) -> str:
    joined = " or ".join(predicates)
    return joined or NEVER


class QueryCompiler:
    """Compiles FilterSpecs into XPath expressions."""

    __slots__ = ("list_attributes",)

    list_attributes: frozenset[str]

    def __init__(self, list_attributes: Iterable[str] | None = None) -> None:
        self.list_attributes = LIST_ATTRIBUTES if list_attributes is None else frozenset(list_attributes)

    def compile(self, spec: FilterSpec, *, document_scope: bool) -> str:
        """
        Compile a filter into one XPath expression.

        Args:
            spec: The normalized filter
            document_scope: True when searching from the document node,
                False when searching from an element context node

        Returns:
            An XPath expression selecting matches in document order

        Raises:
            InvalidFilterCombination: If the spec holds an unknown variant
        """
        prefix = scope_prefix(document_scope, spec.recursive)

        if spec.name is None and not spec.attrs and spec.text is not None:
            expression = self._compile_text_search(prefix, spec.text)
        else:
            expression = " | ".join(self._compile_element_search(prefix, spec))

        if spec.limit > 0:
            expression = f"({expression})[position() <= {spec.limit}]"

        logger.debug("Compiled %r into %s", spec, expression)
        return expression

    # Text and comment nodes, no element step at all

    def _compile_text_search(self, prefix: str, text: TextFilter) -> str:
        if isinstance(text, AnyValue):
            predicate = ""
        elif isinstance(text, OneOf):
            predicate = "[" + _any_of(f".={xpath_literal(t)}" for t in text.values) + "]"
        else:
            raise InvalidFilterCombination("unknown-variant", value=text)
        return f"{prefix}text(){predicate} | {prefix}comment(){predicate}"

    # Elements: one path per tag name, joined into a union

    def _compile_element_search(self, prefix: str, spec: FilterSpec) -> list[str]:
        text_predicate = self._text_predicate(spec.text)
        paths: list[str] = []

        for step in self._name_steps(spec.name):
            if isinstance(spec.attrs, WildcardValues):
                if not spec.attrs.values:
                    paths.append(f"{prefix}{step}[{NEVER}]{text_predicate}")
                for value in spec.attrs.values:
                    paths.append(f"{prefix}{step}[@*={xpath_literal(value)}]{text_predicate}")
            elif isinstance(spec.attrs, dict):
                attrs_predicate = self._attributes_predicate(spec.attrs)
                paths.append(f"{prefix}{step}{attrs_predicate}{text_predicate}")
            else:
                raise InvalidFilterCombination("unknown-variant", value=spec.attrs)

        return paths

    def _name_steps(self, name: NameFilter) -> list[str]:
        # A missing name with attribute filters means "any element".
        if name is None or isinstance(name, AnyValue):
            return ["*"]
        if isinstance(name, OneOf):
            if not name.values:
                return [f"*[{NEVER}]"]
            return [self._name_step(n) for n in name.values]
        raise InvalidFilterCombination("unknown-variant", value=name)

    def _name_step(self, name: str) -> str:
        if _NCNAME_PATTERN.match(name):
            return name
        return f"*[name()={xpath_literal(name)}]"

    def _text_predicate(self, text: TextFilter) -> str:
        """Constrain an element step by its text.

        `ANY` only looks at direct children: `<div><b>x</b></div>` has no
        text of its own, so `find_all("div", text=True)` skips it. Concrete
        values are compared against every descendant text or comment node.
        """
        if text is None:
            return ""
        if isinstance(text, AnyValue):
            return "[text() or comment()]"
        if isinstance(text, OneOf):
            tests: list[str] = []
            for t in text.values:
                literal = xpath_literal(t)
                tests.append(f".//text()={literal}")
                tests.append(f".//comment()={literal}")
            return "[" + _any_of(tests) + "]"
        raise InvalidFilterCombination("unknown-variant", value=text)

    # Attributes

    def _attributes_predicate(self, attrs: AttributeMap) -> str:
        return "".join(f"[{self._attribute_predicate(name, f)}]" for name, f in attrs.items())

    def _attribute_predicate(self, name: str, attr_filter: AttributeFilter) -> str:
        ref = self._attribute_ref(name)
        if isinstance(attr_filter, Absent):
            return f"not({ref})"
        if isinstance(attr_filter, Present):
            return ref
        if isinstance(attr_filter, Exact):
            return self._value_test(name, ref, attr_filter.value)
        if isinstance(attr_filter, OneOf):
            return _any_of(self._value_test(name, ref, v) for v in attr_filter.values)
        raise InvalidFilterCombination("unknown-variant", value=attr_filter)

    def _attribute_ref(self, name: str) -> str:
        if _NCNAME_PATTERN.match(name):
            return f"@{name}"
        return f"@*[name()={xpath_literal(name)}]"

    def _value_test(self, name: str, ref: str, value: str) -> str:
        if name in self.list_attributes:
            # Token-list attributes: the filter's token sequence must appear
            # as whole tokens, in order, inside the attribute value.
            needle = xpath_literal(f" {_normalize_space(value)} ")
            return f'contains(concat(" ", normalize-space({ref}), " "), {needle})'
        return f"{ref}={xpath_literal(value)}"
