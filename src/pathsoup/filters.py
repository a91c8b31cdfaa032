"""Filter specifications and the normalizer that builds them.

`find()`/`find_all()` accept loosely shaped arguments (strings, booleans,
lists, mappings, free-form keyword filters). `normalize()` turns them into a
closed `FilterSpec` built from the small set of variants below, so the
compiler never has to inspect raw argument shapes.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .errors import InvalidFilterCombination

if TYPE_CHECKING:
    from typing import Any, TypeAlias

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class AnyValue:
    """Matches any tag name, or requires some text/comment node."""

    def __repr__(self) -> str:
        return "ANY"


@dataclass(frozen=True, slots=True)
class OneOf:
    values: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class Absent:
    def __repr__(self) -> str:
        return "ABSENT"


@dataclass(frozen=True, slots=True)
class Present:
    def __repr__(self) -> str:
        return "PRESENT"


@dataclass(frozen=True, slots=True)
class Exact:
    value: str


@dataclass(frozen=True, slots=True)
class WildcardValues:
    """Attribute values matched against any attribute of an element."""

    values: tuple[str, ...]


ANY = AnyValue()
ABSENT = Absent()
PRESENT = Present()

NameFilter: TypeAlias = "AnyValue | OneOf | None"
TextFilter: TypeAlias = "AnyValue | OneOf | None"
AttributeFilter: TypeAlias = "Absent | Present | Exact | OneOf"
AttributeMap: TypeAlias = "dict[str, AttributeFilter]"


@dataclass(frozen=True, slots=True)
class FilterSpec:
    name: NameFilter
    attrs: AttributeMap | WildcardValues
    text: TextFilter
    recursive: bool = True
    limit: int = 0


_COLLECTION_TYPES = (list, tuple, set, frozenset)


def _ordered_strings(values: Any) -> tuple[str, ...]:
    # Sets have no stable order; sort them so compiled queries are reproducible.
    if isinstance(values, (set, frozenset)):
        values = sorted(values, key=str)
    return tuple(dict.fromkeys(values))


def _normalize_text(text: Any) -> TextFilter:
    if text is None or text is False:
        return None
    if text is True:
        return ANY
    if isinstance(text, str):
        return OneOf((text,))
    if isinstance(text, _COLLECTION_TYPES) and all(isinstance(t, str) for t in text):
        return OneOf(_ordered_strings(text))
    raise InvalidFilterCombination("unsupported-text", value=text)


def _normalize_name(name: Any, text: TextFilter) -> NameFilter:
    if name is None or name is False:
        # No tag filter and no text filter means "every element".
        return ANY if text is None else None
    if name is True:
        return ANY
    if isinstance(name, str):
        return OneOf((name,))
    if isinstance(name, _COLLECTION_TYPES) and all(isinstance(n, str) for n in name):
        return OneOf(_ordered_strings(name))
    raise InvalidFilterCombination("unsupported-name", value=name)


def _attribute_scalar(attr: str, value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    raise InvalidFilterCombination("unsupported-attr-value", attr=attr, value=value)


def _normalize_attr_value(attr: str, value: Any) -> AttributeFilter:
    if value is None or value is False:
        return ABSENT
    if value is True:
        return PRESENT
    if isinstance(value, _COLLECTION_TYPES):
        if any(v is True for v in value):
            return PRESENT
        scalars = [_attribute_scalar(attr, v) for v in value]
        if isinstance(value, (set, frozenset)):
            return OneOf(_ordered_strings(set(scalars)))
        return OneOf(_ordered_strings(scalars))
    return Exact(_attribute_scalar(attr, value))


def _keyword_attribute_name(key: str) -> str:
    # class_="x" filters on "class", which is a reserved word in Python.
    if len(key) > 1 and key.endswith("_"):
        return key[:-1]
    return key


def _normalize_attrs(attrs: Any) -> AttributeMap | WildcardValues:
    if attrs is None:
        return {}
    if isinstance(attrs, str):
        return WildcardValues((attrs,))
    if isinstance(attrs, Mapping):
        normalized: AttributeMap = {}
        for key, value in attrs.items():
            if not isinstance(key, str):
                raise InvalidFilterCombination("unsupported-attrs", value=attrs)
            normalized[key] = _normalize_attr_value(key, value)
        return normalized
    if isinstance(attrs, (list, tuple)):
        if not attrs:
            return {}
        return WildcardValues(_ordered_strings([_attribute_scalar("*", v) for v in attrs]))
    raise InvalidFilterCombination("unsupported-attrs", value=attrs)


def normalize(
    name: Any = None,
    attrs: Any = None,
    recursive: bool = True,
    text: Any = None,
    limit: int = 0,
    **kwargs: Any,
) -> FilterSpec:
    """Canonicalize raw search arguments into a `FilterSpec`.

    Args:
        name: Tag name, list of tag names, True (any tag) or None/False
        attrs: Mapping of attribute filters, or a string/list of values
            matched against any attribute
        recursive: Search all descendants (True) or direct children only
        text: Text/comment content, list of contents, or True (any)
        limit: Maximum number of results, 0 for no limit
        kwargs: Free-form attribute filters; they override `attrs`

    Returns:
        A new FilterSpec. The arguments themselves are never modified.

    Raises:
        InvalidFilterCombination: For argument shapes with no filter form
    """
    if isinstance(limit, bool) or not isinstance(limit, int) or limit < 0:
        raise InvalidFilterCombination("negative-limit", value=limit)

    text_filter = _normalize_text(text)
    name_filter = _normalize_name(name, text_filter)
    attr_filter = _normalize_attrs(attrs)

    if kwargs:
        keyword_filters = {
            _keyword_attribute_name(key): _normalize_attr_value(key, value) for key, value in kwargs.items()
        }
        if isinstance(attr_filter, WildcardValues):
            logger.warning(
                "Ignoring wildcard attribute values %r in favor of keyword filters %r",
                attr_filter.values,
                sorted(keyword_filters),
            )
            attr_filter = keyword_filters
        else:
            attr_filter = {**attr_filter, **keyword_filters}

    return FilterSpec(
        name=name_filter,
        attrs=attr_filter,
        text=text_filter,
        recursive=bool(recursive),
        limit=limit,
    )
