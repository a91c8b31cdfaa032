from __future__ import annotations

from typing import TYPE_CHECKING, Any, overload

if TYPE_CHECKING:
    from collections.abc import Iterator

    from .node import CommentNode, Element, TextNode

    Facade = Element | TextNode | CommentNode


class ResultSet:
    """The nodes matched by one query, in document order.

    A ResultSet is a snapshot: it never re-runs its query. Slots can be
    replaced, appended or deleted, but `len()` keeps reporting how many nodes
    the query matched.
    """

    __slots__ = ("_elements", "_length")

    _elements: list[Facade]
    _length: int

    def __init__(self, raw_nodes: list[Any], elements: list[Facade]) -> None:
        self._length = len(raw_nodes)
        self._elements = list(elements)

    @property
    def elements(self) -> list[Facade]:
        """A copy of the current element slots."""
        return list(self._elements)

    @property
    def length(self) -> int:
        return self._length

    def __len__(self) -> int:
        return self._length

    def __bool__(self) -> bool:
        return bool(self._elements)

    def __iter__(self) -> Iterator[Facade]:
        return iter(list(self._elements))

    @overload
    def __getitem__(self, index: int) -> Facade: ...

    @overload
    def __getitem__(self, index: slice) -> list[Facade]: ...

    def __getitem__(self, index: int | slice) -> Facade | list[Facade]:
        return self._elements[index]

    def __setitem__(self, index: int, value: Facade) -> None:
        self._elements[index] = value

    def __delitem__(self, index: int) -> None:
        del self._elements[index]

    def __contains__(self, item: object) -> bool:
        return item in self._elements

    def has_index(self, index: int) -> bool:
        """Return True if `index` addresses an existing slot."""
        return -len(self._elements) <= index < len(self._elements)

    def append(self, value: Facade) -> None:
        self._elements.append(value)

    def strings(self) -> list[str]:
        """Return each node's string, falling back to its text.

        Elements with a single text or comment child give that child's
        content; other elements give their trimmed descendant text. Text and
        comment nodes give their content.
        """
        out: list[str] = []
        for node in self._elements:
            string = node.string
            out.append(string.content if string is not None else node.text)
        return out

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ResultSet):
            return self._elements == other._elements
        if isinstance(other, list):
            return self._elements == other
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]  # Unhashable since we define __eq__

    def __repr__(self) -> str:
        return f"ResultSet({self._elements!r})"
