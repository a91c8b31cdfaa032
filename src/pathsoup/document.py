"""Document entry point for pathsoup."""

from __future__ import annotations

from typing import TYPE_CHECKING

from . import engine
from .compiler import QueryCompiler
from .constants import DOCUMENT_NAME, DOCUMENT_PROPERTIES
from .node import Element, Searchable

if TYPE_CHECKING:
    from collections.abc import Iterable

    from lxml.etree import _ElementTree


class Document(Searchable):
    """A parsed HTML document and the root of every search.

    Elements and text nodes found in a document keep a reference back to it;
    they never copy the tree.
    """

    __slots__ = ("compiler", "encoding", "tree")

    _properties = DOCUMENT_PROPERTIES

    compiler: QueryCompiler
    encoding: str | None
    tree: _ElementTree

    def __init__(
        self,
        markup: str | bytes | bytearray | memoryview | None,
        *,
        encoding: str | None = None,
        list_attributes: Iterable[str] | None = None,
    ) -> None:
        self.encoding = encoding
        self.compiler = QueryCompiler(list_attributes)
        self.tree = engine.parse(markup, encoding=encoding)

    def _owner(self) -> Document:
        return self

    def _scope(self) -> None:
        return None

    @property
    def list_attributes(self) -> frozenset[str]:
        return self.compiler.list_attributes

    @property
    def name(self) -> str:
        return DOCUMENT_NAME

    @property
    def parent(self) -> None:
        return None

    @property
    def string(self) -> None:
        return None

    @property
    def root(self) -> Element:
        """The <html> element."""
        return Element(self, self.tree.getroot())

    @property
    def text(self) -> str:
        """The text of the whole document, with surrounding whitespace trimmed."""
        return engine.text_content(self.tree).strip()

    def get_text(self) -> str:
        return self.text

    def to_html(self) -> str:
        """Serialize the whole document, including its doctype."""
        return engine.serialize(self.tree)

    def __str__(self) -> str:
        return self.to_html()

    def __repr__(self) -> str:
        return f"Document({self.root.name!r})"
