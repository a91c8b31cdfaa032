from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, ClassVar

from . import engine
from .constants import ELEMENT_PROPERTIES
from .errors import UnknownNodeKind, UnsupportedOperation
from .filters import normalize
from .resultset import ResultSet

if TYPE_CHECKING:
    from lxml.etree import _Element

    from .document import Document
    from .filters import FilterSpec

logger = logging.getLogger(__name__)


def classify(document: Document, raw: Any) -> Element | TextNode | CommentNode:
    """Wrap a raw lxml node in the facade for its kind.

    Raises:
        UnknownNodeKind: For processing instructions, entities, attribute
            values and anything else that is not an element, text or comment
    """
    kind = engine.node_kind(raw)
    if kind == engine.ELEMENT:
        return Element(document, raw)
    if kind == engine.TEXT:
        return TextNode(document, raw)
    if kind == engine.COMMENT:
        return CommentNode(document, raw)
    raise UnknownNodeKind("unknown-node-kind", kind=kind)


def execute(document: Document, query: str, scope: _Element | None) -> ResultSet:
    """Run an XPath query against the document and classify every match."""
    raw_nodes = engine.run_query(document.tree, query, scope)
    logger.debug("Query %s matched %d nodes", query, len(raw_nodes))
    return ResultSet(raw_nodes, [classify(document, raw) for raw in raw_nodes])


def _facade_parent(document: Document, raw_parent: _Element | None) -> Element | Document:
    if raw_parent is None:
        return document
    return Element(document, raw_parent)


class Searchable:
    """Search entry points shared by Element and Document.

    Attribute access that does not hit a real property is a shorthand for
    `find(name)`: `doc.body.div` is the first <div> inside the first <body>.
    """

    __slots__ = ()

    _properties: ClassVar[frozenset[str]] = frozenset()

    def _owner(self) -> Document:
        raise NotImplementedError

    def _scope(self) -> _Element | None:
        raise NotImplementedError

    def find(
        self,
        name: Any = None,
        attrs: Any = None,
        recursive: bool = True,
        text: Any = None,
        **kwargs: Any,
    ) -> Element | TextNode | CommentNode | None:
        """Return the first match for the filters, or None."""
        results = self._search(normalize(name, attrs, recursive, text, 1, **kwargs))
        if not results:
            return None
        return results[0]

    def find_all(
        self,
        name: Any = None,
        attrs: Any = None,
        recursive: bool = True,
        text: Any = None,
        limit: int = 0,
        **kwargs: Any,
    ) -> ResultSet:
        """
        Return every match for the filters, in document order.

        Args:
            name: Tag name, list of tag names, or True for any tag
            attrs: Attribute filters by name, or a value (or list of values)
                to match against any attribute
            recursive: If False, only direct children are considered
            text: Text content, list of contents, or True for any text
            limit: Maximum number of results, 0 for all
            kwargs: Attribute filters; `class_` filters on `class`

        Returns:
            A ResultSet of Element, TextNode and CommentNode facades
        """
        return self._search(normalize(name, attrs, recursive, text, limit, **kwargs))

    findAll = find_all

    def query(self, xpath: str) -> ResultSet:
        """Evaluate a raw XPath expression from this node."""
        return execute(self._owner(), xpath, self._scope())

    xpath = query

    def _search(self, spec: FilterSpec) -> ResultSet:
        document = self._owner()
        scope = self._scope()
        xpath = document.compiler.compile(spec, document_scope=scope is None)
        return execute(document, xpath, scope)

    def __getattr__(self, name: str) -> Element | TextNode | CommentNode | None:
        # Only reached when normal lookup fails.
        if name in self._properties:
            raise UnsupportedOperation("property-failed", kind=type(self).__name__, prop=name)
        if name.startswith("_"):
            raise UnsupportedOperation("no-such-property", kind=type(self).__name__, prop=name)
        return self.find(name)


class Element(Searchable):
    __slots__ = ("_document", "_node")

    _properties = ELEMENT_PROPERTIES

    _document: Document
    _node: _Element

    def __init__(self, document: Document, node: _Element) -> None:
        self._document = document
        self._node = node

    def _owner(self) -> Document:
        return self._document

    def _scope(self) -> _Element:
        return self._node

    @property
    def document(self) -> Document:
        return self._document

    @property
    def name(self) -> str:
        return str(self._node.tag)

    @property
    def attrs(self) -> dict[str, str]:
        """A copy of the element's attributes."""
        return dict(self._node.attrib)

    def get(self, key: str, default: str | None = None) -> str | None:
        return self._node.get(key, default)

    @property
    def parent(self) -> Element | Document:
        """The enclosing element, or the Document for the root element."""
        return _facade_parent(self._document, self._node.getparent())

    @property
    def children(self) -> list[Element | TextNode | CommentNode]:
        return [classify(self._document, raw) for raw in engine.child_nodes(self._node)]

    contents = children

    @property
    def text(self) -> str:
        """All descendant text joined together, with surrounding whitespace trimmed."""
        return engine.text_content(self._node).strip()

    def get_text(self) -> str:
        return self.text

    @property
    def string(self) -> TextNode | CommentNode | None:
        """The only child when it is a text or comment node, otherwise None."""
        raw_children = engine.child_nodes(self._node)
        if len(raw_children) != 1:
            return None
        child = classify(self._document, raw_children[0])
        if isinstance(child, Element):
            return None
        return child

    def to_html(self) -> str:
        """Serialize this element and its subtree."""
        return engine.serialize(self._node)

    def __str__(self) -> str:
        return self.to_html()

    def __repr__(self) -> str:
        return f"Element({self.name!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Element):
            return NotImplemented
        return self._node is other._node

    def __hash__(self) -> int:
        return hash(self._node)


class _LeafNode:
    """Base for text and comment facades. Leaves cannot be searched."""

    __slots__ = ("_document", "_node")

    kind: ClassVar[str] = "Leaf"

    _document: Document
    _node: Any

    def __init__(self, document: Document, node: Any) -> None:
        self._document = document
        self._node = node

    @property
    def content(self) -> str:
        raise NotImplementedError

    @property
    def parent(self) -> Element | Document:
        return _facade_parent(self._document, engine.parent_of(self._node))

    @property
    def string(self) -> TextNode | CommentNode:
        return self  # type: ignore[return-value]

    @property
    def text(self) -> str:
        return self.content

    def find(self, *args: Any, **kwargs: Any) -> None:
        raise UnsupportedOperation("search-on-leaf", kind=self.kind)

    def find_all(self, *args: Any, **kwargs: Any) -> None:
        raise UnsupportedOperation("search-on-leaf", kind=self.kind)

    findAll = find_all

    def query(self, xpath: str) -> None:
        raise UnsupportedOperation("search-on-leaf", kind=self.kind)

    xpath = query

    def __getattr__(self, name: str) -> Any:
        raise UnsupportedOperation("no-such-property", kind=self.kind, prop=name)

    def __str__(self) -> str:
        return self.content

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.content!r})"

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self._identity() == other._identity()  # type: ignore[attr-defined]

    def __hash__(self) -> int:
        return hash((type(self).__name__, self.content))

    def _identity(self) -> tuple[Any, ...]:
        raise NotImplementedError


class TextNode(_LeafNode):
    __slots__ = ()

    kind = "Text"

    @property
    def content(self) -> str:
        return str(self._node)

    def _identity(self) -> tuple[Any, ...]:
        # A text node is either the leading text or the tail of one element.
        return (self._node.getparent(), self._node.is_tail, str(self._node))


class CommentNode(_LeafNode):
    __slots__ = ()

    kind = "Comment"

    @property
    def content(self) -> str:
        return engine.comment_content(self._node)

    def _identity(self) -> tuple[Any, ...]:
        return (self._node,)
