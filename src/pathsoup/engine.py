"""lxml adapter: parsing, XPath evaluation and serialization.

Everything that touches lxml directly lives here, so the rest of the
package only deals with raw nodes handed back by `run_query()`.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, Any

import lxml.html
from lxml import etree

from .errors import QueryError

if TYPE_CHECKING:
    from lxml.etree import _Element, _ElementTree

logger = logging.getLogger(__name__)

# Raw node kinds understood by the classifier
ELEMENT = "element"
TEXT = "text"
COMMENT = "comment"

_EMPTY_DOCUMENT = "<html></html>"

# lxml refuses str input that declares its own encoding.
_XML_DECLARATION_PATTERN = re.compile(r"\A\s*<\?xml[^>]*\?>")


def parse(markup: str | bytes | bytearray | memoryview | None, encoding: str | None = None) -> _ElementTree:
    """Parse HTML markup into a document tree.

    Bytes are decoded by libxml2, using `encoding` when given and the
    document's own declarations otherwise. Markup with no element at all
    (empty, blank, or only comments) yields an empty `<html>` document.
    """
    parser = None
    source: str | bytes
    if isinstance(markup, (bytes, bytearray, memoryview)):
        source = bytes(markup)
        if encoding:
            parser = lxml.html.HTMLParser(encoding=encoding)
    else:
        source = "" if markup is None else str(markup)
        source = _XML_DECLARATION_PATTERN.sub("", source, count=1)

    if not source.strip():
        return _empty_document()

    try:
        root = lxml.html.document_fromstring(source, parser=parser)
    except etree.ParserError as exc:
        # Raised for markup that holds no element, e.g. a lone comment.
        logger.debug("Parsing gave no root element (%s), using an empty document", exc)
        return _empty_document()
    return root.getroottree()


def _empty_document() -> _ElementTree:
    return lxml.html.document_fromstring(_EMPTY_DOCUMENT).getroottree()


def run_query(tree: _ElementTree, query: str, scope: _Element | None = None) -> list[Any]:
    """Evaluate an XPath expression and return the selected nodes in document order.

    With no `scope` the expression is evaluated against the document;
    otherwise `scope` is the context node.

    Raises:
        QueryError: If the expression is malformed or selects something
            other than a node-set
    """
    context = tree if scope is None else scope
    try:
        result = context.xpath(query)
    except etree.XPathError as exc:
        raise QueryError("invalid-query", query=query, reason=str(exc)) from exc

    if not isinstance(result, list):
        raise QueryError("not-a-node-set", kind=type(result).__name__, query=query)
    return result


def node_kind(raw: Any) -> str:
    """Return ELEMENT, TEXT or COMMENT, or a description of an unsupported kind."""
    if isinstance(raw, etree._Element):
        tag = raw.tag
        if tag is etree.Comment:
            return COMMENT
        if isinstance(tag, str):
            return ELEMENT
        # The HTML parser reads "<?...>" as a comment, so this only fires for
        # trees built some other way.
        if tag is etree.PI:
            return "processing-instruction"
        if tag is etree.Entity:
            return "entity"
        return type(raw).__name__

    if isinstance(raw, str):
        # lxml returns text nodes as "smart" strings that remember their origin
        if getattr(raw, "is_text", False) or getattr(raw, "is_tail", False):
            return TEXT
        if getattr(raw, "is_attribute", False):
            return "attribute"
        return "string"

    return type(raw).__name__


def parent_of(raw: Any) -> _Element | None:
    """Return the element containing `raw`, or None at the top of the document."""
    if isinstance(raw, str):
        parent = raw.getparent()
        # Tail text hangs off the preceding sibling in lxml's model.
        if parent is not None and raw.is_tail:
            parent = parent.getparent()
        return parent
    return raw.getparent()


def child_nodes(node: _Element) -> list[Any]:
    return run_query(node.getroottree(), "node()", node)


def text_content(node: _Element | _ElementTree) -> str:
    """Concatenate all descendant text, excluding comments."""
    return str(node.xpath("string()"))


def comment_content(raw: _Element) -> str:
    return raw.text or ""


def serialize(node: _Element | _ElementTree) -> str:
    if isinstance(node, etree._ElementTree):
        return lxml.html.tostring(node, encoding="unicode")
    return lxml.html.tostring(node, encoding="unicode", with_tail=False)
