from .document import Document
from .errors import (
    InvalidFilterCombination,
    PathSoupError,
    QueryError,
    UnknownNodeKind,
    UnsupportedOperation,
)
from .node import CommentNode, Element, TextNode
from .resultset import ResultSet

__all__ = [
    "CommentNode",
    "Document",
    "Element",
    "InvalidFilterCombination",
    "PathSoupError",
    "QueryError",
    "ResultSet",
    "TextNode",
    "UnknownNodeKind",
    "UnsupportedOperation",
]
