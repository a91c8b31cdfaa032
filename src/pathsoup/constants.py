from __future__ import annotations

# Attributes whose values are whitespace-separated token lists. Filters on
# these match a token sequence inside the value instead of the whole value.
LIST_ATTRIBUTES: frozenset[str] = frozenset(
    {
        "accept-charset",
        "accesskey",
        "archive",
        "class",
        "dropzone",
        "for",
        "headers",
        "rel",
        "rev",
        "sandbox",
        "sizes",
    }
)

# Properties that always resolve on a facade and are never treated as
# named-tag shorthand searches.
ELEMENT_PROPERTIES: frozenset[str] = frozenset(
    {
        "attrs",
        "children",
        "contents",
        "document",
        "name",
        "parent",
        "string",
        "text",
    }
)

DOCUMENT_PROPERTIES: frozenset[str] = frozenset(
    {
        "compiler",
        "encoding",
        "list_attributes",
        "name",
        "parent",
        "root",
        "string",
        "text",
        "tree",
    }
)

DOCUMENT_NAME = "[document]"
