"""DOM helpers shared by the TOC builder, code-table detector and postprocessors."""

from __future__ import annotations

import logging
from typing import Iterable, Iterator, Optional

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import CData, PageElement
from bs4.builder import builder_registry

from .config import get_html_parser

logger = logging.getLogger(__name__)

_SHARED_SOUP_KEY = "__shared_soup"
_SHARED_SOURCE_KEY = "__shared_soup_source"

_TEXT_NODE_TYPES = (NavigableString, CData)


def is_html_parsing_available(parser: Optional[str] = None) -> bool:
    """Return True when BeautifulSoup has a tree builder for ``parser``."""
    features = (parser or get_html_parser()).split()
    return builder_registry.lookup(*features) is not None


def parse_html(html: str, parser: Optional[str] = None) -> BeautifulSoup | None:
    """
    Parse ``html`` into a private tree, or return None if no parser is available.

    Callers treat None as "leave the input alone".
    """
    parser = parser or get_html_parser()
    if not is_html_parsing_available(parser):
        logger.debug(f"HTML parser '{parser}' unavailable, skipping parse")
        return None
    return BeautifulSoup(html, parser)


def body_html(soup: BeautifulSoup) -> str:
    """Serialise the body markup of a parsed document.

    Full-document builders (lxml, html5lib) wrap fragments in html/body; only
    the body contents are returned in that case.
    """
    body = soup.body
    if body is not None:
        return body.decode_contents()
    return soup.decode_contents()


def get_shared_soup(html: str, context: dict) -> BeautifulSoup | None:
    """Return a shared BeautifulSoup instance for the given HTML.

    Postprocessors mutate the same entry markup one after another. Parsing the
    document for every postprocessor is expensive, so the parsed tree is cached
    in the rendering context. The cache is invalidated if the source HTML
    string changes between postprocessors.
    """
    soup = context.get(_SHARED_SOUP_KEY)
    source = context.get(_SHARED_SOURCE_KEY)
    if soup is None or source != html:
        soup = parse_html(html)
        if soup is None:
            clear_shared_soup(context)
            return None
        context[_SHARED_SOUP_KEY] = soup
        context[_SHARED_SOURCE_KEY] = html
    return soup


def soup_to_html(context: dict, soup: BeautifulSoup | None = None) -> str:
    """Serialise the shared soup back to HTML and update the cache."""
    if soup is None:
        soup = context.get(_SHARED_SOUP_KEY)
    html = body_html(soup) if soup is not None else ""
    context[_SHARED_SOURCE_KEY] = html
    context[_SHARED_SOUP_KEY] = soup
    return html


def clear_shared_soup(context: dict) -> None:
    """Remove any cached soup information from the context."""
    context.pop(_SHARED_SOUP_KEY, None)
    context.pop(_SHARED_SOURCE_KEY, None)


def is_text_node(node: PageElement) -> bool:
    """True for character data; comments, doctypes and script strings are excluded."""
    return type(node) in _TEXT_NODE_TYPES


def get_class_tokens(element: Tag) -> list[str]:
    classes = element.get("class", [])
    if isinstance(classes, str):
        classes = classes.split()
    return [token for token in classes if token]


def has_ancestor_named(node: PageElement, names: Iterable[str]) -> bool:
    """Check whether ``node`` sits inside (or is) an element named in ``names``."""
    names = set(names)
    current = node if isinstance(node, Tag) else node.parent
    while current is not None:
        if isinstance(current, Tag) and current.name in names:
            return True
        current = current.parent
    return False


def child_elements(element: Tag, name: Optional[str] = None) -> list[Tag]:
    """Direct element children of ``element``, optionally filtered by tag name."""
    return [
        child
        for child in element.children
        if isinstance(child, Tag) and (name is None or child.name == name)
    ]


def iter_nodes_after(node: PageElement) -> Iterator[PageElement]:
    """
    Yield every node that follows ``node`` in document order, skipping the
    node's own descendants.
    """
    current = node
    while current is not None and current.next_sibling is None:
        current = current.parent
    if current is None:
        return
    start = current.next_sibling
    yield start
    yield from start.next_elements
