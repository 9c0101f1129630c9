# reader/content/postprocessors/bionic_reading.py
"""
Postprocessor that renders English text in "bionic reading" style.

The first letters of every word are wrapped in <strong> so the eye can skim:

    <p>Reading quickly</p>  ->  <p><strong>Rea</strong>ding <strong>qui</strong>ckly</p>

Only text nodes change. Text inside code, keyboard/sample output, scripts,
styles, form fields, SVG, MathML and existing bold elements is left alone, and
existing markup is never moved or removed.
"""

import logging
import re
from typing import List, Optional

from bs4 import BeautifulSoup, NavigableString

from ..config import get_reader_config
from ..dom import body_html, get_shared_soup, has_ancestor_named, is_text_node, parse_html, soup_to_html

logger = logging.getLogger(__name__)

BIONIC_WORD_RE = re.compile(r"[A-Za-z][A-Za-z'’-]*")
BIONIC_SKIP_TAGS = {"pre", "code", "kbd", "samp", "script", "style", "textarea", "svg", "math", "strong", "b"}

_ASCII_LETTER_RE = re.compile(r"[A-Za-z]")


def bionic_prefix_length(word_length: int) -> int:
    if word_length <= 3:
        return 1
    if word_length <= 6:
        return 2
    if word_length <= 10:
        return 3
    return 4


def _build_bionic_nodes(soup: BeautifulSoup, text: str) -> Optional[List]:
    """
    Split ``text`` into plain strings and <strong> prefixes.

    Returns None when the text holds no word to emphasise.
    """
    nodes = []
    last_index = 0

    for match in BIONIC_WORD_RE.finditer(text):
        word = match.group(0)
        if match.start() > last_index:
            nodes.append(soup.new_string(text[last_index:match.start()]))

        prefix_length = bionic_prefix_length(len(word))
        if prefix_length >= len(word):
            nodes.append(soup.new_string(word))
        else:
            strong = soup.new_tag("strong")
            strong.string = word[:prefix_length]
            nodes.append(strong)
            nodes.append(soup.new_string(word[prefix_length:]))

        last_index = match.end()

    if not nodes:
        return None

    if last_index < len(text):
        nodes.append(soup.new_string(text[last_index:]))
    return nodes


def apply_bionic_reading(soup: BeautifulSoup) -> int:
    """Rewrite qualifying text nodes of ``soup`` in place; returns how many changed."""
    # Collect first because the tree is modified while replacing
    text_nodes = [
        node for node in soup.descendants if isinstance(node, NavigableString) and is_text_node(node)
    ]

    changed = 0
    for text_node in text_nodes:
        if text_node.parent is None or has_ancestor_named(text_node, BIONIC_SKIP_TAGS):
            continue

        text = str(text_node)
        if not _ASCII_LETTER_RE.search(text):
            continue

        new_nodes = _build_bionic_nodes(soup, text)
        if not new_nodes:
            continue

        for node in new_nodes:
            text_node.insert_before(node)
        text_node.extract()
        changed += 1

    return changed


def apply_bionic_reading_to_html(html: str) -> str:
    """
    Apply the bionic reading transform to an HTML fragment.

    Blank input, or a parser that is not installed, returns ``html`` unchanged.
    """
    if not html.strip():
        return html

    soup = parse_html(html)
    if soup is None:
        return html

    apply_bionic_reading(soup)
    return body_html(soup)


def bionic_reading(html: str, context: dict) -> str:
    """
    Bionic reading postprocessor.

    Enabled by ``context["bionic_reading"]``; falls back to the
    READER_CONTENT['BIONIC_READING'] setting when the context does not say.
    """
    enabled = context.get("bionic_reading")
    if enabled is None:
        enabled = get_reader_config()["BIONIC_READING"]
    if not enabled or not html.strip():
        return html

    soup = get_shared_soup(html, context)
    if soup is None:
        return html

    changed = apply_bionic_reading(soup)
    logger.debug(f"Bionic reading rewrote {changed} text node(s)")
    return soup_to_html(context, soup)
