# reader/content/toc.py
"""
Table of contents for feed entry content.

Feed entries arrive as arbitrary HTML fragments. This module:
- Finds h2-h4 headings in document order
- Gives every heading with text a unique, URL-safe id (explicit ids win)
- Marks those headings with data-reading-heading="true"
- Measures the plain text of each heading's section and builds a short preview

Expected structure:
    Input:
        <h2>Overview</h2><p>Body</p><h2>Overview</h2>

    Output html:
        <h2 id="overview" data-reading-heading="true">Overview</h2><p>Body</p>
        <h2 id="overview-2" data-reading-heading="true">Overview</h2>
"""

from __future__ import annotations

import logging
import re
import unicodedata
from dataclasses import dataclass, field
from typing import List, Optional, Set

from bs4 import BeautifulSoup, Tag

from .config import get_preview_length
from .dom import body_html, has_ancestor_named, is_text_node, iter_nodes_after, parse_html

logger = logging.getLogger(__name__)

TOC_HEADING_TAGS = ["h2", "h3", "h4"]
READING_HEADING_ATTRIBUTE = "data-reading-heading"
SECTION_EXCLUDED_TAGS = {"script", "style", "noscript"}
PREVIEW_ELLIPSIS = "…"

_WHITESPACE_RE = re.compile(r"\s+")
_DASH_RUN_RE = re.compile(r"-+")


@dataclass(frozen=True)
class TocItem:
    id: str
    text: str
    preview: str
    section_length: int
    level: int

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "text": self.text,
            "preview": self.preview,
            "section_length": self.section_length,
            "level": self.level,
        }


@dataclass(frozen=True)
class EntryContentWithToc:
    html: str
    toc_items: List[TocItem] = field(default_factory=list)


def normalize_whitespace(text: str) -> str:
    return _WHITESPACE_RE.sub(" ", text).strip()


def _is_slug_character(char: str) -> bool:
    if char == "-" or char.isspace():
        return True
    return unicodedata.category(char)[0] in ("L", "N")


def slugify_heading(text: str) -> str:
    """
    Convert heading text to a URL-safe slug.

    Unicode letters and digits survive, so non-Latin headings still get a
    readable id. Punctuation (including "_") is dropped, whitespace becomes "-".
    Returns an empty string when nothing usable is left.
    """
    lowered = text.strip().lower()
    kept = "".join(char for char in lowered if _is_slug_character(char))
    slug = _WHITESPACE_RE.sub("-", kept)
    slug = _DASH_RUN_RE.sub("-", slug)
    return slug.strip("-")


def allocate_unique_id(candidate: str, used_ids: Set[str]) -> str:
    """Reserve ``candidate`` or the first free ``candidate-N`` (N >= 2)."""
    unique_id = candidate
    counter = 1
    while unique_id in used_ids:
        counter += 1
        unique_id = f"{candidate}-{counter}"
    used_ids.add(unique_id)
    return unique_id


def extract_section_text(heading: Tag, next_heading: Optional[Tag] = None) -> str:
    """
    Return the normalized plain text between ``heading`` and ``next_heading``.

    The range starts right after the heading's own subtree and stops right
    before ``next_heading`` (or runs to the end of the document). Text inside
    script, style and noscript elements never counts.
    """
    parts: List[str] = []
    for node in iter_nodes_after(heading):
        if node is next_heading:
            break
        if not is_text_node(node):
            continue
        if has_ancestor_named(node, SECTION_EXCLUDED_TAGS):
            continue
        parts.append(str(node))
    return normalize_whitespace("".join(parts))


def build_preview(text: str, max_length: Optional[int] = None) -> str:
    """Truncate section text at a character boundary and append an ellipsis."""
    if max_length is None:
        max_length = get_preview_length()
    normalized = normalize_whitespace(text)
    if len(normalized) <= max_length:
        return normalized
    return f"{normalized[:max_length].rstrip()}{PREVIEW_ELLIPSIS}"


def _candidate_id(heading: Tag, text: str, position: int) -> str:
    existing_id = heading.get("id") or ""
    if isinstance(existing_id, list):
        existing_id = " ".join(existing_id)
    return existing_id.strip() or slugify_heading(text) or f"section-{position + 1}"


def annotate_headings(soup: BeautifulSoup) -> List[TocItem]:
    """
    Assign ids and reading markers to h2-h4 headings of ``soup`` in place.

    Returns the TOC entries in document order. Headings without text are left
    untouched but still bound the previous heading's section and count
    towards the ``section-N`` fallback numbering.
    """
    headings = soup.find_all(TOC_HEADING_TAGS)
    used_ids: Set[str] = set()
    toc_items: List[TocItem] = []
    preview_length = get_preview_length()

    for index, heading in enumerate(headings):
        text = heading.get_text().strip()
        if not text:
            logger.debug(f"Skipping empty <{heading.name}> at position {index + 1}")
            continue

        next_heading = headings[index + 1] if index + 1 < len(headings) else None
        section_text = extract_section_text(heading, next_heading)

        unique_id = allocate_unique_id(_candidate_id(heading, text, index), used_ids)
        heading["id"] = unique_id
        heading[READING_HEADING_ATTRIBUTE] = "true"

        toc_items.append(
            TocItem(
                id=unique_id,
                text=text,
                preview=build_preview(section_text, preview_length),
                section_length=len(section_text),
                level=int(heading.name[1]),
            )
        )

    return toc_items


def build_entry_content_with_toc(html: str, parser: Optional[str] = None) -> EntryContentWithToc:
    """
    Annotate entry HTML with heading ids and collect its table of contents.

    Args:
        html: Entry body markup, already sanitized
        parser: Optional BeautifulSoup tree builder name (defaults to settings)

    Returns:
        EntryContentWithToc with the annotated body markup and the TOC items.
        Blank input, or a parser that is not installed, returns the input
        untouched with an empty TOC.
    """
    if not html.strip():
        return EntryContentWithToc(html=html, toc_items=[])

    soup = parse_html(html, parser)
    if soup is None:
        return EntryContentWithToc(html=html, toc_items=[])

    toc_items = annotate_headings(soup)
    return EntryContentWithToc(html=body_html(soup), toc_items=toc_items)
