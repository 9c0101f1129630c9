# reader/content/code_tables.py
"""
Recognise source code that feed generators encoded as a <table>.

Syntax highlighters such as Pygments, Rouge and highlight.js line numbers emit
a gutter column of line numbers next to a code column:

    <table class="highlighttable">
        <tr>
            <td class="gutter"><pre>1
2</pre></td>
            <td class="code"><pre>print("a")
print("b")</pre></td>
        </tr>
    </table>

extract_code_block_from_table() turns that back into the original source text
plus a default language guess. Tables without <pre>/<code> in any cell are
never treated as code.

Known risk: the numeric-first-column layout check also matches tables whose
first column is an ordinal (recipe steps, rankings) when another cell holds
inline <code>.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple

from bs4 import NavigableString, Tag

from .dom import child_elements, get_class_tokens, is_text_node
from .languages import (
    PLAIN_TEXT,
    detect_code_language_from_class_tokens,
    detect_code_language_from_content,
)

logger = logging.getLogger(__name__)

CODE_TABLE_MARKERS = {"highlighttable", "rouge-table", "hljs-ln-table", "codehilitetable"}
CODE_CELL_MARKERS = {"code", "rouge-code", "hljs-ln-code", "highlight-code"}
GUTTER_CELL_MARKERS = {"gutter", "rouge-gutter", "hljs-ln-numbers", "line-numbers"}
LINE_MARKER = "line"

BLOCK_TEXT_TAGS = {"div", "p", "li", "tr", "section", "article"}

_LINE_NUMBER_RE = re.compile(r"[0-9]+")


@dataclass(frozen=True)
class CodeTableExtraction:
    code_text: str
    default_language: str


def _has_marker(element: Tag, markers: set) -> bool:
    return any(token in markers for token in get_class_tokens(element))


def _is_line_number(text: str) -> bool:
    return _LINE_NUMBER_RE.fullmatch(text.strip()) is not None


def _has_pre_or_code(element: Tag) -> bool:
    return element.find(["pre", "code"]) is not None


def _text_content(element: Tag) -> str:
    return "".join(str(node) for node in element.descendants if is_text_node(node))


def _text_with_line_breaks(node) -> str:
    """Text of ``node`` with a newline after block elements and for each <br>."""
    parts = []
    # (node, leaving) pairs; leaving marks the exit of a block element
    stack = [(node, False)]
    while stack:
        current, leaving = stack.pop()
        if leaving:
            parts.append("\n")
            continue
        if isinstance(current, NavigableString):
            if is_text_node(current):
                parts.append(str(current))
            continue
        if current.name == "br":
            parts.append("\n")
            continue

        if current.name in BLOCK_TEXT_TAGS:
            stack.append((current, True))
        stack.extend((child, False) for child in reversed(current.contents))
    return "".join(parts)


def extract_code_text_from_cell(cell: Tag) -> str:
    """
    Return the source text held by a code cell.

    Highlighters that wrap each line in an element with class "line" keep their
    line structure; otherwise block elements and <br> tags mark line breaks.
    """
    container = cell.find("code") or cell.find("pre") or cell

    line_elements = [child for child in child_elements(container) if LINE_MARKER in get_class_tokens(child)]
    if line_elements:
        return "\n".join(_text_content(line) for line in line_elements)

    return _text_with_line_breaks(container).rstrip("\n")


def _row_cells(row: Tag) -> List[Tag]:
    return child_elements(row, "td")


def _is_numeric_gutter_row(row: Tag) -> bool:
    cells = _row_cells(row)
    if len(cells) < 2:
        return False
    return _is_line_number(_text_content(cells[0])) and bool(_text_content(cells[1]).strip())


def _cell_after(cells: Sequence[Tag], index: int) -> Optional[Tag]:
    if 0 <= index and index + 1 < len(cells):
        return cells[index + 1]
    return None


def _select_by_code_marker(cells: Sequence[Tag]) -> Optional[Tag]:
    for cell in cells:
        if _has_marker(cell, CODE_CELL_MARKERS):
            return cell
    return None


def _select_after_gutter_marker(cells: Sequence[Tag]) -> Optional[Tag]:
    for index, cell in enumerate(cells):
        if _has_marker(cell, GUTTER_CELL_MARKERS):
            return _cell_after(cells, index)
    return None


def _select_after_numeric_cell(cells: Sequence[Tag]) -> Optional[Tag]:
    if len(cells) >= 2 and _is_line_number(_text_content(cells[0])):
        return cells[1]
    return None


def _select_longest_code(cells: Sequence[Tag]) -> Optional[Tag]:
    candidates = [
        (cell, _text_content(cell).strip())
        for cell in cells
        if _has_pre_or_code(cell)
    ]
    candidates = [(cell, text) for cell, text in candidates if not _is_line_number(text)]
    if not candidates:
        return None
    return max(candidates, key=lambda candidate: len(candidate[1]))[0]


def _select_last_cell(cells: Sequence[Tag]) -> Optional[Tag]:
    return cells[-1] if cells else None


# Evaluated in order; the first rule that yields a cell wins.
CODE_CELL_RULES: Tuple[Tuple[str, Callable[[Sequence[Tag]], Optional[Tag]]], ...] = (
    ("code-marker", _select_by_code_marker),
    ("after-gutter-marker", _select_after_gutter_marker),
    ("after-numeric-cell", _select_after_numeric_cell),
    ("longest-code", _select_longest_code),
    ("last-cell", _select_last_cell),
)


def select_code_cell(cells: Sequence[Tag]) -> Optional[Tag]:
    for _name, select in CODE_CELL_RULES:
        cell = select(cells)
        if cell is not None:
            return cell
    return None


def is_code_table(table: Tag) -> bool:
    """Decide whether ``table`` is a code block laid out as a table."""
    td_nodes = table.find_all("td")
    if not any(_has_pre_or_code(td) for td in td_nodes):
        return False

    if _has_marker(table, CODE_TABLE_MARKERS):
        return True
    if any(_has_marker(td, CODE_CELL_MARKERS | GUTTER_CELL_MARKERS) for td in td_nodes):
        return True

    return any(_is_numeric_gutter_row(row) for row in table.find_all("tr"))


def _trim_trailing_blank_lines(lines: List[str]) -> List[str]:
    while len(lines) > 1 and lines[-1] == "":
        lines.pop()
    return lines


def extract_code_block_from_table(table: Tag) -> Optional[CodeTableExtraction]:
    """
    Rebuild the source text of a code table.

    Args:
        table: BeautifulSoup <table> element

    Returns:
        CodeTableExtraction with the code and a default language, or None if
        the table should be rendered as a regular table
    """
    if not is_code_table(table):
        return None

    rows = table.find_all("tr")
    if not rows:
        return None

    lines: List[str] = []
    cell_language = PLAIN_TEXT

    for row in rows:
        cells = _row_cells(row)
        if not cells:
            continue

        code_cell = select_code_cell(cells)
        if code_cell is None:
            continue

        if cell_language == PLAIN_TEXT:
            cell_language = detect_code_language_from_class_tokens(get_class_tokens(code_cell))

        row_text = extract_code_text_from_cell(code_cell).replace("\r\n", "\n")
        lines.extend(row_text.split("\n"))

    lines = _trim_trailing_blank_lines(lines)
    if not lines:
        return None

    code_text = "\n".join(lines)
    language = cell_language
    if language == PLAIN_TEXT:
        language = detect_code_language_from_class_tokens(get_class_tokens(table))
    if language == PLAIN_TEXT:
        language = detect_code_language_from_content(code_text)

    logger.debug(f"Detected code table with {len(lines)} lines ({language})")
    return CodeTableExtraction(code_text=code_text, default_language=language)


def detect_code_language_from_pre(pre: Tag) -> str:
    """Default language for a <pre> block: its classes, its <code> classes, then content."""
    language = detect_code_language_from_class_tokens(get_class_tokens(pre))
    if language != PLAIN_TEXT:
        return language

    for code in child_elements(pre, "code"):
        language = detect_code_language_from_class_tokens(get_class_tokens(code))
        if language != PLAIN_TEXT:
            return language

    return detect_code_language_from_content(_text_content(pre))
