# reader/content/postprocessors/code_block_enhancer.py
"""
Postprocessor that normalises code blocks to a single canonical form.

This postprocessor:
- Replaces tables that encode code (line-number gutter + code cell) with a
  <pre><code> block holding the reconstructed source
- Pretty-prints JSON payloads recovered from code tables
- Adds a data-language attribute with the default language guess to every
  <pre> block
- Leaves ordinary data tables untouched

Output:
    <pre class="code-block" data-language="python"><code class="language-python">...</code></pre>
"""

import logging

from bs4 import BeautifulSoup, Tag

from ..code_tables import detect_code_language_from_pre, extract_code_block_from_table
from ..dom import get_class_tokens, get_shared_soup, soup_to_html
from ..languages import PLAIN_TEXT, format_code_for_language

logger = logging.getLogger(__name__)

CODE_BLOCK_CLASS = "code-block"


def _build_code_block(soup: BeautifulSoup, code_text: str, language: str) -> Tag:
    pre = soup.new_tag("pre")
    pre["class"] = [CODE_BLOCK_CLASS]
    pre["data-language"] = language

    code = soup.new_tag("code")
    if language != PLAIN_TEXT:
        code["class"] = [f"language-{language}"]
    code.string = format_code_for_language(code_text, language)
    pre.append(code)
    return pre


def _replace_code_tables(soup: BeautifulSoup) -> int:
    replaced = 0
    # Outer tables first; nested tables go away with their replaced parent
    for table in soup.find_all("table"):
        if table.decomposed:
            continue
        extraction = extract_code_block_from_table(table)
        if extraction is None:
            continue
        table.replace_with(_build_code_block(soup, extraction.code_text, extraction.default_language))
        table.decompose()
        replaced += 1
    return replaced


def _mark_pre_languages(soup: BeautifulSoup) -> None:
    for pre in soup.find_all("pre"):
        if pre.get("data-language"):
            continue
        classes = get_class_tokens(pre)
        if CODE_BLOCK_CLASS not in classes:
            pre["class"] = classes + [CODE_BLOCK_CLASS]
        pre["data-language"] = detect_code_language_from_pre(pre)


def code_block_enhancer(html: str, context: dict, replace_tables: bool = True) -> str:
    """
    Normalise code tables and <pre> blocks.

    Args:
        html: HTML string to process
        context: Context dictionary (unused but required for postprocessor signature)
        replace_tables: Convert code-shaped tables into <pre><code> blocks (default: True)

    Returns:
        Processed HTML with canonical code blocks
    """
    if not html.strip():
        return html

    soup = get_shared_soup(html, context)
    if soup is None:
        return html

    if replace_tables:
        replaced = _replace_code_tables(soup)
        if replaced:
            logger.debug(f"Replaced {replaced} code table(s) with code blocks")

    _mark_pre_languages(soup)
    return soup_to_html(context, soup)


def code_block_enhancer_default(html: str, context: dict) -> str:
    """
    Default configuration for code_block_enhancer.

    This is the function that should be registered in POSTPROCESSORS.
    """
    return code_block_enhancer(html, context, replace_tables=True)
