# reader/content/postprocessors/heading_toc.py
"""
Postprocessor that annotates headings for in-page navigation.

Runs the TOC builder on the shared soup and stores the resulting entries in
``context["toc_items"]`` so the renderer can return them next to the HTML.
"""

from ..dom import get_shared_soup, soup_to_html
from ..toc import annotate_headings


def heading_toc(html: str, context: dict) -> str:
    """
    Add ids and data-reading-heading markers to h2-h4 headings.

    Args:
        html: HTML string to process
        context: Context dictionary; receives the "toc_items" list

    Returns:
        Processed HTML with annotated headings
    """
    if not html.strip():
        context["toc_items"] = []
        return html

    soup = get_shared_soup(html, context)
    if soup is None:
        context["toc_items"] = []
        return html

    context["toc_items"] = annotate_headings(soup)
    return soup_to_html(context, soup)
