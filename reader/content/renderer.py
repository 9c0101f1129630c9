# reader/content/renderer.py

from .dom import clear_shared_soup
from .postprocessors import apply_postprocessors
from .toc import EntryContentWithToc


def render_entry_content(html, context=None):
    """
    Main rendering function for feed entry content.

    Runs the postprocessor pipeline (sanitize, heading TOC, code blocks,
    optional bionic reading) over the entry body.

    Args:
        html: Raw entry HTML from the feed
        context: Optional dict for processors that need additional data
            (e.g. {"bionic_reading": True})

    Returns:
        EntryContentWithToc with the display HTML and the TOC items
    """
    context = context if context is not None else {}
    html = html or ""

    html = apply_postprocessors(html, context)
    clear_shared_soup(context)

    return EntryContentWithToc(html=html, toc_items=context.get("toc_items", []))
