# reader/content/postprocessors/sanitizer.py

import logging
from functools import lru_cache

import bleach

from ..config import get_reader_config
from ..dom import body_html, parse_html

logger = logging.getLogger(__name__)

# Removed with their contents; bleach alone would keep the inner text.
REMOVED_SUBTREE_TAGS = ["script", "style", "noscript", "iframe", "object", "embed", "template"]

GLOBAL_ATTRIBUTES = {"class", "id", "title", "lang", "dir"}


@lru_cache(maxsize=1)
def _get_bleach_config():
    """Cache bleach configuration for better performance."""
    allowed_tags = set(bleach.sanitizer.ALLOWED_TAGS).union(
        {
            # text
            "p",
            "br",
            "wbr",
            "div",
            "span",
            "section",
            "article",
            "header",
            "footer",
            "aside",
            "cite",
            "mark",
            "ins",
            "del",
            "s",
            "u",
            "small",
            "sup",
            "sub",
            "q",
            # headings
            "h1",
            "h2",
            "h3",
            "h4",
            "h5",
            "h6",
            # lists
            "ul",
            "ol",
            "li",
            "hr",
            "blockquote",
            "dl",
            "dt",
            "dd",
            # code
            "pre",
            "code",
            "kbd",
            "samp",
            "var",
            # tables
            "table",
            "thead",
            "tbody",
            "tfoot",
            "tr",
            "th",
            "td",
            "caption",
            "colgroup",
            "col",
            # media
            "img",
            "figure",
            "figcaption",
            "picture",
            "source",
            "video",
            "audio",
            "track",
            # semantic
            "time",
            "address",
            "abbr",
            "details",
            "summary",
        }
    )

    allowed_attrs = {
        "a": ["href", "title", "rel", "target"],
        "img": ["src", "srcset", "alt", "title", "width", "height", "loading", "decoding"],
        "video": ["src", "width", "height", "controls", "preload", "loop", "muted", "poster"],
        "audio": ["src", "controls", "preload", "loop", "muted"],
        "source": ["src", "srcset", "type", "media"],
        "track": ["src", "kind", "srclang", "label", "default"],
        "th": ["colspan", "rowspan", "scope"],
        "td": ["colspan", "rowspan"],
        "time": ["datetime"],
        "abbr": ["title"],
        "blockquote": ["cite"],
        "q": ["cite"],
        "ol": ["start", "type", "reversed"],
        "details": ["open"],
    }

    allowed_protocols = ["http", "https", "mailto", "tel"]

    return allowed_tags, allowed_attrs, allowed_protocols


def _attribute_filter(allowed_attrs):
    """Build a bleach attribute callable that also admits data-* and aria-*."""

    def allow(tag, name, value):
        if name in GLOBAL_ATTRIBUTES:
            return True
        if name.startswith("data-") or name.startswith("aria-"):
            return True
        return name in allowed_attrs.get(tag, ())

    return allow


def _remove_dangerous_subtrees(html: str) -> str:
    soup = parse_html(html)
    if soup is None:
        return html
    for element in soup.find_all(REMOVED_SUBTREE_TAGS):
        element.decompose()
    return body_html(soup)


def sanitize_html(html, context):
    """
    Sanitize untrusted feed HTML using bleach.
    This is the FIRST post-processor and should run before any other HTML modifications.
    """
    if not get_reader_config()["SANITIZE"]:
        logger.debug("Sanitization disabled by READER_CONTENT['SANITIZE']")
        return html

    if not html.strip():
        return html

    allowed_tags, allowed_attrs, allowed_protocols = _get_bleach_config()
    html = _remove_dangerous_subtrees(html)

    try:
        return bleach.clean(
            html,
            tags=allowed_tags,
            attributes=_attribute_filter(allowed_attrs),
            protocols=allowed_protocols,
            strip=True,  # Drop disallowed tags but keep their text
            strip_comments=True,
        )
    except Exception as e:
        logger.warning(f"Bleach sanitization failed: {e}", exc_info=True)
        # Script-like subtrees are already gone; return what is left
        return html
