# reader/content/config.py

from django.conf import settings

DEFAULT_READER_CONTENT = {
    # BeautifulSoup tree builder used for every parse in the pipeline.
    "HTML_PARSER": "html.parser",
    # Maximum characters kept in a TOC section preview before the ellipsis.
    "PREVIEW_LENGTH": 110,
    # Run the bleach sanitizer before any other postprocessor.
    "SANITIZE": True,
    # Apply the bionic reading transform when the caller does not decide.
    "BIONIC_READING": False,
}


def get_reader_config():
    """
    Configuration for the entry content pipeline.

    Values come from the ``READER_CONTENT`` dict in Django settings, layered
    over ``DEFAULT_READER_CONTENT``. The pipeline is also used from plain
    scripts and tests, so unconfigured settings simply yield the defaults.
    """
    config = dict(DEFAULT_READER_CONTENT)
    if settings.configured:
        config.update(getattr(settings, "READER_CONTENT", None) or {})
    return config


def get_html_parser():
    return get_reader_config()["HTML_PARSER"]


def get_preview_length() -> int:
    try:
        length = int(get_reader_config()["PREVIEW_LENGTH"])
    except (TypeError, ValueError):
        return DEFAULT_READER_CONTENT["PREVIEW_LENGTH"]
    return max(length, 0)
