# reader/content/__init__.py

from .code_tables import (
    CodeTableExtraction,
    detect_code_language_from_pre,
    extract_code_block_from_table,
)
from .languages import detect_code_language_from_content, normalize_code_language
from .postprocessors.bionic_reading import apply_bionic_reading_to_html
from .renderer import render_entry_content
from .toc import EntryContentWithToc, TocItem, build_entry_content_with_toc

__all__ = (
    "CodeTableExtraction",
    "EntryContentWithToc",
    "TocItem",
    "apply_bionic_reading_to_html",
    "build_entry_content_with_toc",
    "detect_code_language_from_content",
    "detect_code_language_from_pre",
    "extract_code_block_from_table",
    "normalize_code_language",
    "render_entry_content",
)
