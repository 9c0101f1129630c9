# reader/content/postprocessors/__init__.py

from .bionic_reading import bionic_reading
from .code_block_enhancer import code_block_enhancer_default
from .heading_toc import heading_toc
from .sanitizer import sanitize_html

POSTPROCESSORS = [
    sanitize_html,  # Strip scripts, styles and disallowed attributes from feed HTML
    heading_toc,  # Add heading ids/markers and collect the table of contents
    code_block_enhancer_default,  # Turn code-shaped tables into <pre><code> blocks
    bionic_reading,  # Bold word prefixes when bionic reading is enabled
    # Order matters - they run sequentially
]


def apply_postprocessors(html, context):
    """Apply all postprocessors in order"""
    for processor in POSTPROCESSORS:
        html = processor(html, context)
    return html
