# reader/templatetags/reader_tags.py

from django import template
from django.utils.safestring import mark_safe

from reader.content.postprocessors.bionic_reading import apply_bionic_reading_to_html
from reader.content.renderer import render_entry_content

register = template.Library()


@register.filter(name="entry_content")
def entry_content_filter(value):
    return mark_safe(render_entry_content(value).html)


@register.filter(name="entry_toc")
def entry_toc_filter(value):
    """TOC entries of an entry body as plain dicts, for jump lists"""
    return [item.as_dict() for item in render_entry_content(value).toc_items]


@register.filter(name="bionic")
def bionic_filter(value):
    """Bold word prefixes of already-rendered entry HTML"""
    return mark_safe(apply_bionic_reading_to_html(value or ""))


@register.simple_tag(takes_context=True)
def render_entry(context, value, as_toc=False):
    """Template tag that passes reader preferences from the template context"""
    processor_context = {
        "bionic_reading": context.get("bionic_reading"),
    }
    rendered = render_entry_content(value, context=processor_context)
    if as_toc:
        return [item.as_dict() for item in rendered.toc_items]
    return mark_safe(rendered.html)
