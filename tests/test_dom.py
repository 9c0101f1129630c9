from bs4 import BeautifulSoup

from reader.content.config import DEFAULT_READER_CONTENT, get_preview_length, get_reader_config
from reader.content.dom import (
    body_html,
    clear_shared_soup,
    get_class_tokens,
    get_shared_soup,
    has_ancestor_named,
    is_html_parsing_available,
    iter_nodes_after,
    parse_html,
    soup_to_html,
)


def test_parser_capability_check():
    assert is_html_parsing_available("html.parser")
    assert not is_html_parsing_available("definitely-not-a-parser")
    assert parse_html("<p>x</p>", "definitely-not-a-parser") is None


def test_body_html_returns_body_contents_for_full_documents():
    soup = BeautifulSoup("<html><body><p>Hi</p></body></html>", "html.parser")
    assert body_html(soup) == "<p>Hi</p>"
    assert body_html(BeautifulSoup("<p>Hi</p> tail", "html.parser")) == "<p>Hi</p> tail"


def test_shared_soup_is_reused_until_html_changes():
    context = {}
    soup = get_shared_soup("<p>a</p>", context)
    assert get_shared_soup("<p>a</p>", context) is soup

    soup.p["class"] = ["x"]
    html = soup_to_html(context, soup)
    assert html == '<p class="x">a</p>'
    assert get_shared_soup(html, context) is soup
    assert get_shared_soup("<p>b</p>", context) is not soup

    clear_shared_soup(context)
    assert context == {}


def test_class_tokens_and_ancestors():
    soup = BeautifulSoup('<pre class="a  b"><code><span>x</span></code></pre>', "html.parser")
    assert get_class_tokens(soup.pre) == ["a", "b"]
    assert get_class_tokens(soup.span) == []
    assert has_ancestor_named(soup.span.string, {"pre"})
    assert not has_ancestor_named(soup.span.string, {"table"})


def test_iter_nodes_after_skips_descendants():
    soup = BeautifulSoup("<div><h2>A<em>b</em></h2>c</div><p>d</p>", "html.parser")
    following = [str(node) for node in iter_nodes_after(soup.h2) if isinstance(node, str)]
    assert following == ["c", "d"]


def test_reader_config_defaults_and_overrides(reader_settings):
    assert get_reader_config() == DEFAULT_READER_CONTENT
    assert get_preview_length() == 110

    reader_settings(PREVIEW_LENGTH="bogus")
    assert get_preview_length() == 110

    reader_settings(PREVIEW_LENGTH=40, HTML_PARSER="html.parser")
    assert get_preview_length() == 40
