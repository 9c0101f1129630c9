from django.template import Context, Template

from reader.content import render_entry_content
from reader.content.postprocessors import POSTPROCESSORS, apply_postprocessors
from reader.content.postprocessors.code_block_enhancer import code_block_enhancer
from reader.content.postprocessors.heading_toc import heading_toc
from reader.content.postprocessors.sanitizer import sanitize_html

CODE_TABLE = (
    '<table class="highlighttable"><tr>'
    '<td class="gutter"><pre>1\n2</pre></td>'
    '<td class="code"><pre>def greet():\n    return "hi"</pre></td>'
    "</tr></table>"
)


def test_sanitizer_removes_scripts_and_event_handlers():
    html = '<p onclick="steal()">Hi<script>alert(1)</script></p><style>p{}</style><iframe src="x"></iframe>'
    cleaned = sanitize_html(html, {})

    assert "script" not in cleaned
    assert "alert" not in cleaned
    assert "onclick" not in cleaned
    assert "iframe" not in cleaned
    assert "<p>Hi</p>" in cleaned


def test_sanitizer_keeps_structure_ids_and_data_attributes():
    html = (
        '<h2 id="intro" data-x="1">Intro</h2>'
        '<table class="highlighttable"><tr><td class="code"><pre>x</pre></td></tr></table>'
        '<a href="javascript:alert(1)">bad</a><a href="https://example.com">good</a>'
    )
    cleaned = sanitize_html(html, {})

    assert 'id="intro"' in cleaned
    assert 'data-x="1"' in cleaned
    assert '<td class="code"><pre>x</pre></td>' in cleaned
    assert "javascript:" not in cleaned
    assert 'href="https://example.com"' in cleaned


def test_sanitizer_can_be_disabled(reader_settings):
    reader_settings(SANITIZE=False)
    html = "<p>Hi<script>alert(1)</script></p>"
    assert sanitize_html(html, {}) == html


def test_heading_toc_postprocessor_stores_items_in_context():
    context = {}
    html = heading_toc("<h2>One</h2><p>Body</p>", context)

    assert 'id="one"' in html
    assert [item.id for item in context["toc_items"]] == ["one"]


def test_code_block_enhancer_replaces_code_tables():
    html = code_block_enhancer(CODE_TABLE + "<table><tr><td>a</td><td>b</td></tr></table>", {})

    assert '<pre class="code-block" data-language="python">' in html
    assert '<code class="language-python">def greet():\n    return "hi"</code>' in html
    assert "highlighttable" not in html
    assert "<table><tr><td>a</td><td>b</td></tr></table>" in html


def test_code_block_enhancer_pretty_prints_json_tables():
    html = code_block_enhancer(
        '<table class="highlighttable"><tr>'
        '<td class="gutter"><pre>1</pre></td>'
        '<td class="code"><pre>{"a":1,"b":[1,2]}</pre></td>'
        "</tr></table>",
        {},
    )

    assert html == (
        '<pre class="code-block" data-language="json"><code class="language-json">'
        '{\n  "a": 1,\n  "b": [\n    1,\n    2\n  ]\n}'
        "</code></pre>"
    )


def test_code_block_enhancer_marks_existing_pre_blocks():
    html = code_block_enhancer('<pre><code class="language-rust">fn main() {}</code></pre>', {})
    assert html == '<pre class="code-block" data-language="rust"><code class="language-rust">fn main() {}</code></pre>'


def test_postprocessor_order():
    names = [processor.__name__ for processor in POSTPROCESSORS]
    assert names == ["sanitize_html", "heading_toc", "code_block_enhancer_default", "bionic_reading"]


def test_render_entry_content_runs_full_pipeline():
    html = (
        "<h2>Setup</h2><p>Install it first.</p><script>evil()</script>"
        + CODE_TABLE
        + "<h3>Usage</h3><p>Run <code>greet</code></p>"
    )
    result = render_entry_content(html, {"bionic_reading": True})

    assert [item.id for item in result.toc_items] == ["setup", "usage"]
    assert result.toc_items[0].preview.startswith("Install it first.")
    assert "evil" not in result.html
    assert 'data-language="python"' in result.html
    assert "<strong>Ins</strong>tall" in result.html
    assert "<code>greet</code>" in result.html
    assert "<strong>" not in result.html.split("<pre")[1].split("</pre>")[0]


def test_render_entry_content_handles_empty_input():
    result = render_entry_content("")
    assert result.html == ""
    assert result.toc_items == []

    assert render_entry_content(None).html == ""


def test_apply_postprocessors_leaves_whitespace_untouched():
    assert apply_postprocessors("   ", {}) == "   "


def test_entry_content_filters():
    template = Template(
        "{% load reader_tags %}"
        "{{ body|entry_content }}"
        "{% for item in body|entry_toc %}[{{ item.id }}:{{ item.level }}]{% endfor %}"
    )
    output = template.render(Context({"body": "<h2>Intro</h2><p>Text</p><h4>Deep</h4>"}))

    assert '<h2 data-reading-heading="true" id="intro">' in output or '<h2 id="intro" data-reading-heading="true">' in output
    assert "[intro:2][deep:4]" in output


def test_render_entry_tag_uses_template_context():
    template = Template("{% load reader_tags %}{% render_entry body %}")
    output = template.render(Context({"body": "<p>Reading</p>", "bionic_reading": True}))
    assert output == "<p><strong>Rea</strong>ding</p>"


def test_bionic_filter():
    template = Template("{% load reader_tags %}{{ body|bionic }}")
    output = template.render(Context({"body": "<p>Reading</p>"}))
    assert output == "<p><strong>Rea</strong>ding</p>"


def test_render_entry_content_survives_deeply_nested_code_cells():
    depth = 1600
    html = (
        '<table class="highlighttable"><tr><td class="code"><pre>'
        + "<span>" * depth
        + "x = 1"
        + "</span>" * depth
        + "</pre></td></tr></table>"
    )
    result = render_entry_content(html)

    assert result.html.startswith('<pre class="code-block"')
    assert ">x = 1</code></pre>" in result.html
    assert "<table" not in result.html


def test_render_entry_tag_passes_only_reader_preferences(monkeypatch):
    from reader.templatetags import reader_tags

    seen = []

    def fake_render(value, context=None):
        seen.append(dict(context))
        return render_entry_content(value, context=context)

    monkeypatch.setattr(reader_tags, "render_entry_content", fake_render)
    template = Template("{% load reader_tags %}{% render_entry body %}")
    template.render(Context({"body": "<p>Hi</p>", "entry": object(), "bionic_reading": False}))

    assert list(seen[0]) == ["bionic_reading"]
