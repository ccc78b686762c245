"""Tests for sanitizer escaping, placeholder stripping and allow-listing."""

from markupsafe import Markup

from sitegen.services.sanitizer import (
    escape_attr,
    escape_html,
    json_for_script,
    sanitize_article_html,
    strip_placeholders,
)


class TestEscape:
    def test_escapes_markup_characters(self):
        assert escape_html("<b>&</b>") == "&lt;b&gt;&amp;&lt;/b&gt;"

    def test_escapes_quotes_in_attributes(self):
        result = escape_attr('a "quoted" \'value\'')
        assert '"' not in result
        assert "'" not in result

    def test_none_becomes_empty(self):
        assert escape_html(None) == ""
        assert escape_attr(None) == ""

    def test_numbers_are_stringified(self):
        assert escape_html(42) == "42"

    def test_result_is_markup(self):
        assert isinstance(escape_html("x"), Markup)

    def test_markup_is_not_escaped_twice(self):
        assert escape_html(Markup("<em>ok</em>")) == "<em>ok</em>"
        assert escape_attr(Markup("&amp;")) == "&amp;"

    def test_script_title_is_inert_in_format(self):
        html = Markup("<h1>{}</h1>").format("<script>alert(1)</script>")
        assert "<script>" not in html
        assert "&lt;script&gt;" in html


class TestStripPlaceholders:
    def test_strips_internal_link_marker(self):
        assert strip_placeholders("See [INTERNAL_LINK: best lawyers] now") == "See  now"

    def test_strips_image_marker(self):
        assert "[IMAGE" not in strip_placeholders("Intro [IMAGE: a chart] outro")

    def test_strips_external_link_marker(self):
        assert strip_placeholders("[EXTERNAL_LINK https://x.com]") == ""

    def test_regular_brackets_unchanged(self):
        text = "A [regular](https://example.com) link"
        assert strip_placeholders(text) == text


class TestSanitizeArticleHtml:
    def test_removes_script_tags(self):
        result = sanitize_article_html("<p>Text</p><script>alert('xss')</script>")
        assert "<script" not in result
        assert "<p>Text</p>" in result

    def test_removes_event_handlers(self):
        result = sanitize_article_html('<p onclick="steal()">Hi</p>')
        assert "onclick" not in result
        assert "Hi" in result

    def test_removes_javascript_urls(self):
        result = sanitize_article_html('<a href="javascript:alert(1)">x</a>')
        assert "javascript:" not in result

    def test_keeps_form_controls(self):
        html = '<form class="calc"><input type="number" name="amount" min="0"><button type="button">Go</button></form>'
        result = sanitize_article_html(html)
        assert "<input" in result
        assert 'name="amount"' in result
        assert "<button" in result

    def test_keeps_tables_and_headings(self):
        html = "<h2>Costs</h2><table><thead><tr><th>A</th></tr></thead><tbody><tr><td>1</td></tr></tbody></table>"
        result = sanitize_article_html(html)
        assert "<h2>Costs</h2>" in result
        assert "<td>1</td>" in result

    def test_strips_comments(self):
        assert "hidden" not in sanitize_article_html("<p>Visible</p><!-- hidden -->")

    def test_strips_style_attribute(self):
        assert "style=" not in sanitize_article_html('<p style="color:red">x</p>')

    def test_returns_markup(self):
        assert isinstance(sanitize_article_html("<p>x</p>"), Markup)


class TestJsonForScript:
    def test_neutralizes_closing_script(self):
        result = json_for_script('{"t": "</script><script>alert(1)</script>"}')
        assert "</script>" not in result
        assert "\\u003c/script\\u003e" in result

    def test_escapes_ampersand(self):
        assert "&" not in json_for_script('{"a": "b & c"}')
