"""
Tests for input sanitization types.
"""

from pydantic import TypeAdapter

from app.core.sanitize import PlainText, SafeHtml, collapse_whitespace, escape_html, strip_tags

plain_text = TypeAdapter(PlainText)
safe_html = TypeAdapter(SafeHtml)


class TestPlainText:
    def test_strips_whitespace(self):
        assert plain_text.validate_python("   Hello world  ") == "Hello world"

    def test_removes_tags_and_script_bodies(self):
        value = "  <b>Hi</b> <script>alert('x')</script> "
        assert plain_text.validate_python(value) == "Hi"

    def test_keeps_plain_punctuation(self):
        assert plain_text.validate_python("Fees: $5,000 & up") == "Fees: $5,000 & up"


class TestSafeHtml:
    def test_keeps_formatting(self):
        assert safe_html.validate_python("<p><strong>Bold</strong></p>") == "<p><strong>Bold</strong></p>"

    def test_removes_scripts_and_iframes(self):
        value = "<p>Hi</p><script>steal()</script><iframe src='x'></iframe>"
        assert safe_html.validate_python(value) == "<p>Hi</p>"

    def test_removes_event_handlers(self):
        assert safe_html.validate_python('<p onclick="steal()">Hi</p>') == "<p>Hi</p>"

    def test_neutralises_javascript_urls(self):
        cleaned = safe_html.validate_python('<a href="javascript:alert(1)">x</a>')
        assert "javascript:" not in cleaned
        assert cleaned == '<a href="">x</a>'


class TestHelpers:
    def test_escape_html(self):
        assert escape_html('<a href="x">') == "&lt;a href=&quot;x&quot;&gt;"

    def test_strip_tags(self):
        assert strip_tags("<h1>Title</h1><style>p{}</style>") == "Title"

    def test_collapse_whitespace(self):
        assert collapse_whitespace("  a \n\t b  ") == "a b"
