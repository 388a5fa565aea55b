"""Unit tests for the Markdown rendering pipeline."""

import re

from markblog.core.parser import create_parser, highlight_css, render_markdown


# ============================================================
# Basic Markdown
# ============================================================


class TestBasicMarkdown:
    def test_heading(self):
        html = render_markdown("# Hi")
        assert re.search(r"<h1[^>]*>Hi</h1>", html)

    def test_heading_gets_id(self):
        html = render_markdown("## Getting Started")
        assert 'id="getting-started"' in html

    def test_emphasis(self):
        html = render_markdown("**bold** and *italic*")
        assert "<strong>bold</strong>" in html
        assert "<em>italic</em>" in html

    def test_table(self):
        html = render_markdown("| a | b |\n|---|---|\n| 1 | 2 |")
        assert "<table>" in html
        assert "<td>1</td>" in html

    def test_empty_body(self):
        assert render_markdown("") == ""

    def test_task_list(self):
        html = render_markdown("- [x] done\n- [ ] todo")
        assert 'type="checkbox"' in html


class TestStrikethrough:
    def test_basic_strikethrough(self):
        html = render_markdown("~~deleted~~")
        assert "<del>deleted</del>" in html

    def test_strikethrough_multiple(self):
        html = render_markdown("~~one~~ and ~~two~~")
        assert html.count("<del>") == 2


# ============================================================
# Syntax highlighting
# ============================================================


class TestHighlighting:
    def test_fenced_js_block_is_highlighted(self):
        html = render_markdown("```js\nconsole.log(1)\n```")
        assert 'class="codehilite"' in html
        assert re.search(r'<span class="[^"]+">console</span>', html)

    def test_fenced_python_block(self):
        html = render_markdown("```python\ndef hello():\n    return 1\n```")
        assert re.search(r'<span class="k">def</span>', html)

    def test_indented_block_is_wrapped(self):
        html = render_markdown("Text\n\n    :::python\n    import os\n")
        assert 'class="codehilite"' in html
        assert re.search(r'<span class="[^"]+">import</span>', html)

    def test_unknown_language_still_renders(self):
        html = render_markdown("```notalanguage\nplain text\n```")
        assert "plain text" in html

    def test_code_is_escaped(self):
        html = render_markdown("```html\n<script>alert(1)</script>\n```")
        assert "<script>alert" not in html

    def test_no_guess_leaves_plain_code(self):
        html = render_markdown("```\nx = 1\n```", guess_language=False)
        assert "x = 1" in html


class TestCreateParser:
    def test_parser_is_reusable(self):
        parser = create_parser()
        first = parser.convert("# One")
        parser.reset()
        second = parser.convert("# One")
        assert first == second


class TestHighlightCss:
    def test_scoped_to_codehilite(self):
        css = highlight_css()
        assert ".codehilite" in css

    def test_other_style(self):
        assert highlight_css("monokai") != highlight_css("default")
