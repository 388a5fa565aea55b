"""Markdown rendering pipeline with syntax highlighting."""

from markdown import Markdown
from markdown.extensions import Extension
from markdown.inlinepatterns import SimpleTagInlineProcessor
from pygments.formatters import HtmlFormatter


# Pattern for strikethrough: ~~text~~
# Group 2 must contain the text (SimpleTagInlineProcessor expectation)
STRIKETHROUGH_PATTERN = r"(~~)(.*?)~~"

# CSS class wrapping highlighted code blocks
HIGHLIGHT_CSS_CLASS = "codehilite"


class StrikethroughExtension(Extension):
    """Markdown extension for ~~strikethrough~~ text."""

    def extendMarkdown(self, md: Markdown) -> None:
        """Add strikethrough pattern to markdown parser."""
        md.inlinePatterns.register(
            SimpleTagInlineProcessor(STRIKETHROUGH_PATTERN, "del"),
            "strikethrough",
            50,
        )


def create_parser(guess_language: bool = True) -> Markdown:
    """Create a Markdown parser for post bodies.

    Python-Markdown builds an ElementTree from the source, the codehilite
    treeprocessor runs Pygments over every code block, and the serializer
    emits the final HTML.

    Args:
        guess_language: Let Pygments detect the language of code blocks
                        that do not declare one.

    Returns:
        Configured Markdown parser instance.
    """
    return Markdown(
        extensions=[
            # Core formatting
            "extra",  # Includes: abbreviations, attr_list, def_list, fenced_code, footnotes, md_in_html, tables
            "sane_lists",  # Better list handling
            "smarty",  # Smart quotes and dashes
            "toc",  # Heading ids
            "codehilite",  # Pygments highlighting for code blocks
            # PyMdown extensions
            "pymdownx.tasklist",  # Task lists with checkboxes
            # Custom extensions
            StrikethroughExtension(),  # ~~strikethrough~~
        ],
        extension_configs={
            "codehilite": {
                "css_class": HIGHLIGHT_CSS_CLASS,
                "guess_lang": guess_language,
            },
        },
    )


def render_markdown(content: str, guess_language: bool = True) -> str:
    """Render a Markdown post body to HTML.

    Args:
        content: Markdown body without frontmatter.
        guess_language: Detect the language of undeclared code blocks.

    Returns:
        HTML string.
    """
    parser = create_parser(guess_language)
    return parser.convert(content)


def highlight_css(style: str = "default") -> str:
    """Return the Pygments stylesheet matching rendered code blocks."""
    return HtmlFormatter(style=style).get_style_defs(f".{HIGHLIGHT_CSS_CLASS}")
