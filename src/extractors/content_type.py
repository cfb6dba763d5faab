"""
Conversion of the assembled article body to the requested output format.
"""

import re

from bs4 import BeautifulSoup, NavigableString

from . import html_to_markdown


CONTENT_TYPES = ('html', 'markdown', 'text')

# Block elements whose boundaries become line breaks in plain text
TEXT_BLOCK_TAGS = ['p', 'div', 'br', 'li', 'h1', 'h2', 'h3', 'h4', 'h5', 'h6', 'blockquote', 'pre', 'tr', 'hr']


def _normalize_lines(text):
    lines = [re.sub(r'[^\S\n]+', ' ', line).strip() for line in text.split('\n')]
    return '\n'.join(line for line in lines if line)


def html_to_text(markup):
    """Visible text of `markup`, one line per block, whitespace normalized."""
    if not markup:
        return ""
    # Already plain text
    if '<' not in markup:
        return _normalize_lines(markup)

    soup = BeautifulSoup(markup, 'lxml')
    for tag in soup(['script', 'style', 'noscript', 'template']):
        tag.decompose()

    # Line breaks in markup are ordinary whitespace outside <pre>
    for string in soup.find_all(string=True):
        if type(string) is NavigableString and string.find_parent('pre') is None:
            string.replace_with(re.sub(r'\s+', ' ', string))

    for tag in soup.find_all(TEXT_BLOCK_TAGS):
        tag.insert_before('\n')
        tag.insert_after('\n')

    return _normalize_lines(soup.get_text())


def transform(markup, content_type='html'):
    """
    Convert article markup to `content_type`.

    - "html": returned unchanged
    - "markdown": headings, emphasis, links and lists kept as Markdown
    - "text": visible text only

    Raises:
        ValueError: for an unknown content type
    """
    if content_type not in CONTENT_TYPES:
        raise ValueError(f"Unknown content type {content_type!r}, expected one of {', '.join(CONTENT_TYPES)}")

    if markup is None:
        return None
    if content_type == 'markdown':
        return html_to_markdown.convert(markup)
    if content_type == 'text':
        return html_to_text(markup)
    return markup
