import pytest

from extractors import html_to_markdown
from extractors.content_type import html_to_text, transform


ARTICLE = """
<div>
  <h2>Harbor Reopens</h2>
  <p>The harbor <strong>reopened</strong> on <em>Tuesday</em>, see the
     <a href="https://example.com/map">map</a>.</p>
  <ul>
    <li>Boats back on the water</li>
    <li>Fuel dock repaired
      <ol><li>North pier</li><li>South pier</li></ol>
    </li>
  </ul>
  <blockquote><p>We are open again.</p></blockquote>
  <pre>line one
line two</pre>
  <script>ignored()</script>
  <hr>
  <p>Closing <code>note</code> with an <img src="https://example.com/a.jpg" alt="photo"> image.</p>
</div>
"""


def test_html_is_unchanged():
    assert transform(ARTICLE, 'html') is ARTICLE


def test_unknown_content_type():
    with pytest.raises(ValueError):
        transform(ARTICLE, 'pdf')


def test_none_stays_none():
    assert transform(None, 'text') is None


def test_markdown_structure():
    markdown = transform(ARTICLE, 'markdown')

    assert markdown.startswith('## Harbor Reopens')
    assert 'The harbor **reopened** on *Tuesday*, see the [map](https://example.com/map).' in markdown
    assert '- Boats back on the water' in markdown
    assert '- Fuel dock repaired\n  1. North pier\n  2. South pier' in markdown
    assert '> We are open again.' in markdown
    assert '```\nline one\nline two\n```' in markdown
    assert '---' in markdown
    assert '`note`' in markdown
    assert '![photo](https://example.com/a.jpg)' in markdown
    assert 'ignored()' not in markdown


def test_markdown_of_loose_inline_content():
    assert html_to_markdown.convert('<div>Just <b>some</b> text</div>') == 'Just **some** text'
    assert html_to_markdown.convert('') == ''


def test_text_strips_markup():
    text = transform(ARTICLE, 'text')

    assert '<' not in text
    assert 'ignored()' not in text
    assert 'The harbor reopened on Tuesday, see the map.' in text
    assert 'North pier' in text


def test_text_is_idempotent():
    once = transform(ARTICLE, 'text')
    assert transform(once, 'text') == once


def test_html_to_text_of_empty_markup():
    assert html_to_text('') == ''
