import pytest

from extractors.generic import GenericExtractor, article_base_url
from fetch import Resource


def doc(body, head='', url='https://example.com/news/story'):
    return Resource.generate_doc(f"<html><head>{head}</head><body>{body}</body></html>", url)


def test_title_sources_in_order():
    handle = doc('<h1 class="title">From Heading</h1>', head='<meta property="og:title" content="From Meta">')
    assert GenericExtractor.title(handle, url=handle.url) == 'From Heading'

    handle = doc('<h2>Nothing</h2>', head='<meta property="og:title" content="From Meta">')
    assert GenericExtractor.title(handle, url=handle.url) == 'From Meta'

    handle = doc('<p>Nothing</p>', head='<title>From Title Tag | Example</title>')
    assert GenericExtractor.title(handle, url=handle.url) == 'From Title Tag'


def test_author_from_byline():
    handle = doc('<div class="byline">By Ana Pérez</div><p>Text.</p>')
    assert GenericExtractor.author(handle, url=handle.url) == 'Ana Pérez'


def test_author_ignores_profile_url():
    handle = doc(
        '<span class="author">Luis Gómez</span>',
        head='<meta property="article:author" content="https://example.com/authors/luis">',
    )
    assert GenericExtractor.author(handle, url=handle.url) == 'Luis Gómez'


def test_date_from_json_ld():
    head = '<script type="application/ld+json">{"@graph": [{"@type": "NewsArticle", "datePublished": "2023-11-15T08:00:00-04:00"}]}</script>'
    handle = doc('<p>Text.</p>', head=head)
    assert GenericExtractor.date_published(handle, url=handle.url) == '2023-11-15T12:00:00+00:00'


def test_date_from_time_element():
    handle = doc('<time datetime="2023-01-02T03:04:05Z">Jan 2</time>')
    assert GenericExtractor.date_published(handle, url=handle.url) == '2023-01-02T03:04:05+00:00'


def test_date_from_url():
    handle = doc('<p>Text.</p>', url='https://example.com/2022/7/9/story')
    assert GenericExtractor.date_published(handle, url=handle.url) == '2022-07-09T00:00:00+00:00'


def test_dek():
    handle = doc('<p class="standfirst">The short summary under the headline.</p>')
    assert GenericExtractor.dek(handle, url=handle.url) == 'The short summary under the headline.'


def test_lead_image_prefers_meta():
    handle = doc('<img src="/small.gif">', head='<meta property="og:image" content="https://cdn.example.com/lead.jpg">')
    assert GenericExtractor.lead_image_url(handle, url=handle.url) == 'https://cdn.example.com/lead.jpg'


def test_lead_image_scores_images():
    body = (
        '<img src="/static/logo.png" width="40" height="40">'
        '<figure><img src="/uploads/photo.jpg" alt="Harbor" width="800" height="600"><figcaption>Harbor</figcaption></figure>'
    )
    handle = doc(body)
    assert GenericExtractor.lead_image_url(handle, url=handle.url) == 'https://example.com/uploads/photo.jpg'


def test_excerpt_and_word_count():
    content = '<div><p>' + ' '.join(['word'] * 60) + '</p></div>'
    handle = doc('<p>x</p>')
    excerpt = GenericExtractor.excerpt(handle, url=handle.url, content=content)
    assert excerpt.endswith('…')
    assert len(excerpt) <= 201
    assert GenericExtractor.word_count(content=content) == 60
    assert GenericExtractor.word_count(content=None) == 0


@pytest.mark.parametrize('title, expected', [
    ('Harbor reopens after storm', 'ltr'),
    ('إعادة فتح الميناء بعد العاصفة', 'rtl'),
    ('נמל נפתח מחדש', 'rtl'),
    (None, 'ltr'),
])
def test_direction(title, expected):
    assert GenericExtractor.direction(title=title) == expected


@pytest.mark.parametrize('url, expected', [
    ('https://example.com/story/2', 'https://example.com/story'),
    ('https://example.com/story?page=3', 'https://example.com/story'),
    ('https://example.com/story-p2', 'https://example.com/story'),
    ('https://example.com/story', 'https://example.com/story'),
])
def test_article_base_url(url, expected):
    assert article_base_url(url) == expected


def test_next_page_link():
    handle = doc(
        '<p>Text.</p><div class="pagination"><a href="/news/story/2">Next page</a></div>',
    )
    assert GenericExtractor.next_page_url(handle, url=handle.url) == 'https://example.com/news/story/2'


def test_next_page_ignores_visited_and_foreign_links():
    handle = doc(
        '<div class="pagination">'
        '<a href="/news/story/2">Next page</a>'
        '<a href="https://other.example.net/news/story/3">Next</a>'
        '</div>',
    )
    result = GenericExtractor.next_page_url(
        handle, url=handle.url, previous_urls=['https://example.com/news/story/2'],
    )
    assert result is None


def test_next_page_ignores_previous_links():
    handle = doc('<div class="pagination"><a href="/news/story/2">« Previous</a></div>')
    assert GenericExtractor.next_page_url(handle, url=handle.url) is None


def test_content_picks_article_body():
    paragraphs = ''.join(
        f'<p>Paragraph {i} of the article, with commas, clauses, and enough words to score well here.</p>'
        for i in range(6)
    )
    body = (
        '<div class="sidebar"><p>Popular: one, two, three, four, five, six, seven items listed.</p></div>'
        f'<div class="entry-content">{paragraphs}</div>'
    )
    node = GenericExtractor.content(doc(body), url='https://example.com/news/story')
    text = node.get_text(' ', strip=True)
    assert 'Paragraph 5 of the article' in text
    assert 'Popular' not in text
