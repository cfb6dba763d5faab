from datetime import datetime, timezone

import pytest
from bs4 import BeautifulSoup

from extractors.cleaners import (
    clean_author,
    clean_content,
    clean_date_published,
    clean_dek,
    clean_lead_image_url,
    clean_next_page_url,
    clean_title,
)


NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


@pytest.mark.parametrize('value, expected', [
    ('2024-03-05T10:30:00Z', '2024-03-05T10:30:00+00:00'),
    ('2024-03-05T10:30:00-04:00', '2024-03-05T14:30:00+00:00'),
    ('March 5, 2024', '2024-03-05T00:00:00+00:00'),
    ('Published on March 5, 2024 at 10:30', '2024-03-05T10:30:00+00:00'),
    ('1709634600', '2024-03-05T10:30:00+00:00'),
    ('1709634600000', '2024-03-05T10:30:00+00:00'),
])
def test_clean_date_published(value, expected):
    assert clean_date_published(value) == expected


def test_clean_date_published_relative():
    assert clean_date_published('3 hours ago', now=NOW) == '2024-06-01T09:00:00+00:00'
    assert clean_date_published('2 days ago', now=NOW) == '2024-05-30T12:00:00+00:00'


@pytest.mark.parametrize('value', [None, '', 'yesterday', 'no date here'])
def test_clean_date_published_unparseable(value):
    assert clean_date_published(value) is None


def test_clean_title_drops_site_name():
    assert clean_title('Quiet Harbor Reopens | Example News', url='https://www.example.com/a') == 'Quiet Harbor Reopens'
    assert clean_title('Example - Quiet Harbor Reopens', url='https://example.com/a') == 'Quiet Harbor Reopens'


def test_clean_title_keeps_unrelated_segments():
    title = 'Harbor Reopens - What Comes Next'
    assert clean_title(title, url='https://example.com/a') == title


def test_clean_author():
    assert clean_author('  By   Jane Doe ') == 'Jane Doe'
    assert clean_author('Posted by: Jane Doe') == 'Jane Doe'
    assert clean_author('') is None


def test_clean_dek():
    assert clean_dek('A short summary of the story.') == 'A short summary of the story.'
    assert clean_dek('tiny') is None
    assert clean_dek('https://example.com/story') is None
    assert clean_dek('Same text as excerpt.', excerpt='Same text as excerpt.') is None


def test_clean_lead_image_url():
    assert clean_lead_image_url('/img/a.jpg', url='https://example.com/story') == 'https://example.com/img/a.jpg'
    assert clean_lead_image_url('data:image/png;base64,AAAA', url='https://example.com/') is None


def test_clean_next_page_url():
    url = 'https://example.com/story'
    assert clean_next_page_url('/story/2', url=url) == 'https://example.com/story/2'
    assert clean_next_page_url('/story#comments', url=url) is None
    assert clean_next_page_url('javascript:void(0)', url=url) is None


def test_clean_content_strips_scripts_and_ads():
    html = """
    <div id="main">
      <h1>Harbor Reopens</h1>
      <p style="color:red" data-track="1">Body text with a <a href="/more">link</a>.</p>
      <script>var x = 1;</script>
      <div class="ad-slot">Advertisement</div>
      <div id="related-links"><a href="/other">Other story</a></div>
      <iframe src="https://ads.example.net/frame"></iframe>
      <iframe src="https://www.youtube.com/embed/abc"></iframe>
      <p>   </p>
      <p><font>Old markup</font></p>
    </div>
    """
    node = BeautifulSoup(html, 'lxml').find('div', id='main')
    clean_content(node, url='https://example.com/news/harbor', title='Harbor Reopens')
    content = str(node)

    assert 'var x' not in content
    assert 'Advertisement' not in content
    assert 'Other story' not in content
    assert 'ads.example.net' not in content
    assert 'youtube.com/embed/abc' in content
    assert 'style=' not in content
    assert 'data-track' not in content
    assert '<font>' not in content
    assert 'Old markup' in content
    assert 'href="https://example.com/more"' in content
    assert '<h1>' not in content
    assert '<p> </p>' not in content
