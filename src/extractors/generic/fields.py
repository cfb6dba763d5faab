"""
Generic heuristics for the metadata fields of an article.

Each function takes the document handle and the page URL and returns an
already cleaned value, or None.
"""

import json
import logging
import re
import unicodedata
from typing import Optional

from bs4 import BeautifulSoup

from ..cleaners import (
    clean_author,
    clean_date_published,
    clean_dek,
    clean_lead_image_url,
    clean_title,
    normalize_spaces,
)


logger = logging.getLogger(__name__)

# Meta names are checked in order; earlier names are more trustworthy
TITLE_META_TAGS = ['tweetmeme-title', 'dc.title', 'rbtitle', 'headline', 'hdl', 'og:title', 'twitter:title', 'title']
TITLE_SELECTORS = [
    '.hentry .entry-title',
    'h1#articleHeader',
    'h1.articleHeader',
    'h1.article',
    '.instapaper_title',
    'article h1',
    'h1.headline',
    'h1.entry-title',
    'h1.title',
]

AUTHOR_META_TAGS = ['byl', 'clmst', 'dc.author', 'dcsext.author', 'dc.creator', 'rbauthors', 'authors', 'author', 'article:author']
AUTHOR_SELECTORS = [
    '.entry .entry-author',
    '.author.vcard .fn',
    '.author .vcard .fn',
    '.byline.vcard .fn',
    '.byline .by .author',
    '.byline .by',
    '.byline .author',
    '.post-author.vcard',
    '.post-author .vcard',
    'a[rel=author]',
    '#by_author',
    '.by_author',
    '#entryAuthor',
    '.entryAuthor',
    '[itemprop=author] [itemprop=name]',
    '[itemprop=author]',
    '#author .authorname',
    '.author .authorname',
    '#author',
    '.author',
    '.articleauthor',
    '.byline',
]

DATE_META_TAGS = [
    'article:published_time',
    'article:published',
    'published_time',
    'displaydate',
    'dc.date',
    'dc.date.issued',
    'rbpubdate',
    'publish_date',
    'publishdate',
    'pub_date',
    'pdate',
    'pubdate',
    'date',
    'sailthru.date',
    'parsely-pub-date',
]
DATE_SELECTORS = [
    ['[itemprop=datePublished]', 'content'],
    ['[itemprop=datePublished]', 'datetime'],
    ['time[pubdate]', 'datetime'],
    ['time.published', 'datetime'],
    ['time[datetime]', 'datetime'],
    '.hentry .dtstamp.published',
    '.hentry .published',
    '.hentry .dtstamp.updated',
    '.hentry .updated',
    '.single .published',
    '.meta .published',
    '.meta .postDate',
    '.entry-date',
    '.byline .date',
    '.postmetadata .date',
    '.article_datetime',
    '.date-header',
    '.story-date',
    '.dateStamp',
    '#story .datetime',
    '.dateline',
    '.pubdate',
]
DATE_IN_URL_RE = re.compile(r'/(20\d{2}|19\d{2})[/-](\d{1,2})[/-](\d{1,2})(/|-|$)')

DEK_SELECTORS = ['.dek', '.deck', '.subtitle', '.subheadline', '.sub-headline', '.standfirst', 'h2.subhead', '.article-summary']

EXCERPT_META_TAGS = ['og:description', 'twitter:description', 'description']
EXCERPT_LENGTH = 200

LEAD_IMAGE_META_TAGS = ['og:image', 'twitter:image', 'image_src']
POSITIVE_IMAGE_HINTS_RE = re.compile(r'upload|wp-content|large|photo|wp-image', re.IGNORECASE)
NEGATIVE_IMAGE_HINTS_RE = re.compile(
    r'spacer|sprite|blank|throbber|gradient|tile|bg|background|icon|social|header|hdr|'
    r'advert|spinner|loader|loading|default|rating|share|facebook|twitter|theme|promo|'
    r'ads|wp-includes|avatar|logo',
    re.IGNORECASE
)
MIN_IMAGE_SCORE = 0


def _text_of_unique_match(handle, selectors, max_length=None) -> Optional[str]:
    for selector in selectors:
        if isinstance(selector, list):
            css, attr = selector
            for node in handle.select(css):
                value = (node.get(attr) or '').strip()
                if value:
                    return value
            continue

        nodes = handle.select(selector)
        if len(nodes) != 1:
            continue
        text = normalize_spaces(nodes[0].get_text(' '))
        if text and (max_length is None or len(text) <= max_length):
            return text
    return None


def extract_title(handle, url=None, **kwargs) -> Optional[str]:
    title = handle.meta_content(TITLE_META_TAGS[:5])
    if not title:
        title = _text_of_unique_match(handle, TITLE_SELECTORS)
    if not title:
        title = handle.meta_content(TITLE_META_TAGS[5:])
    if not title:
        h1s = handle.select('h1')
        if len(h1s) == 1:
            title = h1s[0].get_text(' ')
    if not title and handle.soup.title:
        title = handle.soup.title.get_text()
    return clean_title(title, url=url)


def extract_author(handle, url=None, **kwargs) -> Optional[str]:
    author = handle.meta_content(AUTHOR_META_TAGS)
    # article:author frequently holds a profile URL instead of a name
    if author and re.match(r'^https?://', author):
        author = None
    if not author:
        author = _text_of_unique_match(handle, AUTHOR_SELECTORS, max_length=300)
    return clean_author(author)


def _date_from_json_ld(handle) -> Optional[str]:
    for script in handle.soup.find_all('script', type='application/ld+json'):
        try:
            data = json.loads(script.string or '{}')
        except json.JSONDecodeError:
            continue

        items = data if isinstance(data, list) else [data]
        for item in items:
            if not isinstance(item, dict):
                continue
            if isinstance(item.get('@graph'), list):
                items.extend(i for i in item['@graph'] if isinstance(i, dict))
            value = item.get('datePublished') or item.get('dateCreated')
            if isinstance(value, list):
                value = value[0] if value else None
            if value:
                return str(value)
    return None


def extract_date_published(handle, url=None, **kwargs) -> Optional[str]:
    candidates = (
        lambda: handle.meta_content(DATE_META_TAGS),
        lambda: _date_from_json_ld(handle),
        lambda: _text_of_unique_match(handle, DATE_SELECTORS),
    )
    for candidate in candidates:
        date = clean_date_published(candidate())
        if date:
            return date

    match = DATE_IN_URL_RE.search(url or '')
    if match:
        year, month, day = match.group(1), match.group(2), match.group(3)
        return clean_date_published(f"{year}-{int(month):02d}-{int(day):02d}")
    return None


def extract_dek(handle, url=None, excerpt=None, **kwargs) -> Optional[str]:
    return clean_dek(_text_of_unique_match(handle, DEK_SELECTORS, max_length=1000), excerpt=excerpt)


def _score_image(img) -> int:
    src = img.get('src') or ''
    score = 0
    if POSITIVE_IMAGE_HINTS_RE.search(src):
        score += 20
    if NEGATIVE_IMAGE_HINTS_RE.search(src):
        score -= 20
    if src.lower().endswith('.gif'):
        score -= 10
    if img.get('alt'):
        score += 5

    parent = img.parent
    if parent is not None and (parent.name == 'figure' or parent.find('figcaption')):
        score += 25

    try:
        width = int(img.get('width', 0))
        height = int(img.get('height', 0))
    except (TypeError, ValueError):
        width = height = 0
    if width and width <= 50 or height and height <= 50:
        score -= 50
    elif width * height >= 50000:
        score += 20
    return score


def extract_lead_image_url(handle, url=None, content=None, **kwargs) -> Optional[str]:
    image = handle.meta_content(LEAD_IMAGE_META_TAGS)
    if image:
        return clean_lead_image_url(image, url=url)

    link = handle.soup.find('link', rel='image_src')
    if link is not None and link.get('href'):
        return clean_lead_image_url(link['href'], url=url)

    images = []
    if content:
        images = BeautifulSoup(content, 'lxml').find_all('img', src=True)
    if not images:
        images = handle.soup.find_all('img', src=True)

    best, best_score = None, None
    for index, img in enumerate(images):
        # Earlier images are more likely to be the lead image
        score = _score_image(img) - index
        if best_score is None or score > best_score:
            best, best_score = img, score

    if best is not None and best_score >= MIN_IMAGE_SCORE:
        return clean_lead_image_url(best['src'], url=url)
    return None


def content_text(content: Optional[str]) -> str:
    if not content:
        return ''
    return normalize_spaces(BeautifulSoup(content, 'lxml').get_text(' ')) or ''


def ellipsize(text: str, length: int) -> str:
    if len(text) <= length:
        return text
    cut = text[:length].rsplit(' ', 1)[0].rstrip(',;:.')
    return f"{cut}…"


def extract_excerpt(handle, url=None, content=None, **kwargs) -> Optional[str]:
    excerpt = handle.meta_content(EXCERPT_META_TAGS)
    if excerpt:
        return ellipsize(normalize_spaces(excerpt), EXCERPT_LENGTH)

    text = content_text(content)
    if not text:
        return None
    return ellipsize(text, EXCERPT_LENGTH)


def extract_word_count(handle=None, url=None, content=None, **kwargs) -> int:
    text = content_text(content)
    return len(text.split()) if text else 0


def extract_direction(handle=None, url=None, title=None, **kwargs) -> str:
    """"rtl" when the title is mostly right-to-left script, else "ltr"."""
    rtl = ltr = 0
    for char in title or '':
        bidi = unicodedata.bidirectional(char)
        if bidi in ('R', 'AL'):
            rtl += 1
        elif bidi == 'L':
            ltr += 1
    return 'rtl' if rtl > ltr else 'ltr'
