"""
Field cleaners.

Every extracted value goes through the cleaner for its field, whether it
came from a per-domain selector or from the generic heuristics, so both
paths return comparable values.
"""

import logging
import re
from datetime import datetime, timedelta, timezone
from typing import Optional
from urllib.parse import urljoin, urlparse, urldefrag

from bs4 import Tag
from dateutil import parser as date_parser


logger = logging.getLogger(__name__)

# Tags that never carry article text
STRIP_TAGS = [
    'script', 'style', 'noscript', 'form', 'nav', 'aside', 'footer',
    'button', 'input', 'select', 'textarea', 'svg', 'link', 'meta', 'object', 'embed',
]

# class/id fragments of boilerplate blocks
UNWANTED_BLOCK_RE = re.compile(
    r'(^|[\s_-])(ad|ads|advert|advertisement|sponsor|promo|share|sharing|social|'
    r'newsletter|subscribe|comment|comments|related|recommended|outbrain|taboola|'
    r'popup|modal|cookie|breadcrumb|pagination)([\s_-]|$)',
    re.IGNORECASE
)

# iframes from these hosts are kept in the content
VIDEO_HOSTS_RE = re.compile(r'//(www\.)?(youtube(-nocookie)?\.com|player\.vimeo\.com|dailymotion\.com)', re.IGNORECASE)

KEEP_ATTRS = {'href', 'src', 'srcset', 'alt', 'title', 'colspan', 'rowspan', 'datetime'}

BYLINE_PREFIX_RE = re.compile(r'^\s*((posted|written)\s+)?by\s*:?\s+', re.IGNORECASE)
TITLE_SPLIT_RE = re.compile(r'\s+(?:\||-|–|—|::|»|·)\s+')
RELATIVE_DATE_RE = re.compile(r'(\d+)\s+(second|minute|hour|day|week|month|year)s?\s+ago', re.IGNORECASE)

MAX_AUTHOR_LENGTH = 300
MAX_DEK_LENGTH = 1000


def normalize_spaces(text: Optional[str]) -> Optional[str]:
    if text is None:
        return None
    return re.sub(r'\s+', ' ', text).strip()


def _domain_label(url: Optional[str]) -> str:
    host = urlparse(url or '').netloc.lower()
    host = re.sub(r'^www\d*\.', '', host)
    return host.split('.')[0] if host else ''


def clean_title(title, url=None, **kwargs) -> Optional[str]:
    """
    Collapse whitespace and drop a site-name segment such as
    "Headline | Example News" when the segment names the site's domain.
    """
    title = normalize_spaces(title)
    if not title:
        return None

    parts = TITLE_SPLIT_RE.split(title)
    label = _domain_label(url)
    if len(parts) > 1 and label:
        def is_site_name(part):
            return label in re.sub(r'[^a-z0-9]', '', part.lower())

        if is_site_name(parts[-1]):
            parts = parts[:-1]
        elif is_site_name(parts[0]):
            parts = parts[1:]
        title = ' - '.join(parts) if parts else title

    return title


def clean_author(author, **kwargs) -> Optional[str]:
    author = normalize_spaces(author)
    if not author:
        return None
    author = BYLINE_PREFIX_RE.sub('', author).strip()
    if not author or len(author) > MAX_AUTHOR_LENGTH:
        return None
    return author


def clean_date_published(value, now: Optional[datetime] = None, **kwargs) -> Optional[str]:
    """
    Normalize a publication date to an ISO 8601 string in UTC.

    Understands epoch timestamps (seconds or milliseconds), "N units ago"
    and anything dateutil can read. Returns None when nothing parses.
    """
    if value is None:
        return None
    text = normalize_spaces(str(value))
    if not text or not re.search(r'\d', text):
        return None

    now = now or datetime.now(timezone.utc)

    if text.isdigit():
        if len(text) == 13:
            return datetime.fromtimestamp(int(text) / 1000, tz=timezone.utc).isoformat()
        if len(text) == 10:
            return datetime.fromtimestamp(int(text), tz=timezone.utc).isoformat()
        return None

    relative = RELATIVE_DATE_RE.search(text)
    if relative:
        amount = int(relative.group(1))
        unit = relative.group(2).lower()
        days = {'week': 7, 'month': 30, 'year': 365}.get(unit)
        if days:
            delta = timedelta(days=amount * days)
        else:
            delta = timedelta(**{f'{unit}s': amount})
        return (now - delta).isoformat()

    try:
        parsed = date_parser.parse(text, fuzzy=True)
    except (ValueError, OverflowError) as e:
        logger.debug("Could not parse date %r: %s", text, e)
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc).isoformat()


def clean_dek(dek, excerpt=None, **kwargs) -> Optional[str]:
    dek = normalize_spaces(dek)
    if not dek or len(dek) < 5 or len(dek) > MAX_DEK_LENGTH:
        return None
    if re.match(r'^https?://', dek):
        return None
    if excerpt and normalize_spaces(excerpt) == dek:
        return None
    return dek


def clean_lead_image_url(value, url=None, **kwargs) -> Optional[str]:
    value = (value or '').strip()
    if not value:
        return None
    absolute = urljoin(url or '', value)
    if urlparse(absolute).scheme not in ('http', 'https'):
        return None
    return absolute


def clean_next_page_url(value, url=None, **kwargs) -> Optional[str]:
    value = (value or '').strip()
    if not value:
        return None
    absolute, _ = urldefrag(urljoin(url or '', value))
    if urlparse(absolute).scheme not in ('http', 'https'):
        return None
    if url and absolute.rstrip('/') == urldefrag(url)[0].rstrip('/'):
        return None
    return absolute


def make_links_absolute(node: Tag, base_url: str):
    for tag in node.find_all(href=True):
        tag['href'] = urljoin(base_url, tag['href'])
    for tag in node.find_all(src=True):
        tag['src'] = urljoin(base_url, tag['src'])
    if node.get('href'):
        node['href'] = urljoin(base_url, node['href'])
    if node.get('src'):
        node['src'] = urljoin(base_url, node['src'])


def _is_unwanted_block(tag: Tag) -> bool:
    if tag.name in ('html', 'body', 'article', 'main'):
        return False
    attrs = getattr(tag, 'attrs', None)
    if not attrs:
        return False
    classes = tag.get('class') or []
    if isinstance(classes, str):
        classes = [classes]
    marker = ' '.join(classes + [tag.get('id') or ''])
    return bool(marker.strip()) and bool(UNWANTED_BLOCK_RE.search(marker))


def clean_content(node: Tag, url: str = '', title: Optional[str] = None, **kwargs) -> Tag:
    """
    Strip everything that is not article text from `node`, in place.

    Removes scripts, navigation, forms and boilerplate blocks (ads, share
    bars, comments, related links), keeps only a small set of attributes,
    resolves relative links, drops empty paragraphs and a leading heading
    that repeats the title.
    """
    for tag in node.find_all(STRIP_TAGS):
        tag.decompose()

    for iframe in node.find_all('iframe'):
        if not VIDEO_HOSTS_RE.search(iframe.get('src') or ''):
            iframe.decompose()

    for tag in [t for t in node.find_all(True) if _is_unwanted_block(t)]:
        if not tag.decomposed:
            tag.decompose()

    for tag in [node] + node.find_all(True):
        tag.attrs = {key: value for key, value in tag.attrs.items() if key in KEEP_ATTRS}

    for tag in node.find_all('font'):
        tag.unwrap()

    make_links_absolute(node, url)

    for p in node.find_all('p'):
        if not p.get_text(strip=True) and not p.find(['img', 'iframe', 'video']):
            p.decompose()

    if title:
        wanted = normalize_spaces(title).lower()
        for heading in node.find_all(['h1', 'h2'], limit=1):
            if normalize_spaces(heading.get_text()).lower() == wanted:
                heading.decompose()

    return node


# Cleaner per output field
CLEANERS = {
    'title': clean_title,
    'author': clean_author,
    'date_published': clean_date_published,
    'dek': clean_dek,
    'lead_image_url': clean_lead_image_url,
    'next_page_url': clean_next_page_url,
}
