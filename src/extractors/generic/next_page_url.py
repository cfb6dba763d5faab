"""
Generic detection of the link to the next page of a paginated article.
"""

import difflib
import logging
import re
from typing import Iterable, Optional
from urllib.parse import parse_qsl, urlencode, urldefrag, urljoin, urlparse, urlunparse

from ..cleaners import clean_next_page_url


logger = logging.getLogger(__name__)

NEXT_LINK_TEXT_RE = re.compile(r'(next|weiter|continue|>([^|]|$)|»([^|]|$))', re.IGNORECASE)
CAP_LINK_TEXT_RE = re.compile(r'(first|last|end)', re.IGNORECASE)
PREV_LINK_TEXT_RE = re.compile(r'(prev|earl|old|new|<|«)', re.IGNORECASE)
EXTRANEOUS_LINK_HINTS_RE = re.compile(
    r'print|archive|comment|discuss|e-mail|email|share|reply|all|login|sign|single|adx|entry-unrelated',
    re.IGNORECASE
)
PAGE_HINT_RE = re.compile(r'pag(e|ing|inat)', re.IGNORECASE)
POSITIVE_PARENT_RE = re.compile(r'pag(e|ing|inat)|next|more|nav', re.IGNORECASE)
NEGATIVE_PARENT_RE = re.compile(r'comment|sidebar|footer|related|(^|[\s_-])ads?([\s_-]|$)', re.IGNORECASE)
PAGE_IN_HREF_RE = re.compile(r'(page|paging|(p(a|g|ag)?(e|enum|ewanted|ing|ination)))?(=|/)([0-9]{1,3})', re.IGNORECASE)
PAGE_QUERY_PARAMS = {'page', 'p', 'pg', 'pagenum', 'pagina'}

MAX_LINK_TEXT_LENGTH = 25
MIN_SCORE = 50


def article_base_url(url: str) -> str:
    """
    The article URL with page markers removed, e.g.
    http://example.com/story/2 -> http://example.com/story
    http://example.com/story?page=3 -> http://example.com/story
    """
    parsed = urlparse(url)
    segments = [s for s in parsed.path.split('/') if s]
    while segments:
        last = segments[-1]
        if re.fullmatch(r'\d{1,2}', last) or re.fullmatch(r'(page|p|pg)[-_]?\d{1,3}', last, re.IGNORECASE):
            segments.pop()
            continue
        if last.lower() in PAGE_QUERY_PARAMS:
            segments.pop()
            continue
        segments[-1] = re.sub(r'([-_])(page|p)?\d{1,2}$', '', last, flags=re.IGNORECASE) or last
        break

    query = [(k, v) for k, v in parse_qsl(parsed.query) if k.lower() not in PAGE_QUERY_PARAMS]
    path = '/' + '/'.join(segments) if segments else '/'
    return urlunparse((parsed.scheme, parsed.netloc, path, '', urlencode(query), ''))


def _ancestor_markers(link, depth: int = 3) -> str:
    markers = []
    parent = link.parent
    while parent is not None and depth > 0 and parent.name != '[document]':
        classes = parent.get('class') or []
        if isinstance(classes, str):
            classes = [classes]
        markers.append(' '.join(classes + [parent.get('id') or '']))
        parent = parent.parent
        depth -= 1
    return ' '.join(markers)


def score_link(href: str, link_text: str, link, url: str, base_url: str) -> float:
    score = 0.0
    link_data = f"{link_text} {' '.join(link.get('class') or [])} {link.get('id') or ''}"

    if not href.startswith(base_url):
        score -= 25

    if 'next' in (link.get('rel') or []):
        score += 50
    if NEXT_LINK_TEXT_RE.search(link_data):
        score += 50
    if CAP_LINK_TEXT_RE.search(link_data) and NEXT_LINK_TEXT_RE.search(link_data):
        score -= 65
    if PREV_LINK_TEXT_RE.search(link_data):
        score -= 200
    if EXTRANEOUS_LINK_HINTS_RE.search(link_data):
        score -= 25
    if PAGE_HINT_RE.search(link_data):
        score += 25

    parents = _ancestor_markers(link)
    if parents.strip():
        if POSITIVE_PARENT_RE.search(parents):
            score += 25
        if NEGATIVE_PARENT_RE.search(parents):
            score -= 25

    # Numbered page links: prefer the page right after the current one
    stripped_text = link_text.strip()
    if stripped_text.isdigit():
        page_number = int(stripped_text)
        current = _page_number(url) or 1
        if page_number == current + 1:
            score += 10
        elif page_number <= current:
            score -= 50
        else:
            score -= 5 * (page_number - current)

    similarity = difflib.SequenceMatcher(None, url, href).ratio()
    if similarity < 0.5:
        score -= 50
    elif similarity > 0.9:
        score += 10

    return score


def _page_number(url: str) -> Optional[int]:
    match = PAGE_IN_HREF_RE.search(url.replace(article_base_url(url), ''))
    if match:
        return int(match.group(6))
    return None


def _candidate_hrefs(handle):
    for link in handle.soup.find_all(['a', 'link'], href=True):
        if link.name == 'link' and 'next' not in (link.get('rel') or []):
            continue
        yield link


def extract_next_page_url(handle, url: str, previous_urls: Iterable[str] = (), **kwargs) -> Optional[str]:
    """
    Score every same-host link on the page as a "next page" candidate and
    return the best one scoring at least MIN_SCORE.

    URLs in `previous_urls` and the article URL itself are never returned.
    """
    visited = {urldefrag(u)[0].rstrip('/') for u in previous_urls}
    visited.add(urldefrag(url)[0].rstrip('/'))
    host = urlparse(url).netloc
    base_url = article_base_url(url)

    best_href, best_score = None, None
    for link in _candidate_hrefs(handle):
        href = urldefrag(urljoin(url, link['href']))[0]
        if href.rstrip('/') in visited:
            continue
        if urlparse(href).netloc != host:
            continue

        link_text = link.get_text(' ', strip=True)
        if len(link_text) > MAX_LINK_TEXT_LENGTH:
            continue

        # Next pages always carry a page number somewhere past the base URL
        if link.name == 'a' and not re.search(r'\d', href.replace(base_url, '')):
            continue

        score = score_link(href, link_text, link, url, base_url)
        if link.name == 'link':
            score += 50
        if best_score is None or score > best_score:
            best_href, best_score = href, score

    if best_href is None or best_score < MIN_SCORE:
        return None

    logger.debug("Next page candidate for %s: %s (score %s)", url, best_href, best_score)
    return clean_next_page_url(best_href, url=url)
