"""
Generic article body extraction.

Scores block elements by the paragraphs they contain, picks the best
scoring node and merges in siblings that look like part of the same
article.
"""

import logging
import re
from typing import Dict, Optional, Tuple

from bs4 import BeautifulSoup, Tag


logger = logging.getLogger(__name__)

UNLIKELY_CANDIDATES_BLACKLIST = re.compile(
    r'ad-break|adbox|advert|addthis|agegate|aux|blogger-labels|combx|comment|'
    r'conversation|disqus|entry-unrelated|extra|foot|form|header|hidden|loader|'
    r'login|menu|meta|nav|pager|pagination|popup|printfriendly|related|remark|'
    r'rss|share|shoutbox|sidebar|sociable|sponsor|tools',
    re.IGNORECASE
)
UNLIKELY_CANDIDATES_WHITELIST = re.compile(
    r'and|article|body|blogindex|column|content|entry-content-asset|format|'
    r'hfeed|hentry|hatom|main|page|posts|shadow',
    re.IGNORECASE
)
POSITIVE_SCORE_RE = re.compile(
    r'article|articlecontent|instapaper_body|blog|body|content|entry-content-asset|'
    r'entry|hentry|main|page|permalink|post|story|text|[-_]copy|\Bcopy',
    re.IGNORECASE
)
NEGATIVE_SCORE_RE = re.compile(
    r'adbox|advert|author|bio|bookmark|bottom|byline|clear|com-|combx|comment|'
    r'contact|credit|crumb|date|deck|excerpt|featured|foot|footer|footnote|'
    r'graf|head|info|infotext|instapaper_ignore|jump|linebreak|link|masthead|'
    r'media|meta|modal|outbrain|promo|pr_|related|respond|roundcontent|scroll|'
    r'secondary|share|shopping|shoutbox|side|sidebar|sponsor|stamp|sub|summary|'
    r'tags|tools|widget',
    re.IGNORECASE
)

BLOCK_LEVEL_TAGS = {
    'article', 'aside', 'blockquote', 'body', 'div', 'dl', 'fieldset', 'figure',
    'footer', 'form', 'h1', 'h2', 'h3', 'h4', 'h5', 'h6', 'header', 'hr', 'main',
    'nav', 'ol', 'p', 'pre', 'section', 'table', 'ul',
}
NON_CONTENT_TAGS = ['script', 'style', 'noscript', 'link', 'iframe', 'form', 'button', 'svg']

TAG_BASE_SCORES = {
    'div': 5,
    'pre': 3, 'td': 3, 'blockquote': 3,
    'address': -3, 'ol': -3, 'ul': -3, 'dl': -3, 'dd': -3, 'dt': -3, 'li': -3, 'form': -3,
    'h1': -5, 'h2': -5, 'h3': -5, 'h4': -5, 'h5': -5, 'h6': -5, 'th': -5,
}

MIN_PARAGRAPH_LENGTH = 25
MIN_CONTENT_LENGTH = 140


def _class_and_id(tag: Tag) -> str:
    classes = tag.get('class') or []
    if isinstance(classes, str):
        classes = [classes]
    return ' '.join(classes + [tag.get('id') or ''])


def class_weight(tag: Tag) -> int:
    marker = _class_and_id(tag)
    if not marker.strip():
        return 0
    score = 0
    if POSITIVE_SCORE_RE.search(marker):
        score += 25
    if NEGATIVE_SCORE_RE.search(marker):
        score -= 25
    return score


def link_density(tag: Tag) -> float:
    text_length = len(tag.get_text(strip=True))
    if not text_length:
        return 0.0
    link_length = sum(len(a.get_text(strip=True)) for a in tag.find_all('a'))
    return link_length / text_length


def strip_unlikely_candidates(soup: BeautifulSoup):
    for tag in soup.find_all(True):
        if tag.decomposed or tag.name in ('html', 'body', 'a', 'article', 'main'):
            continue
        marker = _class_and_id(tag)
        if not marker.strip():
            continue
        if UNLIKELY_CANDIDATES_BLACKLIST.search(marker) and not UNLIKELY_CANDIDATES_WHITELIST.search(marker):
            tag.decompose()


def convert_to_paragraphs(soup: BeautifulSoup):
    """Turn divs that only hold inline content into paragraphs."""
    for div in soup.find_all('div'):
        if not any(isinstance(child, Tag) and child.name in BLOCK_LEVEL_TAGS for child in div.descendants):
            div.name = 'p'


def paragraph_score(text: str) -> float:
    score = 1 + text.count(',')
    score += min(len(text) // 100, 3)
    return score


class _Scores:
    """Score bookkeeping keyed by node identity."""

    def __init__(self, weight_nodes: bool):
        self.weight_nodes = weight_nodes
        self._scores: Dict[int, Tuple[Tag, float]] = {}

    def get(self, tag: Tag) -> Optional[float]:
        entry = self._scores.get(id(tag))
        return entry[1] if entry else None

    def add(self, tag: Tag, amount: float):
        current = self.get(tag)
        if current is None:
            current = TAG_BASE_SCORES.get(tag.name, 0)
            if self.weight_nodes:
                current += class_weight(tag)
        self._scores[id(tag)] = (tag, current + amount)

    def items(self):
        return self._scores.values()


def score_content(soup: BeautifulSoup, weight_nodes: bool = True) -> _Scores:
    scores = _Scores(weight_nodes)
    for node in soup.find_all(['p', 'pre']):
        text = node.get_text(' ', strip=True)
        if len(text) < MIN_PARAGRAPH_LENGTH:
            continue
        score = paragraph_score(text)
        parent = node.parent
        if not isinstance(parent, Tag) or parent.name == '[document]':
            continue
        scores.add(parent, score)
        grandparent = parent.parent
        if isinstance(grandparent, Tag) and grandparent.name != '[document]':
            scores.add(grandparent, score / 2)
    return scores


def find_top_candidate(scores: _Scores) -> Tuple[Optional[Tag], float]:
    top, top_score = None, 0.0
    for tag, score in scores.items():
        if tag.name in ('html', 'head'):
            continue
        adjusted = score * (1 - link_density(tag))
        if top is None or adjusted > top_score:
            top, top_score = tag, adjusted
    return top, top_score


def merge_siblings(top: Tag, top_score: float, scores: _Scores, soup: BeautifulSoup) -> Tag:
    """Wrap the top candidate together with siblings that belong to the article."""
    if top.name == 'body' or top.parent is None:
        return top

    threshold = max(10, top_score * 0.2)
    wrapper = soup.new_tag('div')
    siblings = [s for s in top.parent.children if isinstance(s, Tag)]

    for sibling in siblings:
        keep = sibling is top
        if not keep:
            score = scores.get(sibling)
            if score is not None and score * (1 - link_density(sibling)) >= threshold:
                keep = True
            elif sibling.name == 'p':
                text = sibling.get_text(' ', strip=True)
                density = link_density(sibling)
                if len(text) > 80 and density < 0.25:
                    keep = True
                elif len(text) <= 80 and density == 0 and re.search(r'\.( |$)', text):
                    keep = True
        if keep:
            wrapper.append(sibling.extract())

    return wrapper


def _attempt(html: str, strip_unlikely: bool, weight_nodes: bool) -> Optional[Tag]:
    soup = BeautifulSoup(html, 'lxml')
    for tag in soup.find_all(NON_CONTENT_TAGS):
        tag.decompose()
    if strip_unlikely:
        strip_unlikely_candidates(soup)
    convert_to_paragraphs(soup)

    scores = score_content(soup, weight_nodes=weight_nodes)
    top, top_score = find_top_candidate(scores)
    if top is None:
        return None

    node = merge_siblings(top, top_score, scores, soup)
    if len(node.get_text(' ', strip=True)) < MIN_CONTENT_LENGTH:
        return None
    return node


def extract_content(handle, url=None, **kwargs) -> Optional[Tag]:
    """
    Best guess at the article body as a detached node, or None.

    The first pass drops nodes that look like boilerplate and weighs nodes by
    class names; when that finds nothing substantial the pass is repeated
    without those filters.
    """
    html = str(handle.soup)
    for strip_unlikely, weight_nodes in ((True, True), (False, True), (False, False)):
        node = _attempt(html, strip_unlikely, weight_nodes)
        if node is not None:
            return node
        logger.debug(
            "No content candidate for %s (strip_unlikely=%s, weight_nodes=%s)",
            url, strip_unlikely, weight_nodes
        )

    body = BeautifulSoup(html, 'lxml').body
    if body is not None and body.get_text(strip=True):
        body.name = 'div'
        return body
    return None

