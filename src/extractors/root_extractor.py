"""
Field extraction engine.

Runs an extractor definition against a document, field by field, falling
back to the generic heuristics for fields the definition does not declare
or whose rule finds nothing.
"""

import logging
from enum import Enum
from typing import Any, Dict, Iterable, Mapping, Optional

from bs4 import Tag

from .base import FieldRule
from .cleaners import CLEANERS, clean_content, make_links_absolute, normalize_spaces
from .generic import GenericExtractor


logger = logging.getLogger(__name__)

RESULT_FIELDS = (
    'title',
    'author',
    'date_published',
    'dek',
    'lead_image_url',
    'content',
    'next_page_url',
    'url',
    'domain',
    'excerpt',
    'word_count',
    'direction',
    'total_pages',
    'rendered_pages',
)


class FieldSource(str, Enum):
    """Where the value of a field comes from for one extraction."""
    SPECIFIC = "specific"
    GENERIC = "generic"
    ABSENT = "absent"


def field_source(definition, field_name: str, fallback: bool) -> FieldSource:
    rule = definition.rule_for(field_name) if definition is not None else None
    if rule is not None:
        return FieldSource.SPECIFIC
    return FieldSource.GENERIC if fallback else FieldSource.ABSENT


def _is_empty(value) -> bool:
    if value is None:
        return True
    if isinstance(value, (str, list, tuple)) and not value:
        return True
    if isinstance(value, Tag):
        return not value.get_text(strip=True) and value.find(['img', 'iframe', 'video']) is None
    return False


def find_matching_selector(handle, selectors, extract_html=False, allow_multiple=False):
    """First selector in `selectors` that yields a usable match, or None."""
    for selector in selectors:
        if isinstance(selector, tuple):
            if extract_html:
                if all(handle.select(s) for s in selector):
                    return selector
                continue

            css, attr = selector[0], selector[1]
            nodes = handle.select(css)
            if not nodes or (not allow_multiple and len(nodes) != 1):
                continue
            if attr is None:
                found = nodes[0].get_text(strip=True)
            else:
                found = _attribute(nodes[0], attr)
            if found:
                return selector
            continue

        nodes = handle.select(selector)
        if not nodes or (not allow_multiple and len(nodes) != 1):
            continue
        if not nodes[0].get_text(strip=True) and not (extract_html and nodes[0].find('img')):
            continue
        return selector
    return None


def _attribute(node: Tag, attr: str) -> str:
    value = node.get(attr)
    if isinstance(value, list):
        value = ' '.join(value)
    return (value or '').strip()


def transform_elements(node: Tag, handle, transforms: Mapping[str, Any]):
    for selector, transform in transforms.items():
        matches = node.select(selector)
        for match in matches:
            if isinstance(transform, str):
                match.name = transform
                continue
            result = transform(match, handle)
            if isinstance(result, str):
                match.name = result


def clean_by_selectors(node: Tag, selectors: Iterable[str]):
    for selector in selectors:
        for match in node.select(selector):
            match.decompose()


def _transform_and_clean(nodes, handle, rule: FieldRule, url: str):
    for node in nodes:
        make_links_absolute(node, url)
        clean_by_selectors(node, rule.clean)
        transform_elements(node, handle, rule.transforms)


def _select_html(handle, rule: FieldRule, matching, url: str) -> Tag:
    if isinstance(matching, tuple):
        nodes = handle.select(', '.join(matching))
    else:
        nodes = handle.select(matching)
        if not rule.allow_multiple:
            nodes = nodes[:1]

    wrapper = handle.soup.new_tag('div')
    nodes[0].insert_before(wrapper)
    for node in nodes:
        wrapper.append(node.extract())

    _transform_and_clean([wrapper], handle, rule, url)
    return wrapper


def select(handle, rule: Optional[FieldRule], field_name: str, url: str, extract_html: bool = False, **context):
    """
    Apply one field rule to the document.

    Returns a node for content (extract_html=True) and text, a list of texts
    with allow_multiple, or an attribute value otherwise. None when no
    selector matches.
    """
    if rule is None:
        return None
    if rule.value is not None:
        return rule.value

    # Pages often carry several candidate images; take the first one
    allow_multiple = rule.allow_multiple or field_name == 'lead_image_url'
    matching = find_matching_selector(handle, rule.selectors, extract_html, allow_multiple)
    if matching is None:
        return None

    if extract_html:
        return _select_html(handle, rule, matching, url)

    if isinstance(matching, tuple):
        css, attr = matching[0], matching[1]
        fn = matching[2] if len(matching) > 2 else None
        nodes = handle.select(css)
        _transform_and_clean(nodes, handle, rule, url)
        values = [node.get_text(' ', strip=True) if attr is None else _attribute(node, attr) for node in nodes]
        if fn is not None:
            values = [fn(value) for value in values]
    else:
        nodes = handle.select(matching)
        _transform_and_clean(nodes, handle, rule, url)
        values = [normalize_spaces(node.get_text(' ')) for node in nodes]

    cleaner = CLEANERS.get(field_name) if rule.default_cleaner else None
    if cleaner is not None:
        values = [cleaner(value, url=url, **context) for value in values]

    if rule.allow_multiple:
        return [value for value in values if value]
    return values[0] if values else None


class RootExtractor:
    """Runs one extraction over a document handle."""

    @staticmethod
    def extract_field(field_name: str, definition, handle, url: str, fallback: bool = True, **context):
        """
        Value of one field: the definition's rule first, then the generic
        heuristic when allowed. A rule that raises counts as finding nothing.
        """
        source = field_source(definition, field_name, fallback)
        if source is FieldSource.ABSENT:
            return None

        if source is FieldSource.SPECIFIC:
            rule = definition.rule_for(field_name)
            try:
                value = select(handle, rule, field_name, url, extract_html=field_name == 'content', **context)
            except Exception as e:
                logger.warning("Rule for %s failed on %s: %s", field_name, url, e)
                value = None
            if not _is_empty(value):
                return value
            if not fallback:
                return None
            logger.debug("Rule for %s found nothing on %s, using generic extractor", field_name, url)

        try:
            return GenericExtractor.for_field(field_name)(handle, url=url, **context)
        except Exception as e:
            logger.warning("Generic %s extraction failed on %s: %s", field_name, url, e)
            return None

    @classmethod
    def extract_content(cls, definition, handle, url: str, fallback: bool, title=None) -> Optional[str]:
        node = cls.extract_field('content', definition, handle, url, fallback)
        if node is None:
            return None
        if isinstance(node, str):
            return node

        rule = definition.rule_for('content') if definition is not None else None
        if rule is None or rule.default_cleaner:
            clean_content(node, url=url, title=title)
        if _is_empty(node):
            return None
        return str(node)

    @classmethod
    def extract(
        cls,
        definition,
        handle,
        url: Optional[str] = None,
        fallback: bool = True,
        content_type: str = 'html',
        previous_urls: Iterable[str] = (),
    ) -> Dict[str, Any]:
        """
        Extract every result field from `handle`.

        Takes ownership of the handle: content cleaning removes nodes from
        it, so it cannot be extracted again. The content is returned as
        HTML; conversion to `content_type` happens once the whole article
        has been assembled.
        """
        handle.consume()
        url = url or handle.url
        previous_urls = tuple(previous_urls)

        def field(name, **context):
            return cls.extract_field(name, definition, handle, url, fallback, **context)

        title = field('title')
        date_published = field('date_published')
        author = field('author')
        next_page_url = field('next_page_url', previous_urls=previous_urls)
        content = cls.extract_content(definition, handle, url, fallback, title=title)
        lead_image_url = field('lead_image_url', content=content)
        excerpt = field('excerpt', content=content)
        dek = field('dek', excerpt=excerpt)
        word_count = field('word_count', content=content)
        direction = field('direction', title=title)

        logger.debug("Extracted %s with %r (content type %s)", url, definition, content_type)

        result = dict.fromkeys(RESULT_FIELDS)
        result.update({
            'title': title,
            'author': author,
            'date_published': date_published,
            'dek': dek,
            'lead_image_url': lead_image_url,
            'content': content,
            'next_page_url': next_page_url,
            'url': url,
            'domain': handle.parsed_url.netloc,
            'excerpt': excerpt,
            'word_count': word_count,
            'direction': direction,
        })
        return result


def select_extended_types(extend: Mapping[str, Any], handle, url: str) -> Dict[str, Any]:
    """
    Evaluate extra field rules against the document.

    Runs before the main extraction, which mutates the document.
    """
    results = {}
    for name, rule in extend.items():
        try:
            results[name] = select(handle, FieldRule.from_value(rule), name, url)
        except Exception as e:
            logger.warning("Extended field %s failed on %s: %s", name, url, e)
            results[name] = None
    return results
