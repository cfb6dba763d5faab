"""
Declarative extractor definitions.

A definition describes, for one domain, where each article field lives in
the page. Fields left out fall back to the generic heuristics.
"""

import re
from dataclasses import dataclass, field, fields
from types import MappingProxyType
from typing import Any, Mapping, Optional, Tuple


# Output fields a definition may declare, in extraction order
FIELDS = (
    'title',
    'date_published',
    'author',
    'next_page_url',
    'content',
    'lead_image_url',
    'excerpt',
    'dek',
    'word_count',
    'direction',
)

def _freeze_selector(selector):
    if isinstance(selector, list):
        return tuple(selector)
    return selector


@dataclass(frozen=True)
class FieldRule:
    """
    How to find one field.

    selectors: tried in order. Each entry is one of
        - a CSS selector string;
        - for text fields, ``(selector, attribute)`` or
          ``(selector, attribute, fn)`` where ``fn`` receives the attribute
          value and returns the field value. An attribute of None reads the
          node text instead;
        - for content, a sequence of selectors that must all match; the
          matched nodes are combined.
    allow_multiple: accept selectors matching more than one node.
    default_cleaner: run the field's standard cleaner on the value.
    clean: selectors removed from matched content before cleaning.
    transforms: selector -> tag name (rename) or callable(node, handle)
        applied to the matched nodes before reading them.
    value: a fixed value returned as is, without looking at the page.

    A bare string given where a rule is expected is a fixed value, not a
    selector.
    """

    selectors: Tuple[Any, ...] = ()
    allow_multiple: bool = False
    default_cleaner: bool = True
    clean: Tuple[str, ...] = ()
    transforms: Mapping[str, Any] = field(default_factory=dict)
    value: Optional[Any] = None

    def __post_init__(self):
        object.__setattr__(self, 'selectors', tuple(_freeze_selector(s) for s in self.selectors))
        object.__setattr__(self, 'clean', tuple(self.clean))
        object.__setattr__(self, 'transforms', MappingProxyType(dict(self.transforms)))

    @classmethod
    def from_value(cls, value) -> Optional['FieldRule']:
        """Build a rule from a FieldRule, a mapping, a selector list or a fixed value."""
        if value is None or isinstance(value, FieldRule):
            return value
        if isinstance(value, str):
            return cls(value=value)
        if isinstance(value, (list, tuple)):
            return cls(selectors=tuple(value))
        if isinstance(value, Mapping):
            return cls(
                selectors=tuple(value.get('selectors') or ()),
                allow_multiple=bool(value.get('allow_multiple', value.get('allowMultiple', False))),
                default_cleaner=bool(value.get('default_cleaner', value.get('defaultCleaner', True))),
                clean=tuple(value.get('clean') or ()),
                transforms=value.get('transforms') or {},
                value=value.get('value'),
            )
        raise TypeError(f"Cannot build a field rule from {type(value).__name__}")


@dataclass(frozen=True, eq=False)
class ExtractorDefinition:
    """
    Extraction rules for one domain.

    `domain` is matched as a substring of the page URL. When
    `included_paths` is set, at least one of its regular expressions must
    also match the URL.
    """

    domain: str
    title: Optional[FieldRule] = None
    date_published: Optional[FieldRule] = None
    author: Optional[FieldRule] = None
    next_page_url: Optional[FieldRule] = None
    content: Optional[FieldRule] = None
    lead_image_url: Optional[FieldRule] = None
    excerpt: Optional[FieldRule] = None
    dek: Optional[FieldRule] = None
    word_count: Optional[FieldRule] = None
    direction: Optional[FieldRule] = None
    supported_domains: Tuple[str, ...] = ()
    included_paths: Optional[Tuple[str, ...]] = None
    extend: Mapping[str, FieldRule] = field(default_factory=dict)
    name: Optional[str] = None

    def __post_init__(self):
        if not self.domain or not isinstance(self.domain, str):
            raise ValueError("An extractor definition needs a domain")

        for field_name in FIELDS:
            object.__setattr__(self, field_name, FieldRule.from_value(getattr(self, field_name)))

        object.__setattr__(self, 'supported_domains', tuple(self.supported_domains))
        if self.included_paths is not None:
            object.__setattr__(self, 'included_paths', tuple(self.included_paths))
            for pattern in self.included_paths:
                try:
                    re.compile(pattern)
                except (re.error, TypeError) as e:
                    raise ValueError(f"Invalid included path {pattern!r}: {e}") from e
        object.__setattr__(self, 'extend', MappingProxyType({
            key: FieldRule.from_value(rule) for key, rule in dict(self.extend).items()
        }))

    def rule_for(self, field_name: str) -> Optional[FieldRule]:
        """Rule declared for `field_name`, or None to use the generic extractor."""
        return getattr(self, field_name, None)

    @property
    def domains(self) -> Tuple[str, ...]:
        return (self.domain,) + self.supported_domains

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'ExtractorDefinition':
        """
        Build a definition from a plain mapping, e.g. a JSON file.

        Accepts both snake_case keys and the camelCase spelling
        (supportedDomains, includedPaths) used by hand-written definitions.
        """
        known = {f.name for f in fields(cls)}
        kwargs = {}
        for key, value in data.items():
            if key == 'supportedDomains':
                key = 'supported_domains'
            elif key == 'includedPaths':
                key = 'included_paths'
            if key in known:
                kwargs[key] = value
        return cls(**kwargs)

    def __repr__(self):
        return f"ExtractorDefinition(domain={self.domain!r})"
