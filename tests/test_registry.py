import pytest

from extractors import ExtractorDefinition, ExtractorRegistry, add_extractor, get_extractor, extractor_registry


def make(domain, **kwargs):
    return ExtractorDefinition(domain=domain, title={'selectors': ['h1']}, **kwargs)


@pytest.fixture
def built_in_a():
    return make('example.com', name='built-in')


def test_resolve_is_deterministic(built_in_a):
    reg = ExtractorRegistry({'example.com': built_in_a})
    url = 'https://example.com/a/b'
    assert reg.resolve(url) is reg.resolve(url) is built_in_a


def test_no_match_returns_none(built_in_a):
    reg = ExtractorRegistry({'example.com': built_in_a})
    assert reg.resolve('https://other.org/story') is None


def test_custom_shadows_built_in(built_in_a):
    reg = ExtractorRegistry({'example.com': built_in_a})
    custom = make('example.com', name='custom')
    reg.add(custom)
    assert reg.resolve('https://example.com/x') is custom


def test_included_paths_gate_and_continue_scanning():
    gated = make('example.com', included_paths=['^/article/'])
    reg = ExtractorRegistry({'example.com': gated})
    assert reg.resolve('https://example.com/article/42') is gated
    assert reg.resolve('https://example.com/video/42') is None


def test_malformed_included_path_is_rejected():
    with pytest.raises(ValueError, match='Invalid included path'):
        make('example.com', included_paths=['[unclosed'])

    result = add_extractor({'domain': 'example.com', 'includedPaths': ['[unclosed']})
    assert result['error'] is True
    assert 'example.com' not in extractor_registry.custom
    assert get_extractor('https://example.com/story') is None


def test_rule_mappings_default_to_empty():
    definition = make('example.com')
    assert dict(definition.extend) == {}
    assert dict(definition.title.transforms) == {}
    assert make('example.org').extend is not definition.extend


def test_rejected_key_lets_later_key_match():
    gated = make('example.com', included_paths=['/article/'])
    fallback = make('www.example.com')
    reg = ExtractorRegistry({'www.example.com': fallback})
    reg.add(gated)
    assert reg.resolve('https://www.example.com/video/1') is fallback
    assert reg.resolve('https://www.example.com/article/1') is gated


def test_domain_matches_as_substring(built_in_a):
    reg = ExtractorRegistry({'example.com': built_in_a})
    assert reg.resolve('https://notexample.com/story') is built_in_a


def test_supported_domains_are_registered():
    definition = make('www.example.com', supported_domains=['m.example.com', 'amp.example.com'])
    reg = ExtractorRegistry()
    custom = reg.add(definition)
    assert set(custom) == {'www.example.com', 'm.example.com', 'amp.example.com'}
    assert reg.resolve('https://amp.example.com/story') is definition


def test_add_returns_snapshot():
    reg = ExtractorRegistry()
    snapshot = reg.add(make('a.com'))
    reg.add(make('b.com'))
    assert list(snapshot) == ['a.com']
    with pytest.raises(TypeError):
        snapshot['c.com'] = make('c.com')


def test_built_in_is_read_only(built_in_a):
    reg = ExtractorRegistry({'example.com': built_in_a})
    with pytest.raises(TypeError):
        reg.built_in['other.com'] = built_in_a


def test_built_in_extractors_are_loaded():
    definition = get_extractor('https://www.diariolibre.com/actualidad/some-story')
    assert definition is not None
    assert definition.name == 'Diario Libre'
    assert extractor_registry.built_in['diariolibre.com'] is definition


def test_add_extractor_from_mapping():
    custom = add_extractor({
        'domain': 'blog.example.org',
        'supportedDomains': ['example.org'],
        'title': {'selectors': ['h2.post-title']},
    })
    assert 'example.org' in custom
    definition = get_extractor('https://blog.example.org/post')
    assert definition.title.selectors == ('h2.post-title',)


@pytest.mark.parametrize('bad', [None, 'example.com', {}, {'title': {'selectors': ['h1']}}])
def test_add_extractor_rejects_invalid_definitions(bad):
    result = add_extractor(bad)
    assert result['error'] is True
    assert 'Unable to add custom extractor' in result['message']
