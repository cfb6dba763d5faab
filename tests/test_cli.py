import json

import pytest
from click.testing import CliRunner

import commands.cache
from cli import cli
from conftest import ARTICLE_HTML
from db.cache import CacheDatabase


URL = 'https://example.com/news/harbor-reopens'


@pytest.fixture
def runner():
    return CliRunner()


def test_parse_prints_json(runner, fake_pages):
    fake_pages[URL] = ARTICLE_HTML

    result = runner.invoke(cli, ['parse', URL, '--no-fetch-all', '--extend', 'kicker=p.dek'])

    assert result.exit_code == 0, result.output
    article = json.loads(result.output)
    assert article['title'] == 'Quiet Harbor Reopens After Storm'
    assert article['kicker'] == 'Fishermen return to the docks after a week of repairs.'
    assert article['extractor'] is None


def test_parse_with_custom_extractor_file(runner, fake_pages, tmp_path):
    fake_pages[URL] = ARTICLE_HTML
    definition = tmp_path / 'example.json'
    definition.write_text(json.dumps({
        'domain': 'example.com',
        'content': {'selectors': ['div.article-body']},
    }))

    result = runner.invoke(cli, ['parse', URL, '--format', 'text', '--custom-extractor', str(definition)])

    assert result.exit_code == 0, result.output
    article = json.loads(result.output)
    assert article['extractor'] == {'domain': 'example.com', 'name': None}
    assert article['content'].startswith('The harbor reopened on Tuesday morning')


def test_parse_sends_headers(runner, fake_pages, monkeypatch):
    fake_pages[URL] = ARTICLE_HTML
    seen = {}

    import fetch.resource
    fake_download = fetch.resource.download_html

    def recording_download(url, headers=None, use_cache=None):
        seen.update(headers or {})
        return fake_download(url, headers)

    monkeypatch.setattr(fetch.resource, 'download_html', recording_download)

    result = runner.invoke(cli, ['parse', URL, '-H', 'Cookie: consent=yes'])

    assert result.exit_code == 0, result.output
    assert seen == {'Cookie': 'consent=yes'}


def test_parse_invalid_url(runner):
    result = runner.invoke(cli, ['parse', 'not-a-url'])
    assert result.exit_code == 1
    assert 'does not look like a valid URL' in result.output


@pytest.mark.parametrize('args', [['--extend', 'no-selector'], ['--header', 'NoColon']])
def test_parse_rejects_malformed_options(runner, args):
    result = runner.invoke(cli, ['parse', URL] + args)
    assert result.exit_code == 2


def test_extractors_list(runner):
    result = runner.invoke(cli, ['extractors', 'list'])
    assert result.exit_code == 0
    assert 'www.diariolibre.com' in result.output
    assert 'Also: diariolibre.com' in result.output


def test_cache_commands(runner, monkeypatch, tmp_path):
    cache_path = str(tmp_path / 'pages.db')
    monkeypatch.setattr(commands.cache, 'CacheDatabase', lambda: CacheDatabase(cache_path))
    CacheDatabase(cache_path).save_to_cache('https://example.com/a', '<html>A</html>')

    stats = runner.invoke(cli, ['cache', 'stats'])
    assert stats.exit_code == 0
    assert 'Total entries: 1' in stats.output
    assert 'example.com' in stats.output

    listing = runner.invoke(cli, ['cache', 'list'])
    assert 'https://example.com/a' in listing.output

    cleared = runner.invoke(cli, ['cache', 'clear', '--yes'])
    assert 'Cleared 1 entries' in cleared.output
    assert CacheDatabase(cache_path).get_stats()['total_entries'] == 0
