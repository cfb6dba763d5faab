"""
Parse command: extract one article and print it as JSON.
"""

import asyncio
import json

import click

from article_parser import parse as parse_article
from extractors import ExtractorDefinition


def _parse_headers(values):
    headers = {}
    for value in values:
        if ':' not in value:
            raise click.BadParameter(f"'{value}' is not in KEY:VALUE form", param_hint='--header')
        key, _, header_value = value.partition(':')
        headers[key.strip()] = header_value.strip()
    return headers


def _parse_extend(values):
    extend = {}
    for value in values:
        name, sep, selector = value.partition('=')
        if not sep or not name.strip() or not selector.strip():
            raise click.BadParameter(f"'{value}' is not in NAME=SELECTOR form", param_hint='--extend')
        extend[name.strip()] = [selector.strip()]
    return extend


def _to_json(value):
    if isinstance(value, ExtractorDefinition):
        return {'domain': value.domain, 'name': value.name}
    return str(value)


@click.command()
@click.argument('url')
@click.option('--format', 'content_type', type=click.Choice(['html', 'markdown', 'text']), default='html',
              help='Format of the returned content (default: html)')
@click.option('--no-fetch-all', is_flag=True, default=False, help='Only parse the first page of the article')
@click.option('--no-fallback', is_flag=True, default=False,
              help="Don't use the generic extractor for fields the site extractor misses")
@click.option('--header', '-H', 'headers', multiple=True, help='Extra request header as KEY:VALUE (repeatable)')
@click.option('--extend', '-e', 'extend', multiple=True,
              help='Extra field as NAME=SELECTOR, read as text (repeatable)')
@click.option('--custom-extractor', type=click.Path(exists=True, dir_okay=False),
              help='JSON file with an extractor definition to register before parsing')
def parse(url, content_type, no_fetch_all, no_fallback, headers, extend, custom_extractor):
    """
    Extract an article and print it as JSON.

    Example:
        article-parser parse https://www.diariolibre.com/actualidad/...
        article-parser parse URL --format markdown --no-fetch-all
        article-parser parse URL --extend tags="ul.tags li"
    """
    definition = None
    if custom_extractor:
        with open(custom_extractor, encoding='utf-8') as f:
            try:
                definition = ExtractorDefinition.from_dict(json.load(f))
            except (json.JSONDecodeError, TypeError, ValueError) as e:
                raise click.BadParameter(str(e), param_hint='--custom-extractor')

    result = asyncio.run(parse_article(
        url,
        fetch_all_pages=not no_fetch_all,
        fallback=not no_fallback,
        content_type=content_type,
        headers=_parse_headers(headers),
        extend=_parse_extend(extend),
        custom_extractor=definition,
    ))

    click.echo(json.dumps(result, ensure_ascii=False, indent=2, default=_to_json))

    if result.get('error'):
        click.echo(click.style(f"✗ {result['message']}", fg="red"), err=True)
        raise SystemExit(1)
