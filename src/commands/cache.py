"""
Inspect and prune the downloaded page cache.
"""

import click

import settings
from db.cache import CacheDatabase

TIME_FORMAT = '%Y-%m-%d %H:%M'
PAGER_THRESHOLD = 20


def _human_size(size_bytes, precision=2):
    for unit, factor in (('MB', 1024 * 1024), ('KB', 1024)):
        if size_bytes >= factor:
            return f"{size_bytes / factor:.{precision}f} {unit}"
    return f"{size_bytes} B"


def _colored_status(status):
    if status < 300:
        color = 'green'
    elif status < 400:
        color = 'yellow'
    else:
        color = 'red'
    return click.style(str(status), fg=color)


def _warn(message):
    click.echo(click.style(message, fg='yellow'))


def _describe(entry, position):
    return (
        f"{click.style(f'{position:>3}.', fg='cyan')} {entry['url']}\n"
        f"     status {_colored_status(entry['status_code'])}"
        f" · {_human_size(entry['content_length'], precision=1)}"
        f" · saved {entry['created_at'].strftime(TIME_FORMAT)}"
    )


@click.group()
def cache():
    """Manage the downloaded page cache."""


@cache.command()
@click.option('--domain', '-d', default=None, help='Restrict the numbers to one domain')
def stats(domain):
    """
    Summarize what the cache holds.

    Example:
        article-parser cache stats
        article-parser cache stats -d www.diariolibre.com
    """
    store = CacheDatabase()
    summary = store.get_stats(domain=domain)
    scope = click.style(domain, bold=True) if domain else 'all domains'
    click.echo(f"Page cache at {settings.CACHE_DB_PATH} ({scope})\n")

    if not summary['total_entries']:
        _warn("Cache is empty")
        if not settings.USE_CACHE:
            click.echo("  Downloads are only cached when ARTICLE_PARSER_USE_CACHE=true")
        return

    click.echo(f"Total entries: {summary['total_entries']}")
    click.echo(f"Total size:    {_human_size(summary['total_size_bytes'])}")
    click.echo(
        f"Saved between: {summary['oldest_entry'].strftime(TIME_FORMAT)}"
        f" and {summary['newest_entry'].strftime(TIME_FORMAT)}"
    )
    if domain:
        return

    by_count = sorted(store.get_domains(), key=lambda row: (-row['count'], row['domain']))
    click.echo(f"\n{len(by_count)} domain(s):")
    for row in by_count:
        click.echo(
            f"  {click.style(row['domain'], fg='cyan')}"
            f"  {row['count']} page(s), {_human_size(row['total_size'])}"
        )


@cache.command('list')
@click.option('--domain', '-d', default=None, help='Restrict the listing to one domain')
@click.option('--limit', '-l', type=int, default=20, show_default=True, help='Maximum entries to show')
@click.option('--no-pager', is_flag=True, help='Print long listings directly')
def list_entries(domain, limit, no_pager):
    """
    Show cached URLs, newest first.

    Redirect entries keep their 30x status.
    """
    entries = CacheDatabase().list_entries(domain=domain, limit=limit)
    if not entries:
        _warn(f"Nothing cached for {domain}" if domain else "Cache is empty")
        return

    listing = '\n'.join(_describe(entry, n) for n, entry in enumerate(entries, 1))
    if no_pager or len(entries) <= PAGER_THRESHOLD:
        click.echo(listing)
    else:
        click.echo_via_pager(listing)


@cache.command()
@click.option('--domain', '-d', default=None, help='Only drop entries of this domain')
@click.option('--yes', '-y', is_flag=True, help='Do not ask for confirmation')
def clear(domain, yes):
    """
    Delete cached pages.

    Example:
        article-parser cache clear -d www.diariolibre.com --yes
    """
    target = f" for domain '{domain}'" if domain else ""
    if not yes:
        click.confirm(f"Delete cached pages{target}?", abort=True)

    count = CacheDatabase().clear_cache(domain=domain)
    if count:
        click.echo(click.style(f"✓ Cleared {count} entries{target}", fg='green'))
    else:
        _warn(f"No entries to clear{target}")
