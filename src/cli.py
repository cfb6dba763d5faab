#!/usr/bin/env python3
"""
CLI for the article parser.
"""

import click
from importlib.metadata import version

import settings
from commands import cache, extractors, parse


@click.group()
@click.version_option(version=version("article-parser"))
@click.option('--log-level', default=None, help='Logging level (default: LOG_LEVEL setting)')
def cli(log_level):
    """Article Parser CLI - Extract structured articles from web pages."""
    settings.setup_logging(log_level)


# Register commands
cli.add_command(parse.parse)
cli.add_command(cache.cache)
cli.add_command(extractors.extractors)


if __name__ == "__main__":
    cli()
