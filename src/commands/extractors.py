"""
Extractor registry commands.
"""

import click

from extractors import extractor_registry


@click.group()
def extractors():
    """Inspect site extractors."""
    pass


@extractors.command('list')
def list_extractors():
    """
    List built-in extractors and the domains they answer for.

    Example:
        article-parser extractors list
    """
    built_in = extractor_registry.built_in
    if not built_in:
        click.echo(click.style("No extractors registered", fg="yellow"))
        return

    # One line per definition, not per registered domain
    seen = []
    for definition in built_in.values():
        if definition not in seen:
            seen.append(definition)

    click.echo(f"Built-in extractors ({len(seen)} total):\n")
    for definition in seen:
        click.echo(f"  {click.style(definition.domain, fg='cyan', bold=True)}"
                   + (f"  ({definition.name})" if definition.name else ""))
        if definition.supported_domains:
            click.echo(f"    Also: {', '.join(definition.supported_domains)}")
        if definition.included_paths:
            click.echo(f"    Paths: {', '.join(definition.included_paths)}")
