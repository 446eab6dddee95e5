# coding: utf8

import functools
import logging
import pathlib
from typing import Any, Callable

import click
import coloredlogs  # type: ignore

from . import __version__, filename, models, sources, utils
from .exceptions import HondanaError

click.option: Callable[..., Any] = functools.partial(click.option, show_default=True)  # type: ignore

_log = logging.getLogger("hondana")
VERBOSITY = [
    getattr(logging, level)
    for level in ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")
]

LANG = utils.CONFIG["lang"]


@click.group()
@click.version_option(__version__)
@click.option(
    "-v", "--verbose", "verbosity", help="be more chatty", default=0, count=True
)
def cli(verbosity):
    """Chapter/volume parser for manga archive filenames.

    'hondana parse' works offline. The other commands fetch from a source website
    (see 'hondana list' for the supported ones).
    """
    # set up logger
    coloredlogs.install(
        level=VERBOSITY[min(2 + verbosity, len(VERBOSITY) - 1)],
        fmt=" %(levelname)-8s :: %(message)s",
        logger=_log,
    )


def prettyprint(dict_):

    for key, value in dict_.items():

        # +2 for the ': ' suffix
        indent = len(key) + 2

        if isinstance(value, list):
            value = f"\n{' ' * indent}".join(value)

        click.echo(f"{key}: {value}\n")


def _parser(url):
    try:
        return sources.Parser.by_url(url)
    except HondanaError as e:
        raise click.ClickException(str(e))


def _create(url):
    parser = _parser(url)

    try:
        manga = parser.create(url)
        parser.add_chapters(manga)
    except HondanaError as e:
        raise click.ClickException(str(e))

    return parser, manga


@cli.command()
@click.argument("filenames", nargs=-1, required=True)
@click.option("-t", "--title", required=True, help="title of the series")
@click.option(
    "-e",
    "--exclusions",
    type=pathlib.Path,
    default=None,
    help="exclusion list to use instead of the bundled one (one title per line)",
)
@click.option(
    "-y",
    "--year-threshold",
    type=int,
    default=filename.YEAR_THRESHOLD,
    help="four-digit numbers from this value on are treated as years (0 to disable)",
)
def parse(filenames, title, exclusions, year_threshold):
    """Parse chapter/volume numbers from filenames."""

    if exclusions is not None:
        exclusions = filename.Exclusions.load(exclusions)

    parser = filename.FilenameParser(
        exclusions, year_threshold=year_threshold or None
    )

    for name in filenames:
        info = parser.parse(name, title)

        fields = [
            f"chapter {models.format_number(filename.as_known(info.chapter)) or '?'}",
            f"volume {models.format_number(filename.as_known(info.volume)) or '?'}",
        ]

        if info.chapter_range is not None:
            start, end = (models.format_number(n) for n in info.chapter_range)
            fields.append(f"range {start}-{end}")

        click.echo(f"{name}: {', '.join(fields)}")


@cli.command("list")
def _list():
    """List supported websites."""

    prettyprint(
        {
            "supported websites": [
                cls.domain.pattern for cls in sources.Parser.registered
            ]
        }
    )


@cli.command()
@click.argument("url")
@click.option("-q", "--query", default="", help="title to search for")
def search(url, query):
    """Search a website for manga (recently updated if no query is given)."""

    parser = _parser(url)

    if not hasattr(parser, "search"):
        raise click.ClickException(f"{parser.domain.pattern} does not support search")

    try:
        results = parser.search(query)
    except HondanaError as e:
        raise click.ClickException(str(e))

    if not results:
        click.echo("(none)")

    for meta in results:
        click.echo(f"{meta.title} ({meta.url})")


@cli.command()
@click.argument("url")
def info(url):
    """Show info on a manga."""

    _, manga = _create(url)

    prettyprint(
        {
            "title": manga.meta.title,
            "url": manga.meta.url,
            "authors": manga.meta.authors,
            "genres": manga.meta.genres,
            "completed": manga.meta.completed,
        }
    )

    click.echo(manga.summary(LANG))

    summary = manga.info

    click.echo(
        "\nsummary: "
        f"{utils.plural(len(summary['volumes']), 'volume')}, "
        f"{utils.plural(summary['chapters'], 'chapter')}"
    )


@cli.command()
@click.argument("url")
@click.argument("cids")
def pages(url, cids):
    """Show page urls for chapters of a manga.

    CIDS are chapter ids seperated by ',', ranges are also allowed (i.e '1-5,10').
    """

    parser, manga = _create(url)

    chapters = manga.select(cids, lang=LANG)
    if not chapters:
        raise click.ClickException(f"no chapters found for '{cids}'")

    for chapter in chapters:
        click.echo(f"chapter {chapter.id}:")

        try:
            parser.add_pages(chapter)
        except HondanaError as e:
            raise click.ClickException(str(e))

        for page in chapter.pages:
            click.echo(f"  {page}")


def main():
    cli()
