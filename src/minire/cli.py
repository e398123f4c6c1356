"""Command-line wrapper: ``echo TEXT | minire -E PATTERN``.

Exit status is 0 when the pattern matches the line read from stdin and 1
otherwise, including usage and pattern errors.
"""

import sys
from typing import List, Optional

import click
from loguru import logger

from . import __version__
from .errors import BacktrackLimitError, ParseError
from .regex import compile

EXIT_MATCH = 0
EXIT_NO_MATCH = 1


def _enable_logging() -> None:
    logger.remove()
    logger.add(sys.stderr, level="DEBUG",
               format="<level>{level: <8}</level> {name}:{function} - {message}")
    logger.enable("minire")


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.option("-E", "pattern", required=True, metavar="PATTERN",
              help="Extended regular expression to search for.")
@click.option("--max-steps", type=click.IntRange(min=1), default=None, metavar="N",
              help="Give up with an error after N backtracking steps.")
@click.option("-v", "--verbose", is_flag=True, help="Log compilation and matching to stderr.")
@click.version_option(__version__, prog_name="minire")
@click.pass_context
def cli(ctx: click.Context, pattern: str, max_steps: Optional[int], verbose: bool) -> None:
    """Match one line of standard input against PATTERN."""
    if verbose:
        _enable_logging()

    try:
        compiled = compile(pattern, step_limit=max_steps)
    except ParseError as e:
        click.echo(f"error: {e}", err=True)
        ctx.exit(EXIT_NO_MATCH)

    line = click.get_text_stream("stdin").readline()
    text = line.rstrip("\r\n")

    try:
        matched = compiled.is_match(text)
    except BacktrackLimitError as e:
        click.echo(f"error: {e}", err=True)
        ctx.exit(EXIT_NO_MATCH)

    logger.debug("{!r} {} {!r}", pattern, "matches" if matched else "does not match", text)
    ctx.exit(EXIT_MATCH if matched else EXIT_NO_MATCH)


def main(argv: Optional[List[str]] = None) -> int:
    """Run the CLI and return its exit status instead of exiting."""
    try:
        result = cli.main(args=argv, prog_name="minire", standalone_mode=False)
    except click.ClickException as e:
        e.show()
        return EXIT_NO_MATCH
    except click.Abort:
        return EXIT_NO_MATCH
    return result if isinstance(result, int) else EXIT_MATCH


def run() -> None:
    sys.exit(main())
