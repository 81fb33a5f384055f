"""bgztail - print the decompressed tail of a BGZF file."""
from __future__ import annotations

from pathlib import Path

import click

from .config import DEFAULT_TAIL_LINES, TailConfig, Verbosity, parse_tail_lines
from .engine import tail_file
from .errors import ConfigurationError, TailError
from .report import fatal


def _parse_lines(ctx, param, value):
    try:
        return parse_tail_lines(value)
    except ConfigurationError as e:
        raise click.BadParameter(e.detail) from None


@click.command()
@click.argument("path", type=click.Path(dir_okay=False, path_type=Path))
@click.option(
    "-n",
    "--lines",
    default=str(DEFAULT_TAIL_LINES),
    show_default=True,
    callback=_parse_lines,
    help="Output the last N lines; 'all' for everything",
)
@click.option("-f", "--follow", is_flag=True, help="Keep waiting for appended blocks")
@click.option("-s", "--suppress-incomplete", is_flag=True, help="Only show blocks once fully written")
@click.option(
    "--color",
    type=click.Choice(["auto", "on", "off"]),
    default="auto",
    show_default=True,
    help="Colour diagnostics on stderr",
)
@click.option("-q", "--quiet", is_flag=True, help="Print no diagnostics")
@click.option("-v", "--verbose", is_flag=True, help="Also print progress notes")
@click.version_option(package_name="bgztail")
def main(
    path: Path,
    lines: int | None,
    follow: bool,
    suppress_incomplete: bool,
    color: str,
    quiet: bool,
    verbose: bool,
) -> None:
    """Print the decompressed tail of the BGZF file PATH."""
    if quiet and verbose:
        raise click.UsageError("--quiet and --verbose are mutually exclusive")

    if quiet:
        verbosity = Verbosity.SILENT
    elif verbose:
        verbosity = Verbosity.VERBOSE
    else:
        verbosity = Verbosity.ERRORS

    try:
        config = TailConfig(
            follow=follow,
            tail_lines=lines,
            suppress_incomplete_blocks=suppress_incomplete,
            color=color == "on" or (color == "auto" and click.get_text_stream("stderr").isatty()),
            verbosity=verbosity,
        )
    except ConfigurationError as e:
        raise click.UsageError(str(e)) from None

    try:
        tail_file(path, config, click.get_binary_stream("stdout"))
    except TailError as e:
        # Fail closed with a single-line reason, no stack trace.
        fatal(config, e)
        raise SystemExit(e.exit_code)
    except KeyboardInterrupt:
        raise SystemExit(130)


if __name__ == "__main__":
    main()
