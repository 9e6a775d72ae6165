from __future__ import annotations

import dataclasses
import logging
import sys

from .adapters.filesystem import FileSystemSource
from .cli_common import Context, build_config, parse_common_args
from .core import (
    Highlighter,
    OutputMode,
    SourceAdapter,
    StdoutWriter,
    TraversalConfig,
    Writer,
)
from .errors import ExitStatus, RunReport, TraversalError
from .formatters import make_formatter
from .renderer import render
from .walker import traverse

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def configure_logging(verbosity: int) -> None:
    level = logging.INFO if verbosity <= 0 else logging.DEBUG
    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr)
    logging.getLogger("rcat").setLevel(level)


def run(
    config: TraversalConfig,
    writer: Writer,
    *,
    source: SourceAdapter | None = None,
    highlighter: Highlighter | None = None,
) -> ExitStatus:
    """
    Traverse, render and format in lockstep, one descriptor at a time.

    Fatal traversal errors propagate before anything is written.
    """
    source = source or FileSystemSource()
    if (
        highlighter is None
        and config.color_enabled
        and config.output_mode is OutputMode.CONTENT
    ):
        from .highlight import PygmentsHighlighter

        highlighter = PygmentsHighlighter(config.theme)

    report = RunReport()
    descriptors = traverse(config, source=source, on_error=report.record_traversal_error)
    formatter = make_formatter(config)
    for descriptor in descriptors:
        rendered = render(descriptor, config, source=source, highlighter=highlighter)
        if rendered.skipped:
            report.record_skip(rendered.content.reason)
        formatter.emit(rendered, writer)
    formatter.finish(writer)
    report.summarize()
    return report.exit_status


def main(
    *,
    argv: list[str] | None = None,
    writer: Writer | None = None,
    source: SourceAdapter | None = None,
    highlighter: Highlighter | None = None,
) -> int:
    if argv is None:
        argv = sys.argv[1:]
    ctx: Context = parse_common_args(argv)
    configure_logging(ctx.verbose)
    try:
        config = build_config(ctx)
    except ValueError as e:
        print(f"rcat: {e}", file=sys.stderr)
        return ExitStatus.USAGE

    if writer is None:
        writer = StdoutWriter()
        if not sys.stdout.isatty():
            # Piped or redirected output gets no escape codes.
            config = dataclasses.replace(config, color_enabled=False)
    try:
        return run(config, writer, source=source, highlighter=highlighter)
    except TraversalError as e:
        print(f"rcat: {e}", file=sys.stderr)
        return e.exit_status
    except KeyboardInterrupt:
        print("rcat: interrupted", file=sys.stderr)
        return ExitStatus.INTERRUPTED


def cli() -> None:
    sys.exit(main())


if __name__ == "__main__":
    cli()
