from __future__ import annotations

import argparse
import os
import textwrap
from dataclasses import dataclass, field
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

from typeguard import typechecked

from rcat.core import OutputMode, TraversalConfig
from rcat.defaults import (
    DEFAULT_DEPTH,
    DEFAULT_EXCLUDE_FILTER,
    DEFAULT_EXCLUDE_FROM,
    DEFAULT_EXCLUSIONS,
    DEFAULT_EXTENSIONS_FILTER,
    DEFAULT_INCLUDE_DIRECTORIES,
    DEFAULT_JSON,
    DEFAULT_LIST,
    DEFAULT_NO_COLOR,
    DEFAULT_NO_EXCLUDE,
    DEFAULT_NO_FOLLOW,
    DEFAULT_RUN_PATH,
    DEFAULT_RUN_PATH_ENV,
    DEFAULT_THEME,
    DEFAULT_VERBOSITY,
)
from rcat.filters import normalize_extensions, resolve_exclusions
from rcat.types import describe_exclusion


@dataclass(slots=True)
class Context:
    path: str = DEFAULT_RUN_PATH
    depth: int | None = DEFAULT_DEPTH
    extension: list[str] = field(default_factory=lambda: list(DEFAULT_EXTENSIONS_FILTER))
    exclude: list[str] = field(default_factory=lambda: list(DEFAULT_EXCLUDE_FILTER))
    exclude_from: list[str] = field(default_factory=lambda: list(DEFAULT_EXCLUDE_FROM))
    no_exclude: bool = DEFAULT_NO_EXCLUDE
    no_color: bool = DEFAULT_NO_COLOR
    list_mode: bool = DEFAULT_LIST
    json_mode: bool = DEFAULT_JSON
    dirs: bool = DEFAULT_INCLUDE_DIRECTORIES
    no_follow: bool = DEFAULT_NO_FOLLOW
    theme: str = DEFAULT_THEME
    verbose: int = DEFAULT_VERBOSITY


def _non_negative_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        msg = f"invalid int value: {value!r}"
        raise argparse.ArgumentTypeError(msg) from None
    if number < 0:
        msg = f"must be a non-negative integer, got {number}"
        raise argparse.ArgumentTypeError(msg)
    return number


def _package_version() -> str:
    try:
        return version("rcat")
    except PackageNotFoundError:
        return "unknown"


def parse_common_args(argv: list[str] | None = None) -> Context:
    epilog = textwrap.dedent(
        """
        DEPTH
        Entries directly inside PATH are at depth 0, so --depth 0 prints only those.

        NOTE ABOUT EXCLUSIONS
        A pattern without '/' is compared with every component of an entry's path, so excluding a directory name skips its whole subtree without opening it.
        A pattern with '/' is compared with the whole path relative to PATH.
        '*' matches any run of characters; no other wildcard is recognized.
        """
    )

    parser = argparse.ArgumentParser(
        prog="rcat",
        description="Recursively prints the contents of files under a path, syntax highlighted",
        add_help=True,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=epilog,
    )

    parser.add_argument(
        "path",
        type=str,
        nargs="?",
        help=f"File or directory to print. Defaults to ${DEFAULT_RUN_PATH_ENV}, or the current directory.",
        default=os.environ.get(DEFAULT_RUN_PATH_ENV) or DEFAULT_RUN_PATH,
    )
    parser.add_argument(
        "--depth",
        type=_non_negative_int,
        default=DEFAULT_DEPTH,
        help="Maximum recursion depth. Unbounded by default.",
    )
    parser.add_argument(
        "-e",
        "--ext",
        type=str,
        dest="extension",
        default=DEFAULT_EXTENSIONS_FILTER,
        action="append",
        help="Only include files with the given extension, case-insensitive (repeatable or comma-separated).",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable syntax highlighting. Also disabled when NO_COLOR is set.",
        default=DEFAULT_NO_COLOR,
    )

    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "-l",
        "--list",
        action="store_true",
        help="List file paths without reading their contents.",
        default=DEFAULT_LIST,
    )
    mode.add_argument(
        "--json",
        action="store_true",
        help="Print a single JSON array describing every selected file.",
        default=DEFAULT_JSON,
    )

    parser.add_argument(
        "-E",
        "--exclude",
        type=str,
        help="Exclude files or directories by name, relative path, or '*' pattern (repeatable). By default, excludes "
        + ", ".join(map(describe_exclusion, DEFAULT_EXCLUSIONS))
        + ".",
        default=DEFAULT_EXCLUDE_FILTER,
        action="append",
    )
    parser.add_argument(
        "--exclude-from",
        type=str,
        metavar="FILE",
        help="Read exclusion patterns from a gitignore-like file (repeatable).",
        default=DEFAULT_EXCLUDE_FROM,
        action="append",
    )
    parser.add_argument(
        "--no-exclude",
        action="store_true",
        help="Drop the default exclusions. Patterns from --exclude and --exclude-from still apply.",
        default=DEFAULT_NO_EXCLUDE,
    )
    parser.add_argument(
        "-d",
        "--dirs",
        action="store_true",
        help="Also print directory entries.",
        default=DEFAULT_INCLUDE_DIRECTORIES,
    )
    parser.add_argument(
        "--no-follow",
        action="store_true",
        help="Do not follow symbolic links.",
        default=DEFAULT_NO_FOLLOW,
    )
    parser.add_argument(
        "--theme",
        type=str,
        default=DEFAULT_THEME,
        help=f"Pygments style used for highlighting. Defaults to {DEFAULT_THEME!r}.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=DEFAULT_VERBOSITY,
        help="Increase log verbosity (repeatable).",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {_package_version()}")

    args = parser.parse_args(argv)
    return Context(
        path=args.path,
        depth=args.depth,
        extension=list(args.extension or []),
        exclude=list(args.exclude or []),
        exclude_from=list(args.exclude_from or []),
        no_exclude=bool(args.no_exclude),
        no_color=bool(args.no_color),
        list_mode=bool(args.list),
        json_mode=bool(args.json),
        dirs=bool(args.dirs),
        no_follow=bool(args.no_follow),
        theme=args.theme,
        verbose=int(args.verbose),
    )


@typechecked
def build_config(ctx: Context) -> TraversalConfig:
    if ctx.list_mode and ctx.json_mode:
        msg = "--list and --json are mutually exclusive"
        raise ValueError(msg)
    if ctx.list_mode:
        output_mode = OutputMode.LIST
    elif ctx.json_mode:
        output_mode = OutputMode.JSON
    else:
        output_mode = OutputMode.CONTENT
    exclusions = resolve_exclusions(
        no_exclude=ctx.no_exclude,
        custom_excludes=ctx.exclude,
        exclude_files=[Path(p) for p in ctx.exclude_from],
    )
    return TraversalConfig(
        root_path=Path(ctx.path),
        max_depth=ctx.depth,
        extension_filter=normalize_extensions(ctx.extension),
        exclusions=exclusions,
        color_enabled=not ctx.no_color and not os.environ.get("NO_COLOR"),
        output_mode=output_mode,
        include_directories=ctx.dirs,
        follow_symlinks=not ctx.no_follow,
        theme=ctx.theme,
    )
