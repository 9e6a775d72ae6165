from __future__ import annotations

import re
from functools import lru_cache
from pathlib import Path
from typing import Iterable

from typeguard import typechecked
from typing_extensions import TypeIs

from .core import FileDescriptor, TraversalConfig
from .defaults import DEFAULT_EXCLUSIONS
from .types import TExclusion, TExtension, TGlob, _is_extension, _is_glob


@typechecked
def is_glob(pattern) -> TypeIs[TGlob]:
    return _is_glob(pattern)


@typechecked
def is_extension(name: str) -> TypeIs[TExtension]:
    return _is_extension(name)


@typechecked
def extension_of(name: str) -> str:
    """Lower-cased text after the last dot. Dotfiles like `.bashrc` have no extension."""
    stem, dot, ext = name.rpartition(".")
    if not dot or not stem:
        return ""
    return ext.lower()


@typechecked
def normalize_extensions(values: Iterable[str] | None) -> frozenset[str] | None:
    """
    Flatten repeatable and comma-separated extension arguments.

    `[".RS", "py,toml"]` becomes `{"rs", "py", "toml"}`. Returns None when nothing
    was given, which disables extension filtering.
    """
    if not values:
        return None
    extensions = set()
    for value in values:
        for part in value.split(","):
            part = part.strip().removeprefix(".").lower()
            if not part:
                continue
            if not is_extension(part):
                msg = f"Invalid extension: {part!r}"
                raise ValueError(msg)
            extensions.add(part)
    return frozenset(extensions) or None


@lru_cache(maxsize=256)
def _compile(pattern: str) -> re.Pattern[str]:
    parts = (re.escape(chunk) for chunk in pattern.split("*"))
    return re.compile(".*".join(parts), re.DOTALL)


def _matches(text: str, pattern: TExclusion) -> bool:
    if is_glob(pattern):
        return _compile(pattern).fullmatch(text) is not None
    return text == pattern


@typechecked
def is_excluded(relative_path: str, exclusions: Iterable[str]) -> bool:
    """
    True when any exclusion matches `relative_path` (POSIX separators).

    Patterns without '/' are checked against each path component, so excluding a
    directory name excludes everything beneath it. Patterns containing '/' are
    checked against the whole relative path.
    """
    components = [c for c in relative_path.split("/") if c]
    for pattern in exclusions:
        pattern = pattern.strip("/")
        if not pattern:
            continue
        if "/" in pattern:
            if _matches("/".join(components), pattern):
                return True
        elif any(_matches(component, pattern) for component in components):
            return True
    return False


def _depth_permits(descriptor: FileDescriptor, config: TraversalConfig) -> bool:
    return config.max_depth is None or descriptor.depth <= config.max_depth


def _extension_permits(descriptor: FileDescriptor, config: TraversalConfig) -> bool:
    if descriptor.is_directory or config.extension_filter is None:
        return True
    return descriptor.extension in config.extension_filter


@typechecked
def accepts(descriptor: FileDescriptor, config: TraversalConfig) -> bool:
    return (
        _depth_permits(descriptor, config)
        and _extension_permits(descriptor, config)
        and not is_excluded(descriptor.relative_path, config.exclusions)
    )


@typechecked
def prunes(descriptor: FileDescriptor, config: TraversalConfig) -> bool:
    """Whether a directory must not be opened at all. Extension filtering never prunes."""
    return not _depth_permits(descriptor, config) or is_excluded(
        descriptor.relative_path, config.exclusions
    )


@typechecked
def read_exclude_file(exclude_path: Path) -> list[TExclusion]:
    """Read a gitignore-like file and return list of exclusion patterns."""
    exclusions = []
    try:
        with exclude_path.open("r", encoding="utf-8") as f:
            for line in f:
                stripped = line.strip()
                if stripped and not stripped.startswith("#"):
                    exclusions.append(stripped.rstrip("/"))
    except (FileNotFoundError, IsADirectoryError, UnicodeDecodeError, PermissionError):
        pass
    return exclusions


@typechecked
def resolve_exclusions(
    *,
    no_exclude: bool,
    custom_excludes: list[str],
    exclude_files: list[Path],
) -> tuple[TExclusion, ...]:
    """Resolve final exclusion list based on command line arguments."""
    exclusions: list[str] = [] if no_exclude else list(DEFAULT_EXCLUSIONS)
    exclusions.extend(custom_excludes)
    for exclude_file in exclude_files:
        exclusions.extend(read_exclude_file(exclude_file))
    # Preserve order, drop duplicates
    return tuple(dict.fromkeys(exclusions))
