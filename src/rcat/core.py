from __future__ import annotations

import sys
from dataclasses import dataclass
from enum import Enum, auto
from pathlib import Path
from typing import Iterable, Protocol, Union

from .defaults import DEFAULT_EXCLUSIONS, DEFAULT_THEME


class NodeKind(Enum):
    DIRECTORY = auto()
    FILE = auto()
    OTHER = auto()


@dataclass(frozen=True)
class Entry:
    path: Path
    name: str
    kind: NodeKind


class OutputMode(Enum):
    CONTENT = "content"
    LIST = "list"
    JSON = "json"


@dataclass(frozen=True)
class TraversalConfig:
    """
    Immutable description of one run.

    `extension_filter` holds lower-case extensions without the leading dot; `None`
    disables extension filtering. `max_depth` of `None` means unbounded.
    """

    root_path: Path
    max_depth: int | None = None
    extension_filter: frozenset[str] | None = None
    exclusions: tuple[str, ...] = DEFAULT_EXCLUSIONS
    color_enabled: bool = True
    output_mode: OutputMode = OutputMode.CONTENT
    include_directories: bool = False
    follow_symlinks: bool = True
    theme: str = DEFAULT_THEME

    def __post_init__(self) -> None:
        if self.max_depth is not None and self.max_depth < 0:
            msg = f"max_depth must be non-negative, got {self.max_depth}"
            raise ValueError(msg)
        if not all(isinstance(e, str) for e in self.extension_filter or ()):
            msg = f"extension_filter must contain strings: {self.extension_filter!r}"
            raise TypeError(msg)
        if not all(isinstance(e, str) for e in self.exclusions):
            msg = f"exclusions must contain strings: {self.exclusions!r}"
            raise TypeError(msg)


@dataclass(frozen=True)
class FileDescriptor:
    absolute_path: Path
    relative_path: str
    depth: int
    is_directory: bool = False

    @property
    def name(self) -> str:
        return self.absolute_path.name

    @property
    def extension(self) -> str:
        from .filters import extension_of

        return extension_of(self.name)


@dataclass(frozen=True)
class Highlighted:
    styled: str
    plain: str


@dataclass(frozen=True)
class Raw:
    text: str


@dataclass(frozen=True)
class Skipped:
    reason: str


RenderedContent = Union[Highlighted, Raw, Skipped]


@dataclass(frozen=True)
class RenderedFile:
    descriptor: FileDescriptor
    content: RenderedContent

    @property
    def skipped(self) -> bool:
        return isinstance(self.content, Skipped)


class Writer(Protocol):
    def write(self, text: str) -> None: ...


class SourceAdapter(Protocol):
    def resolve_root(self, root_spec: str | Path) -> Path: ...
    def list_dir(self, dir_path: Path, *, follow_symlinks: bool = True) -> Iterable[Entry]: ...
    def read_file_bytes(self, file_path: Path) -> bytes: ...
    def real_path(self, path: Path) -> Path: ...
    def kind_of(self, path: Path) -> NodeKind | None: ...


def decode_text(blob: bytes) -> str:
    try:
        return blob.decode("utf-8")
    except UnicodeDecodeError:
        return blob.decode("latin-1")


class Highlighter(Protocol):
    def __call__(self, data: bytes, filename_hint: str) -> str: ...


class StdoutWriter(Writer):
    def write(self, text: str) -> None:
        sys.stdout.write(text)


class StringWriter(Writer):
    """
    Collects written text into an internal buffer for tests and callers.

    Provides a lightweight Writer implementation that accumulates text and
    exposes it via the `text()` accessor.
    """

    def __init__(self) -> None:
        self._parts: list[str] = []

    def write(self, text: str) -> None:  # Writer protocol
        self._parts.append(text)

    def text(self) -> str:
        return "".join(self._parts)
