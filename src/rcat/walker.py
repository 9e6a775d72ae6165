from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Iterator

from .adapters.filesystem import FileSystemSource
from .core import Entry, FileDescriptor, NodeKind, SourceAdapter, TraversalConfig
from .errors import ModeConflict, NotFound, TraversalError, Unreadable
from .filters import accepts, is_excluded, prunes

logger = logging.getLogger(__name__)

ErrorHandler = Callable[[TraversalError], None]


def _log_error(error: TraversalError) -> None:
    logger.warning("%s", error)


class DepthFirstWalker:
    """
    Lazily walks one root, yielding descriptors in lexicographic pre-order.

    The visited set holds symlink-resolved paths and lives as long as the walker,
    so a walker is single-use; `traverse` builds a fresh one per call.
    """

    def __init__(
        self,
        source: SourceAdapter,
        config: TraversalConfig,
        *,
        on_error: ErrorHandler | None = None,
    ) -> None:
        self.source = source
        self.config = config
        self.on_error = on_error or _log_error
        self._visited: set[Path] = set()

    def walk(self, root: Path) -> Iterator[FileDescriptor]:
        self._visited.add(self.source.real_path(root))
        stack: list[tuple[Entry, str, int]] = []
        self._push_children(stack, root, prefix="", depth=0)
        while stack:
            entry, relative, depth = stack.pop()
            descriptor = FileDescriptor(
                absolute_path=entry.path,
                relative_path=relative,
                depth=depth,
                is_directory=entry.kind is NodeKind.DIRECTORY,
            )
            if entry.kind is NodeKind.DIRECTORY:
                yield from self._visit_directory(stack, descriptor)
            elif entry.kind is NodeKind.FILE:
                yield from self._visit_file(descriptor)
            else:
                logger.info("Skipping: %s", relative)

    def _visit_directory(
        self, stack: list[tuple[Entry, str, int]], descriptor: FileDescriptor
    ) -> Iterator[FileDescriptor]:
        if prunes(descriptor, self.config):
            logger.info("Skipping: %s", descriptor.relative_path)
            return
        if not self._first_visit(descriptor):
            return
        if self.config.include_directories:
            yield descriptor
        max_depth = self.config.max_depth
        if max_depth is not None and descriptor.depth >= max_depth:
            logger.info("Skipping: %s", descriptor.relative_path)
            return
        self._push_children(
            stack,
            descriptor.absolute_path,
            prefix=descriptor.relative_path + "/",
            depth=descriptor.depth + 1,
        )

    def _visit_file(self, descriptor: FileDescriptor) -> Iterator[FileDescriptor]:
        if not accepts(descriptor, self.config):
            if is_excluded(descriptor.relative_path, self.config.exclusions):
                logger.info("Skipping: %s", descriptor.relative_path)
            else:
                logger.debug("Filtered out: %s", descriptor.relative_path)
            return
        if self._first_visit(descriptor):
            logger.debug("file found %s", descriptor.relative_path)
            yield descriptor

    def _first_visit(self, descriptor: FileDescriptor) -> bool:
        real = self.source.real_path(descriptor.absolute_path)
        if real in self._visited:
            logger.debug("Already visited %s (%s)", descriptor.relative_path, real)
            return False
        self._visited.add(real)
        return True

    def _push_children(
        self, stack: list[tuple[Entry, str, int]], dir_path: Path, *, prefix: str, depth: int
    ) -> None:
        try:
            entries = list(
                self.source.list_dir(dir_path, follow_symlinks=self.config.follow_symlinks)
            )
        except OSError as e:
            self.on_error(Unreadable(dir_path, e.strerror or str(e)))
            return
        entries.sort(key=lambda e: e.name)
        for entry in reversed(entries):  # reversed for stack DFS order
            stack.append((entry, prefix + entry.name, depth))


def traverse(
    config: TraversalConfig,
    *,
    source: SourceAdapter | None = None,
    on_error: ErrorHandler | None = None,
) -> Iterator[FileDescriptor]:
    """
    Return a lazy, finite sequence of descriptors selected under `config.root_path`.

    The root is checked eagerly: a missing root raises NotFound and a root that is
    neither a file nor a directory raises ModeConflict, both before anything is
    yielded. Unreadable subdirectories are passed to `on_error` (logged when it is
    None) and the walk carries on with their siblings.
    """
    source = source or FileSystemSource()
    root = source.resolve_root(config.root_path)
    kind = source.kind_of(root)
    if kind is None:
        raise NotFound(config.root_path)
    if kind is NodeKind.OTHER:
        raise ModeConflict(config.root_path)
    if kind is NodeKind.FILE:
        # Directory-only options do not apply to an explicit file.
        return iter([FileDescriptor(absolute_path=root, relative_path=root.name, depth=0)])
    return DepthFirstWalker(source, config, on_error=on_error).walk(root)
