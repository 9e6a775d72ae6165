from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable

from ..core import Entry, NodeKind, SourceAdapter


class FileSystemSource(SourceAdapter):
    def __init__(self, root_cwd: Path | None = None) -> None:
        self._cwd = Path.cwd() if root_cwd is None else Path(root_cwd)

    def resolve_root(self, root_spec: str | Path) -> Path:
        # Absolute but not symlink-resolved, so a symlinked root keeps its name.
        return Path(os.path.abspath(self._cwd / root_spec))

    def list_dir(self, dir_path: Path, *, follow_symlinks: bool = True) -> Iterable[Entry]:
        entries: list[Entry] = []
        with os.scandir(dir_path) as it:
            for e in it:
                try:
                    if e.is_dir(follow_symlinks=follow_symlinks):
                        kind = NodeKind.DIRECTORY
                    elif e.is_file(follow_symlinks=follow_symlinks):
                        kind = NodeKind.FILE
                    else:
                        kind = NodeKind.OTHER
                except OSError:
                    kind = NodeKind.OTHER
                entries.append(
                    Entry(
                        path=Path(e.path),
                        name=e.name,
                        kind=kind,
                    )
                )
        return entries

    def read_file_bytes(self, file_path: Path) -> bytes:
        with open(file_path, "rb") as f:
            return f.read()

    def real_path(self, path: Path) -> Path:
        return Path(os.path.realpath(path))

    def kind_of(self, path: Path) -> NodeKind | None:
        """Kind of an arbitrary path, following symlinks; None if it does not exist."""
        if not os.path.exists(path):
            return None
        if os.path.isdir(path):
            return NodeKind.DIRECTORY
        if os.path.isfile(path):
            return NodeKind.FILE
        return NodeKind.OTHER
