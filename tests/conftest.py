from __future__ import annotations

from pathlib import Path
from typing import Iterable, Iterator

import pytest

from rcat.adapters.filesystem import FileSystemSource
from rcat.errors import UnsupportedSyntax
from rcat.filters import extension_of


@pytest.fixture(autouse=True)
def _clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Color and default-path environment variables would otherwise leak into every test."""
    monkeypatch.delenv("NO_COLOR", raising=False)
    monkeypatch.delenv("DNAME", raising=False)


class RecordingSource(FileSystemSource):
    """
    Filesystem source that records every directory listed and file read.

    Directory and file names given in `unreadable_dirs` / `unreadable_files` raise
    PermissionError, which works regardless of the user running the tests.
    """

    def __init__(
        self,
        root_cwd: Path | None = None,
        *,
        unreadable_dirs: Iterable[str] = (),
        unreadable_files: Iterable[str] = (),
    ) -> None:
        super().__init__(root_cwd)
        self.unreadable_dirs = set(unreadable_dirs)
        self.unreadable_files = set(unreadable_files)
        self.listed: list[Path] = []
        self.read: list[Path] = []

    def list_dir(self, dir_path: Path, *, follow_symlinks: bool = True):
        self.listed.append(Path(dir_path))
        if Path(dir_path).name in self.unreadable_dirs:
            raise PermissionError(13, "Permission denied", str(dir_path))
        return super().list_dir(dir_path, follow_symlinks=follow_symlinks)

    def read_file_bytes(self, file_path: Path) -> bytes:
        self.read.append(Path(file_path))
        if Path(file_path).name in self.unreadable_files:
            raise PermissionError(13, "Permission denied", str(file_path))
        return super().read_file_bytes(file_path)


class FakeHighlighter:
    """Wraps text in a green escape for the given extensions; anything else is unsupported."""

    def __init__(self, supported: Iterable[str] = ("py", "rs")) -> None:
        self.supported = set(supported)
        self.calls: list[str] = []

    def __call__(self, data: bytes, filename_hint: str) -> str:
        self.calls.append(filename_hint)
        if extension_of(filename_hint) not in self.supported:
            raise UnsupportedSyntax(filename_hint)
        return "\x1b[32m" + data.decode("utf-8") + "\x1b[0m"


@pytest.fixture
def recording_source() -> RecordingSource:
    return RecordingSource()


@pytest.fixture
def fake_highlighter() -> FakeHighlighter:
    return FakeHighlighter()


@pytest.fixture
def sample_tree(tmp_path: Path) -> Iterator[Path]:
    """
    A small project tree:

        root/
          README.md
          a.rs
          b.py
          .git/config
          sub/c.rs
          sub/deeper/d.py
          target/debug/out.rs
    """
    base = tmp_path / "root"
    (base / "sub" / "deeper").mkdir(parents=True)
    (base / ".git").mkdir()
    (base / "target" / "debug").mkdir(parents=True)

    (base / "README.md").write_text("# Title\n", encoding="utf-8")
    (base / "a.rs").write_text("fn main() {}\n", encoding="utf-8")
    (base / "b.py").write_text("print('b')\n", encoding="utf-8")
    (base / ".git" / "config").write_text("[core]\n", encoding="utf-8")
    (base / "sub" / "c.rs").write_text("fn c() {}\n", encoding="utf-8")
    (base / "sub" / "deeper" / "d.py").write_text("print('d')\n", encoding="utf-8")
    (base / "target" / "debug" / "out.rs").write_text("// generated\n", encoding="utf-8")

    yield base
