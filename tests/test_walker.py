from __future__ import annotations

import os
from pathlib import Path

import pytest
from conftest import RecordingSource
from utils import write_text_file

from rcat.core import TraversalConfig
from rcat.errors import ModeConflict, NotFound, Unreadable
from rcat.walker import traverse


def _paths(config: TraversalConfig, **kwargs) -> list[str]:
    return [d.relative_path for d in traverse(config, **kwargs)]


def _deep_tree(base: Path) -> Path:
    write_text_file(base / "top.txt", "0\n")
    write_text_file(base / "a" / "one.txt", "1\n")
    write_text_file(base / "a" / "b" / "two.txt", "2\n")
    write_text_file(base / "a" / "b" / "c" / "three.txt", "3\n")
    return base


needs_symlinks = pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unsupported")


def test_default_walk_is_lexicographic_and_excludes_defaults(sample_tree: Path):
    assert _paths(TraversalConfig(sample_tree)) == [
        "README.md",
        "a.rs",
        "b.py",
        "sub/c.rs",
        "sub/deeper/d.py",
    ]


def test_root_children_are_depth_zero(sample_tree: Path):
    depths = {d.relative_path: d.depth for d in traverse(TraversalConfig(sample_tree))}
    assert depths["a.rs"] == 0
    assert depths["sub/c.rs"] == 1
    assert depths["sub/deeper/d.py"] == 2


@pytest.mark.parametrize("max_depth", [0, 1, 2, 3])
def test_no_descriptor_exceeds_max_depth(tmp_path: Path, max_depth: int):
    root = _deep_tree(tmp_path)
    config = TraversalConfig(root, max_depth=max_depth, include_directories=True)
    descriptors = list(traverse(config))
    assert descriptors
    assert all(d.depth <= max_depth for d in descriptors)
    assert max(d.depth for d in descriptors) == max_depth


def test_depth_zero_yields_only_direct_children(tmp_path: Path):
    root = _deep_tree(tmp_path)
    source = RecordingSource()
    config = TraversalConfig(root, max_depth=0, include_directories=True)
    assert _paths(config, source=source) == ["a", "top.txt"]
    # Children at the depth limit are never opened.
    assert source.listed == [root]


def test_extension_filter_applies_to_files_only(sample_tree: Path):
    config = TraversalConfig(
        sample_tree, extension_filter=frozenset({"rs"}), include_directories=True
    )
    descriptors = list(traverse(config))
    files = [d for d in descriptors if not d.is_directory]
    assert [d.relative_path for d in files] == ["a.rs", "sub/c.rs"]
    assert all(d.extension == "rs" for d in files)
    assert [d.relative_path for d in descriptors if d.is_directory] == ["sub", "sub/deeper"]


def test_excluded_directory_is_never_opened(sample_tree: Path):
    write_text_file(sample_tree / "web" / "node_modules" / "pkg" / "index.js", "x\n")
    source = RecordingSource()
    config = TraversalConfig(sample_tree, exclusions=("node_modules", "target", ".git"))
    paths = _paths(config, source=source)
    assert not [p for p in paths if "node_modules" in p]
    assert not [p for p in source.listed if "node_modules" in p.parts]
    assert sample_tree / "target" not in source.listed


def test_pruned_directory_is_logged(sample_tree: Path, caplog: pytest.LogCaptureFixture):
    caplog.set_level("INFO", logger="rcat")
    list(traverse(TraversalConfig(sample_tree)))
    assert "Skipping: target" in caplog.text
    assert "Skipping: .git" in caplog.text


def test_root_file_yields_single_descriptor(sample_tree: Path):
    config = TraversalConfig(
        sample_tree / "b.py", extension_filter=frozenset({"rs"}), exclusions=("b.py",)
    )
    descriptors = list(traverse(config))
    assert len(descriptors) == 1
    assert descriptors[0].relative_path == "b.py"
    assert descriptors[0].depth == 0
    assert not descriptors[0].is_directory


def test_missing_root_is_fatal_before_iteration(tmp_path: Path):
    with pytest.raises(NotFound) as exc_info:
        traverse(TraversalConfig(tmp_path / "nope"))
    assert exc_info.value.fatal


@pytest.mark.skipif(not hasattr(os, "mkfifo"), reason="fifos unsupported")
def test_special_file_root_is_a_mode_conflict(tmp_path: Path):
    fifo = tmp_path / "pipe"
    os.mkfifo(fifo)
    with pytest.raises(ModeConflict):
        traverse(TraversalConfig(fifo))


def test_unreadable_directory_is_reported_and_siblings_continue(tmp_path: Path):
    write_text_file(tmp_path / "a" / "x.txt", "x\n")
    write_text_file(tmp_path / "locked" / "y.txt", "y\n")
    write_text_file(tmp_path / "z" / "w.txt", "w\n")
    errors: list = []
    source = RecordingSource(unreadable_dirs={"locked"})
    paths = _paths(TraversalConfig(tmp_path), source=source, on_error=errors.append)
    assert paths == ["a/x.txt", "z/w.txt"]
    assert len(errors) == 1
    assert isinstance(errors[0], Unreadable)
    assert Path(errors[0].path).name == "locked"
    assert not errors[0].fatal


def test_unreadable_directory_without_handler_is_logged(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
):
    write_text_file(tmp_path / "locked" / "y.txt", "y\n")
    source = RecordingSource(unreadable_dirs={"locked"})
    assert _paths(TraversalConfig(tmp_path), source=source) == []
    assert "Failed to read directory" in caplog.text


def test_each_call_walks_from_scratch(sample_tree: Path):
    config = TraversalConfig(sample_tree)
    assert _paths(config) == _paths(config)


@needs_symlinks
def test_symlink_cycle_terminates_and_yields_each_file_once(tmp_path: Path):
    write_text_file(tmp_path / "a" / "file.txt", "x\n")
    os.symlink(tmp_path, tmp_path / "a" / "loop", target_is_directory=True)
    os.symlink(tmp_path / "a", tmp_path / "b", target_is_directory=True)
    os.symlink(tmp_path / "a" / "file.txt", tmp_path / "c.txt")

    descriptors = list(traverse(TraversalConfig(tmp_path)))
    assert [d.relative_path for d in descriptors] == ["a/file.txt"]
    real_paths = [os.path.realpath(d.absolute_path) for d in descriptors]
    assert len(real_paths) == len(set(real_paths))


@needs_symlinks
def test_no_follow_ignores_symlinked_directories(tmp_path: Path):
    write_text_file(tmp_path / "real" / "file.txt", "x\n")
    os.symlink(tmp_path / "real", tmp_path / "alias", target_is_directory=True)
    outside = tmp_path.parent / (tmp_path.name + "-outside")
    write_text_file(outside / "other.txt", "y\n")
    os.symlink(outside, tmp_path / "zlink", target_is_directory=True)

    assert _paths(TraversalConfig(tmp_path, follow_symlinks=False)) == ["real/file.txt"]
    # The first name that reaches a real directory wins.
    assert _paths(TraversalConfig(tmp_path)) == ["alias/file.txt", "zlink/other.txt"]


def test_depth_limited_directory_is_logged(tmp_path: Path, caplog: pytest.LogCaptureFixture):
    caplog.set_level("INFO", logger="rcat")
    _deep_tree(tmp_path)
    assert _paths(TraversalConfig(tmp_path, max_depth=0)) == ["top.txt"]
    assert "Skipping: a" in caplog.text


@needs_symlinks
def test_dangling_symlink_is_logged(tmp_path: Path, caplog: pytest.LogCaptureFixture):
    caplog.set_level("INFO", logger="rcat")
    write_text_file(tmp_path / "top.txt", "0\n")
    write_text_file(tmp_path / "a" / "one.txt", "1\n")
    os.symlink(tmp_path / "nowhere", tmp_path / "dangling")
    assert _paths(TraversalConfig(tmp_path)) == ["a/one.txt", "top.txt"]
    assert "Skipping: dangling" in caplog.text
