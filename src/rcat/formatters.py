from __future__ import annotations

import json
from typing import Any, Protocol

from pygments.console import ansiformat

from .core import (
    Highlighted,
    OutputMode,
    Raw,
    RenderedFile,
    Skipped,
    TraversalConfig,
    Writer,
)


class Formatter(Protocol):
    def emit(self, rendered: RenderedFile, writer: Writer) -> None: ...
    def finish(self, writer: Writer) -> None: ...


class ContentFormatter:
    def __init__(self, *, color: bool) -> None:
        self.color = color
        self._emitted = 0

    def header(self, path: str) -> str:
        if self.color:
            return ansiformat("*green*", path) + "\n"
        return f"{path}\n"

    def body(self, path: str, text: str) -> str:
        if text and not text.endswith("\n"):
            text = text + "\n"
        return self.header(path) + text

    def skipped(self, path: str, reason: str) -> str:
        return f"{path}: skipped ({reason})\n"

    def emit(self, rendered: RenderedFile, writer: Writer) -> None:
        descriptor, content = rendered.descriptor, rendered.content
        path = descriptor.relative_path
        if descriptor.is_directory:
            block = self.header(path + "/")
        elif isinstance(content, Highlighted):
            block = self.body(path, content.styled if self.color else content.plain)
        elif isinstance(content, Raw):
            block = self.body(path, content.text)
        else:
            block = self.skipped(path, content.reason)
        if self._emitted:
            writer.write("\n")
        writer.write(block)
        self._emitted += 1

    def finish(self, writer: Writer) -> None:
        pass


class ListFormatter:
    def emit(self, rendered: RenderedFile, writer: Writer) -> None:
        # Listing never rendered anything, so there are no skip reasons to report.
        writer.write(rendered.descriptor.relative_path + "\n")

    def finish(self, writer: Writer) -> None:
        pass


class JsonFormatter:
    """Buffers every entry and writes a single JSON array once the run is complete."""

    def __init__(self) -> None:
        self._entries: list[dict[str, Any]] = []

    def to_dict(self, rendered: RenderedFile) -> dict[str, Any]:
        descriptor, content = rendered.descriptor, rendered.content
        text: str | None = None
        skipped: str | None = None
        if isinstance(content, Highlighted):
            text = content.plain
        elif isinstance(content, Raw):
            text = content.text
        elif isinstance(content, Skipped) and not descriptor.is_directory:
            skipped = content.reason
        return {
            "path": descriptor.relative_path,
            "depth": descriptor.depth,
            "isDirectory": descriptor.is_directory,
            "content": text,
            "skipped": skipped,
        }

    def emit(self, rendered: RenderedFile, writer: Writer) -> None:
        self._entries.append(self.to_dict(rendered))

    def finish(self, writer: Writer) -> None:
        writer.write(json.dumps(self._entries, indent=2, ensure_ascii=False) + "\n")


def make_formatter(config: TraversalConfig) -> Formatter:
    if config.output_mode is OutputMode.LIST:
        return ListFormatter()
    if config.output_mode is OutputMode.JSON:
        return JsonFormatter()
    return ContentFormatter(color=config.color_enabled)
