from __future__ import annotations

import codecs
import logging

from .adapters.filesystem import FileSystemSource
from .core import (
    FileDescriptor,
    Highlighted,
    Highlighter,
    OutputMode,
    Raw,
    RenderedFile,
    Skipped,
    SourceAdapter,
    TraversalConfig,
    decode_text,
)
from .defaults import BINARY_PROBE_BYTES
from .errors import UnsupportedSyntax

logger = logging.getLogger(__name__)

LIST_MODE = "list-mode"
DIRECTORY = "directory"
BINARY = "binary"
READ_ERROR = "read-error"


def _is_text_bytes(blob: bytes) -> bool:
    probe = blob[:BINARY_PROBE_BYTES]
    if b"\x00" in probe:
        return False
    # Incremental decoding tolerates a multibyte sequence cut at the probe boundary.
    decoder = codecs.getincrementaldecoder("utf-8")()
    try:
        decoder.decode(probe, final=len(blob) <= BINARY_PROBE_BYTES)
        return True
    except UnicodeDecodeError:
        return False


def _default_highlighter(config: TraversalConfig) -> Highlighter:
    from .highlight import PygmentsHighlighter

    return PygmentsHighlighter(config.theme)


def render(
    descriptor: FileDescriptor,
    config: TraversalConfig,
    *,
    source: SourceAdapter | None = None,
    highlighter: Highlighter | None = None,
) -> RenderedFile:
    """
    Produce the displayable content of one selected entry.

    List mode never touches file contents. Unreadable and binary files come back as
    Skipped; files without a matching grammar degrade to Raw.
    """
    if config.output_mode is OutputMode.LIST:
        return RenderedFile(descriptor, Skipped(LIST_MODE))
    if descriptor.is_directory:
        return RenderedFile(descriptor, Skipped(DIRECTORY))

    source = source or FileSystemSource()
    try:
        blob = source.read_file_bytes(descriptor.absolute_path)
    except OSError as e:
        detail = e.strerror or str(e)
        logger.warning("Error reading file %s: %s", descriptor.relative_path, detail)
        return RenderedFile(descriptor, Skipped(f"{READ_ERROR}: {detail}"))

    if not _is_text_bytes(blob):
        logger.info("Skipping binary file: %s", descriptor.relative_path)
        return RenderedFile(descriptor, Skipped(BINARY))

    text = decode_text(blob)
    # Styling only ever reaches the terminal in content mode.
    if not config.color_enabled or config.output_mode is not OutputMode.CONTENT:
        return RenderedFile(descriptor, Raw(text))

    highlighter = highlighter or _default_highlighter(config)
    try:
        styled = highlighter(blob, descriptor.name)
    except UnsupportedSyntax:
        logger.debug("No syntax for %s, printing as plain text", descriptor.relative_path)
        return RenderedFile(descriptor, Raw(text))
    return RenderedFile(descriptor, Highlighted(styled=styled, plain=text))
