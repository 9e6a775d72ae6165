from __future__ import annotations

import logging
from enum import IntEnum

logger = logging.getLogger(__name__)


class ExitStatus(IntEnum):
    OK = 0
    PARTIAL = 1  # Some directories or files could not be read.
    USAGE = 2  # argparse's own exit code for bad arguments.
    NOT_FOUND = 3
    MODE_CONFLICT = 4
    INTERRUPTED = 130


class RcatError(Exception):
    """Base class for every error raised by rcat."""


class TraversalError(RcatError):
    exit_status: ExitStatus = ExitStatus.PARTIAL
    fatal: bool = False

    def __init__(self, path, detail: str = "") -> None:
        self.path = path
        self.detail = detail
        super().__init__(self._message())

    def _message(self) -> str:
        return f"{self.path}: {self.detail}" if self.detail else str(self.path)


class NotFound(TraversalError):
    exit_status = ExitStatus.NOT_FOUND
    fatal = True

    def _message(self) -> str:
        return f"Path not found: {self.path}"


class ModeConflict(TraversalError):
    """The root exists but is neither a regular file nor a directory."""

    exit_status = ExitStatus.MODE_CONFLICT
    fatal = True

    def _message(self) -> str:
        return f"Not a file or directory: {self.path}"


class Unreadable(TraversalError):
    def _message(self) -> str:
        msg = f"Failed to read directory: {self.path}"
        return f"{msg} ({self.detail})" if self.detail else msg


class UnsupportedSyntax(RcatError):
    def __init__(self, filename_hint: str) -> None:
        self.filename_hint = filename_hint
        super().__init__(f"No syntax found for {filename_hint!r}")


class RunReport:
    """Tallies recoverable failures over one run and derives the exit status."""

    # Reasons that describe the output mode rather than a problem with the entry.
    _NOT_COUNTED = ("list-mode", "directory")

    def __init__(self) -> None:
        self.skipped = 0
        self.read_errors = 0
        self.unreadable_dirs = 0

    def record_traversal_error(self, error: TraversalError) -> None:
        logger.warning("%s", error)
        self.unreadable_dirs += 1

    def record_skip(self, reason: str) -> None:
        if reason in self._NOT_COUNTED:
            return
        self.skipped += 1
        if reason.startswith("read-error"):
            self.read_errors += 1

    @property
    def exit_status(self) -> ExitStatus:
        if self.read_errors or self.unreadable_dirs:
            return ExitStatus.PARTIAL
        return ExitStatus.OK

    def summarize(self) -> None:
        if not (self.skipped or self.unreadable_dirs):
            return
        logger.warning(
            "%d file(s) skipped, %d unreadable file(s), %d unreadable director(y/ies)",
            self.skipped,
            self.read_errors,
            self.unreadable_dirs,
        )
