from __future__ import annotations

import logging

from pygments import highlight
from pygments.formatters import TerminalTrueColorFormatter
from pygments.lexers import get_lexer_for_filename
from pygments.styles import get_all_styles
from pygments.util import ClassNotFound

from .core import decode_text
from .defaults import DEFAULT_THEME
from .errors import UnsupportedSyntax

logger = logging.getLogger(__name__)


class PygmentsHighlighter:
    """Syntax highlighting backed by Pygments lexers, rendered with 24-bit ANSI escapes."""

    def __init__(self, theme: str = DEFAULT_THEME) -> None:
        if theme not in set(get_all_styles()):
            logger.warning("Unknown theme %r, falling back to %r", theme, DEFAULT_THEME)
            theme = DEFAULT_THEME
        self.theme = theme
        self._formatter = TerminalTrueColorFormatter(style=theme)

    def __call__(self, data: bytes, filename_hint: str) -> str:
        text = decode_text(data)
        try:
            lexer = get_lexer_for_filename(filename_hint, text, stripnl=False)
        except ClassNotFound as e:
            raise UnsupportedSyntax(filename_hint) from e
        logger.debug("Highlighting %s with %s", filename_hint, lexer.name)
        return highlight(text, lexer, self._formatter)

