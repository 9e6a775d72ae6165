from __future__ import annotations

import pytest

from rcat.defaults import DEFAULT_THEME
from rcat.errors import UnsupportedSyntax
from rcat.highlight import PygmentsHighlighter


def test_known_syntax_produces_ansi():
    styled = PygmentsHighlighter()(b"def f():\n    return 1\n", "module.py")
    assert "\x1b[" in styled
    assert "return" in styled


def test_unknown_syntax_raises():
    with pytest.raises(UnsupportedSyntax) as exc_info:
        PygmentsHighlighter()(b"whatever\n", "data.zzqqxx")
    assert exc_info.value.filename_hint == "data.zzqqxx"


def test_unknown_theme_falls_back(caplog: pytest.LogCaptureFixture):
    highlighter = PygmentsHighlighter("no-such-theme")
    assert highlighter.theme == DEFAULT_THEME
    assert "Unknown theme" in caplog.text


def test_invalid_utf8_decodes_as_latin1():
    styled = PygmentsHighlighter()(b"x = 'caf\xe9'\n", "module.py")
    assert "�" not in styled
    assert "é" in styled
