#!/usr/bin/env python3
"""
🐧 PNGN Log Console - SGR Escape Tokenizer
==========================================
Copyright (c) 2025 PNGN-Tec LLC

Decodes the parameters of an ANSI "Select Graphic Rendition" sequence
(ESC [ p1 ; p2 ; ... m) and applies them to a Style.

Supported Codes
===============
- 0: reset to default (opaque white, not bold)
- 1 / 22: bold on / off
- 30-37, 90-97: base palette foreground
- 38;5;n: 256-color foreground
- 38;2;r;g;b: truecolor foreground

Everything else is ignored. Decoding never reads past the supplied end
index and never raises: a truncated sequence keeps whatever changes were
already applied.
"""

import logging
from dataclasses import dataclass
from typing import Tuple

from config import RGBAColor
from pngn_colors import DEFAULT_COLOR, base, from_code_256, from_rgb

logger = logging.getLogger('PNGN.Console.SGR')

SGR_TERMINATOR = 'm'
PARAM_SEPARATOR = ';'

# Every consumer clamps to 0-255, so larger values only need to stay large
PARAM_SATURATION = 65535


@dataclass
class Style:
    """Active text attributes. Last write wins, there is no save/restore stack."""
    color: RGBAColor = DEFAULT_COLOR
    bold: bool = False

    def reset(self):
        self.color = DEFAULT_COLOR
        self.bold = False


def parse_number(text: str, pos: int, end: int) -> Tuple[int, int]:
    """
    Decode a run of ASCII digits starting at pos.

    An empty run decodes to 0, which is how ';;' and a bare 'ESC[m'
    come to mean reset. Values saturate just above PARAM_SATURATION;
    the remaining digits are consumed but no longer accumulated.

    Returns:
        (value, position after the last digit)
    """
    value = 0
    while pos < end:
        ch = text[pos]
        if ch < '0' or ch > '9':
            break
        if value <= PARAM_SATURATION:
            value = value * 10 + (ord(ch) - 48)
        pos += 1
    return value, pos


def _separator_at(text: str, pos: int, end: int) -> bool:
    return pos < end and text[pos] == PARAM_SEPARATOR


def _apply_extended_color(text: str, pos: int, end: int, style: Style) -> int:
    """Handle the sub-parameters following code 38."""
    if not _separator_at(text, pos, end):
        return pos
    mode, pos = parse_number(text, pos + 1, end)

    if mode == 5:
        if _separator_at(text, pos, end):
            index, pos = parse_number(text, pos + 1, end)
            style.color = from_code_256(index)
    elif mode == 2:
        components = []
        while len(components) < 3 and _separator_at(text, pos, end):
            value, pos = parse_number(text, pos + 1, end)
            components.append(value)
        if len(components) == 3:
            style.color = from_rgb(*components)
    return pos


def _apply_code(code: int, style: Style):
    if code == 0:
        style.reset()
    elif code == 1:
        style.bold = True
    elif code == 22:
        style.bold = False
    elif 30 <= code <= 37:
        style.color = base(code - 30)
    elif 90 <= code <= 97:
        style.color = base(code - 90 + 8)


def apply_sgr(text: str, pos: int, end: int, style: Style) -> int:
    """
    Apply one SGR sequence to style.

    Args:
        text: Source text
        pos: Index just past the 'ESC[' introducer
        end: Exclusive bound of the readable input
        style: Style mutated in place

    Returns:
        Index just past the terminating 'm', or the index where decoding
        stopped if the sequence was malformed or truncated
    """
    start = pos
    while True:
        code, pos = parse_number(text, pos, end)
        if code == 38:
            pos = _apply_extended_color(text, pos, end, style)
        else:
            _apply_code(code, style)

        if _separator_at(text, pos, end):
            pos += 1
            continue
        break

    if pos < end and text[pos] == SGR_TERMINATOR:
        return pos + 1

    if pos >= end:
        logger.debug(f"Unterminated SGR sequence at offset {start - 2}")
    return pos
