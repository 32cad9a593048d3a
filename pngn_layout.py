#!/usr/bin/env python3
"""
🐧 PNGN Log Console - Line Layout Engine
========================================
Copyright (c) 2025 PNGN-Tec LLC

Positions literal text runs on a canvas and interprets the control
characters that move the cursor.

Control Characters
==================
- \\n: new line (x back to line start, y down one line)
- \\r: carriage return (x back to line start)
- \\t: advance to the next tab stop (every 8 reference glyphs)
- \\b: step back one reference glyph, never left of the line start
- other C0 controls: dropped (zero width)

ESC is never treated as a control character here. Escape sequences are
split off before a run reaches this module, so any ESC left in a run is
drawn as a literal glyph.
"""

import math
from dataclasses import dataclass
from typing import Tuple

from config import RGBAColor, TAB_STOP_COLUMNS
from pngn_sgr import Style

ESC = '\x1b'


@dataclass
class Cursor:
    """Pen position in canvas coordinates"""
    x: float
    y: float

    def as_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)


@dataclass(frozen=True)
class LayoutMetrics:
    """Per-call layout constants captured from the canvas"""
    line_start_x: float
    glyph_width: float
    line_height: float
    # Not used for wrapping yet
    available_width: float

    @classmethod
    def from_canvas(cls, canvas, line_start_x: float) -> 'LayoutMetrics':
        return cls(
            line_start_x=line_start_x,
            glyph_width=canvas.glyph_advance_width(),
            line_height=canvas.line_height(),
            available_width=canvas.available_width(),
        )

    @property
    def tab_width(self) -> float:
        return self.glyph_width * TAB_STOP_COLUMNS


@dataclass
class DrawRun:
    """Single run of printable text with its style and position"""
    text: str
    color: RGBAColor
    bold: bool = False
    x: float = 0.0
    y: float = 0.0


def _flush(text: str, start: int, stop: int, style: Style, cursor: Cursor, canvas) -> int:
    """Draw text[start:stop] at the cursor and advance past it."""
    if stop <= start:
        return 0
    chunk = text[start:stop]
    canvas.draw_text((cursor.x, cursor.y), style.color, chunk, bold=style.bold)
    cursor.x += canvas.measure_text(chunk)
    return 1


def layout_run(text: str, start: int, end: int, style: Style, cursor: Cursor,
               metrics: LayoutMetrics, canvas) -> int:
    """
    Lay out text[start:end], which must not contain an escape introducer.

    Args:
        text: Source text
        start: First index of the run
        end: Exclusive end of the run
        style: Style applied to every draw
        cursor: Cursor moved in place
        metrics: Layout constants
        canvas: Canvas receiving draw_text calls

    Returns:
        Number of draw runs emitted
    """
    runs = 0
    pending = start
    i = start
    line_start_x = metrics.line_start_x

    while i < end:
        ch = text[i]
        if ch >= ' ' or ch == ESC:
            i += 1
            continue

        runs += _flush(text, pending, i, style, cursor, canvas)

        if ch == '\n':
            cursor.x = line_start_x
            cursor.y += metrics.line_height
        elif ch == '\r':
            cursor.x = line_start_x
        elif ch == '\t':
            tab_width = metrics.tab_width
            if tab_width > 0:
                column = cursor.x - line_start_x
                cursor.x = line_start_x + (math.floor(column / tab_width) + 1) * tab_width
        elif ch == '\b':
            cursor.x = max(line_start_x, cursor.x - metrics.glyph_width)

        i += 1
        pending = i

    runs += _flush(text, pending, end, style, cursor, canvas)
    return runs


def finalize_cursor(text: str, end: int, cursor: Cursor, metrics: LayoutMetrics):
    """
    Settle the cursor after the last run of text[:end].

    A trailing \\n moves down one more line (unless it closes a \\r\\n
    pair) and a trailing \\r returns to the line start.
    """
    if end <= 0:
        return
    last = text[end - 1]
    if last == '\n':
        cursor.x = metrics.line_start_x
        if end == 1 or text[end - 2] != '\r':
            cursor.y += metrics.line_height
    elif last == '\r':
        cursor.x = metrics.line_start_x
