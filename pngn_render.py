#!/usr/bin/env python3
"""
🐧 PNGN Log Console - Styled Text Renderer
==========================================
Copyright (c) 2025 PNGN-Tec LLC

Single entry point that turns a string with embedded SGR sequences into
positioned, colored draw calls on a canvas.

Render Pipeline
===============
1. Capture the canvas cursor as the line start and starting position
2. Scan left to right; each 'ESC[' flushes the pending literal run to the
   layout engine and hands the parameters to the SGR tokenizer
3. Lay out the trailing run
4. Settle the cursor for a trailing newline and write it back

The pass is linear in the input length and keeps no state between calls:
style always starts at the default, and the only thing carried forward
is the cursor stored on the canvas.

Example Usage
=============
```python
from pngn_canvas import RecordingCanvas
from pngn_render import render_styled_text

canvas = RecordingCanvas()
render_styled_text("\\x1b[31mHello\\x1b[0m World", canvas)
[run.text for run in canvas.runs]  # ['Hello', ' World']
```
"""

import logging
from typing import Optional, Tuple, Union

from pngn_layout import ESC, Cursor, LayoutMetrics, finalize_cursor, layout_run
from pngn_sgr import Style, apply_sgr

logger = logging.getLogger('PNGN.Console.Render')

CSI_BRACKET = '['

TextInput = Union[str, bytes, bytearray, None]


def _bound_input(text: TextInput, length: Optional[int]) -> Tuple[str, int]:
    """
    Resolve the readable extent of the input.

    Without an explicit length the input ends at the first NUL. With one,
    the input is cut to that many characters (bytes for binary input) and
    NULs inside are ordinary control characters.
    """
    if isinstance(text, (bytes, bytearray)):
        if length is None:
            nul = text.find(b'\0')
            raw = text if nul < 0 else text[:nul]
        else:
            raw = text[:max(length, 0)]
        decoded = bytes(raw).decode('utf-8', errors='replace')
        return decoded, len(decoded)

    if length is None:
        nul = text.find('\0')
        return text, len(text) if nul < 0 else nul
    return text, min(max(length, 0), len(text))


def render_styled_text(text: TextInput, canvas, length: Optional[int] = None,
                       strip_lone_escape: bool = False) -> Tuple[float, float]:
    """
    Render text containing SGR escape sequences onto canvas.

    Args:
        text: Input string or bytes; None and empty input are no-ops
        canvas: Canvas collaborator (see pngn_canvas.Canvas)
        length: Explicit bound on the input; None scans to the first NUL
        strip_lone_escape: Drop ESC bytes not followed by '[' instead of
            drawing them as literal glyphs

    Returns:
        Final cursor position, also written back to the canvas
    """
    if not text:
        return canvas.cursor_position()

    text, end = _bound_input(text, length)
    if end == 0:
        return canvas.cursor_position()

    start_x, start_y = canvas.cursor_position()
    metrics = LayoutMetrics.from_canvas(canvas, start_x)
    cursor = Cursor(start_x, start_y)
    style = Style()

    runs = 0
    pending = 0
    pos = text.find(ESC, 0, end)
    while pos >= 0:
        if pos + 1 < end and text[pos + 1] == CSI_BRACKET:
            runs += layout_run(text, pending, pos, style, cursor, metrics, canvas)
            pending = apply_sgr(text, pos + 2, end, style)
            pos = text.find(ESC, pending, end)
        elif strip_lone_escape:
            runs += layout_run(text, pending, pos, style, cursor, metrics, canvas)
            pending = pos + 1
            pos = text.find(ESC, pending, end)
        else:
            pos = text.find(ESC, pos + 1, end)

    runs += layout_run(text, pending, end, style, cursor, metrics, canvas)
    finalize_cursor(text, end, cursor, metrics)

    final = cursor.as_tuple()
    canvas.set_cursor_position(final)
    logger.debug(f"Rendered {end} chars as {runs} runs, cursor now {final}")
    return final
