#!/usr/bin/env python3
"""
🐧 PNGN Log Console - Canvas Backends
=====================================
Copyright (c) 2025 PNGN-Tec LLC

Drawing surfaces consumed by the styled text renderer.

Canvas Capabilities
===================
- cursor_position() / set_cursor_position(pos)
- measure_text(text) -> width
- line_height() -> height
- glyph_advance_width() -> width of the reference glyph "A"
- available_width() -> width left on the current line
- draw_text(position, color, text, bold=False)

Backends
========
- RecordingCanvas: headless, fixed cell metrics, keeps every DrawRun
- PillowCanvas: draws onto an RGBA PIL image with DejaVu Sans Mono
  (bold runs use the bold face, or a 1px stroke when none is installed)

Font Lookup
===========
1. fonts/ directory next to this module
2. Common Linux and Termux DejaVu locations
3. Pillow's built-in default font at the requested size
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Protocol, Tuple

import numpy as np
from PIL import Image, ImageDraw, ImageFont

from config import (
    CELL_WIDTH, CELL_HEIGHT,
    FONT_FILES, SYSTEM_FONT_DIRS,
    REFERENCE_GLYPH,
    RGBAColor, RenderingConfig,
    get_rendering_config,
)
from pngn_layout import DrawRun
from pngn_width import WidthCalculator, get_default_calculator

logger = logging.getLogger('PNGN.Console.Canvas')

Position = Tuple[float, float]


class Canvas(Protocol):
    """Capabilities the renderer needs from a drawing surface"""

    def cursor_position(self) -> Position: ...

    def set_cursor_position(self, pos: Position) -> None: ...

    def measure_text(self, text: str) -> float: ...

    def line_height(self) -> float: ...

    def glyph_advance_width(self) -> float: ...

    def available_width(self) -> float: ...

    def draw_text(self, position: Position, color: RGBAColor, text: str,
                  bold: bool = False) -> None: ...


# ============================================================================
# HEADLESS CANVAS
# ============================================================================

class RecordingCanvas:
    """
    In-memory canvas that records every draw for inspection.

    Text is measured in terminal columns (wcwidth) times the cell width,
    so wide characters take two cells like they would in a terminal.
    """

    def __init__(self,
                 glyph_width: float = CELL_WIDTH,
                 line_height: float = CELL_HEIGHT,
                 width: float = 640.0,
                 origin: Position = (0.0, 0.0),
                 widths: Optional[WidthCalculator] = None):
        self._glyph_width = glyph_width
        self._line_height = line_height
        self._width = width
        self._cursor = origin
        self._widths = widths or get_default_calculator()
        self.runs: List[DrawRun] = []

    def cursor_position(self) -> Position:
        return self._cursor

    def set_cursor_position(self, pos: Position) -> None:
        self._cursor = (pos[0], pos[1])

    def measure_text(self, text: str) -> float:
        return self._widths.get_width(text) * self._glyph_width

    def line_height(self) -> float:
        return self._line_height

    def glyph_advance_width(self) -> float:
        return self._glyph_width

    def available_width(self) -> float:
        return max(0.0, self._width - self._cursor[0])

    def draw_text(self, position: Position, color: RGBAColor, text: str,
                  bold: bool = False) -> None:
        self.runs.append(DrawRun(text=text, color=color, bold=bold,
                                 x=position[0], y=position[1]))

    @property
    def texts(self) -> List[str]:
        return [run.text for run in self.runs]

    def clear(self):
        self.runs.clear()


# ============================================================================
# FONT LOADING
# ============================================================================

@dataclass
class FontSet:
    """Loaded faces plus the shared width cache for the regular face"""
    regular: ImageFont.ImageFont
    bold: Optional[ImageFont.ImageFont] = None
    path: Optional[str] = None
    size: int = 16
    widths: WidthCalculator = field(init=False)
    line_height: float = field(init=False)

    def __post_init__(self):
        # One column of the reference glyph backs failed pixel measurements
        self.widths = WidthCalculator(measure=self.regular.getlength,
                                      fallback_unit=self.regular.getlength(REFERENCE_GLYPH))
        self.line_height = _font_line_height(self.regular)

    @property
    def glyph_width(self) -> float:
        return self.widths.get_width(REFERENCE_GLYPH)


def _font_line_height(font) -> float:
    if hasattr(font, 'getmetrics'):
        ascent, descent = font.getmetrics()
        return float(ascent + descent)
    # Bitmap fonts only expose bounding boxes
    _, _, _, bottom = font.getbbox("Ay")
    return float(bottom)


def _find_font_file(filename: str) -> Optional[Path]:
    """Locate a font file, package fonts directory first"""
    candidates = [Path(__file__).parent / 'fonts' / filename]
    candidates.extend(Path(directory) / filename for directory in SYSTEM_FONT_DIRS)
    for candidate in candidates:
        if candidate.exists():
            return candidate
    return None


def load_fonts(rendering: Optional[RenderingConfig] = None) -> FontSet:
    """
    Load the monospace regular face and, if present, its bold variant.

    Args:
        rendering: Rendering configuration (uses the active config if None)

    Returns:
        FontSet sized to font_size * dpi_scale
    """
    rendering = rendering or get_rendering_config()
    size = rendering.pixel_font_size

    regular_path = _find_font_file(FONT_FILES['regular'])
    regular = None
    if regular_path is not None:
        try:
            regular = ImageFont.truetype(str(regular_path), size)
            logger.info(f"Loaded DejaVu Sans Mono from {regular_path} at {size}px")
        except OSError as e:
            logger.error(f"Font loading failed: {e}")
            regular_path = None

    if regular is None:
        logger.warning("No DejaVu Sans Mono found - using Pillow default font")
        regular = ImageFont.load_default(size=size)

    bold = None
    if regular_path is not None:
        bold_path = regular_path.parent / FONT_FILES['bold']
        if bold_path.exists():
            try:
                bold = ImageFont.truetype(str(bold_path), size)
            except OSError as e:
                logger.debug(f"Could not load bold variant: {e}")

    return FontSet(regular=regular, bold=bold,
                   path=str(regular_path) if regular_path else None, size=size)


# ============================================================================
# PILLOW CANVAS
# ============================================================================

class PillowCanvas:
    """
    Canvas drawing onto an RGBA PIL image.

    The cursor starts at (padding, padding). Widths come from the font's
    advance metrics through the FontSet cache, which is shared by every
    canvas built from the same FontSet.
    """

    def __init__(self,
                 width: Optional[int] = None,
                 height: Optional[int] = None,
                 fonts: Optional[FontSet] = None,
                 background: Optional[RGBAColor] = None,
                 padding: Optional[int] = None,
                 faux_bold: Optional[bool] = None):
        rendering = get_rendering_config()
        self.width = width or rendering.panel_width
        self.height = height or rendering.panel_height
        self.padding = rendering.padding if padding is None else padding
        self.background = background or rendering.background
        self.faux_bold = rendering.faux_bold if faux_bold is None else faux_bold
        self.fonts = fonts or load_fonts(rendering)

        buffer = np.full((self.height, self.width, 4), self.background, dtype=np.uint8)
        self.image = Image.fromarray(buffer)
        self._draw = ImageDraw.Draw(self.image)
        self._cursor: Position = (float(self.padding), float(self.padding))

    def cursor_position(self) -> Position:
        return self._cursor

    def set_cursor_position(self, pos: Position) -> None:
        self._cursor = (pos[0], pos[1])

    def measure_text(self, text: str) -> float:
        return self.fonts.widths.get_width(text)

    def line_height(self) -> float:
        return self.fonts.line_height

    def glyph_advance_width(self) -> float:
        return self.fonts.glyph_width

    def available_width(self) -> float:
        return max(0.0, self.width - self.padding - self._cursor[0])

    def draw_text(self, position: Position, color: RGBAColor, text: str,
                  bold: bool = False) -> None:
        font = self.fonts.regular
        stroke = 0
        if bold:
            if self.fonts.bold is not None:
                font = self.fonts.bold
            elif self.faux_bold:
                stroke = 1
        self._draw.text(position, text, fill=color, font=font,
                        stroke_width=stroke, stroke_fill=color)

    def pixels(self) -> np.ndarray:
        """Snapshot of the image as an (height, width, 4) uint8 array"""
        return np.asarray(self.image)
