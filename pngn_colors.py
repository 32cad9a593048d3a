#!/usr/bin/env python3
"""
🐧 PNGN Log Console - Color Table
=================================
Copyright (c) 2025 PNGN-Tec LLC

Maps SGR color parameters to display colors.

Color Spaces
============
- Base palette: 16 entries (SGR 30-37, 90-97, and 256-color indices 0-15)
- Color cube: indices 16-231, a 6x6x6 lattice with steps of 51
- Grayscale ramp: indices 232-255, 24 levels from 8 to 238
- Truecolor: direct RGB triples (SGR 38;2;r;g;b)

Every numeric input is clamped to its nominal range before use, so
malformed escape parameters always produce a valid opaque color.
"""

from typing import Tuple

from config import ANSI_16_COLORS, DEFAULT_TEXT_COLOR, RGBAColor

# Immutable palette, built once at import
PALETTE: Tuple[RGBAColor, ...] = tuple(ANSI_16_COLORS[i]['rgba'] for i in range(16))

DEFAULT_COLOR: RGBAColor = DEFAULT_TEXT_COLOR

CUBE_START = 16
GRAY_START = 232


def _clamp(value: int, low: int = 0, high: int = 255) -> int:
    if value < low:
        return low
    if value > high:
        return high
    return value


def base(code: int) -> RGBAColor:
    """Direct lookup into the 16-color base palette."""
    return PALETTE[_clamp(code, 0, 15)]


def from_cube(code: int) -> RGBAColor:
    """
    Color for a 216-color cube index (16-231).

    Examples:
        >>> from_cube(196)
        (255, 0, 0, 255)
    """
    c = _clamp(code, CUBE_START, GRAY_START - 1) - CUBE_START
    r = (c // 36) * 51
    g = ((c % 36) // 6) * 51
    b = (c % 6) * 51
    return (r, g, b, 255)


def from_gray(code: int) -> RGBAColor:
    """Color for a grayscale ramp index (232-255)."""
    gray = 8 + (_clamp(code, GRAY_START, 255) - GRAY_START) * 10
    return (gray, gray, gray, 255)


def from_rgb(r: int, g: int, b: int) -> RGBAColor:
    """Opaque color from an RGB triple, components clamped to 0-255."""
    return (_clamp(r), _clamp(g), _clamp(b), 255)


def from_code_256(code: int) -> RGBAColor:
    """
    Resolve a 256-color index (SGR 38;5;n).

    Indices above 255 clamp to 255 (the lightest gray).
    """
    code = _clamp(code)
    if code < CUBE_START:
        return PALETTE[code]
    if code < GRAY_START:
        return from_cube(code)
    return from_gray(code)


def rgba_to_hex(color: RGBAColor) -> str:
    """Format a color as #rrggbb, ignoring alpha"""
    r, g, b = color[0], color[1], color[2]
    return f"#{r:02x}{g:02x}{b:02x}"
