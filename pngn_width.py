#!/usr/bin/env python3
"""
🐧 PNGN Log Console - Width Calculation Module
==============================================
Copyright (c) 2025 PNGN-Tec LLC

Text Width Measurement
======================
Every visible log panel is re-laid out on every frame, so the same short
runs ("INFO", timestamps, logger names) are measured over and over. This
module puts an LRU cache in front of the measuring function.

Core Features
=============
- Terminal column widths via wcwidth (CJK, emoji, combining marks)
- Pluggable measure function for pixel widths (e.g. FreeTypeFont.getlength)
- Thread-safe LRU cache bounded by entry count and memory
- Codepoint fast path for ASCII text

Module Interface
================
- WidthCalculator: Cached measurer
- column_width(): Uncached terminal column width of a string
- get_width(): Column width through the shared default calculator

Example Usage
=============
```python
from pngn_width import get_width, WidthCalculator

get_width("Hello, World!")  # 13
get_width("你好")            # 4

calc = WidthCalculator(measure=font.getlength)
calc.get_width("INFO")       # pixels
```
"""

import threading
import logging
from typing import Optional, Dict, Union, Callable
from collections import OrderedDict

from wcwidth import wcwidth, wcswidth

from config import get_cache_config

# Configure logging
logger = logging.getLogger('pngn_width')

MeasureFunction = Callable[[str], float]


def _build_codepoint_cache() -> Dict[int, int]:
    """Column widths for codepoints that never need wcwidth."""
    cache = {}

    # ASCII printable characters
    for code in range(32, 127):
        cache[code] = 1

    # Control characters are zero width
    for code in range(0, 32):
        cache[code] = 0
    for code in range(0x7F, 0xA0):
        cache[code] = 0

    return cache


_CODEPOINT_WIDTHS = _build_codepoint_cache()


def column_width(text: str) -> int:
    """
    Terminal column width of text, skipping control characters.

    Args:
        text: Text to measure

    Returns:
        Visual width in columns (0 for empty/control-only text)
    """
    if not text:
        return 0

    # Fast path: no control characters anywhere
    width = wcswidth(text)
    if width >= 0:
        return width

    total_width = 0
    for char in text:
        code = ord(char)
        if code in _CODEPOINT_WIDTHS:
            total_width += _CODEPOINT_WIDTHS[code]
            continue
        char_width = wcwidth(char)
        # Only add positive widths (skip control/zero-width)
        if char_width > 0:
            total_width += char_width
    return total_width


class WidthCalculator:
    """
    Thread-safe text width calculator with caching.

    Wraps a measure function (terminal columns by default) with an LRU
    cache bounded by entry count and by the UTF-8 size of the cached
    strings. Widths are floats so pixel measurements pass through
    unchanged. All bookkeeping, stats included, happens under one lock,
    so a calculator can be shared by every canvas of a FontSet.

    If the measure function raises, the width falls back to the column
    width of the text times fallback_unit (the pixel advance of one cell
    for pixel measures), keeping the result in the measure's units.

    Attributes:
        stats: Dictionary containing calculation statistics
    """

    def __init__(self,
                 measure: Optional[MeasureFunction] = None,
                 cache_size: Optional[int] = None,
                 cache_memory_mb: Optional[float] = None,
                 enable_cache: Optional[bool] = None,
                 fallback_unit: float = 1.0):
        """
        Initialize width calculator.

        Args:
            measure: Function returning the width of a string (columns if None)
            cache_size: Maximum number of cached strings (uses config if None)
            cache_memory_mb: Maximum cache memory in MB (uses config if None)
            enable_cache: Whether to enable string caching (uses config if None)
            fallback_unit: Width of one terminal column in the measure's units
        """
        cache_config = get_cache_config()
        if cache_size is None:
            cache_size = cache_config.width_cache_size
        if cache_memory_mb is None:
            cache_memory_mb = cache_config.width_cache_memory_mb
        if enable_cache is None:
            enable_cache = cache_config.enable_caching
            if not enable_cache:
                logger.info("Caching disabled by configuration")

        self._measure = measure or column_width
        self._fallback_unit = fallback_unit

        self._entries: "OrderedDict[str, float]" = OrderedDict()
        self._max_entries = cache_size
        self._max_bytes = int(cache_memory_mb * 1024 * 1024)
        self._used_bytes = 0
        self._cache_enabled = enable_cache
        self._lock = threading.Lock()

        self.stats = {
            'cache_hits': 0,
            'cache_misses': 0,
            'calculations': 0,
            'cache_evictions': 0,
            'errors': 0
        }

        logger.debug(f"WidthCalculator initialized with cache_size={cache_size}, "
                     f"memory_limit={cache_memory_mb}MB, cache_enabled={enable_cache}")

    def get_width(self, text: str) -> float:
        """
        Get width of text.

        Args:
            text: Text to measure

        Returns:
            Width in the measure function's units (0 for empty text)
        """
        if not text:
            return 0

        if self._cache_enabled:
            with self._lock:
                width = self._entries.get(text)
                if width is not None:
                    self._entries.move_to_end(text)
                    self.stats['cache_hits'] += 1
                    return width
                self.stats['cache_misses'] += 1

        failed = False
        try:
            width = self._measure(text)
        except Exception as e:
            logger.error(f"Width calculation error for {text!r}: {e}")
            failed = True
            width = column_width(text) * self._fallback_unit

        with self._lock:
            self.stats['errors' if failed else 'calculations'] += 1
            if self._cache_enabled:
                self._store(text, width)
        return width

    def _store(self, text: str, width: float):
        """Insert a width, evicting least recently used entries. Caller holds the lock."""
        if text in self._entries:
            # Another thread measured the same text first
            self._entries.move_to_end(text)
            return
        size = len(text.encode('utf-8', errors='ignore'))
        while self._entries and (len(self._entries) >= self._max_entries or
                                 self._used_bytes + size > self._max_bytes):
            evicted, _ = self._entries.popitem(last=False)
            self._used_bytes = max(0, self._used_bytes - len(evicted.encode('utf-8', errors='ignore')))
            self.stats['cache_evictions'] += 1
        self._entries[text] = width
        self._used_bytes += size

    def clear_cache(self):
        """Clear all cached widths."""
        with self._lock:
            self._entries.clear()
            self._used_bytes = 0

    def get_stats(self) -> Dict[str, Union[int, float]]:
        """
        Get calculator statistics.

        Returns:
            Counters plus hit rate, current entry count and memory usage
        """
        with self._lock:
            stats: Dict[str, Union[int, float]] = dict(self.stats)
            stats['cache_entries'] = len(self._entries)
            stats['cache_memory_bytes'] = self._used_bytes
            stats['cache_enabled'] = self._cache_enabled

        lookups = stats['cache_hits'] + stats['cache_misses']
        stats['cache_hit_rate'] = stats['cache_hits'] / lookups if lookups else 0.0
        return stats


# ============================================================================
# CONVENIENCE FUNCTIONS
# ============================================================================

_default_calculator = None
_calculator_lock = threading.Lock()

def get_default_calculator() -> WidthCalculator:
    """Shared column-width calculator, created on first use"""
    global _default_calculator

    if _default_calculator is None:
        with _calculator_lock:
            if _default_calculator is None:
                _default_calculator = WidthCalculator()

    return _default_calculator


def get_width(text: str) -> int:
    """
    Get terminal column width of text using the default calculator.

    Example:
        >>> get_width("Hello")
        5
        >>> get_width("你好")
        4
    """
    return get_default_calculator().get_width(text)
