#!/usr/bin/env python3
"""
🐧 PNGN Log Console - Configuration Module
==========================================
Copyright (c) 2025 PNGN-Tec LLC

Centralized Configuration System
=================================
Complete configuration for the ANSI log console including:
- The 16-color base palette used by SGR codes 30-37 and 90-97
- Default text color and panel background
- Layout constants (tab stops, reference glyph)
- Font, panel and cache settings
- Runtime reloading with change notifications

Configuration Overview
======================
All values are plain dataclasses grouped under ConsoleConfig. A
process-wide ConfigurationManager holds the active configuration and
applies PNGN_CONSOLE_* environment overrides on startup and on reload.

Color System
============
The base palette is a slightly brightened take on the classic 16 terminal
colors so that dark log panels stay readable:
- Standard colors (indices 0-7): SGR 30-37
- Bright colors (indices 8-15): SGR 90-97
"""

import threading
import logging
import os
from typing import Tuple, Optional, Callable, List
from dataclasses import dataclass, field

# Configure logging
logger = logging.getLogger('pngn_config')

# Type alias for RGBA colors
RGBAColor = Tuple[int, int, int, int]

# ============================================================================
# LAYOUT CONSTANTS
# ============================================================================

TAB_STOP_COLUMNS = 8        # Tab stops every 8 reference glyphs
REFERENCE_GLYPH = "A"       # Glyph measured for tab and backspace math

# Headless canvas cell dimensions (pixels)
CELL_WIDTH = 8
CELL_HEIGHT = 16

# ============================================================================
# ANSI 16-COLOR PALETTE
# ============================================================================

ANSI_16_COLORS = {
    # STANDARD COLORS (0-7)
    0: {'name': 'Black', 'rgba': (40, 40, 40, 255)},
    1: {'name': 'Red', 'rgba': (220, 80, 80, 255)},
    2: {'name': 'Green', 'rgba': (80, 220, 80, 255)},
    3: {'name': 'Yellow', 'rgba': (220, 220, 80, 255)},
    4: {'name': 'Blue', 'rgba': (80, 80, 220, 255)},
    5: {'name': 'Magenta', 'rgba': (220, 80, 220, 255)},
    6: {'name': 'Cyan', 'rgba': (80, 220, 220, 255)},
    7: {'name': 'Light Gray', 'rgba': (220, 220, 220, 255)},

    # BRIGHT COLORS (8-15)
    8: {'name': 'Dark Gray', 'rgba': (160, 160, 160, 255)},
    9: {'name': 'Bright Red', 'rgba': (255, 120, 120, 255)},
    10: {'name': 'Bright Green', 'rgba': (120, 255, 120, 255)},
    11: {'name': 'Bright Yellow', 'rgba': (255, 255, 120, 255)},
    12: {'name': 'Bright Blue', 'rgba': (120, 120, 255, 255)},
    13: {'name': 'Bright Magenta', 'rgba': (255, 120, 255, 255)},
    14: {'name': 'Bright Cyan', 'rgba': (120, 255, 255, 255)},
    15: {'name': 'White', 'rgba': (255, 255, 255, 255)},
}

DEFAULT_TEXT_COLOR: RGBAColor = (255, 255, 255, 255)

# Panel clear color (0.1, 0.1, 0.1)
BACKGROUND_COLOR: RGBAColor = (25, 25, 25, 255)

# ============================================================================
# FONT LOOKUP
# ============================================================================

FONT_FILES = {
    'regular': 'DejaVuSansMono.ttf',
    'bold': 'DejaVuSansMono-Bold.ttf',
}

# Searched in order after the package-local fonts/ directory
SYSTEM_FONT_DIRS = [
    '/usr/share/fonts/truetype/dejavu',
    '/usr/share/fonts/dejavu',
    '/usr/share/fonts/TTF',
    '/data/data/com.termux/files/usr/share/fonts/TTF',
]


# ============================================================================
# CACHE CONFIGURATION
# ============================================================================

@dataclass
class CacheConfig:
    """
    Text measurement cache parameters.

    Attributes:
        width_cache_size: Maximum number of measured strings kept
        width_cache_memory_mb: Memory bound for cached strings
        enable_caching: Master switch for caching
    """

    width_cache_size: int = 4096
    width_cache_memory_mb: float = 4.0
    enable_caching: bool = True

    def validate(self) -> bool:
        """Validate cache configuration"""
        if self.width_cache_size <= 0:
            raise ValueError("Width cache size must be positive")
        if self.width_cache_memory_mb <= 0:
            raise ValueError("Width cache memory limit must be positive")
        return True


# ============================================================================
# RENDERING CONFIGURATION
# ============================================================================

@dataclass
class RenderingConfig:
    """Panel rendering and font configuration"""

    # Font settings
    font_size: int = 16
    dpi_scale: float = 1.0

    # Panel surface
    panel_width: int = 640
    panel_height: int = 360
    padding: int = 4
    background: RGBAColor = BACKGROUND_COLOR

    # Title bar
    show_titles: bool = True
    title_color: RGBAColor = (120, 255, 255, 255)

    # Synthesize bold with a stroke when no bold face is installed
    faux_bold: bool = True

    def validate(self) -> bool:
        """Validate rendering configuration"""
        if self.font_size <= 0:
            raise ValueError("Font size must be positive")
        if self.dpi_scale <= 0:
            raise ValueError("DPI scale must be positive")
        if self.panel_width <= 0 or self.panel_height <= 0:
            raise ValueError("Panel dimensions must be positive")
        if self.padding < 0:
            raise ValueError("Padding cannot be negative")
        return True

    @property
    def pixel_font_size(self) -> int:
        """Font size after DPI scaling"""
        return max(1, int(round(self.font_size * self.dpi_scale)))


@dataclass
class ParserConfig:
    """Escape parsing options"""

    # Drop ESC bytes that do not start a CSI sequence instead of drawing them
    strip_lone_escape: bool = False

    def validate(self) -> bool:
        return True


@dataclass
class PanelConfig:
    """Log panel retention"""

    max_entries: int = 1000

    def validate(self) -> bool:
        """Validate panel configuration"""
        if self.max_entries <= 0:
            raise ValueError("Panel entry limit must be positive")
        return True


# ============================================================================
# MAIN CONFIGURATION CLASS
# ============================================================================

@dataclass
class ConsoleConfig:
    """Complete console configuration"""

    # Sub-configurations
    cache: CacheConfig = field(default_factory=CacheConfig)
    rendering: RenderingConfig = field(default_factory=RenderingConfig)
    parser: ParserConfig = field(default_factory=ParserConfig)
    panels: PanelConfig = field(default_factory=PanelConfig)

    # System-wide settings
    debug_mode: bool = False
    log_level: str = "INFO"

    def validate(self) -> bool:
        """Validate entire configuration"""
        self.cache.validate()
        self.rendering.validate()
        self.parser.validate()
        self.panels.validate()
        if logging.getLevelName(self.log_level.upper()) not in (
                logging.DEBUG, logging.INFO, logging.WARNING, logging.ERROR, logging.CRITICAL):
            raise ValueError(f"Unknown log level: {self.log_level}")
        return True


# ============================================================================
# CONFIGURATION MANAGER (SINGLETON)
# ============================================================================

def _env_flag(value: str) -> bool:
    return value.lower() in ('true', '1', 'yes')


class ConfigurationManager:
    """
    Singleton configuration manager with runtime reloading.
    Thread-safe management of global configuration with change notifications.
    """

    _instance = None
    _lock = threading.Lock()

    def __new__(cls):
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super().__new__(cls)
                    cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        if self._initialized:
            return

        self._config = ConsoleConfig()
        self._callbacks: List[Callable[[ConsoleConfig, ConsoleConfig], None]] = []
        self._config_lock = threading.RLock()
        self._load_environment_overrides(self._config)

        self._initialized = True
        logger.info("Configuration manager initialized")

    def _load_environment_overrides(self, config: ConsoleConfig):
        """Load configuration overrides from environment variables"""

        # Rendering settings
        if 'PNGN_CONSOLE_FONT_SIZE' in os.environ:
            config.rendering.font_size = int(os.environ['PNGN_CONSOLE_FONT_SIZE'])
        if 'PNGN_CONSOLE_DPI_SCALE' in os.environ:
            config.rendering.dpi_scale = float(os.environ['PNGN_CONSOLE_DPI_SCALE'])
        if 'PNGN_CONSOLE_WIDTH' in os.environ:
            config.rendering.panel_width = int(os.environ['PNGN_CONSOLE_WIDTH'])
        if 'PNGN_CONSOLE_HEIGHT' in os.environ:
            config.rendering.panel_height = int(os.environ['PNGN_CONSOLE_HEIGHT'])

        # Cache settings
        if 'PNGN_CONSOLE_WIDTH_CACHE' in os.environ:
            config.cache.width_cache_size = int(os.environ['PNGN_CONSOLE_WIDTH_CACHE'])

        # Parser and panel settings
        if 'PNGN_CONSOLE_STRIP_ESC' in os.environ:
            config.parser.strip_lone_escape = _env_flag(os.environ['PNGN_CONSOLE_STRIP_ESC'])
        if 'PNGN_CONSOLE_MAX_ENTRIES' in os.environ:
            config.panels.max_entries = int(os.environ['PNGN_CONSOLE_MAX_ENTRIES'])

        # Debug mode
        if 'PNGN_CONSOLE_DEBUG' in os.environ:
            config.debug_mode = _env_flag(os.environ['PNGN_CONSOLE_DEBUG'])
            if config.debug_mode:
                config.log_level = "DEBUG"

    @property
    def config(self) -> ConsoleConfig:
        """Get current configuration"""
        with self._config_lock:
            return self._config

    def reload(self, new_config: Optional[ConsoleConfig] = None) -> bool:
        """
        Reload configuration and notify callbacks.

        Args:
            new_config: New configuration to apply (reloads from env if None)

        Returns:
            True if reload successful
        """
        with self._config_lock:
            old_config = self._config

            try:
                if new_config is None:
                    new_config = ConsoleConfig()
                    self._load_environment_overrides(new_config)
                new_config.validate()
                self._config = new_config

                # Notify callbacks
                self._notify_callbacks(old_config, self._config)

                logger.info("Configuration reloaded successfully")
                return True

            except ValueError as e:
                logger.error(f"Configuration reload failed: {e}")
                self._config = old_config
                return False

    def register_callback(self, callback: Callable[[ConsoleConfig, ConsoleConfig], None]):
        """
        Register callback for configuration changes.

        Args:
            callback: Function called with (old_config, new_config)
        """
        self._callbacks.append(callback)

    def unregister_callback(self, callback: Callable):
        """Remove a registered callback"""
        if callback in self._callbacks:
            self._callbacks.remove(callback)

    def _notify_callbacks(self, old_config: ConsoleConfig, new_config: ConsoleConfig):
        """Notify all registered callbacks of configuration change"""
        for callback in self._callbacks:
            try:
                callback(old_config, new_config)
            except Exception as e:
                logger.error(f"Callback notification failed: {e}")


# ============================================================================
# PUBLIC API FUNCTIONS
# ============================================================================

_manager = ConfigurationManager()

def get_config() -> ConsoleConfig:
    """Get current console configuration"""
    return _manager.config

def reload_config(new_config: Optional[ConsoleConfig] = None) -> bool:
    """Reload console configuration"""
    return _manager.reload(new_config)

def register_config_callback(callback: Callable[[ConsoleConfig, ConsoleConfig], None]):
    """Register for configuration change notifications"""
    _manager.register_callback(callback)

def unregister_config_callback(callback: Callable):
    """Unregister a configuration change callback"""
    _manager.unregister_callback(callback)

def get_cache_config() -> CacheConfig:
    return _manager.config.cache

def get_rendering_config() -> RenderingConfig:
    return _manager.config.rendering

def get_parser_config() -> ParserConfig:
    return _manager.config.parser

def get_panel_config() -> PanelConfig:
    return _manager.config.panels

