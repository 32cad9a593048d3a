"""Tests for config -- dataclass validation and the configuration manager."""

from __future__ import annotations

from typing import Iterator

import pytest

from config import (
    CacheConfig,
    ConfigurationManager,
    ConsoleConfig,
    PanelConfig,
    RenderingConfig,
    get_config,
    get_parser_config,
    get_rendering_config,
    register_config_callback,
    reload_config,
    unregister_config_callback,
)

ENV_VARS = [
    "PNGN_CONSOLE_FONT_SIZE",
    "PNGN_CONSOLE_DPI_SCALE",
    "PNGN_CONSOLE_WIDTH",
    "PNGN_CONSOLE_HEIGHT",
    "PNGN_CONSOLE_WIDTH_CACHE",
    "PNGN_CONSOLE_STRIP_ESC",
    "PNGN_CONSOLE_MAX_ENTRIES",
    "PNGN_CONSOLE_DEBUG",
]


@pytest.fixture(autouse=True)
def restore_config(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    yield
    reload_config(ConsoleConfig())


# ---------------------------------------------------------------------------
# validation
# ---------------------------------------------------------------------------


class TestValidation:
    def test_defaults_are_valid(self) -> None:
        assert ConsoleConfig().validate() is True

    @pytest.mark.parametrize(
        "config",
        [
            RenderingConfig(font_size=0),
            RenderingConfig(dpi_scale=0),
            RenderingConfig(panel_width=0),
            RenderingConfig(padding=-1),
            CacheConfig(width_cache_size=0),
            CacheConfig(width_cache_memory_mb=0),
            PanelConfig(max_entries=0),
            ConsoleConfig(log_level="LOUD"),
        ],
    )
    def test_invalid_values_raise(self, config) -> None:
        with pytest.raises(ValueError):
            config.validate()

    def test_log_level_is_case_insensitive(self) -> None:
        assert ConsoleConfig(log_level="warning").validate() is True

    def test_pixel_font_size(self) -> None:
        assert RenderingConfig(font_size=16, dpi_scale=1.5).pixel_font_size == 24
        assert RenderingConfig(font_size=1, dpi_scale=0.1).pixel_font_size == 1


# ---------------------------------------------------------------------------
# ConfigurationManager
# ---------------------------------------------------------------------------


class TestConfigurationManager:
    def test_singleton(self) -> None:
        assert ConfigurationManager() is ConfigurationManager()

    def test_reload_applies_new_config(self) -> None:
        new = ConsoleConfig(rendering=RenderingConfig(font_size=20))
        assert reload_config(new) is True
        assert get_config() is new
        assert get_rendering_config().font_size == 20

    def test_invalid_reload_keeps_previous(self) -> None:
        before = get_config()
        assert reload_config(ConsoleConfig(rendering=RenderingConfig(font_size=-1))) is False
        assert get_config() is before

    def test_callbacks_receive_old_and_new(self) -> None:
        seen = []

        def callback(old, new) -> None:
            seen.append((old, new))

        register_config_callback(callback)
        try:
            before = get_config()
            new = ConsoleConfig()
            reload_config(new)
        finally:
            unregister_config_callback(callback)
        assert seen == [(before, new)]

    def test_failing_callback_does_not_block_reload(self) -> None:
        def callback(old, new) -> None:
            raise RuntimeError("listener broke")

        register_config_callback(callback)
        try:
            assert reload_config(ConsoleConfig()) is True
        finally:
            unregister_config_callback(callback)


# ---------------------------------------------------------------------------
# environment overrides
# ---------------------------------------------------------------------------


class TestEnvironmentOverrides:
    def test_rendering_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PNGN_CONSOLE_FONT_SIZE", "20")
        monkeypatch.setenv("PNGN_CONSOLE_WIDTH", "800")
        assert reload_config() is True
        rendering = get_rendering_config()
        assert rendering.font_size == 20
        assert rendering.panel_width == 800

    def test_strip_escape_flag(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PNGN_CONSOLE_STRIP_ESC", "yes")
        reload_config()
        assert get_parser_config().strip_lone_escape is True

    def test_debug_raises_log_level(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PNGN_CONSOLE_DEBUG", "1")
        reload_config()
        assert get_config().debug_mode is True
        assert get_config().log_level == "DEBUG"

    def test_malformed_value_rejects_reload(self, monkeypatch: pytest.MonkeyPatch) -> None:
        before = get_config()
        monkeypatch.setenv("PNGN_CONSOLE_FONT_SIZE", "big")
        assert reload_config() is False
        assert get_config() is before

    def test_out_of_range_value_rejects_reload(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PNGN_CONSOLE_MAX_ENTRIES", "0")
        assert reload_config() is False
