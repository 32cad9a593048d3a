#!/usr/bin/env python3
"""
🐧 PNGN Log Console - Console View
==================================
Copyright (c) 2025 PNGN-Tec LLC

Frame Rendering
===============
Each frame, every panel is drawn from scratch on its own canvas:
1. Collect the panel's entries and concatenate their messages
2. Draw the panel title (optional)
3. Render the text with render_styled_text

Panels are injected by the caller in display order; the view keeps no
global registry. Nothing is diffed or cached between frames except the
text width cache shared through the FontSet.

Module Interface
================
- ConsoleView: renders injected panels frame by frame
  - render_panel(): one panel onto a fresh canvas
  - render_frame(): all panels, keyed by panel name
  - render_image(): all panels stacked into one PIL image
  - get_stats(): frame timing and width cache statistics
"""

import logging
import time
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence

from PIL import Image

from config import ConsoleConfig, get_config
from pngn_canvas import Canvas, FontSet, PillowCanvas, load_fonts
from pngn_panels import LogPanel
from pngn_render import render_styled_text

logger = logging.getLogger('PNGN.Console.View')

PANEL_GAP = 2

CanvasFactory = Callable[[LogPanel], Canvas]


class ConsoleView:
    """
    Renders a fixed, ordered set of log panels.

    By default each panel gets a PillowCanvas sized from the rendering
    config; pass canvas_factory to render onto something else.
    """

    def __init__(self,
                 panels: Sequence[LogPanel],
                 config: Optional[ConsoleConfig] = None,
                 canvas_factory: Optional[CanvasFactory] = None):
        self.panels: List[LogPanel] = list(panels)
        self.config = config or get_config()
        self._canvas_factory = canvas_factory

        names = [panel.name for panel in self.panels]
        if len(set(names)) != len(names):
            logger.warning(f"Duplicate panel names {names} - later panels replace earlier ones in frames")

        self.fonts: Optional[FontSet] = None
        if canvas_factory is None:
            self.fonts = load_fonts(self.config.rendering)

        # Performance tracking
        self.render_times: List[float] = []
        self.shutting_down = False

        logger.info(f"ConsoleView initialized with {len(self.panels)} panels")

    def _new_canvas(self, panel: LogPanel) -> Canvas:
        if self._canvas_factory is not None:
            return self._canvas_factory(panel)
        rendering = self.config.rendering
        return PillowCanvas(
            width=rendering.panel_width,
            height=rendering.panel_height,
            fonts=self.fonts,
            background=rendering.background,
            padding=rendering.padding,
            faux_bold=rendering.faux_bold,
        )

    def _draw_title(self, canvas: Canvas, title: str):
        rendering = self.config.rendering
        x, y = canvas.cursor_position()
        canvas.draw_text((x, y), rendering.title_color, title, bold=True)
        canvas.set_cursor_position((x, y + canvas.line_height() + rendering.padding))

    def render_panel(self, panel: LogPanel) -> Canvas:
        """Draw one panel onto a fresh canvas and return the canvas"""
        canvas = self._new_canvas(panel)
        if self.config.rendering.show_titles:
            self._draw_title(canvas, panel.name)
        render_styled_text(panel.text(), canvas,
                           strip_lone_escape=self.config.parser.strip_lone_escape)
        return canvas

    def render_frame(self) -> Dict[str, Canvas]:
        """
        Render every panel once.

        Returns:
            Canvases keyed by panel name, in panel order
        """
        if self.shutting_down:
            return {}

        start_time = time.time()
        frame = {panel.name: self.render_panel(panel) for panel in self.panels}

        render_time = (time.time() - start_time) * 1000
        self.render_times.append(render_time)
        logger.debug(f"Frame {len(self.render_times)} rendered in {render_time:.2f}ms")
        return frame

    def compose(self, canvases: Iterable[PillowCanvas]) -> Image.Image:
        """
        Stack panel images vertically, separated by a small gap.

        Only image-backed canvases (PillowCanvas or anything exposing a PIL
        `image`) can be composed; a RecordingCanvas raises TypeError.
        """
        images = []
        for canvas in canvases:
            image = getattr(canvas, 'image', None)
            if not isinstance(image, Image.Image):
                raise TypeError(f"Cannot compose {type(canvas).__name__}: no PIL image to stack")
            images.append(image)
        rendering = self.config.rendering
        if not images:
            return Image.new('RGBA', (rendering.panel_width, rendering.panel_height),
                             rendering.background)

        width = max(image.width for image in images)
        height = sum(image.height for image in images) + PANEL_GAP * (len(images) - 1)
        frame = Image.new('RGBA', (width, height), (0, 0, 0, 255))
        y = 0
        for image in images:
            frame.paste(image, (0, y))
            y += image.height + PANEL_GAP
        return frame

    def render_image(self) -> Image.Image:
        """Render every panel and stack the results into one image (needs image-backed canvases)"""
        return self.compose(self.render_frame().values())

    def shutdown(self):
        """Clean shutdown"""
        logger.info("Shutting down console view...")
        self.shutting_down = True
        self.fonts = None
        logger.info("Console view shutdown complete")

    # ============================================================================
    # STATISTICS
    # ============================================================================

    def get_stats(self) -> Dict[str, Any]:
        """Get frame timing and width cache statistics"""
        if not self.render_times:
            return {'status': 'No frames yet'}

        stats: Dict[str, Any] = {
            'avg_render_time': sum(self.render_times) / len(self.render_times),
            'min_render_time': min(self.render_times),
            'max_render_time': max(self.render_times),
            'frames_rendered': len(self.render_times),
            'panels': len(self.panels),
        }

        if self.fonts is not None:
            stats['font_path'] = self.fonts.path
            stats['bold_face'] = self.fonts.bold is not None
            stats['width_cache'] = self.fonts.widths.get_stats()

        return stats
