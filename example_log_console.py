#!/usr/bin/env python3
"""
🐧 PNGN Log Console - Log Viewer Example
========================================
Copyright (c) 2025 PNGN-Tec LLC

Renders colored log output into a PNG (one frame) or an animated GIF
(log lines revealed frame by frame). Each log file becomes one panel;
without files, a demo panel set is filled through the logging module.
"""

import argparse
import copy
import logging
import random
from pathlib import Path
from typing import List, Sequence

from config import ANSI_16_COLORS, get_config, reload_config
from pngn_colors import rgba_to_hex
from pngn_console import ConsoleView
from pngn_panels import LogPanel, PanelLogHandler

DEMO_SOURCES = ['network', 'scheduler']
DEMO_MESSAGES = [
    (logging.INFO, "connected to \033[1m10.0.0.7\033[22m:8443"),
    (logging.DEBUG, "heartbeat\tok\t\033[38;5;244m12ms\033[0m"),
    (logging.WARNING, "retrying request (attempt 2/5)"),
    (logging.INFO, "queue depth \033[38;2;255;170;0m42\033[0m"),
    (logging.ERROR, "job 17 failed: timeout"),
    (logging.INFO, "progress 10%\rprogress 100%"),
    (logging.CRITICAL, "disk almost full"),
]
FRAME_DURATION_MS = 83  # 12 FPS


def read_log_lines(path: Path) -> List[str]:
    """Read a log file as lines, keeping line endings"""
    return path.read_text(encoding='utf-8', errors='replace').splitlines(keepends=True)


def build_demo_lines(source: str, count: int, seed: int) -> List[str]:
    """Generate level-colored demo lines through PanelLogHandler"""
    scratch = LogPanel(source, max_entries=max(1, count))
    handler = PanelLogHandler(scratch)
    handler.setFormatter(logging.Formatter('%(levelname)-8s %(name)s: %(message)s'))

    demo_logger = logging.getLogger(f'demo.{source}')
    demo_logger.propagate = False
    demo_logger.setLevel(logging.DEBUG)
    demo_logger.addHandler(handler)
    try:
        rng = random.Random(f"{seed}:{source}")
        for _ in range(count):
            level, message = rng.choice(DEMO_MESSAGES)
            demo_logger.log(level, message)
    finally:
        demo_logger.removeHandler(handler)

    return [entry.message for entry in scratch.collect_logs()]


def print_palette():
    for index, entry in ANSI_16_COLORS.items():
        code = 30 + index if index < 8 else 90 + index - 8
        print(f"{index:2d}  SGR {code:<3d} {rgba_to_hex(entry['rgba'])}  {entry['name']}")


def render(sources: Sequence[str], lines: Sequence[List[str]], frames: int, output: Path):
    panels = [LogPanel(name) for name in sources]
    view = ConsoleView(panels)

    images = []
    shown = [0] * len(panels)
    for frame in range(frames):
        for index, (panel, panel_lines) in enumerate(zip(panels, lines)):
            # Reveal an even share of each log per frame
            upto = len(panel_lines) * (frame + 1) // frames
            for line in panel_lines[shown[index]:upto]:
                panel.append(line)
            shown[index] = upto
        images.append(view.render_image())

        if (frame + 1) % 12 == 0:
            print(f"  Frame {frame + 1}/{frames}")

    if len(images) == 1:
        images[0].save(output)
    else:
        images[0].save(
            output,
            format='GIF',
            save_all=True,
            append_images=images[1:],
            duration=FRAME_DURATION_MS,
            loop=0,
            optimize=False
        )

    stats = view.get_stats()
    print(f"Average frame time: {stats['avg_render_time']:.2f}ms over {stats['frames_rendered']} frames")
    view.shutdown()


def main():
    parser = argparse.ArgumentParser(description='PNGN Log Console renderer')
    parser.add_argument('logs', nargs='*', type=Path, help='log files, one panel each')
    parser.add_argument('--output', type=Path, default=None)
    parser.add_argument('--frames', type=int, default=1)
    parser.add_argument('--width', type=int, default=None)
    parser.add_argument('--height', type=int, default=None)
    parser.add_argument('--font-size', type=int, default=None)
    parser.add_argument('--dpi-scale', type=float, default=None)
    parser.add_argument('--strip-escape', action='store_true',
                        help='drop ESC bytes that do not start a sequence')
    parser.add_argument('--seed', type=int, default=12345)
    parser.add_argument('--demo-lines', type=int, default=24)
    parser.add_argument('--list-palette', action='store_true')
    args = parser.parse_args()

    if args.list_palette:
        print_palette()
        return

    config = copy.deepcopy(get_config())
    if args.width:
        config.rendering.panel_width = args.width
    if args.height:
        config.rendering.panel_height = args.height
    if args.font_size:
        config.rendering.font_size = args.font_size
    if args.dpi_scale:
        config.rendering.dpi_scale = args.dpi_scale
    if args.strip_escape:
        config.parser.strip_lone_escape = True
    if not reload_config(config):
        parser.error("invalid rendering options")

    logging.basicConfig(level=config.log_level.upper(),
                        format='%(asctime)s %(name)s %(levelname)s %(message)s')

    if args.logs:
        sources = [path.stem for path in args.logs]
        lines = [read_log_lines(path) for path in args.logs]
    else:
        sources = DEMO_SOURCES
        lines = [build_demo_lines(source, args.demo_lines, args.seed) for source in sources]

    frames = max(1, args.frames)
    output = args.output or Path('pngn_console.png' if frames == 1 else 'pngn_console.gif')

    print("🐧 PNGN Log Console")
    print("=" * 60)
    print(f"Panels: {', '.join(sources)}")
    print(f"Frames: {frames}")
    print()

    render(sources, lines, frames, output)
    print(f"\n✓ Saved {output}")


if __name__ == "__main__":
    main()
