#!/usr/bin/env python3
"""
Monoray - A grayscale Python ray tracer

Main entry point for rendering scenes.
"""

import argparse
import logging
import sys
import time
from dataclasses import replace
from pathlib import Path

from monoray.errors import RaytracerError
from monoray.raster import RASTER_TYPES
from monoray.renderer import Renderer, RenderSettings
from monoray.scene_parser import SceneParser, default_scene

logger = logging.getLogger('monoray')


def build_settings(args, file_settings):
    """Merge render settings from the scene file with command line flags."""
    settings = file_settings if file_settings is not None else RenderSettings()

    overrides = {
        'width': args.width,
        'height': args.height,
        'num_threads': args.threads,
        'raster': args.raster,
        'output': args.output,
    }
    overrides = {key: value for key, value in overrides.items() if value is not None}
    if args.supersample:
        overrides['supersample'] = True
    if args.format is not None:
        overrides['image'] = 'PNGImage' if args.format == 'png' else 'PGMOut'

    return replace(settings, **overrides)


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description='Monoray - A grayscale Python ray tracer',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Examples:
  python main.py > default.pgm
  python main.py scenes/spheres.txt --width 512 --height 512 --output spheres.png
  python main.py scenes/room.yaml --raster ThreadIdRaster --threads 8 --output threads.png
        '''
    )

    parser.add_argument('scene', nargs='?', help='Scene file (.txt instructions, .yaml or .json)')
    parser.add_argument('--width', type=int, help='Image width (default: 128)')
    parser.add_argument('--height', type=int, help='Image height (default: 128)')
    parser.add_argument('--threads', type=int, help='Number of threads (0=auto)')
    parser.add_argument('--raster', choices=sorted(RASTER_TYPES), help='Raster type (default: ParallelRaster)')
    parser.add_argument('--supersample', action='store_true', help='Average 2x2 samples per pixel')
    parser.add_argument('--output', type=str, help='Output filename (default: PGM on stdout)')
    parser.add_argument('--format', choices=['pgm', 'png'], help='Image format (default: from extension)')
    parser.add_argument('--log-level', default='WARNING',
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'], help='Logging level')

    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format='%(asctime)s %(name)s %(levelname)s: %(message)s',
        stream=sys.stderr
    )

    try:
        scene_parser = SceneParser()
        if args.scene:
            scene = scene_parser.parse_file(args.scene)
        else:
            scene = default_scene()

        settings = build_settings(args, scene_parser.settings)
    except RaytracerError as e:
        logger.error("Invalid scene: %s", e)
        return 1

    # PGM may go to stdout, so status output goes to stderr.
    show_status = settings.output is not None
    out = sys.stderr

    if show_status:
        print("=" * 60, file=out)
        print("Monoray Ray Tracer", file=out)
        print("=" * 60, file=out)
        print(f"\nRender Settings:", file=out)
        print(f"  Resolution: {settings.width}x{settings.height}", file=out)
        print(f"  Raster: {settings.raster}{' (supersampled)' if settings.supersample else ''}", file=out)
        print(f"  Threads: {settings.num_threads}", file=out)
        print(f"  Objects in scene: {len(scene)}", file=out)

    renderer = Renderer(settings)

    # Progress tracking
    last_progress = [0]

    def progress_callback(progress: float):
        pct = int(progress * 100)
        if pct > last_progress[0]:
            last_progress[0] = pct
            bar_len = 40
            filled = int(bar_len * progress)
            bar = '█' * filled + '░' * (bar_len - filled)
            print(f'\rRendering: [{bar}] {pct}%', end='', flush=True, file=out)

    if show_status:
        renderer.set_progress_callback(progress_callback)

    start_time = time.time()
    try:
        raster = renderer.render(scene)
    except RaytracerError as e:
        logger.error("Render failed: %s", e)
        return 1
    elapsed = time.time() - start_time

    if show_status:
        print(f"\nRender completed in {elapsed:.2f} seconds", file=out)
        Path(settings.output).parent.mkdir(parents=True, exist_ok=True)
        print(f"\nSaving to: {settings.output}", file=out)

    try:
        renderer.save_image(raster)
    except (RaytracerError, ValueError, OSError) as e:
        logger.error("Could not save image: %s", e)
        return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())
