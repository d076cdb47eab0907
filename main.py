#!/usr/bin/env python3
"""
whittrace - A Python Whitted-style Ray Tracer

Main entry point for rendering scene files.
"""

import argparse
import logging
import sys
import time
from pathlib import Path

from whittrace.renderer import RayTracer, RenderSettings, save_image
from whittrace.scene import SceneGraphError
from whittrace.scene_parser import SceneParseError, load_scene
from whittrace.textures import MissingTextureError


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description='whittrace - A Python Whitted-style Ray Tracer',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Examples:
  python main.py --scene scenes/spheres.yaml --width 512 --height 384 --output render.png
  python main.py --scene scenes/mirror.yaml --width 512 --height 384 \\
      --enable-shadows --enable-reflections --enable-parallelism --output mirror.png
        '''
    )

    parser.add_argument('--width', type=int, required=True, help='Width (pixels) of the output image')
    parser.add_argument('--height', type=int, required=True, help='Height (pixels) of the output image')
    parser.add_argument('--scene', type=str, required=True, help='Path to the YAML/JSON scene file')
    parser.add_argument('--output', type=str, default='output/render.png', help='Output filename')
    parser.add_argument('--textures', type=str, default=None,
                        help='Directory texture images are relative to (default: scene directory)')
    parser.add_argument('--enable-shadows', action='store_true', help='Enable shadows')
    parser.add_argument('--enable-reflections', action='store_true', help='Enable reflective surfaces')
    parser.add_argument('--enable-texture', action='store_true', help='Enable texture mapping')
    parser.add_argument('--enable-parallelism', action='store_true',
                        help='Enable parallel processing of pixels')
    parser.add_argument('--samples', type=int, default=1, help='Samples per pixel (default: 1)')
    parser.add_argument('--threads', type=int, default=0, help='Number of threads (0=auto)')
    parser.add_argument('--verbose', action='store_true', help='Show debug logging')

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s %(name)s %(levelname)s: %(message)s'
    )

    try:
        settings = RenderSettings(
            width=args.width,
            height=args.height,
            enable_shadows=args.enable_shadows,
            enable_reflections=args.enable_reflections,
            enable_texture=args.enable_texture,
            enable_parallelism=args.enable_parallelism,
            samples=args.samples,
            num_threads=args.threads
        )
        scene = load_scene(args.scene, args.textures)
    except (ValueError, SceneParseError, SceneGraphError, FileNotFoundError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"Rendering {args.scene} as {settings.width}x{settings.height} image")
    print(f"  Shapes: {len(scene.shapes)}")
    print(f"  Lights: {len(scene.lights)}")

    tracer = RayTracer(scene, settings)

    # Progress tracking
    total_pixels = settings.width * settings.height
    finished = [0]
    last_progress = [-1]

    def progress_callback():
        finished[0] += 1
        pct = finished[0] * 100 // total_pixels
        if pct > last_progress[0]:
            last_progress[0] = pct
            bar_len = 40
            filled = bar_len * finished[0] // total_pixels
            bar = '█' * filled + '░' * (bar_len - filled)
            print(f'\rRendering: [{bar}] {pct}% {finished[0]:>7} / {total_pixels} pixels',
                  end='', flush=True)

    start_time = time.time()
    try:
        image = tracer.render(progress_callback)
    except MissingTextureError as e:
        print(f"\nError: {e}", file=sys.stderr)
        return 1

    elapsed = time.time() - start_time
    print(f"\nRender completed in {elapsed:.2f} seconds")

    # Ensure output directory exists
    output_path = Path(args.output)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    save_image(image, str(output_path))
    print(f"Output saved as {output_path}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
