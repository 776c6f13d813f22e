#!/usr/bin/env python3
"""Render the canonical four-sphere scene.

Builds the scene (a diffuse sphere on a diffuse ground sphere, flanked by a
fuzzy metal sphere and a glass sphere), renders it with progressive
refinement and saves the result. The output format follows the file
extension (.png, .ppm, ...).

Usage:
    python examples/render_four_spheres.py [options]

Options:
    --width WIDTH       Image width in pixels (default: 200)
    --height HEIGHT     Image height in pixels (default: 100)
    --samples SAMPLES   Number of samples per pixel (default: 100)
    --seed SEED         Seed of the random number streams (default: 0)
    --output OUTPUT     Output file path (default: four_spheres.png)
    --batch-size SIZE   Samples per progress update (default: 10)
    --arch ARCH         Taichi backend, cpu or gpu (default: cpu)
    --quiet             Suppress progress output

Example:
    python examples/render_four_spheres.py --samples 50 --output spheres.ppm
"""

from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path

import taichi as ti


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render the four-sphere scene.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--width",
        type=int,
        default=200,
        help="Image width in pixels (default: 200)",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=100,
        help="Image height in pixels (default: 100)",
    )
    parser.add_argument(
        "--samples",
        type=int,
        default=100,
        help="Number of samples per pixel (default: 100)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=0,
        help="Seed of the random number streams (default: 0)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="four_spheres.png",
        help="Output file path (default: four_spheres.png)",
    )
    parser.add_argument(
        "--batch-size",
        type=int,
        default=10,
        help="Samples per progress update (default: 10)",
    )
    parser.add_argument(
        "--arch",
        choices=("cpu", "gpu"),
        default="cpu",
        help="Taichi backend (default: cpu)",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output",
    )
    return parser.parse_args(argv)


def render_four_spheres(
    width: int = 200,
    height: int = 100,
    num_samples: int = 100,
    seed: int = 0,
    output_path: str = "four_spheres.png",
    batch_size: int = 10,
    quiet: bool = False,
) -> Path:
    """Render the four-sphere scene and save it to a file.

    Args:
        width: Image width in pixels.
        height: Image height in pixels.
        num_samples: Number of samples per pixel.
        seed: Seed of the random number streams.
        output_path: Output file path.
        batch_size: Number of samples to render between progress updates.
        quiet: If True, suppress progress output.

    Returns:
        Path to the saved image file.
    """
    # Lazy imports so Taichi is initialized before fields are declared
    from pathtracer.camera.pinhole import setup_camera
    from pathtracer.core.progressive import ProgressiveRenderer
    from pathtracer.scene.four_spheres import create_four_sphere_scene

    if not quiet:
        print(f"Creating four-sphere scene ({width}x{height})...")

    scene, camera = create_four_sphere_scene()
    setup_camera(camera)

    renderer = ProgressiveRenderer(width, height, seed=seed)

    if not quiet:
        print(f"Rendering {num_samples} samples per pixel (seed {seed})...")

    start_time = time.time()

    def progress_callback(current: int, target: int) -> None:
        if not quiet:
            elapsed = time.time() - start_time
            progress_pct = (current / target) * 100 if target > 0 else 0
            samples_per_sec = current / elapsed if elapsed > 0 else 0
            print(
                f"\r  Progress: {current}/{target} samples "
                f"({progress_pct:.1f}%) - {samples_per_sec:.1f} spp/s",
                end="",
                flush=True,
            )

    renderer.render(
        num_samples=num_samples,
        batch_size=batch_size,
        callback=progress_callback,
    )

    if not quiet:
        print()

    output_file = Path(output_path)
    renderer.save_image(str(output_file))

    total_time = time.time() - start_time
    if not quiet:
        print(f"Saved to: {output_file.absolute()}")
        print(f"Total time: {total_time:.2f}s")

    return output_file


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    ti.init(arch=ti.gpu if args.arch == "gpu" else ti.cpu)

    try:
        render_four_spheres(
            width=args.width,
            height=args.height,
            num_samples=args.samples,
            seed=args.seed,
            output_path=args.output,
            batch_size=args.batch_size,
            quiet=args.quiet,
        )
        return 0
    except (ValueError, RuntimeError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
