#!/usr/bin/env python3
"""
Build a landscape and drive it for a number of frames.

Uses the oscillating factor wave in place of a camera so every level
transition is exercised, and reports timing and memory figures.
"""

import argparse
import time
from pathlib import Path
from typing import Dict

import numpy as np
from tqdm import tqdm

from .config import LandscapeConfig, TerrainConfig
from .engine import Landscape, oscillating_factors
from .procgen import HeightField, build_height_field


def save_preview(field: HeightField, output_png: Path) -> None:
    """Write the field as an 8-bit greyscale PNG."""
    from PIL import Image

    hm = field.map.astype(np.float64)
    hm_norm = (hm - hm.min()) / (hm.max() - hm.min() + 1e-8)
    hm_8 = (hm_norm * 255).astype(np.uint8)
    Image.fromarray(hm_8).save(output_png)
    print(f"Saved heightmap preview: {hm_8.shape} -> {output_png}")


def run_frames(landscape: Landscape, mode: str, frames: int, frame_ms: float) -> Dict[str, float]:
    """Render `frames` frames in one mode and return timing stats."""

    max_lod = landscape.lod_levels - 1
    durations = []
    mesh_count = 0

    for frame in tqdm(range(frames), desc=f"Frames ({mode})"):
        factors = oscillating_factors(
            frame * frame_ms, landscape.x_splits, landscape.y_splits, max_lod
        )

        start = time.time()
        if mode == "lod":
            meshes = landscape.meshes_at_lod(frame % landscape.lod_levels)
        elif mode == "software":
            meshes = landscape.blend_software(factors)
        elif mode == "shader":
            meshes = landscape.blend_shader_regenerate(factors)
        else:
            meshes = landscape.blend_shader_update(factors)
        durations.append(time.time() - start)
        mesh_count = len(meshes)

    return {
        "frames": frames,
        "meshes_per_frame": mesh_count,
        "mean_frame_ms": float(np.mean(durations) * 1000.0) if durations else 0.0,
        "max_frame_ms": float(np.max(durations) * 1000.0) if durations else 0.0,
    }


def main():
    """CLI entry point for the landscape demo."""

    parser = argparse.ArgumentParser(description="Build and drive a multi-resolution landscape")
    parser.add_argument("--generation-size", type=int, default=256, help="Size the noise is evaluated at")
    parser.add_argument("--field-size", type=int, default=1024, help="Field size after upsampling")
    parser.add_argument("--splits", type=int, default=16, help="Cells per axis")
    parser.add_argument("--lod-levels", type=int, default=6, help="Pyramid depth")
    parser.add_argument("--seed", type=int, default=None, help="Noise seed (random if omitted)")
    parser.add_argument("--frames", type=int, default=60, help="Frames to drive")
    parser.add_argument("--frame-ms", type=float, default=1000.0 / 60.0, help="Simulated frame time")
    parser.add_argument("--mode", type=str, default="update",
                        choices=["lod", "software", "shader", "update"],
                        help="'lod' fixed levels, 'software' CPU blend, 'shader' regenerated "
                             "dual meshes, 'update' uniform updates only")
    parser.add_argument("--fix-row-offset", action="store_true",
                        help="Use a full -2..1 row neighbourhood when upsampling")
    parser.add_argument("--debug", action="store_true", help="Wireframe materials and construction output")
    parser.add_argument("--preview", type=str, default=None, help="Write the field to this PNG")

    args = parser.parse_args()

    terrain_config = TerrainConfig(
        generation_size=args.generation_size,
        field_size=args.field_size,
        seed=args.seed,
        fix_row_offset=args.fix_row_offset,
    )
    landscape_config = LandscapeConfig(
        x_splits=args.splits,
        y_splits=args.splits,
        lod_levels=args.lod_levels,
        debug=args.debug,
    )

    start = time.time()
    field = build_height_field(terrain_config)
    print(f"Generated {field.width} x {field.height} field in {time.time() - start:.2f}s")
    stats = field.stats()
    print(f"  Height range: {stats['min']:.3f} to {stats['max']:.3f}")

    if args.preview:
        save_preview(field, Path(args.preview))

    start = time.time()
    landscape = Landscape(field, landscape_config)
    print(f"Built {landscape.x_splits} x {landscape.y_splits} cells, "
          f"{landscape.lod_levels} levels in {time.time() - start:.2f}s")

    report = landscape.memory_report()
    print(f"  Downsampled levels: {report['downsampled_ratio']:.3f} x field")
    print(f"  Conformal tiles:    {report['conformal_ratio']:.3f} x field")

    results = run_frames(landscape, args.mode, args.frames, args.frame_ms)

    print(f"\nDrove {results['frames']} frames ({args.mode})")
    print(f"  Meshes per frame: {results['meshes_per_frame']}")
    print(f"  Mean frame: {results['mean_frame_ms']:.2f} ms, max {results['max_frame_ms']:.2f} ms")


if __name__ == "__main__":
    main()
