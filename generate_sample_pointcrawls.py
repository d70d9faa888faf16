#!/usr/bin/env python3
"""
Generate sample pointcrawls and write them as JSON.

This runs the full pipeline:
1. Banded relief field
2. Voronoi partition of the map's right half
3. Terrain biome classification and block overrides
4. Bridge graph
5. Site content

Usage:
    python generate_sample_pointcrawls.py [seed] [site_count]

If no seed is provided, defaults to "default"
"""

import json
import sys
from collections import Counter
from pathlib import Path

from py_pointcrawl.api.main import configure_logging
from py_pointcrawl.core.pipeline import PointcrawlConfig, PointcrawlGenerator


def create_pointcrawl(seed="default", site_count=15, width=2480, height=1240):
    """Generate one pointcrawl and print a summary."""

    print("\nGenerating pointcrawl...")
    print(f"  Dimensions: {width}x{height}")
    print(f"  Sites: {site_count}")
    print(f"  Seed: {seed}")

    config = PointcrawlConfig(seed=seed, site_count=site_count,
                              map_width=width, map_height=height)
    pointcrawl = PointcrawlGenerator(config).generate()

    biomes = Counter(site.biome.value for site in pointcrawl.sites)
    print(f"  Biomes: {dict(biomes)}")
    print(f"  Bridges: {len(pointcrawl.bridges)} "
          f"({len({bridge.key for bridge in pointcrawl.bridges})} distinct pairs)")

    for site in pointcrawl.sites:
        content = pointcrawl.contents[site.id]
        print(f"  {content.title} [{site.biome.value}]")
        print(f"     Features: {content.features_line}")

    return pointcrawl


def main():
    seed = sys.argv[1] if len(sys.argv) > 1 else "default"
    site_count = int(sys.argv[2]) if len(sys.argv) > 2 else 15

    configure_logging(level="WARNING", fmt="plain")

    output_dir = Path("sample_pointcrawls")
    output_dir.mkdir(exist_ok=True)

    pointcrawl = create_pointcrawl(seed=seed, site_count=site_count)

    output_file = output_dir / f"pointcrawl_{seed}.json"
    output_file.write_text(json.dumps(pointcrawl.to_dict(), indent=2))
    print(f"\nSaved to {output_file}")


if __name__ == "__main__":
    main()
