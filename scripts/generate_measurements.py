#!/usr/bin/env python3
"""
Generate synthetic '<station>;<temperature>' measurement files for benchmarks.
"""

import argparse
import random
from pathlib import Path

# Configuration
INPUT_DIR = Path("shared") / "input"

# (station, mean temperature)
STATIONS = [
    ("Abha", 18.0), ("Accra", 26.4), ("Addis Ababa", 16.0), ("Adelaide", 17.3),
    ("Alexandria", 20.0), ("Amsterdam", 10.2), ("Anchorage", 2.8), ("Athens", 19.2),
    ("Bangkok", 28.6), ("Barcelona", 18.2), ("Berlin", 10.3), ("Bogotá", 13.5),
    ("Cairo", 21.4), ("Cape Town", 16.2), ("Chicago", 9.8), ("Dakar", 24.0),
    ("Dubai", 26.9), ("Dublin", 9.8), ("Hanoi", 23.6), ("Helsinki", 5.9),
    ("Istanbul", 13.9), ("Jakarta", 26.7), ("Lagos", 26.8), ("Lima", 19.6),
    ("London", 11.3), ("Madrid", 15.0), ("Mexico City", 17.5), ("Montreal", 6.8),
    ("Moscow", 5.8), ("Mumbai", 27.1), ("Nairobi", 17.8), ("New York City", 12.9),
    ("Oslo", 5.7), ("Paris", 12.3), ("Reykjavík", 4.3), ("Rome", 15.2),
    ("São Paulo", 19.7), ("Seoul", 12.5), ("Singapore", 27.0), ("Stockholm", 6.6),
    ("Sydney", 17.7), ("Tokyo", 15.4), ("Toronto", 9.4), ("Vancouver", 10.4),
    ("Warsaw", 8.5), ("Yakutsk", -8.8), ("Zürich", 9.3),
]

# Target row counts
TARGETS = [
    ("measurements_small.txt", 10_000),
    ("measurements_medium.txt", 1_000_000),
    ("measurements_large.txt", 10_000_000),
]


def generate_file(output_path: Path, num_rows: int, num_stations: int, seed: int = 42) -> int:
    """
    Write num_rows random measurements drawn from the first num_stations stations.

    Args:
        output_path: Path where the output file should be written
        num_rows: Number of lines to write
        num_stations: How many distinct station names to use
        seed: Seed for reproducible output

    Returns:
        Size of the written file in bytes
    """
    if num_stations < 1 or num_stations > len(STATIONS):
        raise ValueError(f"num_stations must be between 1 and {len(STATIONS)}")

    rng = random.Random(seed)
    stations = STATIONS[:num_stations]

    print(f"Generating {output_path.name} ({num_rows} rows, {num_stations} stations)...")
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, 'w', encoding='utf-8') as f:
        for _ in range(num_rows):
            name, mean = rng.choice(stations)
            f.write(f"{name};{rng.gauss(mean, 10.0):.1f}\n")

    actual_size = output_path.stat().st_size
    print(f"  ✓ Created: {output_path} ({actual_size / (1024*1024):.2f} MB)")
    return actual_size


def main():
    parser = argparse.ArgumentParser(description="Generate measurement files")
    parser.add_argument("--rows", type=int, default=None,
                        help="Write a single file with this many rows instead of the default set")
    parser.add_argument("--output", type=Path, default=INPUT_DIR / "measurements.txt",
                        help="Output path used with --rows")
    parser.add_argument("--stations", type=int, default=len(STATIONS),
                        help="Number of distinct stations")
    parser.add_argument("--seed", type=int, default=42)
    args = parser.parse_args()

    if args.rows is not None:
        generate_file(args.output, args.rows, args.stations, args.seed)
        return 0

    total_size = 0
    for filename, num_rows in TARGETS:
        total_size += generate_file(INPUT_DIR / filename, num_rows, args.stations, args.seed)

    print(f"✓ Generation complete! Total size: {total_size / (1024*1024):.2f} MB in {INPUT_DIR}")
    return 0


if __name__ == "__main__":
    exit(main())
