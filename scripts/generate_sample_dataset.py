"""Generate a synthetic housing CSV for trying the price estimator locally."""

from __future__ import annotations

import argparse
from pathlib import Path

import numpy as np
import pandas as pd


def build_frame(rows: int, seed: int) -> pd.DataFrame:
    rng = np.random.default_rng(seed)
    sqft = rng.integers(600, 4000, size=rows)
    bedrooms = rng.integers(1, 6, size=rows)
    year = rng.integers(1950, 2024, size=rows)
    noise = rng.normal(0, 15_000, size=rows)
    price = 120 * sqft + 9_000 * bedrooms + 800 * (year - 1950) + 40_000 + noise
    return pd.DataFrame(
        {
            "sqft": sqft,
            "bedrooms": bedrooms,
            "neighbourhood": rng.choice(["north", "south", "east", "west"], size=rows),
            "year_built": year,
            "price": price.round(0),
        }
    )


def main() -> int:
    parser = argparse.ArgumentParser(description="Generate a sample housing dataset.")
    parser.add_argument("--output", default="sample_data/housing.csv", help="Output CSV path.")
    parser.add_argument("--rows", type=int, default=250, help="Number of rows to generate.")
    parser.add_argument("--seed", type=int, default=42, help="Random seed.")
    args = parser.parse_args()

    if args.rows < 5:
        print("At least 5 rows are needed to train a model.")
        return 1

    output = Path(args.output)
    output.parent.mkdir(parents=True, exist_ok=True)
    build_frame(args.rows, args.seed).to_csv(output, index=False)
    print(f"Saved {args.rows} rows to {output}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
