#!/usr/bin/env python3
"""Sample workbook generator for manual and performance testing.

Generates synthetic trade-in, customer bid and model-library workbooks in the
layout the uploader expects:
- Row 1: Header row
- Row 2+: Data rows

Trade-in batches are written as one file per batch with a drifting unit cost,
so running ``tradein-ingest trends`` over them shows price movement.
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any

import numpy as np
import pandas as pd

MODELS = [
    ("Apple", "iPhone 12", ["64GB", "128GB"]),
    ("Apple", "iPhone 13 Pro", ["128GB", "256GB"]),
    ("Apple", "iPad Air", ["64GB"]),
    ("Samsung", "Galaxy S21", ["128GB", "256GB"]),
    ("Google", "Pixel 7", ["128GB"]),
]
GRADES = ["A", "B", "C", "D"]


def generate_library(seed: int = 42) -> pd.DataFrame:
    rng = np.random.default_rng(seed)
    rows: list[dict[str, Any]] = []
    for make, model, storages in MODELS:
        for storage in storages:
            rows.append({
                "DeviceID": len(rows) + 1000,
                "Make": make,
                "Model-Memory (clean)": f"{model} {storage}",
                "Release Year": int(rng.integers(2019, 2024)),
                "Screen Size": round(float(rng.uniform(5.4, 11.0)), 1),
            })
    return pd.DataFrame(rows)


def generate_trade_in_batch(rows: int, batch: int, seed: int = 42) -> pd.DataFrame:
    """One batch; costs drift upwards by a few percent per batch index."""
    rng = np.random.default_rng(seed + batch)
    drift = 1 + 0.03 * batch
    base_date = pd.Timestamp("2024-01-01") + pd.Timedelta(days=14 * batch)

    data: dict[str, list[Any]] = {"Date Booked": [], "Model": [], "Grade": [], "Cost": [], "IMEI": []}
    for _ in range(rows):
        make, model, storages = MODELS[int(rng.integers(len(MODELS)))]
        storage = storages[int(rng.integers(len(storages)))]
        grade = GRADES[int(rng.integers(len(GRADES)))]
        base_cost = 400 if make == "Apple" else 250
        grade_factor = 1.0 - 0.15 * GRADES.index(grade)
        data["Date Booked"].append(base_date + pd.Timedelta(days=int(rng.integers(0, 7))))
        data["Model"].append(f"{model} {storage}")
        data["Grade"].append(grade)
        data["Cost"].append(round(base_cost * grade_factor * drift, 2))
        data["IMEI"].append(str(int(rng.integers(10**14, 10**15))))
    return pd.DataFrame(data)


def generate_bids(rows: int, seed: int = 42) -> pd.DataFrame:
    rng = np.random.default_rng(seed)
    data: dict[str, list[Any]] = {"Model": [], "Grade": [], "Bid": [], "Quantity": []}
    for _ in range(rows):
        _, model, storages = MODELS[int(rng.integers(len(MODELS)))]
        data["Model"].append(f"{model} {storages[0]}")
        data["Grade"].append(GRADES[int(rng.integers(len(GRADES)))])
        data["Bid"].append(round(float(rng.uniform(150, 600)), 2))
        data["Quantity"].append(int(rng.integers(1, 20)))
    return pd.DataFrame(data)


def write_workbook(df: pd.DataFrame, output_path: Path, sheet_name: str = "Sheet1") -> None:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with pd.ExcelWriter(output_path, engine="openpyxl") as writer:
        df.to_excel(writer, sheet_name=sheet_name, index=False)
    print(f"Created {output_path} ({len(df)} rows, {len(df.columns)} columns)")


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Generate sample trade-in, bid and model-library workbooks",
    )
    parser.add_argument("output_dir", type=Path, help="Directory to write workbooks into")
    parser.add_argument("--rows", type=int, default=200, help="Rows per trade-in batch / bid sheet (default: 200)")
    parser.add_argument("--batches", type=int, default=3, help="Number of trade-in batches (default: 3)")
    parser.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    args = parser.parse_args()

    if args.rows <= 0 or args.batches <= 0:
        print("Error: --rows and --batches must be positive", file=sys.stderr)
        return 1

    out: Path = args.output_dir
    write_workbook(generate_library(args.seed), out / "model-library.xlsx")
    for batch in range(args.batches):
        write_workbook(
            generate_trade_in_batch(args.rows, batch, args.seed),
            out / f"trade-ins-batch-{batch + 1:02d}.xlsx",
        )
    write_workbook(generate_bids(args.rows, args.seed), out / "customer-bids.xlsx")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
