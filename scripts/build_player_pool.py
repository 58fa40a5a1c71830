import argparse
import os
import re

import pandas as pd

from draftsim.adp.loader import frame_to_entries, load_file
from draftsim.adp.reconciler import reconcile


def extract_player_and_team(player_str):
    """Extracts player name and team from 'Josh Allen (BUF)'"""
    match = re.match(r"^(.*?)\s*\(([A-Z]{2,3})\)$", str(player_str).strip())
    if match:
        return match.group(1).strip(), match.group(2)
    return str(player_str).strip(), ""


def clean_adp_frame(df: pd.DataFrame) -> pd.DataFrame:
    """Split combined 'Name (TEAM)' player cells when there is no team column."""
    df.columns = [str(col).strip().lower().replace(" ", "_") for col in df.columns]

    if "player" in df.columns and "team" not in df.columns:
        df[["player", "team"]] = df["player"].apply(lambda x: pd.Series(extract_player_and_team(x)))
    if "pos" not in df.columns and "position" in df.columns:
        df = df.rename(columns={"position": "pos"})
    if "adp" not in df.columns and "avg" in df.columns:
        df = df.rename(columns={"avg": "adp"})

    return df


def save_file(df: pd.DataFrame, path: str, fmt: str):
    if os.path.dirname(path):
        os.makedirs(os.path.dirname(path), exist_ok=True)
    if fmt == "parquet":
        df.to_parquet(path, index=False)
    elif fmt == "csv":
        df.to_csv(path, index=False)
    else:
        raise ValueError(f"Unsupported output format: {fmt}")
    print(f"Saved player pool to {path}")


def build_player_pool(source_a: str, source_b: str, output_path: str, output_format: str = "csv"):
    entries_a = frame_to_entries(clean_adp_frame(load_file(source_a)))
    entries_b = frame_to_entries(clean_adp_frame(load_file(source_b))) if source_b else []

    pool = reconcile(entries_a, entries_b)
    df = pd.DataFrame([player.model_dump() for player in pool])

    save_file(df, output_path, output_format)
    print(f"Reconciled {len(entries_a)} + {len(entries_b)} rows into {len(pool)} players")
    return df


def main():
    parser = argparse.ArgumentParser(description="Reconcile two ADP sources into a ranked player pool")

    parser.add_argument("--source-a", type=str, required=True, help="Primary ADP file (CSV or Parquet)")
    parser.add_argument("--source-b", type=str, help="Secondary ADP file (CSV or Parquet)")
    parser.add_argument("--output", type=str, default="player_pool.csv", help="Output path")
    parser.add_argument("--format", type=str, default="csv", choices=["csv", "parquet"], help="Output format")

    args = parser.parse_args()
    build_player_pool(args.source_a, args.source_b, args.output, args.format)


if __name__ == "__main__":
    main()
