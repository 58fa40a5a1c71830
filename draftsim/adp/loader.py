"""
ADP ranking file loading.

Reads ranking exports (CSV or parquet) into RawADPEntry rows. Column names
are matched case-insensitively; extra columns such as bye week or
positional ADP are ignored.
"""

import logging
import os
from pathlib import Path
from typing import List, Union

import pandas as pd

from ..datamodels.player import RawADPEntry

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = {
    "player": "name",
    "pos": "position",
    "team": "team",
    "adp": "adp",
}


def load_file(path: Union[str, Path]) -> pd.DataFrame:
    ext = os.path.splitext(str(path))[-1].lower()
    if ext == ".csv":
        return pd.read_csv(path, dtype=str, keep_default_na=False)
    elif ext == ".parquet":
        return pd.read_parquet(path)
    else:
        raise ValueError(f"Unsupported ADP file type: {ext}")


def frame_to_entries(df: pd.DataFrame) -> List[RawADPEntry]:
    """Convert a ranking DataFrame into raw ADP rows, skipping blank names."""
    df = df.rename(columns={col: str(col).strip().lower() for col in df.columns})

    missing = [col for col in REQUIRED_COLUMNS if col not in df.columns]
    if missing:
        raise ValueError(f"ADP data is missing columns: {', '.join(missing)}")

    df = df[list(REQUIRED_COLUMNS)].rename(columns=REQUIRED_COLUMNS)
    df["name"] = df["name"].fillna("").astype(str).str.strip()
    df["position"] = df["position"].fillna("").astype(str).str.strip()
    df["team"] = df["team"].fillna("").astype(str).str.strip()

    blank = df["name"] == ""
    if blank.any():
        logger.warning(f"Skipping {int(blank.sum())} ADP rows without a player name")
    df = df[~blank]

    return [
        RawADPEntry(name=row.name, position=row.position, team=row.team, adp=row.adp)
        for row in df.itertuples(index=False)
    ]


def load_adp_csv(path: Union[str, Path]) -> List[RawADPEntry]:
    """
    Load one ranking source.

    Raises:
        FileNotFoundError: if the file does not exist
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"ADP file not found: {path}")

    entries = frame_to_entries(load_file(path))
    logger.info(f"Loaded {len(entries)} ADP rows from {path.name}")
    return entries
