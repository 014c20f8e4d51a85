from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Tuple

import numpy as np
import pandas as pd

from .user_cf.errors import InvalidRatingError


logger = logging.getLogger(__name__)

REQUIRED_COLUMNS: Tuple[str, ...] = ("userId", "itemId", "rating")

RatingTableDict = Dict[str, Dict[str, float]]


def sample_ratings() -> RatingTableDict:
    """Small in-memory rating table used by the CLI demo and the tests."""
    return {
        "alice": {"maths-puzzle-app": 5.0, "secure-file-storage": 3.0, "e-learning-app": 4.0},
        "bob": {"maths-puzzle-app": 4.0, "pharmacy-management": 5.0, "secure-file-storage": 2.5},
        "carol": {"secure-file-storage": 4.5, "e-learning-app": 4.0, "pharmacy-management": 3.0},
        "dave": {"maths-puzzle-app": 2.0, "e-learning-app": 3.5, "new-item-x": 5.0},
    }


def load_ratings_table(path: Path) -> RatingTableDict:
    """Load a `userId,itemId,rating` CSV into a nested {user: {item: rating}} dict.

    Notes
    -----
    Ids are read as strings so values like "007" keep their leading zeros.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Ratings file not found: {path}")

    df = pd.read_csv(path, dtype={"userId": "string", "itemId": "string", "rating": "float64"})
    table = ratings_table_from_frame(df)
    logger.info("Loaded ratings: users=%d ratings=%d path=%s", len(table), len(df), path)
    return table


def validate_ratings_frame(df: pd.DataFrame) -> None:
    """Validate that required columns exist and basic constraints hold."""
    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"ratings missing columns: {missing}")

    if df["userId"].isna().any() or df["itemId"].isna().any():
        raise ValueError("ratings contain empty userId/itemId values")

    if df.duplicated(subset=["userId", "itemId"]).any():
        raise ValueError("ratings contain duplicate (userId, itemId) rows")

    values = df["rating"].astype("float64").to_numpy()
    bad = ~np.isfinite(values)
    if bad.any():
        row = df.loc[bad].iloc[0]
        raise InvalidRatingError(str(row["userId"]), str(row["itemId"]), float(row["rating"]))


def ratings_table_from_frame(df: pd.DataFrame) -> RatingTableDict:
    validate_ratings_frame(df)

    table: RatingTableDict = {}
    for row in df[list(REQUIRED_COLUMNS)].itertuples(index=False):
        table.setdefault(str(row.userId), {})[str(row.itemId)] = float(row.rating)
    return table
