from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import pandas as pd

from ..config import load_config
from ..data import load_ratings_table, sample_ratings
from ..utils import setup_logging
from .errors import UnknownUserError
from .recommender import UserUserCFRecommender


logger = logging.getLogger(__name__)


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="User-user collaborative filtering (cosine similarity)")
    p.add_argument("--user-id", type=str, required=True, help="Target user id")
    p.add_argument("--k", type=int, default=None, help="How many item recommendations to return")
    p.add_argument("--top-similar", type=int, default=None, help="How many similar users to show")
    p.add_argument("--min-common-rated", type=int, default=None, help="Min number of commonly-rated items")
    p.add_argument("--ratings", type=Path, default=None, help="Ratings CSV (userId,itemId,rating)")
    p.add_argument("--sample", action="store_true", help="Use the built-in sample ratings")
    p.add_argument("--config", type=Path, default=None, help="Path to config YAML")
    p.add_argument("--log-level", type=str, default="WARNING", help="Logging level")
    return p


def main(argv: list[str] | None = None) -> int:
    args = build_arg_parser().parse_args(argv)
    setup_logging(args.log_level.upper())

    if args.sample:
        ratings = sample_ratings()
        rec_cfg = None
    else:
        cfg = load_config(args.config)
        rec_cfg = cfg.recommender
        ratings = load_ratings_table(args.ratings if args.ratings is not None else cfg.ratings_path)

    k = args.k if args.k is not None else (rec_cfg.top_n if rec_cfg else 5)
    top_similar = args.top_similar if args.top_similar is not None else (rec_cfg.top_similar if rec_cfg else 10)
    min_common = (
        args.min_common_rated
        if args.min_common_rated is not None
        else (rec_cfg.min_common_rated if rec_cfg else 0)
    )

    rec = UserUserCFRecommender(ratings)
    try:
        sims = rec.similar_users(args.user_id, top_n=int(top_similar), min_common_rated=int(min_common))
        recs = rec.recommend_items(args.user_id, k=int(k))
    except UnknownUserError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    print("\n=== Similar Users ===")
    if sims:
        df_s = pd.DataFrame([s.__dict__ for s in sims])
        print(df_s.to_string(index=False, float_format=lambda x: f"{x:.4f}"))
    else:
        print("No similar users found (try lowering min_common_rated).")

    print(f"\n=== Recommendations for {args.user_id} ===")
    if recs:
        df_r = pd.DataFrame([r.__dict__ for r in recs])
        print(df_r.to_string(index=False, float_format=lambda x: f"{x:.4f}"))
    else:
        print("No recommendations found.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
