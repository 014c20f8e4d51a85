from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .paths import get_repo_root, resolve_path


@dataclass(frozen=True)
class RecommenderConfig:
    top_n: int = 5
    top_similar: int = 10
    min_common_rated: int = 0


@dataclass(frozen=True)
class AppConfig:
    ratings_path: Path
    recommender: RecommenderConfig = field(default_factory=RecommenderConfig)


def _load_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(f"Config not found: {path}")
    obj = yaml.safe_load(path.read_text())
    if not isinstance(obj, dict):
        raise ValueError(f"Expected YAML mapping at {path}, got {type(obj)}")
    return obj


def _section(cfg: dict[str, Any], name: str) -> dict[str, Any]:
    return cfg.get(name, {}) if isinstance(cfg.get(name), dict) else {}


def load_config(path: Path | None = None, *, repo_root: Path | None = None) -> AppConfig:
    """Load `config.yaml` into an `AppConfig`.

    Relative paths (the config path itself and `dataset.ratings_path`) are
    resolved against the repo root.
    """
    root = repo_root if repo_root is not None else get_repo_root()
    config_path = resolve_path(root, path) if path is not None else (root / "config.yaml")
    cfg = _load_yaml(config_path)

    dataset_cfg = _section(cfg, "dataset")
    rec_cfg = _section(cfg, "recommender")

    recommender = RecommenderConfig(
        top_n=int(rec_cfg.get("top_n", 5)),
        top_similar=int(rec_cfg.get("top_similar", 10)),
        min_common_rated=int(rec_cfg.get("min_common_rated", 0)),
    )
    if recommender.min_common_rated < 0:
        raise ValueError("recommender.min_common_rated must be >= 0")

    ratings_path = resolve_path(root, str(dataset_cfg.get("ratings_path", "data/sample_ratings.csv")))
    return AppConfig(ratings_path=ratings_path, recommender=recommender)
