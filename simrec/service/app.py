"""FastAPI service entrypoint for the user-user CF recommender."""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, HTTPException

from ..config import load_config
from ..data import load_ratings_table
from ..paths import get_repo_root, resolve_path
from ..user_cf.recommender import UserUserCFRecommender
from ..utils import setup_logging
from .schemas import (
    SimilarUsersRequest,
    SimilarUsersResponse,
    UserCFRecommendRequest,
    UserCFRecommendResponse,
    UsersResponse,
)

logger = logging.getLogger(__name__)


def _path_from_env(name: str, default: Path) -> Path:
    """Path from env var `name`; blank or unset falls back to `default`, relative values resolve from the repo root."""
    raw = (os.getenv(name) or "").strip()
    return resolve_path(get_repo_root(), raw) if raw else default


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(os.getenv("LOG_LEVEL", "INFO"))

    repo_root = get_repo_root()
    config_path = _path_from_env("CONFIG_PATH", repo_root / "config.yaml")
    cfg = load_config(config_path)
    ratings_path = _path_from_env("RATINGS_PATH", cfg.ratings_path)

    logger.info("Starting service with config=%s ratings=%s", config_path, ratings_path)
    app.state.config = cfg
    app.state.user_cf = UserUserCFRecommender(load_ratings_table(ratings_path))
    yield


app = FastAPI(title="User-User CF Recommendation Service", lifespan=lifespan)


def _user_cf(app_: FastAPI) -> UserUserCFRecommender:
    rec = getattr(app_.state, "user_cf", None)
    if rec is None:
        raise HTTPException(status_code=503, detail="UserCF recommender not initialized")
    return rec


@app.get("/health")
def health() -> dict:
    return {"status": "ok", "ready": getattr(app.state, "user_cf", None) is not None}


@app.get("/users", response_model=UsersResponse)
def users() -> dict:
    """List the user ids known to the recommender."""
    rec = _user_cf(app)
    ids = rec.users
    return {"count": len(ids), "users": ids}


@app.post("/user_cf/similar_users", response_model=SimilarUsersResponse)
def user_cf_similar_users(req: SimilarUsersRequest) -> dict:
    """Return users with similar rating patterns (cosine over raw ratings)."""
    rec = _user_cf(app)
    try:
        sims = rec.similar_users(req.userId, top_n=int(req.top_n), min_common_rated=int(req.min_common_rated))
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc

    return {
        "userId": req.userId,
        "top_n": int(req.top_n),
        "results": [s.__dict__ for s in sims],
    }


@app.post("/user_cf/recommend", response_model=UserCFRecommendResponse)
def user_cf_recommend(req: UserCFRecommendRequest) -> dict:
    """Recommend unseen items scored by the similarity-weighted ratings of other users."""
    rec = _user_cf(app)
    try:
        recs = rec.recommend_items(req.userId, k=int(req.k))
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc

    return {
        "userId": req.userId,
        "k": int(req.k),
        "results": [r.__dict__ for r in recs],
    }
