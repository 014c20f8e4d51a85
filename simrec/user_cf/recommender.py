from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Mapping

import numpy as np

from .errors import InvalidRatingError, UnknownUserError
from .similarity import RatingTable, SimilarUser, neighbor_similarities, similar_users


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Recommendation:
    item_id: str
    score: float


def validate_ratings(ratings: RatingTable) -> None:
    """Reject NaN and infinite ratings. Negative ratings are allowed."""
    for user in sorted(ratings):
        for item, rating in ratings[user].items():
            if not np.isfinite(float(rating)):
                raise InvalidRatingError(user, item, float(rating))


def candidate_items(ratings: RatingTable, target_user: str) -> List[str]:
    """Items rated by at least one other user and not rated by `target_user`, sorted."""
    if target_user not in ratings:
        raise UnknownUserError(target_user)

    seen = ratings[target_user]
    candidates: set[str] = set()
    for user, vec in ratings.items():
        if user == target_user:
            continue
        candidates.update(item for item in vec if item not in seen)
    return sorted(candidates)


def predict_score(
    ratings: RatingTable,
    target_user: str,
    item_id: str,
    similarities: Mapping[str, float],
) -> float:
    """Similarity-weighted average of the neighbors' ratings for `item_id`.

    Every non-target user that rated the item contributes, including neighbors
    with zero similarity. Users missing from `similarities` count as 0.0.
    Returns 0.0 when the absolute weights sum to zero.
    """
    num = 0.0
    den = 0.0
    for user in sorted(ratings):
        if user == target_user:
            continue
        vec = ratings[user]
        if item_id not in vec:
            continue
        sim = float(similarities.get(user, 0.0))
        num += sim * float(vec[item_id])
        den += abs(sim)
    return 0.0 if den == 0.0 else num / den


def recommend(ratings: RatingTable, target_user: str, top_n: int) -> List[Recommendation]:
    """Recommend up to `top_n` unseen items for `target_user`.

    Scoring:
    - Cosine similarity between the target and every other user
    - Candidate items: rated by some other user, not rated by the target
    - Score: sum(sim * rating) / sum(|sim|) over the users who rated the item

    Results are sorted by score descending, then item id ascending. A negative
    `top_n` is treated as zero. Raises `UnknownUserError` if the target is not
    in `ratings` and `InvalidRatingError` on NaN/inf ratings.
    """
    if target_user not in ratings:
        raise UnknownUserError(target_user)
    validate_ratings(ratings)

    limit = max(0, int(top_n))
    if limit == 0:
        return []

    sims = neighbor_similarities(ratings, target_user)
    candidates = candidate_items(ratings, target_user)

    scores: Dict[str, float] = {
        item: predict_score(ratings, target_user, item, sims) for item in candidates
    }
    ranked = sorted(scores.items(), key=lambda x: (-x[1], x[0]))

    logger.debug(
        "recommend: target=%s neighbors=%d candidates=%d top_n=%d",
        target_user,
        len(sims),
        len(candidates),
        limit,
    )
    return [Recommendation(item_id=item, score=score) for item, score in ranked[:limit]]


def _snapshot(ratings: RatingTable) -> Dict[str, Dict[str, float]]:
    """Copy `ratings` with string ids, refusing ids that collide once stringified (e.g. 1 and "1")."""
    snapshot: Dict[str, Dict[str, float]] = {}
    for user, vec in ratings.items():
        uid = str(user)
        if uid in snapshot:
            raise ValueError(f"Duplicate user id after string conversion: {uid!r}")
        items: Dict[str, float] = {}
        for item, rating in vec.items():
            iid = str(item)
            if iid in items:
                raise ValueError(f"Duplicate item id {iid!r} for user {uid!r} after string conversion")
            items[iid] = float(rating)
        snapshot[uid] = items
    return snapshot


class UserUserCFRecommender:
    """User-user CF recommender over an in-memory rating table.

    The table is copied at construction and never mutated afterwards, so one
    instance can serve concurrent readers. Nothing is cached between calls.
    """

    def __init__(self, ratings: RatingTable) -> None:
        snapshot = _snapshot(ratings)
        validate_ratings(snapshot)
        self._ratings: Dict[str, Dict[str, float]] = snapshot

        n_ratings = sum(len(v) for v in snapshot.values())
        n_items = len({i for v in snapshot.values() for i in v})
        logger.info("UserCF loaded: users=%d items=%d ratings=%d", len(snapshot), n_items, n_ratings)

    @property
    def users(self) -> List[str]:
        return sorted(self._ratings)

    def has_user(self, user_id: str) -> bool:
        return str(user_id) in self._ratings

    def rated_items(self, user_id: str) -> Dict[str, float]:
        uid = str(user_id)
        if uid not in self._ratings:
            raise UnknownUserError(uid)
        return dict(self._ratings[uid])

    def similar_users(self, user_id: str, *, top_n: int = 10, min_common_rated: int = 0) -> List[SimilarUser]:
        return similar_users(self._ratings, str(user_id), top_n=top_n, min_common_rated=min_common_rated)

    def recommend_items(self, user_id: str, *, k: int = 5) -> List[Recommendation]:
        return recommend(self._ratings, str(user_id), k)
