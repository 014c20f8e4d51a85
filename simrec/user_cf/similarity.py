"""Cosine similarity between sparse user rating vectors."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Mapping

import numpy as np

from .errors import UnknownUserError


logger = logging.getLogger(__name__)

RatingVector = Mapping[str, float]
RatingTable = Mapping[str, RatingVector]


@dataclass(frozen=True)
class SimilarUser:
    user_id: str
    similarity: float
    common_rated: int


def _scaled(vec: RatingVector) -> Dict[str, float]:
    """Divide every rating by the largest magnitude so squares neither overflow nor underflow.

    Returns an empty dict for an all-zero vector.
    """
    keys = sorted(vec)
    values = np.fromiter((vec[k] for k in keys), dtype=np.float64, count=len(keys))
    peak = float(np.max(np.abs(values)))
    if peak == 0.0:
        return {}
    return dict(zip(keys, (values / peak).tolist()))


def _l2_norm(vec: Mapping[str, float]) -> float:
    values = np.fromiter((vec[k] for k in sorted(vec)), dtype=np.float64, count=len(vec))
    return float(np.linalg.norm(values))


def cosine_similarity(a: RatingVector, b: RatingVector) -> float:
    """Cosine similarity of two sparse rating vectors.

    The dot product only runs over items rated in both vectors, while each norm
    covers the full vector. Empty vectors and zero-norm vectors score 0.0.
    Keys are visited in sorted order so the result does not depend on dict
    insertion order and is symmetric in its arguments. Each vector is rescaled
    to a peak magnitude of 1.0 first; cosine is scale-invariant, and this keeps
    ratings like 1e-200 or 1e200 finite.
    """
    if not a or not b:
        return 0.0

    a_s = _scaled(a)
    b_s = _scaled(b)
    if not a_s or not b_s:
        return 0.0

    norm_a = _l2_norm(a_s)
    norm_b = _l2_norm(b_s)

    common = sorted(a_s.keys() & b_s.keys())
    if not common:
        return 0.0
    a_common = np.array([a_s[k] for k in common], dtype=np.float64)
    b_common = np.array([b_s[k] for k in common], dtype=np.float64)
    dot = float(np.dot(a_common, b_common))
    return dot / (norm_a * norm_b)


def neighbor_similarities(ratings: RatingTable, target_user: str) -> Dict[str, float]:
    """Similarity of every other user to `target_user`, keyed by user id (sorted)."""
    if target_user not in ratings:
        raise UnknownUserError(target_user)

    target = ratings[target_user]
    sims: Dict[str, float] = {}
    for user in sorted(ratings):
        if user == target_user:
            continue
        sims[user] = cosine_similarity(target, ratings[user])
    return sims


def similar_users(
    ratings: RatingTable,
    target_user: str,
    *,
    top_n: int = 10,
    min_common_rated: int = 0,
) -> List[SimilarUser]:
    """Rank the neighbors of `target_user` by cosine similarity.

    Neighbors sharing fewer than `min_common_rated` rated items are skipped.
    Equal similarities are ordered by user id.
    """
    sims = neighbor_similarities(ratings, target_user)
    target_items = set(ratings[target_user])

    ranked = sorted(sims.items(), key=lambda x: (-x[1], x[0]))

    out: List[SimilarUser] = []
    limit = max(0, int(top_n))
    for user, sim in ranked:
        if len(out) >= limit:
            break
        common = len(target_items & set(ratings[user]))
        if common < int(min_common_rated):
            continue
        out.append(SimilarUser(user_id=user, similarity=sim, common_rated=common))

    logger.debug("similar_users: target=%s neighbors=%d returned=%d", target_user, len(sims), len(out))
    return out
