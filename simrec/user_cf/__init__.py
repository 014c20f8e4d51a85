"""User-user collaborative filtering (similar rating patterns) over a sparse rating table.

Core idea:
- Compute cosine similarity between the target user's ratings and every other user's
- Candidate items: rated by other users, not yet rated by the target user
- Score each candidate by the similarity-weighted average of the neighbors' ratings
"""

from .errors import InvalidRatingError, RecommenderError, UnknownUserError
from .recommender import Recommendation, UserUserCFRecommender, recommend
from .similarity import SimilarUser, cosine_similarity, similar_users

__all__ = [
    "InvalidRatingError",
    "Recommendation",
    "RecommenderError",
    "SimilarUser",
    "UnknownUserError",
    "UserUserCFRecommender",
    "cosine_similarity",
    "recommend",
    "similar_users",
]
