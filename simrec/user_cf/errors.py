"""Exceptions raised by the user-user CF core."""

from __future__ import annotations


class RecommenderError(Exception):
    """Base class for recommender failures."""


class UnknownUserError(RecommenderError, KeyError):
    """The target user is not present in the rating table."""

    def __init__(self, user_id: str) -> None:
        super().__init__(f"Unknown user: {user_id}")
        self.user_id = user_id

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message.
        return str(self.args[0])


class InvalidRatingError(RecommenderError, ValueError):
    """A rating is NaN or infinite."""

    def __init__(self, user_id: str, item_id: str, rating: float) -> None:
        super().__init__(f"Invalid rating {rating!r} for user={user_id!r} item={item_id!r}")
        self.user_id = user_id
        self.item_id = item_id
        self.rating = rating
