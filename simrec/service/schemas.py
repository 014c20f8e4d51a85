"""Pydantic schemas for the online recommendation API."""

from __future__ import annotations

from pydantic import BaseModel, Field


class SimilarUsersRequest(BaseModel):
    """Request for the similar-users endpoint."""

    userId: str = Field(..., min_length=1, description="User id present in the ratings table")
    top_n: int = Field(10, ge=0, le=1000, description="Number of similar users to return")
    min_common_rated: int = Field(0, ge=0, le=100000, description="Minimum number of commonly-rated items")


class SimilarUserItem(BaseModel):
    user_id: str
    similarity: float
    common_rated: int


class SimilarUsersResponse(BaseModel):
    userId: str
    top_n: int
    results: list[SimilarUserItem]


class UserCFRecommendRequest(BaseModel):
    """Request for user-user CF recommendations."""

    userId: str = Field(..., min_length=1, description="User id present in the ratings table")
    k: int = Field(5, ge=0, le=1000, description="Number of item recommendations to return")


class UserCFRecommendationItem(BaseModel):
    item_id: str
    score: float


class UserCFRecommendResponse(BaseModel):
    userId: str
    k: int
    results: list[UserCFRecommendationItem]


class UsersResponse(BaseModel):
    count: int
    users: list[str]
