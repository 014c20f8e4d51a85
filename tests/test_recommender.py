from __future__ import annotations

import copy
import math

import pytest

from simrec.user_cf.errors import InvalidRatingError, UnknownUserError
from simrec.user_cf.recommender import (
    Recommendation,
    UserUserCFRecommender,
    candidate_items,
    predict_score,
    recommend,
)
from simrec.user_cf.similarity import cosine_similarity


def test_reference_scenario_for_alice(ratings: dict[str, dict[str, float]]) -> None:
    recs = recommend(ratings, "alice", 5)

    sim_bob = cosine_similarity(ratings["alice"], ratings["bob"])
    sim_carol = cosine_similarity(ratings["alice"], ratings["carol"])
    expected_pharmacy = (sim_bob * 5.0 + sim_carol * 3.0) / (sim_bob + sim_carol)

    assert [r.item_id for r in recs] == ["new-item-x", "pharmacy-management"]
    # dave is the only rater of new-item-x, so the weighted average is his rating.
    assert recs[0].score == pytest.approx(5.0)
    assert recs[1].score == pytest.approx(expected_pharmacy, rel=1e-9)
    assert recs[1].score == pytest.approx(3.9541, abs=1e-4)


def test_never_recommends_items_already_rated(ratings: dict[str, dict[str, float]]) -> None:
    for user in ratings:
        recs = recommend(ratings, user, 100)
        assert not {r.item_id for r in recs} & set(ratings[user])


@pytest.mark.parametrize("top_n", [0, -1, -100])
def test_non_positive_top_n_returns_empty(ratings: dict[str, dict[str, float]], top_n: int) -> None:
    assert recommend(ratings, "alice", top_n) == []


def test_unknown_user_raises(ratings: dict[str, dict[str, float]]) -> None:
    with pytest.raises(UnknownUserError) as excinfo:
        recommend(ratings, "mallory", 5)
    assert excinfo.value.user_id == "mallory"
    assert "mallory" in str(excinfo.value)
    # Callers catching KeyError keep working.
    assert isinstance(excinfo.value, KeyError)


def test_unknown_user_checked_before_rating_validation() -> None:
    table = {"a": {"x": math.nan}}
    with pytest.raises(UnknownUserError):
        recommend(table, "b", 3)


def test_result_length_bounded_by_top_n_and_candidates(ratings: dict[str, dict[str, float]]) -> None:
    n_candidates = len(candidate_items(ratings, "alice"))
    for top_n in range(0, 5):
        assert len(recommend(ratings, "alice", top_n)) <= min(top_n, n_candidates)
    assert len(recommend(ratings, "alice", 1)) == 1


def test_candidates_exclude_target_items(ratings: dict[str, dict[str, float]]) -> None:
    assert candidate_items(ratings, "alice") == ["new-item-x", "pharmacy-management"]
    assert candidate_items(ratings, "dave") == ["pharmacy-management", "secure-file-storage"]


def test_zero_similarity_neighbor_still_yields_candidate() -> None:
    table = {
        "t": {"a": 1.0},
        "u": {"b": 4.0},
    }
    recs = recommend(table, "t", 5)
    assert recs == [Recommendation(item_id="b", score=0.0)]


def test_predict_score_missing_similarity_defaults_to_zero() -> None:
    table = {"t": {"a": 1.0}, "u": {"a": 1.0, "b": 4.0}, "v": {"a": 1.0, "b": 2.0}}
    assert predict_score(table, "t", "b", {"u": 1.0}) == pytest.approx(4.0)
    assert predict_score(table, "t", "b", {}) == 0.0


def test_negative_similarity_weights_use_absolute_denominator() -> None:
    table = {"t": {"a": 1.0}, "u": {"a": 1.0, "b": 4.0}, "v": {"a": -1.0, "b": 2.0}}
    # sim(u) = 1, sim(v) = -1 -> (4 - 2) / 2
    assert predict_score(table, "t", "b", {"u": 1.0, "v": -1.0}) == pytest.approx(1.0)


def test_equal_scores_are_ordered_by_item_id() -> None:
    table = {
        "t": {"a": 1.0},
        "u": {"a": 1.0, "zeta": 3.0, "beta": 3.0, "alpha": 3.0},
    }
    recs = recommend(table, "t", 10)
    assert [r.item_id for r in recs] == ["alpha", "beta", "zeta"]


def test_recommend_is_idempotent_and_does_not_mutate_input(ratings: dict[str, dict[str, float]]) -> None:
    before = copy.deepcopy(ratings)
    first = recommend(ratings, "bob", 5)
    second = recommend(ratings, "bob", 5)
    assert first == second
    assert ratings == before


def test_target_with_no_ratings_gets_zero_scores() -> None:
    table = {"t": {}, "u": {"a": 5.0}}
    assert recommend(table, "t", 3) == [Recommendation(item_id="a", score=0.0)]


def test_only_user_in_table_gets_nothing() -> None:
    assert recommend({"t": {"a": 1.0}}, "t", 3) == []


@pytest.mark.parametrize("bad", [math.nan, math.inf, -math.inf])
def test_non_finite_rating_rejected(bad: float) -> None:
    table = {"t": {"a": 1.0}, "u": {"a": 1.0, "b": bad}}
    with pytest.raises(InvalidRatingError) as excinfo:
        recommend(table, "t", 3)
    assert excinfo.value.user_id == "u"
    assert excinfo.value.item_id == "b"


def test_user_user_recommender_wraps_snapshot(ratings: dict[str, dict[str, float]]) -> None:
    rec = UserUserCFRecommender(ratings)
    ratings["alice"]["pharmacy-management"] = 1.0  # mutate caller's copy afterwards

    assert rec.users == ["alice", "bob", "carol", "dave"]
    assert rec.has_user("alice")
    assert not rec.has_user("mallory")
    assert "pharmacy-management" not in rec.rated_items("alice")
    assert [r.item_id for r in rec.recommend_items("alice", k=5)] == ["new-item-x", "pharmacy-management"]
    assert rec.similar_users("alice", top_n=1)[0].user_id == "carol"

    with pytest.raises(UnknownUserError):
        rec.recommend_items("mallory")
    with pytest.raises(UnknownUserError):
        rec.rated_items("mallory")


def test_user_user_recommender_rejects_invalid_ratings() -> None:
    with pytest.raises(InvalidRatingError):
        UserUserCFRecommender({"u": {"a": math.nan}})


def test_huge_ratings_do_not_produce_nan_scores() -> None:
    table = {"t": {"a": 1e200}, "u": {"a": 1e200, "b": 3.0}}
    recs = recommend(table, "t", 3)
    assert len(recs) == 1
    assert recs[0].item_id == "b"
    assert math.isfinite(recs[0].score)
    assert recs[0].score == pytest.approx(3.0)


def test_user_ids_colliding_as_strings_rejected() -> None:
    with pytest.raises(ValueError, match="Duplicate user id"):
        UserUserCFRecommender({1: {"a": 1.0}, "1": {"b": 2.0}})


def test_item_ids_colliding_as_strings_rejected() -> None:
    with pytest.raises(ValueError, match="Duplicate item id"):
        UserUserCFRecommender({"u": {7: 1.0, "7": 2.0}})


def test_non_string_ids_are_stringified() -> None:
    rec = UserUserCFRecommender({1: {10: 2.0}, 2: {10: 2.0, 11: 4.0}})
    assert rec.users == ["1", "2"]
    assert [r.item_id for r in rec.recommend_items("1")] == ["11"]
