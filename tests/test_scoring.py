from datetime import date

import numpy as np
import pytest

from fakes import make_movie
from recommendations.services.candidates import ScoredCandidate
from recommendations.services.scoring import (
    FEATURE_WEIGHTS,
    final_scores,
    get_year,
    popularity_score,
    rank_candidates,
    rating_score,
    recency_score,
    vote_count_score,
)

TODAY = date(2026, 6, 1)


def candidate(movie, match_score=80, confidence=75, recommendation_type="genre", reasons=None):
    return ScoredCandidate(
        movie=movie,
        match_score=match_score,
        confidence=confidence,
        recommendation_type=recommendation_type,
        reasons=reasons or ["Matches your genre preferences"],
    )


def test_weights_sum_to_one():
    assert FEATURE_WEIGHTS.sum() == pytest.approx(1.0)


@pytest.mark.parametrize(
    "release_date, expected",
    [
        ("2026-03-01", 100),
        ("2027-01-01", 100),
        ("2025-12-31", 95),
        ("2024-01-01", 85),
        ("2023-01-01", 75),
        ("2021-01-01", 65),
        ("2016-01-01", 50),
        ("2015-01-01", 35),
        ("2006-01-01", 35),
        ("2005-01-01", 20),
        ("", 50),
        (None, 50),
        ("unknown", 50),
    ],
)
def test_recency_steps(release_date, expected):
    assert recency_score(release_date, today=TODAY) == expected


def test_recency_uses_current_year_by_default():
    assert recency_score(f"{date.today().year}-01-01") == 100
    assert recency_score(f"{date.today().year - 11}-01-01") == 35


def test_get_year_accepts_dates():
    assert get_year("2010-07-16") == 2010
    assert get_year(date(1999, 3, 30)) == 1999
    assert get_year(None) is None


def test_feature_scores():
    assert rating_score(8.4) == pytest.approx(84)
    assert rating_score(None) == 0
    assert popularity_score(250.0) == 100
    assert popularity_score(42.5) == 42.5
    assert vote_count_score(2500) == 50
    assert vote_count_score(20000) == 100
    assert vote_count_score(0) == 50
    assert vote_count_score(None) == 50


def test_final_score_is_weighted_sum():
    movie = make_movie(1, "x", vote_average=8.0, vote_count=5000, popularity=40.0, release_date="2026-01-01")
    scores = final_scores([candidate(movie, match_score=100)], today=TODAY)

    expected = 0.35 * 100 + 0.25 * 80 + 0.15 * 100 + 0.15 * 40 + 0.10 * 100
    assert isinstance(scores, np.ndarray)
    assert scores[0] == pytest.approx(expected)


def test_rank_sorts_descending_and_truncates():
    weak = candidate(make_movie(1, "Weak", vote_average=5.0), match_score=40)
    strong = candidate(make_movie(2, "Strong", vote_average=9.0), match_score=120)
    middle = candidate(make_movie(3, "Middle", vote_average=7.0), match_score=80)

    ranked = rank_candidates([weak, strong, middle], limit=2, today=TODAY)

    assert [m["id"] for m in ranked] == [2, 3]
    assert ranked[0]["final_score"] >= ranked[1]["final_score"]


def test_rank_is_stable_for_ties():
    movies = [candidate(make_movie(i, f"Same {i}")) for i in (10, 11, 12)]

    ranked = rank_candidates(movies, limit=10, today=TODAY)

    assert [m["id"] for m in ranked] == [10, 11, 12]


def test_rank_output_fields_are_rounded():
    item = candidate(make_movie(7, "Rounded"), match_score=87.6, confidence=91.4, reasons=["a", "b"])

    [ranked] = rank_candidates([item], limit=5, today=TODAY)

    assert ranked["match_score"] == 88
    assert ranked["confidence"] == 91
    assert ranked["reasons"] == ["a", "b"]
    assert ranked["recommendation_type"] == "genre"
    assert ranked["title"] == "Rounded"
    assert ranked["final_score"] == round(ranked["final_score"], 2)


def test_rank_empty():
    assert rank_candidates([], limit=5) == []
