import pytest

from fakes import INCEPTION, NOLAN, SCI_FI, FakeTMDBClient, build_catalog, make_movie
from recommendations.services.candidates import CandidatePool, Contribution
from recommendations.services.strategies import (
    STRATEGIES,
    RecommendationSignals,
    apply_keyword_boost,
    director_strategy,
    diversity_strategy,
    extract_director_ids,
    genre_strategy,
    hidden_gem_strategy,
    parse_search_terms,
    similar_strategy,
    trending_strategy,
    unused_diversity_genres,
)


def test_parse_search_terms():
    assert parse_search_terms(" Dream, HEIST ,, space ") == ["dream", "heist", "space"]
    assert parse_search_terms("") == []
    assert parse_search_terms(" , ") == []


def test_similar_scores_by_position_and_caches_details(fake_tmdb):
    signals = RecommendationSignals(liked_movie_ids=[INCEPTION])

    contributions = similar_strategy(fake_tmdb, signals, CandidatePool())

    assert len(contributions) == 8
    assert [c.score for c in contributions[:3]] == [100, 95, 90]
    assert contributions[0].confidence == pytest.approx(85 + 8.4 / 10 * 15)
    assert all(c.recommendation_type == "similar" for c in contributions)
    assert contributions[0].merge_weight == 0.5
    assert INCEPTION in signals.liked_details


def test_similar_uses_at_most_five_liked_movies():
    client = FakeTMDBClient()
    signals = RecommendationSignals(liked_movie_ids=list(range(1, 9)))

    similar_strategy(client, signals, CandidatePool())

    requested = sorted(args[1] for args in client.calls if args[0] == "get_movie_recommendations")
    assert requested == [1, 2, 3, 4, 5]


def test_similar_still_contributes_without_details():
    client = build_catalog(related={INCEPTION: [make_movie(1, "One")], 99: [make_movie(2, "Two")]}, details={})
    signals = RecommendationSignals(liked_movie_ids=[INCEPTION, 12345, 99])

    contributions = similar_strategy(client, signals, CandidatePool())

    assert [c.movie["id"] for c in contributions] == [1, 2]
    assert signals.liked_details == {}


def test_genre_strategy_queries_top_rated(fake_tmdb):
    signals = RecommendationSignals(genre_ids=[SCI_FI])

    contributions = genre_strategy(fake_tmdb, signals, CandidatePool())

    assert fake_tmdb.discover_calls[0] == {"with_genres": SCI_FI, "sort_by": "vote_average.desc", "vote_count_gte": 500}
    assert [c.score for c in contributions] == [80, 76, 72]
    assert contributions[0].merge_reason == "Perfect genre match"


def test_extract_director_ids_is_distinct_and_ordered():
    details = {
        1: {"credits": {"crew": [{"id": 5, "job": "Director"}, {"id": 6, "job": "Writer"}]}},
        2: {"credits": {"crew": [{"id": 5, "job": "Director"}, {"id": 7, "job": "Director"}]}},
        3: {"credits": {"crew": [{"id": 8, "job": "Director"}]}},
        4: {},
    }

    assert extract_director_ids(details) == [5, 7]
    assert extract_director_ids(details, limit=5) == [5, 7, 8]


def test_director_strategy_uses_cached_credits(fake_tmdb):
    signals = RecommendationSignals(liked_movie_ids=[INCEPTION])
    signals.liked_details[INCEPTION] = fake_tmdb.details[INCEPTION]

    contributions = director_strategy(fake_tmdb, signals, CandidatePool())

    assert fake_tmdb.discover_calls[0]["with_crew"] == NOLAN
    assert [c.movie["id"] for c in contributions] == [155, 49026]
    assert all(c.score == 75 and c.confidence == 82 for c in contributions)


def test_hidden_gem_strategy_filters(fake_tmdb):
    contributions = hidden_gem_strategy(fake_tmdb, RecommendationSignals(), CandidatePool())

    assert fake_tmdb.discover_calls[0] == {
        "sort_by": "vote_average.desc",
        "vote_count_gte": 300,
        "vote_count_lte": 3000,
        "vote_average_gte": 7.5,
    }
    assert all(c.merge_weight is None for c in contributions)
    assert contributions[0].reason == "Hidden gem - highly rated but underrated"


def test_trending_only_tops_up_thin_pools(fake_tmdb):
    pool = CandidatePool()
    pool.apply_all(
        Contribution(movie=make_movie(i, f"Movie {i}"), score=50, confidence=50, reason="r", recommendation_type="genre")
        for i in range(1, 16)
    )

    assert trending_strategy(fake_tmdb, RecommendationSignals(), pool) == []
    assert fake_tmdb.calls == []

    contributions = trending_strategy(fake_tmdb, RecommendationSignals(), CandidatePool())
    assert [c.movie["id"] for c in contributions] == [693134, 157336]


def test_unused_diversity_genres():
    assert unused_diversity_genres([878]) == [28, 18]
    assert unused_diversity_genres([28, 878, 18]) == [35, 27]


def test_diversity_requires_preferred_genres(fake_tmdb):
    assert diversity_strategy(fake_tmdb, RecommendationSignals(), CandidatePool()) == []

    contributions = diversity_strategy(fake_tmdb, RecommendationSignals(genre_ids=[SCI_FI]), CandidatePool())
    assert [c.movie["id"] for c in contributions] == [680, 278]
    assert all(c.recommendation_type == "diverse" for c in contributions)


def test_keyword_boost_matches_title_and_overview():
    pool = CandidatePool()
    pool.apply(Contribution(make_movie(1, "Dreamgirls"), 50, 50, "r", "genre"))
    pool.apply(Contribution(make_movie(2, "Heat", overview="A HEIST in a dream city"), 50, 50, "r", "genre"))
    pool.apply(Contribution(make_movie(3, "Unrelated"), 50, 50, "r", "genre"))

    boosted = apply_keyword_boost(pool, ["dream", "heist"])

    assert boosted == 2
    assert pool.get(1).match_score == 65
    assert pool.get(2).match_score == 80
    assert pool.get(2).confidence == 60
    assert pool.get(2).reasons[-1] == "Matches your interest in: dream, heist"
    assert pool.get(3).match_score == 50


def test_strategy_registry_order():
    assert [s.name for s in STRATEGIES] == ["similar", "genre", "director", "hidden-gem", "trending", "diverse"]
    assert not STRATEGIES[0].enabled(RecommendationSignals())
    assert STRATEGIES[3].enabled(RecommendationSignals())


def test_similar_skips_liked_movie_whose_related_list_fails():
    client = build_catalog(failing={"get_movie_recommendations"})
    signals = RecommendationSignals(liked_movie_ids=[INCEPTION])

    assert similar_strategy(client, signals, CandidatePool()) == []
