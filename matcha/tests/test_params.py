from __future__ import annotations

from starlette.datastructures import QueryParams

from matcha.discovery.config import SEARCH_CONFIG, SUGGESTIONS_CONFIG, ScoreWeights
from matcha.discovery.params import SearchQuery, SuggestionsQuery


def test_suggestions_defaults():
    q = SuggestionsQuery.from_params(QueryParams(""))
    assert q.page == 1
    assert q.max_distance_km == 50.0
    assert q.sort == "compatibility"
    assert q.weights == SUGGESTIONS_CONFIG.weights == ScoreWeights(0.3, 0.3, 0.2, 0.2)


def test_suggestions_reads_weights_and_paging():
    q = SuggestionsQuery.from_params(QueryParams(
        "page=3&maxDistance=12.5&w_distance=1&w_interests=2&w_fame=0.5&w_recency=4&sort=fame"
    ))
    assert q.page == 3
    assert q.max_distance_km == 12.5
    assert q.weights == ScoreWeights(1.0, 2.0, 0.5, 4.0)
    assert q.sort == "fame"


def test_malformed_numbers_fall_back_silently():
    q = SuggestionsQuery.from_params(QueryParams(
        "page=abc&maxDistance=far&w_distance=x&w_interests=nan&w_fame=&w_recency=inf"
    ))
    assert q.page == 1
    assert q.max_distance_km == 50.0
    assert q.weights == SUGGESTIONS_CONFIG.weights


def test_zero_weight_keeps_default():
    q = SuggestionsQuery.from_params(QueryParams("w_fame=0"))
    assert q.weights.fame == 0.2


def test_non_positive_page_falls_back():
    assert SuggestionsQuery.from_params(QueryParams("page=-2")).page == 1
    assert SuggestionsQuery.from_params(QueryParams("page=2.7")).page == 2


def test_search_defaults():
    q = SearchQuery.from_params(QueryParams(""))
    assert q.page == 1
    assert q.per_page == SEARCH_CONFIG.per_page == 20
    assert q.max_distance_km is None
    assert q.min_age is None and q.max_age is None
    assert q.min_fame is None and q.max_fame is None
    assert q.genders == [] and q.interests == []
    assert q.filters_used() == []


def test_search_filters():
    q = SearchQuery.from_params(QueryParams(
        "limit=5&minAge=25&maxAge=35&maxDistance=30&minFame=0&maxFame=80"
        "&gender=male&gender=other&interests=music, travel"
    ))
    assert q.per_page == 5
    assert (q.min_age, q.max_age) == (25, 35)
    assert q.max_distance_km == 30.0
    assert (q.min_fame, q.max_fame) == (0.0, 80.0)
    assert q.genders == ["male", "other"]
    assert q.interests == ["music", "travel"]
    assert q.filters_used() == ["age", "fame", "gender", "interests", "distance"]


def test_search_repeated_interests():
    q = SearchQuery.from_params(QueryParams("interests=music&interests=art"))
    assert q.interests == ["music", "art"]


def test_search_invalid_values_are_ignored():
    q = SearchQuery.from_params(QueryParams("limit=0&minAge=old&minFame=high&maxAge=0"))
    assert q.per_page == 20
    assert q.min_age is None
    assert q.max_age is None
    assert q.min_fame is None
