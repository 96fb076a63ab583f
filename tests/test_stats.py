import pytest

from models import Review, dump
from store_supabase import compute_review_stats


def _review(a, b, c, idx=0):
    return Review(
        id=f"r{idx}",
        created_at="2024-06-01T10:00:00+00:00",
        product_rating=a,
        delivery_rating=b,
        response_rating=c,
        name="Reviewer",
        email="r@acme.com",
    )


def test_no_reviews_gives_zeroes():
    stats = compute_review_stats([])
    assert stats.total_reviews == 0
    assert stats.overall_rating == 0
    assert stats.rating_distribution == {1: 0, 2: 0, 3: 0, 4: 0, 5: 0}


@pytest.mark.parametrize("triple", [(1, 1, 1), (5, 4, 4), (2, 3, 5), (1, 5, 5), (3, 4, 1)])
def test_single_review(triple):
    a, b, c = triple
    stats = compute_review_stats([_review(a, b, c)])
    assert stats.total_reviews == 1
    assert stats.overall_rating == round((a + b + c) / 3, 2)
    star = round((a + b + c) / 3)
    assert stats.rating_distribution[star] == 1
    assert sum(stats.rating_distribution.values()) == 1


def test_three_reviews():
    stats = compute_review_stats([_review(5, 5, 5, 1), _review(1, 1, 1, 2), _review(3, 3, 3, 3)])
    assert stats.total_reviews == 3
    assert stats.overall_rating == 3.0
    assert stats.rating_distribution == {1: 1, 2: 0, 3: 1, 4: 0, 5: 1}


def test_averages_round_to_two_places():
    stats = compute_review_stats([_review(5, 4, 3, 1), _review(4, 4, 3, 2), _review(4, 5, 3, 3)])
    assert stats.average_product_rating == 4.33
    assert stats.average_delivery_rating == 4.33
    assert stats.average_response_rating == 3.0
    assert stats.overall_rating == 3.89


def test_stats_wire_shape():
    body = dump(compute_review_stats([_review(4, 4, 4)]))
    assert body["totalReviews"] == 1
    assert body["ratingDistribution"] == {"1": 0, "2": 0, "3": 0, "4": 1, "5": 0}
