"""
Sort strategies for ranked search results.

Each strategy is a pure scoring function plus a sort key derived from the
score. Keys always sort ascending; strategies that rank high scores first
negate them. Ties are left to the engine, which orders them by input position.
"""

import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Dict, Optional, Tuple

from rental_engine.geo import haversine_miles
from rental_engine.models import Coordinates, ListingSummary, SortStrategy, ensure_utc


SECONDS_PER_DAY = 86400
RECENT_LISTING_WINDOW = timedelta(days=30)

# Relevance weights
TITLE_MATCH_WEIGHT = 10
EXACT_TITLE_BONUS = 5
TITLE_PREFIX_BONUS = 3
CATEGORY_MATCH_WEIGHT = 5
DESCRIPTION_MATCH_WEIGHT = 2
RATING_WEIGHT = 1.5
REVIEW_WEIGHT = 0.1
REVIEW_CAP = 2
VIEW_WEIGHT = 0.001
VIEW_CAP = 1
RECENCY_BONUS = 1

# Popularity weights
POPULAR_VIEW_WEIGHT = 0.1
POPULAR_FAVORITE_WEIGHT = 0.5
POPULAR_REVIEW_WEIGHT = 0.4


@dataclass
class RankingContext:
    """Inputs shared by every listing scored in one search.

    Attributes:
        now: Clock reading used for recency and trending
        query: Free-text query; matched lower-cased and trimmed
        user_coordinates: Search center for the distance strategy
    """
    now: datetime
    query: str = ""
    user_coordinates: Optional[Coordinates] = None

    def __post_init__(self):
        self.now = ensure_utc(self.now)
        self.query = (self.query or "").strip().lower()


SortKey = Tuple[float, ...]


@dataclass(frozen=True)
class RankingStrategy:
    """A named scoring rule.

    Attributes:
        name: Strategy tag
        score: Computes the listing's score in a context
        key: Builds the ascending sort key from a listing and its score
    """
    name: SortStrategy
    score: Callable[[ListingSummary, RankingContext], float]
    key: Callable[[ListingSummary, float], SortKey]

    def sort_key(self, listing: ListingSummary, context: RankingContext) -> SortKey:
        return self.key(listing, self.score(listing, context))

    def compare(self, a: ListingSummary, b: ListingSummary, context: RankingContext) -> int:
        """Three-way comparison: negative when a ranks before b, 0 on a tie."""
        key_a = self.sort_key(a, context)
        key_b = self.sort_key(b, context)
        return (key_a > key_b) - (key_a < key_b)


def relevance_score(listing: ListingSummary, context: RankingContext) -> float:
    """Blend text match strength, quality signals and recency.

    With an empty query every match term is zero, so ordering falls back to
    rating, reviews, views and recency.
    """
    score = 0.0
    query = context.query

    if query:
        title = listing.title.lower()
        if query in title:
            score += TITLE_MATCH_WEIGHT
            if title == query:
                score += EXACT_TITLE_BONUS
            if title.startswith(query):
                score += TITLE_PREFIX_BONUS

        if listing.category_name and query in listing.category_name.lower():
            score += CATEGORY_MATCH_WEIGHT

        if listing.description and query in listing.description.lower():
            score += DESCRIPTION_MATCH_WEIGHT

    score += listing.rating * RATING_WEIGHT
    score += min(listing.review_count * REVIEW_WEIGHT, REVIEW_CAP)
    score += min(listing.view_count * VIEW_WEIGHT, VIEW_CAP)

    if context.now - ensure_utc(listing.created_at) < RECENT_LISTING_WINDOW:
        score += RECENCY_BONUS

    return score


def popularity_score(listing: ListingSummary, context: RankingContext) -> float:
    return (
        listing.view_count * POPULAR_VIEW_WEIGHT
        + listing.favorite_count * POPULAR_FAVORITE_WEIGHT
        + listing.review_count * POPULAR_REVIEW_WEIGHT
    )


def trending_score(listing: ListingSummary, context: RankingContext) -> float:
    """Engagement per day since publication, with age floored at one day."""
    age_days = (context.now - ensure_utc(listing.created_at)).total_seconds() / SECONDS_PER_DAY
    return (listing.view_count + listing.favorite_count * 2) / max(age_days, 1)


def distance_score(listing: ListingSummary, context: RankingContext) -> float:
    """Miles from the search center; infinity when either side lacks coordinates."""
    if context.user_coordinates is None or listing.coordinates is None:
        return math.inf
    return haversine_miles(context.user_coordinates, listing.coordinates)


def _descending(listing: ListingSummary, score: float) -> SortKey:
    return (-score,)


def _ascending(listing: ListingSummary, score: float) -> SortKey:
    return (score,)


def _rating_key(listing: ListingSummary, score: float) -> SortKey:
    return (-score, -listing.review_count)


def _distance_key(listing: ListingSummary, score: float) -> SortKey:
    # Listings without a distance go last; with no search center at all every
    # key is equal and input order is kept.
    if math.isinf(score):
        return (1, 0.0)
    return (0, score)


STRATEGIES: Dict[SortStrategy, RankingStrategy] = {
    SortStrategy.RELEVANCE: RankingStrategy(SortStrategy.RELEVANCE, relevance_score, _descending),
    SortStrategy.PRICE_LOW: RankingStrategy(
        SortStrategy.PRICE_LOW, lambda listing, context: listing.daily_rate, _ascending
    ),
    SortStrategy.PRICE_HIGH: RankingStrategy(
        SortStrategy.PRICE_HIGH, lambda listing, context: listing.daily_rate, _descending
    ),
    SortStrategy.RATING: RankingStrategy(
        SortStrategy.RATING, lambda listing, context: listing.rating, _rating_key
    ),
    SortStrategy.NEWEST: RankingStrategy(
        SortStrategy.NEWEST,
        lambda listing, context: ensure_utc(listing.created_at).timestamp(),
        _descending,
    ),
    SortStrategy.POPULAR: RankingStrategy(SortStrategy.POPULAR, popularity_score, _descending),
    SortStrategy.TRENDING: RankingStrategy(SortStrategy.TRENDING, trending_score, _descending),
    SortStrategy.DISTANCE: RankingStrategy(SortStrategy.DISTANCE, distance_score, _distance_key),
}


def get_strategy(name) -> RankingStrategy:
    """Look up a strategy by enum member or string tag."""
    return STRATEGIES[SortStrategy(name)]
