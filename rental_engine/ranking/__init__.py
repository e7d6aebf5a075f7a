"""
Ranking module for rental search results.
"""

from .ranking_engine import RankingEngine
from .strategies import (
    STRATEGIES,
    RankingContext,
    RankingStrategy,
    get_strategy,
    popularity_score,
    relevance_score,
    trending_score,
)

__all__ = [
    'RankingEngine',
    'RankingContext',
    'RankingStrategy',
    'STRATEGIES',
    'get_strategy',
    'popularity_score',
    'relevance_score',
    'trending_score',
]
