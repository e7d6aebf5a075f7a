"""
Ranking engine for filtered rental listings.

Scores every listing under the selected strategy and produces a total order.
Equal keys keep their relative input order. Large collections can be scored
in shards on a thread pool; shards are merged on (sort key, global input
position) so ties resolve exactly as in the unsharded sort.
"""

import heapq
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import List, Optional, Sequence

from rental_engine.geo import haversine_miles
from rental_engine.models import ListingSummary, RankedResult, SortStrategy
from .strategies import RankingContext, RankingStrategy, SortKey, get_strategy


logger = logging.getLogger(__name__)


@dataclass
class _ScoredListing:
    key: SortKey
    index: int
    score: float
    listing: ListingSummary

    @property
    def order(self):
        return (self.key, self.index)


class RankingEngine:
    """Orders listings under a sort strategy.

    Attributes:
        shard_size: Listings per scoring shard; 0 scores everything in one pass
        max_workers: Thread pool size used when sharding
    """

    def __init__(self, shard_size: int = 0, max_workers: int = 4):
        self.shard_size = shard_size
        self.max_workers = max_workers

    def rank(
        self,
        listings: Sequence[ListingSummary],
        strategy: SortStrategy,
        context: RankingContext,
        limit: Optional[int] = None,
        offset: int = 0
    ) -> List[RankedResult]:
        """Score and order listings.

        Args:
            listings: Filtered listings in repository order
            strategy: Sort strategy tag
            context: Clock, query, and optional user coordinates
            limit: Maximum number of results to return, None for all
            offset: Number of leading ranked results to skip

        Returns:
            RankedResult sequence with global 1-based ranks
        """
        ranking_strategy = get_strategy(strategy)
        listings = list(listings)

        if self.shard_size and len(listings) > self.shard_size:
            ordered = self._rank_sharded(listings, ranking_strategy, context)
        else:
            ordered = sorted(
                self._score_range(listings, 0, ranking_strategy, context),
                key=lambda entry: entry.order
            )

        end = None if limit is None else offset + limit
        results = [
            RankedResult(
                listing=entry.listing,
                score=entry.score,
                rank=position,
                distance_miles=self._distance(entry.listing, context),
            )
            for position, entry in enumerate(ordered[offset:end], start=offset + 1)
        ]

        logger.debug(
            f"Ranked {len(listings)} listings by {ranking_strategy.name.value}, "
            f"returning {len(results)}"
        )
        return results

    def _rank_sharded(
        self,
        listings: List[ListingSummary],
        strategy: RankingStrategy,
        context: RankingContext
    ) -> List[_ScoredListing]:
        starts = range(0, len(listings), self.shard_size)
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            shards = list(executor.map(
                lambda start: sorted(
                    self._score_range(
                        listings[start:start + self.shard_size], start, strategy, context
                    ),
                    key=lambda entry: entry.order
                ),
                starts
            ))
        logger.debug(f"Merging {len(shards)} ranking shards")
        return list(heapq.merge(*shards, key=lambda entry: entry.order))

    @staticmethod
    def _score_range(
        listings: Sequence[ListingSummary],
        start_index: int,
        strategy: RankingStrategy,
        context: RankingContext
    ) -> List[_ScoredListing]:
        scored = []
        for offset, listing in enumerate(listings):
            score = strategy.score(listing, context)
            scored.append(_ScoredListing(
                key=strategy.key(listing, score),
                index=start_index + offset,
                score=score,
                listing=listing,
            ))
        return scored

    @staticmethod
    def _distance(listing: ListingSummary, context: RankingContext) -> Optional[float]:
        if context.user_coordinates is None or listing.coordinates is None:
            return None
        return haversine_miles(context.user_coordinates, listing.coordinates)
