"""
Rate limiter for geocoding lookups.

Public geocoding services throttle clients that send more than about one
request per second; this limiter spaces requests out and caps hourly volume.
"""

import asyncio
import random
from datetime import datetime, timedelta
from typing import List


class RateLimiter:
    """
    Rate limiter that enforces delays between requests and an hourly cap.

    Attributes:
        min_delay_seconds: Minimum delay between requests in seconds
        max_delay_seconds: Maximum delay between requests in seconds
        max_requests_per_hour: Maximum number of requests per rolling hour
        request_timestamps: Timestamps of recent requests
    """

    def __init__(
        self,
        min_delay_seconds: float = 1.0,
        max_delay_seconds: float = 1.5,
        max_requests_per_hour: int = 600
    ):
        self.min_delay_seconds = min_delay_seconds
        self.max_delay_seconds = max_delay_seconds
        self.max_requests_per_hour = max_requests_per_hour
        self.request_timestamps: List[datetime] = []

    async def wait_between_requests(self) -> None:
        """
        Wait a random interval before the next request.

        The first request goes out immediately.
        """
        if not self.request_timestamps:
            return
        await asyncio.sleep(self._generate_random_delay())

    def check_hourly_limit(self) -> bool:
        """
        Check whether another request fits in the rolling hour.

        Returns:
            True if under the limit, False if the limit has been reached
        """
        one_hour_ago = datetime.now() - timedelta(hours=1)
        self.request_timestamps = [
            ts for ts in self.request_timestamps if ts > one_hour_ago
        ]
        return len(self.request_timestamps) < self.max_requests_per_hour

    def record_request(self) -> None:
        """Record a request timestamp for hourly limit tracking."""
        self.request_timestamps.append(datetime.now())

    def _generate_random_delay(self) -> float:
        """
        Returns:
            Random float between min_delay_seconds and max_delay_seconds
        """
        return random.uniform(self.min_delay_seconds, self.max_delay_seconds)
