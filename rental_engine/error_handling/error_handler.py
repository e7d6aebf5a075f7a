"""
Error handler with retry logic for the rental engine's external collaborators.

Implements exponential backoff, timeout escalation, and diagnostic reporting
for calls that leave the process (geocoding lookups).
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Tuple, Type
from datetime import datetime


# Configure logging
logger = logging.getLogger(__name__)


@dataclass
class RetryConfig:
    """
    Configuration for retry behavior with exponential backoff.

    Attributes:
        max_retries: Maximum number of attempts
        initial_timeout_ms: Initial timeout value in milliseconds
        timeout_multiplier: Multiplier for timeout escalation on each retry
        backoff_base_seconds: Delay before the second attempt, doubled after each failure
    """
    max_retries: int = 3
    initial_timeout_ms: int = 10000
    timeout_multiplier: float = 1.5
    backoff_base_seconds: float = 1.0

    def get_timeout(self, attempt: int) -> int:
        """
        Calculate timeout for a specific retry attempt.

        timeout = initial_timeout_ms * (timeout_multiplier ^ attempt)

        Args:
            attempt: The retry attempt number (0-indexed)

        Returns:
            Timeout value in milliseconds for the given attempt
        """
        return int(self.initial_timeout_ms * (self.timeout_multiplier ** attempt))

    def get_backoff_delay(self, attempt: int) -> float:
        """
        Calculate backoff delay before retry attempt.

        delay = backoff_base_seconds * (2 ^ attempt)

        Args:
            attempt: The retry attempt number (0-indexed)

        Returns:
            Delay in seconds before the retry attempt
        """
        return self.backoff_base_seconds * (2 ** attempt)


class ErrorHandler:
    """
    Error handler with retry logic and diagnostic capabilities.

    Attributes:
        config: Retry configuration
        retry_on: Exception types that trigger another attempt; anything
            else propagates immediately
    """

    def __init__(
        self,
        config: RetryConfig = None,
        retry_on: Tuple[Type[BaseException], ...] = (Exception,)
    ):
        self.config = config or RetryConfig()
        self.retry_on = retry_on

    async def retry_with_backoff(
        self,
        operation: Callable,
        *args,
        **kwargs
    ) -> Any:
        """
        Execute operation with exponential backoff retry logic.

        Attempts the operation up to max_retries times. If the operation
        accepts a ``timeout_ms`` keyword, it is escalated on each attempt.

        Args:
            operation: Async callable to execute
            *args: Positional arguments for the operation
            **kwargs: Keyword arguments for the operation

        Returns:
            Result from successful operation execution

        Raises:
            Exception: The last exception encountered if all retries are exhausted,
                or the first exception not listed in ``retry_on``
        """
        last_exception = None
        operation_name = getattr(operation, '__name__', repr(operation))

        for attempt in range(self.config.max_retries):
            try:
                logger.info(
                    f"Attempt {attempt + 1}/{self.config.max_retries} for operation {operation_name}"
                )

                if 'timeout_ms' in kwargs:
                    kwargs['timeout_ms'] = self.config.get_timeout(attempt)

                result = await operation(*args, **kwargs)

                logger.info(f"Operation {operation_name} succeeded on attempt {attempt + 1}")
                return result

            except self.retry_on as e:
                last_exception = e

                self._log_error(
                    operation_name=operation_name,
                    attempt=attempt + 1,
                    max_attempts=self.config.max_retries,
                    error=e,
                    args=args,
                    kwargs=kwargs
                )

                if attempt == self.config.max_retries - 1:
                    logger.error(
                        f"Operation {operation_name} failed after {self.config.max_retries} attempts. "
                        f"Final error: {str(e)}"
                    )
                    break

                backoff_delay = self.config.get_backoff_delay(attempt)
                logger.info(f"Waiting {backoff_delay:.1f}s before retry...")
                await asyncio.sleep(backoff_delay)

        raise last_exception

    def handle_geocoding_failure(
        self,
        error: Exception,
        address: str = ""
    ) -> Dict[str, Any]:
        """
        Provide recovery suggestions for a failed geocoding lookup.

        Args:
            error: The exception raised by the geocoder
            address: The location text that failed to resolve

        Returns:
            Dictionary with error analysis and recovery suggestions
        """
        error_str = str(error).lower()

        suggestions = {
            'error_type': 'Geocoding Failure',
            'error_message': str(error),
            'address': address,
            'timestamp': datetime.now().isoformat(),
            'recovery_suggestions': []
        }

        if 'not found' in error_str or 'no match' in error_str:
            suggestions['recovery_suggestions'].extend([
                'Check the spelling of the city or state',
                'Try a broader location such as the city name alone',
                'Provide latitude and longitude directly'
            ])
        elif 'timeout' in error_str or 'timed out' in error_str:
            suggestions['recovery_suggestions'].extend([
                'Increase GEOCODER_TIMEOUT_MS',
                'Check your internet connection',
                'Retry the search in a few seconds'
            ])
        elif 'status' in error_str or 'unavailable' in error_str:
            suggestions['recovery_suggestions'].extend([
                'The geocoding service may be rate limiting requests',
                'Raise GEOCODER_MIN_DELAY_SECONDS to slow down lookups',
                'Point GEOCODER_BASE_URL at a self-hosted instance'
            ])
        else:
            suggestions['recovery_suggestions'].extend([
                'Search without distance sorting or a radius',
                'Provide latitude and longitude directly'
            ])

        logger.warning(f"Geocoding failed for '{address}': {error}")
        logger.info(f"Recovery suggestions: {suggestions['recovery_suggestions']}")

        return suggestions

    def _log_error(
        self,
        operation_name: str,
        attempt: int,
        max_attempts: int,
        error: BaseException,
        args: tuple,
        kwargs: dict
    ) -> None:
        """
        Log error with timestamp, context, and diagnostic data.
        """
        context = {
            'timestamp': datetime.now().isoformat(),
            'operation': operation_name,
            'attempt': f"{attempt}/{max_attempts}",
            'error_type': type(error).__name__,
            'error_message': str(error),
            'args': str(args) if args else 'None',
            'kwargs': {k: str(v) for k, v in kwargs.items()} if kwargs else {}
        }

        logger.error(
            f"Operation failed: {operation_name} | "
            f"Attempt: {attempt}/{max_attempts} | "
            f"Error: {type(error).__name__}: {str(error)}"
        )
        logger.debug(f"Full error context: {context}")
