"""Bounded wait-and-retry policy shared by staging allocation and extraction."""

import time
from dataclasses import dataclass, field
from typing import Callable, Tuple, Type, TypeVar, Union

from common.constants import COLLISION_WAIT_SECONDS, MAX_COLLISION_RETRIES
from common.logging_config import get_logger
from packager.exceptions import ResourceExhaustedError

logger = get_logger(__name__)

T = TypeVar("T")

RetryOn = Union[Type[BaseException], Tuple[Type[BaseException], ...]]


@dataclass(frozen=True)
class RetryPolicy:
    """
    Retry an operation that fails because a name is temporarily taken.

    The operation runs at most ``max_retries + 1`` times. Between attempts the
    calling thread blocks for ``delay_for(retry)`` seconds. Once the budget is
    spent a ResourceExhaustedError is raised, chained to the last collision.
    """
    max_retries: int = MAX_COLLISION_RETRIES
    wait_seconds: float = COLLISION_WAIT_SECONDS
    backoff_multiplier: float = 1.0
    sleep: Callable[[float], None] = field(default=time.sleep, repr=False, compare=False)

    @classmethod
    def from_config(cls, config) -> "RetryPolicy":
        """
        Build a fixed-interval policy from a PackagerConfig.

        Args:
            config: PackagerConfig with max_retries and retry_wait_seconds

        Returns:
            RetryPolicy instance
        """
        return cls(max_retries=config.max_retries, wait_seconds=config.retry_wait_seconds)

    def delay_for(self, retry: int) -> float:
        """
        Get the wait before the given retry (0-based).

        Args:
            retry: Number of retries already performed

        Returns:
            Delay in seconds
        """
        return self.wait_seconds * (self.backoff_multiplier ** retry)

    def run(self, operation: Callable[[], T], retry_on: RetryOn, description: str) -> T:
        """
        Run operation, retrying while it raises one of retry_on.

        Args:
            operation: Zero-argument callable performing one attempt
            retry_on: Exception type(s) signalling a name collision
            description: Human readable target, used in logs and errors

        Returns:
            Whatever operation returns on its first successful attempt

        Raises:
            ResourceExhaustedError: If the collision outlasts max_retries
        """
        retries = 0
        while True:
            try:
                return operation()
            except retry_on as e:
                if retries >= self.max_retries:
                    logger.error(
                        f"Giving up on {description} after {retries} retries: {e}"
                    )
                    raise ResourceExhaustedError(
                        f"Max attempts reached for {description} ({retries} retries)"
                    ) from e

                delay = self.delay_for(retries)
                retries += 1
                logger.warning(
                    f"Name collision on {description} (retry {retries}/{self.max_retries}), "
                    f"waiting {delay}s"
                )
                self.sleep(delay)
