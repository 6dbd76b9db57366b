"""Retry configuration for QuickBase HTTP calls.

Delays grow exponentially from ``retry_delay`` by ``backoff_factor`` and are
capped at ``max_retry_delay``. Defaults come from the ``client`` section of
config.yaml.
"""

from dataclasses import dataclass
from typing import Optional

from QBMCP.config import get_config

DEFAULT_MAX_RETRIES = 3
DEFAULT_RETRY_DELAY = 1.0
DEFAULT_BACKOFF_FACTOR = 2.0
DEFAULT_MAX_RETRY_DELAY = 10.0

RATE_LIMITED_STATUS = 429


@dataclass(frozen=True)
class RetryPolicy:
    max_retries: int = DEFAULT_MAX_RETRIES
    retry_delay: float = DEFAULT_RETRY_DELAY
    backoff_factor: float = DEFAULT_BACKOFF_FACTOR
    max_retry_delay: float = DEFAULT_MAX_RETRY_DELAY

    def delay_for(self, attempt: int) -> float:
        """Seconds to wait before retry number ``attempt`` (0-based)."""
        delay = self.retry_delay * (self.backoff_factor ** attempt)
        return min(delay, self.max_retry_delay)

    def should_retry_status(self, status_code: int, idempotent: bool) -> bool:
        """Rate limiting is always retried; server errors only for idempotent calls."""
        if status_code == RATE_LIMITED_STATUS:
            return True
        return idempotent and status_code >= 500


def get_retry_policy(max_retries: Optional[int] = None) -> RetryPolicy:
    """
    Build the retry policy from config.yaml.
    
    Args:
        max_retries: Override max retries (QB_MAX_RETRIES wins over config)
        
    Returns:
        RetryPolicy
    """
    section = get_config("client")
    return RetryPolicy(
        max_retries=max_retries if max_retries is not None else int(section.get("max_retries", DEFAULT_MAX_RETRIES)),
        retry_delay=float(section.get("retry_delay", DEFAULT_RETRY_DELAY)),
        backoff_factor=float(section.get("backoff_factor", DEFAULT_BACKOFF_FACTOR)),
        max_retry_delay=float(section.get("max_retry_delay", DEFAULT_MAX_RETRY_DELAY)),
    )
