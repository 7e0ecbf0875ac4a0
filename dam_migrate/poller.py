"""
Polling for metadata of freshly uploaded DAM assets.

The DAM indexes uploads asynchronously, so the metadata of a new asset is
missing (or empty) for a while after the upload was accepted. The poller asks
for it a bounded number of times with a fixed pause in between.
"""

import time
from logging import getLogger
from typing import Any, Mapping, NamedTuple

from mediahub.logging import MediaHubLogger

from .exceptions import MetadataNotReady

logger = getLogger(__name__)
structured_logger = MediaHubLogger.get_logger(__name__)

DEFAULT_MAX_ATTEMPTS = 5
DEFAULT_DELAY = 3


class MaterializedRecord(NamedTuple):
    remote_id: str
    fields: Mapping[str, Any]


class RetryPolicy:
    """
    How often and how patiently to poll.

    ``delay`` is waited between attempts; when ``backoff`` is given it is
    called with the number of the failed attempt and returns the delay to use
    instead. ``sleep`` is the function used to wait.
    """

    def __init__(
        self,
        max_attempts=DEFAULT_MAX_ATTEMPTS,
        delay=DEFAULT_DELAY,
        backoff=None,
        sleep=None,
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if delay < 0:
            raise ValueError("delay cannot be negative")
        self.max_attempts = max_attempts
        self.delay = delay
        self.backoff = backoff
        self.sleep = sleep or time.sleep

    def __repr__(self):
        return "RetryPolicy(max_attempts=%s, delay=%s)" % (
            self.max_attempts,
            self.delay,
        )

    def delay_for(self, attempt):
        if self.backoff is not None:
            return self.backoff(attempt)
        return self.delay

    def wait(self, attempt):
        delay = self.delay_for(attempt)
        if delay > 0:
            self.sleep(delay)


def poll_metadata(client, handle, policy=None):
    """
    Fetch the materialized metadata of the asset behind ``handle``.

    Every failed attempt, whether it raised or returned no metadata mapping,
    is followed by the policy's delay. No delay follows the last attempt.

    Returns:
        MaterializedRecord: From the first attempt returning metadata.

    Raises:
        MetadataNotReady: No attempt returned metadata.
    """
    if policy is None:
        policy = RetryPolicy()

    last_error = None
    for attempt in range(1, policy.max_attempts + 1):
        try:
            metadata = client.fetch_metadata(handle.remote_id)
        except Exception as exc:
            last_error = exc
            metadata = None
            logger.info(
                "Metadata for DAM asset %s not available on attempt %d/%d: %s",
                handle.remote_id,
                attempt,
                policy.max_attempts,
                exc,
            )
        else:
            if metadata and isinstance(metadata, dict):
                structured_logger.info(
                    "DAM metadata materialized.",
                    event_code="dam_metadata_materialized",
                    remote_id=handle.remote_id,
                    attempt=attempt,
                )
                return MaterializedRecord(handle.remote_id, metadata)
            logger.info(
                "Metadata for DAM asset %s empty or malformed on attempt %d/%d",
                handle.remote_id,
                attempt,
                policy.max_attempts,
            )

        if attempt < policy.max_attempts:
            policy.wait(attempt)

    reason = f"last error: {last_error}" if last_error else "empty metadata"
    structured_logger.warning(
        "DAM metadata never materialized.",
        event_code="dam_metadata_not_ready",
        reason=reason,
        reason_code="retry_budget_exhausted",
        remote_id=handle.remote_id,
        attempts=policy.max_attempts,
    )
    raise MetadataNotReady(
        "The file was uploaded as DAM asset %s, but its metadata was not available "
        "after %d attempts (%s). As a result, local DAM media was not created."
        % (handle.remote_id, policy.max_attempts, reason),
        remote_id=handle.remote_id,
        attempts=policy.max_attempts,
        last_error=last_error,
    )
