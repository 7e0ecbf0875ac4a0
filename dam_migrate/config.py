"""
DAM migration configuration, overridable through ``settings.DAM_MIGRATE``
"""

from django.conf import settings

from .poller import DEFAULT_DELAY, DEFAULT_MAX_ATTEMPTS, RetryPolicy

DAM_MIGRATE_DEFAULTS = {
    "POLL_MAX_ATTEMPTS": DEFAULT_MAX_ATTEMPTS,
    "POLL_DELAY": DEFAULT_DELAY,
}


def migrate_setting(key):
    overrides = getattr(settings, "DAM_MIGRATE", {})
    if key in overrides:
        return overrides[key]
    return DAM_MIGRATE_DEFAULTS[key]


def retry_policy_from_settings():
    return RetryPolicy(
        max_attempts=int(migrate_setting("POLL_MAX_ATTEMPTS")),
        delay=float(migrate_setting("POLL_DELAY")),
    )
