"""
Membership renewal job constants.

The reminder window and re-notify rule are product decisions, not
deployment settings, so they live here rather than in environment variables.
"""

RENEWAL_DEFAULTS = {
    # Pass A selects active memberships ending within this many days
    "reminder_window_days": 7,
    # A client already reminded is reminded again only at or below this many
    # days until expiry...
    "renotify_threshold_days": 1,
    # ...and only if the previous reminder is older than this many days
    "renotify_min_interval_days": 1,
    # Notification dispatch attempts per client (1 = no retry)
    "notify_max_attempts": 3,
    # Linear backoff between dispatch attempts: attempt * seconds
    "notify_retry_backoff_seconds": 5.0,
    # Upper bound on one full sweep
    "sweep_timeout_seconds": 1800.0,
}

# Fixed daily firing time (UTC)
RENEWAL_TRIGGER = {
    "hour": 0,
    "minute": 0,
    "timezone": "UTC",
}
