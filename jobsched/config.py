DEFAULT_CONFIG = {
    "lease_timeout_seconds": 10,
    "poll_interval_seconds": 0.1,
    "default_recurring_delay_ms": 5000,
    "command_timeout_seconds": 20,
}

LEASE_TIMEOUT_SECONDS = DEFAULT_CONFIG["lease_timeout_seconds"]
POLL_INTERVAL_SECONDS = DEFAULT_CONFIG["poll_interval_seconds"]
DEFAULT_RECURRING_DELAY_MS = DEFAULT_CONFIG["default_recurring_delay_ms"]
COMMAND_TIMEOUT_SECONDS = DEFAULT_CONFIG["command_timeout_seconds"]
