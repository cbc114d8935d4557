"""Time utilities."""

import time


def get_timestamp_ms() -> int:
    """Current time as integer epoch milliseconds."""
    return int(time.time() * 1000)
