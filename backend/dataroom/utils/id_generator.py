"""ID generation utilities."""

import secrets
import string

from .time_utils import get_timestamp_ms

_BASE36 = string.digits + string.ascii_lowercase


def generate_id(prefix: str = "") -> str:
    """Generate a unique, roughly time-ordered ID with optional prefix.

    Format: {prefix}_{timestamp_base36}{random_8chars}
    Example: folder_m1a2b3c4k9x0p2q7
    """
    stamp = _to_base36(get_timestamp_ms())
    suffix = "".join(secrets.choice(_BASE36) for _ in range(8))
    return f"{prefix}_{stamp}{suffix}" if prefix else f"{stamp}{suffix}"


def _to_base36(num: int) -> str:
    if num == 0:
        return "0"
    digits = []
    while num:
        num, rem = divmod(num, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))
