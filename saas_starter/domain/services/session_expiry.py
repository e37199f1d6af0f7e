from __future__ import annotations

import time


REFRESH_ACCESS_TOKEN_THRESHOLD_SECONDS = 60


def now_ms() -> int:
    return int(time.time() * 1000)


def is_expiring_soon(
    expires_at: int,
    *,
    now_millis: int,
    threshold_seconds: int = REFRESH_ACCESS_TOKEN_THRESHOLD_SECONDS,
) -> bool:
    # expires_at is epoch seconds, the clock is in milliseconds
    return (expires_at - threshold_seconds) * 1000 < now_millis
