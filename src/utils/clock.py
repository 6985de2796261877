"""Wall-clock helper for penalty windows."""

import time


def now_ms() -> int:
    """Return the current epoch time in milliseconds."""
    return int(time.time() * 1000)
