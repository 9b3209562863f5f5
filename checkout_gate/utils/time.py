import time


def now_ms() -> int:
    return int(time.time() * 1000)


def elapsed_ms(start_ms: int, end_ms: int = 0) -> int:
    """Whole milliseconds between two epoch-ms stamps, clamped to >= 0."""
    end = int(end_ms or now_ms())
    return max(0, end - int(start_ms or end))
