import secrets
import time
from threading import Lock

_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"

_sequence_lock = Lock()
_last_sequence = 0


def to_base36(value: int) -> str:
    if value < 0:
        raise ValueError("value must be non-negative")
    if value == 0:
        return "0"

    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_ALPHABET[rem])
    return "".join(reversed(digits))


def new_id() -> str:
    """Short opaque id: base-36 millisecond clock followed by 9 random base-36 chars."""
    stamp = to_base36(time.time_ns() // 1_000_000)
    noise = "".join(secrets.choice(_ALPHABET) for _ in range(9))
    return stamp + noise


def next_sequence() -> int:
    """Nanosecond clock reading, strictly increasing within the process."""
    global _last_sequence
    with _sequence_lock:
        _last_sequence = max(time.time_ns(), _last_sequence + 1)
        return _last_sequence
