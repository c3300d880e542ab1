# utils/ids.py
import secrets
import threading
import time

_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"
_lock = threading.Lock()
_last_ms = 0


def _base36(n: int) -> str:
    if n == 0:
        return "0"
    out = []
    while n:
        n, r = divmod(n, 36)
        out.append(_ALPHABET[r])
    return "".join(reversed(out))


def _next_ms() -> int:
    """Millisecond clock, strictly increasing within this process."""
    global _last_ms
    with _lock:
        now = int(time.time() * 1000)
        if now <= _last_ms:
            now = _last_ms + 1
        _last_ms = now
        return now


def gen_id(prefix: str = "id") -> str:
    """
    Sinh id dạng `<prefix>_<timestamp base36, 9 ký tự>_<6 ký tự ngẫu nhiên>`.
    Cùng prefix thì id sắp xếp theo chuỗi = theo thời điểm tạo.
    """
    stamp = _base36(_next_ms()).rjust(9, "0")
    suffix = "".join(secrets.choice(_ALPHABET) for _ in range(6))
    return f"{prefix}_{stamp}_{suffix}"
