""" Small byte-array helpers shared by the hashing, KDF and envelope code. """

from typing import Optional, Tuple


def utf8_to_bytes(s: str) -> bytes:
    return s.encode("utf-8")


def concat_bytes(*parts: bytes) -> bytes:
    return b"".join(parts)


def split_bytes(ba: bytes, idx: int) -> Tuple[bytes, bytes]:
    """Split ``ba`` at ``idx`` into ``(ba[:idx], ba[idx:])``.

    Raises ValueError if ``idx`` is negative or past the end of ``ba``.
    """
    if idx < 0 or idx > len(ba):
        raise ValueError(f"cannot split {len(ba)} bytes at index {idx}")
    return bytes(ba[:idx]), bytes(ba[idx:])


def take_bytes(n: int, ba: bytes) -> bytes:
    """Return exactly ``n`` bytes: a prefix of ``ba``, zero-padded if ``ba`` is too short."""
    if n < 0:
        raise ValueError("n must be non-negative")
    head = bytes(ba[:n])
    return head + b"\x00" * (n - len(head))


def add_salt(salt: Optional[bytes], ba: bytes) -> bytes:
    # salt goes in front; no salt leaves ba untouched
    if salt is None:
        return bytes(ba)
    return concat_bytes(salt, ba)
