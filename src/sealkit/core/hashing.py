""" Thread-local SHA-256 / SHA-512 digest helpers.

Each thread keeps one pristine (never fed) engine per hash size. ``hashlib``
objects cannot be reset after ``digest()``, so every call hashes on a fresh
``copy()`` of the pristine engine; the per-call copy is deliberate and is what
keeps calls independent of each other.
"""

import hashlib
import threading


class _DigestEngines(threading.local):
    # one pristine engine per thread per hash size, created on first use
    def __init__(self):
        self.sha256 = hashlib.sha256()
        self.sha512 = hashlib.sha512()


_engines = _DigestEngines()


def sha256_md():
    """Return this thread's pristine SHA-256 engine. Do not feed it directly."""
    return _engines.sha256


def sha512_md():
    """Return this thread's pristine SHA-512 engine. Do not feed it directly."""
    return _engines.sha512


def sha256_ba(data: bytes) -> bytes:

    # Work on a copy so the per-thread engine stays untouched between calls.

    md = sha256_md().copy()
    md.update(data)
    return md.digest()


def sha512_ba(data: bytes) -> bytes:
    md = sha512_md().copy()
    md.update(data)
    return md.digest()
