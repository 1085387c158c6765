"""Thread-local strong random source with periodic reseeding.

Each thread lazily gets its own generator, so there is no lock contention and
no per-call construction cost. Every accessor goes through ``prng()``, which
occasionally reseeds the generator with bytes drawn from itself.

Generator preference:
- the operating system CSPRNG (``random.SystemRandom`` over ``os.urandom``)
- OpenSSL's DRBG (``ssl.RAND_bytes``) when the OS offers no entropy source

If neither is usable, generator construction raises ``EntropyUnavailableError``.
Favours security over performance; may block briefly waiting on system entropy.
"""
from __future__ import annotations

import logging
import os
import random
import ssl
import threading
from typing import Callable, Sequence, TypeVar

from sealkit.core.exceptions import EntropyUnavailableError

logger = logging.getLogger(__name__)

# 1/4096 chance per draw
RESEED_PROBABILITY = 2.44140625e-4
RESEED_SIZE = 8

BPF = 53
RECIP_BPF = 2 ** -BPF

T = TypeVar("T")


class OpenSSLRandom(random.Random):
    """``random.Random`` drawing from OpenSSL's DRBG.

    Unlike ``random.SystemRandom``, seeding is meaningful here: bytes passed to
    ``seed()`` are mixed into the OpenSSL pool with ``ssl.RAND_add``.
    """

    def random(self) -> float:
        return (int.from_bytes(ssl.RAND_bytes(7), "big") >> 3) * RECIP_BPF

    def getrandbits(self, k: int) -> int:
        if k < 0:
            raise ValueError("number of bits must be non-negative")
        numbytes = (k + 7) // 8
        x = int.from_bytes(ssl.RAND_bytes(numbytes), "big")
        return x >> (numbytes * 8 - k)

    def randbytes(self, n: int) -> bytes:
        return ssl.RAND_bytes(n)

    def seed(self, a=None, version=2) -> None:
        if isinstance(a, (bytes, bytearray)):
            # self-drawn seed material adds no entropy of its own
            ssl.RAND_add(bytes(a), 0.0)

    def _notimplemented(self, *args, **kwds):
        raise NotImplementedError("OpenSSL generator state is not exposed")

    getstate = setstate = _notimplemented


def new_generator() -> random.Random:
    """Construct a fresh strong generator for the calling thread."""
    try:
        os.urandom(1)
    except NotImplementedError:
        logger.warning("No OS entropy source available, falling back to OpenSSL DRBG")
    else:
        return random.SystemRandom()

    if not ssl.RAND_status():
        raise EntropyUnavailableError("no secure random source available on this platform")
    return OpenSSLRandom()


class RandomSource:
    """One generator per thread, reseeded on read with probability 1/4096."""

    def __init__(self, factory: Callable[[], random.Random] = new_generator):
        self._factory = factory
        self._local = threading.local()

    def prng(self) -> random.Random:
        """Return this thread's generator, occasionally reseeding it first."""
        rng = getattr(self._local, "rng", None)
        if rng is None:
            rng = self._factory()
            self._local.rng = rng

        # Occasionally supplement the current seed. Otherwise an attacker could
        # in theory observe large amounts of output to work out the state.
        if rng.random() < RESEED_PROBABILITY:
            logger.debug("Reseeding %s for thread %s", type(rng).__name__, threading.get_ident())
            rng.seed(rng.randbytes(RESEED_SIZE))
        return rng

    def rand_bytes(self, size: int) -> bytes:
        return self.prng().randbytes(size)

    def rand_double(self) -> float:
        return self.prng().random()

    def rand_long(self) -> int:
        # signed 64-bit range
        return self.prng().getrandbits(64) - (1 << 63)

    def rand_gauss(self) -> float:
        return self.prng().gauss(0.0, 1.0)

    def rand_bool(self) -> bool:
        return bool(self.prng().getrandbits(1))

    def rand_nth(self, seq: Sequence[T]) -> T:
        """Pick a random element of a non-empty sequence.

        Uses ``floor(rand_double() * len(seq))``, so uniformity is approximate.
        """
        if not seq:
            raise IndexError("cannot choose from an empty sequence")
        return seq[int(self.rand_double() * len(seq))]


# module-level default random source
_default_source = RandomSource()


def get_random_source() -> RandomSource:
    return _default_source


def prng() -> random.Random:
    return get_random_source().prng()


def rand_bytes(size: int) -> bytes:
    return get_random_source().rand_bytes(size)


def rand_double() -> float:
    return get_random_source().rand_double()


def rand_long() -> int:
    return get_random_source().rand_long()


def rand_gauss() -> float:
    return get_random_source().rand_gauss()


def rand_bool() -> bool:
    return get_random_source().rand_bool()


def rand_nth(seq: Sequence[T]) -> T:
    return get_random_source().rand_nth(seq)
