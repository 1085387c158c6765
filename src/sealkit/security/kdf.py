"""Password-based key derivation.

``sha512_key`` is the envelope's native KDF: salt and password are
concatenated and run through SHA-512 ``n_rounds`` times. It has good
availability with no extra dependencies and decent security when using many
rounds, but it is not memory-hard like Argon2/scrypt. Its security rests
entirely on the round count and the presence of a salt.

Changing the algorithm or ``DEFAULT_KDF_ROUNDS`` changes the key derived for
every password, so previously encrypted blobs become undecryptable. Treat any
such change as a breaking wire-format change.

``argon2_key`` is an opt-in memory-hard alternative. It is not interchangeable
with ``sha512_key``: blobs must be decrypted with the KDF they were made with.

``kdf_params_to_dict`` describes KDF settings for callers that store them next
to their blobs; ``SealKitConfig.kdf_params`` builds it from a config.
"""
from typing import Dict, Optional

from argon2.low_level import Type, hash_secret_raw

from sealkit.core.bytes_utils import add_salt, take_bytes, utf8_to_bytes
from sealkit.core.hashing import sha512_ba
from sealkit.security.randomness import rand_bytes

# 32767 * 5, must not change (wire compatibility)
DEFAULT_KDF_ROUNDS = 163835
KEY_BYTES = 64

__all__ = [
    "DEFAULT_KDF_ROUNDS",
    "generate_salt",
    "sha512_key",
    "argon2_key",
    "kdf_params_to_dict",
    "take_bytes",
]


def generate_salt(length: int = 16) -> bytes:
    """Return a cryptographically secure random salt."""
    return rand_bytes(length)


def sha512_key(salt: Optional[bytes], password: str, n_rounds: int = DEFAULT_KDF_ROUNDS) -> bytes:
    """
    Derive 64 bytes of key material from an optional salt and a password.

    ``n_rounds=1`` is a single SHA-512 of ``salt || utf8(password)``; each extra
    round hashes the previous digest. Use :func:`take_bytes` to cut the result
    down to the cipher's key size.
    """
    if n_rounds < 1:
        raise ValueError("n_rounds must be at least 1")

    ba = add_salt(salt, utf8_to_bytes(password))
    for _ in range(n_rounds):
        ba = sha512_ba(ba)
    return ba


def argon2_key(
    salt: bytes,
    password: str,
    key_len: int = 16,
    time_cost: int = 3,
    memory_cost: int = 65536,
    parallelism: int = 1,
) -> bytes:
    """
    Derive a key from a password using Argon2id.
    Returns raw derived key bytes.
    """
    if salt is None or len(salt) < 8:
        raise ValueError("Argon2id needs a salt of at least 8 bytes")

    return hash_secret_raw(
        secret=utf8_to_bytes(password),
        salt=salt,
        time_cost=time_cost,
        memory_cost=memory_cost,
        parallelism=parallelism,
        hash_len=key_len,
        type=Type.ID,
    )


def kdf_params_to_dict(algo: str, salt: Optional[bytes], **params) -> Dict:
    result = {
        "algo": algo,
        "salt": salt.hex() if salt is not None else None,
    }
    result.update(params)
    return result
