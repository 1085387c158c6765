"""Security helpers: random source, KDF, cipher kits and envelope encryption.

This package provides:
- a thread-local strong random source with periodic reseeding
- iterated SHA-512 key derivation (plus opt-in Argon2id)
- AES-GCM / AES-CBC cipher kits with per-thread engines
- encrypt/decrypt of self-describing ``iv || salt? || ciphertext`` blobs

Password envelopes live in :mod:`sealkit.security.password`.
"""

from .randomness import (
    rand_bytes,
    rand_double,
    rand_long,
    rand_gauss,
    rand_bool,
    rand_nth,
)
from .kdf import DEFAULT_KDF_ROUNDS, generate_salt, sha512_key, argon2_key, take_bytes
from .ciphers import CipherKit, CIPHER_KIT_AES_GCM, CIPHER_KIT_AES_CBC
from .envelope import EncryptOptions, DecryptOptions, encrypt, decrypt

__all__ = [
    "rand_bytes",
    "rand_double",
    "rand_long",
    "rand_gauss",
    "rand_bool",
    "rand_nth",
    "DEFAULT_KDF_ROUNDS",
    "generate_salt",
    "sha512_key",
    "argon2_key",
    "take_bytes",
    "CipherKit",
    "CIPHER_KIT_AES_GCM",
    "CIPHER_KIT_AES_CBC",
    "EncryptOptions",
    "DecryptOptions",
    "encrypt",
    "decrypt",
]
