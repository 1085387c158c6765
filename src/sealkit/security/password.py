"""Password envelopes: envelope encryption keyed by a password.

Each blob gets a fresh random salt (``config.salt_size`` bytes, embedded after
the IV) and the key is re-derived from ``salt + password`` on decryption.
"""
from __future__ import annotations

import logging
from typing import Optional

from sealkit.config import SealKitConfig
from sealkit.core.bytes_utils import take_bytes
from sealkit.security.envelope import DecryptOptions, EncryptOptions, SaltToKeyFn, decrypt, encrypt
from sealkit.security.kdf import DEFAULT_KDF_ROUNDS, argon2_key, generate_salt, sha512_key

logger = logging.getLogger(__name__)


def sha512_key_fn(password: str, key_size: int = 16, n_rounds: int = DEFAULT_KDF_ROUNDS) -> SaltToKeyFn:
    """Return ``salt -> key`` using iterated SHA-512, cut to ``key_size`` bytes."""

    def salt_to_key(salt: Optional[bytes]) -> bytes:
        return take_bytes(key_size, sha512_key(salt, password, n_rounds))

    return salt_to_key


def argon2_key_fn(password: str, key_size: int = 16, **params) -> SaltToKeyFn:
    """Return ``salt -> key`` using Argon2id. Requires a salt."""

    def salt_to_key(salt: Optional[bytes]) -> bytes:
        return argon2_key(salt, password, key_len=key_size, **params)

    return salt_to_key


def key_fn_for(password: str, config: SealKitConfig) -> SaltToKeyFn:
    if config.kdf == "argon2id":
        return argon2_key_fn(password, key_size=config.key_size)
    return sha512_key_fn(password, key_size=config.key_size, n_rounds=config.kdf_rounds)


def encrypt_with_password(data: bytes, password: str, config: Optional[SealKitConfig] = None) -> bytes:
    """Encrypt ``data`` under a key derived from ``password`` and a fresh salt."""
    config = config or SealKitConfig()
    salt = generate_salt(config.salt_size) if config.salt_size > 0 else None
    key = key_fn_for(password, config)(salt)
    logger.debug("Password envelope: kdf=%s cipher=%s salt_size=%d", config.kdf, config.cipher, config.salt_size)
    return encrypt(EncryptOptions(key=key, data=data, salt=salt, cipher_kit=config.cipher_kit))


def decrypt_with_password(blob: bytes, password: str, config: Optional[SealKitConfig] = None) -> bytes:
    """Decrypt a blob made by :func:`encrypt_with_password` with the same config."""
    config = config or SealKitConfig()
    return decrypt(
        DecryptOptions(
            salt_to_key_fn=key_fn_for(password, config),
            data=blob,
            salt_size=config.salt_size,
            cipher_kit=config.cipher_kit,
        )
    )
