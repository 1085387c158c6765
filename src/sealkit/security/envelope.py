"""Encrypt/decrypt byte envelopes.

Blob layout (no length prefixes):

    [ iv (cipher_kit.iv_size bytes) ][ salt (salt_size bytes, optional) ][ ciphertext ]

The IV size is implied by the cipher kit, which must be the same at encrypt and
decrypt time. The salt size is NOT recorded in the blob; encrypting and
decrypting callers must agree on it out-of-band (usually one constant per
deployment). A wrong salt size fails cryptically under GCM and, under CBC,
may even produce wrong-but-validly-padded plaintext. Adding a length prefix
would break every existing blob, so the format stays as is.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Optional

from sealkit.core.bytes_utils import concat_bytes, split_bytes
from sealkit.core.exceptions import AuthenticationFailureError, MalformedBlobError
from sealkit.security.ciphers import DECRYPT_MODE, ENCRYPT_MODE, CipherKit
from sealkit.security.randomness import rand_bytes

logger = logging.getLogger(__name__)

SaltToKeyFn = Callable[[Optional[bytes]], bytes]


@dataclass(frozen=True)
class EncryptOptions:
    """
    Options for :func:`encrypt`.

    Attributes:
        key: raw key bytes of a size accepted by the cipher kit
        data: plaintext bytes
        salt: optional salt to embed after the IV (not used for encryption itself)
        cipher_kit: defaults to AES-GCM
        rand_bytes_fn: IV generator, defaults to the thread-local strong random source
    """

    key: bytes
    data: bytes
    salt: Optional[bytes] = None
    cipher_kit: CipherKit = CipherKit.AES_GCM
    rand_bytes_fn: Callable[[int], bytes] = field(default=rand_bytes)

    def __repr__(self) -> str:
        return (
            f"EncryptOptions(cipher_kit={self.cipher_kit.name}, key_len={len(self.key)}, "
            f"salt_len={len(self.salt) if self.salt is not None else 0}, data_len={len(self.data)})"
        )


@dataclass(frozen=True)
class DecryptOptions:
    """
    Options for :func:`decrypt`.

    Attributes:
        salt_to_key_fn: maps the embedded salt (or None) to key bytes
        data: full blob as produced by :func:`encrypt`
        salt_size: salt length agreed with the encrypting side, 0 for no salt
        cipher_kit: defaults to AES-GCM
    """

    salt_to_key_fn: SaltToKeyFn
    data: bytes
    salt_size: int = 0
    cipher_kit: CipherKit = CipherKit.AES_GCM


def encrypt(options: EncryptOptions) -> bytes:
    """Encrypt ``options.data`` and return ``iv || salt? || ciphertext``."""
    kit = options.cipher_kit
    iv = options.rand_bytes_fn(kit.iv_size)
    if len(iv) != kit.iv_size:
        raise ValueError(f"rand_bytes_fn returned {len(iv)} bytes, expected {kit.iv_size}")

    prefix = concat_bytes(iv, options.salt) if options.salt is not None else bytes(iv)
    key_spec = kit.key_spec(options.key)
    params = kit.param_spec(iv)
    cipher = kit.cipher()

    cipher.init(ENCRYPT_MODE, key_spec, params)
    ciphertext = cipher.do_final(options.data)
    logger.debug(
        "Encrypted %d bytes with %s (prefix %d bytes)",
        len(options.data), kit.transformation, len(prefix),
    )
    return concat_bytes(prefix, ciphertext)


def decrypt(options: DecryptOptions) -> bytes:
    """
    Decrypt a blob produced by :func:`encrypt`.

    Raises:
        MalformedBlobError: blob shorter than iv + salt, raised before any cipher work
        AuthenticationFailureError: GCM tag mismatch (tampering or wrong key)
        DecryptionError: other final-block failures (e.g. CBC padding)
        InvalidKeyLengthError: ``salt_to_key_fn`` returned an unusable key
    """
    kit = options.cipher_kit
    salt_size = options.salt_size
    if salt_size < 0:
        raise ValueError("salt_size must be non-negative")

    blob = options.data
    prefix_size = kit.iv_size + salt_size
    if len(blob) < prefix_size:
        raise MalformedBlobError(
            f"blob has {len(blob)} bytes, needs at least {prefix_size} for iv + salt"
        )

    prefix, ciphertext = split_bytes(blob, prefix_size)
    if salt_size > 0:
        iv, salt = split_bytes(prefix, kit.iv_size)
    else:
        iv, salt = prefix, None

    key = options.salt_to_key_fn(salt)
    key_spec = kit.key_spec(key)
    params = kit.param_spec(iv)
    cipher = kit.cipher()

    cipher.init(DECRYPT_MODE, key_spec, params)
    try:
        plaintext = cipher.do_final(ciphertext)
    except AuthenticationFailureError:
        logger.warning(
            "Authentication failed decrypting %d-byte blob with %s", len(blob), kit.transformation
        )
        raise
    logger.debug("Decrypted %d-byte blob with %s", len(blob), kit.transformation)
    return plaintext
