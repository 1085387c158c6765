"""Environment-driven defaults for password envelopes.

Every setting can be overridden with a ``SEALKIT_*`` environment variable:

- ``SEALKIT_CIPHER``: ``gcm`` (default) or ``cbc``
- ``SEALKIT_SALT_SIZE``: salt bytes embedded in each blob, 0 disables salting
- ``SEALKIT_KEY_SIZE``: AES key bytes (16, 24 or 32)
- ``SEALKIT_KDF``: ``sha512`` (default, wire compatible) or ``argon2id``
- ``SEALKIT_KDF_ROUNDS``: SHA-512 rounds
- ``SEALKIT_LOG_LEVEL``: passed to :func:`sealkit.logging_config.configure_logging`

Encrypting and decrypting sides must use the same cipher, salt size, key size
and KDF settings; none of them is recorded in the blob.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Dict, Mapping, Optional

from sealkit import logging_config
from sealkit.security.ciphers import AES_KEY_SIZES, CipherKit
from sealkit.security.kdf import DEFAULT_KDF_ROUNDS, kdf_params_to_dict

ENV_PREFIX = "SEALKIT_"

_CIPHERS = {
    "gcm": CipherKit.AES_GCM,
    "cbc": CipherKit.AES_CBC,
}
_KDFS = ("sha512", "argon2id")


@dataclass(frozen=True)
class SealKitConfig:
    """Settings shared by both ends of a password envelope."""

    cipher: str = "gcm"
    salt_size: int = 16
    key_size: int = 16
    kdf: str = "sha512"
    kdf_rounds: int = DEFAULT_KDF_ROUNDS
    log_level: str = "INFO"

    def __post_init__(self):
        # frozen: normalise through object.__setattr__
        object.__setattr__(self, "cipher", self.cipher.lower())
        object.__setattr__(self, "kdf", self.kdf.lower())
        object.__setattr__(self, "log_level", self.log_level.upper())
        if self.cipher not in _CIPHERS:
            raise ValueError(f"Unknown cipher {self.cipher!r}; expected one of {sorted(_CIPHERS)}")
        if self.kdf not in _KDFS:
            raise ValueError(f"Unknown KDF {self.kdf!r}; expected one of {list(_KDFS)}")
        if self.salt_size < 0:
            raise ValueError("salt_size must be non-negative")
        if self.kdf == "argon2id" and self.salt_size < 8:
            raise ValueError("argon2id needs a salt_size of at least 8")
        if self.key_size not in AES_KEY_SIZES:
            raise ValueError(f"key_size must be one of {AES_KEY_SIZES}")
        if self.kdf_rounds < 1:
            raise ValueError("kdf_rounds must be at least 1")
        logging_config.resolve_level(self.log_level)

    def kdf_params(self, salt: Optional[bytes] = None) -> Dict:
        """Describe the KDF settings, e.g. to store next to the blobs they protect."""
        if self.kdf == "argon2id":
            return kdf_params_to_dict(self.kdf, salt, key_len=self.key_size)
        return kdf_params_to_dict(self.kdf, salt, rounds=self.kdf_rounds, key_len=self.key_size)

    @property
    def cipher_kit(self) -> CipherKit:
        return _CIPHERS[self.cipher]

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "SealKitConfig":
        """Build a config from ``SEALKIT_*`` variables, falling back to defaults."""
        env = os.environ if environ is None else environ
        defaults = cls()

        def _int(name: str, default: int) -> int:
            raw = env.get(ENV_PREFIX + name)
            if raw is None or raw.strip() == "":
                return default
            try:
                return int(raw)
            except ValueError:
                raise ValueError(f"{ENV_PREFIX}{name} must be an integer, got {raw!r}") from None

        return cls(
            cipher=env.get(ENV_PREFIX + "CIPHER", defaults.cipher),
            salt_size=_int("SALT_SIZE", defaults.salt_size),
            key_size=_int("KEY_SIZE", defaults.key_size),
            kdf=env.get(ENV_PREFIX + "KDF", defaults.kdf),
            kdf_rounds=_int("KDF_ROUNDS", defaults.kdf_rounds),
            log_level=env.get(ENV_PREFIX + "LOG_LEVEL", defaults.log_level),
        )

    def configure_logging(self) -> None:
        """Set up root logging at ``log_level``."""
        logging_config.configure_logging(self.log_level)
