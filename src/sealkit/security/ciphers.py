"""AES cipher kits used by the envelope.

A cipher kit fixes everything about one algorithm/mode/padding combination:
the IV size, how key and mode parameters are built from raw bytes, and which
per-thread cipher engine does the work.

Two kits exist and no others are planned:

- ``CipherKit.AES_GCM``: authenticated, 12-byte IV, 128-bit tag appended to the
  ciphertext. Detects tampering and truncation. Preferred.
- ``CipherKit.AES_CBC``: PKCS#7 padded, 16-byte IV, no integrity check at all.
  Kept for compatibility only. If ciphertext can be attacker-controlled, CBC
  is exposed to padding-oracle style attacks.
"""
from __future__ import annotations

import threading
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from sealkit.core.exceptions import (
    AuthenticationFailureError,
    DecryptionError,
    InvalidKeyLengthError,
)

AES_KEY_SIZES = (16, 24, 32)
AES_BLOCK_SIZE = 16
GCM_TAG_BITS = 128


class Mode(Enum):
    ENCRYPT = "encrypt"
    DECRYPT = "decrypt"


ENCRYPT_MODE = Mode.ENCRYPT
DECRYPT_MODE = Mode.DECRYPT


@dataclass(frozen=True)
class KeySpec:
    """Raw secret key bytes tagged with the algorithm they are meant for."""

    key: bytes
    algorithm: str = "AES"

    def __post_init__(self):
        if self.algorithm == "AES" and len(self.key) not in AES_KEY_SIZES:
            raise InvalidKeyLengthError(
                f"AES key must be 16, 24 or 32 bytes, got {len(self.key)}"
            )

    def __repr__(self) -> str:
        # never expose key material
        return f"KeySpec(algorithm={self.algorithm!r}, key_len={len(self.key)})"


@dataclass(frozen=True)
class GcmParams:
    tag_length_bits: int
    iv: bytes


@dataclass(frozen=True)
class CbcParams:
    iv: bytes


ParamSpec = Union[GcmParams, CbcParams]


class CipherKit(Enum):
    """Closed set of supported cipher strategies."""

    AES_GCM = ("AES/GCM/NoPadding", 12)
    AES_CBC = ("AES/CBC/PKCS5Padding", 16)

    def __init__(self, transformation: str, iv_size: int):
        self.transformation = transformation
        self.iv_size = iv_size

    @property
    def authenticated(self) -> bool:
        return self is CipherKit.AES_GCM

    def key_spec(self, key: bytes) -> KeySpec:
        return KeySpec(bytes(key), "AES")

    def param_spec(self, iv: bytes) -> ParamSpec:
        if len(iv) != self.iv_size:
            raise ValueError(f"{self.transformation} needs a {self.iv_size}-byte IV, got {len(iv)}")
        if self is CipherKit.AES_GCM:
            return GcmParams(GCM_TAG_BITS, bytes(iv))
        return CbcParams(bytes(iv))

    def cipher(self) -> "CipherEngine":
        """Return this thread's engine for the kit, creating it on first use."""
        engines = _engines.by_kit
        engine = engines.get(self)
        if engine is None:
            engine = CipherEngine(self)
            engines[self] = engine
        return engine


# ------------------------------------------------------------------
# Mode implementations
# ------------------------------------------------------------------

def _gcm_encrypt(key_spec: KeySpec, params: GcmParams, data: bytes) -> bytes:
    tag_len = params.tag_length_bits // 8
    encryptor = Cipher(algorithms.AES(key_spec.key), modes.GCM(params.iv)).encryptor()
    ct = encryptor.update(data) + encryptor.finalize()
    return ct + encryptor.tag[:tag_len]


def _gcm_decrypt(key_spec: KeySpec, params: GcmParams, data: bytes) -> bytes:
    tag_len = params.tag_length_bits // 8
    if len(data) < tag_len:
        raise AuthenticationFailureError("input too short to hold the GCM authentication tag")

    ct, tag = data[:-tag_len], data[-tag_len:]
    decryptor = Cipher(
        algorithms.AES(key_spec.key),
        modes.GCM(params.iv, tag, min_tag_length=tag_len),
    ).decryptor()
    try:
        return decryptor.update(ct) + decryptor.finalize()
    except InvalidTag as e:
        raise AuthenticationFailureError("GCM authentication tag mismatch") from e


def _cbc_encrypt(key_spec: KeySpec, params: CbcParams, data: bytes) -> bytes:
    padder = padding.PKCS7(AES_BLOCK_SIZE * 8).padder()
    padded = padder.update(data) + padder.finalize()
    encryptor = Cipher(algorithms.AES(key_spec.key), modes.CBC(params.iv)).encryptor()
    return encryptor.update(padded) + encryptor.finalize()


def _cbc_decrypt(key_spec: KeySpec, params: CbcParams, data: bytes) -> bytes:
    if not data or len(data) % AES_BLOCK_SIZE:
        raise DecryptionError(
            f"CBC input must be a positive multiple of {AES_BLOCK_SIZE} bytes, got {len(data)}"
        )

    decryptor = Cipher(algorithms.AES(key_spec.key), modes.CBC(params.iv)).decryptor()
    padded = decryptor.update(data) + decryptor.finalize()
    unpadder = padding.PKCS7(AES_BLOCK_SIZE * 8).unpadder()
    try:
        return unpadder.update(padded) + unpadder.finalize()
    except ValueError as e:
        raise DecryptionError("bad padding (wrong key or corrupted ciphertext)") from e


_OPERATIONS = {
    CipherKit.AES_GCM: (GcmParams, _gcm_encrypt, _gcm_decrypt),
    CipherKit.AES_CBC: (CbcParams, _cbc_encrypt, _cbc_decrypt),
}


class CipherEngine:
    """
    Single-operation stateful cipher for one kit.

    Usage mirrors a classic cipher object: ``init`` with a mode, key and
    parameters, then ``do_final`` once. The engine is reset after every
    ``do_final`` (whether it succeeds or fails), so it can be reused for the
    next operation on the same thread. Not re-entrant.
    """

    def __init__(self, kit: CipherKit):
        self.kit = kit
        self._params_type, self._encrypt, self._decrypt = _OPERATIONS[kit]
        self._reset()

    def _reset(self) -> None:
        self._mode: Optional[Mode] = None
        self._key_spec: Optional[KeySpec] = None
        self._params: Optional[ParamSpec] = None

    @property
    def initialized(self) -> bool:
        return self._mode is not None

    def init(self, mode: Mode, key_spec: KeySpec, params: ParamSpec) -> None:
        if not isinstance(params, self._params_type):
            raise ValueError(
                f"{self.kit.transformation} expects {self._params_type.__name__}, "
                f"got {type(params).__name__}"
            )
        self._mode = mode
        self._key_spec = key_spec
        self._params = params

    def do_final(self, data: bytes) -> bytes:
        if self._mode is None:
            raise RuntimeError(f"{self.kit.transformation} cipher used before init()")

        mode, key_spec, params = self._mode, self._key_spec, self._params
        self._reset()
        if mode is Mode.ENCRYPT:
            return self._encrypt(key_spec, params, bytes(data))
        return self._decrypt(key_spec, params, bytes(data))


class _CipherEngines(threading.local):
    def __init__(self):
        self.by_kit = {}


_engines = _CipherEngines()


# Prefer GCM > CBC
CIPHER_KIT_AES_GCM = CipherKit.AES_GCM
CIPHER_KIT_AES_CBC = CipherKit.AES_CBC
