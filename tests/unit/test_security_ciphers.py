"""
Unit tests for the AES cipher kits and per-thread engines.
"""

import os
import threading

import pytest
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from sealkit.core.exceptions import (
    AuthenticationFailureError,
    DecryptionError,
    InvalidKeyLengthError,
)
from sealkit.security.ciphers import (
    CIPHER_KIT_AES_CBC,
    CIPHER_KIT_AES_GCM,
    DECRYPT_MODE,
    ENCRYPT_MODE,
    CbcParams,
    CipherKit,
    GcmParams,
    KeySpec,
)

KEY = bytes(range(16))


# ==============================================================================
# Tests: Kit properties
# ==============================================================================

def test_gcm_kit_properties():
    kit = CipherKit.AES_GCM
    assert kit is CIPHER_KIT_AES_GCM
    assert kit.iv_size == 12
    assert kit.transformation == "AES/GCM/NoPadding"
    assert kit.authenticated


def test_cbc_kit_properties():
    kit = CipherKit.AES_CBC
    assert kit is CIPHER_KIT_AES_CBC
    assert kit.iv_size == 16
    assert kit.transformation == "AES/CBC/PKCS5Padding"
    assert not kit.authenticated


@pytest.mark.parametrize("size", [16, 24, 32])
def test_key_spec_accepts_aes_sizes(size):
    spec = CipherKit.AES_GCM.key_spec(b"k" * size)
    assert spec.algorithm == "AES"
    assert spec.key == b"k" * size


@pytest.mark.parametrize("size", [0, 8, 15, 17, 64])
def test_key_spec_rejects_other_sizes(size):
    with pytest.raises(InvalidKeyLengthError):
        CipherKit.AES_CBC.key_spec(b"k" * size)


def test_key_spec_repr_hides_key():
    spec = KeySpec(b"secret-key-bytes")
    assert "secret" not in repr(spec)
    assert "key_len=16" in repr(spec)


def test_gcm_param_spec():
    iv = b"\x01" * 12
    params = CipherKit.AES_GCM.param_spec(iv)
    assert params == GcmParams(128, iv)


def test_cbc_param_spec():
    iv = b"\x01" * 16
    assert CipherKit.AES_CBC.param_spec(iv) == CbcParams(iv)


@pytest.mark.parametrize("kit,iv_len", [(CipherKit.AES_GCM, 16), (CipherKit.AES_CBC, 12)])
def test_param_spec_rejects_wrong_iv_length(kit, iv_len):
    with pytest.raises(ValueError):
        kit.param_spec(b"\x00" * iv_len)


# ==============================================================================
# Tests: Per-thread engines
# ==============================================================================

def test_engine_reused_within_thread():
    assert CipherKit.AES_GCM.cipher() is CipherKit.AES_GCM.cipher()
    assert CipherKit.AES_GCM.cipher() is not CipherKit.AES_CBC.cipher()


def test_engine_distinct_across_threads():
    main = CipherKit.AES_GCM.cipher()
    other = []
    t = threading.Thread(target=lambda: other.append(CipherKit.AES_GCM.cipher()))
    t.start()
    t.join()
    assert other[0] is not main
    assert other[0].kit is CipherKit.AES_GCM


def test_do_final_without_init():
    engine = CipherKit.AES_CBC.cipher()
    with pytest.raises(RuntimeError):
        engine.do_final(b"data")


def test_engine_reset_after_do_final():
    kit = CipherKit.AES_GCM
    engine = kit.cipher()
    engine.init(ENCRYPT_MODE, kit.key_spec(KEY), kit.param_spec(b"\x00" * 12))
    assert engine.initialized
    engine.do_final(b"data")
    assert not engine.initialized


def test_engine_reset_after_failed_do_final():
    kit = CipherKit.AES_GCM
    engine = kit.cipher()
    engine.init(DECRYPT_MODE, kit.key_spec(KEY), kit.param_spec(b"\x00" * 12))
    with pytest.raises(AuthenticationFailureError):
        engine.do_final(b"\x00" * 20)
    assert not engine.initialized


def test_init_rejects_params_for_other_mode():
    kit = CipherKit.AES_GCM
    with pytest.raises(ValueError):
        kit.cipher().init(ENCRYPT_MODE, kit.key_spec(KEY), CbcParams(b"\x00" * 16))


# ==============================================================================
# Tests: Mode behaviour
# ==============================================================================

def _run(kit, mode, iv, data, key=KEY):
    engine = kit.cipher()
    engine.init(mode, kit.key_spec(key), kit.param_spec(iv))
    return engine.do_final(data)


def test_gcm_matches_reference_aead():
    iv = os.urandom(12)
    data = b"attack at dawn"
    ct = _run(CipherKit.AES_GCM, ENCRYPT_MODE, iv, data)
    assert ct == AESGCM(KEY).encrypt(iv, data, None)
    assert len(ct) == len(data) + 16
    assert _run(CipherKit.AES_GCM, DECRYPT_MODE, iv, ct) == data


def test_gcm_decrypt_too_short_for_tag():
    with pytest.raises(AuthenticationFailureError):
        _run(CipherKit.AES_GCM, DECRYPT_MODE, b"\x00" * 12, b"\x00" * 15)


@pytest.mark.parametrize("n,expected", [(0, 16), (4, 16), (15, 16), (16, 32), (33, 48)])
def test_cbc_pkcs7_padded_lengths(n, expected):
    ct = _run(CipherKit.AES_CBC, ENCRYPT_MODE, b"\x00" * 16, b"x" * n)
    assert len(ct) == expected


def test_cbc_roundtrip():
    iv = os.urandom(16)
    ct = _run(CipherKit.AES_CBC, ENCRYPT_MODE, iv, b"data")
    assert _run(CipherKit.AES_CBC, DECRYPT_MODE, iv, ct) == b"data"


@pytest.mark.parametrize("n", [0, 15, 17])
def test_cbc_decrypt_rejects_bad_length(n):
    with pytest.raises(DecryptionError):
        _run(CipherKit.AES_CBC, DECRYPT_MODE, b"\x00" * 16, b"\x00" * n)


def test_cbc_decrypt_bad_padding():
    iv = b"\x00" * 16
    ct = _run(CipherKit.AES_CBC, ENCRYPT_MODE, iv, b"data")
    # single block: flipping IV bit 4 of the last byte turns the 0x0c pad byte into 0x1c
    bad_iv = iv[:15] + bytes([iv[15] ^ 0x10])
    with pytest.raises(DecryptionError):
        _run(CipherKit.AES_CBC, DECRYPT_MODE, bad_iv, ct)
