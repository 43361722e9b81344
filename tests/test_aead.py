import dataclasses

import pytest

from tessera_core.aead import AES128_GCM, AES256_GCM, AES256_GCM_RAW
from tessera_core.errors import AllCandidatesFailedError
from tessera_core.keyset import KeysetHandle
from tessera_core.models import KeyStatus, Keyset
from tessera_core.primitives import PrimitiveKind


def _aead(keyset, registry):
    return KeysetHandle(keyset).primitive(PrimitiveKind.AEAD, registry)


def test_round_trip_with_tink_prefix(registry, new_key):
    aead = _aead(Keyset(1, [new_key(AES128_GCM, 1)]), registry)
    ct = aead.encrypt(b"hello", b"context")
    assert ct[:5] == b"\x01\x00\x00\x00\x01"
    assert aead.decrypt(ct, b"context") == b"hello"


def test_wrong_associated_data(registry, new_key):
    aead = _aead(Keyset(1, [new_key(AES256_GCM, 1)]), registry)
    ct = aead.encrypt(b"hello", b"context")
    with pytest.raises(AllCandidatesFailedError):
        aead.decrypt(ct, b"other")


def test_tampered_ciphertext(registry, new_key):
    aead = _aead(Keyset(1, [new_key(AES128_GCM, 1)]), registry)
    ct = bytearray(aead.encrypt(b"hello", b""))
    ct[-1] ^= 0x01
    with pytest.raises(AllCandidatesFailedError):
        aead.decrypt(bytes(ct), b"")


def test_rotation_keeps_old_ciphertexts_readable(registry, new_key):
    k1, k2 = new_key(AES128_GCM, 1), new_key(AES128_GCM, 2)
    ct = _aead(Keyset(1, [k1, k2]), registry).encrypt(b"hello", b"ad")

    rotated = _aead(Keyset(2, [k1, k2]), registry)
    assert rotated.decrypt(ct, b"ad") == b"hello"
    assert rotated.encrypt(b"hello", b"ad")[:5] == b"\x01\x00\x00\x00\x02"

    without_k1 = _aead(Keyset(2, [dataclasses.replace(k1, status=KeyStatus.DISABLED), k2]), registry)
    with pytest.raises(AllCandidatesFailedError):
        without_k1.decrypt(ct, b"ad")

    with pytest.raises(AllCandidatesFailedError):
        _aead(Keyset(2, [k2]), registry).decrypt(ct, b"ad")


def test_raw_keys_are_tried_in_order(registry, new_key):
    k1, k2 = new_key(AES256_GCM_RAW, 1), new_key(AES256_GCM_RAW, 2)
    ct = _aead(Keyset(2, [k2]), registry).encrypt(b"hello", b"")
    # nonce + ciphertext + tag, no prefix
    assert len(ct) == 12 + 5 + 16
    assert _aead(Keyset(1, [k1, k2]), registry).decrypt(ct, b"") == b"hello"


def test_mixed_prefix_and_raw_keys(registry, new_key):
    tink, raw = new_key(AES128_GCM, 1), new_key(AES256_GCM_RAW, 2)
    from_raw = _aead(Keyset(2, [raw]), registry).encrypt(b"raw", b"")
    from_tink = _aead(Keyset(1, [tink]), registry).encrypt(b"tink", b"")
    both = _aead(Keyset(1, [tink, raw]), registry)
    assert both.decrypt(from_raw, b"") == b"raw"
    assert both.decrypt(from_tink, b"") == b"tink"


def test_short_ciphertext(registry, new_key):
    aead = _aead(Keyset(1, [new_key(AES128_GCM, 1)]), registry)
    with pytest.raises(AllCandidatesFailedError):
        aead.decrypt(b"\x01\x00", b"")
