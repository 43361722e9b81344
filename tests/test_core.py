import pytest

from tessera_core.crypto import (
    aead_decrypt, aead_encrypt, derive_key, ed25519_generate, ed25519_public_from_private,
    ed25519_sign, ed25519_verify, hmac_compute, hmac_verify, siv_decrypt, siv_encrypt,
    x25519_generate,
)
from tessera_core.errors import CryptoOperationError, InvalidKeyError
from tessera_core.utils import random_bytes


def test_sign_verify():
    priv, pub = ed25519_generate()
    sig = ed25519_sign(priv, b"fused.track")
    assert ed25519_verify(pub, sig, b"fused.track")
    assert not ed25519_verify(pub, sig, b"fused.other")
    assert ed25519_public_from_private(priv) == pub


def test_ed25519_public_from_bad_private():
    with pytest.raises(InvalidKeyError):
        ed25519_public_from_private(b"short")


def test_encrypt_decrypt():
    s_priv, s_pub = x25519_generate()
    r_priv, r_pub = x25519_generate()
    key1 = derive_key(s_priv, r_pub)
    key2 = derive_key(r_priv, s_pub)
    assert key1 == key2
    nonce, ct = aead_encrypt(key1, b'{"msg":"hi"}', aad=b"subject")
    assert aead_decrypt(key2, nonce, ct, aad=b"subject") == b'{"msg":"hi"}'


def test_aead_decrypt_wrong_aad_raises():
    key = random_bytes(32)
    nonce, ct = aead_encrypt(key, b"payload", aad=b"a")
    with pytest.raises(CryptoOperationError):
        aead_decrypt(key, nonce, ct, aad=b"b")


def test_siv_is_deterministic():
    key = random_bytes(64)
    assert siv_encrypt(key, b"payload", b"ad") == siv_encrypt(key, b"payload", b"ad")
    ct = siv_encrypt(key, b"payload", b"ad")
    assert siv_decrypt(key, ct, b"ad") == b"payload"
    with pytest.raises(CryptoOperationError):
        siv_decrypt(key, ct, b"other")


def test_hmac_truncated_tag():
    key = random_bytes(32)
    tag = hmac_compute(key, "SHA256", b"data", 16)
    assert len(tag) == 16
    hmac_verify(key, "SHA256", tag, b"data", 16)
    with pytest.raises(CryptoOperationError):
        hmac_verify(key, "SHA256", tag, b"other", 16)


def test_hmac_unknown_hash():
    with pytest.raises(InvalidKeyError):
        hmac_compute(random_bytes(32), "MD5", b"data", 16)
