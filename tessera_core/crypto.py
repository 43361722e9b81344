"""
tessera_core.crypto
-------------------
Low-level cryptographic operations used by the key managers:

- AES-GCM and AES-SIV: (deterministic) authenticated encryption
- HMAC-SHA2: message authentication with truncated tags
- Ed25519: digital signatures
- X25519 + HKDF: key agreement for hybrid encryption

Everything here works on raw bytes. Failures of `cryptography` are
translated into CryptoOperationError / InvalidKeyError so backend exceptions
never reach callers.
"""

from __future__ import annotations
from typing import Tuple, Optional
from cryptography.exceptions import InvalidSignature, InvalidTag
from cryptography.hazmat.primitives.asymmetric import ed25519, x25519
from cryptography.hazmat.primitives.kdf.hkdf import HKDF
from cryptography.hazmat.primitives import constant_time, hashes, hmac
from cryptography.hazmat.primitives.ciphers.aead import AESGCM, AESSIV

from .errors import CryptoOperationError, InvalidKeyError
from .utils import random_bytes

GCM_NONCE_SIZE = 12
GCM_TAG_SIZE = 16
X25519_KEY_SIZE = 32
ED25519_KEY_SIZE = 32

_HASHES = {
    "SHA256": hashes.SHA256,
    "SHA512": hashes.SHA512,
}


# --------- AES-GCM ----------
def aead_encrypt(key: bytes, plaintext: bytes, aad: Optional[bytes] = None) -> Tuple[bytes, bytes]:
    aes = AESGCM(key)
    nonce = random_bytes(GCM_NONCE_SIZE)
    ct = aes.encrypt(nonce, plaintext, aad)
    return nonce, ct

def aead_decrypt(key: bytes, nonce: bytes, ciphertext: bytes, aad: Optional[bytes] = None) -> bytes:
    aes = AESGCM(key)
    try:
        return aes.decrypt(nonce, ciphertext, aad)
    except InvalidTag as e:
        raise CryptoOperationError("decryption failed") from e


# --------- AES-SIV ----------
def siv_encrypt(key: bytes, plaintext: bytes, aad: bytes) -> bytes:
    return AESSIV(key).encrypt(plaintext, [aad])

def siv_decrypt(key: bytes, ciphertext: bytes, aad: bytes) -> bytes:
    try:
        return AESSIV(key).decrypt(ciphertext, [aad])
    except (InvalidTag, ValueError) as e:
        raise CryptoOperationError("decryption failed") from e


# --------- HMAC ----------
def hmac_compute(key: bytes, hash_name: str, data: bytes, tag_size: int) -> bytes:
    try:
        algorithm = _HASHES[hash_name]()
    except KeyError:
        raise InvalidKeyError(f"unsupported hash: {hash_name}")
    h = hmac.HMAC(key, algorithm)
    h.update(data)
    return h.finalize()[:tag_size]

def hmac_verify(key: bytes, hash_name: str, tag: bytes, data: bytes, tag_size: int) -> None:
    expected = hmac_compute(key, hash_name, data, tag_size)
    if not constant_time.bytes_eq(expected, bytes(tag)):
        raise CryptoOperationError("invalid MAC")


# --------- Ed25519 (sign/verify) ----------
def ed25519_generate() -> Tuple[bytes, bytes]:
    sk = ed25519.Ed25519PrivateKey.generate()
    pk = sk.public_key()
    return sk.private_bytes_raw(), pk.public_bytes_raw()

def ed25519_public_from_private(priv_raw: bytes) -> bytes:
    try:
        sk = ed25519.Ed25519PrivateKey.from_private_bytes(priv_raw)
    except ValueError as e:
        raise InvalidKeyError(f"invalid Ed25519 private key: {e}") from e
    return sk.public_key().public_bytes_raw()

def ed25519_sign(priv_raw: bytes, data: bytes) -> bytes:
    sk = ed25519.Ed25519PrivateKey.from_private_bytes(priv_raw)
    return sk.sign(data)

def ed25519_verify(pub_raw: bytes, sig: bytes, data: bytes) -> bool:
    try:
        ed25519.Ed25519PublicKey.from_public_bytes(pub_raw).verify(sig, data)
        return True
    except (InvalidSignature, ValueError):
        return False


# --------- X25519 + HKDF (hybrid encryption) ----------
def x25519_generate() -> Tuple[bytes, bytes]:
    sk = x25519.X25519PrivateKey.generate()
    pk = sk.public_key()
    return sk.private_bytes_raw(), pk.public_bytes_raw()

def x25519_public_from_private(priv_raw: bytes) -> bytes:
    try:
        sk = x25519.X25519PrivateKey.from_private_bytes(priv_raw)
    except ValueError as e:
        raise InvalidKeyError(f"invalid X25519 private key: {e}") from e
    return sk.public_key().public_bytes_raw()

def derive_key(
    own_priv: bytes,
    peer_pub: bytes,
    length: int = 32,
    salt: Optional[bytes] = None,
    info: bytes = b"tessera-v1",
) -> bytes:
    sk = x25519.X25519PrivateKey.from_private_bytes(own_priv)
    try:
        shared = sk.exchange(x25519.X25519PublicKey.from_public_bytes(peer_pub))
    except ValueError as e:
        # low-order peer points yield an all-zero secret
        raise CryptoOperationError("key agreement failed") from e
    hkdf = HKDF(algorithm=hashes.SHA256(), length=length, salt=salt or None, info=info)
    return hkdf.derive(shared)
