"""
tessera_core.primitives
-----------------------
Capability interfaces that concrete algorithms implement and callers consume.

Every interface carries a closed `KIND` tag; key managers, primitive sets and
wrappers match on that tag rather than on classes.
"""

from __future__ import annotations
from enum import Enum
from typing import Optional


class PrimitiveKind(str, Enum):
    AEAD = "aead"
    DETERMINISTIC_AEAD = "deterministic_aead"
    MAC = "mac"
    PUBLIC_KEY_SIGN = "public_key_sign"
    PUBLIC_KEY_VERIFY = "public_key_verify"
    HYBRID_ENCRYPT = "hybrid_encrypt"
    HYBRID_DECRYPT = "hybrid_decrypt"

    @classmethod
    def parse(cls, name: "str | PrimitiveKind") -> "PrimitiveKind":
        """Accepts enum members, values or names in any case."""
        if isinstance(name, cls):
            return name
        key = str(name).strip().lower()
        for kind in cls:
            if key in (kind.value, kind.name.lower(), kind.value.replace("_", "")):
                return kind
        raise ValueError(f"Unknown primitive kind: {name}")


class Primitive:
    KIND: Optional[PrimitiveKind] = None


class Aead(Primitive):
    """Authenticated encryption with associated data."""
    KIND = PrimitiveKind.AEAD

    def encrypt(self, plaintext: bytes, associated_data: bytes) -> bytes:
        raise NotImplementedError

    def decrypt(self, ciphertext: bytes, associated_data: bytes) -> bytes:
        raise NotImplementedError


class DeterministicAead(Primitive):
    KIND = PrimitiveKind.DETERMINISTIC_AEAD

    def encrypt_deterministically(self, plaintext: bytes, associated_data: bytes) -> bytes:
        raise NotImplementedError

    def decrypt_deterministically(self, ciphertext: bytes, associated_data: bytes) -> bytes:
        raise NotImplementedError


class Mac(Primitive):
    KIND = PrimitiveKind.MAC

    def compute_mac(self, data: bytes) -> bytes:
        raise NotImplementedError

    def verify_mac(self, mac_value: bytes, data: bytes) -> None:
        """Raises CryptoOperationError when the tag does not match."""
        raise NotImplementedError


class PublicKeySign(Primitive):
    KIND = PrimitiveKind.PUBLIC_KEY_SIGN

    def sign(self, data: bytes) -> bytes:
        raise NotImplementedError


class PublicKeyVerify(Primitive):
    KIND = PrimitiveKind.PUBLIC_KEY_VERIFY

    def verify(self, signature: bytes, data: bytes) -> None:
        """Raises CryptoOperationError when the signature is invalid."""
        raise NotImplementedError


class HybridEncrypt(Primitive):
    KIND = PrimitiveKind.HYBRID_ENCRYPT

    def encrypt(self, plaintext: bytes, context_info: bytes) -> bytes:
        raise NotImplementedError


class HybridDecrypt(Primitive):
    KIND = PrimitiveKind.HYBRID_DECRYPT

    def decrypt(self, ciphertext: bytes, context_info: bytes) -> bytes:
        raise NotImplementedError
