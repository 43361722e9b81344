"""
X25519 + HKDF-SHA256 + AES-GCM hybrid encryption.

Ciphertext layout: ephemeral public key (32) || nonce (12) || AES-GCM output.
The AES key is HKDF(shared secret, salt, info = ephemeral public key || context_info).
"""

from __future__ import annotations
from dataclasses import dataclass, field

from tessera_core import crypto
from tessera_core.constants import KEY_TYPE_PREFIX
from tessera_core.errors import CryptoOperationError, InvalidKeyError, InvalidKeyFormatError
from tessera_core.key_manager import KeyFactory, KeyManager, PrivateKeyManager
from tessera_core.models import KeyMaterialType, KeyTemplate, OutputPrefixType
from tessera_core.primitives import HybridDecrypt, HybridEncrypt, PrimitiveKind
from tessera_core.utils import (
    b64e, decode_record, encode_record, record_bytes, record_dict, record_int,
)

AEAD_KEY_SIZES = (16, 32)
_MIN_CIPHERTEXT = crypto.X25519_KEY_SIZE + crypto.GCM_NONCE_SIZE + crypto.GCM_TAG_SIZE


@dataclass(frozen=True)
class HybridParams:
    aead_key_size: int
    hkdf_salt: bytes = b""

    def to_record(self):
        return {"aead_key_size": self.aead_key_size, "hkdf_salt": b64e(self.hkdf_salt)}

    @classmethod
    def from_record(cls, record) -> "HybridParams":
        return cls(
            aead_key_size=record_int(record, "aead_key_size"),
            hkdf_salt=record_bytes(record, "hkdf_salt", ""),
        )


@dataclass(frozen=True)
class X25519PublicKey:
    version: int
    params: HybridParams
    key_value: bytes

    def to_record(self):
        return {"version": self.version, "params": self.params.to_record(), "key_value": b64e(self.key_value)}

    @classmethod
    def from_record(cls, record) -> "X25519PublicKey":
        return cls(
            version=record_int(record, "version"),
            params=HybridParams.from_record(record_dict(record, "params")),
            key_value=record_bytes(record, "key_value"),
        )


@dataclass(frozen=True)
class X25519PrivateKey:
    version: int
    public_key: X25519PublicKey
    key_value: bytes = field(repr=False)


def _check_params(params: HybridParams, error=InvalidKeyError) -> None:
    if params.aead_key_size not in AEAD_KEY_SIZES:
        raise error(f"AEAD key size must be 16 or 32 bytes, got {params.aead_key_size}")


class X25519HybridEncrypt(HybridEncrypt):
    def __init__(self, public_key: bytes, params: HybridParams):
        self._public_key = public_key
        self._params = params

    def encrypt(self, plaintext: bytes, context_info: bytes) -> bytes:
        eph_priv, eph_pub = crypto.x25519_generate()
        key = crypto.derive_key(
            eph_priv,
            self._public_key,
            length=self._params.aead_key_size,
            salt=self._params.hkdf_salt,
            info=eph_pub + bytes(context_info),
        )
        nonce, ct = crypto.aead_encrypt(key, plaintext)
        return eph_pub + nonce + ct


class X25519HybridDecrypt(HybridDecrypt):
    def __init__(self, private_key: bytes, params: HybridParams):
        self._private_key = private_key
        self._params = params

    def decrypt(self, ciphertext: bytes, context_info: bytes) -> bytes:
        if len(ciphertext) < _MIN_CIPHERTEXT:
            raise CryptoOperationError("ciphertext too short")
        eph_pub = ciphertext[:crypto.X25519_KEY_SIZE]
        nonce = ciphertext[crypto.X25519_KEY_SIZE:crypto.X25519_KEY_SIZE + crypto.GCM_NONCE_SIZE]
        key = crypto.derive_key(
            self._private_key,
            eph_pub,
            length=self._params.aead_key_size,
            salt=self._params.hkdf_salt,
            info=bytes(eph_pub) + bytes(context_info),
        )
        return crypto.aead_decrypt(key, nonce, ciphertext[crypto.X25519_KEY_SIZE + crypto.GCM_NONCE_SIZE:])


def _check_public(key: X25519PublicKey, manager: KeyManager) -> None:
    manager._check_version(key.version)
    _check_params(key.params)
    if len(key.key_value) != crypto.X25519_KEY_SIZE:
        raise InvalidKeyError(
            f"X25519 public key must be {crypto.X25519_KEY_SIZE} bytes, got {len(key.key_value)}"
        )


class X25519HkdfAesGcmPublicKeyManager(KeyManager):
    """Import-only: public keys come from their private key."""
    KEY_TYPE = KEY_TYPE_PREFIX + "X25519HkdfAesGcmPublicKey"
    VERSION = 0
    KEY_MATERIAL_TYPE = KeyMaterialType.ASYMMETRIC_PUBLIC
    KEY_CLASS = X25519PublicKey

    def primitive_factories(self):
        return {PrimitiveKind.HYBRID_ENCRYPT: lambda key: X25519HybridEncrypt(key.key_value, key.params)}

    def parse_key(self, data: bytes) -> X25519PublicKey:
        return X25519PublicKey.from_record(decode_record(data))

    def serialize_key(self, key: X25519PublicKey) -> bytes:
        return encode_record(key.to_record())

    def validate_key(self, key: X25519PublicKey) -> None:
        _check_public(key, self)


class _X25519KeyFactory(KeyFactory):
    KEY_FORMAT_CLASS = HybridParams

    def __init__(self, manager: "X25519HkdfAesGcmPrivateKeyManager"):
        self._manager = manager

    def parse_key_format(self, data: bytes) -> HybridParams:
        return HybridParams.from_record(decode_record(data))

    def validate_key_format(self, key_format: HybridParams) -> None:
        _check_params(key_format, InvalidKeyFormatError)

    def create_key(self, key_format: HybridParams) -> X25519PrivateKey:
        priv, pub = crypto.x25519_generate()
        version = self._manager.get_version()
        return X25519PrivateKey(
            version=version,
            public_key=X25519PublicKey(version=version, params=key_format, key_value=pub),
            key_value=priv,
        )


class X25519HkdfAesGcmPrivateKeyManager(PrivateKeyManager):
    KEY_TYPE = KEY_TYPE_PREFIX + "X25519HkdfAesGcmPrivateKey"
    VERSION = 0
    KEY_MATERIAL_TYPE = KeyMaterialType.ASYMMETRIC_PRIVATE
    KEY_CLASS = X25519PrivateKey

    def __init__(self, public_key_manager: KeyManager = None):
        super().__init__()
        self._public_manager = public_key_manager or X25519HkdfAesGcmPublicKeyManager()

    def primitive_factories(self):
        return {
            PrimitiveKind.HYBRID_DECRYPT: lambda key: X25519HybridDecrypt(key.key_value, key.public_key.params),
        }

    def parse_key(self, data: bytes) -> X25519PrivateKey:
        record = decode_record(data)
        return X25519PrivateKey(
            version=record_int(record, "version"),
            public_key=X25519PublicKey.from_record(record_dict(record, "public_key")),
            key_value=record_bytes(record, "key_value"),
        )

    def serialize_key(self, key: X25519PrivateKey) -> bytes:
        return encode_record({
            "version": key.version,
            "public_key": key.public_key.to_record(),
            "key_value": b64e(key.key_value),
        })

    def validate_key(self, key: X25519PrivateKey) -> None:
        self._check_version(key.version)
        if len(key.key_value) != crypto.X25519_KEY_SIZE:
            raise InvalidKeyError(
                f"X25519 private key must be {crypto.X25519_KEY_SIZE} bytes, got {len(key.key_value)}"
            )
        _check_public(key.public_key, self)
        if crypto.x25519_public_from_private(key.key_value) != key.public_key.key_value:
            raise InvalidKeyError("X25519 public key does not match private key")

    def key_factory(self) -> KeyFactory:
        return _X25519KeyFactory(self)

    def public_key(self, key: X25519PrivateKey) -> X25519PublicKey:
        return key.public_key

    def public_key_manager(self) -> KeyManager:
        return self._public_manager


def x25519_hkdf_aes_gcm_key_template(
    aead_key_size: int,
    hkdf_salt: bytes = b"",
    output_prefix_type: OutputPrefixType = OutputPrefixType.TINK,
) -> KeyTemplate:
    return KeyTemplate(
        key_type=X25519HkdfAesGcmPrivateKeyManager.KEY_TYPE,
        value=encode_record(HybridParams(aead_key_size, hkdf_salt).to_record()),
        output_prefix_type=output_prefix_type,
    )
