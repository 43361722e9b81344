# tessera_core/signature/ed25519_key_manager.py
from __future__ import annotations
from dataclasses import dataclass, field

from tessera_core import crypto
from tessera_core.constants import KEY_TYPE_PREFIX
from tessera_core.errors import CryptoOperationError, InvalidKeyError, InvalidKeyFormatError
from tessera_core.key_manager import KeyFactory, KeyManager, PrivateKeyManager
from tessera_core.models import KeyMaterialType, KeyTemplate, OutputPrefixType
from tessera_core.primitives import PrimitiveKind, PublicKeySign, PublicKeyVerify
from tessera_core.utils import (
    b64e, decode_record, encode_record, record_bytes, record_dict, record_int,
)


@dataclass(frozen=True)
class Ed25519PublicKey:
    version: int
    key_value: bytes

    def to_record(self):
        return {"version": self.version, "key_value": b64e(self.key_value)}

    @classmethod
    def from_record(cls, record) -> "Ed25519PublicKey":
        return cls(version=record_int(record, "version"), key_value=record_bytes(record, "key_value"))


@dataclass(frozen=True)
class Ed25519PrivateKey:
    version: int
    public_key: Ed25519PublicKey
    key_value: bytes = field(repr=False)


class Ed25519Sign(PublicKeySign):
    def __init__(self, private_key: bytes):
        self._private_key = private_key

    def sign(self, data: bytes) -> bytes:
        return crypto.ed25519_sign(self._private_key, data)


class Ed25519Verify(PublicKeyVerify):
    def __init__(self, public_key: bytes):
        if len(public_key) != crypto.ED25519_KEY_SIZE:
            raise InvalidKeyError(f"Ed25519 public key must be {crypto.ED25519_KEY_SIZE} bytes")
        self._public_key = public_key

    def verify(self, signature: bytes, data: bytes) -> None:
        if not crypto.ed25519_verify(self._public_key, signature, data):
            raise CryptoOperationError("invalid signature")


def _check_public(key: Ed25519PublicKey, manager: KeyManager) -> None:
    manager._check_version(key.version)
    if len(key.key_value) != crypto.ED25519_KEY_SIZE:
        raise InvalidKeyError(
            f"Ed25519 public key must be {crypto.ED25519_KEY_SIZE} bytes, got {len(key.key_value)}"
        )


class Ed25519PublicKeyManager(KeyManager):
    """Import-only: public keys come from their private key."""
    KEY_TYPE = KEY_TYPE_PREFIX + "Ed25519PublicKey"
    VERSION = 0
    KEY_MATERIAL_TYPE = KeyMaterialType.ASYMMETRIC_PUBLIC
    KEY_CLASS = Ed25519PublicKey

    def primitive_factories(self):
        return {PrimitiveKind.PUBLIC_KEY_VERIFY: lambda key: Ed25519Verify(key.key_value)}

    def parse_key(self, data: bytes) -> Ed25519PublicKey:
        return Ed25519PublicKey.from_record(decode_record(data))

    def serialize_key(self, key: Ed25519PublicKey) -> bytes:
        return encode_record(key.to_record())

    def validate_key(self, key: Ed25519PublicKey) -> None:
        _check_public(key, self)


class _Ed25519KeyFactory(KeyFactory):
    KEY_FORMAT_CLASS = dict

    def __init__(self, manager: "Ed25519PrivateKeyManager"):
        self._manager = manager

    def parse_key_format(self, data: bytes):
        # Ed25519 has no parameters; the format is an empty object
        return decode_record(data)

    def validate_key_format(self, key_format) -> None:
        if key_format:
            raise InvalidKeyFormatError(f"Ed25519 key format takes no parameters, got {sorted(key_format)}")

    def create_key(self, key_format) -> Ed25519PrivateKey:
        priv, pub = crypto.ed25519_generate()
        version = self._manager.get_version()
        return Ed25519PrivateKey(
            version=version,
            public_key=Ed25519PublicKey(version=version, key_value=pub),
            key_value=priv,
        )


class Ed25519PrivateKeyManager(PrivateKeyManager):
    KEY_TYPE = KEY_TYPE_PREFIX + "Ed25519PrivateKey"
    VERSION = 0
    KEY_MATERIAL_TYPE = KeyMaterialType.ASYMMETRIC_PRIVATE
    KEY_CLASS = Ed25519PrivateKey

    def __init__(self, public_key_manager: KeyManager = None):
        super().__init__()
        self._public_manager = public_key_manager or Ed25519PublicKeyManager()

    def primitive_factories(self):
        return {PrimitiveKind.PUBLIC_KEY_SIGN: lambda key: Ed25519Sign(key.key_value)}

    def parse_key(self, data: bytes) -> Ed25519PrivateKey:
        record = decode_record(data)
        return Ed25519PrivateKey(
            version=record_int(record, "version"),
            public_key=Ed25519PublicKey.from_record(record_dict(record, "public_key")),
            key_value=record_bytes(record, "key_value"),
        )

    def serialize_key(self, key: Ed25519PrivateKey) -> bytes:
        return encode_record({
            "version": key.version,
            "public_key": key.public_key.to_record(),
            "key_value": b64e(key.key_value),
        })

    def validate_key(self, key: Ed25519PrivateKey) -> None:
        self._check_version(key.version)
        if len(key.key_value) != crypto.ED25519_KEY_SIZE:
            raise InvalidKeyError(
                f"Ed25519 private key must be {crypto.ED25519_KEY_SIZE} bytes, got {len(key.key_value)}"
            )
        _check_public(key.public_key, self)
        if crypto.ed25519_public_from_private(key.key_value) != key.public_key.key_value:
            raise InvalidKeyError("Ed25519 public key does not match private key")

    def key_factory(self) -> KeyFactory:
        return _Ed25519KeyFactory(self)

    def public_key(self, key: Ed25519PrivateKey) -> Ed25519PublicKey:
        return key.public_key

    def public_key_manager(self) -> KeyManager:
        return self._public_manager


def ed25519_key_template(output_prefix_type: OutputPrefixType = OutputPrefixType.TINK) -> KeyTemplate:
    return KeyTemplate(
        key_type=Ed25519PrivateKeyManager.KEY_TYPE,
        value=encode_record({}),
        output_prefix_type=output_prefix_type,
    )
