# tessera_core/daead/aes_siv_key_manager.py
from __future__ import annotations
from dataclasses import dataclass, field

from tessera_core import crypto
from tessera_core.constants import KEY_TYPE_PREFIX
from tessera_core.errors import InvalidKeyError, InvalidKeyFormatError
from tessera_core.key_manager import KeyFactory, KeyManager
from tessera_core.models import KeyMaterialType, KeyTemplate, OutputPrefixType
from tessera_core.primitives import DeterministicAead, PrimitiveKind
from tessera_core.utils import (
    b64e, decode_record, encode_record, random_bytes, record_bytes, record_int,
)

# AES-SIV uses two AES-256 keys
AES_SIV_KEY_SIZE = 64


@dataclass(frozen=True)
class AesSivKey:
    version: int
    key_value: bytes = field(repr=False)


@dataclass(frozen=True)
class AesSivKeyFormat:
    key_size: int


class AesSiv(DeterministicAead):
    def __init__(self, key: bytes):
        if len(key) != AES_SIV_KEY_SIZE:
            raise InvalidKeyError(f"AES-SIV key must be {AES_SIV_KEY_SIZE} bytes, got {len(key)}")
        self._key = key

    def encrypt_deterministically(self, plaintext: bytes, associated_data: bytes) -> bytes:
        return crypto.siv_encrypt(self._key, plaintext, associated_data)

    def decrypt_deterministically(self, ciphertext: bytes, associated_data: bytes) -> bytes:
        return crypto.siv_decrypt(self._key, ciphertext, associated_data)


class _AesSivKeyFactory(KeyFactory):
    KEY_FORMAT_CLASS = AesSivKeyFormat

    def __init__(self, manager: "AesSivKeyManager"):
        self._manager = manager

    def parse_key_format(self, data: bytes) -> AesSivKeyFormat:
        return AesSivKeyFormat(key_size=record_int(decode_record(data), "key_size"))

    def validate_key_format(self, key_format: AesSivKeyFormat) -> None:
        if key_format.key_size != AES_SIV_KEY_SIZE:
            raise InvalidKeyFormatError(
                f"AES-SIV key size must be {AES_SIV_KEY_SIZE} bytes, got {key_format.key_size}"
            )

    def create_key(self, key_format: AesSivKeyFormat) -> AesSivKey:
        return AesSivKey(version=self._manager.get_version(), key_value=random_bytes(key_format.key_size))


class AesSivKeyManager(KeyManager):
    KEY_TYPE = KEY_TYPE_PREFIX + "AesSivKey"
    VERSION = 0
    KEY_MATERIAL_TYPE = KeyMaterialType.SYMMETRIC
    KEY_CLASS = AesSivKey

    def primitive_factories(self):
        return {PrimitiveKind.DETERMINISTIC_AEAD: lambda key: AesSiv(key.key_value)}

    def parse_key(self, data: bytes) -> AesSivKey:
        record = decode_record(data)
        return AesSivKey(
            version=record_int(record, "version"),
            key_value=record_bytes(record, "key_value"),
        )

    def serialize_key(self, key: AesSivKey) -> bytes:
        return encode_record({"version": key.version, "key_value": b64e(key.key_value)})

    def validate_key(self, key: AesSivKey) -> None:
        self._check_version(key.version)
        if len(key.key_value) != AES_SIV_KEY_SIZE:
            raise InvalidKeyError(
                f"AES-SIV key must be {AES_SIV_KEY_SIZE} bytes, got {len(key.key_value)}"
            )

    def key_factory(self) -> KeyFactory:
        return _AesSivKeyFactory(self)


def aes_siv_key_template(output_prefix_type: OutputPrefixType = OutputPrefixType.TINK) -> KeyTemplate:
    return KeyTemplate(
        key_type=AesSivKeyManager.KEY_TYPE,
        value=encode_record({"key_size": AES_SIV_KEY_SIZE}),
        output_prefix_type=output_prefix_type,
    )
