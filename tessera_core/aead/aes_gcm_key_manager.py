# tessera_core/aead/aes_gcm_key_manager.py
from __future__ import annotations
from dataclasses import dataclass, field

from tessera_core import crypto
from tessera_core.constants import KEY_TYPE_PREFIX
from tessera_core.errors import CryptoOperationError, InvalidKeyError, InvalidKeyFormatError
from tessera_core.key_manager import KeyFactory, KeyManager
from tessera_core.models import KeyMaterialType, KeyTemplate, OutputPrefixType
from tessera_core.primitives import Aead, PrimitiveKind
from tessera_core.utils import (
    b64e, decode_record, encode_record, random_bytes, record_bytes, record_int,
)

AES_GCM_KEY_SIZES = (16, 32)


@dataclass(frozen=True)
class AesGcmKey:
    version: int
    key_value: bytes = field(repr=False)


@dataclass(frozen=True)
class AesGcmKeyFormat:
    key_size: int


class AesGcm(Aead):
    """AES-GCM with a random 12-byte nonce; output is nonce || ciphertext || tag."""

    def __init__(self, key: bytes):
        if len(key) not in AES_GCM_KEY_SIZES:
            raise InvalidKeyError(f"AES-GCM key must be 16 or 32 bytes, got {len(key)}")
        self._key = key

    def encrypt(self, plaintext: bytes, associated_data: bytes) -> bytes:
        nonce, ct = crypto.aead_encrypt(self._key, plaintext, associated_data)
        return nonce + ct

    def decrypt(self, ciphertext: bytes, associated_data: bytes) -> bytes:
        if len(ciphertext) < crypto.GCM_NONCE_SIZE + crypto.GCM_TAG_SIZE:
            raise CryptoOperationError("ciphertext too short")
        nonce = ciphertext[:crypto.GCM_NONCE_SIZE]
        return crypto.aead_decrypt(self._key, nonce, ciphertext[crypto.GCM_NONCE_SIZE:], associated_data)


class _AesGcmKeyFactory(KeyFactory):
    KEY_FORMAT_CLASS = AesGcmKeyFormat

    def __init__(self, manager: "AesGcmKeyManager"):
        self._manager = manager

    def parse_key_format(self, data: bytes) -> AesGcmKeyFormat:
        record = decode_record(data)
        return AesGcmKeyFormat(key_size=record_int(record, "key_size"))

    def validate_key_format(self, key_format: AesGcmKeyFormat) -> None:
        if key_format.key_size not in AES_GCM_KEY_SIZES:
            raise InvalidKeyFormatError(
                f"AES-GCM key size must be 16 or 32 bytes, got {key_format.key_size}"
            )

    def create_key(self, key_format: AesGcmKeyFormat) -> AesGcmKey:
        return AesGcmKey(version=self._manager.get_version(), key_value=random_bytes(key_format.key_size))


class AesGcmKeyManager(KeyManager):
    KEY_TYPE = KEY_TYPE_PREFIX + "AesGcmKey"
    VERSION = 0
    KEY_MATERIAL_TYPE = KeyMaterialType.SYMMETRIC
    KEY_CLASS = AesGcmKey

    def primitive_factories(self):
        return {PrimitiveKind.AEAD: lambda key: AesGcm(key.key_value)}

    def parse_key(self, data: bytes) -> AesGcmKey:
        record = decode_record(data)
        return AesGcmKey(
            version=record_int(record, "version"),
            key_value=record_bytes(record, "key_value"),
        )

    def serialize_key(self, key: AesGcmKey) -> bytes:
        return encode_record({"version": key.version, "key_value": b64e(key.key_value)})

    def validate_key(self, key: AesGcmKey) -> None:
        self._check_version(key.version)
        if len(key.key_value) not in AES_GCM_KEY_SIZES:
            raise InvalidKeyError(
                f"AES-GCM key must be 16 or 32 bytes, got {len(key.key_value)}"
            )

    def key_factory(self) -> KeyFactory:
        return _AesGcmKeyFactory(self)


def aes_gcm_key_template(key_size: int, output_prefix_type: OutputPrefixType = OutputPrefixType.TINK) -> KeyTemplate:
    return KeyTemplate(
        key_type=AesGcmKeyManager.KEY_TYPE,
        value=encode_record({"key_size": key_size}),
        output_prefix_type=output_prefix_type,
    )
