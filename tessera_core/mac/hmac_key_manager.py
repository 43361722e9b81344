# tessera_core/mac/hmac_key_manager.py
from __future__ import annotations
from dataclasses import dataclass, field

from tessera_core import crypto
from tessera_core.constants import KEY_TYPE_PREFIX
from tessera_core.errors import InvalidKeyError, InvalidKeyFormatError
from tessera_core.key_manager import KeyFactory, KeyManager
from tessera_core.models import KeyMaterialType, KeyTemplate, OutputPrefixType
from tessera_core.primitives import Mac, PrimitiveKind
from tessera_core.utils import (
    b64e, decode_record, encode_record, random_bytes, record_bytes, record_dict, record_int, record_str,
)

MIN_KEY_SIZE = 16
MIN_TAG_SIZE = 10
MAX_TAG_SIZE = {"SHA256": 32, "SHA512": 64}


@dataclass(frozen=True)
class HmacParams:
    hash: str
    tag_size: int

    def to_record(self):
        return {"hash": self.hash, "tag_size": self.tag_size}

    @classmethod
    def from_record(cls, record) -> "HmacParams":
        return cls(hash=record_str(record, "hash"), tag_size=record_int(record, "tag_size"))


@dataclass(frozen=True)
class HmacKey:
    version: int
    params: HmacParams
    key_value: bytes = field(repr=False)


@dataclass(frozen=True)
class HmacKeyFormat:
    key_size: int
    params: HmacParams


def _check_params(params: HmacParams, error=InvalidKeyError) -> None:
    max_tag = MAX_TAG_SIZE.get(params.hash)
    if max_tag is None:
        raise error(f"unsupported HMAC hash: {params.hash}")
    if not MIN_TAG_SIZE <= params.tag_size <= max_tag:
        raise error(f"HMAC-{params.hash} tag size must be in [{MIN_TAG_SIZE}, {max_tag}], got {params.tag_size}")


class HmacMac(Mac):
    def __init__(self, key: bytes, params: HmacParams):
        self._key = key
        self._params = params

    def compute_mac(self, data: bytes) -> bytes:
        return crypto.hmac_compute(self._key, self._params.hash, data, self._params.tag_size)

    def verify_mac(self, mac_value: bytes, data: bytes) -> None:
        crypto.hmac_verify(self._key, self._params.hash, mac_value, data, self._params.tag_size)


class _HmacKeyFactory(KeyFactory):
    KEY_FORMAT_CLASS = HmacKeyFormat

    def __init__(self, manager: "HmacKeyManager"):
        self._manager = manager

    def parse_key_format(self, data: bytes) -> HmacKeyFormat:
        record = decode_record(data)
        return HmacKeyFormat(
            key_size=record_int(record, "key_size"),
            params=HmacParams.from_record(record_dict(record, "params")),
        )

    def validate_key_format(self, key_format: HmacKeyFormat) -> None:
        if key_format.key_size < MIN_KEY_SIZE:
            raise InvalidKeyFormatError(f"HMAC key size must be at least {MIN_KEY_SIZE} bytes")
        _check_params(key_format.params, InvalidKeyFormatError)

    def create_key(self, key_format: HmacKeyFormat) -> HmacKey:
        return HmacKey(
            version=self._manager.get_version(),
            params=key_format.params,
            key_value=random_bytes(key_format.key_size),
        )


class HmacKeyManager(KeyManager):
    KEY_TYPE = KEY_TYPE_PREFIX + "HmacKey"
    VERSION = 0
    KEY_MATERIAL_TYPE = KeyMaterialType.SYMMETRIC
    KEY_CLASS = HmacKey

    def primitive_factories(self):
        return {PrimitiveKind.MAC: lambda key: HmacMac(key.key_value, key.params)}

    def parse_key(self, data: bytes) -> HmacKey:
        record = decode_record(data)
        return HmacKey(
            version=record_int(record, "version"),
            params=HmacParams.from_record(record_dict(record, "params")),
            key_value=record_bytes(record, "key_value"),
        )

    def serialize_key(self, key: HmacKey) -> bytes:
        return encode_record({
            "version": key.version,
            "params": key.params.to_record(),
            "key_value": b64e(key.key_value),
        })

    def validate_key(self, key: HmacKey) -> None:
        self._check_version(key.version)
        if len(key.key_value) < MIN_KEY_SIZE:
            raise InvalidKeyError(f"HMAC key must be at least {MIN_KEY_SIZE} bytes, got {len(key.key_value)}")
        _check_params(key.params)

    def key_factory(self) -> KeyFactory:
        return _HmacKeyFactory(self)


def hmac_key_template(
    key_size: int,
    tag_size: int,
    hash_name: str,
    output_prefix_type: OutputPrefixType = OutputPrefixType.TINK,
) -> KeyTemplate:
    return KeyTemplate(
        key_type=HmacKeyManager.KEY_TYPE,
        value=encode_record({"key_size": key_size, "params": {"hash": hash_name, "tag_size": tag_size}}),
        output_prefix_type=output_prefix_type,
    )
