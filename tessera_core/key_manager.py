"""
tessera_core.key_manager
------------------------
Base classes for key managers.

A key manager is bound to one key type. Subclasses implement the parsing,
validation and construction hooks; the public operations below chain them so
that no primitive can be built from bytes that skipped `validate_key`.

Hooks (per algorithm):
- parse_key(bytes) -> key object           (ParseError)
- serialize_key(key) -> bytes
- validate_key(key) -> None                (InvalidKeyError)
- primitive_factories() -> {PrimitiveKind: factory(key) -> primitive}
- key_factory() -> KeyFactory | None       (None for import-only managers)
"""

from __future__ import annotations
from typing import Any, Callable, Dict, FrozenSet, Mapping, Optional

from .errors import (
    InvalidKeyError,
    InvalidKeyFormatError,
    UnsupportedOperationError,
    UnsupportedPrimitiveError,
)
from .models import KeyData, KeyMaterialType
from .primitives import PrimitiveKind

PrimitiveFactory = Callable[[Any], Any]


class KeyFactory:
    """Creates new keys from a serialized key format."""
    KEY_FORMAT_CLASS: Optional[type] = None

    def parse_key_format(self, data: bytes) -> Any:
        raise NotImplementedError

    def validate_key_format(self, key_format: Any) -> None:
        """Raises InvalidKeyFormatError."""
        raise NotImplementedError

    def create_key(self, key_format: Any) -> Any:
        raise NotImplementedError


class KeyManager:
    KEY_TYPE: str = ""
    VERSION: int = 0
    KEY_MATERIAL_TYPE: KeyMaterialType = KeyMaterialType.UNKNOWN
    KEY_CLASS: Optional[type] = None

    def __init__(self):
        factories = dict(self.primitive_factories())
        if not factories:
            raise ValueError(f"{type(self).__name__} declares no primitive capability")
        for kind in factories:
            if not isinstance(kind, PrimitiveKind):
                raise ValueError(f"capability must be a PrimitiveKind, got {kind!r}")
        self._factories: Dict[PrimitiveKind, PrimitiveFactory] = factories

    # ------------------------------------------------------------------
    # Hooks
    # ------------------------------------------------------------------
    def primitive_factories(self) -> Mapping[PrimitiveKind, PrimitiveFactory]:
        raise NotImplementedError

    def parse_key(self, data: bytes) -> Any:
        raise NotImplementedError

    def serialize_key(self, key: Any) -> bytes:
        raise NotImplementedError

    def validate_key(self, key: Any) -> None:
        raise NotImplementedError

    def key_factory(self) -> Optional[KeyFactory]:
        return None

    # ------------------------------------------------------------------
    # Self-description
    # ------------------------------------------------------------------
    def get_key_type(self) -> str:
        return self.KEY_TYPE

    def get_version(self) -> int:
        return self.VERSION

    def key_material_type(self) -> KeyMaterialType:
        return self.KEY_MATERIAL_TYPE

    def does_support(self, key_type: str) -> bool:
        return key_type == self.KEY_TYPE

    def capabilities(self) -> FrozenSet[PrimitiveKind]:
        return frozenset(self._factories)

    def supports_capability(self, capability: PrimitiveKind) -> bool:
        return capability in self._factories

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------
    def get_primitive(self, key_material: bytes, requested_capability: PrimitiveKind) -> Any:
        factory = self._primitive_factory(requested_capability)
        key = self.parse_key(key_material)
        self.validate_key(key)
        return factory(key)

    def get_primitive_from_key(self, key: Any, requested_capability: PrimitiveKind) -> Any:
        """Same as get_primitive, for an already parsed key object."""
        factory = self._primitive_factory(requested_capability)
        if key is None or (self.KEY_CLASS is not None and not isinstance(key, self.KEY_CLASS)):
            raise InvalidKeyError(
                f"{self.KEY_TYPE} expects a {getattr(self.KEY_CLASS, '__name__', 'key')}, got {type(key).__name__}"
            )
        self.validate_key(key)
        return factory(key)

    def new_key(self, key_format: bytes) -> Any:
        factory = self._key_factory()
        return self._create(factory, factory.parse_key_format(key_format))

    def new_key_from_format(self, key_format: Any) -> Any:
        """Same as new_key, for an already parsed key format object."""
        factory = self._key_factory()
        expected = factory.KEY_FORMAT_CLASS
        if key_format is None or (expected is not None and not isinstance(key_format, expected)):
            raise InvalidKeyFormatError(
                f"{self.KEY_TYPE} expects a {getattr(expected, '__name__', 'key format')}, got {type(key_format).__name__}"
            )
        return self._create(factory, key_format)

    def new_key_data(self, key_format: bytes) -> KeyData:
        key = self.new_key(key_format)
        return KeyData(
            key_type=self.KEY_TYPE,
            value=self.serialize_key(key),
            key_material_type=self.KEY_MATERIAL_TYPE,
        )

    def _primitive_factory(self, capability: PrimitiveKind) -> PrimitiveFactory:
        factory = self._factories.get(capability)
        if factory is None:
            raise UnsupportedPrimitiveError(
                f"{self.KEY_TYPE} does not provide primitive {getattr(capability, 'value', capability)}"
            )
        return factory

    def _key_factory(self) -> KeyFactory:
        factory = self.key_factory()
        if factory is None:
            raise UnsupportedOperationError(f"{self.KEY_TYPE} does not support key generation")
        return factory

    def _create(self, factory: KeyFactory, key_format: Any) -> Any:
        factory.validate_key_format(key_format)
        key = factory.create_key(key_format)
        self.validate_key(key)
        return key

    def _check_version(self, version: int) -> None:
        if version < 0 or version > self.VERSION:
            raise InvalidKeyError(
                f"key version {version} not supported by {self.KEY_TYPE} (max {self.VERSION})"
            )

    def __repr__(self) -> str:
        return f"{type(self).__name__}(key_type={self.KEY_TYPE!r}, version={self.VERSION})"


class PrivateKeyManager(KeyManager):
    """Key manager for private keys that can derive their public counterpart."""

    def public_key(self, key: Any) -> Any:
        raise NotImplementedError

    def public_key_manager(self) -> KeyManager:
        raise NotImplementedError

    def public_key_data(self, key_material: bytes) -> KeyData:
        key = self.parse_key(key_material)
        self.validate_key(key)
        pub_manager = self.public_key_manager()
        return KeyData(
            key_type=pub_manager.get_key_type(),
            value=pub_manager.serialize_key(self.public_key(key)),
            key_material_type=pub_manager.key_material_type(),
        )
