"""
tessera_core.registry
---------------------
Process-wide mapping from key type to KeyManager and from primitive kind to
PrimitiveWrapper.

The registry starts empty and is only populated by explicit registration
(see tessera_core.config.register). Registrations never silently replace an
existing entry. A single RLock serializes registrations with each other and
with lookups.
"""

from __future__ import annotations
import threading
from typing import Any, Dict

from .errors import (
    DuplicateRegistrationError,
    InvalidKeyError,
    NotFoundError,
    UnsupportedOperationError,
    UnsupportedPrimitiveError,
)
from .key_manager import KeyManager, PrivateKeyManager
from .logger import get_logger
from .models import KeyData, KeyEntry, KeyTemplate
from .primitives import PrimitiveKind

log = get_logger("Tessera.Registry")


class Registry:
    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._key_managers: Dict[str, KeyManager] = {}
        self._wrappers: Dict[PrimitiveKind, Any] = {}

    # ------------------------------------------------------------------
    # Key managers
    # ------------------------------------------------------------------
    def register_key_manager(self, manager: KeyManager, allow_overwrite: bool = False) -> None:
        key_type = manager.get_key_type()
        if not key_type:
            raise ValueError(f"{manager!r} has no key type")
        with self._lock:
            existing = self._key_managers.get(key_type)
            if existing is manager:
                return
            if existing is not None and not allow_overwrite:
                raise DuplicateRegistrationError(
                    f"a different key manager is already registered for {key_type}"
                )
            self._key_managers[key_type] = manager
        if existing is None:
            log.info(f"[REGISTRY] registered key manager type={key_type} version={manager.get_version()}")
        else:
            log.info(f"[REGISTRY] replaced key manager type={key_type} version={manager.get_version()}")

    def key_manager(self, key_type: str) -> KeyManager:
        with self._lock:
            manager = self._key_managers.get(key_type)
        if manager is None:
            raise NotFoundError(f"no key manager registered for {key_type}")
        return manager

    def get_key_manager(self, key_type: str, capability: PrimitiveKind) -> KeyManager:
        manager = self.key_manager(key_type)
        if not manager.supports_capability(capability):
            raise UnsupportedPrimitiveError(
                f"key manager for {key_type} does not provide primitive {capability.value}"
            )
        return manager

    def key_types(self):
        with self._lock:
            return sorted(self._key_managers)

    # ------------------------------------------------------------------
    # Wrappers
    # ------------------------------------------------------------------
    def register_primitive_wrapper(self, wrapper, allow_overwrite: bool = False) -> None:
        kind = wrapper.primitive_kind
        with self._lock:
            existing = self._wrappers.get(kind)
            if existing is wrapper:
                return
            if existing is not None and not allow_overwrite:
                raise DuplicateRegistrationError(
                    f"a different wrapper is already registered for {kind.value}"
                )
            self._wrappers[kind] = wrapper
        log.info(f"[REGISTRY] registered wrapper primitive={kind.value}")

    def primitive_wrapper(self, capability: PrimitiveKind):
        with self._lock:
            wrapper = self._wrappers.get(capability)
        if wrapper is None:
            raise NotFoundError(f"no wrapper registered for {capability.value}")
        return wrapper

    def wrap(self, primitive_set, capability: PrimitiveKind) -> Any:
        wrapper = self.primitive_wrapper(capability)
        if primitive_set.primitive_kind != capability:
            raise UnsupportedPrimitiveError(
                f"primitive set holds {primitive_set.primitive_kind.value}, not {capability.value}"
            )
        return wrapper.wrap(primitive_set)

    # ------------------------------------------------------------------
    # Per-key operations
    # ------------------------------------------------------------------
    def get_primitive(self, key_entry: KeyEntry, capability: PrimitiveKind) -> Any:
        manager = self.get_key_manager(key_entry.key_type, capability)
        if key_entry.key_material is None:
            raise InvalidKeyError(f"key {key_entry.key_id} has no key material")
        return manager.get_primitive(key_entry.key_material, capability)

    def new_key_data(self, template: KeyTemplate) -> KeyData:
        return self.key_manager(template.key_type).new_key_data(template.value)

    def public_key_data(self, key_type: str, key_material: bytes) -> KeyData:
        manager = self.key_manager(key_type)
        if not isinstance(manager, PrivateKeyManager):
            raise UnsupportedOperationError(f"{key_type} is not a private key type")
        return manager.public_key_data(key_material)

    def reset(self) -> None:
        """Drop every registration. Intended for test isolation."""
        with self._lock:
            self._key_managers.clear()
            self._wrappers.clear()


_REGISTRY = Registry()


def get_registry() -> Registry:
    return _REGISTRY


def register_key_manager(manager: KeyManager, allow_overwrite: bool = False) -> None:
    _REGISTRY.register_key_manager(manager, allow_overwrite=allow_overwrite)


def register_primitive_wrapper(wrapper, allow_overwrite: bool = False) -> None:
    _REGISTRY.register_primitive_wrapper(wrapper, allow_overwrite=allow_overwrite)


def get_key_manager(key_type: str, capability: PrimitiveKind) -> KeyManager:
    return _REGISTRY.get_key_manager(key_type, capability)


def get_primitive(key_entry: KeyEntry, capability: PrimitiveKind) -> Any:
    return _REGISTRY.get_primitive(key_entry, capability)


def wrap(primitive_set, capability: PrimitiveKind) -> Any:
    return _REGISTRY.wrap(primitive_set, capability)


def reset() -> None:
    _REGISTRY.reset()
