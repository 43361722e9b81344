"""
tessera_core.catalogue
----------------------
Per-primitive catalogues of key managers.

A catalogue knows which key types back one primitive kind and hands out a
cached manager per key type. Bootstrap code uses it to fill the registry, and
`register` / `register_wrapper` let an alternative implementation be swapped
in explicitly.
"""

from __future__ import annotations
import threading
from typing import Callable, Dict, List, Mapping, Optional

from .errors import NotFoundError, UnsupportedPrimitiveError
from .key_manager import KeyManager
from .logger import get_logger
from .primitives import PrimitiveKind

log = get_logger("Tessera.Catalogue")


class Catalogue:
    def __init__(
        self,
        primitive_kind: PrimitiveKind,
        manager_factories: Mapping[str, Callable[[], KeyManager]],
        wrapper_factory: Callable[[], object],
    ) -> None:
        self.primitive_kind = primitive_kind
        self._lock = threading.Lock()
        self._factories: Dict[str, Callable[[], KeyManager]] = dict(manager_factories)
        self._managers: Dict[str, KeyManager] = {}
        self._wrapper_factory = wrapper_factory
        self._wrapper = None

    def key_types(self) -> List[str]:
        with self._lock:
            return sorted(set(self._factories) | set(self._managers))

    def _manager(self, key_type: str) -> KeyManager:
        with self._lock:
            manager = self._managers.get(key_type)
            if manager is None:
                factory = self._factories.get(key_type)
                if factory is None:
                    raise NotFoundError(f"No key manager for key type '{key_type}'.")
                manager = factory()
                self._managers[key_type] = manager
            return manager

    def get_key_manager(self, key_type: str, primitive_name, min_version: int = 0) -> KeyManager:
        try:
            kind = PrimitiveKind.parse(primitive_name)
        except ValueError:
            kind = None
        if kind != self.primitive_kind:
            raise NotFoundError(f"This catalogue does not support primitive {primitive_name}.")
        manager = self._manager(key_type)
        if manager.get_version() < min_version:
            raise NotFoundError(
                f"No key manager for key type '{key_type}' with version at least {min_version}."
            )
        return manager

    def get_primitive_wrapper(self):
        with self._lock:
            if self._wrapper is None:
                self._wrapper = self._wrapper_factory()
            return self._wrapper

    # ------------------------------------------------------------------
    # Registration (delegates to the registry)
    # ------------------------------------------------------------------
    def register(self, key_type: str, manager: KeyManager, registry=None) -> None:
        """Swap in `manager` for `key_type` here and in the registry."""
        if not manager.does_support(key_type):
            raise ValueError(f"{manager!r} does not support key type {key_type}")
        if not manager.supports_capability(self.primitive_kind):
            raise UnsupportedPrimitiveError(
                f"{manager!r} does not provide primitive {self.primitive_kind.value}"
            )
        with self._lock:
            self._managers[key_type] = manager
        _resolve(registry).register_key_manager(manager, allow_overwrite=True)
        log.info(f"[CATALOGUE] {self.primitive_kind.value}: manager for {key_type} set to {manager!r}")

    def register_wrapper(self, capability: PrimitiveKind, wrapper, registry=None) -> None:
        if capability != self.primitive_kind or wrapper.primitive_kind != capability:
            raise UnsupportedPrimitiveError(
                f"wrapper for {capability.value} does not belong to the {self.primitive_kind.value} catalogue"
            )
        with self._lock:
            self._wrapper = wrapper
        _resolve(registry).register_primitive_wrapper(wrapper, allow_overwrite=True)

    def bootstrap(self, registry=None, min_version: int = 0) -> None:
        """Register every manager of this catalogue plus its wrapper."""
        registry = _resolve(registry)
        for key_type in self.key_types():
            registry.register_key_manager(
                self.get_key_manager(key_type, self.primitive_kind, min_version=min_version)
            )
        registry.register_primitive_wrapper(self.get_primitive_wrapper())


def _resolve(registry: Optional[object]):
    if registry is None:
        from .registry import get_registry
        return get_registry()
    return registry
