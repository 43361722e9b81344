"""
tessera_core.keyset
-------------------
Keyset handles and the keyset manager used for rotation.

- KeysetHandle: validated, immutable view of a keyset; builds wrapped
  primitives and exposes metadata without material.
- KeysetManager: produces new keysets (add, rotate, enable, disable,
  destroy, delete). A keyset is never mutated in place; every change
  yields a new snapshot.

Secret material (symmetric or private keys) never leaves through
`public_keyset()`.
"""

from __future__ import annotations
import dataclasses
from typing import Any, List, Optional

from .errors import KeysetError, SecretKeyMaterialError
from .logger import get_logger
from .models import (
    KeyEntry,
    KeyMaterialType,
    Keyset,
    KeysetInfo,
    KeyStatus,
    KeyTemplate,
)
from .primitive_set import PrimitiveSet
from .primitives import PrimitiveKind
from .utils import MAX_KEY_ID, new_key_id

log = get_logger("Tessera.Keyset")


def _registry(registry):
    if registry is None:
        from .registry import get_registry
        return get_registry()
    return registry


def validate_keyset(keyset: Keyset) -> None:
    seen = set()
    for key in keyset.keys:
        if not 0 <= key.key_id <= MAX_KEY_ID:
            raise KeysetError(f"key id out of uint32 range: {key.key_id}")
        if key.status == KeyStatus.DESTROYED:
            if key.key_material is not None:
                raise KeysetError(f"destroyed key {key.key_id} still holds key material")
            continue
        if key.key_material is None:
            raise KeysetError(f"key {key.key_id} has no key material")
        if key.key_id in seen:
            raise KeysetError(f"duplicate key id {key.key_id}")
        seen.add(key.key_id)


class KeysetHandle:
    def __init__(self, keyset: Keyset):
        validate_keyset(keyset)
        self._keyset = keyset

    @classmethod
    def generate_new(cls, template: KeyTemplate, registry=None) -> "KeysetHandle":
        manager = KeysetManager(registry=registry)
        manager.add(template, as_primary=True)
        return manager.handle()

    @classmethod
    def from_public_keyset(cls, keyset: Keyset) -> "KeysetHandle":
        _ensure_no_secret(keyset)
        return cls(keyset)

    def keyset_info(self) -> KeysetInfo:
        return KeysetInfo(
            primary_key_id=self._keyset.primary_key_id,
            key_info=[key.info() for key in self._keyset.keys],
        )

    def primitive(self, primitive_kind: PrimitiveKind, registry=None) -> Any:
        registry = _registry(registry)
        pset = PrimitiveSet.from_keyset(self._keyset, primitive_kind, registry=registry)
        return registry.wrap(pset, primitive_kind)

    def public_keyset_handle(self, registry=None) -> "KeysetHandle":
        registry = _registry(registry)
        keys: List[KeyEntry] = []
        for key in self._keyset.keys:
            if key.key_material_type != KeyMaterialType.ASYMMETRIC_PRIVATE:
                raise KeysetError(f"key {key.key_id} is not an asymmetric private key")
            if key.key_material is None:
                # destroyed: keep metadata only
                keys.append(key)
                continue
            public = registry.public_key_data(key.key_type, key.key_material)
            keys.append(KeyEntry.from_key_data(public, key.key_id, key.status, key.output_prefix_type))
        return KeysetHandle(Keyset(primary_key_id=self._keyset.primary_key_id, keys=keys))

    def public_keyset(self) -> Keyset:
        """The keyset itself, only when none of its material is secret."""
        _ensure_no_secret(self._keyset)
        return self._keyset

    def __repr__(self) -> str:
        # never print material
        return f"KeysetHandle({self.keyset_info()!r})"


def _ensure_no_secret(keyset: Keyset) -> None:
    for key in keyset.keys:
        if key.key_material is not None and not key.key_material_type.exportable:
            raise SecretKeyMaterialError(
                f"key {key.key_id} holds {key.key_material_type.value} material"
            )


class KeysetManager:
    def __init__(self, keyset: Optional[Keyset] = None, registry=None):
        self._keyset = keyset or Keyset(primary_key_id=None, keys=())
        validate_keyset(self._keyset)
        self._registry = registry

    @classmethod
    def from_handle(cls, handle: KeysetHandle, registry=None) -> "KeysetManager":
        return cls(handle._keyset, registry=registry)

    def keyset(self) -> Keyset:
        return self._keyset

    def handle(self) -> KeysetHandle:
        return KeysetHandle(self._keyset)

    # ------------------------------------------------------------------
    # Mutations (each produces a new Keyset)
    # ------------------------------------------------------------------
    def add(self, template: KeyTemplate, as_primary: bool = False) -> int:
        key_data = _registry(self._registry).new_key_data(template)
        key_id = new_key_id({k.key_id for k in self._keyset.keys})
        entry = KeyEntry.from_key_data(
            key_data, key_id, KeyStatus.ENABLED, template.output_prefix_type
        )
        primary = key_id if as_primary else self._keyset.primary_key_id
        self._keyset = Keyset(primary_key_id=primary, keys=self._keyset.keys + (entry,))
        log.info(f"[KEYSET] added key id={key_id} type={template.key_type} primary={as_primary}")
        return key_id

    def rotate(self, template: KeyTemplate) -> int:
        return self.add(template, as_primary=True)

    def set_primary(self, key_id: int) -> None:
        key = self._require(key_id)
        if key.status != KeyStatus.ENABLED:
            raise KeysetError(f"key {key_id} must be enabled to become primary, status={key.status.value}")
        self._keyset = Keyset(primary_key_id=key_id, keys=self._keyset.keys)
        log.info(f"[KEYSET] primary key set to id={key_id}")

    def enable(self, key_id: int) -> None:
        key = self._require(key_id)
        if key.status == KeyStatus.DESTROYED:
            raise KeysetError(f"key {key_id} is destroyed and cannot be enabled")
        self._replace(dataclasses.replace(key, status=KeyStatus.ENABLED))
        log.info(f"[KEYSET] enabled key id={key_id}")

    def disable(self, key_id: int) -> None:
        key = self._require(key_id, not_primary="disable")
        if key.status == KeyStatus.DESTROYED:
            raise KeysetError(f"key {key_id} is destroyed and cannot be disabled")
        self._replace(dataclasses.replace(key, status=KeyStatus.DISABLED))
        log.info(f"[KEYSET] disabled key id={key_id}")

    def destroy(self, key_id: int) -> None:
        key = self._require(key_id, not_primary="destroy")
        self._replace(dataclasses.replace(key, status=KeyStatus.DESTROYED, key_material=None))
        log.info(f"[KEYSET] destroyed key id={key_id}")

    def delete(self, key_id: int) -> None:
        self._require(key_id, not_primary="delete")
        keys = tuple(k for k in self._keyset.keys if k.key_id != key_id)
        self._keyset = Keyset(primary_key_id=self._keyset.primary_key_id, keys=keys)
        log.info(f"[KEYSET] deleted key id={key_id}")

    # ------------------------------------------------------------------
    def _require(self, key_id: int, not_primary: Optional[str] = None) -> KeyEntry:
        key = self._keyset.key(key_id)
        if key is None:
            raise KeysetError(f"key {key_id} not found")
        if not_primary and key_id == self._keyset.primary_key_id:
            raise KeysetError(f"cannot {not_primary} the primary key {key_id}")
        return key

    def _replace(self, updated: KeyEntry) -> None:
        keys = tuple(updated if k.key_id == updated.key_id else k for k in self._keyset.keys)
        self._keyset = Keyset(primary_key_id=self._keyset.primary_key_id, keys=keys)
