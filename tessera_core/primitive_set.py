"""
tessera_core.primitive_set
--------------------------
Immutable collection of primitives built from one keyset snapshot.

Entries keep keyset order. Non-RAW entries are indexed by their identifier
prefix; several entries may share a prefix, so lookups return ordered
candidate lists. Exactly one entry is primary and it is always ENABLED.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .crypto_format import output_prefix
from .errors import EmptyKeysetError, NoPrimaryKeyError, UnsupportedPrimitiveError
from .models import KeyEntry, Keyset, KeyStatus, OutputPrefixType
from .primitives import PrimitiveKind


@dataclass(frozen=True)
class PrimitiveSetEntry:
    primitive: Any
    key_id: int
    status: KeyStatus
    output_prefix_type: OutputPrefixType
    identifier: bytes
    key_type: str = ""

    @classmethod
    def for_key(cls, primitive: Any, key: KeyEntry) -> "PrimitiveSetEntry":
        return cls(
            primitive=primitive,
            key_id=key.key_id,
            status=key.status,
            output_prefix_type=key.output_prefix_type,
            identifier=output_prefix(key.key_id, key.output_prefix_type),
            key_type=key.key_type,
        )


class PrimitiveSet:
    def __init__(
        self,
        primitive_kind: PrimitiveKind,
        entries: Iterable[PrimitiveSetEntry],
        primary: Optional[PrimitiveSetEntry],
    ) -> None:
        self._kind = primitive_kind
        self._entries: Tuple[PrimitiveSetEntry, ...] = tuple(entries)
        by_prefix: Dict[bytes, List[PrimitiveSetEntry]] = {}
        raw: List[PrimitiveSetEntry] = []
        for entry in self._entries:
            if getattr(entry.primitive, "KIND", None) != primitive_kind:
                raise UnsupportedPrimitiveError(
                    f"key {entry.key_id} does not implement {primitive_kind.value}"
                )
            if entry.output_prefix_type == OutputPrefixType.RAW:
                raw.append(entry)
            else:
                by_prefix.setdefault(entry.identifier, []).append(entry)

        if primary is None:
            if self._entries:
                raise NoPrimaryKeyError("non-empty primitive set needs a primary")
        else:
            if not any(e is primary for e in self._entries):
                raise NoPrimaryKeyError(f"primary key {primary.key_id} is not part of the set")
            if primary.status != KeyStatus.ENABLED:
                raise NoPrimaryKeyError(f"primary key {primary.key_id} is not enabled")

        self._primary = primary
        self._by_prefix = {k: tuple(v) for k, v in by_prefix.items()}
        self._raw = tuple(raw)

    @classmethod
    def from_keyset(cls, keyset: Keyset, primitive_kind: PrimitiveKind, registry=None) -> "PrimitiveSet":
        """
        Build a set holding one primitive per ENABLED key.

        DISABLED and DESTROYED keys are skipped. Any error raised while building
        an enabled key's primitive aborts construction.
        """
        if registry is None:
            from .registry import get_registry
            registry = get_registry()

        entries: List[PrimitiveSetEntry] = []
        primary: Optional[PrimitiveSetEntry] = None
        for key in keyset.keys:
            if key.status != KeyStatus.ENABLED:
                continue
            primitive = registry.get_primitive(key, primitive_kind)
            entry = PrimitiveSetEntry.for_key(primitive, key)
            entries.append(entry)
            if key.key_id == keyset.primary_key_id and primary is None:
                primary = entry

        if not entries:
            raise EmptyKeysetError("keyset contains no enabled key")
        if primary is None:
            raise NoPrimaryKeyError(
                f"primary key {keyset.primary_key_id} is missing or not enabled"
            )
        return cls(primitive_kind, entries, primary)

    @property
    def primitive_kind(self) -> PrimitiveKind:
        return self._kind

    def primary(self) -> Optional[PrimitiveSetEntry]:
        return self._primary

    def all_entries(self) -> Tuple[PrimitiveSetEntry, ...]:
        return self._entries

    def raw_entries(self) -> Tuple[PrimitiveSetEntry, ...]:
        return self._raw

    def entries_for_prefix(self, prefix: bytes) -> Tuple[PrimitiveSetEntry, ...]:
        return self._by_prefix.get(bytes(prefix), ())

    def __len__(self) -> int:
        return len(self._entries)
