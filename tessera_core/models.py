# tessera_core/models.py
from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple


class KeyStatus(str, Enum):
    ENABLED = "ENABLED"
    DISABLED = "DISABLED"
    DESTROYED = "DESTROYED"


class OutputPrefixType(str, Enum):
    TINK = "TINK"
    LEGACY = "LEGACY"
    CRUNCHY = "CRUNCHY"
    RAW = "RAW"


class KeyMaterialType(str, Enum):
    UNKNOWN = "UNKNOWN"
    SYMMETRIC = "SYMMETRIC"
    ASYMMETRIC_PRIVATE = "ASYMMETRIC_PRIVATE"
    ASYMMETRIC_PUBLIC = "ASYMMETRIC_PUBLIC"
    REMOTE = "REMOTE"

    @property
    def exportable(self) -> bool:
        return self in (KeyMaterialType.ASYMMETRIC_PUBLIC, KeyMaterialType.REMOTE)


@dataclass(frozen=True)
class KeyData:
    """Serialized key material tagged with its key type."""
    key_type: str
    value: bytes = field(repr=False)
    key_material_type: KeyMaterialType


@dataclass(frozen=True)
class KeyTemplate:
    """Recipe for new keys: key type, serialized key format, prefix type."""
    key_type: str
    value: bytes
    output_prefix_type: OutputPrefixType = OutputPrefixType.TINK


@dataclass(frozen=True)
class KeyEntry:
    """
    One key of a keyset.

    DESTROYED entries keep their id and metadata but never their material.
    """
    key_id: int
    key_type: str
    key_material: Optional[bytes] = field(default=None, repr=False)
    status: KeyStatus = KeyStatus.ENABLED
    output_prefix_type: OutputPrefixType = OutputPrefixType.TINK
    key_material_type: KeyMaterialType = KeyMaterialType.UNKNOWN

    @classmethod
    def from_key_data(
        cls,
        key_data: KeyData,
        key_id: int,
        status: KeyStatus = KeyStatus.ENABLED,
        output_prefix_type: OutputPrefixType = OutputPrefixType.TINK,
    ) -> "KeyEntry":
        return cls(
            key_id=key_id,
            key_type=key_data.key_type,
            key_material=key_data.value,
            status=status,
            output_prefix_type=output_prefix_type,
            key_material_type=key_data.key_material_type,
        )

    def info(self) -> "KeyInfo":
        return KeyInfo(
            key_id=self.key_id,
            key_type=self.key_type,
            status=self.status,
            output_prefix_type=self.output_prefix_type,
        )


@dataclass(frozen=True)
class Keyset:
    primary_key_id: Optional[int]
    keys: Tuple[KeyEntry, ...] = ()

    def __post_init__(self):
        # accept any sequence, store a tuple
        object.__setattr__(self, "keys", tuple(self.keys))

    def key(self, key_id: int) -> Optional[KeyEntry]:
        return next((k for k in self.keys if k.key_id == key_id), None)


@dataclass(frozen=True)
class KeyInfo:
    """Metadata of a keyset entry; never carries material."""
    key_id: int
    key_type: str
    status: KeyStatus
    output_prefix_type: OutputPrefixType


@dataclass(frozen=True)
class KeysetInfo:
    primary_key_id: Optional[int]
    key_info: List[KeyInfo] = field(default_factory=list)
