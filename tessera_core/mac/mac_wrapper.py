# tessera_core/mac/mac_wrapper.py
from __future__ import annotations

from tessera_core.primitive_set import PrimitiveSet
from tessera_core.primitive_wrapper import PrimitiveWrapper, first_success, legacy_data, primary_entry
from tessera_core.primitives import Mac, PrimitiveKind


class _WrappedMac(Mac):
    def __init__(self, primitive_set: PrimitiveSet):
        self._set = primitive_set

    def compute_mac(self, data: bytes) -> bytes:
        primary = primary_entry(self._set)
        return primary.identifier + primary.primitive.compute_mac(legacy_data(primary, data))

    def verify_mac(self, mac_value: bytes, data: bytes) -> None:
        def attempt(entry, tag):
            entry.primitive.verify_mac(tag, legacy_data(entry, data))

        first_success(self._set, mac_value, attempt, "MAC verification")


class MacWrapper(PrimitiveWrapper):
    primitive_kind = PrimitiveKind.MAC

    def wrap(self, primitive_set: PrimitiveSet) -> Mac:
        return _WrappedMac(primitive_set)
