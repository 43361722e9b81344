# tessera_core/daead/daead_wrapper.py
from __future__ import annotations

from tessera_core.primitive_set import PrimitiveSet
from tessera_core.primitive_wrapper import PrimitiveWrapper, first_success, primary_entry
from tessera_core.primitives import DeterministicAead, PrimitiveKind


class _WrappedDeterministicAead(DeterministicAead):
    def __init__(self, primitive_set: PrimitiveSet):
        self._set = primitive_set

    def encrypt_deterministically(self, plaintext: bytes, associated_data: bytes) -> bytes:
        primary = primary_entry(self._set)
        return primary.identifier + primary.primitive.encrypt_deterministically(plaintext, associated_data)

    def decrypt_deterministically(self, ciphertext: bytes, associated_data: bytes) -> bytes:
        return first_success(
            self._set,
            ciphertext,
            lambda entry, payload: entry.primitive.decrypt_deterministically(payload, associated_data),
            "deterministic decryption",
        )


class DeterministicAeadWrapper(PrimitiveWrapper):
    primitive_kind = PrimitiveKind.DETERMINISTIC_AEAD

    def wrap(self, primitive_set: PrimitiveSet) -> DeterministicAead:
        return _WrappedDeterministicAead(primitive_set)
