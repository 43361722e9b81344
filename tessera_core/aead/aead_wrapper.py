# tessera_core/aead/aead_wrapper.py
from __future__ import annotations

from tessera_core.primitive_set import PrimitiveSet
from tessera_core.primitive_wrapper import PrimitiveWrapper, first_success, primary_entry
from tessera_core.primitives import Aead, PrimitiveKind


class _WrappedAead(Aead):
    def __init__(self, primitive_set: PrimitiveSet):
        self._set = primitive_set

    def encrypt(self, plaintext: bytes, associated_data: bytes) -> bytes:
        primary = primary_entry(self._set)
        return primary.identifier + primary.primitive.encrypt(plaintext, associated_data)

    def decrypt(self, ciphertext: bytes, associated_data: bytes) -> bytes:
        return first_success(
            self._set,
            ciphertext,
            lambda entry, payload: entry.primitive.decrypt(payload, associated_data),
            "decryption",
        )


class AeadWrapper(PrimitiveWrapper):
    primitive_kind = PrimitiveKind.AEAD

    def wrap(self, primitive_set: PrimitiveSet) -> Aead:
        return _WrappedAead(primitive_set)
