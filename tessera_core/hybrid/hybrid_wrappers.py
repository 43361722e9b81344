# tessera_core/hybrid/hybrid_wrappers.py
from __future__ import annotations

from tessera_core.primitive_set import PrimitiveSet
from tessera_core.primitive_wrapper import PrimitiveWrapper, first_success, primary_entry
from tessera_core.primitives import HybridDecrypt, HybridEncrypt, PrimitiveKind


class _WrappedHybridEncrypt(HybridEncrypt):
    def __init__(self, primitive_set: PrimitiveSet):
        self._set = primitive_set

    def encrypt(self, plaintext: bytes, context_info: bytes) -> bytes:
        primary = primary_entry(self._set)
        return primary.identifier + primary.primitive.encrypt(plaintext, context_info)


class _WrappedHybridDecrypt(HybridDecrypt):
    def __init__(self, primitive_set: PrimitiveSet):
        self._set = primitive_set

    def decrypt(self, ciphertext: bytes, context_info: bytes) -> bytes:
        return first_success(
            self._set,
            ciphertext,
            lambda entry, payload: entry.primitive.decrypt(payload, context_info),
            "hybrid decryption",
        )


class HybridEncryptWrapper(PrimitiveWrapper):
    primitive_kind = PrimitiveKind.HYBRID_ENCRYPT

    def wrap(self, primitive_set: PrimitiveSet) -> HybridEncrypt:
        return _WrappedHybridEncrypt(primitive_set)


class HybridDecryptWrapper(PrimitiveWrapper):
    primitive_kind = PrimitiveKind.HYBRID_DECRYPT

    def wrap(self, primitive_set: PrimitiveSet) -> HybridDecrypt:
        return _WrappedHybridDecrypt(primitive_set)
