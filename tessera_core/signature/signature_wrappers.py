# tessera_core/signature/signature_wrappers.py
from __future__ import annotations

from tessera_core.primitive_set import PrimitiveSet
from tessera_core.primitive_wrapper import PrimitiveWrapper, first_success, legacy_data, primary_entry
from tessera_core.primitives import PrimitiveKind, PublicKeySign, PublicKeyVerify


class _WrappedPublicKeySign(PublicKeySign):
    def __init__(self, primitive_set: PrimitiveSet):
        self._set = primitive_set

    def sign(self, data: bytes) -> bytes:
        primary = primary_entry(self._set)
        return primary.identifier + primary.primitive.sign(legacy_data(primary, data))


class _WrappedPublicKeyVerify(PublicKeyVerify):
    def __init__(self, primitive_set: PrimitiveSet):
        self._set = primitive_set

    def verify(self, signature: bytes, data: bytes) -> None:
        def attempt(entry, sig):
            entry.primitive.verify(sig, legacy_data(entry, data))

        first_success(self._set, signature, attempt, "signature verification")


class PublicKeySignWrapper(PrimitiveWrapper):
    primitive_kind = PrimitiveKind.PUBLIC_KEY_SIGN

    def wrap(self, primitive_set: PrimitiveSet) -> PublicKeySign:
        return _WrappedPublicKeySign(primitive_set)


class PublicKeyVerifyWrapper(PrimitiveWrapper):
    primitive_kind = PrimitiveKind.PUBLIC_KEY_VERIFY

    def wrap(self, primitive_set: PrimitiveSet) -> PublicKeyVerify:
        return _WrappedPublicKeyVerify(primitive_set)
