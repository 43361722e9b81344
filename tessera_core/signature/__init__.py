"""
tessera_core.signature
----------------------
Digital signatures (Ed25519). Private keys sign, their public keys verify.
"""

from tessera_core.catalogue import Catalogue
from tessera_core.models import OutputPrefixType
from tessera_core.primitives import PrimitiveKind, PublicKeySign, PublicKeyVerify
from .ed25519_key_manager import (
    Ed25519PrivateKeyManager,
    Ed25519PublicKeyManager,
    Ed25519Sign,
    Ed25519Verify,
    ed25519_key_template,
)
from .signature_wrappers import PublicKeySignWrapper, PublicKeyVerifyWrapper

ED25519 = ed25519_key_template()
ED25519_RAW = ed25519_key_template(OutputPrefixType.RAW)

SIGN_CATALOGUE = Catalogue(
    PrimitiveKind.PUBLIC_KEY_SIGN,
    {Ed25519PrivateKeyManager.KEY_TYPE: Ed25519PrivateKeyManager},
    PublicKeySignWrapper,
)

VERIFY_CATALOGUE = Catalogue(
    PrimitiveKind.PUBLIC_KEY_VERIFY,
    {Ed25519PublicKeyManager.KEY_TYPE: Ed25519PublicKeyManager},
    PublicKeyVerifyWrapper,
)


def register(registry=None, min_version: int = 0) -> None:
    SIGN_CATALOGUE.bootstrap(registry, min_version=min_version)
    VERIFY_CATALOGUE.bootstrap(registry, min_version=min_version)


__all__ = [
    "PublicKeySign",
    "PublicKeyVerify",
    "PublicKeySignWrapper",
    "PublicKeyVerifyWrapper",
    "Ed25519Sign",
    "Ed25519Verify",
    "Ed25519PrivateKeyManager",
    "Ed25519PublicKeyManager",
    "SIGN_CATALOGUE",
    "VERIFY_CATALOGUE",
    "ED25519",
    "ED25519_RAW",
    "register",
]
