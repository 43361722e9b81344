"""
tessera_core.hybrid
-------------------
Hybrid public-key encryption (X25519 + HKDF-SHA256 + AES-GCM).
"""

from tessera_core.catalogue import Catalogue
from tessera_core.primitives import HybridDecrypt, HybridEncrypt, PrimitiveKind
from .hybrid_wrappers import HybridDecryptWrapper, HybridEncryptWrapper
from .x25519_hkdf_key_manager import (
    X25519HkdfAesGcmPrivateKeyManager,
    X25519HkdfAesGcmPublicKeyManager,
    X25519HybridDecrypt,
    X25519HybridEncrypt,
    x25519_hkdf_aes_gcm_key_template,
)

X25519_HKDF_SHA256_AES128_GCM = x25519_hkdf_aes_gcm_key_template(16)
X25519_HKDF_SHA256_AES256_GCM = x25519_hkdf_aes_gcm_key_template(32)

HYBRID_DECRYPT_CATALOGUE = Catalogue(
    PrimitiveKind.HYBRID_DECRYPT,
    {X25519HkdfAesGcmPrivateKeyManager.KEY_TYPE: X25519HkdfAesGcmPrivateKeyManager},
    HybridDecryptWrapper,
)

HYBRID_ENCRYPT_CATALOGUE = Catalogue(
    PrimitiveKind.HYBRID_ENCRYPT,
    {X25519HkdfAesGcmPublicKeyManager.KEY_TYPE: X25519HkdfAesGcmPublicKeyManager},
    HybridEncryptWrapper,
)


def register(registry=None, min_version: int = 0) -> None:
    HYBRID_DECRYPT_CATALOGUE.bootstrap(registry, min_version=min_version)
    HYBRID_ENCRYPT_CATALOGUE.bootstrap(registry, min_version=min_version)


__all__ = [
    "HybridEncrypt",
    "HybridDecrypt",
    "HybridEncryptWrapper",
    "HybridDecryptWrapper",
    "X25519HybridEncrypt",
    "X25519HybridDecrypt",
    "X25519HkdfAesGcmPrivateKeyManager",
    "X25519HkdfAesGcmPublicKeyManager",
    "HYBRID_DECRYPT_CATALOGUE",
    "HYBRID_ENCRYPT_CATALOGUE",
    "X25519_HKDF_SHA256_AES128_GCM",
    "X25519_HKDF_SHA256_AES256_GCM",
    "register",
]
