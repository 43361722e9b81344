"""
tessera_core.aead
-----------------
Authenticated encryption with associated data (AES-GCM).
"""

from tessera_core.catalogue import Catalogue
from tessera_core.models import OutputPrefixType
from tessera_core.primitives import Aead, PrimitiveKind
from .aead_wrapper import AeadWrapper
from .aes_gcm_key_manager import AesGcm, AesGcmKeyManager, aes_gcm_key_template

AES128_GCM = aes_gcm_key_template(16)
AES256_GCM = aes_gcm_key_template(32)
AES256_GCM_RAW = aes_gcm_key_template(32, OutputPrefixType.RAW)

AEAD_CATALOGUE = Catalogue(
    PrimitiveKind.AEAD,
    {AesGcmKeyManager.KEY_TYPE: AesGcmKeyManager},
    AeadWrapper,
)


def register(registry=None, min_version: int = 0) -> None:
    AEAD_CATALOGUE.bootstrap(registry, min_version=min_version)


__all__ = [
    "Aead",
    "AeadWrapper",
    "AesGcm",
    "AesGcmKeyManager",
    "AEAD_CATALOGUE",
    "AES128_GCM",
    "AES256_GCM",
    "AES256_GCM_RAW",
    "register",
]
