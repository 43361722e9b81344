"""
tessera_core.daead
------------------
Deterministic authenticated encryption (AES-SIV).
"""

from tessera_core.catalogue import Catalogue
from tessera_core.primitives import DeterministicAead, PrimitiveKind
from .aes_siv_key_manager import AesSiv, AesSivKeyManager, aes_siv_key_template
from .daead_wrapper import DeterministicAeadWrapper

AES256_SIV = aes_siv_key_template()

DAEAD_CATALOGUE = Catalogue(
    PrimitiveKind.DETERMINISTIC_AEAD,
    {AesSivKeyManager.KEY_TYPE: AesSivKeyManager},
    DeterministicAeadWrapper,
)


def register(registry=None, min_version: int = 0) -> None:
    DAEAD_CATALOGUE.bootstrap(registry, min_version=min_version)


__all__ = [
    "DeterministicAead",
    "DeterministicAeadWrapper",
    "AesSiv",
    "AesSivKeyManager",
    "DAEAD_CATALOGUE",
    "AES256_SIV",
    "register",
]
