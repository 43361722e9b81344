"""
tessera_core.mac
----------------
Message authentication codes (HMAC-SHA256 / HMAC-SHA512).
"""

from tessera_core.catalogue import Catalogue
from tessera_core.primitives import Mac, PrimitiveKind
from .hmac_key_manager import HmacKeyManager, HmacMac, hmac_key_template
from .mac_wrapper import MacWrapper

HMAC_SHA256_128BITTAG = hmac_key_template(32, 16, "SHA256")
HMAC_SHA256_256BITTAG = hmac_key_template(32, 32, "SHA256")
HMAC_SHA512_256BITTAG = hmac_key_template(64, 32, "SHA512")

MAC_CATALOGUE = Catalogue(
    PrimitiveKind.MAC,
    {HmacKeyManager.KEY_TYPE: HmacKeyManager},
    MacWrapper,
)


def register(registry=None, min_version: int = 0) -> None:
    MAC_CATALOGUE.bootstrap(registry, min_version=min_version)


__all__ = [
    "Mac",
    "MacWrapper",
    "HmacMac",
    "HmacKeyManager",
    "MAC_CATALOGUE",
    "HMAC_SHA256_128BITTAG",
    "HMAC_SHA256_256BITTAG",
    "HMAC_SHA512_256BITTAG",
    "register",
]
