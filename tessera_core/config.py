# tessera_core/config.py
"""
Registry bootstrap.

Nothing is registered implicitly; applications call `register()` once at
startup (calling it again is harmless).
"""

from __future__ import annotations
import os
from typing import Callable, Dict, List

from tessera_core import aead, daead, hybrid, mac, signature
from tessera_core.constants import ENV_MIN_KEY_VERSION, ENV_PRIMITIVES
from tessera_core.logger import get_logger

log = get_logger("Tessera.Config")

FAMILIES: Dict[str, Callable[..., None]] = {
    "aead": aead.register,
    "daead": daead.register,
    "mac": mac.register,
    "signature": signature.register,
    "hybrid": hybrid.register,
}


def _families(config: dict) -> List[str]:
    raw = config.get("primitives") or os.getenv(ENV_PRIMITIVES, "all")
    if isinstance(raw, str):
        names = [n.strip().lower() for n in raw.split(",") if n.strip()]
    else:
        names = [str(n).strip().lower() for n in raw]
    if not names or "all" in names:
        return list(FAMILIES)
    unknown = [n for n in names if n not in FAMILIES]
    if unknown:
        raise ValueError(f"Unknown primitive families: {', '.join(unknown)}")
    return names


def register(config: dict | None = None, registry=None) -> List[str]:
    """
    Bootstrap key managers and wrappers.

    Families come from config["primitives"] or TESSERA_PRIMITIVES
    ("aead,daead,mac,signature,hybrid" or "all", the default).
    Minimum manager version comes from config["min_version"] or
    TESSERA_MIN_KEY_VERSION (default 0).
    """
    config = config or {}
    families = _families(config)
    min_version = config.get("min_version")
    if min_version is None:
        min_version = os.getenv(ENV_MIN_KEY_VERSION, "0")
    try:
        min_version = int(min_version)
    except ValueError:
        raise ValueError(f"Invalid minimum key version: {min_version}")

    for name in families:
        FAMILIES[name](registry, min_version=min_version)
    log.info(f"[CONFIG] registered families={','.join(families)} min_version={min_version}")
    return families
