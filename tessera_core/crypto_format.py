"""
tessera_core.crypto_format
--------------------------
Identifier prefixes attached to primitive outputs.

  RAW             -> b""
  TINK            -> 0x01 || key_id (uint32, big-endian)
  LEGACY, CRUNCHY -> 0x00 || key_id (uint32, big-endian)

A prefix only narrows down which keys to try; it is never trusted as proof
of which key produced an output.
"""

from __future__ import annotations
import struct

from .constants import LEGACY_START_BYTE, PREFIX_SIZE, RAW_PREFIX, TINK_START_BYTE
from .errors import KeysetError
from .models import OutputPrefixType
from .utils import MAX_KEY_ID

_PREFIX = struct.Struct(">BI")


def output_prefix(key_id: int, output_prefix_type: OutputPrefixType) -> bytes:
    if output_prefix_type == OutputPrefixType.RAW:
        return RAW_PREFIX
    if not 0 <= key_id <= MAX_KEY_ID:
        raise KeysetError(f"key id out of uint32 range: {key_id}")
    if output_prefix_type == OutputPrefixType.TINK:
        return _PREFIX.pack(TINK_START_BYTE, key_id)
    if output_prefix_type in (OutputPrefixType.LEGACY, OutputPrefixType.CRUNCHY):
        return _PREFIX.pack(LEGACY_START_BYTE, key_id)
    raise KeysetError(f"unknown output prefix type: {output_prefix_type}")


def split_prefix(data: bytes):
    """Returns (prefix, remainder), or (None, data) when data is too short."""
    if len(data) < PREFIX_SIZE:
        return None, data
    return bytes(data[:PREFIX_SIZE]), data[PREFIX_SIZE:]
