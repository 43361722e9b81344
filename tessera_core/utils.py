"""
tessera_core.utils
------------------
Helpers for base64, canonical JSON key records, randomness and key ids.
Key records and key formats are canonical JSON so serialization stays
deterministic; every decoding failure surfaces as ParseError.
"""

from __future__ import annotations
import base64, binascii, json, os, secrets
from typing import Any, Collection, Dict

from .errors import ParseError

MAX_KEY_ID = 0xFFFFFFFF


def b64e(b: bytes) -> str:
    return base64.b64encode(b).decode("ascii")

def b64d(s: str) -> bytes:
    return base64.b64decode(s.encode("ascii"), validate=True)

def canonical_json(obj: Dict[str, Any]) -> bytes:
    # Deterministic, minimal JSON
    return json.dumps(obj, separators=(",", ":"), sort_keys=True, ensure_ascii=False).encode("utf-8")

def random_bytes(n: int) -> bytes:
    return os.urandom(n)

def new_key_id(taken: Collection[int] = ()) -> int:
    """Random non-zero uint32 not present in `taken`."""
    while True:
        key_id = secrets.randbits(32)
        if key_id and key_id not in taken:
            return key_id


# --------- Key records ----------
def encode_record(record: Dict[str, Any]) -> bytes:
    return canonical_json(record)

def decode_record(data: bytes) -> Dict[str, Any]:
    if not isinstance(data, (bytes, bytearray)):
        raise ParseError(f"expected bytes, got {type(data).__name__}")
    try:
        record = json.loads(bytes(data).decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ParseError(f"malformed key record: {e}") from e
    if not isinstance(record, dict):
        raise ParseError("key record must be a JSON object")
    return record

def record_int(record: Dict[str, Any], name: str, default: Any = None) -> int:
    value = record.get(name, default)
    # bool is an int subclass, reject it explicitly
    if not isinstance(value, int) or isinstance(value, bool):
        raise ParseError(f"field '{name}' must be an integer")
    return value

def record_str(record: Dict[str, Any], name: str, default: Any = None) -> str:
    value = record.get(name, default)
    if not isinstance(value, str):
        raise ParseError(f"field '{name}' must be a string")
    return value

def record_bytes(record: Dict[str, Any], name: str, default: Any = None) -> bytes:
    value = record.get(name, default)
    if not isinstance(value, str):
        raise ParseError(f"field '{name}' must be base64 text")
    try:
        return b64d(value)
    except (binascii.Error, ValueError) as e:
        raise ParseError(f"field '{name}' is not valid base64") from e

def record_dict(record: Dict[str, Any], name: str) -> Dict[str, Any]:
    value = record.get(name)
    if not isinstance(value, dict):
        raise ParseError(f"field '{name}' must be an object")
    return value
