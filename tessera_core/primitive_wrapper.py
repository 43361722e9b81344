"""
tessera_core.primitive_wrapper
------------------------------
Base class for wrappers plus the candidate-trial loop they share.

Single-key operations use the primary entry and prepend its prefix.
Multi-key operations try prefix matches first, then RAW entries, strictly in
keyset order; the first success wins. When nothing succeeds the caller gets
an AllCandidatesFailedError that says nothing about individual attempts.
"""

from __future__ import annotations
from typing import Any, Callable, Iterator, Tuple, TypeVar

from .constants import LEGACY_FORMAT_SUFFIX
from .crypto_format import split_prefix
from .errors import AllCandidatesFailedError, CryptoOperationError, NoPrimaryKeyError
from .logger import get_logger
from .models import OutputPrefixType
from .primitive_set import PrimitiveSet, PrimitiveSetEntry
from .primitives import PrimitiveKind

log = get_logger("Tessera.Wrapper")

T = TypeVar("T")


class PrimitiveWrapper:
    primitive_kind: PrimitiveKind

    def wrap(self, primitive_set: PrimitiveSet) -> Any:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.primitive_kind.value})"


def primary_entry(primitive_set: PrimitiveSet) -> PrimitiveSetEntry:
    primary = primitive_set.primary()
    if primary is None:
        raise NoPrimaryKeyError("primitive set has no primary key")
    return primary


def candidates(primitive_set: PrimitiveSet, data: bytes) -> Iterator[Tuple[PrimitiveSetEntry, bytes]]:
    """Yields (entry, payload) pairs: prefix matches first, then RAW entries."""
    prefix, remainder = split_prefix(data)
    if prefix is not None:
        for entry in primitive_set.entries_for_prefix(prefix):
            yield entry, remainder
    for entry in primitive_set.raw_entries():
        yield entry, data


def first_success(
    primitive_set: PrimitiveSet,
    data: bytes,
    attempt: Callable[[PrimitiveSetEntry, bytes], T],
    operation: str,
) -> T:
    tried = 0
    for entry, payload in candidates(primitive_set, data):
        tried += 1
        try:
            return attempt(entry, payload)
        except CryptoOperationError:
            continue
    log.debug(f"[WRAPPER] {operation} failed after {tried} candidate(s)")
    raise AllCandidatesFailedError(f"{operation} failed")


def legacy_data(entry: PrimitiveSetEntry, data: bytes) -> bytes:
    if entry.output_prefix_type == OutputPrefixType.LEGACY:
        return bytes(data) + LEGACY_FORMAT_SUFFIX
    return data
