"""
tessera_core.errors
-------------------
Typed error hierarchy for the key-management core.

Configuration bugs (NotFoundError, DuplicateRegistrationError) and
data/security failures (InvalidKeyError, AllCandidatesFailedError) are kept
apart so callers can react to them differently. Nothing here is retried
internally.
"""

from __future__ import annotations


class TesseraError(Exception):
    """Base error for tessera_core."""


class ParseError(TesseraError):
    """Serialized key material or key format could not be decoded."""


class InvalidKeyError(TesseraError):
    """Key material is well-formed but rejected by validation."""


class InvalidKeyFormatError(TesseraError):
    """Key format is well-formed but rejected by validation."""


class UnsupportedPrimitiveError(TesseraError):
    """The key manager does not provide the requested capability."""


class UnsupportedOperationError(TesseraError):
    """The key manager does not implement the requested operation."""


class NotFoundError(TesseraError):
    """No key manager, wrapper or catalogue entry is registered."""


class DuplicateRegistrationError(TesseraError):
    """A different object is already registered under the same name."""


class KeysetError(TesseraError):
    """Malformed keyset or forbidden keyset mutation."""


class NoPrimaryKeyError(KeysetError):
    pass


class EmptyKeysetError(KeysetError):
    pass


class SecretKeyMaterialError(KeysetError):
    """Keyset holds material that must not leave the process."""


class CryptoOperationError(TesseraError):
    """A single primitive failed to decrypt, verify or authenticate."""


class AllCandidatesFailedError(TesseraError):
    """Every candidate key failed. Deliberately carries no detail."""
