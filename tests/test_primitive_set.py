import dataclasses

import pytest

from tessera_core.aead import AES128_GCM, AES256_GCM_RAW
from tessera_core.crypto_format import output_prefix
from tessera_core.errors import (
    EmptyKeysetError, NoPrimaryKeyError, ParseError, UnsupportedPrimitiveError,
)
from tessera_core.mac import HMAC_SHA256_128BITTAG
from tessera_core.models import KeyStatus, Keyset, OutputPrefixType
from tessera_core.primitive_set import PrimitiveSet, PrimitiveSetEntry
from tessera_core.primitives import Aead, Mac, PrimitiveKind


class DummyAead(Aead):
    def __init__(self, name):
        self.name = name


def _entry(primitive, key_id, opt=OutputPrefixType.TINK, status=KeyStatus.ENABLED):
    return PrimitiveSetEntry(
        primitive=primitive,
        key_id=key_id,
        status=status,
        output_prefix_type=opt,
        identifier=output_prefix(key_id, opt),
    )


def test_primary_and_prefix_lookup():
    a, b, raw = _entry(DummyAead("a"), 1), _entry(DummyAead("b"), 2), _entry(DummyAead("r"), 3, OutputPrefixType.RAW)
    pset = PrimitiveSet(PrimitiveKind.AEAD, [a, b, raw], primary=b)
    assert pset.primary() is b
    assert pset.primitive_kind == PrimitiveKind.AEAD
    assert pset.entries_for_prefix(output_prefix(1, OutputPrefixType.TINK)) == (a,)
    assert pset.entries_for_prefix(b"\x01\x00\x00\x00\x09") == ()
    assert pset.raw_entries() == (raw,)
    assert pset.all_entries() == (a, b, raw)
    assert len(pset) == 3


def test_shared_prefix_keeps_insertion_order():
    first = _entry(DummyAead("first"), 7)
    second = _entry(DummyAead("second"), 7)
    pset = PrimitiveSet(PrimitiveKind.AEAD, [first, second], primary=first)
    assert pset.entries_for_prefix(first.identifier) == (first, second)


def test_legacy_and_tink_prefixes_are_distinct():
    tink = _entry(DummyAead("t"), 5, OutputPrefixType.TINK)
    legacy = _entry(DummyAead("l"), 5, OutputPrefixType.LEGACY)
    pset = PrimitiveSet(PrimitiveKind.AEAD, [tink, legacy], primary=tink)
    assert pset.entries_for_prefix(tink.identifier) == (tink,)
    assert pset.entries_for_prefix(legacy.identifier) == (legacy,)


def test_primary_must_be_present_and_enabled():
    a = _entry(DummyAead("a"), 1)
    outsider = _entry(DummyAead("x"), 2)
    disabled = _entry(DummyAead("d"), 3, status=KeyStatus.DISABLED)
    with pytest.raises(NoPrimaryKeyError):
        PrimitiveSet(PrimitiveKind.AEAD, [a], primary=None)
    with pytest.raises(NoPrimaryKeyError):
        PrimitiveSet(PrimitiveKind.AEAD, [a], primary=outsider)
    with pytest.raises(NoPrimaryKeyError):
        PrimitiveSet(PrimitiveKind.AEAD, [a, disabled], primary=disabled)


def test_empty_set_without_primary_is_allowed():
    pset = PrimitiveSet(PrimitiveKind.AEAD, [], primary=None)
    assert pset.primary() is None
    assert len(pset) == 0


class DummyMac(Mac):
    pass


def test_entries_must_match_kind():
    wrong = _entry(DummyMac(), 1)
    with pytest.raises(UnsupportedPrimitiveError):
        PrimitiveSet(PrimitiveKind.AEAD, [wrong], primary=wrong)


def test_from_keyset_skips_non_enabled(registry, new_key):
    k1 = new_key(AES128_GCM, 1)
    k2 = new_key(AES128_GCM, 2, status=KeyStatus.DISABLED)
    k3 = dataclasses.replace(new_key(AES128_GCM, 3), status=KeyStatus.DESTROYED, key_material=None)
    k4 = new_key(AES256_GCM_RAW, 4)
    pset = PrimitiveSet.from_keyset(Keyset(1, [k1, k2, k3, k4]), PrimitiveKind.AEAD, registry=registry)
    assert [e.key_id for e in pset.all_entries()] == [1, 4]
    assert pset.primary().key_id == 1
    assert [e.key_id for e in pset.raw_entries()] == [4]
    assert pset.entries_for_prefix(output_prefix(2, OutputPrefixType.TINK)) == ()


def test_from_keyset_without_enabled_keys(registry, new_key):
    k1 = new_key(AES128_GCM, 1, status=KeyStatus.DISABLED)
    with pytest.raises(EmptyKeysetError):
        PrimitiveSet.from_keyset(Keyset(1, [k1]), PrimitiveKind.AEAD, registry=registry)
    with pytest.raises(EmptyKeysetError):
        PrimitiveSet.from_keyset(Keyset(None, []), PrimitiveKind.AEAD, registry=registry)


def test_from_keyset_with_disabled_primary(registry, new_key):
    k1 = new_key(AES128_GCM, 1, status=KeyStatus.DISABLED)
    k2 = new_key(AES128_GCM, 2)
    with pytest.raises(NoPrimaryKeyError):
        PrimitiveSet.from_keyset(Keyset(1, [k1, k2]), PrimitiveKind.AEAD, registry=registry)
    with pytest.raises(NoPrimaryKeyError):
        PrimitiveSet.from_keyset(Keyset(99, [k2]), PrimitiveKind.AEAD, registry=registry)


def test_from_keyset_aborts_on_bad_enabled_key(registry, new_key):
    good = new_key(AES128_GCM, 1)
    broken = dataclasses.replace(new_key(AES128_GCM, 2), key_material=b"garbage")
    with pytest.raises(ParseError):
        PrimitiveSet.from_keyset(Keyset(1, [good, broken]), PrimitiveKind.AEAD, registry=registry)


def test_from_keyset_wrong_capability(registry, new_key):
    key = new_key(HMAC_SHA256_128BITTAG, 1)
    with pytest.raises(UnsupportedPrimitiveError):
        PrimitiveSet.from_keyset(Keyset(1, [key]), PrimitiveKind.AEAD, registry=registry)
