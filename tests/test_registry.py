import logging
import threading

import pytest

from tessera_core import registry as global_registry
from tessera_core.aead import AES128_GCM, AeadWrapper, AesGcmKeyManager
from tessera_core.errors import (
    DuplicateRegistrationError, InvalidKeyError, NotFoundError, UnsupportedOperationError,
    UnsupportedPrimitiveError,
)
from tessera_core.mac import MacWrapper
from tessera_core.models import KeyEntry, KeyStatus, Keyset
from tessera_core.primitive_set import PrimitiveSet
from tessera_core.primitives import Aead, PrimitiveKind
from tessera_core.registry import Registry


def test_register_and_lookup():
    reg = Registry()
    km = AesGcmKeyManager()
    reg.register_key_manager(km)
    assert reg.get_key_manager(km.get_key_type(), PrimitiveKind.AEAD) is km
    assert reg.key_types() == [km.get_key_type()]


def test_register_same_instance_is_noop():
    reg = Registry()
    km = AesGcmKeyManager()
    reg.register_key_manager(km)
    reg.register_key_manager(km)
    assert reg.key_manager(km.get_key_type()) is km


def test_register_different_instance_is_rejected():
    reg = Registry()
    first = AesGcmKeyManager()
    reg.register_key_manager(first)
    with pytest.raises(DuplicateRegistrationError):
        reg.register_key_manager(AesGcmKeyManager())
    assert reg.key_manager(first.get_key_type()) is first


def test_register_with_overwrite_replaces():
    reg = Registry()
    reg.register_key_manager(AesGcmKeyManager())
    replacement = AesGcmKeyManager()
    reg.register_key_manager(replacement, allow_overwrite=True)
    assert reg.key_manager(replacement.get_key_type()) is replacement


def test_lookup_unknown_key_type():
    with pytest.raises(NotFoundError):
        Registry().get_key_manager("type.tessera.dev/Missing", PrimitiveKind.AEAD)


def test_lookup_wrong_capability():
    reg = Registry()
    km = AesGcmKeyManager()
    reg.register_key_manager(km)
    with pytest.raises(UnsupportedPrimitiveError):
        reg.get_key_manager(km.get_key_type(), PrimitiveKind.MAC)


def test_wrapper_registration():
    reg = Registry()
    wrapper = AeadWrapper()
    reg.register_primitive_wrapper(wrapper)
    reg.register_primitive_wrapper(wrapper)
    assert reg.primitive_wrapper(PrimitiveKind.AEAD) is wrapper
    with pytest.raises(DuplicateRegistrationError):
        reg.register_primitive_wrapper(AeadWrapper())
    with pytest.raises(NotFoundError):
        reg.primitive_wrapper(PrimitiveKind.MAC)


def test_wrap_checks_set_kind(registry, new_key):
    key = new_key(AES128_GCM, 1)
    pset = PrimitiveSet.from_keyset(Keyset(1, [key]), PrimitiveKind.AEAD, registry=registry)
    assert isinstance(registry.wrap(pset, PrimitiveKind.AEAD), Aead)
    with pytest.raises(UnsupportedPrimitiveError):
        registry.wrap(pset, PrimitiveKind.MAC)


def test_wrap_without_wrapper():
    reg = Registry()
    reg.register_key_manager(AesGcmKeyManager())
    key_data = reg.new_key_data(AES128_GCM)
    key = KeyEntry.from_key_data(key_data, 1)
    pset = PrimitiveSet.from_keyset(Keyset(1, [key]), PrimitiveKind.AEAD, registry=reg)
    with pytest.raises(NotFoundError):
        reg.wrap(pset, PrimitiveKind.AEAD)


def test_get_primitive_for_entry(registry, new_key):
    key = new_key(AES128_GCM, 7)
    aead = registry.get_primitive(key, PrimitiveKind.AEAD)
    assert aead.decrypt(aead.encrypt(b"data", b""), b"") == b"data"


def test_get_primitive_for_destroyed_entry(registry, new_key):
    key = new_key(AES128_GCM, 7)
    destroyed = KeyEntry(key_id=7, key_type=key.key_type, status=KeyStatus.DESTROYED)
    with pytest.raises(InvalidKeyError):
        registry.get_primitive(destroyed, PrimitiveKind.AEAD)


def test_public_key_data_needs_private_manager(registry, new_key):
    key = new_key(AES128_GCM, 1)
    with pytest.raises(UnsupportedOperationError):
        registry.public_key_data(key.key_type, key.key_material)


def test_reset_clears_everything(registry):
    assert registry.key_types()
    registry.reset()
    assert registry.key_types() == []
    with pytest.raises(NotFoundError):
        registry.primitive_wrapper(PrimitiveKind.AEAD)


def test_registration_is_logged(caplog):
    caplog.set_level(logging.INFO, logger="Tessera.Registry")
    Registry().register_key_manager(AesGcmKeyManager())
    assert "[REGISTRY] registered key manager type=type.tessera.dev/AesGcmKey" in caplog.text


def test_concurrent_registration_admits_one_manager():
    reg = Registry()
    managers = [AesGcmKeyManager() for _ in range(8)]
    barrier = threading.Barrier(len(managers))
    outcomes = []

    def register(km):
        barrier.wait()
        try:
            reg.register_key_manager(km)
            outcomes.append("ok")
        except DuplicateRegistrationError:
            outcomes.append("duplicate")

    threads = [threading.Thread(target=register, args=(km,)) for km in managers]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert outcomes.count("ok") == 1
    assert outcomes.count("duplicate") == len(managers) - 1
    assert reg.key_manager(managers[0].get_key_type()) in managers


def test_module_level_functions_use_global_registry():
    km = AesGcmKeyManager()
    global_registry.register_key_manager(km)
    global_registry.register_primitive_wrapper(MacWrapper())
    assert global_registry.get_key_manager(km.get_key_type(), PrimitiveKind.AEAD) is km
    assert global_registry.get_registry().primitive_wrapper(PrimitiveKind.MAC)
    global_registry.reset()
    with pytest.raises(NotFoundError):
        global_registry.get_key_manager(km.get_key_type(), PrimitiveKind.AEAD)
