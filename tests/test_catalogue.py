import pytest

from tessera_core.aead import AeadWrapper, AesGcmKeyManager
from tessera_core.catalogue import Catalogue
from tessera_core.errors import NotFoundError, UnsupportedPrimitiveError
from tessera_core.hybrid import HYBRID_DECRYPT_CATALOGUE, X25519HkdfAesGcmPrivateKeyManager
from tessera_core.mac import HmacKeyManager, MacWrapper
from tessera_core.primitives import PrimitiveKind
from tessera_core.registry import Registry


def _aead_catalogue():
    return Catalogue(PrimitiveKind.AEAD, {AesGcmKeyManager.KEY_TYPE: AesGcmKeyManager}, AeadWrapper)


class NewerAesGcmKeyManager(AesGcmKeyManager):
    VERSION = 1


def test_get_key_manager_accepts_primitive_names():
    catalogue = HYBRID_DECRYPT_CATALOGUE
    key_type = X25519HkdfAesGcmPrivateKeyManager.KEY_TYPE
    for name in ("hybrid_decrypt", "HybridDecrypt", "HYBRID_DECRYPT", PrimitiveKind.HYBRID_DECRYPT):
        manager = catalogue.get_key_manager(key_type, name)
        assert manager.get_key_type() == key_type


def test_get_key_manager_wrong_primitive():
    with pytest.raises(NotFoundError) as exc:
        HYBRID_DECRYPT_CATALOGUE.get_key_manager(X25519HkdfAesGcmPrivateKeyManager.KEY_TYPE, "hybrid_encrypt")
    assert "does not support primitive" in str(exc.value)
    with pytest.raises(NotFoundError):
        HYBRID_DECRYPT_CATALOGUE.get_key_manager(X25519HkdfAesGcmPrivateKeyManager.KEY_TYPE, "no-such-primitive")


def test_get_key_manager_unknown_key_type():
    with pytest.raises(NotFoundError) as exc:
        _aead_catalogue().get_key_manager("type.tessera.dev/Missing", "aead")
    assert "No key manager for key type 'type.tessera.dev/Missing'." == str(exc.value)


def test_get_key_manager_min_version():
    catalogue = _aead_catalogue()
    assert catalogue.get_key_manager(AesGcmKeyManager.KEY_TYPE, "aead", min_version=0).get_version() == 0
    with pytest.raises(NotFoundError):
        catalogue.get_key_manager(AesGcmKeyManager.KEY_TYPE, "aead", min_version=1)


def test_managers_and_wrapper_are_cached():
    catalogue = _aead_catalogue()
    first = catalogue.get_key_manager(AesGcmKeyManager.KEY_TYPE, "aead")
    assert catalogue.get_key_manager(AesGcmKeyManager.KEY_TYPE, "aead") is first
    assert catalogue.get_primitive_wrapper() is catalogue.get_primitive_wrapper()


def test_bootstrap_is_repeatable():
    catalogue = _aead_catalogue()
    reg = Registry()
    catalogue.bootstrap(reg)
    catalogue.bootstrap(reg)
    assert reg.key_types() == [AesGcmKeyManager.KEY_TYPE]
    assert isinstance(reg.primitive_wrapper(PrimitiveKind.AEAD), AeadWrapper)


def test_register_swaps_implementation():
    catalogue = _aead_catalogue()
    reg = Registry()
    catalogue.bootstrap(reg)

    newer = NewerAesGcmKeyManager()
    catalogue.register(AesGcmKeyManager.KEY_TYPE, newer, registry=reg)
    assert catalogue.get_key_manager(AesGcmKeyManager.KEY_TYPE, "aead", min_version=1) is newer
    assert reg.key_manager(AesGcmKeyManager.KEY_TYPE) is newer


def test_register_rejects_mismatched_manager():
    catalogue = _aead_catalogue()
    with pytest.raises(ValueError):
        catalogue.register("type.tessera.dev/Other", AesGcmKeyManager(), registry=Registry())
    with pytest.raises(UnsupportedPrimitiveError):
        catalogue.register(HmacKeyManager.KEY_TYPE, HmacKeyManager(), registry=Registry())


def test_register_wrapper():
    catalogue = _aead_catalogue()
    reg = Registry()
    catalogue.bootstrap(reg)
    replacement = AeadWrapper()
    catalogue.register_wrapper(PrimitiveKind.AEAD, replacement, registry=reg)
    assert catalogue.get_primitive_wrapper() is replacement
    assert reg.primitive_wrapper(PrimitiveKind.AEAD) is replacement
    with pytest.raises(UnsupportedPrimitiveError):
        catalogue.register_wrapper(PrimitiveKind.MAC, MacWrapper(), registry=reg)
