import pytest

from tessera_core import config
from tessera_core import registry as global_registry
from tessera_core.models import KeyEntry, KeyStatus
from tessera_core.registry import Registry


@pytest.fixture(autouse=True)
def _reset_global_registry(monkeypatch):
    monkeypatch.delenv("TESSERA_PRIMITIVES", raising=False)
    monkeypatch.delenv("TESSERA_MIN_KEY_VERSION", raising=False)
    global_registry.reset()
    yield
    global_registry.reset()


@pytest.fixture
def registry():
    """Fresh registry with every family registered."""
    reg = Registry()
    config.register(registry=reg)
    return reg


@pytest.fixture
def new_key(registry):
    """Factory: new keyset entry generated from a template."""
    def _new_key(template, key_id, status=KeyStatus.ENABLED, output_prefix_type=None):
        key_data = registry.new_key_data(template)
        return KeyEntry.from_key_data(
            key_data,
            key_id,
            status,
            output_prefix_type or template.output_prefix_type,
        )
    return _new_key
