"""
Tests for the key-value stores and the typed storage binder.
"""
import json
from decimal import Decimal

import pytest

from rentmate.datatypes import OwnerInfo
from rentmate.storage import JsonFileStore, MemoryStore, StorageBinder


class FailingStore(MemoryStore):
    """Store whose writes always fail, like a full disk."""

    def set(self, key, value):
        raise OSError("disk full")


class TestStorageBinder:
    def test_missing_key_returns_default_without_writing(self):
        store = MemoryStore()
        binder = StorageBinder(store)

        assert binder.load('rentmate_owner', {'name': ''}) == {'name': ''}
        # lazy: nothing is written until someone saves
        assert store.get('rentmate_owner') is None

    def test_default_is_copied(self):
        binder = StorageBinder(MemoryStore())
        default = []

        loaded = binder.load('rentmate_tenants', default)
        loaded.append('x')

        assert default == []

    def test_save_then_load(self):
        binder = StorageBinder(MemoryStore())
        binder.save('k', {'a': 1, 'b': ['x', 'y']})
        assert binder.load('k', None) == {'a': 1, 'b': ['x', 'y']}

    def test_save_overwrites_whole_entry(self):
        store = MemoryStore()
        binder = StorageBinder(store)
        binder.save('k', {'a': 1, 'b': 2})
        binder.save('k', {'c': 3})
        assert json.loads(store.get('k')) == {'c': 3}

    def test_corrupt_json_returns_default(self):
        store = MemoryStore({'rentmate_owner': '{not json'})
        binder = StorageBinder(store)

        info = binder.load('rentmate_owner', OwnerInfo(), OwnerInfo.from_dict)

        assert info == OwnerInfo('', '', '')
        # the bad entry is left alone
        assert store.get('rentmate_owner') == '{not json'

    def test_wrong_shape_returns_default(self):
        binder = StorageBinder(MemoryStore({'rentmate_owner': '[1, 2, 3]'}))
        assert binder.load('rentmate_owner', OwnerInfo(), OwnerInfo.from_dict) == OwnerInfo()

    def test_encode_decode_hooks(self):
        binder = StorageBinder(MemoryStore())
        binder.save('owner', OwnerInfo('Asha', '9000000000', 'asha@upi'), OwnerInfo.to_dict)
        assert binder.load('owner', OwnerInfo(), OwnerInfo.from_dict) == OwnerInfo('Asha', '9000000000', 'asha@upi')

    def test_unserializable_value_is_not_raised(self):
        store = MemoryStore()
        binder = StorageBinder(store)

        assert binder.save('k', {'amount': Decimal('1.5')}) is False
        assert store.get('k') is None

    def test_non_finite_amount_is_not_raised(self):
        store = MemoryStore()
        binder = StorageBinder(store)

        assert binder.save('k', Decimal('Infinity'), lambda amount: int(amount)) is False
        assert store.get('k') is None

    def test_store_write_failure_is_not_raised(self):
        binder = StorageBinder(FailingStore())
        assert binder.save('k', {'a': 1}) is False


class TestJsonFileStore:
    def test_missing_file_reads_empty(self, tmp_path):
        store = JsonFileStore(tmp_path / 'store.json')
        assert store.get('anything') is None

    def test_values_survive_a_new_store_instance(self, tmp_path):
        path = tmp_path / 'store.json'
        JsonFileStore(path).set('rentmate_owner', '{"name": "Asha"}')
        JsonFileStore(path).set('rentmate_tenants', '[]')

        reopened = JsonFileStore(path)
        assert reopened.get('rentmate_owner') == '{"name": "Asha"}'
        assert reopened.get('rentmate_tenants') == '[]'

    def test_creates_parent_directories(self, tmp_path):
        path = tmp_path / 'nested' / 'dir' / 'store.json'
        JsonFileStore(path).set('k', 'v')
        assert path.exists()

    @pytest.mark.parametrize('content', ['garbage', '[1, 2]', ''])
    def test_corrupt_file_reads_empty(self, tmp_path, content):
        path = tmp_path / 'store.json'
        path.write_text(content)
        assert JsonFileStore(path).get('k') is None

    def test_non_string_values_are_ignored(self, tmp_path):
        path = tmp_path / 'store.json'
        path.write_text('{"k": 5}')
        assert JsonFileStore(path).get('k') is None
