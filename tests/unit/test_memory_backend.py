import pytest

from inspection_lib.storage.memory_backend import MemoryStorage


def test_memory_basic_operations():
    m = MemoryStorage()

    m.save('ns', 'a', {'x': 1})
    assert m.load('ns', 'a') == {'x': 1}

    assert m.exists('ns', 'a') is True
    assert m.list_keys('ns') == ['a']
    assert m.list_keys('other') == []

    m.delete('ns', 'a')
    assert m.exists('ns', 'a') is False


def test_missing_keys_raise_keyerror():
    m = MemoryStorage()
    with pytest.raises(KeyError):
        m.load('ns', 'missing')
    with pytest.raises(KeyError):
        m.delete('ns', 'missing')


def test_values_are_copied_in_and_out():
    m = MemoryStorage()
    value = {'items': [1, 2]}
    m.save('ns', 'k', value)
    value['items'].append(3)
    assert m.load('ns', 'k') == {'items': [1, 2]}

    loaded = m.load('ns', 'k')
    loaded['items'].clear()
    assert m.load('ns', 'k') == {'items': [1, 2]}
