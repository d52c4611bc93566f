import pytest

from attrhandler.store import AttributeStore, is_ordinal


def test_basic_get_set_item():
    store: AttributeStore[int] = AttributeStore()
    store['x'] = 1
    assert store['x'] == 1
    assert 'x' in store
    assert 'y' not in store


def test_missing_key_raises_keyerror():
    store: AttributeStore[int] = AttributeStore()
    with pytest.raises(KeyError):
        _ = store['nope']


def test_append_uses_next_ordinal():
    store: AttributeStore[str] = AttributeStore({'name': 'svc'})
    assert store.append('a') == 0
    assert store.append('b') == 1
    assert list(store) == ['name', 0, 1]


def test_append_restarts_from_largest_remaining_ordinal():
    store = AttributeStore({5: 'five'})
    assert store.append('six') == 6

    del store[6]
    del store[5]
    assert store.append('zero') == 0


def test_append_ignores_bool_and_negative_keys():
    store = AttributeStore[str]([(True, 'yes'), (-3, 'neg')])  # type: ignore[list-item]
    assert store.next_ordinal() == 0


def test_first_and_last_follow_insertion_order():
    store = AttributeStore({'b': 2, 'a': 1})
    store.append(3)
    assert store.first() == 2
    assert store.last() == 3

    assert AttributeStore().first() is None
    assert AttributeStore().last() is None


def test_pop_update_and_clear():
    store = AttributeStore({'a': 1, 'b': 2})
    assert store.pop('a') == 1
    store.update({'c': 3})
    assert dict(store) == {'b': 2, 'c': 3}

    store.clear()
    assert len(store) == 0


def test_snapshot_is_a_copy():
    store = AttributeStore({'a': 1})
    copied = store.snapshot()
    store['b'] = 2
    assert copied == {'a': 1}


def test_equality_with_plain_mappings():
    assert AttributeStore({'a': 1}) == {'a': 1}
    assert AttributeStore({'a': 1}) != {'a': 2}


def test_repr():
    assert repr(AttributeStore({'a': 1})) == "AttributeStore({'a': 1})"


def test_is_ordinal():
    assert is_ordinal(0)
    assert is_ordinal(12)
    assert not is_ordinal(-1)
    assert not is_ordinal(False)
    assert not is_ordinal('0')
