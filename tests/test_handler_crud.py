import logging

import pytest

from attrhandler import FillablePolicy, Handler, HandlerRegistry, InvalidArgument, PolicyViolation, TypeMismatch

from conftest import Service


def test_construction_drops_non_fillable_attributes():
    handler = Handler({'name': 'svc', 'age': 5}, fillable={'handlers', 'name'})
    assert handler.to_array() == {'name': 'svc'}


def test_fresh_handler_is_empty():
    handler = Handler()
    assert handler.count() == 0
    assert handler.to_array() == {}
    assert handler.policy == FillablePolicy()


def test_subclass_allow_list(service: Service):
    assert service.get('name') == 'svc'
    assert service.policy.allows('scores')
    assert not service.policy.allows('unknown')


def test_set_then_get(service: Service):
    assert service.set('name', 'other').get('name') == 'other'


def test_set_non_fillable_raises_and_leaves_store_untouched(service: Service):
    before = service.get('secret')

    with pytest.raises(PolicyViolation):
        service.set('secret', 1)

    assert service.get('secret') == before
    assert not service.is_set('secret')


def test_get_missing_returns_default():
    handler = Handler()
    assert handler.get('nope') is None
    assert handler.get('nope', 'fallback') == 'fallback'


def test_set_handlers_requires_a_mapping_of_callables():
    handler = Handler()
    handler.set('handlers', {'a': print})
    assert isinstance(handler.get('handlers'), HandlerRegistry)
    assert handler.get_handler('a') is print

    with pytest.raises(InvalidArgument):
        handler.set('handlers', 'print')
    with pytest.raises(InvalidArgument):
        handler.set('handlers', {'a': 'print'})

    assert handler.get_handler('a') is print


def test_push_without_key_appends_ordinals():
    handler = Handler()
    handler.push('v1').push('v2')

    assert handler.first() == 'v1'
    assert handler.last() == 'v2'
    assert handler.to_array() == {0: 'v1', 1: 'v2'}


def test_push_with_key_appends_into_collections(service: Service):
    service.push('delta', 'tags')
    assert service.last('tags') == 'delta'

    service.push('extra', 'meta')
    assert service.get('meta') == {'region': 'eu', 'tier': 2, 0: 'extra'}


def test_push_with_key_creates_a_list_when_missing():
    handler = Handler(fillable={'items'})
    handler.push(1, 'items')
    assert handler.get('items') == [1]


def test_push_into_a_scalar_raises(service: Service):
    with pytest.raises(TypeMismatch):
        service.push('x', 'name')
    assert service.get('name') == 'svc'


def test_push_with_non_fillable_key_raises():
    handler = Handler()
    with pytest.raises(PolicyViolation):
        handler.push(1, 'items')
    assert not handler.is_set('items')


def test_push_items_keeps_argument_order(service: Service):
    service.push_items('x', 'y', key='tags')
    assert service.get('tags') == ['alpha', 'beta', 'gamma', 'x', 'y']

    handler = Handler()
    handler.push_items('a', 'b', 'c')
    assert list(handler.to_array().values()) == ['a', 'b', 'c']


def test_pull(service: Service):
    count = service.count()

    assert service.pull('missing', 'default') == 'default'
    assert service.count() == count

    assert service.pull('name') == 'svc'
    assert service.count() == count - 1
    assert not service.is_set('name')


def test_fill_skips_non_fillable_keys(debug_logs: pytest.LogCaptureFixture):
    handler = Handler(fillable={'a'})
    handler.fill({'a': 1, 'z': 99})

    assert handler.get('a') == 1
    assert handler.get('z') is None
    assert "Skipping non-fillable attribute 'z'" in debug_logs.text


def test_clear_empties_everything(service: Service):
    service.push_handler(print)
    service.clear()

    assert service.count() == 0
    assert service.to_array() == {}
    assert service.get_handler() is None


def test_injected_logger_receives_records(caplog: pytest.LogCaptureFixture):
    logger = logging.getLogger('tests.injected')
    caplog.set_level(logging.DEBUG, logger='tests.injected')

    Handler(logger=logger).clear()

    assert [record.name for record in caplog.records] == ['tests.injected']


def test_mapping_protocol(service: Service):
    assert service['name'] == 'svc'
    assert 'name' in service
    assert len(service) == service.count()
    assert list(service) == ['name', 'tags', 'meta', 'scores']

    service['age'] = 3
    assert service.get('age') == 3
    with pytest.raises(PolicyViolation):
        service['secret'] = 1

    del service['age']
    with pytest.raises(KeyError):
        del service['age']
    with pytest.raises(KeyError):
        _ = service['age']


def test_attribute_fallback(service: Service):
    assert service.name == 'svc'
    with pytest.raises(AttributeError):
        _ = service.unknown


def test_methods_win_over_attributes():
    handler = Handler(fillable={'count'})
    handler.set('count', 10)
    assert callable(handler.count)
    assert handler.count() == 1


def test_fillable_reports_the_instance_allow_list():
    handler = Handler(fillable={'handlers', 'name'})
    assert handler.fillable == frozenset({'handlers', 'name'})
    assert Handler.fillable == frozenset({'handlers'})
    assert Handler().fillable == frozenset({'handlers'})


def test_fillable_of_a_subclass(service: Service):
    assert service.fillable == Service.fillable
    assert 'scores' in service.fillable


def test_push_into_a_nested_handler_appends_an_ordinal(service: Service):
    nested = Handler()
    service.set('meta', nested)
    service.push('x', 'meta').push('y', 'meta')

    assert nested.to_array() == {0: 'x', 1: 'y'}
    assert service.count('meta') == 2
