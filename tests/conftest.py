import logging

import pytest

from attrhandler import Handler


class Service(Handler):
    fillable = frozenset({'handlers', 'name', 'tags', 'meta', 'scores', 'age'})


@pytest.fixture
def service() -> Service:
    """A handler with a few fillable keys and nested collections."""
    return Service(
        {
            'name': 'svc',
            'tags': ['alpha', 'beta', 'gamma'],
            'meta': {'region': 'eu', 'tier': 2},
            'scores': [3, 8, 1, 9],
        }
    )


@pytest.fixture
def debug_logs(caplog: pytest.LogCaptureFixture) -> pytest.LogCaptureFixture:
    caplog.set_level(logging.DEBUG, logger='attrhandler.handler')
    return caplog
