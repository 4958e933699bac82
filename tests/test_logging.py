import io
import logging

import pytest

from rconsole.utils.logging import get_logger, setup_logging


def test_setup_logging_writes_to_stream():
    stream = io.StringIO()
    setup_logging('debug', stream=stream)

    get_logger('rconsole.test').debug('reader started')

    assert 'rconsole.test - DEBUG - reader started' in stream.getvalue()
    assert logging.getLogger('asyncio').level == logging.DEBUG


def test_asyncio_logger_quiet_above_debug():
    setup_logging('INFO', stream=io.StringIO())
    assert logging.getLogger('asyncio').level == logging.WARNING


def test_setup_logging_rejects_unknown_level():
    with pytest.raises(ValueError):
        setup_logging('chatty')
