"""Tests for structured logging configuration."""
import json
import logging
import os
from unittest.mock import patch

import pytest
from flask import Flask, g

from leadwell.logging_config import configure_logging, JSONFormatter, RequestIdFilter


@pytest.fixture(autouse=True)
def _reset_root_logger():
    """Reset root logger state after each test."""
    root = logging.getLogger()
    original_level = root.level
    original_handlers = root.handlers[:]
    yield
    root.setLevel(original_level)
    root.handlers = original_handlers


def _record(msg='hello %s', args=('world',), level=logging.INFO):
    return logging.LogRecord(
        name='test', level=level, pathname='', lineno=0,
        msg=msg, args=args, exc_info=None,
    )


class TestConfigureLogging:
    """Tests for configure_logging()."""

    def test_default_level_is_info(self):
        with patch.dict(os.environ, {}, clear=False):
            os.environ.pop('LOG_LEVEL', None)
            configure_logging()
        assert logging.getLogger().level == logging.INFO

    @pytest.mark.parametrize('value,expected', [
        ('DEBUG', logging.DEBUG),
        ('warning', logging.WARNING),
        ('NONSENSE', logging.INFO),
    ])
    def test_log_level_env_var(self, value, expected):
        with patch.dict(os.environ, {'LOG_LEVEL': value}):
            configure_logging()
        assert logging.getLogger().level == expected

    def test_text_format_includes_logger_name_and_request_id_slot(self, capsys):
        with patch.dict(os.environ, {'LOG_FORMAT': 'text'}):
            configure_logging()
        logging.getLogger('pipeline.intake').info("submission received")
        output = capsys.readouterr().err
        assert 'pipeline.intake' in output
        assert 'submission received' in output
        assert 'INFO' in output
        assert '[-]' in output

    def test_json_format_produces_parseable_json(self, capsys):
        with patch.dict(os.environ, {'LOG_FORMAT': 'json'}):
            configure_logging()
        logging.getLogger('routes.leads').info("structured log")
        parsed = json.loads(capsys.readouterr().err.strip())
        assert parsed['level'] == 'INFO'
        assert parsed['logger'] == 'routes.leads'
        assert parsed['message'] == 'structured log'
        assert parsed['request_id'] == '-'
        assert 'timestamp' in parsed

    def test_json_format_includes_exception(self, capsys):
        with patch.dict(os.environ, {'LOG_FORMAT': 'json'}):
            configure_logging()
        try:
            raise ValueError("boom")
        except ValueError:
            logging.getLogger('test.exc').error("failed", exc_info=True)
        parsed = json.loads(capsys.readouterr().err.strip())
        assert parsed['level'] == 'ERROR'
        assert 'ValueError' in parsed['exception']

    def test_third_party_loggers_quieted_to_warning(self):
        configure_logging()
        for name in ['urllib3', 'openai', 'httpcore', 'httpx', 'sqlalchemy.engine', 'werkzeug']:
            assert logging.getLogger(name).level == logging.WARNING

    def test_no_duplicate_handlers_on_repeated_calls(self):
        configure_logging()
        configure_logging()
        assert len(logging.getLogger().handlers) == 1


class TestRequestIdFilter:

    def test_outside_request_uses_dash(self):
        record = _record()
        assert RequestIdFilter().filter(record) is True
        assert record.request_id == '-'

    def test_inside_request_uses_current_id(self):
        app = Flask(__name__)
        with app.test_request_context('/'):
            g.request_id = 'req-42'
            record = _record()
            RequestIdFilter().filter(record)
        assert record.request_id == 'req-42'


class TestJSONFormatter:

    def test_format_basic_record(self):
        parsed = json.loads(JSONFormatter().format(_record()))
        assert parsed['message'] == 'hello world'
        assert parsed['level'] == 'INFO'
        assert parsed['logger'] == 'test'
        assert 'exception' not in parsed
