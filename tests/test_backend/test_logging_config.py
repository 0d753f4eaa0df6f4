"""Tests for backend logging configuration."""
import json
import logging
from audit_backend.logging_config import StructuredFormatter, setup_logging


def make_record(message):
    return logging.LogRecord('audits', logging.WARNING, __file__, 1, message, None, None)


def test_structured_formatter_outside_request():
    entry = json.loads(StructuredFormatter().format(make_record('Skipping audit')))
    assert entry['level'] == 'WARNING'
    assert entry['logger'] == 'audits'
    assert entry['message'] == 'Skipping audit'
    assert 'request' not in entry


def test_structured_formatter_includes_request(app):
    with app.test_request_context('/api/sync', method='POST'):
        entry = json.loads(StructuredFormatter().format(make_record('Skipping audit')))
    assert entry['request'] == 'POST /api/sync'


def test_setup_logging_writes_to_log_dir(tmp_path, monkeypatch):
    monkeypatch.setenv('LOG_DIR', str(tmp_path))
    monkeypatch.setenv('LOG_LEVEL', 'debug')
    root = setup_logging()
    assert root.level == logging.DEBUG

    for handler in root.handlers:
        handler.flush()
    lines = (tmp_path / 'backend.log').read_text().splitlines()
    assert json.loads(lines[-1])['message'] == 'Logging initialized'
