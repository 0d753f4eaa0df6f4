"""Logging configuration for the audit backend.

Records go to a rotating JSON file for later analysis of field submissions
and to the console in plain text. Records emitted while a request is being
handled carry its method and path, so a rejected audit can be traced back to
the endpoint that received it.
"""
import logging
import os
import json
from logging.handlers import RotatingFileHandler
from flask import has_request_context, request
from audit_shared.models import now

LOG_FILE_NAME = 'backend.log'
LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
LOG_FILE_BACKUPS = 5
CONSOLE_FORMAT = '%(asctime)s %(levelname)-8s %(name)-20s %(message)s'

# Libraries whose INFO output drowns out request handling
QUIET_LOGGERS = ('werkzeug', 'sqlalchemy.engine')

_installed_handlers = []


class StructuredFormatter(logging.Formatter):
    """Format records as one JSON object per line."""

    def format(self, record):
        log_entry = {
            'timestamp': now().isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }

        if has_request_context():
            log_entry['request'] = f"{request.method} {request.path}"

        if record.exc_info:
            log_entry['exception'] = self.formatException(record.exc_info)

        if hasattr(record, 'extra_fields'):
            log_entry.update(record.extra_fields)

        return json.dumps(log_entry, default=str)


def get_logs_dir():
    """Directory for the JSON log file: LOG_DIR, or ``logs/`` at the repository root."""
    return os.getenv('LOG_DIR') or os.path.join(os.path.dirname(__file__), '..', 'logs')


def _build_handlers(log_level, log_file):
    file_handler = RotatingFileHandler(log_file, maxBytes=LOG_FILE_MAX_BYTES, backupCount=LOG_FILE_BACKUPS)
    file_handler.setFormatter(StructuredFormatter())

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))

    for handler in (file_handler, console_handler):
        handler.setLevel(log_level)
    return file_handler, console_handler


def setup_logging():
    """Configure the root logger for the backend.

    Safe to call once per application instance: handlers installed by an
    earlier call are closed and replaced.

    Returns:
        logging.Logger: The configured root logger
    """
    log_level_name = os.getenv('LOG_LEVEL', 'INFO').upper()
    log_level = getattr(logging, log_level_name, logging.INFO)

    logs_dir = get_logs_dir()
    os.makedirs(logs_dir, exist_ok=True)
    log_file = os.path.join(logs_dir, LOG_FILE_NAME)

    root = logging.getLogger()
    root.setLevel(log_level)

    while _installed_handlers:
        handler = _installed_handlers.pop()
        root.removeHandler(handler)
        handler.close()

    for handler in _build_handlers(log_level, log_file):
        root.addHandler(handler)
        _installed_handlers.append(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    root.info("Logging initialized", extra={
        'extra_fields': {
            'log_level': log_level_name,
            'log_file': log_file,
        }
    })
    return root
