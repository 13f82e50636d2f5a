"""
Logging setup for the API process.

configure_logging() is called from create_app(). LOG_FORMAT picks "text" for
local runs or "json" for log aggregators; LOG_LEVEL defaults to INFO. Records
emitted while serving a request carry its X-Request-ID, so one intake can be
followed from the submission through the model call to the storage writes.
"""
import json
import logging
import os
import sys
from datetime import datetime, timezone

from flask import g, has_request_context, request

TEXT_FORMAT = '[%(asctime)s] %(levelname)s %(name)s [%(request_id)s] — %(message)s'
TEXT_DATEFMT = '%Y-%m-%d %H:%M:%S'

# Chatty at INFO: HTTP clients under the OpenAI SDK, SQL echo, dev server access log
QUIET_LOGGERS = ('urllib3', 'openai', 'httpcore', 'httpx', 'sqlalchemy.engine', 'werkzeug')


class RequestIdFilter(logging.Filter):
    """Adds `request_id` to every record ("-" outside a request)."""

    def filter(self, record):
        record.request_id = g.get('request_id', '-') if has_request_context() else '-'
        return True


class JSONFormatter(logging.Formatter):

    def format(self, record):
        entry = {
            'timestamp': datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'request_id': getattr(record, 'request_id', '-'),
            'message': record.getMessage(),
        }
        if has_request_context():
            entry['method'] = request.method
            entry['path'] = request.path
        if record.exc_info and record.exc_info[0] is not None:
            entry['exception'] = self.formatException(record.exc_info)
        return json.dumps(entry)


def _resolve_level(name):
    level = logging.getLevelName(name.upper())
    # getLevelName() maps unknown names to the string "Level <name>"
    return level if isinstance(level, int) else logging.INFO


def configure_logging():
    """Install a single stderr handler on the root logger; safe to call again."""
    level = _resolve_level(os.getenv('LOG_LEVEL', 'INFO'))

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.addFilter(RequestIdFilter())
    if os.getenv('LOG_FORMAT', 'text').lower() == 'json':
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT, datefmt=TEXT_DATEFMT))

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
