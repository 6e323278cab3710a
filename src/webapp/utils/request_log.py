"""
Application logging with request context.

Every record emitted by the webapp and keeper loggers carries the HTTP
method, path and client address of the request being handled ('-' outside
a request), so a failure in the store or the provider exchange can be traced
back to the request that triggered it.
"""
import logging

from flask import has_request_context, request

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s %(method)s %(path)s (%(remote_addr)s): %(message)s"

# Loggers that receive the request-context handler
APP_LOGGERS = ('webapp', 'keeper')


class RequestContextFilter(logging.Filter):
    """Attach method, path and remote_addr to log records."""

    def filter(self, record):
        if has_request_context():
            record.method = request.method
            record.path = request.path
            record.remote_addr = request.remote_addr or '-'
        else:
            record.method = '-'
            record.path = '-'
            record.remote_addr = '-'
        return True


def configure_logging(app):
    """
    Install the request-context handler on the application loggers.

    Safe to call once per app; the handler is added to each logger only once
    per process.
    """
    level = app.config.get('LOG_LEVEL', 'INFO')

    for name in APP_LOGGERS:
        logger = logging.getLogger(name)
        logger.setLevel(level)

        if any(getattr(h, '_keeper_request_handler', False) for h in logger.handlers):
            continue

        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
        handler.addFilter(RequestContextFilter())
        handler._keeper_request_handler = True
        logger.addHandler(handler)
