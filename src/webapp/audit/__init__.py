"""
Audit logging for keeper ORM model changes.

Provides an audit trail of INSERT, UPDATE, DELETE operations on user
records. Session tokens are never tracked and credential material and
secret text are redacted.
"""
from .events import init_audit_events


def init_audit(app, logfile_path=None):
    """
    Attach audit logging to Flask application.

    Args:
        app: Flask application instance
        logfile_path: Path to audit log file (default: AUDIT_LOG_PATH config)

    Example:
        from webapp.audit import init_audit

        init_audit(app, logfile_path='/var/log/keeper/model_audit.log')
    """
    if logfile_path is None:
        logfile_path = app.config.get('AUDIT_LOG_PATH', '/var/log/keeper/model_audit.log')

    init_audit_events(app, logfile_path)
