"""
Error Logger Utility
Stores unhandled errors in the error_logs table, tagged with the product or
gate pass the failing request was working on.
"""

import json
import logging
import traceback
from datetime import datetime

from flask import request, has_request_context
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)

# URL arguments naming a resource, across the UI and /api routes
RESOURCE_ARGS = (
    ('gate_pass_key', 'gatepass'),
    ('gate_pass_id', 'gatepass'),
    ('product_key', 'product'),
    ('product_id', 'product'),
)

# Form fields that must never reach the log
REDACTED_FIELDS = {'csrf_token', 'submit_token'}


def request_resource():
    """
    Product or gate pass the current request refers to

    Returns:
        tuple: (resource_type, resource_key), or (None, None)
    """
    view_args = request.view_args or {}
    for arg, resource_type in RESOURCE_ARGS:
        if view_args.get(arg) is not None:
            return resource_type, str(view_args[arg])[:64]

    # Selection forms post the product key instead of putting it in the URL
    product_key = request.form.get('product_key')
    if product_key:
        return 'product', product_key[:64]
    return None, None


def _form_snapshot():
    if not request.form:
        return None
    fields = {
        key: '[REDACTED]' if key in REDACTED_FIELDS else value[:200]
        for key, value in request.form.items()
    }
    return json.dumps(fields)[:4000]


def _format_traceback(error):
    if getattr(error, '__traceback__', None) is None:
        return None
    return ''.join(traceback.format_exception(type(error), error, error.__traceback__))


def log_error(error, status_code=500):
    """
    Log an error to the database.

    Safe to call from error handlers: a failure to write the row is logged
    and swallowed.

    Args:
        error: The exception or error object
        status_code: HTTP status code (default 500)

    Returns:
        ErrorLog or None if the row could not be written
    """
    from gatepass.models import db, ErrorLog

    entry = ErrorLog(
        timestamp=datetime.utcnow(),
        error_type=type(error).__name__,
        error_message=str(error)[:2000],
        traceback=_format_traceback(error),
        status_code=status_code
    )

    if has_request_context():
        entry.request_method = request.method
        entry.request_url = request.url[:512]
        entry.endpoint = request.endpoint
        entry.form_data = _form_snapshot()
        entry.resource_type, entry.resource_key = request_resource()

    try:
        # A failed request may have left the session mid-transaction
        db.session.rollback()
        db.session.add(entry)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Could not store {entry.error_type} in error_logs: {e}")
        return None

    logger.error(f"{entry.error_type} on {entry.request_method or '-'} {entry.request_url or '-'} "
                 f"({entry.resource_type or 'no resource'} {entry.resource_key or ''}): {entry.error_message}")
    return entry
