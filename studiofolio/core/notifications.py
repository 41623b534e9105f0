"""
Notifications
=============

User-facing notification side channel. HTML views surface messages as
Flask flash messages; every notification is also logged.
"""

from flask import flash, has_request_context
from .drafts import DraftTooLarge, DRAFT_TOO_LARGE_MESSAGE, save_draft
from .logging_service import logger


def notify(message, category='error', source='ui'):
    """Flash *message* to the user (when in a request) and log it.

    Args:
        message: Human-readable text shown to the user.
        category: Flash category: 'error', 'success', 'info' or 'warning'.
        source: Logging source tag.
    """
    if category == 'error':
        logger.warning(source, message)
    else:
        logger.debug(source, message)

    if has_request_context():
        flash(message, category)


def fetch_or_notify(fetcher, entity_label, *args, **kwargs):
    """Run *fetcher*; on failure notify "Failed to fetch <entity_label>".

    Returns the fetched value, or None on failure so the caller keeps
    whatever it was showing before.
    """
    try:
        return fetcher(*args, **kwargs)
    except Exception as e:
        logger.log_error_with_traceback('fetch', e, {'entity': entity_label})
        notify(f'Failed to fetch {entity_label}', 'error', source='fetch')
        return None


def save_draft_or_notify(key, draft, source='drafts'):
    """Store a form draft; when it is too large for the session, keep the old one and say so.

    Returns True if the draft was stored.
    """
    try:
        save_draft(key, draft)
    except DraftTooLarge as e:
        logger.warning(source, str(e), {'draft': key})
        notify(DRAFT_TOO_LARGE_MESSAGE, 'error', source=source)
        return False
    return True
