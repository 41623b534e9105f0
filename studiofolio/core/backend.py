"""
Backend Client
==============

Configured handle to the hosted Supabase project (database, auth, storage).

The client lives on ``app.extensions['supabase']`` so tests and embedding
apps can hand in their own instance. Query helpers raise whatever the client
raises; callers decide how a failure is surfaced.
"""

from flask import current_app
from .config import Config
from .logging_service import logger


class BackendNotConfigured(RuntimeError):
    """Raised when a backend call is made without a configured client."""


def create_backend_client(url, key):
    """Create a Supabase client for *url* using API *key*."""
    from supabase import create_client
    return create_client(url, key)


def init_backend(app, client=None):
    """Install the backend client on the Flask app.

    Args:
        app: Flask application.
        client: Optional pre-built client (tests pass an in-memory fake).

    Returns:
        The installed client, or None when credentials are missing.
    """
    if client is None:
        url = app.config.get('SUPABASE_URL') or Config.SUPABASE_URL
        key = app.config.get('SUPABASE_KEY') or Config.SUPABASE_KEY
        if url and key:
            client = create_backend_client(url, key)
        else:
            logger.warning('backend', 'SUPABASE_URL / SUPABASE_KEY not set - backend calls will fail')

    app.extensions['supabase'] = client
    return client


def get_backend():
    """Return the configured client or raise BackendNotConfigured."""
    client = current_app.extensions.get('supabase')
    if client is None:
        raise BackendNotConfigured('Supabase client is not configured')
    return client


def get_auth():
    """Auth interface: sign_in_with_password, sign_up, sign_out, get_user."""
    return get_backend().auth


def get_bucket(bucket_name=None):
    """Storage interface bound to *bucket_name* (defaults to STORAGE_BUCKET)."""
    bucket_name = bucket_name or current_app.config.get('STORAGE_BUCKET') or Config.STORAGE_BUCKET
    return get_backend().storage.from_(bucket_name)


# ===== Query helpers =====

def fetch_rows(table, columns='*', filters=None, order_by=None, descending=False, limit=None):
    """Read rows from *table*.

    Args:
        table: Table name.
        columns: Column selection, may embed a joined relation
            (e.g. "*, project_categories(name, slug)").
        filters: Dict of column -> value equality predicates.
        order_by: Column to order by.
        descending: Order direction.
        limit: Maximum number of rows.

    Returns:
        List of row dicts.
    """
    query = get_backend().table(table).select(columns)

    for column, value in (filters or {}).items():
        query = query.eq(column, value)
    if order_by:
        query = query.order(order_by, desc=descending)
    if limit is not None:
        query = query.limit(limit)

    response = query.execute()
    return response.data or []


def fetch_row(table, row_id, columns='*'):
    """Read a single row by id, or None."""
    rows = fetch_rows(table, columns, filters={'id': row_id})
    return rows[0] if rows else None


def insert_row(table, row):
    """Insert one row; returns the stored row (with server-assigned id/timestamps)."""
    response = get_backend().table(table).insert([row]).execute()
    data = response.data or []
    return data[0] if data else None


def update_row(table, row_id, changes):
    """Apply a partial update to the row with *row_id*; returns updated rows."""
    response = get_backend().table(table).update(changes).eq('id', row_id).execute()
    return response.data or []


def delete_row(table, row_id):
    """Hard-delete the row with *row_id*; returns deleted rows."""
    response = get_backend().table(table).delete().eq('id', row_id).execute()
    return response.data or []
