"""
Services Database
=================

Fetchers and mutators for the `services` table.
"""

from studiofolio.core.backend import fetch_rows, insert_row, update_row, delete_row
from studiofolio.core.config import Config
from studiofolio.core.logging_service import logger
from studiofolio.core.validation import require_fields, empty_to_none, to_bool

DRAFT_SESSION_KEY = 'service_draft'

DEFAULT_SERVICE_DRAFT = {
    'title': '',
    'description': '',
    'icon': 'Monitor',
    'is_featured': False,
}

SERVICE_REQUIRED = ('title',)


def fetch_services(featured_only=False):
    """Services, newest first"""
    filters = {'is_featured': True} if featured_only else None
    return fetch_rows(Config.SERVICES_TABLE, '*', filters=filters,
                      order_by='created_at', descending=True)


def normalize_service(data):
    row = {key: data[key] for key in DEFAULT_SERVICE_DRAFT if key in data}
    row = empty_to_none(row, ('description', 'icon'))
    if 'title' in row and isinstance(row['title'], str):
        row['title'] = row['title'].strip()
    if 'is_featured' in row:
        row['is_featured'] = to_bool(row['is_featured'])
    return row


def create_service(data):
    require_fields(data, SERVICE_REQUIRED)
    created = insert_row(Config.SERVICES_TABLE, normalize_service(data))
    logger.log_user_action('services', 'create service', details={'title': data.get('title')})
    return created


def update_service(service_id, data):
    require_fields(data, SERVICE_REQUIRED)
    updated = update_row(Config.SERVICES_TABLE, service_id, normalize_service(data))
    logger.log_user_action('services', 'update service', details={'id': service_id})
    return bool(updated)


def delete_service(service_id):
    deleted = delete_row(Config.SERVICES_TABLE, service_id)
    logger.log_user_action('services', 'delete service', details={'id': service_id})
    return bool(deleted)
