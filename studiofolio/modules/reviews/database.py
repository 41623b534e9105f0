"""
Reviews Database
================

Fetchers and mutators for the `reviews` table.
"""

from studiofolio.core.backend import fetch_rows, insert_row, update_row, delete_row
from studiofolio.core.config import Config
from studiofolio.core.logging_service import logger
from studiofolio.core.validation import require_fields, empty_to_none, to_int_or_none, to_bool

DRAFT_SESSION_KEY = 'review_draft'

DEFAULT_REVIEW_DRAFT = {
    'client_name': '',
    'client_image': '',
    'rating': 5,
    'review_text': '',
    'project_type': '',
    'is_featured': False,
}

REVIEW_REQUIRED = ('client_name', 'review_text')

RATING_CHOICES = (1, 2, 3, 4, 5)


def fetch_reviews(featured_only=False):
    """Reviews, newest first"""
    filters = {'is_featured': True} if featured_only else None
    return fetch_rows(Config.REVIEWS_TABLE, '*', filters=filters,
                      order_by='created_at', descending=True)


def normalize_review(data):
    row = {key: data[key] for key in DEFAULT_REVIEW_DRAFT if key in data}
    row = empty_to_none(row, ('client_image', 'project_type'))
    for key in ('client_name', 'review_text'):
        if isinstance(row.get(key), str):
            row[key] = row[key].strip()
    if 'rating' in row:
        row['rating'] = to_int_or_none(row['rating'])
    if 'is_featured' in row:
        row['is_featured'] = to_bool(row['is_featured'])
    return row


def create_review(data):
    require_fields(data, REVIEW_REQUIRED)
    created = insert_row(Config.REVIEWS_TABLE, normalize_review(data))
    logger.log_user_action('reviews', 'create review', details={'client_name': data.get('client_name')})
    return created


def update_review(review_id, data):
    require_fields(data, REVIEW_REQUIRED)
    updated = update_row(Config.REVIEWS_TABLE, review_id, normalize_review(data))
    logger.log_user_action('reviews', 'update review', details={'id': review_id})
    return bool(updated)


def delete_review(review_id):
    deleted = delete_row(Config.REVIEWS_TABLE, review_id)
    logger.log_user_action('reviews', 'delete review', details={'id': review_id})
    return bool(deleted)
