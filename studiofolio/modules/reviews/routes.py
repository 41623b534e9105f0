"""
Reviews Admin Routes
====================

Form endpoints for the dashboard's reviews tab and a JSON API.
"""

from flask import request, redirect, url_for, jsonify
from . import reviews_bp
from .database import (
    DRAFT_SESSION_KEY, DEFAULT_REVIEW_DRAFT, fetch_reviews, create_review,
    update_review, delete_review,
)
from studiofolio.core.drafts import (
    Reset, apply_field_commands, commands_from_fields, load_draft,
    clear_draft, reduce_fields,
)
from studiofolio.core.identity import admin_required, admin_api_required
from studiofolio.core.logging_service import logger
from studiofolio.core.notifications import notify, save_draft_or_notify
from studiofolio.core.validation import ValidationError, REQUIRED_FIELDS_MESSAGE


def _back_to_reviews(**params):
    return redirect(url_for('admin.dashboard', tab='reviews', **params))


def _refetch_reviews():
    try:
        return fetch_reviews()
    except Exception as e:
        logger.log_error_with_traceback('reviews', e)
        return None


# ===== Form endpoints =====

@reviews_bp.route('/draft', methods=['POST'])
@admin_required
def add_review():
    """Create a review from the add form"""
    draft = load_draft(DRAFT_SESSION_KEY, DEFAULT_REVIEW_DRAFT)
    draft = apply_field_commands(draft, commands_from_fields(request.form, DEFAULT_REVIEW_DRAFT),
                                 DEFAULT_REVIEW_DRAFT)
    save_draft_or_notify(DRAFT_SESSION_KEY, draft, source='reviews')

    try:
        create_review(draft)
    except ValidationError:
        notify(REQUIRED_FIELDS_MESSAGE, source='reviews')
        return _back_to_reviews(add=1)
    except Exception as e:
        logger.log_error_with_traceback('reviews', e)
        notify('Failed to add review', source='reviews')
        return _back_to_reviews(add=1)

    clear_draft(DRAFT_SESSION_KEY)
    notify('Review added successfully', 'success', source='reviews')
    return _back_to_reviews()


@reviews_bp.route('/draft/reset', methods=['POST'])
@admin_required
def reset_review_draft():
    draft = load_draft(DRAFT_SESSION_KEY, DEFAULT_REVIEW_DRAFT)
    draft = reduce_fields(draft, Reset(), DEFAULT_REVIEW_DRAFT)
    save_draft_or_notify(DRAFT_SESSION_KEY, draft, source='reviews')
    return _back_to_reviews()


@reviews_bp.route('/<review_id>/edit', methods=['POST'])
@admin_required
def edit_review(review_id):
    edited = apply_field_commands(dict(DEFAULT_REVIEW_DRAFT),
                                  commands_from_fields(request.form, DEFAULT_REVIEW_DRAFT),
                                  DEFAULT_REVIEW_DRAFT)
    try:
        update_review(review_id, edited)
    except ValidationError:
        notify(REQUIRED_FIELDS_MESSAGE, source='reviews')
        return _back_to_reviews(edit=review_id)
    except Exception as e:
        logger.log_error_with_traceback('reviews', e)
        notify('Failed to update review', source='reviews')
        return _back_to_reviews(edit=review_id)

    notify('Review updated successfully', 'success', source='reviews')
    return _back_to_reviews()


@reviews_bp.route('/<review_id>/delete', methods=['POST'])
@admin_required
def remove_review(review_id):
    try:
        delete_review(review_id)
    except Exception as e:
        logger.log_error_with_traceback('reviews', e)
        notify('Failed to delete review', source='reviews')
    else:
        notify('Review deleted successfully', 'success', source='reviews')
    return _back_to_reviews()


# ===== JSON API =====

@reviews_bp.route('/api/reviews', methods=['GET'])
@admin_api_required
def api_get_reviews():
    reviews = _refetch_reviews()
    if reviews is None:
        return jsonify({'error': 'Failed to fetch reviews'}), 500
    return jsonify(reviews)


@reviews_bp.route('/api/reviews', methods=['POST'])
@admin_api_required
def api_create_review():
    data = request.get_json(silent=True) or {}
    try:
        review = create_review(data)
    except ValidationError as e:
        return jsonify({'error': REQUIRED_FIELDS_MESSAGE, 'missing': e.missing}), 400
    except Exception as e:
        logger.log_error_with_traceback('reviews', e)
        return jsonify({'error': 'Failed to add review'}), 500
    return jsonify({'success': True, 'review': review, 'reviews': _refetch_reviews()})


@reviews_bp.route('/api/reviews/<review_id>', methods=['PUT'])
@admin_api_required
def api_update_review(review_id):
    data = request.get_json(silent=True) or {}
    try:
        success = update_review(review_id, data)
    except ValidationError as e:
        return jsonify({'error': REQUIRED_FIELDS_MESSAGE, 'missing': e.missing}), 400
    except Exception as e:
        logger.log_error_with_traceback('reviews', e)
        return jsonify({'error': 'Failed to update review'}), 500
    if not success:
        return jsonify({'error': 'Review not found'}), 404
    return jsonify({'success': True, 'reviews': _refetch_reviews()})


@reviews_bp.route('/api/reviews/<review_id>', methods=['DELETE'])
@admin_api_required
def api_delete_review(review_id):
    try:
        delete_review(review_id)
    except Exception as e:
        logger.log_error_with_traceback('reviews', e)
        return jsonify({'error': 'Failed to delete review'}), 500
    return jsonify({'success': True, 'reviews': _refetch_reviews()})
