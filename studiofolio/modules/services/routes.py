"""
Services Admin Routes
=====================

Form endpoints for the dashboard's services tab and a JSON API.
"""

from flask import request, redirect, url_for, jsonify
from . import services_bp
from .database import (
    DRAFT_SESSION_KEY, DEFAULT_SERVICE_DRAFT, fetch_services, create_service,
    update_service, delete_service,
)
from studiofolio.core.drafts import (
    Reset, apply_field_commands, commands_from_fields, load_draft,
    clear_draft, reduce_fields,
)
from studiofolio.core.identity import admin_required, admin_api_required
from studiofolio.core.logging_service import logger
from studiofolio.core.notifications import notify, save_draft_or_notify
from studiofolio.core.validation import ValidationError, REQUIRED_FIELDS_MESSAGE


def _back_to_services(**params):
    return redirect(url_for('admin.dashboard', tab='services', **params))


def _refetch_services():
    try:
        return fetch_services()
    except Exception as e:
        logger.log_error_with_traceback('services', e)
        return None


# ===== Form endpoints =====

@services_bp.route('/draft', methods=['POST'])
@admin_required
def add_service():
    """Create a service from the add form"""
    draft = load_draft(DRAFT_SESSION_KEY, DEFAULT_SERVICE_DRAFT)
    draft = apply_field_commands(draft, commands_from_fields(request.form, DEFAULT_SERVICE_DRAFT),
                                 DEFAULT_SERVICE_DRAFT)
    save_draft_or_notify(DRAFT_SESSION_KEY, draft, source='services')

    try:
        create_service(draft)
    except ValidationError:
        notify(REQUIRED_FIELDS_MESSAGE, source='services')
        return _back_to_services(add=1)
    except Exception as e:
        logger.log_error_with_traceback('services', e)
        notify('Failed to add service', source='services')
        return _back_to_services(add=1)

    clear_draft(DRAFT_SESSION_KEY)
    notify('Service added successfully', 'success', source='services')
    return _back_to_services()


@services_bp.route('/draft/reset', methods=['POST'])
@admin_required
def reset_service_draft():
    draft = load_draft(DRAFT_SESSION_KEY, DEFAULT_SERVICE_DRAFT)
    draft = reduce_fields(draft, Reset(), DEFAULT_SERVICE_DRAFT)
    save_draft_or_notify(DRAFT_SESSION_KEY, draft, source='services')
    return _back_to_services()


@services_bp.route('/<service_id>/edit', methods=['POST'])
@admin_required
def edit_service(service_id):
    edited = apply_field_commands(dict(DEFAULT_SERVICE_DRAFT),
                                  commands_from_fields(request.form, DEFAULT_SERVICE_DRAFT),
                                  DEFAULT_SERVICE_DRAFT)
    try:
        update_service(service_id, edited)
    except ValidationError:
        notify(REQUIRED_FIELDS_MESSAGE, source='services')
        return _back_to_services(edit=service_id)
    except Exception as e:
        logger.log_error_with_traceback('services', e)
        notify('Failed to update service', source='services')
        return _back_to_services(edit=service_id)

    notify('Service updated successfully', 'success', source='services')
    return _back_to_services()


@services_bp.route('/<service_id>/delete', methods=['POST'])
@admin_required
def remove_service(service_id):
    try:
        delete_service(service_id)
    except Exception as e:
        logger.log_error_with_traceback('services', e)
        notify('Failed to delete service', source='services')
    else:
        notify('Service deleted successfully', 'success', source='services')
    return _back_to_services()


# ===== JSON API =====

@services_bp.route('/api/services', methods=['GET'])
@admin_api_required
def api_get_services():
    services = _refetch_services()
    if services is None:
        return jsonify({'error': 'Failed to fetch services'}), 500
    return jsonify(services)


@services_bp.route('/api/services', methods=['POST'])
@admin_api_required
def api_create_service():
    data = request.get_json(silent=True) or {}
    try:
        service = create_service(data)
    except ValidationError as e:
        return jsonify({'error': REQUIRED_FIELDS_MESSAGE, 'missing': e.missing}), 400
    except Exception as e:
        logger.log_error_with_traceback('services', e)
        return jsonify({'error': 'Failed to add service'}), 500
    return jsonify({'success': True, 'service': service, 'services': _refetch_services()})


@services_bp.route('/api/services/<service_id>', methods=['PUT'])
@admin_api_required
def api_update_service(service_id):
    data = request.get_json(silent=True) or {}
    try:
        success = update_service(service_id, data)
    except ValidationError as e:
        return jsonify({'error': REQUIRED_FIELDS_MESSAGE, 'missing': e.missing}), 400
    except Exception as e:
        logger.log_error_with_traceback('services', e)
        return jsonify({'error': 'Failed to update service'}), 500
    if not success:
        return jsonify({'error': 'Service not found'}), 404
    return jsonify({'success': True, 'services': _refetch_services()})


@services_bp.route('/api/services/<service_id>', methods=['DELETE'])
@admin_api_required
def api_delete_service(service_id):
    try:
        delete_service(service_id)
    except Exception as e:
        logger.log_error_with_traceback('services', e)
        return jsonify({'error': 'Failed to delete service'}), 500
    return jsonify({'success': True, 'services': _refetch_services()})
