"""
Projects Admin Routes
=====================

Form endpoints used by the dashboard's projects tab, plus a JSON API.
Every handler is admin-only. Form endpoints notify through flash messages
and redirect back to the dashboard; API endpoints answer with JSON.
"""

from flask import request, redirect, url_for, jsonify
from . import projects_bp
from .database import (
    fetch_projects, fetch_project, create_project, update_project,
    delete_project, toggle_project_flag, fetch_categories, find_category,
    create_category, update_category, delete_category, TOGGLE_FLAGS,
)
from .forms import (
    DRAFT_SESSION_KEY, DEFAULT_PROJECT_DRAFT, AddImage, RemoveImage,
    apply_commands, commands_from_form, draft_from_project, reduce_draft,
    variant_for_slug,
)
from studiofolio.core.drafts import SetField, Reset, load_draft, clear_draft
from studiofolio.core.identity import admin_required, admin_api_required
from studiofolio.core.logging_service import logger
from studiofolio.core.notifications import notify, save_draft_or_notify
from studiofolio.core.storage import (
    THUMBNAIL_PREFIX, UploadError, allowed_file, upload_file, upload_files,
)
from studiofolio.core.validation import ValidationError, REQUIRED_FIELDS_MESSAGE


# ===== Helpers =====

def _back_to_projects(**params):
    return redirect(url_for('admin.dashboard', tab='projects', **params))


def _current_draft():
    return load_draft(DRAFT_SESSION_KEY, DEFAULT_PROJECT_DRAFT)


def _resolve_category_slug(draft, form):
    """Slug for the category being submitted.

    Looked up when the category changed, or when an earlier lookup left the
    draft without a slug.
    """
    category_id = form.get('category_id')
    if category_id is None:
        return draft.get('category_slug')
    if category_id == draft.get('category_id') and draft.get('category_slug'):
        return draft.get('category_slug')
    if not category_id:
        return ''
    try:
        category = find_category(fetch_categories(), category_id)
    except Exception as e:
        logger.log_error_with_traceback('projects', e)
        notify('Failed to fetch categories')
        return ''
    return category.get('slug', '') if category else ''


def _apply_form(draft, form):
    """Run the submitted form through the reducer using the variant that was rendered."""
    rendered_variant = variant_for_slug(draft.get('category_slug'))
    slug = _resolve_category_slug(draft, form)
    return apply_commands(draft, commands_from_form(form, rendered_variant, slug))


def _uploaded_files(field):
    return [f for f in request.files.getlist(field) if f and f.filename]


def _refetch_projects():
    try:
        return fetch_projects()
    except Exception as e:
        logger.log_error_with_traceback('projects', e)
        return None


def _refetch_categories():
    try:
        return fetch_categories()
    except Exception as e:
        logger.log_error_with_traceback('projects', e)
        return None


# ===== Draft (create form) =====

@projects_bp.route('/draft', methods=['POST'])
@admin_required
def update_draft():
    """Store create-form values; with action=save, submit the draft."""
    draft = _apply_form(_current_draft(), request.form)
    save_draft_or_notify(DRAFT_SESSION_KEY, draft, source='projects')

    if request.form.get('action') != 'save':
        return _back_to_projects(add=1)

    try:
        create_project(draft)
    except ValidationError:
        notify(REQUIRED_FIELDS_MESSAGE, source='projects')
        return _back_to_projects(add=1)
    except Exception as e:
        logger.log_error_with_traceback('projects', e)
        notify('Failed to add project', source='projects')
        return _back_to_projects(add=1)

    clear_draft(DRAFT_SESSION_KEY)
    notify('Project added successfully', 'success', source='projects')
    return _back_to_projects()


@projects_bp.route('/draft/images', methods=['POST'])
@admin_required
def upload_draft_images():
    """Upload gallery images one by one into the draft"""
    files = _uploaded_files('images')
    if not files:
        notify('No image file provided', source='storage')
        return _back_to_projects(add=1)

    rejected = [f.filename for f in files if not allowed_file(f.filename)]
    if rejected:
        notify(f"Invalid file type: {', '.join(rejected)}", source='storage')
        return _back_to_projects(add=1)

    draft = _current_draft()
    try:
        for url in upload_files(files):
            draft = reduce_draft(draft, AddImage(url))
    except UploadError as e:
        logger.log_error_with_traceback('storage', e)
        notify(f"Failed to upload {e.filename}. {e.uploaded_count} image(s) uploaded before it were kept.",
               source='storage')
    else:
        notify(f'{len(files)} image(s) uploaded', 'success', source='storage')
    finally:
        save_draft_or_notify(DRAFT_SESSION_KEY, draft, source='projects')

    return _back_to_projects(add=1)


@projects_bp.route('/draft/thumbnail', methods=['POST'])
@admin_required
def upload_draft_thumbnail():
    """Upload the draft's thumbnail"""
    files = _uploaded_files('thumbnail')
    if not files:
        notify('No image file provided', source='storage')
        return _back_to_projects(add=1)
    if not allowed_file(files[0].filename):
        notify('Invalid file type', source='storage')
        return _back_to_projects(add=1)

    try:
        url = upload_file(files[0], THUMBNAIL_PREFIX)
    except Exception as e:
        logger.log_error_with_traceback('storage', e)
        notify('Failed to upload thumbnail', source='storage')
        return _back_to_projects(add=1)

    draft = reduce_draft(_current_draft(), SetField('thumbnail_url', url))
    if save_draft_or_notify(DRAFT_SESSION_KEY, draft, source='projects'):
        notify('Thumbnail uploaded', 'success', source='storage')
    return _back_to_projects(add=1)


@projects_bp.route('/draft/images/remove', methods=['POST'])
@admin_required
def remove_draft_image():
    url = request.form.get('url', '')
    draft = reduce_draft(_current_draft(), RemoveImage(url))
    save_draft_or_notify(DRAFT_SESSION_KEY, draft, source='projects')
    return _back_to_projects(add=1)


@projects_bp.route('/draft/reset', methods=['POST'])
@admin_required
def reset_draft():
    """Discard the draft and close the create form"""
    draft = reduce_draft(_current_draft(), Reset())
    save_draft_or_notify(DRAFT_SESSION_KEY, draft, source='projects')
    return _back_to_projects()


# ===== Existing projects =====

@projects_bp.route('/<project_id>/edit', methods=['POST'])
@admin_required
def edit_project(project_id):
    """Apply the edit form to a project"""
    try:
        project = fetch_project(project_id)
    except Exception as e:
        logger.log_error_with_traceback('projects', e)
        notify('Failed to fetch project', source='projects')
        return _back_to_projects(edit=project_id)

    if not project:
        notify('Project not found', source='projects')
        return _back_to_projects()

    draft = _apply_form(draft_from_project(project), request.form)

    try:
        update_project(project_id, draft)
    except ValidationError:
        notify(REQUIRED_FIELDS_MESSAGE, source='projects')
        return _back_to_projects(edit=project_id)
    except Exception as e:
        logger.log_error_with_traceback('projects', e)
        notify('Failed to update project', source='projects')
        return _back_to_projects(edit=project_id)

    notify('Project updated successfully', 'success', source='projects')
    return _back_to_projects()


@projects_bp.route('/<project_id>/delete', methods=['POST'])
@admin_required
def remove_project(project_id):
    try:
        delete_project(project_id)
    except Exception as e:
        logger.log_error_with_traceback('projects', e)
        notify('Failed to delete project', source='projects')
    else:
        notify('Project deleted successfully', 'success', source='projects')
    return _back_to_projects()


@projects_bp.route('/<project_id>/toggle/<flag>', methods=['POST'])
@admin_required
def toggle_flag(project_id, flag):
    if flag not in TOGGLE_FLAGS:
        notify('Unknown project flag', source='projects')
        return _back_to_projects()
    try:
        new_value = toggle_project_flag(project_id, flag)
    except Exception as e:
        logger.log_error_with_traceback('projects', e)
        notify('Failed to update project', source='projects')
        return _back_to_projects()

    if new_value is None:
        notify('Project not found', source='projects')
    return _back_to_projects()


# ===== Categories =====

@projects_bp.route('/categories', methods=['POST'])
@admin_required
def add_category():
    try:
        create_category(request.form)
    except ValidationError:
        notify(REQUIRED_FIELDS_MESSAGE, source='projects')
    except Exception as e:
        logger.log_error_with_traceback('projects', e)
        notify('Failed to add category', source='projects')
    else:
        notify('Category added successfully', 'success', source='projects')
    return _back_to_projects()


@projects_bp.route('/categories/<category_id>/edit', methods=['POST'])
@admin_required
def edit_category(category_id):
    try:
        update_category(category_id, request.form)
    except ValidationError:
        notify(REQUIRED_FIELDS_MESSAGE, source='projects')
    except Exception as e:
        logger.log_error_with_traceback('projects', e)
        notify('Failed to update category', source='projects')
    else:
        notify('Category updated successfully', 'success', source='projects')
    return _back_to_projects()


@projects_bp.route('/categories/<category_id>/delete', methods=['POST'])
@admin_required
def remove_category(category_id):
    try:
        delete_category(category_id)
    except Exception as e:
        logger.log_error_with_traceback('projects', e)
        notify('Failed to delete category', source='projects')
    else:
        notify('Category deleted successfully', 'success', source='projects')
    return _back_to_projects()


# ===== JSON API =====

@projects_bp.route('/api/projects', methods=['GET'])
@admin_api_required
def api_get_projects():
    """Get all projects"""
    projects = _refetch_projects()
    if projects is None:
        return jsonify({'error': 'Failed to fetch projects'}), 500
    return jsonify(projects)


@projects_bp.route('/api/projects/<project_id>', methods=['GET'])
@admin_api_required
def api_get_project(project_id):
    """Get single project"""
    try:
        project = fetch_project(project_id)
    except Exception as e:
        logger.log_error_with_traceback('projects', e)
        return jsonify({'error': 'Failed to fetch project'}), 500
    if project:
        return jsonify(project)
    return jsonify({'error': 'Project not found'}), 404


@projects_bp.route('/api/projects', methods=['POST'])
@admin_api_required
def api_create_project():
    """Create new project"""
    data = request.get_json(silent=True) or {}
    try:
        project = create_project(data)
    except ValidationError as e:
        return jsonify({'error': REQUIRED_FIELDS_MESSAGE, 'missing': e.missing}), 400
    except Exception as e:
        logger.log_error_with_traceback('projects', e)
        return jsonify({'error': 'Failed to add project'}), 500

    return jsonify({'success': True, 'project': project, 'projects': _refetch_projects()})


@projects_bp.route('/api/projects/<project_id>', methods=['PUT'])
@admin_api_required
def api_update_project(project_id):
    """Update project"""
    data = request.get_json(silent=True) or {}
    try:
        success = update_project(project_id, data)
    except ValidationError as e:
        return jsonify({'error': REQUIRED_FIELDS_MESSAGE, 'missing': e.missing}), 400
    except Exception as e:
        logger.log_error_with_traceback('projects', e)
        return jsonify({'error': 'Failed to update project'}), 500

    if not success:
        return jsonify({'error': 'Project not found'}), 404
    return jsonify({'success': True, 'projects': _refetch_projects()})


@projects_bp.route('/api/projects/<project_id>', methods=['DELETE'])
@admin_api_required
def api_delete_project(project_id):
    """Delete project"""
    try:
        delete_project(project_id)
    except Exception as e:
        logger.log_error_with_traceback('projects', e)
        return jsonify({'error': 'Failed to delete project'}), 500
    return jsonify({'success': True, 'projects': _refetch_projects()})


@projects_bp.route('/api/projects/<project_id>/toggle/<flag>', methods=['POST'])
@admin_api_required
def api_toggle_flag(project_id, flag):
    """Toggle show_on_home or is_featured"""
    if flag not in TOGGLE_FLAGS:
        return jsonify({'error': f'Flag must be one of: {", ".join(TOGGLE_FLAGS)}'}), 400
    try:
        new_value = toggle_project_flag(project_id, flag)
    except Exception as e:
        logger.log_error_with_traceback('projects', e)
        return jsonify({'error': 'Failed to update project'}), 500

    if new_value is None:
        return jsonify({'error': 'Project not found'}), 404
    return jsonify({'success': True, flag: new_value, 'projects': _refetch_projects()})


@projects_bp.route('/api/categories', methods=['GET'])
@admin_api_required
def api_get_categories():
    categories = _refetch_categories()
    if categories is None:
        return jsonify({'error': 'Failed to fetch categories'}), 500
    return jsonify(categories)


@projects_bp.route('/api/categories', methods=['POST'])
@admin_api_required
def api_create_category():
    data = request.get_json(silent=True) or {}
    try:
        category = create_category(data)
    except ValidationError as e:
        return jsonify({'error': REQUIRED_FIELDS_MESSAGE, 'missing': e.missing}), 400
    except Exception as e:
        logger.log_error_with_traceback('projects', e)
        return jsonify({'error': 'Failed to add category'}), 500
    return jsonify({'success': True, 'category': category, 'categories': _refetch_categories()})


@projects_bp.route('/api/categories/<category_id>', methods=['PUT'])
@admin_api_required
def api_update_category(category_id):
    data = request.get_json(silent=True) or {}
    try:
        success = update_category(category_id, data)
    except ValidationError as e:
        return jsonify({'error': REQUIRED_FIELDS_MESSAGE, 'missing': e.missing}), 400
    except Exception as e:
        logger.log_error_with_traceback('projects', e)
        return jsonify({'error': 'Failed to update category'}), 500
    if not success:
        return jsonify({'error': 'Category not found'}), 404
    return jsonify({'success': True, 'categories': _refetch_categories()})


@projects_bp.route('/api/categories/<category_id>', methods=['DELETE'])
@admin_api_required
def api_delete_category(category_id):
    try:
        delete_category(category_id)
    except Exception as e:
        logger.log_error_with_traceback('projects', e)
        return jsonify({'error': 'Failed to delete category'}), 500
    return jsonify({'success': True, 'categories': _refetch_categories()})


@projects_bp.route('/api/upload-images', methods=['POST'])
@admin_api_required
def api_upload_images():
    """Upload images sequentially; stops at the first failure"""
    files = _uploaded_files('images')
    if not files:
        return jsonify({'error': 'No image file provided'}), 400
    if any(not allowed_file(f.filename) for f in files):
        return jsonify({'error': 'Invalid file type'}), 400

    image_urls = []
    try:
        for url in upload_files(files):
            image_urls.append(url)
    except UploadError as e:
        logger.log_error_with_traceback('storage', e)
        return jsonify({
            'success': False,
            'error': 'Failed to upload image',
            'failed': e.filename,
            'image_urls': image_urls,
        }), 500

    return jsonify({'success': True, 'image_urls': image_urls})


@projects_bp.route('/api/upload-thumbnail', methods=['POST'])
@admin_api_required
def api_upload_thumbnail():
    files = _uploaded_files('thumbnail')
    if not files:
        return jsonify({'error': 'No image file provided'}), 400
    if not allowed_file(files[0].filename):
        return jsonify({'error': 'Invalid file type'}), 400

    try:
        url = upload_file(files[0], THUMBNAIL_PREFIX)
    except Exception as e:
        logger.log_error_with_traceback('storage', e)
        return jsonify({'error': 'Failed to upload thumbnail'}), 500
    return jsonify({'success': True, 'thumbnail_url': url})
