"""
Projects Database
=================

Fetchers and mutators for the `projects` and `project_categories` tables.
Functions raise on backend failure; routes decide how to notify.
"""

import re
from studiofolio.core.backend import fetch_rows, fetch_row, insert_row, update_row, delete_row
from studiofolio.core.config import Config, get_config_value
from studiofolio.core.logging_service import logger
from studiofolio.core.validation import (
    require_fields, empty_to_none, to_int_or_none, to_bool,
)
from .forms import validate_project

PROJECT_SELECT = '*, project_categories(name, slug)'

CATEGORY_REQUIRED = ('name',)

PROJECT_COLUMNS = (
    'title', 'description', 'image_url', 'thumbnail_url', 'images',
    'demo_url', 'code_url', 'instagram_url', 'youtube_views', 'brand_name',
    'client_name', 'project_date', 'social_date', 'social_links', 'metadata',
    'show_on_home', 'is_featured', 'category_id',
)

OPTIONAL_TEXT_COLUMNS = (
    'description', 'image_url', 'thumbnail_url', 'demo_url', 'code_url',
    'instagram_url', 'brand_name', 'client_name', 'project_date', 'social_date',
)

TOGGLE_FLAGS = ('show_on_home', 'is_featured')


# ===== Projects =====

def fetch_projects(home_only=False, limit=None):
    """Projects joined to their category, newest first.

    Args:
        home_only: Only projects flagged show_on_home.
        limit: Maximum rows (the home page passes HOME_PROJECTS_LIMIT).
    """
    filters = {'show_on_home': True} if home_only else None
    return fetch_rows(Config.PROJECTS_TABLE, PROJECT_SELECT, filters=filters,
                      order_by='created_at', descending=True, limit=limit)


def fetch_home_projects():
    """The home page preview: newest show_on_home projects."""
    limit = int(get_config_value('HOME_PROJECTS_LIMIT', 4))
    return fetch_projects(home_only=True, limit=limit)


def fetch_project(project_id):
    return fetch_row(Config.PROJECTS_TABLE, project_id, PROJECT_SELECT)


def normalize_project(data):
    """Build the row sent to the backend from a draft or JSON body.

    Unknown keys (joined relations, draft bookkeeping, server timestamps) are
    dropped; empty optional strings become None.
    """
    row = {key: data[key] for key in PROJECT_COLUMNS if key in data}
    row = empty_to_none(row, OPTIONAL_TEXT_COLUMNS)

    if 'title' in row and isinstance(row['title'], str):
        row['title'] = row['title'].strip()
    if 'youtube_views' in row:
        row['youtube_views'] = to_int_or_none(row['youtube_views'])
    if 'images' in row:
        row['images'] = [url for url in (row['images'] or []) if url]
    if 'social_links' in row:
        row['social_links'] = {k: v for k, v in (row['social_links'] or {}).items() if v not in (None, '')}
    for flag in TOGGLE_FLAGS:
        if flag in row:
            row[flag] = to_bool(row[flag])
    return row


def create_project(data):
    """Insert a project after the required-field check. Returns the stored row."""
    validate_project(data)
    row = normalize_project(data)
    created = insert_row(Config.PROJECTS_TABLE, row)
    logger.log_user_action('projects', 'create project', details={'title': row.get('title')})
    return created


def update_project(project_id, data):
    """Update a project from its in-edit copy. Returns True if a row changed."""
    validate_project(data)
    row = normalize_project(data)
    updated = update_row(Config.PROJECTS_TABLE, project_id, row)
    logger.log_user_action('projects', 'update project', details={'id': project_id})
    return bool(updated)


def delete_project(project_id):
    """Hard delete, no confirmation. Returns True if a row was removed."""
    deleted = delete_row(Config.PROJECTS_TABLE, project_id)
    logger.log_user_action('projects', 'delete project', details={'id': project_id})
    return bool(deleted)


def toggle_project_flag(project_id, flag):
    """Flip show_on_home or is_featured. Returns the new value, or None if not found."""
    if flag not in TOGGLE_FLAGS:
        raise ValueError(f"Unknown flag: {flag}")

    project = fetch_row(Config.PROJECTS_TABLE, project_id, f'id, {flag}')
    if not project:
        return None

    new_value = not bool(project.get(flag))
    update_row(Config.PROJECTS_TABLE, project_id, {flag: new_value})
    return new_value


def filter_by_category(projects, category_slug):
    """Projects whose joined category slug equals *category_slug* ('all' keeps everything)."""
    if not category_slug or category_slug == 'all':
        return list(projects)
    return [p for p in projects
            if (p.get('project_categories') or {}).get('slug') == category_slug]


# ===== Categories =====

def slugify(name):
    """URL-friendly slug: lower-case words joined by hyphens"""
    slug = re.sub(r'[^\w\s-]', '', name.lower())
    slug = re.sub(r'[-\s_]+', '-', slug)
    return slug.strip('-')


def fetch_categories():
    """All categories ordered by name."""
    return fetch_rows(Config.CATEGORIES_TABLE, '*', order_by='name')


def find_category(categories, category_id):
    for category in categories or []:
        if str(category.get('id')) == str(category_id):
            return category
    return None


def _category_row(data):
    name = (data.get('name') or '').strip()
    slug = (data.get('slug') or '').strip() or slugify(name)
    return empty_to_none({
        'name': name,
        'slug': slug,
        'description': data.get('description') or '',
    }, ('description',))


def create_category(data):
    require_fields(data, CATEGORY_REQUIRED)
    created = insert_row(Config.CATEGORIES_TABLE, _category_row(data))
    logger.log_user_action('projects', 'create category', details={'name': data.get('name')})
    return created


def update_category(category_id, data):
    require_fields(data, CATEGORY_REQUIRED)
    return bool(update_row(Config.CATEGORIES_TABLE, category_id, _category_row(data)))


def delete_category(category_id):
    deleted = delete_row(Config.CATEGORIES_TABLE, category_id)
    logger.log_user_action('projects', 'delete category', details={'id': category_id})
    return bool(deleted)
