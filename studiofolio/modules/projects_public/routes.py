"""
Projects Public Routes
======================

Public-facing portfolio page and API.
"""

import logging
from flask import Blueprint, render_template, jsonify, request
from flask_cors import cross_origin

from studiofolio.core.config import Config
from studiofolio.core.notifications import fetch_or_notify
from studiofolio.modules.projects.database import (
    fetch_projects, fetch_categories, filter_by_category,
)

logger = logging.getLogger(__name__)

projects_public_bp = Blueprint('portfolio', __name__, url_prefix='/portfolio', template_folder='templates')

ALL_TAB = {'slug': 'all', 'name': 'All Projects'}


def category_tabs(categories):
    """Filter tabs: 'all' first, then one per category in fetched order."""
    tabs = [ALL_TAB]
    for category in categories or []:
        if category.get('slug'):
            tabs.append({'slug': category['slug'], 'name': category.get('name') or category['slug']})
    return tabs


@projects_public_bp.app_template_filter('compact_number')
def compact_number_filter(value):
    """1200 -> 1.2K, 3400000 -> 3.4M"""
    try:
        value = int(value)
    except (TypeError, ValueError):
        return ''
    for threshold, suffix in ((1_000_000, 'M'), (1_000, 'K')):
        if value >= threshold:
            return f'{value / threshold:.1f}'.rstrip('0').rstrip('.') + suffix
    return str(value)


@projects_public_bp.app_template_filter('category_name')
def category_name_filter(project):
    return (project.get('project_categories') or {}).get('name', '')


# ===== Routes =====

@projects_public_bp.route('/')
def portfolio_list():
    """Public portfolio listing filtered by ?category=<slug>."""
    selected = request.args.get('category', 'all') or 'all'
    projects = fetch_or_notify(fetch_projects, 'projects') or []
    categories = fetch_or_notify(fetch_categories, 'categories') or []

    return render_template(
        'projects_public/portfolio.html',
        projects=filter_by_category(projects, selected),
        tabs=category_tabs(categories),
        selected=selected,
    )


# ===== API Routes =====

@projects_public_bp.route('/api/projects', methods=['GET', 'OPTIONS'])
@cross_origin(origins=Config.CORS_ORIGINS, supports_credentials=False)
def get_projects():
    """Public projects API, optionally filtered by ?category=<slug>."""
    try:
        projects = fetch_projects()
    except Exception as e:
        logger.error(f"Failed to fetch projects: {e}")
        return jsonify({'error': 'Failed to fetch projects'}), 500
    return jsonify(filter_by_category(projects, request.args.get('category', 'all')))


@projects_public_bp.route('/api/categories', methods=['GET', 'OPTIONS'])
@cross_origin(origins=Config.CORS_ORIGINS, supports_credentials=False)
def get_categories():
    try:
        categories = fetch_categories()
    except Exception as e:
        logger.error(f"Failed to fetch categories: {e}")
        return jsonify({'error': 'Failed to fetch categories'}), 500
    return jsonify(categories)
