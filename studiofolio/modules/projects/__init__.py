"""
Projects Admin Module
=====================

Admin interface for portfolio project management.
Plugs into the admin dashboard module.

Provides:
- Project creation (session-backed draft) and editing
- Category-specific form fields
- Show-on-home / featured toggles
- Image and thumbnail upload to the storage bucket
- Category management
"""

from flask import Blueprint

projects_bp = Blueprint(
    'projects_admin',
    __name__,
    url_prefix='/admin/projects-editor',
    template_folder='templates',
)

from . import routes

__all__ = ['projects_bp']
