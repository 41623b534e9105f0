"""
Dashboard Module
================

Admin dashboard interface for studiofolio.

Provides core admin functionality:
- Admin authentication (login/logout) against the Supabase auth service
- One-time signup for the configured admin address
- Dashboard with projects, services and reviews tabs

This is the foundation module that the editor modules plug into.
"""

from flask import Blueprint

# Note: Blueprint name is 'admin' so editor modules can redirect to admin.dashboard / admin.login
dashboard_bp = Blueprint(
    'admin',
    __name__,
    url_prefix='/admin',
    template_folder='templates',
)

from . import routes

__all__ = ['dashboard_bp']
