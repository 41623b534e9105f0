"""
Services Module
===============

Admin management of the services shown in the site's about section.
"""

from flask import Blueprint

services_bp = Blueprint(
    'services_admin',
    __name__,
    url_prefix='/admin/services',
)

from . import routes

__all__ = ['services_bp']
