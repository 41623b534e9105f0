"""
Home Module
===========

Public landing page: hero, about, portfolio preview, services, featured
reviews and the contact form.
"""

from flask import Blueprint

home_bp = Blueprint(
    'home',
    __name__,
    template_folder='templates',
)

from . import routes

__all__ = ['home_bp']
