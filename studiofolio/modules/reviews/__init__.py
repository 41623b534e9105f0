"""
Reviews Module
==============

Admin management of client reviews. Featured reviews appear on the home page.
"""

from flask import Blueprint

reviews_bp = Blueprint(
    'reviews_admin',
    __name__,
    url_prefix='/admin/reviews',
)

from . import routes

__all__ = ['reviews_bp']
