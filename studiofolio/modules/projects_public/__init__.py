"""
Projects Public Module
======================

Public portfolio listing with category filter tabs, plus a read-only JSON API.
"""

from .routes import projects_public_bp

__all__ = ['projects_public_bp']
