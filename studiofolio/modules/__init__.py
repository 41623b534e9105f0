"""
Studiofolio Modules
===================

Flask blueprint modules for the public site and the admin dashboard.
"""

__all__ = ['dashboard', 'home', 'ops', 'projects', 'projects_public', 'reviews', 'services']
