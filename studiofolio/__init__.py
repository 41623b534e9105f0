"""
Studiofolio - Portfolio site with an admin dashboard
====================================================

A Flask portfolio site backed by Supabase (database, auth, storage):
- Public home page, portfolio with category tabs, contact form
- Single-admin dashboard for projects, categories, services and reviews
- Image uploads to a storage bucket

Usage:
    from flask import Flask
    from studiofolio import Studiofolio

    app = Flask(__name__)
    Studiofolio(app)

    # Or switch features off / override settings
    Studiofolio(app, {'features': {'ops': False}, 'admin_email': 'me@example.com'})
"""

import logging
from flask import Blueprint

from .core.backend import init_backend
from .core.config import Config
from .core.identity import init_identity

__version__ = '0.1.0'

logger = logging.getLogger(__name__)

DEFAULT_FEATURES = {
    'home': True,
    'portfolio': True,
    'projects': True,
    'services': True,
    'reviews': True,
    'ops': True,
}

# Config keys that may be passed in lower case through the override dict
OVERRIDE_KEYS = ('admin_email', 'brand_name', 'brand_tagline', 'contact_email',
                 'storage_bucket', 'home_projects_limit', 'site_url')

# Shared layout templates (base.html) and static files
layout_bp = Blueprint(
    'studiofolio',
    __name__,
    template_folder='templates',
    static_folder='static',
    static_url_path='/studiofolio/static',
)


class Studiofolio:
    """Flask extension wiring config, backend, identity and blueprints."""

    def __init__(self, app=None, config=None):
        self.config = dict(config or {})
        self.features = dict(DEFAULT_FEATURES)
        self.features.update(self.config.get('features') or {})
        self._registered = []
        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        self._apply_config(app)
        self._setup_logging(app)

        init_backend(app, self.config.get('backend'))
        init_identity(app)

        app.register_blueprint(layout_bp)
        self._register_modules(app)
        self._register_context_processor(app)

        app.extensions['studiofolio'] = self
        logger.info(f"Studiofolio initialised with modules: {', '.join(self._registered)}")

    def _apply_config(self, app):
        """Fill app.config from Config for anything the host app left unset."""
        defaults = {
            'SECRET_KEY': Config.SECRET_KEY,
            'SUPABASE_URL': Config.SUPABASE_URL,
            'SUPABASE_KEY': Config.SUPABASE_KEY,
            'ADMIN_EMAIL': Config.ADMIN_EMAIL,
            'STORAGE_BUCKET': Config.STORAGE_BUCKET,
            'BRAND_NAME': Config.BRAND_NAME,
            'BRAND_TAGLINE': Config.BRAND_TAGLINE,
            'CONTACT_EMAIL': Config.CONTACT_EMAIL,
            'SITE_URL': Config.SITE_URL,
            'HOME_PROJECTS_LIMIT': Config.HOME_PROJECTS_LIMIT,
        }
        for key, value in defaults.items():
            if app.config.get(key) is None:
                app.config[key] = value

        for key in OVERRIDE_KEYS:
            if key in self.config:
                app.config[key.upper()] = self.config[key]

        if not app.config.get('SECRET_KEY'):
            logger.warning("No SECRET_KEY configured - sessions (and admin login) will not work")

    def _setup_logging(self, app):
        level = app.config.get('LOG_LEVEL') or ('DEBUG' if app.debug else 'INFO')
        logging.getLogger('studiofolio').setLevel(level)

    def _register_modules(self, app):
        from .modules.dashboard import dashboard_bp
        app.register_blueprint(dashboard_bp)
        self._registered.append('dashboard')

        if self.features.get('home'):
            from .modules.home import home_bp
            app.register_blueprint(home_bp)
            self._registered.append('home')

        if self.features.get('portfolio'):
            from .modules.projects_public import projects_public_bp
            app.register_blueprint(projects_public_bp)
            self._registered.append('portfolio')

        if self.features.get('projects'):
            from .modules.projects import projects_bp
            app.register_blueprint(projects_bp)
            self._registered.append('projects')

        if self.features.get('services'):
            from .modules.services import services_bp
            app.register_blueprint(services_bp)
            self._registered.append('services')

        if self.features.get('reviews'):
            from .modules.reviews import reviews_bp
            app.register_blueprint(reviews_bp)
            self._registered.append('reviews')

        if self.features.get('ops'):
            from .modules.ops import ops_health_bp
            app.register_blueprint(ops_health_bp)
            self._registered.append('ops')

    def _register_context_processor(self, app):
        @app.context_processor
        def inject_site_config():
            return {
                'brand_name': app.config.get('BRAND_NAME'),
                'site_config': {
                    'brand_name': app.config.get('BRAND_NAME'),
                    'tagline': app.config.get('BRAND_TAGLINE'),
                    'contact_email': app.config.get('CONTACT_EMAIL'),
                    'site_url': app.config.get('SITE_URL'),
                },
                'features': self.features,
            }

    def get_registered_modules(self):
        """Names of the modules registered on the app, in registration order."""
        return list(self._registered)


__all__ = ['Studiofolio', '__version__']
