"""
Admin Identity
==============

Session-derived capability object. Computed once per request and shared by
every view that needs to know whether the visitor is the site admin.
"""

from functools import wraps
from flask import g, session, request, redirect, url_for, jsonify
from .config import get_config_value
from .logging_service import logger

SESSION_KEYS = ('admin_id', 'admin_email', 'admin_role', 'access_token')


class Identity:
    """Who is browsing, and what they may do."""

    def __init__(self, user_id=None, email=None, role=None, admin_email=None):
        self.user_id = user_id
        self.email = email
        self.role = role
        self.admin_email = admin_email

    @property
    def is_authenticated(self):
        return bool(self.user_id)

    @property
    def is_admin(self):
        # Exact match against the one configured address
        return self.is_authenticated and bool(self.email) and self.email == self.admin_email

    @classmethod
    def from_session(cls, session_data, admin_email):
        return cls(
            user_id=session_data.get('admin_id'),
            email=session_data.get('admin_email'),
            role=session_data.get('admin_role'),
            admin_email=admin_email,
        )

    def __repr__(self):
        return f"<Identity email={self.email!r} is_admin={self.is_admin}>"


def load_identity():
    """before_request hook: compute g.identity from the Flask session."""
    g.identity = Identity.from_session(session, get_config_value('ADMIN_EMAIL'))


def current_identity():
    identity = g.get('identity')
    if identity is None:
        load_identity()
        identity = g.identity
    return identity


def remember_admin(user_id, email, role=None, access_token=None):
    """Persist a signed-in user in the Flask session."""
    session['admin_id'] = user_id
    session['admin_email'] = email
    session['admin_role'] = role
    session['access_token'] = access_token
    load_identity()


def forget_admin():
    """Drop auth keys from the Flask session."""
    for key in SESSION_KEYS:
        session.pop(key, None)
    load_identity()


def admin_required(f):
    """Decorator for HTML views: redirect anyone but the admin to login."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        identity = current_identity()
        if not identity.is_admin:
            if identity.is_authenticated:
                logger.log_security_event('Non-admin session blocked from dashboard',
                                          {'email': identity.email, 'path': request.path})
            return redirect(url_for('admin.login', next=request.path))
        return f(*args, **kwargs)
    return decorated_function


def admin_api_required(f):
    """Decorator for JSON endpoints: 401 for anyone but the admin."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not current_identity().is_admin:
            return jsonify({'error': 'Authentication required'}), 401
        return f(*args, **kwargs)
    return decorated_function


def init_identity(app):
    """Register the per-request identity hook and template context."""
    app.before_request(load_identity)

    @app.context_processor
    def inject_identity():
        return {'identity': current_identity()}
