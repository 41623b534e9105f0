"""
Home Routes
===========

The landing page gathers four independent fetches. A failure in one only
empties that section and flashes a notice.
"""

import logging
from flask import render_template, request, redirect, url_for
from . import home_bp
from studiofolio.core.logging_service import logger as app_logger
from studiofolio.core.notifications import notify, fetch_or_notify
from studiofolio.core.validation import ValidationError, REQUIRED_FIELDS_MESSAGE, require_fields
from studiofolio.modules.projects.database import fetch_home_projects
from studiofolio.modules.reviews.database import fetch_reviews
from studiofolio.modules.services.database import fetch_services

logger = logging.getLogger(__name__)

CONTACT_FIELDS = ('name', 'email', 'subject', 'message')

ABOUT_STATS = (
    {'value': '3+', 'label': 'Years of Experience'},
    {'value': '50+', 'label': 'Projects Completed'},
)

# Shown when no featured services have been added yet
DEFAULT_SERVICES = (
    {'title': 'UI/UX Design', 'icon': 'Palette',
     'description': 'Interfaces that are clear, consistent and pleasant to use.'},
    {'title': 'Video Editing', 'icon': 'Video',
     'description': 'Reels, promos and long-form edits with motion graphics.'},
    {'title': 'Graphic Design', 'icon': 'PenTool',
     'description': 'Brand identities, social media graphics and print.'},
    {'title': 'Web Development', 'icon': 'Code',
     'description': 'Fast, responsive websites built to last.'},
)


def _render_home(contact=None):
    services = fetch_or_notify(fetch_services, 'services', featured_only=True) or []
    return render_template(
        'home/index.html',
        projects=fetch_or_notify(fetch_home_projects, 'projects') or [],
        services=services or list(DEFAULT_SERVICES),
        reviews=fetch_or_notify(fetch_reviews, 'reviews', featured_only=True) or [],
        stats=ABOUT_STATS,
        contact=contact or {},
    )


@home_bp.route('/')
def index():
    """Landing page"""
    return _render_home()


@home_bp.route('/contact', methods=['POST'])
def contact():
    """Contact form. Messages are logged; no mail is sent."""
    data = {field: request.form.get(field, '').strip() for field in CONTACT_FIELDS}

    try:
        require_fields(data, CONTACT_FIELDS)
    except ValidationError as e:
        notify(REQUIRED_FIELDS_MESSAGE, source='contact')
        logger.debug(f"Contact form missing fields: {e.missing}")
        return _render_home(contact=data)

    app_logger.info('contact', f"Contact message from {data['email']}", details=data)
    notify("Message Sent! Thanks for reaching out. I'll get back to you soon!", 'success', source='contact')
    return redirect(url_for('home.index') + '#contact')
