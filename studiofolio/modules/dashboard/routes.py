"""
Admin Dashboard Routes
======================

Authentication against the Supabase auth service and the tabbed dashboard.
Only the account whose email equals ADMIN_EMAIL gets in.
"""

from flask import current_app, render_template, request, redirect, url_for, jsonify
from . import dashboard_bp
from .database import fetch_profile
from studiofolio.core.backend import get_auth
from studiofolio.core.config import get_config_value
from studiofolio.core.drafts import load_draft
from studiofolio.core.identity import (
    admin_required, current_identity, remember_admin, forget_admin,
)
from studiofolio.core.logging_service import logger
from studiofolio.core.notifications import notify, fetch_or_notify
from studiofolio.modules.projects.database import fetch_projects, fetch_categories
from studiofolio.modules.projects.forms import (
    DRAFT_SESSION_KEY as PROJECT_DRAFT_KEY, DEFAULT_PROJECT_DRAFT,
    draft_from_project, hidden_values, variant_for_slug,
)
from studiofolio.modules.reviews.database import (
    DRAFT_SESSION_KEY as REVIEW_DRAFT_KEY, DEFAULT_REVIEW_DRAFT, RATING_CHOICES, fetch_reviews,
)
from studiofolio.modules.services.database import (
    DRAFT_SESSION_KEY as SERVICE_DRAFT_KEY, DEFAULT_SERVICE_DRAFT, fetch_services,
)

TABS = ('projects', 'services', 'reviews')

ACCESS_DENIED = "Access Denied: You don't have admin privileges"


def _auth_error_message(error):
    """Human-readable text of an auth exception (AuthApiError carries .message)."""
    return getattr(error, 'message', None) or str(error)


def _safe_next(next_page):
    """Only follow local redirect targets."""
    if next_page and next_page.startswith('/') and not next_page.startswith('//'):
        return next_page
    return None


def _sign_out_quietly():
    try:
        get_auth().sign_out()
    except Exception as e:
        logger.warning('auth', f'Sign-out failed: {e}')


def _load_role(user_id):
    """Profile role for display; a missing profile or lookup failure does not block login."""
    try:
        profile = fetch_profile(user_id)
    except Exception as e:
        logger.warning('auth', f'Profile lookup failed: {e}', {'user_id': user_id})
        return None
    return (profile or {}).get('role')


def _complete_sign_in(auth_response):
    """Store the session for the admin, or refuse anyone else.

    Returns a redirect for the admin, None otherwise.
    """
    user = auth_response.user
    admin_email = get_config_value('ADMIN_EMAIL')

    if user.email != admin_email:
        logger.log_security_event('Non-admin sign-in refused', {'email': user.email})
        notify(ACCESS_DENIED, source='auth')
        _sign_out_quietly()
        return None

    auth_session = getattr(auth_response, 'session', None)
    remember_admin(
        user.id,
        user.email,
        role=_load_role(user.id),
        access_token=getattr(auth_session, 'access_token', None),
    )
    logger.log_user_action('auth', 'admin login', user_id=user.id)
    notify('Welcome back, Admin!', 'success', source='auth')
    return redirect(_safe_next(request.args.get('next')) or url_for('admin.dashboard'))


def _create_admin_account(email, password):
    """Sign the admin address up when its login reports an unconfirmed email."""
    try:
        get_auth().sign_up({
            'email': email,
            'password': password,
            'options': {'email_redirect_to': url_for('admin.dashboard', _external=True)},
        })
    except Exception as e:
        message = _auth_error_message(e)
        if 'already registered' in message:
            notify('Account Exists: Please check your email to confirm your account, or contact support.',
                   source='auth')
        else:
            notify(f'Signup Failed: {message}', source='auth')
        return

    logger.log_user_action('auth', 'admin account created', details={'email': email})
    notify('Account Created: Admin account created successfully. Please check email for confirmation.',
           'success', source='auth')


# ===== Authentication =====

@dashboard_bp.route('/login', methods=['GET', 'POST'])
def login():
    """Admin login route"""
    if request.method == 'GET':
        if current_identity().is_admin:
            return redirect(url_for('admin.dashboard'))
        return render_template('dashboard/login.html', email='')

    email = request.form.get('email', '').strip()
    password = request.form.get('password', '')

    if not email or not password:
        notify('Please enter both email and password', source='auth')
        return render_template('dashboard/login.html', email=email)

    try:
        response = get_auth().sign_in_with_password({'email': email, 'password': password})
    except Exception as e:
        message = _auth_error_message(e)
        if 'Email not confirmed' in message and email == get_config_value('ADMIN_EMAIL'):
            _create_admin_account(email, password)
        else:
            logger.log_security_event('Failed admin login', {'email': email, 'reason': message})
            notify(f'Login Failed: {message}', source='auth')
        return render_template('dashboard/login.html', email=email)

    if getattr(response, 'user', None) is None:
        notify('Login Failed: No user returned', source='auth')
        return render_template('dashboard/login.html', email=email)

    return _complete_sign_in(response) or render_template('dashboard/login.html', email=email)


@dashboard_bp.route('/signup', methods=['GET', 'POST'])
def signup():
    """Bootstrap page that creates the admin account."""
    admin_email = get_config_value('ADMIN_EMAIL')

    if request.method == 'GET':
        return render_template('dashboard/signup.html', email=admin_email)

    email = request.form.get('email', '').strip() or admin_email
    password = request.form.get('password', '')

    if not password:
        notify('Please enter a password', source='auth')
        return render_template('dashboard/signup.html', email=email)

    try:
        get_auth().sign_up({'email': email, 'password': password})
    except Exception as e:
        message = _auth_error_message(e)
        if 'already registered' not in message:
            notify(f'Signup Failed: {message}', source='auth')
            return render_template('dashboard/signup.html', email=email)

        # Existing account: sign in instead and apply the same admin check
        try:
            response = get_auth().sign_in_with_password({'email': email, 'password': password})
        except Exception as sign_in_error:
            notify(f'Login Failed: {_auth_error_message(sign_in_error)}', source='auth')
            return render_template('dashboard/signup.html', email=email)
        if getattr(response, 'user', None) is None:
            notify('Login Failed: No user returned', source='auth')
            return render_template('dashboard/signup.html', email=email)
        return _complete_sign_in(response) or render_template('dashboard/signup.html', email=email)

    logger.log_user_action('auth', 'admin account created', details={'email': email})
    notify('Admin account created! You can now login.', 'success', source='auth')
    return redirect(url_for('admin.login'))


@dashboard_bp.route('/logout', methods=['GET', 'POST'])
def logout():
    """Admin logout route"""
    if current_identity().is_authenticated:
        _sign_out_quietly()
        logger.log_user_action('auth', 'admin logout', user_id=current_identity().user_id)
    forget_admin()
    notify('You have been logged out', 'info', source='auth')
    if 'home' in current_app.blueprints:
        return redirect(url_for('home.index'))
    return redirect(url_for('admin.login'))


# ===== Dashboard =====

def _find_by_id(rows, row_id):
    for row in rows:
        if str(row.get('id')) == str(row_id):
            return row
    return None


@dashboard_bp.route('/')
@dashboard_bp.route('/dashboard')
@admin_required
def dashboard():
    """Tabbed dashboard; ?add=1 opens the create form, ?edit=<id> an edit form."""
    tab = request.args.get('tab', 'projects')
    if tab not in TABS:
        tab = 'projects'
    adding = bool(request.args.get('add'))
    edit_id = request.args.get('edit')

    projects = fetch_or_notify(fetch_projects, 'projects') or []
    categories = fetch_or_notify(fetch_categories, 'categories') or []
    services = fetch_or_notify(fetch_services, 'services') or []
    reviews = fetch_or_notify(fetch_reviews, 'reviews') or []

    project_draft = load_draft(PROJECT_DRAFT_KEY, DEFAULT_PROJECT_DRAFT)
    project_variant = variant_for_slug(project_draft.get('category_slug'))

    editing = None
    edit_draft = None
    edit_variant = None
    if edit_id:
        rows = {'projects': projects, 'services': services, 'reviews': reviews}[tab]
        editing = _find_by_id(rows, edit_id)
        if editing is None:
            notify(f'{tab[:-1].capitalize()} not found', source='dashboard')
        elif tab == 'projects':
            edit_draft = draft_from_project(editing)
            edit_variant = variant_for_slug(edit_draft.get('category_slug'))

    return render_template(
        'dashboard/dashboard.html',
        tab=tab,
        tabs=TABS,
        adding=adding,
        editing=editing,
        projects=projects,
        categories=categories,
        services=services,
        reviews=reviews,
        project_draft=project_draft,
        project_variant=project_variant,
        project_hidden=hidden_values(project_draft, project_variant) if project_variant else [],
        edit_draft=edit_draft,
        edit_variant=edit_variant,
        edit_hidden=hidden_values(edit_draft, edit_variant) if edit_variant else [],
        service_draft=load_draft(SERVICE_DRAFT_KEY, DEFAULT_SERVICE_DRAFT),
        review_draft=load_draft(REVIEW_DRAFT_KEY, DEFAULT_REVIEW_DRAFT),
        rating_choices=RATING_CHOICES,
    )


@dashboard_bp.route('/api/me')
def api_me():
    """Current identity as JSON"""
    identity = current_identity()
    return jsonify({
        'authenticated': identity.is_authenticated,
        'is_admin': identity.is_admin,
        'email': identity.email,
        'role': identity.role,
    })
