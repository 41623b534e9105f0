import os
from dotenv import load_dotenv

load_dotenv(override=True)

class Config:
    """
    Base configuration for the studiofolio site.
    Backend credentials and the admin address come from environment variables.
    """
    # Flask settings
    SECRET_KEY = os.getenv('FLASK_SECRET_KEY')

    # Supabase connection
    SUPABASE_URL = os.getenv('SUPABASE_URL')
    SUPABASE_KEY = os.getenv('SUPABASE_KEY') or os.getenv('SUPABASE_ANON_KEY')

    # The single account allowed into the dashboard
    ADMIN_EMAIL = os.getenv('ADMIN_EMAIL', 'admin@example.com')

    # Storage bucket for project images and thumbnails
    STORAGE_BUCKET = os.getenv('STORAGE_BUCKET', 'project-images')

    # Site settings
    BRAND_NAME = os.getenv('BRAND_NAME', 'Studiofolio')
    BRAND_TAGLINE = os.getenv('BRAND_TAGLINE', 'Designer, video editor and web developer')
    CONTACT_EMAIL = os.getenv('CONTACT_EMAIL', 'hello@example.com')
    SITE_URL = os.getenv('SITE_URL', 'http://localhost:5000')

    # Origins allowed to read the public portfolio API
    CORS_ORIGINS = [o.strip() for o in os.getenv('CORS_ORIGINS', '*').split(',') if o.strip()]

    # Number of projects shown in the home page preview
    HOME_PROJECTS_LIMIT = int(os.getenv('HOME_PROJECTS_LIMIT', '4'))

    # Table names
    PROJECTS_TABLE = "projects"
    CATEGORIES_TABLE = "project_categories"
    SERVICES_TABLE = "services"
    REVIEWS_TABLE = "reviews"
    PROFILES_TABLE = "profiles"

    # Port for local server
    port = int(os.getenv('PORT', '5000'))


def get_config_value(key, default=None):
    """Get configuration value: Flask app config first, then Config, then env var"""
    try:
        from flask import current_app
        val = current_app.config.get(key)
        if val is not None:
            return val
    except RuntimeError:
        pass
    val = getattr(Config, key, None)
    if val is not None:
        return val
    return os.getenv(key, default)
