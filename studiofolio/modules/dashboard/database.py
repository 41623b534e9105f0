"""Profile lookups for signed-in users."""

from studiofolio.core.backend import fetch_rows
from studiofolio.core.config import Config


def fetch_profile(user_id):
    """The `profiles` row for an auth user, or None."""
    rows = fetch_rows(Config.PROFILES_TABLE, 'user_id, role', filters={'user_id': user_id}, limit=1)
    return rows[0] if rows else None
