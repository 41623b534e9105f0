"""
Ops Routes
==========

Public health endpoint.
"""

import shutil
from datetime import datetime

from flask import current_app, jsonify

from . import ops_health_bp


# ---------------------------------------------------------------------------
# Helper functions
# ---------------------------------------------------------------------------

def _get_disk_usage():
    """Get disk usage for root partition."""
    try:
        usage = shutil.disk_usage('/')
        return {
            'total_gb': round(usage.total / (1024 ** 3), 1),
            'free_gb': round(usage.free / (1024 ** 3), 1),
            'percent': round((usage.used / usage.total) * 100, 1),
        }
    except OSError:
        return {'total_gb': 0, 'free_gb': 0, 'percent': 0}


def _get_uptime():
    """Get server uptime from /proc/uptime (Linux)."""
    try:
        with open('/proc/uptime', 'r') as f:
            uptime_seconds = float(f.read().split()[0])
    except (OSError, ValueError, IndexError):
        return {'seconds': 0, 'formatted': 'unknown'}

    days = int(uptime_seconds // 86400)
    hours = int((uptime_seconds % 86400) // 3600)
    minutes = int((uptime_seconds % 3600) // 60)
    return {
        'seconds': round(uptime_seconds),
        'formatted': f'{days}d {hours}h {minutes}m',
    }


def _get_backend_check():
    """Whether a backend client is installed. No network call is made."""
    configured = current_app.extensions.get('supabase') is not None
    return {
        'configured': configured,
        'storage_bucket': current_app.config.get('STORAGE_BUCKET'),
    }


def _compute_status(disk, backend):
    issues = []
    status = 'ok'

    if not backend.get('configured'):
        issues.append({'type': 'backend_missing', 'message': 'Supabase client is not configured'})
        status = 'warning'

    disk_pct = disk.get('percent', 0)
    if disk_pct >= 90:
        issues.append({'type': 'disk_critical', 'message': f'Disk usage critical: {disk_pct}%'})
        status = 'critical'
    elif disk_pct >= 80:
        issues.append({'type': 'disk_warning', 'message': f'Disk usage high: {disk_pct}%'})
        if status != 'critical':
            status = 'warning'

    return status, issues


def _build_health_response():
    disk = _get_disk_usage()
    backend = _get_backend_check()
    status, issues = _compute_status(disk, backend)

    result = {
        'status': status,
        'timestamp': datetime.now().isoformat(),
        'checks': {
            'backend': backend,
            'disk': disk,
            'uptime': _get_uptime(),
        },
        'issues': issues,
    }
    return result, status


# ---------------------------------------------------------------------------
# Public routes (no auth)
# ---------------------------------------------------------------------------

@ops_health_bp.route('/')
@ops_health_bp.route('')
def health_check():
    """Public health endpoint for uptime monitors."""
    data, status = _build_health_response()
    code = 503 if status == 'critical' else 200
    return jsonify(data), code
