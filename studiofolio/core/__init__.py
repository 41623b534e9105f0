"""
Studiofolio Core
================

Core utilities and shared functionality for studiofolio modules.
"""

from .config import Config
from .backend import init_backend, get_backend, BackendNotConfigured
from .identity import Identity, current_identity, admin_required, admin_api_required
from .logging_service import LoggingService, logger

__all__ = [
    'Config', 'init_backend', 'get_backend', 'BackendNotConfigured',
    'Identity', 'current_identity', 'admin_required', 'admin_api_required',
    'LoggingService', 'logger',
]
