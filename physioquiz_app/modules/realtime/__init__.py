"""Change feed so open pages can re-fetch when watched tables change."""

from flask import Blueprint

realtime_bp = Blueprint('realtime', __name__)

module_metadata = {
    'name': 'Realtime',
    'icon': 'bolt',
    'category': 'System',
    'url_prefix': '/api/realtime',
    'enabled': True
}

from . import routes, events  # noqa: E402,F401
