# File: physioquiz_app/modules/auth/__init__.py
from flask import Blueprint

auth_bp = Blueprint('auth', __name__)

module_metadata = {
    'name': 'Authentication',
    'icon': 'lock',
    'category': 'System',
    'url_prefix': '/auth',
    'enabled': True
}

from . import routes  # noqa: E402,F401
