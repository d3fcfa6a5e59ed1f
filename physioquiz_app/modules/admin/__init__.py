# File: physioquiz_app/modules/admin/__init__.py
# Admin panel: question editor and analytics dashboard.

from flask import Blueprint

admin_bp = Blueprint('admin', __name__)

module_metadata = {
    'name': 'Admin',
    'icon': 'gear',
    'category': 'System',
    'url_prefix': '/admin',
    'enabled': True
}

# Routes are imported last so they can register on admin_bp.
from . import routes  # noqa: E402,F401
