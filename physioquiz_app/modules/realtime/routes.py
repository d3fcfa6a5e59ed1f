from flask import jsonify, request

from physioquiz_app.core.error_handlers import error_response

from . import realtime_bp
from .services.change_feed import change_feed


@realtime_bp.route('/changes', methods=['GET'])
def get_changes():
    """
    Poll endpoint. With ?table=X&since=N returns X's version and whether it
    moved past N; without a table returns every watched version.
    """
    table = request.args.get('table')
    if not table:
        return jsonify({'success': True, 'versions': change_feed.versions()})

    if not change_feed.is_watched(table):
        return error_response(f"Table '{table}' is not watched.", 'NOT_FOUND', 404)

    since = request.args.get('since', 0, type=int)
    version, changed = change_feed.changed_since(table, since)
    return jsonify({'success': True, 'table': table, 'version': version, 'changed': changed})
