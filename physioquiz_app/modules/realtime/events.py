"""
SQLAlchemy session hooks feeding the change feed.

Tables touched by a flush are remembered on the session and published only
once the transaction commits; a rollback discards them.
"""
from flask import current_app, has_app_context
from sqlalchemy import event
from sqlalchemy.orm import Session

from physioquiz_app.core.signals import table_changed

from .services.change_feed import change_feed

_PENDING_KEY = 'changed_tables'


@event.listens_for(Session, 'after_flush')
def _collect_changed_tables(session, flush_context):
    pending = session.info.setdefault(_PENDING_KEY, set())
    for instance in list(session.new) + list(session.dirty) + list(session.deleted):
        table = getattr(instance, '__tablename__', None)
        if table and change_feed.is_watched(table):
            pending.add(table)


@event.listens_for(Session, 'after_commit')
def _publish_changed_tables(session):
    pending = session.info.pop(_PENDING_KEY, None)
    if not pending:
        return
    for table in sorted(change_feed.expand(pending)):
        version = change_feed.bump(table)
        if version is None:
            continue
        if has_app_context():
            current_app.logger.debug(f"Change feed: {table} -> v{version}")
        table_changed.send(None, table=table, version=version)


@event.listens_for(Session, 'after_rollback')
def _discard_changed_tables(session):
    session.info.pop(_PENDING_KEY, None)
