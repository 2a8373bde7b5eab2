"""
Database module - engine, tables and the async record store.
"""
from alumni_connect.db.database import create_store_engine, session_scope, init_db
from alumni_connect.db.record_store import RecordStore, get_record_store
from alumni_connect.db.tables import metadata, users, messages

__all__ = [
    "create_store_engine",
    "session_scope",
    "init_db",
    "RecordStore",
    "get_record_store",
    "metadata",
    "users",
    "messages",
]
