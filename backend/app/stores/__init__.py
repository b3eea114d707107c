"""
Store layer: the only code that talks to the database.
Services depend on the interfaces so tests can substitute in-memory stores.
"""

from .interfaces import EventStore, RegistrationStore, TransactionalStore
from .sql_store import SqlEventStore, SqlRegistrationStore

__all__ = ['TransactionalStore', 'EventStore', 'RegistrationStore', 'SqlEventStore', 'SqlRegistrationStore']
