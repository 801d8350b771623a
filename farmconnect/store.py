"""Persistent store for FarmConnect.

All marketplace entities live in one JSON document kept in the
``store_entries`` table. Every operation reads the whole document, changes it
in memory and writes it back; the row's ``version`` turns each write into a
compare-and-swap so two writers never silently overwrite each other.
"""
import json
import logging
from contextlib import contextmanager
from flask import current_app
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from farmconnect import db
from farmconnect.errors import PersistenceFailure, StaleSnapshot
from farmconnect.models import StoreEntry, COLLECTIONS, empty_document, utcnow

logger = logging.getLogger(__name__)


class Snapshot:
    """In-memory copy of the whole store document at one version."""

    def __init__(self, data=None, version=0):
        self.data = empty_document()
        if data:
            for name in COLLECTIONS:
                if isinstance(data.get(name), list):
                    self.data[name] = data[name]
        self.version = version

    def __getitem__(self, name):
        return self.data[name]

    def to_json(self):
        return json.dumps(self.data)

    def __repr__(self):
        counts = ', '.join(f'{name}={len(self.data[name])}' for name in COLLECTIONS)
        return f'<Snapshot v{self.version} {counts}>'


class PersistentStore:
    """Loads and saves snapshots under one store key."""

    def __init__(self, key=None):
        self._key = key

    @property
    def key(self):
        return self._key or current_app.config['STORE_KEY']

    def load(self):
        """Return the stored snapshot, or an empty one if storage is missing or unreadable."""
        try:
            entry = StoreEntry.query.filter_by(key=self.key).populate_existing().first()
        except SQLAlchemyError:
            logger.warning('Store %s is unreadable, using an empty snapshot', self.key, exc_info=True)
            db.session.rollback()
            return Snapshot()

        if entry is None:
            return Snapshot()

        try:
            data = json.loads(entry.value)
        except ValueError:
            data = None
        if not isinstance(data, dict):
            logger.warning('Store %s holds a corrupt document, using an empty snapshot', self.key)
            return Snapshot(version=entry.version)
        return Snapshot(data, version=entry.version)

    def save(self, snapshot):
        """Write the snapshot back, failing if the stored version moved on."""
        payload = snapshot.to_json()
        try:
            if snapshot.version:
                updated = StoreEntry.query.filter_by(
                    key=self.key, version=snapshot.version
                ).update(
                    {'value': payload, 'version': snapshot.version + 1, 'updated_at': utcnow()},
                    synchronize_session=False
                )
                if not updated:
                    db.session.rollback()
                    raise StaleSnapshot(f'Store {self.key} changed since version {snapshot.version}')
            else:
                db.session.add(StoreEntry(key=self.key, value=payload, version=1))
            db.session.commit()
        except IntegrityError as exc:
            db.session.rollback()
            raise StaleSnapshot(f'Store {self.key} was created concurrently') from exc
        except SQLAlchemyError as exc:
            db.session.rollback()
            logger.exception('Failed to save store %s', self.key)
            raise PersistenceFailure('Failed to save data') from exc
        snapshot.version += 1

    @contextmanager
    def transaction(self):
        """Load a snapshot, yield it for mutation, save it if the block succeeds."""
        snapshot = self.load()
        yield snapshot
        self.save(snapshot)

    def reset(self):
        """Drop the stored document."""
        StoreEntry.query.filter_by(key=self.key).delete()
        db.session.commit()
