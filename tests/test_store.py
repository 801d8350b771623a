import json
import pytest
from farmconnect import db
from farmconnect.errors import StaleSnapshot
from farmconnect.models import StoreEntry, COLLECTIONS
from farmconnect.store import PersistentStore


@pytest.fixture
def store(app_context):
    return PersistentStore()


def put_raw(app, value, version=1):
    db.session.add(StoreEntry(key=app.config['STORE_KEY'], value=value, version=version))
    db.session.commit()


def test_missing_store_loads_empty_snapshot(store):
    snapshot = store.load()

    assert snapshot.version == 0
    for name in COLLECTIONS:
        assert snapshot[name] == []


def test_saved_snapshot_is_loaded_back(store):
    snapshot = store.load()
    snapshot['users'].append({'id': 'u1', 'name': 'Asha'})
    store.save(snapshot)

    reloaded = store.load()
    assert snapshot.version == 1
    assert reloaded.version == 1
    assert reloaded['users'] == [{'id': 'u1', 'name': 'Asha'}]


def test_corrupt_document_loads_empty_and_can_be_overwritten(app, store):
    put_raw(app, '{"users": [', version=3)

    snapshot = store.load()
    assert snapshot['users'] == []
    assert snapshot.version == 3

    snapshot['products'].append({'id': 'p1'})
    store.save(snapshot)
    assert store.load()['products'] == [{'id': 'p1'}]


def test_non_object_document_loads_empty(app, store):
    put_raw(app, json.dumps(['not', 'a', 'store']))

    assert store.load()['orders'] == []


def test_missing_or_malformed_arrays_are_filled(app, store):
    put_raw(app, json.dumps({'users': [{'id': 'u1'}], 'cart': 'oops'}))

    snapshot = store.load()
    assert snapshot['users'] == [{'id': 'u1'}]
    assert snapshot['cart'] == []
    assert snapshot['notifications'] == []


def test_concurrent_writer_gets_stale_snapshot(store):
    store.save(store.load())

    first = store.load()
    second = store.load()
    first['users'].append({'id': 'a'})
    store.save(first)

    second['users'].append({'id': 'b'})
    with pytest.raises(StaleSnapshot):
        store.save(second)
    assert store.load()['users'] == [{'id': 'a'}]


def test_transaction_saves_on_success(store):
    with store.transaction() as snapshot:
        snapshot['reviews'].append({'id': 'r1'})

    assert store.load()['reviews'] == [{'id': 'r1'}]


def test_transaction_discards_changes_when_block_fails(store):
    with pytest.raises(RuntimeError):
        with store.transaction() as snapshot:
            snapshot['users'].append({'id': 'x'})
            raise RuntimeError('boom')

    assert store.load()['users'] == []


def test_reset_drops_document(store):
    with store.transaction() as snapshot:
        snapshot['users'].append({'id': 'u1'})

    store.reset()
    assert store.load().version == 0
    assert store.load()['users'] == []
