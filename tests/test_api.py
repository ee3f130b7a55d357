"""
tests/test_api.py — Tests for the JSON tables interface.
"""

import os
import tempfile

import pytest

from app import create_app
from models import INPUT_CELLS


MONTHS = [3, 6, 9, 12, 15, 18, 21, 24, 27, 30, 33, 36]


@pytest.fixture
def client():
    db_fd, db_path = tempfile.mkstemp()
    app = create_app({
        'TESTING': True,
        'DATABASE': db_path,
        'SECRET_KEY': 'dev-key-for-testing'
    })
    with app.test_client() as client:
        yield client

    os.close(db_fd)
    os.unlink(db_path)


def months(values):
    return dict(zip(INPUT_CELLS, values))


def test_initial_state(client):
    rv = client.get('/api/tables')
    body = rv.get_json()
    assert rv.status_code == 200
    assert body['table_count'] == 1
    assert body['row_count'] == 1
    assert body['tables']['1']['1']['January'] is None


def test_growth_endpoints(client):
    rv = client.post('/api/tables/add-table')
    body = rv.get_json()
    assert (body['table_count'], body['row_count']) == (2, 1)
    assert body['rebuild'] is True

    body = client.post('/api/tables/add-year').get_json()
    assert (body['table_count'], body['row_count']) == (2, 2)

    body = client.get('/api/tables').get_json()
    assert set(body['tables']) == {'1', '2'}
    assert set(body['tables']['2']) == {'1', '2'}


def test_submit_valid(client):
    rv = client.post('/api/tables/submit', json={'tables': {'1': {'1': months(MONTHS)}}})
    body = rv.get_json()

    assert rv.status_code == 200
    assert body['status'] == 'Valid'
    row = body['tables']['1']['1']
    assert row['Q1'] == pytest.approx(19 / 3)
    assert row['Q4'] == pytest.approx(100 / 3)
    assert row['YTD'] == pytest.approx(20.0833333)
    assert isinstance(row['Year'], int)


def test_submit_accepts_numeric_strings_and_ignores_derived(client):
    cells = months([str(v) for v in MONTHS])
    cells['Q1'] = 1000
    rv = client.post('/api/tables/submit', json={'tables': {1: {1: cells}}})
    body = rv.get_json()

    assert rv.status_code == 200
    assert body['tables']['1']['1']['Q1'] == pytest.approx(19 / 3)


def test_submit_invalid(client):
    client.post('/api/tables/add-table')
    payload = {'tables': {
        '1': {'1': months([5, 3, None, 2])},
        '2': {'1': months([5, 3, 1, 2])},
    }}
    rv = client.post('/api/tables/submit', json=payload)
    body = rv.get_json()

    assert rv.status_code == 422
    assert body['success'] is False
    assert {'table': 'table-1', 'message': 'Invalid'} in body['errors']
    assert {'table': 'table-2', 'message': 'Tables are different!'} in body['errors']

    stored = client.get('/api/tables').get_json()['tables']
    assert stored['1']['1']['Q1'] is None


@pytest.mark.parametrize('payload', [
    {'tables': {'1': {'1': {'January': 'abc'}}}},
    {'tables': {'1': {'1': {'Smarch': 1}}}},
    {'tables': {'2': {'1': {'January': 1}}}},
    {'tables': {'1': {'0': {'January': 1}}}},
    {'tables': []},
    {'tables': {'1': {'1': {'January': 'nan', 'February': 'inf'}}}},
    {'tables': {'1': {'1': {'January': '1e999'}}}},
    {'rows': {}},
])
def test_submit_bad_payload(client, payload):
    rv = client.post('/api/tables/submit', json=payload)
    assert rv.status_code == 400
    assert rv.get_json()['success'] is False
