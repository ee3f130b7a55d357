import pytest
from app import create_app
import os
import tempfile


@pytest.fixture
def db_path():
    # Create a temporary file to isolate the database for each test
    db_fd, db_path = tempfile.mkstemp()
    yield db_path
    os.close(db_fd)
    os.unlink(db_path)


@pytest.fixture
def client(db_path):
    # Configure app for testing
    app = create_app({
        'TESTING': True,
        'WTF_CSRF_ENABLED': False,
        'DATABASE': db_path,
        'SECRET_KEY': 'dev-key-for-testing'
    })

    with app.test_client() as client:
        yield client


def test_homepage_loads(client):
    """Test that the homepage loads successfully."""
    rv = client.get('/')
    assert rv.status_code == 200
    assert b'DOCTYPE html' in rv.data
    assert b'id="table-1"' in rv.data


def test_static_assets(client):
    """Test that static assets like CSS are accessible."""
    rv = client.get('/static/style.css')
    assert rv.status_code == 200


def test_csrf_required_by_default(db_path):
    """Form posts without a token are rejected when CSRF is on."""
    app = create_app({
        'TESTING': True,
        'DATABASE': db_path,
        'SECRET_KEY': 'dev-key-for-testing'
    })
    with app.test_client() as client:
        rv = client.post('/', data={'add_table': '1'})
        assert rv.status_code == 400
