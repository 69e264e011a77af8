import pytest

from shopease import create_app
from shopease.config import TestingConfig
from shopease.extensions import db
from shopease.sample_data import load_sample_data


@pytest.fixture
def app():
    """Fresh in-memory SQLite database per test, with an app context pushed."""
    app = create_app(TestingConfig)
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def runner(app):
    return app.test_cli_runner()


@pytest.fixture
def sample(app):
    """Sample catalogue: products 1-4, customers 1-3, reviews 1-4, ratings 1-4."""
    load_sample_data()
