import pytest
from flask_jwt_extended import create_access_token

from telcogrid import create_app, db


class TestConfig:
    __test__ = False

    TESTING = True
    SECRET_KEY = "test-secret-key-with-at-least-32-bytes"
    JWT_SECRET_KEY = "test-jwt-secret-key-with-at-least-32-bytes"
    JWT_TOKEN_LOCATION = ["headers", "cookies"]
    JWT_COOKIE_CSRF_PROTECT = False
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    CORS_ORIGINS = ["http://localhost:5173"]
    RATELIMIT_ENABLED = False
    RATELIMIT_STORAGE_URI = "memory://"
    METRICS_ENABLED = False
    AUTO_SEED = False
    SEED_ADMIN_EMAIL = "admin@test.local"
    API_KEY_HEADER = "x-api-key"
    API_KEY_ENFORCE_USAGE_LIMIT = False
    MAX_PAGE_SIZE = 100
    LOG_LEVEL = "INFO"


@pytest.fixture()
def app():
    flask_app = create_app(TestConfig)

    with flask_app.app_context():
        db.create_all()

    yield flask_app

    with flask_app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def storage(app):
    with app.app_context():
        yield app.extensions['storage']


@pytest.fixture()
def operator_id(app):
    with app.app_context():
        operator = app.extensions['storage'].create_operator(
            email='ops@test.local', name='Ops Tester', password='supersecret'
        )
        return operator.id


@pytest.fixture()
def auth_headers(app, operator_id):
    with app.app_context():
        token = create_access_token(identity=str(operator_id))
    return {'Authorization': f'Bearer {token}'}


def tower_payload(**overrides):
    payload = {
        'cellId': 'CID-1001',
        'lac': 'LAC-10',
        'mcc': '510',
        'mnc': '10',
        'lat': -6.2,
        'long': 106.8,
        'address': 'Jl. Merdeka, Jakarta',
        'operator': 'Telkomsel',
        'networkType': '4G',
        'height': 40,
        'coverageRadius': 1500,
    }
    payload.update(overrides)
    return payload


def msisdn_payload(**overrides):
    payload = {
        'msisdn': '628120000001',
        'imsi': '510101234567890',
        'imei': '358921000000001',
        'provider': 'Telkomsel',
        'registeredName': 'Budi Santoso',
    }
    payload.update(overrides)
    return payload
