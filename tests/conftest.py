import time
from unittest.mock import AsyncMock

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from fastapi.testclient import TestClient
from jose import jwt
from mongomock_motor import AsyncMongoMockClient

from myknowledge import dependencies
from myknowledge.app import app
from myknowledge.db import MongoManager
from myknowledge.dependencies import get_user_service
from myknowledge.users.service import UserService

# --- Test User Data ---
TEST_USER_ID = "user_test_123"
OTHER_USER_ID = "user_other_456"


def _generate_key_pair():
    private_key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    private_pem = private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode()
    public_pem = private_key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    ).decode()
    return private_pem, public_pem


# --- Fixtures ---

@pytest.fixture(scope="session")
def rsa_keys():
    """An RSA key pair standing in for the Clerk instance signing key."""
    return _generate_key_pair()


@pytest.fixture(scope="session")
def make_token(rsa_keys):
    private_pem, _ = rsa_keys

    def _make_token(sub=TEST_USER_ID, expires_in=300, key=None, **claims):
        now = int(time.time())
        payload = {"sub": sub, "iat": now, "nbf": now, "exp": now + expires_in, **claims}
        if sub is None:
            payload.pop("sub")
        return jwt.encode(payload, key or private_pem, algorithm="RS256")

    return _make_token


@pytest.fixture
def auth_headers(make_token):
    def _auth_headers(user_id=TEST_USER_ID):
        return {"Authorization": f"Bearer {make_token(sub=user_id)}"}

    return _auth_headers


@pytest.fixture
def mongo_manager():
    """A MongoManager backed by an in-memory Motor-compatible client."""
    return MongoManager(client=AsyncMongoMockClient(), db_name="myknowledge_test")


@pytest.fixture
def mock_user_service():
    mock = AsyncMock(spec=UserService)
    mock.get_user_by_id.return_value = {"id": TEST_USER_ID, "email": "test@example.com", "fullName": "Test User"}
    mock.update_user_metadata.return_value = {"id": TEST_USER_ID, "publicMetadata": {"theme": "dark"}}
    mock.get_user_organizations.return_value = []
    return mock


@pytest.fixture
def client(mocker, rsa_keys, mongo_manager, mock_user_service):
    """Provides a TestClient whose auth verifies real tokens against the test key."""
    _, public_pem = rsa_keys
    mocker.patch.object(dependencies.auth_helper, "jwt_key", public_pem)
    mocker.patch.object(dependencies.auth_helper, "authorized_parties", [])
    mocker.patch("myknowledge.dependencies.mongo_manager", new=mongo_manager)
    app.dependency_overrides[get_user_service] = lambda: mock_user_service

    with TestClient(app) as test_client:
        yield test_client

    # Clean up overrides after test
    app.dependency_overrides = {}
