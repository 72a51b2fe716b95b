"""Configuration de test pour pytest avec gestion des chemins et fixtures partagées.

Ce module ajoute la racine du projet au sys.path et fournit le dépôt factice, une clé RSA jetable,
le moteur de résolution et un client HTTP dont les dépendances sont substituées.
"""

import os
import sys

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

# Ensure project root is on sys.path so that
# imports like `from updates_server...` resolve.
CURRENT_DIR = os.path.dirname(__file__)
PROJECT_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from fastapi.testclient import TestClient  # noqa: E402

from tests.fakes import InMemoryUpdateStore, StaticKeyProvider  # noqa: E402
from updates_server.api.deps import get_engine, get_store  # noqa: E402
from updates_server.app.main import app  # noqa: E402
from updates_server.domain.resolution import UpdateResolutionEngine  # noqa: E402
from updates_server.domain.signer import ResponseSigner  # noqa: E402
from updates_server.infra.signing.rsa import sign_rsa_sha256  # noqa: E402

ASSET_REQUEST_HEADERS = {"test-header": "test-header-value"}


@pytest.fixture(scope="session")
def rsa_private_key():
    """Clé RSA jetable (générée une fois par session)."""
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def private_key_pem(rsa_private_key) -> str:
    return rsa_private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode("ascii")


@pytest.fixture
def store() -> InMemoryUpdateStore:
    return InMemoryUpdateStore()


@pytest.fixture
def key_provider(private_key_pem) -> StaticKeyProvider:
    return StaticKeyProvider(private_key_pem)


@pytest.fixture
def signer(key_provider) -> ResponseSigner:
    return ResponseSigner(key_provider, sign_rsa_sha256)


@pytest.fixture
def engine(store, signer) -> UpdateResolutionEngine:
    return UpdateResolutionEngine(
        store=store,
        signer=signer,
        asset_request_headers=ASSET_REQUEST_HEADERS,
        max_workers=4,
    )


@pytest.fixture
def client(engine, store):
    """Client HTTP dont le moteur et le dépôt sont remplacés par les fakes."""
    app.dependency_overrides[get_engine] = lambda: engine
    app.dependency_overrides[get_store] = lambda: store
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
