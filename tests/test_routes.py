"""Tests HTTP des routes du serveur de mises à jour.

Ce module exerce l'application FastAPI complète via `TestClient`: manifeste, assets, santé,
métriques et enveloppe d'erreur du protocole.
"""

from __future__ import annotations

import json
from pathlib import Path

from fastapi.testclient import TestClient

from tests.helpers import parse_multipart, part_body, part_name
from updates_server.api.deps import get_store
from updates_server.app.main import app
from updates_server.core.http_constants import (
    HTTP_BAD_REQUEST,
    HTTP_METHOD_NOT_ALLOWED,
    HTTP_NOT_FOUND,
    HTTP_OK,
)
from updates_server.infra.storage.filesystem import FileSystemUpdateStore

IOS_HEADERS = {
    "expo-protocol-version": "1",
    "expo-platform": "ios",
    "expo-runtime-version": "1.0.0",
}


def test_manifest_endpoint(client) -> None:
    """Teste la réponse multipart du manifeste via HTTP."""
    r = client.get("/api/manifest", headers=IOS_HEADERS)
    assert r.status_code == HTTP_OK
    assert r.headers["expo-protocol-version"] == "1"
    assert r.headers["expo-sfv-version"] == "0"
    assert r.headers["cache-control"] == "private, max-age=0"
    assert r.headers["x-request-id"]

    parts = parse_multipart(r.content, r.headers["content-type"])
    assert [part_name(p) for p in parts] == ["manifest", "extensions"]
    assert json.loads(part_body(parts[0]))["runtimeVersion"] == "1.0.0"


def test_manifest_accepts_query_parameters(client) -> None:
    """Teste que plateforme et version de runtime peuvent venir de la query string."""
    r = client.get(
        "/api/manifest",
        params={"platform": "android", "runtime-version": "1.0.0"},
        headers={"expo-protocol-version": "1"},
    )
    assert r.status_code == HTTP_OK
    assert r.headers["content-type"].startswith("multipart/mixed")


def test_manifest_input_errors(client) -> None:
    """Teste l'enveloppe `{"error": ...}` sur les entrées invalides."""
    r = client.get("/api/manifest", headers={**IOS_HEADERS, "expo-platform": "web"})
    assert r.status_code == HTTP_BAD_REQUEST
    assert r.json() == {"error": "Unsupported platform. Expected either ios or android."}

    r = client.get("/api/manifest", headers={**IOS_HEADERS, "expo-protocol-version": "2a"})
    assert r.status_code == HTTP_BAD_REQUEST

    r = client.get("/api/manifest", headers={**IOS_HEADERS, "expo-runtime-version": "9.9.9"})
    assert r.status_code == HTTP_NOT_FOUND


def test_manifest_rejects_other_methods(client) -> None:
    """Teste qu'une méthode autre que GET reçoit 405 « Expected GET. »."""
    r = client.post("/api/manifest", headers=IOS_HEADERS)
    assert r.status_code == HTTP_METHOD_NOT_ALLOWED
    assert r.json() == {"error": "Expected GET."}


def test_assets_endpoint(tmp_path: Path) -> None:
    """Teste le service des octets d'un asset publié sur disque."""
    bundle_dir = tmp_path / "1.0.0" / "1"
    (bundle_dir / "assets").mkdir(parents=True)
    (bundle_dir / "assets" / "logo.png").write_bytes(b"png-bytes")
    (bundle_dir / "metadata.json").write_text(
        json.dumps(
            {
                "fileMetadata": {
                    "ios": {
                        "bundle": "bundles/ios.js",
                        "assets": [{"path": "assets/logo.png", "ext": "png"}],
                    }
                }
            }
        ),
        encoding="utf-8",
    )
    store = FileSystemUpdateStore(tmp_path, "http://testserver")
    app.dependency_overrides[get_store] = lambda: store
    try:
        c = TestClient(app)
        params = {"asset": "1.0.0/1/assets/logo.png", "runtimeVersion": "1.0.0", "platform": "ios"}
        r = c.get("/api/assets", params=params)
        assert r.status_code == HTTP_OK
        assert r.content == b"png-bytes"
        assert r.headers["content-type"] == "image/png"

        r = c.get("/api/assets", params={**params, "asset": "1.0.0/1/assets/none.png"})
        assert r.status_code == HTTP_NOT_FOUND
        assert r.json() == {"error": 'Asset "1.0.0/1/assets/none.png" does not exist.'}
    finally:
        app.dependency_overrides.clear()


def test_assets_parameter_validation(client) -> None:
    """Teste l'ordre de validation des paramètres de `/api/assets`."""
    r = client.get("/api/assets", params={"platform": "ios", "runtimeVersion": "1.0.0"})
    assert r.status_code == HTTP_BAD_REQUEST
    assert r.json() == {"error": "No asset name provided."}

    r = client.get("/api/assets", params={"asset": "a.png", "runtimeVersion": "1.0.0"})
    assert r.json() == {"error": 'No platform provided. Expected "ios" or "android".'}

    r = client.get("/api/assets", params={"asset": "a.png", "platform": "ios"})
    assert r.json() == {"error": "No runtimeVersion provided."}


def test_health(client) -> None:
    """Teste que l'endpoint de santé retourne un statut OK."""
    r = client.get("/health")
    assert r.status_code == HTTP_OK
    assert r.json()["status"] == "ok"


def test_metrics_exposed(client) -> None:
    """Teste que l'endpoint /metrics expose les compteurs HTTP et ceux du moteur."""
    client.get("/api/manifest", headers=IOS_HEADERS)
    r = client.get("/metrics")
    assert r.status_code == HTTP_OK
    assert b"http_requests_total" in r.content
    assert b"update_responses_total" in r.content
