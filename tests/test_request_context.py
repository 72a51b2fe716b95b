"""Tests pour la validation des entrées d'une requête de manifeste.

Ce module vérifie la priorité en-tête/paramètre de requête, les valeurs par défaut et les messages
d'erreur pour la version de protocole, la plateforme et la version de runtime.
"""

from __future__ import annotations

import pytest
from starlette.datastructures import Headers, QueryParams

from updates_server.domain.entities import Platform
from updates_server.domain.errors import InvalidRequestError
from updates_server.domain.request_context import parse_request_context


def _parse(headers: dict | list | None = None, query: str = ""):
    if isinstance(headers, list):
        raw = [(k.encode("latin-1"), v.encode("latin-1")) for k, v in headers]
        return parse_request_context(Headers(raw=raw), QueryParams(query))
    return parse_request_context(Headers(headers or {}), QueryParams(query))


def test_headers_are_parsed() -> None:
    """Teste la lecture complète d'une requête par en-têtes."""
    ctx = _parse(
        {
            "expo-protocol-version": "1",
            "expo-platform": "ios",
            "expo-runtime-version": "1.0.0",
            "expo-current-update-id": "abc",
            "expo-embedded-update-id": "def",
            "expo-expect-signature": "sig, keyid=\"main\"",
        }
    )
    assert ctx.protocol_version == 1
    assert ctx.platform is Platform.IOS
    assert ctx.runtime_version == "1.0.0"
    assert ctx.current_update_id == "abc"
    assert ctx.embedded_update_id == "def"
    assert ctx.expect_signature is True


def test_query_parameters_are_a_fallback() -> None:
    """Teste que plateforme et runtime peuvent venir des paramètres de requête."""
    ctx = _parse({}, "platform=android&runtime-version=2.0.0")
    assert ctx.platform is Platform.ANDROID
    assert ctx.runtime_version == "2.0.0"
    assert ctx.protocol_version == 0
    assert ctx.current_update_id is None
    assert ctx.expect_signature is False


def test_header_takes_precedence_over_query() -> None:
    """Teste que l'en-tête l'emporte sur le paramètre de requête."""
    ctx = _parse(
        {"expo-platform": "ios", "expo-runtime-version": "1.0.0"},
        "platform=android&runtime-version=9.9.9",
    )
    assert ctx.platform is Platform.IOS
    assert ctx.runtime_version == "1.0.0"


@pytest.mark.parametrize("value", ["abc", "-1", "1.5", "", "\u00b2"])
def test_invalid_protocol_version_is_rejected(value: str) -> None:
    """Teste le rejet d'une version de protocole non entière ou négative."""
    with pytest.raises(InvalidRequestError) as exc_info:
        _parse({"expo-protocol-version": value, "expo-platform": "ios", "expo-runtime-version": "1"})
    assert exc_info.value.status_code == 400
    assert "Unsupported protocol version" in exc_info.value.message


def test_repeated_protocol_version_header_is_rejected() -> None:
    """Teste le rejet d'un en-tête `expo-protocol-version` répété."""
    with pytest.raises(InvalidRequestError):
        _parse(
            [
                ("expo-protocol-version", "0"),
                ("expo-protocol-version", "1"),
                ("expo-platform", "ios"),
                ("expo-runtime-version", "1"),
            ]
        )


@pytest.mark.parametrize("platform", [None, "web", "IOS"])
def test_unsupported_platform_is_rejected(platform: str | None) -> None:
    """Teste le rejet d'une plateforme absente ou inconnue."""
    headers = {"expo-runtime-version": "1.0.0"}
    if platform is not None:
        headers["expo-platform"] = platform
    with pytest.raises(InvalidRequestError) as exc_info:
        _parse(headers)
    assert exc_info.value.message == "Unsupported platform. Expected either ios or android."


def test_missing_runtime_version_is_rejected() -> None:
    """Teste le rejet d'une requête sans version de runtime."""
    with pytest.raises(InvalidRequestError) as exc_info:
        _parse({"expo-platform": "ios"})
    assert exc_info.value.message == "No runtimeVersion provided."
