"""
Validation des entrées d'une requête de manifeste.

Plusieurs champs peuvent arriver par en-tête ou par paramètre de requête; l'en-tête est prioritaire.
La validation est faite avant tout accès au stockage.
"""

from __future__ import annotations

from collections.abc import Mapping

from starlette.datastructures import Headers

from updates_server.core.http_constants import (
    HEADER_CURRENT_UPDATE_ID,
    HEADER_EMBEDDED_UPDATE_ID,
    HEADER_EXPECT_SIGNATURE,
    HEADER_PLATFORM,
    HEADER_PROTOCOL_VERSION,
    HEADER_RUNTIME_VERSION,
    QUERY_PLATFORM,
    QUERY_RUNTIME_VERSION,
)
from updates_server.domain.entities import Platform, RequestContext
from updates_server.domain.errors import InvalidRequestError

UNSUPPORTED_PROTOCOL_MESSAGE = "Unsupported protocol version. Expected either 0 or 1."
UNSUPPORTED_PLATFORM_MESSAGE = "Unsupported platform. Expected either ios or android."
MISSING_RUNTIME_VERSION_MESSAGE = "No runtimeVersion provided."


def header_or_query(
    headers: Headers, query_params: Mapping[str, str], header: str, query: str
) -> str | None:
    """Retourne la valeur de l'en-tête `header`, sinon celle du paramètre `query`."""
    value = headers.get(header)
    if value is None:
        value = query_params.get(query)
    return value


def parse_protocol_version(headers: Headers) -> int:
    """Lit `expo-protocol-version` (0 par défaut); refuse les valeurs multiples ou non entières."""
    values = headers.getlist(HEADER_PROTOCOL_VERSION)
    if len(values) > 1:
        raise InvalidRequestError(UNSUPPORTED_PROTOCOL_MESSAGE)
    raw = values[0].strip() if values else "0"
    # isdigit() seul accepte des chiffres Unicode (« ² ») que int() refuse
    if not (raw.isascii() and raw.isdigit()):
        raise InvalidRequestError(UNSUPPORTED_PROTOCOL_MESSAGE)
    return int(raw)


def parse_platform(headers: Headers, query_params: Mapping[str, str]) -> Platform:
    raw = header_or_query(headers, query_params, HEADER_PLATFORM, QUERY_PLATFORM)
    try:
        return Platform(raw)
    except ValueError:
        raise InvalidRequestError(UNSUPPORTED_PLATFORM_MESSAGE) from None


def parse_request_context(headers: Headers, query_params: Mapping[str, str]) -> RequestContext:
    """Construit un `RequestContext` validé à partir des en-têtes et paramètres HTTP.

    Raises:
        InvalidRequestError: version de protocole, plateforme ou version de runtime invalide.
    """
    protocol_version = parse_protocol_version(headers)
    platform = parse_platform(headers, query_params)
    runtime_version = header_or_query(
        headers, query_params, HEADER_RUNTIME_VERSION, QUERY_RUNTIME_VERSION
    )
    if not runtime_version:
        raise InvalidRequestError(MISSING_RUNTIME_VERSION_MESSAGE)

    return RequestContext(
        protocol_version=protocol_version,
        platform=platform,
        runtime_version=runtime_version,
        current_update_id=headers.get(HEADER_CURRENT_UPDATE_ID),
        embedded_update_id=headers.get(HEADER_EMBEDDED_UPDATE_ID),
        expect_signature=bool(headers.get(HEADER_EXPECT_SIGNATURE)),
    )
