"""
Routes du protocole de mises à jour: manifeste et assets.

Ce module regroupe les endpoints `/api/manifest` (manifeste, directive ou « pas de mise à jour »,
résolus par le moteur) et `/api/assets` (octets bruts d'un asset publié).
"""

import structlog
from fastapi import APIRouter, Depends, Request
from fastapi.responses import Response

from updates_server.api.deps import get_engine, get_store
from updates_server.api.errors import create_error_response
from updates_server.core.http_constants import (
    HTTP_BAD_REQUEST,
    HTTP_INTERNAL_SERVER_ERROR,
)
from updates_server.domain.entities import Platform
from updates_server.domain.errors import UpdateServerError
from updates_server.domain.resolution import UpdateResolutionEngine
from updates_server.infra.storage.base import UpdateStore

router = APIRouter(prefix="/api", tags=["updates"])
engine_dep = Depends(get_engine)
store_dep = Depends(get_store)

log = structlog.get_logger(__name__)


@router.get("/manifest")
def get_manifest(request: Request, engine: UpdateResolutionEngine = engine_dep) -> Response:
    """
    Retourne la réponse du protocole pour le client décrit par les en-têtes `expo-*`.

    Retour:
    - 200 multipart (`manifest` + `extensions`, ou `directive`), ou JSON « No update available ».
    - 400/404 `{"error": ...}` en cas d'entrée invalide ou de bundle introuvable.
    """
    result = engine.handle(request.headers, request.query_params)
    return Response(content=result.body, status_code=result.status_code, headers=result.headers)


@router.get("/assets")
def get_asset(request: Request, store: UpdateStore = store_dep) -> Response:
    """Sert les octets d'un asset d'un bundle publié.

    Paramètres de requête: `asset`, `runtimeVersion`, `platform`.
    """
    asset_name = request.query_params.get("asset")
    runtime_version = request.query_params.get("runtimeVersion")
    raw_platform = request.query_params.get("platform")

    if not asset_name:
        return create_error_response(HTTP_BAD_REQUEST, "No asset name provided.")
    try:
        platform = Platform(raw_platform)
    except ValueError:
        return create_error_response(
            HTTP_BAD_REQUEST, 'No platform provided. Expected "ios" or "android".'
        )
    if not runtime_version:
        return create_error_response(HTTP_BAD_REQUEST, "No runtimeVersion provided.")

    try:
        asset_path, content_type = store.locate_asset(runtime_version, platform, asset_name)
    except UpdateServerError as exc:
        return create_error_response(exc.status_code, exc.message)

    try:
        content = asset_path.read_bytes()
    except OSError:
        log.exception("asset_read_failed", asset=asset_name)
        return create_error_response(HTTP_INTERNAL_SERVER_ERROR, "Failed to read asset.")
    return Response(content=content, media_type=content_type)
