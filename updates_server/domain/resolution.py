# ============================================================
# Module : updates_server/domain/resolution.py
# Objet  : Moteur de résolution des requêtes de manifeste.
# Notes  : Exactement une réponse par requête, jamais d'exception vers le transport.
# ============================================================
"""Moteur de résolution: manifeste, directive de rollback ou « pas de mise à jour ».

Flux: validation du contexte → résolution et classification du bundle → assembleur de manifeste ou
de directives → signature (si demandée) → mise en forme multipart.
"""

from __future__ import annotations

import json
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

import structlog
from starlette.datastructures import Headers

from updates_server.app.metrics import UPDATE_RESPONSES
from updates_server.core.http_constants import (
    CACHE_CONTROL_PRIVATE,
    HEADER_PROTOCOL_VERSION,
    HEADER_SFV_VERSION,
    HTTP_NOT_FOUND,
    HTTP_OK,
    JSON_CONTENT_TYPE,
    SFV_VERSION,
)
from updates_server.domain.classifier import classify_bundle
from updates_server.domain.directive_assembler import DirectiveAssembler
from updates_server.domain.entities import (
    AlreadyUpToDate,
    NoUpdateAvailableDirective,
    RequestContext,
    UpdateBundle,
    UpdateType,
)
from updates_server.domain.errors import UpdateServerError
from updates_server.domain.manifest_assembler import ManifestAssembler
from updates_server.domain.multipart import MultipartPart, frame_parts, generate_boundary
from updates_server.domain.request_context import parse_request_context
from updates_server.domain.signer import ResponseSigner

DIRECTIVE_PROTOCOL_VERSION = 1
NO_UPDATE_MESSAGE = "No update available"

log = structlog.get_logger(__name__)


def _compact_json(content: Any) -> str:
    return json.dumps(content, separators=(",", ":"), ensure_ascii=False)


@dataclass(frozen=True)
class UpdateResponse:
    """Réponse HTTP produite par le moteur, indépendante du framework web."""

    status_code: int
    body: bytes
    headers: dict[str, str] = field(default_factory=dict)

    @classmethod
    def json(cls, status_code: int, content: Any) -> UpdateResponse:
        return cls(
            status_code=status_code,
            body=_compact_json(content).encode("utf-8"),
            headers={"content-type": JSON_CONTENT_TYPE},
        )

    @classmethod
    def error(cls, status_code: int, message: str) -> UpdateResponse:
        return cls.json(status_code, {"error": message})


class UpdateResolutionEngine:
    """Orchestrateur sans état d'une requête de manifeste.

    Les collaborateurs (dépôt de bundles, signataire) sont injectés: aucun accès global.
    """

    def __init__(
        self,
        store,
        signer: ResponseSigner,
        asset_request_headers: Mapping[str, str],
        max_workers: int = 8,
        boundary_factory: Callable[[], str] = generate_boundary,
    ):
        """Initialise le moteur.

        Paramètres:
        - store: dépôt de bundles (`UpdateStore`).
        - signer: `ResponseSigner` appliqué aux charges utiles.
        - asset_request_headers: en-têtes publiés par asset dans la partie `extensions`.
        - max_workers: parallélisme des lectures d'assets.
        - boundary_factory: générateur de frontières multipart.
        """
        self.store = store
        self.signer = signer
        self.manifests = ManifestAssembler(store, asset_request_headers, max_workers)
        self.directives = DirectiveAssembler(store)
        self._boundary_factory = boundary_factory

    def handle(self, headers: Headers, query_params: Mapping[str, str]) -> UpdateResponse:
        """Valide les entrées HTTP puis résout la requête."""
        try:
            ctx = parse_request_context(headers, query_params)
        except UpdateServerError as exc:
            log.info("update_request_invalid", error=exc.message)
            UPDATE_RESPONSES.labels("error", "unknown").inc()
            return UpdateResponse.error(exc.status_code, exc.message)
        return self.resolve(ctx)

    def resolve(self, ctx: RequestContext) -> UpdateResponse:
        """Produit l'unique réponse d'une requête validée."""
        logger = log.bind(
            runtime_version=ctx.runtime_version,
            platform=ctx.platform.value,
            protocol_version=ctx.protocol_version,
        )
        try:
            bundle = self.store.latest_bundle(ctx.runtime_version)
            update_type = classify_bundle(self.store.list_entries(bundle))
            if update_type is UpdateType.NORMAL:
                return self._serve_update(ctx, bundle, logger)
            return self._serve_directive(ctx, bundle, logger)
        except UpdateServerError as exc:
            logger.info("update_request_rejected", error=exc.message, status=exc.status_code)
            return self._failure(ctx, exc.status_code, exc.message)
        except Exception as exc:
            logger.exception("update_resolution_failed")
            return self._failure(ctx, HTTP_NOT_FOUND, str(exc) or "An unknown error occurred")

    def _serve_update(self, ctx: RequestContext, bundle: UpdateBundle, logger) -> UpdateResponse:
        result = self.manifests.assemble(ctx, bundle)
        if isinstance(result, AlreadyUpToDate):
            # Raccourci du protocole 1: message simple, jamais signé ni multipart
            logger.info("manifest_up_to_date", update_id=result.update_id)
            UPDATE_RESPONSES.labels("up_to_date", ctx.platform.value).inc()
            return UpdateResponse.json(HTTP_OK, {"message": NO_UPDATE_MESSAGE})

        manifest_json = result.to_json()
        parts = [
            MultipartPart(
                name="manifest",
                body=manifest_json,
                headers=self.signer.part_headers(manifest_json, ctx.expect_signature),
            ),
            MultipartPart(
                name="extensions",
                body=_compact_json(self.manifests.extensions_for(result)),
            ),
        ]
        logger.info("manifest_served", update_id=result.id, assets=len(result.assets))
        UPDATE_RESPONSES.labels("manifest", ctx.platform.value).inc()
        return self._multipart(parts, ctx.protocol_version)

    def _serve_directive(self, ctx: RequestContext, bundle: UpdateBundle, logger) -> UpdateResponse:
        directive = self.directives.assemble(ctx, bundle)
        directive_json = directive.to_json()
        parts = [
            MultipartPart(
                name="directive",
                body=directive_json,
                headers=self.signer.part_headers(directive_json, ctx.expect_signature),
            )
        ]
        kind = (
            "no_update_available"
            if isinstance(directive, NoUpdateAvailableDirective)
            else "rollback"
        )
        logger.info("directive_served", directive=directive.type)
        UPDATE_RESPONSES.labels(kind, ctx.platform.value).inc()
        return self._multipart(parts, DIRECTIVE_PROTOCOL_VERSION)

    def _multipart(self, parts: list[MultipartPart], protocol_version: int) -> UpdateResponse:
        framed = frame_parts(parts, self._boundary_factory)
        return UpdateResponse(
            status_code=HTTP_OK,
            body=framed.body,
            headers={
                HEADER_PROTOCOL_VERSION: str(protocol_version),
                HEADER_SFV_VERSION: SFV_VERSION,
                "cache-control": CACHE_CONTROL_PRIVATE,
                "content-type": framed.content_type,
            },
        )

    def _failure(self, ctx: RequestContext, status_code: int, message: str) -> UpdateResponse:
        UPDATE_RESPONSES.labels("error", ctx.platform.value).inc()
        return UpdateResponse.error(status_code, message)
