"""
Construction du manifeste d'une mise à jour normale.

Les descripteurs d'assets sont calculés en parallèle; l'ordre de la liste `assets` reste celui de
`metadata.json`.
"""

from __future__ import annotations

import contextvars
from collections.abc import Mapping, Sequence
from concurrent.futures import ThreadPoolExecutor
from typing import Any

from updates_server.app.metrics import ASSET_LOOKUP_LATENCY
from updates_server.domain.entities import (
    AlreadyUpToDate,
    AssetDescriptor,
    AssetRef,
    Manifest,
    Platform,
    RequestContext,
    UpdateBundle,
)
from updates_server.domain.identifiers import convert_sha256_hash_to_uuid

PROTOCOL_WITH_NO_UPDATE_SHORTCUT = 1


class ManifestAssembler:
    """Assemble le manifeste d'un bundle NORMAL.

    Responsabilités:
    - Dériver l'identifiant de mise à jour depuis l'empreinte des métadonnées.
    - Court-circuiter (protocole 1) quand le client exécute déjà cette mise à jour.
    - Décrire les assets et l'asset de lancement via le dépôt, et joindre la config applicative.
    """

    def __init__(self, store, asset_request_headers: Mapping[str, str], max_workers: int = 8):
        """Initialise l'assembleur.

        Paramètres:
        - store: dépôt de bundles (`UpdateStore`).
        - asset_request_headers: en-têtes publiés pour chaque asset dans `extensions`.
        - max_workers: parallélisme maximal des lectures d'assets.
        """
        self.store = store
        self.asset_request_headers = dict(asset_request_headers)
        self.max_workers = max(1, max_workers)

    def assemble(self, ctx: RequestContext, bundle: UpdateBundle) -> Manifest | AlreadyUpToDate:
        """Retourne le manifeste du bundle, ou `AlreadyUpToDate` pour le raccourci du protocole 1.

        Le protocole 0 ne connaît pas ce raccourci: il reçoit toujours le manifeste complet.
        """
        metadata = self.store.read_metadata(bundle)
        update_id = convert_sha256_hash_to_uuid(metadata.content_hash)
        if (
            ctx.protocol_version == PROTOCOL_WITH_NO_UPDATE_SHORTCUT
            and ctx.current_update_id == update_id
        ):
            return AlreadyUpToDate(update_id=update_id)

        app_config = self.store.read_app_config(bundle)
        platform_metadata = metadata.for_platform(ctx.platform)
        assets = self._describe_assets(bundle, platform_metadata.assets, ctx.platform)
        launch_asset = self.store.asset_metadata(
            bundle, AssetRef(path=platform_metadata.bundle), ctx.platform, True
        )
        return Manifest(
            id=update_id,
            created_at=metadata.created_at,
            runtime_version=ctx.runtime_version,
            assets=assets,
            launch_asset=launch_asset,
            metadata={},
            extra={"expoClient": app_config},
        )

    def _describe_assets(
        self, bundle: UpdateBundle, refs: Sequence[AssetRef], platform: Platform
    ) -> list[AssetDescriptor]:
        if not refs:
            return []
        workers = min(self.max_workers, len(refs))
        with (
            ASSET_LOOKUP_LATENCY.labels(platform.value).time(),
            ThreadPoolExecutor(max_workers=workers, thread_name_prefix="asset-metadata") as pool,
        ):
            # une copie du contexte par lecture: les logs du dépôt gardent le request_id
            contexts = [contextvars.copy_context() for _ in refs]
            # map() restitue les résultats dans l'ordre des références
            return list(
                pool.map(
                    lambda ctx, ref: ctx.run(
                        self.store.asset_metadata, bundle, ref, platform, False
                    ),
                    contexts,
                    refs,
                )
            )

    def extensions_for(self, manifest: Manifest) -> dict[str, Any]:
        """Contenu de la partie `extensions`: en-têtes de requête par clé d'asset."""
        return {
            "assetRequestHeaders": {
                asset.key: dict(self.asset_request_headers)
                for asset in [*manifest.assets, manifest.launch_asset]
            }
        }
