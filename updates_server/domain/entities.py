"""
Entités du domaine des mises à jour.

Ce module définit le contexte de requête, la représentation d'un bundle résolu et les charges utiles
(manifeste, directives) sérialisées vers le client. Toutes les entités sont immuables et construites
à neuf pour chaque requête.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from updates_server.domain.errors import BundleMetadataError


class Platform(str, Enum):
    """Plateformes clientes prises en charge."""

    IOS = "ios"
    ANDROID = "android"


class UpdateType(Enum):
    """Nature d'un bundle, déterminée une seule fois par le classifieur."""

    NORMAL = "normal"
    ROLLBACK = "rollback"


class RequestContext(BaseModel):
    """Entrées validées d'une requête de manifeste."""

    model_config = ConfigDict(frozen=True)

    protocol_version: int = 0
    platform: Platform
    runtime_version: str
    current_update_id: str | None = None
    embedded_update_id: str | None = None
    expect_signature: bool = False


@dataclass(frozen=True)
class UpdateBundle:
    """Bundle publié sur disque pour une version de runtime."""

    runtime_version: str
    path: Path


@dataclass(frozen=True)
class AssetRef:
    """Référence d'asset telle que déclarée dans `metadata.json`."""

    path: str
    ext: str | None = None


@dataclass(frozen=True)
class PlatformMetadata:
    """Liste ordonnée des assets et bundle de lancement d'une plateforme."""

    bundle: str
    assets: tuple[AssetRef, ...] = ()


@dataclass(frozen=True)
class BundleMetadata:
    """Métadonnées d'un bundle: empreinte du contenu, date de création, assets par plateforme."""

    content_hash: str
    created_at: str
    file_metadata: dict[str, PlatformMetadata]

    def for_platform(self, platform: Platform) -> PlatformMetadata:
        try:
            return self.file_metadata[platform.value]
        except KeyError:
            raise BundleMetadataError(
                f"No asset metadata found for platform {platform.value}."
            ) from None


class WirePayload(BaseModel):
    """Charge utile sérialisée vers le client (noms camelCase, JSON compact)."""

    model_config = ConfigDict(frozen=True)

    def to_json(self) -> str:
        """Sérialise la charge utile exactement comme elle sera transmise (et signée)."""
        return json.dumps(
            self.model_dump(by_alias=True), separators=(",", ":"), ensure_ascii=False
        )


class AssetDescriptor(WirePayload):
    """Descripteur d'asset référencé par un manifeste."""

    hash: str
    key: str
    file_extension: str = Field(serialization_alias="fileExtension")
    content_type: str = Field(serialization_alias="contentType")
    url: str
    is_launch_asset: bool = Field(default=False, exclude=True)


class Manifest(WirePayload):
    """Manifeste complet d'une mise à jour."""

    id: str
    created_at: str = Field(serialization_alias="createdAt")
    runtime_version: str = Field(serialization_alias="runtimeVersion")
    assets: list[AssetDescriptor]
    launch_asset: AssetDescriptor = Field(serialization_alias="launchAsset")
    metadata: dict[str, Any] = Field(default_factory=dict)
    extra: dict[str, Any] = Field(default_factory=dict)


class RollBackParameters(WirePayload):
    commit_time: str = Field(serialization_alias="commitTime")


class RollBackDirective(WirePayload):
    """Directive demandant au client de revenir à la mise à jour embarquée."""

    type: Literal["rollBackToEmbedded"] = "rollBackToEmbedded"
    parameters: RollBackParameters


class NoUpdateAvailableDirective(WirePayload):
    """Directive signalant au client qu'il est déjà à jour."""

    type: Literal["noUpdateAvailable"] = "noUpdateAvailable"
    parameters: dict[str, Any] = Field(default_factory=dict)


@dataclass(frozen=True)
class AlreadyUpToDate:
    """Le client exécute déjà le manifeste courant (raccourci du protocole v1)."""

    update_id: str


Directive = RollBackDirective | NoUpdateAvailableDirective
