"""
Interface de base pour le stockage des bundles de mises à jour.

Ce module définit l'interface abstraite consommée par le moteur de résolution: résolution du bundle
courant, lecture des métadonnées, description des assets et fabrique de directive de rollback.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from updates_server.domain.entities import (
    AssetDescriptor,
    AssetRef,
    BundleMetadata,
    Platform,
    RollBackDirective,
    UpdateBundle,
)


class UpdateStore(ABC):
    """Interface abstraite pour les dépôts de bundles."""

    @abstractmethod
    def latest_bundle(self, runtime_version: str) -> UpdateBundle:
        """Retourne le bundle le plus récent (BundleNotFoundError si aucun)."""
        ...

    @abstractmethod
    def list_entries(self, bundle: UpdateBundle) -> list[str]:
        """Noms des entrées situées directement dans le bundle."""
        ...

    @abstractmethod
    def read_metadata(self, bundle: UpdateBundle) -> BundleMetadata:
        """Empreinte, date de création et assets par plateforme du bundle."""
        ...

    @abstractmethod
    def read_app_config(self, bundle: UpdateBundle) -> dict[str, Any]:
        """Configuration applicative embarquée dans `extra.expoClient`."""
        ...

    @abstractmethod
    def asset_metadata(
        self,
        bundle: UpdateBundle,
        asset: AssetRef,
        platform: Platform,
        is_launch_asset: bool,
    ) -> AssetDescriptor:
        """Descripteur (empreinte, clé, type, URL) d'un asset du bundle."""
        ...

    @abstractmethod
    def create_rollback_directive(self, bundle: UpdateBundle) -> RollBackDirective:
        """Directive de rollback datée par le marqueur du bundle."""
        ...

    @abstractmethod
    def locate_asset(
        self, runtime_version: str, platform: Platform, asset_name: str
    ) -> tuple[Path, str]:
        """Chemin et type de contenu d'un asset à servir (AssetNotFoundError si absent)."""
        ...
