# ============================================================
# Module : updates_server/infra/storage/filesystem.py
# Objet  : Bundles publiés sur disque (UPDATES_DIR/<runtime>/<bundle>/).
# Notes  : Ne jamais servir un fichier hors du répertoire du runtime.
# ============================================================
"""Dépôt de bundles basé sur le système de fichiers.

Arborescence attendue::

    UPDATES_DIR/
      <runtimeVersion>/
        <bundleId>/            # entier, le plus grand est le plus récent
          metadata.json        # fileMetadata.<platform>.{bundle, assets[{path, ext}]}
          expoConfig.json
          rollback             # marqueur optionnel: bundle de retour à la version embarquée
          <assets...>
"""

from __future__ import annotations

import base64
import hashlib
import json
import mimetypes
from datetime import datetime, timezone
from pathlib import Path
from typing import Any
from urllib.parse import urlencode

import structlog

from updates_server.domain.classifier import ROLLBACK_MARKER
from updates_server.domain.entities import (
    AssetDescriptor,
    AssetRef,
    BundleMetadata,
    Platform,
    PlatformMetadata,
    RollBackDirective,
    RollBackParameters,
    UpdateBundle,
)
from updates_server.domain.errors import (
    AssetNotFoundError,
    BundleMetadataError,
    BundleNotFoundError,
)
from updates_server.domain.identifiers import sha256_hex
from updates_server.infra.storage.base import UpdateStore

METADATA_FILE = "metadata.json"
APP_CONFIG_FILE = "expoConfig.json"
LAUNCH_ASSET_CONTENT_TYPE = "application/javascript"
LAUNCH_ASSET_EXTENSION = "bundle"
DEFAULT_CONTENT_TYPE = "application/octet-stream"

log = structlog.get_logger(__name__)


def _created_at(path: Path) -> str:
    """Date de création du fichier (modification à défaut) au format ISO-8601 UTC millisecondes."""
    stat = path.stat()
    timestamp = getattr(stat, "st_birthtime", stat.st_mtime)
    moment = datetime.fromtimestamp(timestamp, tz=timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _content_type_for_extension(ext: str | None) -> str:
    if not ext:
        return DEFAULT_CONTENT_TYPE
    guessed, _ = mimetypes.guess_type(f"asset.{ext.lstrip('.')}")
    return guessed or DEFAULT_CONTENT_TYPE


def _parse_platform_metadata(entry: dict[str, Any]) -> PlatformMetadata:
    return PlatformMetadata(
        bundle=entry["bundle"],
        assets=tuple(
            AssetRef(path=asset["path"], ext=asset.get("ext")) for asset in entry.get("assets", [])
        ),
    )


class FileSystemUpdateStore(UpdateStore):
    """Dépôt de bundles lu directement sur disque, sans cache.

    Chaque appel relit le disque: publier un nouveau bundle ne nécessite pas de redémarrage.
    """

    def __init__(self, updates_dir: str | Path, assets_base_url: str):
        """Initialise le dépôt.

        Paramètres:
        - updates_dir: racine des répertoires `<runtimeVersion>/<bundleId>/`.
        - assets_base_url: origine publique utilisée dans les URLs d'assets.
        """
        self.updates_dir = Path(updates_dir)
        self.assets_base_url = assets_base_url.rstrip("/")

    def _runtime_dir(self, runtime_version: str) -> Path:
        if runtime_version in {".", ".."} or "/" in runtime_version or "\\" in runtime_version:
            raise BundleNotFoundError("Unsupported runtime version")
        return self.updates_dir / runtime_version

    def latest_bundle(self, runtime_version: str) -> UpdateBundle:
        runtime_dir = self._runtime_dir(runtime_version)
        if not runtime_dir.is_dir():
            raise BundleNotFoundError("Unsupported runtime version")
        candidates = [
            entry for entry in runtime_dir.iterdir() if entry.is_dir() and entry.name.isdigit()
        ]
        if not candidates:
            raise BundleNotFoundError(
                f"No update bundle found for runtime version {runtime_version}"
            )
        latest = max(candidates, key=lambda entry: int(entry.name))
        log.debug("bundle_resolved", runtime_version=runtime_version, bundle=latest.name)
        return UpdateBundle(runtime_version=runtime_version, path=latest)

    def list_entries(self, bundle: UpdateBundle) -> list[str]:
        return sorted(entry.name for entry in bundle.path.iterdir())

    def read_metadata(self, bundle: UpdateBundle) -> BundleMetadata:
        metadata_path = bundle.path / METADATA_FILE
        try:
            raw = metadata_path.read_bytes()
        except OSError as exc:
            raise BundleMetadataError(
                f"No metadata.json found in update bundle {bundle.path.name}"
            ) from exc
        try:
            data = json.loads(raw.decode("utf-8"))
            file_metadata = {
                name: _parse_platform_metadata(entry)
                for name, entry in data.get("fileMetadata", {}).items()
            }
        except (ValueError, KeyError, TypeError, AttributeError) as exc:
            raise BundleMetadataError(
                f"Invalid metadata.json in update bundle {bundle.path.name}"
            ) from exc
        return BundleMetadata(
            content_hash=sha256_hex(raw),
            created_at=_created_at(metadata_path),
            file_metadata=file_metadata,
        )

    def read_app_config(self, bundle: UpdateBundle) -> dict[str, Any]:
        try:
            return json.loads((bundle.path / APP_CONFIG_FILE).read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise BundleMetadataError(
                f"No expo config json found with runtime version {bundle.runtime_version}"
            ) from exc

    def asset_metadata(
        self,
        bundle: UpdateBundle,
        asset: AssetRef,
        platform: Platform,
        is_launch_asset: bool,
    ) -> AssetDescriptor:
        asset_path = bundle.path / asset.path
        try:
            data = asset_path.read_bytes()
        except OSError as exc:
            raise AssetNotFoundError(f'Asset "{asset.path}" does not exist.') from exc

        digest = hashlib.sha256(data).digest()
        query = urlencode(
            {
                "asset": asset_path.relative_to(self.updates_dir).as_posix(),
                "runtimeVersion": bundle.runtime_version,
                "platform": platform.value,
            }
        )
        extension = LAUNCH_ASSET_EXTENSION if is_launch_asset else asset.ext
        return AssetDescriptor(
            hash=base64.urlsafe_b64encode(digest).decode("ascii").rstrip("="),
            key=hashlib.md5(data, usedforsecurity=False).hexdigest(),
            file_extension=f".{extension}",
            content_type=(
                LAUNCH_ASSET_CONTENT_TYPE
                if is_launch_asset
                else _content_type_for_extension(asset.ext)
            ),
            url=f"{self.assets_base_url}/api/assets?{query}",
            is_launch_asset=is_launch_asset,
        )

    def create_rollback_directive(self, bundle: UpdateBundle) -> RollBackDirective:
        marker = bundle.path / ROLLBACK_MARKER
        return RollBackDirective(parameters=RollBackParameters(commit_time=_created_at(marker)))

    def locate_asset(
        self, runtime_version: str, platform: Platform, asset_name: str
    ) -> tuple[Path, str]:
        bundle = self.latest_bundle(runtime_version)
        platform_metadata = self.read_metadata(bundle).for_platform(platform)

        runtime_dir = self._runtime_dir(runtime_version).resolve()
        asset_path = (self.updates_dir / asset_name).resolve()
        if not asset_path.is_relative_to(runtime_dir) or not asset_path.is_file():
            raise AssetNotFoundError(f'Asset "{asset_name}" does not exist.')

        bundle_dir = bundle.path.resolve()
        if not asset_path.is_relative_to(bundle_dir):
            # Asset d'un bundle antérieur: type déduit du nom de fichier
            return asset_path, _content_type_for_extension(asset_path.suffix)

        relative = asset_path.relative_to(bundle_dir).as_posix()
        if relative == platform_metadata.bundle:
            return asset_path, LAUNCH_ASSET_CONTENT_TYPE
        for ref in platform_metadata.assets:
            if ref.path == relative:
                return asset_path, _content_type_for_extension(ref.ext)
        return asset_path, _content_type_for_extension(asset_path.suffix)
