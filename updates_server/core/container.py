"""
Conteneur d'injection de dépendances et configuration application.

Instancie les composants centraux (settings, dépôt de bundles, clé de signature, moteur de
résolution) et expose un singleton `container` utilisé par les dépendances FastAPI.
"""

from updates_server.core.settings import Settings, get_settings
from updates_server.domain.resolution import UpdateResolutionEngine
from updates_server.domain.signer import ResponseSigner
from updates_server.infra.signing.rsa import PemFileKeyProvider, sign_rsa_sha256
from updates_server.infra.storage.filesystem import FileSystemUpdateStore


class Container:
    def __init__(self, settings: Settings | None = None):
        self.settings = settings or get_settings()
        self.store = FileSystemUpdateStore(
            updates_dir=self.settings.UPDATES_DIR,
            assets_base_url=self.settings.ASSETS_BASE_URL,
        )
        # La clé est relue à chaque signature: elle n'est jamais conservée en mémoire ici
        self.key_provider = PemFileKeyProvider(self.settings.PRIVATE_KEY_PATH)
        self.signer = ResponseSigner(self.key_provider, sign_rsa_sha256)
        self.engine = UpdateResolutionEngine(
            store=self.store,
            signer=self.signer,
            asset_request_headers=self.settings.ASSET_REQUEST_HEADERS,
            max_workers=self.settings.ASSET_LOOKUP_WORKERS,
        )


container = Container()
