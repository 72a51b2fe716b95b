"""Signature détachée des charges utiles (en-tête `expo-signature`)."""

from __future__ import annotations

from collections.abc import Callable

import structlog
from http_sfv import Dictionary

from updates_server.core.http_constants import HEADER_SIGNATURE
from updates_server.domain.errors import SigningKeyMissingError

SIGNATURE_KEY_ID = "main"

log = structlog.get_logger(__name__)


class ResponseSigner:
    """Signe, à la demande du client, le JSON exact qui sera transmis.

    Responsabilités:
    - Ne consulter le fournisseur de clé que si la signature est demandée.
    - Échouer explicitement (400) si aucune clé n'est disponible, sans jamais ignorer la demande.
    - Encoder la signature en dictionnaire structuré `sig="...", keyid="main"`.
    """

    def __init__(self, key_provider, sign: Callable[[str, str], str], key_id: str = SIGNATURE_KEY_ID):
        """Initialise le signataire.

        Paramètres:
        - key_provider: objet exposant `get_private_key() -> str | None` (PEM).
        - sign: primitive `(message, clé PEM) -> signature base64`.
        - key_id: identifiant de clé publié dans `keyid`.
        """
        self.key_provider = key_provider
        self._sign = sign
        self.key_id = key_id

    def signature_for(self, payload_json: str, expect_signature: bool) -> str | None:
        """Retourne la valeur d'en-tête `expo-signature`, ou None si la signature n'est pas demandée.

        Raises:
            SigningKeyMissingError: signature demandée sans clé privée configurée.
        """
        if not expect_signature:
            return None
        private_key = self.key_provider.get_private_key()
        if not private_key:
            log.warning("signing_key_missing")
            raise SigningKeyMissingError()
        header = Dictionary()
        header["sig"] = self._sign(payload_json, private_key)
        header["keyid"] = self.key_id
        return str(header)

    def part_headers(self, payload_json: str, expect_signature: bool) -> dict[str, str]:
        """En-têtes supplémentaires de la partie portant la charge utile."""
        signature = self.signature_for(payload_json, expect_signature)
        return {HEADER_SIGNATURE: signature} if signature else {}
