"""
Clé de signature RSA chargée depuis un fichier PEM et primitive RSA-SHA256.

La clé n'est jamais journalisée; seul le chemin configuré apparaît dans les logs.
"""

from __future__ import annotations

import base64
from pathlib import Path

import structlog
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from updates_server.infra.signing.base import KeyProvider

log = structlog.get_logger(__name__)


class PemFileKeyProvider(KeyProvider):
    """Lit la clé privée depuis `PRIVATE_KEY_PATH` à chaque demande de signature."""

    def __init__(self, path: str | None) -> None:
        self.path = path

    def get_private_key(self) -> str | None:
        if not self.path:
            return None
        key_path = Path(self.path)
        log.debug("signing_key_load", path=str(key_path))
        return key_path.read_text(encoding="utf-8")


def sign_rsa_sha256(message: str, private_key_pem: str) -> str:
    """Signe `message` (UTF-8) en RSA PKCS#1 v1.5 / SHA-256 et retourne la signature en base64."""
    key = serialization.load_pem_private_key(private_key_pem.encode("utf-8"), password=None)
    if not isinstance(key, rsa.RSAPrivateKey):
        raise TypeError("RSA private key expected")
    signature = key.sign(message.encode("utf-8"), padding.PKCS1v15(), hashes.SHA256())
    return base64.b64encode(signature).decode("ascii")
