"""Erreurs métier du serveur de mises à jour.

Chaque erreur porte le statut HTTP sous lequel le moteur de résolution la publie. Le moteur est le
seul endroit qui convertit ces erreurs en réponses `{"error": <message>}`.
"""

from __future__ import annotations

from updates_server.core.http_constants import HTTP_BAD_REQUEST, HTTP_NOT_FOUND


class UpdateServerError(Exception):
    """Erreur de base, convertie en réponse JSON par le moteur."""

    status_code: int = HTTP_NOT_FOUND

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidRequestError(UpdateServerError):
    """En-tête ou paramètre de requête absent ou invalide."""

    status_code = HTTP_BAD_REQUEST


class BundleNotFoundError(UpdateServerError):
    """Aucun bundle publié pour la version de runtime demandée."""


class BundleMetadataError(UpdateServerError):
    """Métadonnées du bundle illisibles ou incomplètes."""


class AssetNotFoundError(UpdateServerError):
    """Asset inexistant ou hors du répertoire de la version de runtime."""


class SigningKeyMissingError(UpdateServerError):
    """Signature demandée alors qu'aucune clé privée n'a été fournie au démarrage."""

    status_code = HTTP_BAD_REQUEST

    def __init__(
        self, message: str = "Code signing requested but no key supplied when starting server."
    ) -> None:
        super().__init__(message)


class UnsupportedProtocolVersionError(UpdateServerError):
    """Directive demandée avec une version de protocole qui ne la connaît pas.

    Le statut 404 (et non 400) reprend le comportement historique du serveur.
    """
