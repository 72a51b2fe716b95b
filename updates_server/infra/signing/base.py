"""
Interface de base pour les fournisseurs de clé de signature.

Ce module définit l'interface abstraite que doivent implémenter les sources de clé privée utilisées
pour signer manifestes et directives.
"""

from abc import ABC, abstractmethod


class KeyProvider(ABC):
    """Interface abstraite pour les fournisseurs de clé privée."""

    @abstractmethod
    def get_private_key(self) -> str | None:
        """Retourne la clé privée au format PEM, ou None si aucune clé n'est fournie."""
        ...
