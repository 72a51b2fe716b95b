"""Dépendances partagées pour les routes de l'API.

But du module
-------------
- Centraliser l'accès aux instances nécessaires aux endpoints (moteur de résolution, dépôt de
  bundles).
- Offrir un point de substitution pour les tests via `app.dependency_overrides`, sans toucher au
  conteneur global.
"""

from updates_server.core.container import container
from updates_server.domain.resolution import UpdateResolutionEngine
from updates_server.infra.storage.base import UpdateStore


def get_engine() -> UpdateResolutionEngine:
    return container.engine


def get_store() -> UpdateStore:
    return container.store
