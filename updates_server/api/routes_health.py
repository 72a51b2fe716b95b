"""
Endpoint de santé pour vérifier la disponibilité du serveur de mises à jour.

Expose `/health` pour signaler l'état général de l'application et sa configuration de stockage.
"""

from fastapi import APIRouter

from updates_server.core.container import container

router = APIRouter(tags=["health"])


@router.get("/health")
def health():
    """Vérifie la disponibilité de l'API et la configuration du stockage et de la signature."""
    return {
        "status": "ok",
        "updates_dir": container.settings.UPDATES_DIR,
        "code_signing": bool(container.settings.PRIVATE_KEY_PATH),
    }
