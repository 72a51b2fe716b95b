"""
Point d'entrée du serveur de mises à jour (`python -m updates_server`).

Lance l'application FastAPI avec uvicorn sur l'hôte et le port configurés.
"""

import uvicorn

from updates_server.app.main import app
from updates_server.core.container import container


def main():
    """Démarre le serveur HTTP sans rechargement automatique."""
    settings = container.settings
    uvicorn.run(app, host=settings.APP_HOST, port=settings.APP_PORT, reload=False)


if __name__ == "__main__":
    main()
