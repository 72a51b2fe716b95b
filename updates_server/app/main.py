"""
Application principale FastAPI du serveur de mises à jour.

Ce module assemble les composants de l'application : middlewares, gestion des erreurs, routes du
protocole et métriques.

Responsabilités du module:
- Initialiser le logging structuré
- Construire l'application FastAPI avec son titre/debug
- Ajouter les middlewares (traçage, métriques Prometheus)
- Monter les routers (santé, manifeste/assets, métriques)
"""

from __future__ import annotations

from fastapi import FastAPI

from updates_server.api.errors import register_error_handlers
from updates_server.api.routes_health import router as health_router
from updates_server.api.routes_manifest import router as manifest_router
from updates_server.app.metrics import PrometheusMiddleware, metrics_router
from updates_server.core.container import container
from updates_server.core.logging import setup_logging
from updates_server.middlewares.tracing import RequestTracingMiddleware


def create_app() -> FastAPI:
    """
    Construit et retourne l'application FastAPI prête à l'usage.

    Étapes:
    - Configure le logging structuré (structlog)
    - Lit les paramètres d'exécution
    - Ajoute les middlewares de traçage et de métriques
    - Publie les routes de santé, du protocole et des métriques
    """
    setup_logging()
    settings = container.settings
    app = FastAPI(title=settings.APP_NAME, debug=settings.APP_DEBUG)
    register_error_handlers(app)
    app.add_middleware(PrometheusMiddleware)
    app.add_middleware(RequestTracingMiddleware)
    app.include_router(health_router)
    app.include_router(manifest_router)
    app.include_router(metrics_router)
    return app


app = create_app()
