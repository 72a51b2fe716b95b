"""Middleware Starlette d'identification et de chronométrage des requêtes.

Ce module implémente un middleware qui propage l'en-tête X-Request-ID, l'attache au contexte
structlog pour corréler les logs du moteur de résolution, et publie la durée de traitement dans
X-Process-Time-ms.
"""

import time
from collections.abc import Callable
from uuid import uuid4

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

log = structlog.get_logger(__name__)


class RequestTracingMiddleware(BaseHTTPMiddleware):
    """Middleware pour identifier et chronométrer chaque requête HTTP.

    L'identifiant reçu du client est conservé; à défaut, un UUID est généré.
    """

    def __init__(
        self,
        app: ASGIApp,
        request_id_header: str = "X-Request-ID",
        timing_header: str = "X-Process-Time-ms",
    ) -> None:
        """Initialise le middleware avec les noms d'en-têtes spécifiés.

        Args:
            app: Application ASGI à wrapper.
            request_id_header: Nom de l'en-tête HTTP pour l'ID de requête.
            timing_header: Nom de l'en-tête HTTP pour le temps de traitement.
        """
        super().__init__(app)
        self.request_id_header = request_id_header
        self.timing_header = timing_header

    async def dispatch(self, request, call_next: Callable):
        """Traite une requête en l'identifiant et en mesurant sa durée.

        Args:
            request: Requête HTTP entrante.
            call_next: Fonction pour appeler le middleware suivant.

        Returns:
            Response: Réponse HTTP avec en-têtes d'identifiant et de durée ajoutés.
        """
        request_id = request.headers.get(self.request_id_header) or str(uuid4())
        structlog.contextvars.bind_contextvars(request_id=request_id)
        start = time.perf_counter()
        try:
            response = await call_next(request)
        finally:
            structlog.contextvars.unbind_contextvars("request_id")
        duration_ms = int((time.perf_counter() - start) * 1000)
        response.headers[self.request_id_header] = request_id
        response.headers[self.timing_header] = str(duration_ms)
        log.debug(
            "request_completed",
            request_id=request_id,
            path=request.url.path,
            status=response.status_code,
            duration_ms=duration_ms,
        )
        return response
