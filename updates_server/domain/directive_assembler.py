"""Construction des directives (rollback / pas de mise à jour) pour un bundle ROLLBACK."""

from __future__ import annotations

from updates_server.domain.entities import (
    Directive,
    NoUpdateAvailableDirective,
    RequestContext,
    UpdateBundle,
)
from updates_server.domain.errors import InvalidRequestError, UnsupportedProtocolVersionError


class DirectiveAssembler:
    """Choisit entre directive de rollback et directive « pas de mise à jour ».

    Les directives n'existent pas en protocole 0. Le résultat est une valeur explicite (jamais une
    exception) pour le cas « pas de mise à jour ».
    """

    def __init__(self, store):
        self.store = store

    def assemble(self, ctx: RequestContext, bundle: UpdateBundle) -> Directive:
        """Retourne la directive à servir.

        Raises:
            UnsupportedProtocolVersionError: protocole 0.
            InvalidRequestError: en-tête `expo-embedded-update-id` absent.
        """
        if ctx.protocol_version == 0:
            raise UnsupportedProtocolVersionError("Rollbacks not supported on protocol version 0")
        if not ctx.embedded_update_id:
            raise InvalidRequestError("Invalid Expo-Embedded-Update-ID request header specified.")
        # Le client exécute déjà la version embarquée: rien à faire
        if ctx.current_update_id == ctx.embedded_update_id:
            return NoUpdateAvailableDirective()
        return self.store.create_rollback_directive(bundle)
