"""Classification d'un bundle publié: mise à jour normale ou retour à la version embarquée."""

from collections.abc import Iterable

from updates_server.domain.entities import UpdateType

ROLLBACK_MARKER = "rollback"


def classify_bundle(entries: Iterable[str]) -> UpdateType:
    """Retourne ROLLBACK si le bundle contient le marqueur `rollback`, NORMAL sinon."""
    return UpdateType.ROLLBACK if ROLLBACK_MARKER in set(entries) else UpdateType.NORMAL
