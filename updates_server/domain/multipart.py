"""
Mise en forme `multipart/mixed` des réponses du protocole.

Le framer est générique: il ignore tout de la sémantique manifeste/directive et sérialise N parties
nommées. La frontière générée ne figure jamais dans le contenu des parties.
"""

from __future__ import annotations

import secrets
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field

from updates_server.core.http_constants import JSON_UTF8_CONTENT_TYPE

CRLF = b"\r\n"
MAX_BOUNDARY_ATTEMPTS = 16


@dataclass(frozen=True)
class MultipartPart:
    """Partie nommée d'un corps multipart."""

    name: str
    body: str
    content_type: str = JSON_UTF8_CONTENT_TYPE
    headers: Mapping[str, str] = field(default_factory=dict)

    def header_lines(self) -> list[str]:
        escaped_name = self.name.replace("\\", "\\\\").replace('"', '\\"')
        lines = [
            f'Content-Disposition: form-data; name="{escaped_name}"',
            f"Content-Type: {self.content_type}",
        ]
        lines.extend(f"{key}: {value}" for key, value in self.headers.items())
        for line in lines:
            if "\r" in line or "\n" in line:
                raise ValueError(f"invalid header in multipart part {self.name!r}")
        return lines


@dataclass(frozen=True)
class FramedBody:
    """Corps multipart complet et sa frontière."""

    body: bytes
    boundary: str

    @property
    def content_type(self) -> str:
        return f"multipart/mixed; boundary={self.boundary}"


def generate_boundary() -> str:
    return "-" * 26 + secrets.token_hex(12)


def _render_part(part: MultipartPart) -> bytes:
    head = CRLF.join(line.encode("utf-8") for line in part.header_lines())
    return head + CRLF + CRLF + part.body.encode("utf-8")


def frame_parts(
    parts: Sequence[MultipartPart],
    boundary_factory: Callable[[], str] = generate_boundary,
) -> FramedBody:
    """Sérialise `parts` dans l'ordre en un corps `multipart/mixed`.

    Args:
        parts: parties à sérialiser (au moins une).
        boundary_factory: générateur de frontières, rappelé tant qu'une collision est détectée.

    Returns:
        FramedBody: corps encodé et frontière; `content_type` donne la valeur de l'en-tête.
    """
    if not parts:
        raise ValueError("at least one multipart part is required")
    rendered = [_render_part(part) for part in parts]

    for _ in range(MAX_BOUNDARY_ATTEMPTS):
        boundary = boundary_factory()
        delimiter = boundary.encode("ascii")
        if not any(delimiter in chunk for chunk in rendered):
            break
    else:
        raise RuntimeError("unable to generate a non-colliding multipart boundary")

    body = b""
    for chunk in rendered:
        body += b"--" + delimiter + CRLF + chunk + CRLF
    body += b"--" + delimiter + b"--" + CRLF
    return FramedBody(body=body, boundary=boundary)
