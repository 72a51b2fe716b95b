"""Utilitaires de test: lecture des corps multipart produits par le moteur."""

from email.parser import BytesParser


def parse_multipart(body: bytes, content_type: str) -> list:
    """Découpe un corps multipart avec le parseur MIME de la stdlib.

    Returns:
        list: parties (`email.message.Message`) dans l'ordre du corps.
    """
    raw = b"Content-Type: " + content_type.encode("ascii") + b"\r\n\r\n" + body
    message = BytesParser().parsebytes(raw)
    assert message.is_multipart()
    return message.get_payload()


def part_name(part) -> str:
    return part.get_param("name", header="content-disposition")


def part_body(part) -> str:
    return part.get_payload(decode=True).rstrip(b"\r\n").decode("utf-8")
