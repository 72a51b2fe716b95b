"""Dérivation déterministe d'identifiants de mise à jour à partir d'empreintes SHA-256."""

import hashlib

UUID_HEX_LENGTH = 32


def convert_sha256_hash_to_uuid(value: str) -> str:
    """Met en forme les 32 premiers caractères hexadécimaux d'une empreinte en UUID (8-4-4-4-12)."""
    if len(value) < UUID_HEX_LENGTH:
        raise ValueError("SHA-256 hex digest expected")
    return f"{value[0:8]}-{value[8:12]}-{value[12:16]}-{value[16:20]}-{value[20:32]}"


def sha256_hex(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()
