"""Generadores de identificadores para assets.

La unicidad es probabilística: marca de tiempo en milisegundos más un sufijo
aleatorio en base 36. No se comprueba contra la hoja antes de insertar.
"""

from __future__ import annotations

import secrets
import string
import time
from typing import Callable

IdGenerator = Callable[[], str]

_ALPHABET = string.digits + string.ascii_lowercase


def random_base36(length: int) -> str:
    return "".join(secrets.choice(_ALPHABET) for _ in range(length))


def generate_asset_id() -> str:
    return f"asset-{int(time.time() * 1000)}-{random_base36(7)}"


def generate_asset_key(filename: str) -> str:
    """Clave de almacenamiento ``assets/<ms>-<aleatorio>.<ext>`` para un archivo subido."""

    extension = filename.rsplit(".", 1)[-1] if "." in filename else filename
    return f"assets/{int(time.time() * 1000)}-{random_base36(13)}.{extension}"
