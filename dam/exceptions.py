"""Errores de dominio compartidos por el almacén de registros y el storage."""

from __future__ import annotations


class DamError(Exception):
    """Base de todos los errores propios de la aplicación."""

    status_code = 500


class ValidationError(DamError):
    status_code = 400


class AssetNotFound(DamError):
    status_code = 404

    def __init__(self, asset_id: str) -> None:
        super().__init__(f"Asset with ID {asset_id} not found")
        self.asset_id = asset_id


class RemoteUnavailable(DamError):
    """Fallo al hablar con Google Sheets o Box, con el contexto de la operación."""

    status_code = 502

    def __init__(self, operation: str, cause: BaseException | str | None = None) -> None:
        reason = str(cause) if cause else "Unknown error"
        super().__init__(f"Failed to {operation}: {reason}")
        self.operation = operation
        self.cause = cause


class PermissionDenied(RemoteUnavailable):
    """El proveedor rechazó la operación por falta de autorización de la app."""

    status_code = 403


def _status_of(exc: BaseException) -> int | None:
    response = getattr(exc, "response", None)
    status = getattr(response, "status_code", None)
    if status is None:
        status = getattr(exc, "status_code", None) or getattr(exc, "code", None)
    try:
        return int(status) if status is not None else None
    except (TypeError, ValueError):
        return None


def classify_remote_error(
    operation: str, exc: BaseException, permission_hint: str | None = None
) -> RemoteUnavailable:
    """Envuelve un error de un colaborador remoto en el error de dominio adecuado."""

    if isinstance(exc, RemoteUnavailable):
        return exc
    if _status_of(exc) == 403:
        cause = f"{exc} ({permission_hint})" if permission_hint else exc
        return PermissionDenied(operation, cause)
    return RemoteUnavailable(operation, exc)


__all__ = [
    "DamError",
    "ValidationError",
    "AssetNotFound",
    "RemoteUnavailable",
    "PermissionDenied",
    "classify_remote_error",
]
