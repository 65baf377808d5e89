"""Comandos personalizados para la CLI de Flask."""

from __future__ import annotations

import json
import os

import click
from flask.cli import with_appcontext

from dam.config import REQUIRED_ENV_VARS
from dam.exceptions import DamError
from dam.services.asset_service import get_repository, remove_asset


@click.command("init-sheet")
@with_appcontext
def init_sheet() -> None:
    """Crear la pestaña de registros y su cabecera si no existen."""

    repository = get_repository()
    try:
        repository.ensure_schema()
        message = repository.check_connection()
    except DamError as exc:
        click.echo(f"Error: {exc}", err=True)
        raise SystemExit(1)
    click.echo(message)


@click.command("check-env")
def check_env() -> None:
    """Listar las variables obligatorias que faltan."""

    missing = [name for name in REQUIRED_ENV_VARS if not os.getenv(name)]
    if missing:
        for name in missing:
            click.echo(f"Falta {name}", err=True)
        raise SystemExit(1)
    click.echo("Variables de entorno completas")


@click.command("list-assets")
@click.option("--page-size", default=20, show_default=True, type=click.IntRange(min=1))
@click.option("--offset", default=None, help="Token devuelto por la página anterior.")
@click.option("--as-json", "as_json", is_flag=True, default=False)
@with_appcontext
def list_assets(page_size: int, offset: str | None, as_json: bool) -> None:
    """Mostrar los registros más recientes."""

    try:
        page = get_repository().list(page_size, offset)
    except DamError as exc:
        click.echo(f"Error: {exc}", err=True)
        raise SystemExit(1)

    if as_json:
        click.echo(json.dumps(page.to_dict(), ensure_ascii=False))
        return

    for asset in page.records:
        click.echo(f"{asset.id}\t{asset.uploaded_at}\t{asset.event}\t{asset.original_filename}")
    if page.next_offset:
        click.echo(f"next offset: {page.next_offset}")


@click.command("delete-asset")
@click.argument("asset_id")
@click.option("--yes", is_flag=True, default=False, help="No pedir confirmación.")
@with_appcontext
def delete_asset(asset_id: str, yes: bool) -> None:
    """Borrar un registro y su archivo en Box."""

    if not yes:
        click.confirm(f"¿Borrar {asset_id}?", abort=True)
    try:
        result = remove_asset(asset_id)
    except DamError as exc:
        click.echo(f"Error: {exc}", err=True)
        raise SystemExit(1)

    click.echo(f"Asset borrado: {asset_id}")
    if result.get("storageError"):
        click.echo(f"Archivo en Box no borrado: {result['storageError']}", err=True)


def register_commands(app) -> None:
    for command in (init_sheet, check_env, list_assets, delete_asset):
        if command.name not in app.cli.commands:
            app.cli.add_command(command)
