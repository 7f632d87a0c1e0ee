"""
Point d'entrée CLI de StreamVault.

Initialise le container DI, configure le logging et fournit les commandes CLI.
"""

import asyncio
import json
from pathlib import Path
from typing import Annotated

import typer
from loguru import logger
from rich.console import Console
from rich.table import Table

from .config import Settings
from .container import Container
from .core.entities import Role, Series
from .core.entities.base import validate_entity
from .core.errors import CatalogError
from .core.value_objects import SeriesPayload, UserCreate
from .infrastructure.persistence.atomic_writer import read_json
from .logging_config import configure_logging

__version__ = "0.1.0"

app = typer.Typer(
    name="streamvault",
    help="Catalogue auto-hébergé de métadonnées de streaming",
)
container = Container()
console = Console()


def get_config() -> Settings:
    """Récupère les paramètres de l'application depuis le container DI."""
    return container.config()


def _fail(message: str) -> None:
    console.print(f"[red]Erreur :[/red] {message}")
    raise typer.Exit(code=1)


@app.command()
def info() -> None:
    """Affiche la configuration actuelle."""
    config = get_config()
    logger.info("Configuration StreamVault")
    typer.echo(f"Données : {config.data_dir}")
    typer.echo(f"Hôtes autorisés : {', '.join(config.allowed_media_hosts)}")
    typer.echo(
        f"Verrous : {config.lock_retries} relances, "
        f"{config.lock_min_wait_ms}-{config.lock_max_wait_ms} ms"
    )
    typer.echo(
        f"Limite admin : {config.rate_limit_max_requests} requêtes / "
        f"{config.rate_limit_window_seconds} s"
    )
    typer.echo(f"Niveau de log : {config.log_level} ({config.log_path})")


@app.command()
def version() -> None:
    """Affiche les informations de version."""
    typer.echo(f"StreamVault v{__version__}")


@app.command()
def serve(
    host: Annotated[str, typer.Option(help="Adresse d'écoute")] = "0.0.0.0",
    port: Annotated[int, typer.Option(help="Port d'écoute")] = 8000,
    reload: Annotated[bool, typer.Option(help="Rechargement automatique")] = False,
) -> None:
    """Lance le serveur web StreamVault."""
    import uvicorn

    typer.echo(f"Démarrage du serveur sur {host}:{port}")
    uvicorn.run("src.web.app:app", host=host, port=port, reload=reload)


@app.command(name="create-user")
def create_user(
    username: Annotated[str, typer.Argument(help="Nom d'utilisateur")],
    password: Annotated[
        str,
        typer.Option(prompt=True, hide_input=True, confirmation_prompt=True, help="Mot de passe"),
    ],
    role: Annotated[Role, typer.Option(help="Rôle du compte")] = Role.USER,
) -> None:
    """Crée un compte (le premier administrateur se crée ainsi)."""
    try:
        payload = validate_entity(
            UserCreate, {"username": username, "password": password, "role": role}, {}, "Compte"
        )
        user = asyncio.run(container.user_service().create_user(payload))
    except CatalogError as e:
        _fail(str(e))
    console.print(f"[green]Compte créé :[/green] {user.username} ({user.role.value})")


def _summary(series_list: list[Series]) -> Table:
    table = Table(title="Séries importées")
    table.add_column("Slug", style="cyan")
    table.add_column("Saisons", justify="right")
    table.add_column("Épisodes", justify="right")
    for series in series_list:
        table.add_row(
            series.slug,
            str(len(series.seasons)),
            str(sum(len(season.episodes) for season in series.seasons)),
        )
    return table


async def _import_series(payloads: list[SeriesPayload]) -> list[Series]:
    service = container.series_service()
    return [await service.create_or_merge(payload) for payload in payloads]


@app.command(name="import-series")
def import_series(
    file: Annotated[
        Path,
        typer.Argument(exists=True, dir_okay=False, help="Fichier JSON (une série ou une liste)"),
    ],
) -> None:
    """
    Importe une ou plusieurs séries depuis un fichier JSON.

    Une série déjà présente (même slug) est fusionnée : les saisons et
    épisodes fournis complètent ou mettent à jour les existants, rien
    n'est supprimé.
    """
    try:
        data = read_json(file)
    except json.JSONDecodeError as e:
        _fail(f"{file.name} n'est pas un JSON valide : {e}")

    items = data if isinstance(data, list) else [data]
    try:
        payloads = [
            validate_entity(SeriesPayload, item, {}, f"Série #{index + 1}")
            for index, item in enumerate(items)
        ]
        imported = asyncio.run(_import_series(payloads))
    except CatalogError as e:
        _fail(str(e))
    console.print(_summary(imported))


def main() -> None:
    """Point d'entrée de l'application."""
    # Charge la configuration et configure le logging
    configure_logging(container.config())

    logger.info(f"Démarrage de StreamVault v{__version__}")

    # Lance la CLI
    app()


if __name__ == "__main__":
    main()
