"""
Point d'entrée CLI d'ArtForge.

Initialise le container DI, configure le logging et fournit les commandes CLI :
- serve : lance le serveur web
- encode : construit l'URL de rendu d'une requête
- decode : affiche la requête contenue dans un jeton
- candidates : liste les illustrations candidates d'un média
"""

import asyncio
import json
from dataclasses import asdict
from typing import Annotated, Optional

import typer
from loguru import logger
from rich.console import Console
from rich.table import Table

from .config import Settings
from .container import Container
from .core.entities.render_requests import (
    EpisodeThumbnailRenderRequest,
    LogoSource,
    LogoSourceKind,
    MediaKind,
    PosterRenderRequest,
    SeasonPosterRenderRequest,
    ThumbnailRenderRequest,
)
from .logging_config import configure_logging
from .services.artwork import ArtworkType
from .services.token_protection import TokenError

app = typer.Typer(
    name="artforge",
    help="Rendu d'illustrations a partir de jetons signes",
)
container = Container()
console = Console()


def get_config() -> Settings:
    """Récupère les paramètres de l'application depuis le container DI."""
    return container.config()


@app.command()
def info() -> None:
    """Affiche la configuration actuelle."""
    config = get_config()
    typer.echo(f"URL publique : {config.public_base_url or '(relative)'}")
    typer.echo(f"API TMDB : {'activée' if config.tmdb_enabled else 'désactivée'}")
    typer.echo(f"Secret des jetons : {'défini' if config.token_secret else 'éphémère'}")
    typer.echo(f"Polices : {config.fonts_dir} (superposition : {config.overlay_font})")
    typer.echo(f"Niveau de log : {config.log_level}")


@app.command()
def encode(
    kind: Annotated[
        str,
        typer.Argument(help="Variante : poster, season, thumbnail ou episode"),
    ],
    tmdb_id: Annotated[int, typer.Argument(help="ID TMDB du film ou de la série")],
    file_path: Annotated[str, typer.Argument(help="Chemin TMDB de l'image source")],
    media_kind: Annotated[
        MediaKind, typer.Option("--media-kind", "-m", help="movie ou tv")
    ] = MediaKind.MOVIE,
    logo: Annotated[
        Optional[str], typer.Option("--logo", help="Chemin TMDB du logo")
    ] = None,
    local_logo: Annotated[
        Optional[str], typer.Option("--local-logo", help="Chemin local du logo")
    ] = None,
    season: Annotated[
        Optional[int], typer.Option("--season", "-s", help="Numéro de saison")
    ] = None,
    episode: Annotated[
        Optional[int], typer.Option("--episode", "-e", help="Numéro d'épisode")
    ] = None,
    name: Annotated[
        Optional[str], typer.Option("--name", help="Titre de l'épisode")
    ] = None,
    preset: Annotated[Optional[str], typer.Option(help="Preset visuel")] = None,
) -> None:
    """Construit l'URL de rendu signée d'une requête."""
    logo_source = None
    if local_logo:
        logo_source = LogoSource(kind=LogoSourceKind.LOCAL, file_path=local_logo)
    elif logo:
        logo_source = LogoSource(kind=LogoSourceKind.TMDB, file_path=logo)

    if kind in ("poster", "thumbnail"):
        if logo_source is None:
            console.print("[red]--logo ou --local-logo est requis.[/red]")
            raise typer.Exit(code=1)
        request_type = PosterRenderRequest if kind == "poster" else ThumbnailRenderRequest
        path_field = "poster_file_path" if kind == "poster" else "thumbnail_file_path"
        request = request_type(
            media_kind=media_kind,
            tmdb_id=tmdb_id,
            logo_source=logo_source,
            preset=preset,
            **{path_field: file_path},
        )
    elif kind == "season":
        if season is None:
            console.print("[red]--season est requis.[/red]")
            raise typer.Exit(code=1)
        request = SeasonPosterRenderRequest(
            tmdb_id=tmdb_id,
            season_number=season,
            season_poster_file_path=file_path,
            preset=preset,
        )
    elif kind == "episode":
        if episode is None:
            console.print("[red]--episode est requis.[/red]")
            raise typer.Exit(code=1)
        request = EpisodeThumbnailRenderRequest(
            tmdb_id=tmdb_id,
            thumbnail_file_path=file_path,
            episode_number=episode,
            episode_name=name,
            preset=preset,
        )
    else:
        console.print(f"[red]Variante inconnue : {kind}[/red]")
        raise typer.Exit(code=1)

    typer.echo(container.url_builder().build_url(request))


@app.command()
def decode(
    token: Annotated[str, typer.Argument(help="Jeton de rendu")],
) -> None:
    """Affiche la requête contenue dans un jeton (même secret requis)."""
    try:
        request = container.codec().decode(token)
    except TokenError as e:
        console.print(f"[red]Jeton invalide ({type(e).__name__}) : {e}[/red]")
        raise typer.Exit(code=1)

    typer.echo(json.dumps(asdict(request), indent=2, default=str, ensure_ascii=False))


@app.command()
def candidates(
    tmdb_id: Annotated[int, typer.Argument(help="ID TMDB du film ou de la série")],
    media_kind: Annotated[
        MediaKind, typer.Option("--media-kind", "-m", help="movie, tv, season ou episode")
    ] = MediaKind.MOVIE,
    artwork_type: Annotated[
        ArtworkType, typer.Option("--type", "-t", help="poster, thumbnail ou logo")
    ] = ArtworkType.POSTER,
    season: Annotated[Optional[int], typer.Option("--season", "-s")] = None,
    episode: Annotated[Optional[int], typer.Option("--episode", "-e")] = None,
    name: Annotated[Optional[str], typer.Option("--name")] = None,
    language: Annotated[
        Optional[str], typer.Option("--language", "-l", help="Langue des logos (ISO 639-1)")
    ] = None,
    local_logo: Annotated[Optional[str], typer.Option("--local-logo")] = None,
) -> None:
    """Liste les illustrations candidates d'un média."""
    if not get_config().tmdb_enabled:
        console.print("[red]Cle API TMDB non configuree (ARTFORGE_TMDB_API_KEY).[/red]")
        raise typer.Exit(code=1)

    results = asyncio.run(
        _candidates_async(
            tmdb_id, media_kind, artwork_type, season, episode, name, language, local_logo
        )
    )

    if not results:
        console.print("[yellow]Aucun candidat.[/yellow]")
        return

    table = Table(title=f"Candidats {media_kind.value} {tmdb_id} ({artwork_type.value})")
    table.add_column("ID", overflow="fold")
    table.add_column("Taille", justify="right")
    table.add_column("Langue")
    table.add_column("URL", overflow="fold")
    for candidate in results:
        table.add_row(
            candidate.id,
            f"{candidate.width}x{candidate.height}",
            candidate.language or "-",
            candidate.url,
        )
    console.print(table)


async def _candidates_async(
    tmdb_id: int,
    media_kind: MediaKind,
    artwork_type: ArtworkType,
    season: Optional[int],
    episode: Optional[int],
    name: Optional[str],
    language: Optional[str],
    local_logo: Optional[str],
):
    """Implementation async de la commande candidates."""
    try:
        return await container.artwork_candidate_service().get_candidates(
            tmdb_id,
            media_kind,
            artwork_type,
            season_number=season,
            episode_number=episode,
            episode_name=name,
            language=language,
            local_logo_path=local_logo,
        )
    finally:
        await container.tmdb_client().close()


@app.command()
def serve(
    host: Annotated[str, typer.Option(help="Adresse d'écoute")] = "0.0.0.0",
    port: Annotated[int, typer.Option(help="Port d'écoute")] = 8000,
    reload: Annotated[bool, typer.Option(help="Rechargement automatique")] = False,
) -> None:
    """Lance le serveur web ArtForge."""
    import uvicorn

    typer.echo(f"Démarrage du serveur sur {host}:{port}")
    uvicorn.run("artforge.web.app:app", host=host, port=port, reload=reload)


def main() -> None:
    """Point d'entrée de l'application."""
    configure_logging(container.config())
    logger.info("Démarrage d'ArtForge")

    app()


if __name__ == "__main__":
    main()
