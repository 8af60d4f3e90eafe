"""
Client TMDB pour la recuperation des images sources.

Implemente l'interface IImageProvider pour TMDB (The Movie Database).
Tous les appels passent par le FetchCache : les rafales de requetes pour un meme
media (plusieurs clients chargeant le meme poster) se reduisent a un seul appel
vers TMDB, et les resultats sont caches en memoire.

Usage:
    fetch_cache = FetchCache(MemoryCache(), SingleFlight())
    client = TMDBImagesClient(api_key="your_key", fetch_cache=fetch_cache)
    images = await client.fetch_candidates(27205, MediaKind.MOVIE)
    poster = await client.fetch_image(images.posters[0].file_path)
    await client.close()
"""

from typing import Any, Optional

import httpx
from loguru import logger

from artforge.adapters.api.cache import FetchCache
from artforge.adapters.api.retry import RateLimitError, request_with_retry
from artforge.core.entities.render_requests import MediaKind
from artforge.core.ports.api_clients import IImageProvider
from artforge.core.value_objects.artwork import ArtworkImages, ImageDescriptor
from artforge.utils.constants import TMDB_BASE_URL, TMDB_IMAGE_BASE_URL, ImageSize


class ImageProviderError(Exception):
    """Echec d'un appel au fournisseur d'images (reseau, 5xx, rate limit persistant)."""


class ProviderNotConfiguredError(ImageProviderError):
    """La cle API TMDB n'est pas configuree."""

    def __init__(self) -> None:
        super().__init__("TMDb API key is not configured.")


class TMDBImagesClient(IImageProvider):
    """
    Client API TMDB pour les images de films, series, saisons et episodes.

    Implemente IImageProvider avec:
    - Listing des images d'un media (posters, backdrops/stills, logos)
    - Telechargement des octets d'une image depuis le CDN TMDB
    - Cache memoire (6h resultats, 10 min resultats vides) et single-flight
    - Retry automatique sur rate limiting (429) et erreurs de transport

    Un 404 du fournisseur est un resultat vide legitime (cache avec le TTL court).
    Toute autre erreur leve ImageProviderError et n'est pas cachee.

    Attributes:
        TMDB_BASE_URL: URL de base de l'API TMDB v3
        TMDB_IMAGE_BASE_URL: URL de base du CDN d'images
    """

    TMDB_BASE_URL = TMDB_BASE_URL
    TMDB_IMAGE_BASE_URL = TMDB_IMAGE_BASE_URL

    def __init__(
        self,
        api_key: Optional[str],
        fetch_cache: FetchCache,
        max_attempts: int = 5,
        max_wait: int = 60,
    ) -> None:
        """
        Initialise le client TMDB.

        Args:
            api_key: Cle API TMDB (v3) ou Read Access Token (v4), None si non configuree
            fetch_cache: Cache TTL + single-flight partage par le processus
            max_attempts: Tentatives maximum par requete
            max_wait: Delai maximum entre deux tentatives en secondes
        """
        self._api_key = api_key
        self._fetch_cache = fetch_cache
        self._max_attempts = max_attempts
        self._max_wait = max_wait
        self._client: Optional[httpx.AsyncClient] = None
        self._image_client: Optional[httpx.AsyncClient] = None

    def _get_client(self) -> httpx.AsyncClient:
        """
        Retourne le client HTTP de l'API, le cree si necessaire (lazy init).

        Supporte les deux modes d'authentification TMDB:
        - API Key v3 (32 caracteres hex) : passe en parametre api_key
        - Read Access Token v4 (long JWT) : passe en header Bearer

        Raises:
            ProviderNotConfiguredError: si aucune cle n'est configuree
        """
        if not self._api_key:
            logger.warning("Cle API TMDB non configuree, listing des images impossible")
            raise ProviderNotConfiguredError()

        if self._client is None or self._client.is_closed:
            is_v4_token = len(self._api_key) > 40

            headers = {"Accept": "application/json"}
            params = {}

            if is_v4_token:
                headers["Authorization"] = f"Bearer {self._api_key}"
            else:
                params["api_key"] = self._api_key

            self._client = httpx.AsyncClient(
                base_url=self.TMDB_BASE_URL,
                headers=headers,
                params=params,
                timeout=30.0,
            )
        return self._client

    def _get_image_client(self) -> httpx.AsyncClient:
        """Client HTTP du CDN d'images (sans authentification)."""
        if self._image_client is None or self._image_client.is_closed:
            self._image_client = httpx.AsyncClient(
                base_url=self.TMDB_IMAGE_BASE_URL,
                timeout=60.0,
                follow_redirects=True,
            )
        return self._image_client

    @property
    def source(self) -> str:
        """Retourne l'identifiant de la source API."""
        return "tmdb"

    def get_image_url(self, file_path: str, size: str = ImageSize.ORIGINAL) -> str:
        """Construit l'URL publique d'une image TMDB."""
        return f"{self.TMDB_IMAGE_BASE_URL}/{size}{file_path}"

    async def fetch_image(self, file_path: str, size: str = ImageSize.ORIGINAL) -> bytes:
        """
        Telecharge une image depuis le CDN TMDB.

        Args:
            file_path: Chemin TMDB de l'image (ex: "/abc.jpg")
            size: Taille demandee (defaut: original)

        Returns:
            Octets de l'image, vides si TMDB repond 404

        Raises:
            ValueError: si file_path est vide
            ImageProviderError: en cas d'echec du telechargement
        """
        if not file_path:
            raise ValueError("File path cannot be null or empty.")

        cache_key = f"tmdb:image:{size}:{file_path}"
        return await self._fetch_cache.run(
            cache_key, lambda: self._download_image(file_path, size)
        )

    async def fetch_candidates(
        self,
        tmdb_id: int,
        media_kind: MediaKind,
        season_number: Optional[int] = None,
        episode_number: Optional[int] = None,
    ) -> ArtworkImages:
        """
        Liste les images d'un media.

        Les stills d'episode sont renvoyees comme backdrops et les posters
        de saison comme posters. Une saison sans numero, ou un episode sans
        numero de saison/episode, donne un resultat vide.

        Args:
            tmdb_id: ID TMDB du film ou de la serie
            media_kind: Type de media
            season_number: Numero de saison (saisons et episodes)
            episode_number: Numero d'episode (episodes)

        Returns:
            ArtworkImages (vide si non trouve)
        """
        cache_key = (
            f"tmdb:images:{season_number or 0}:{episode_number or 0}"
            f":{media_kind.value}:{tmdb_id}"
        )
        return await self._fetch_cache.run(
            cache_key,
            lambda: self._download_candidates(
                tmdb_id, media_kind, season_number, episode_number
            ),
        )

    async def close(self) -> None:
        """Ferme les clients HTTP."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
        if self._image_client is not None and not self._image_client.is_closed:
            await self._image_client.aclose()

    async def _download_image(self, file_path: str, size: str) -> bytes:
        client = self._get_image_client()
        url = f"/{size}{file_path}"
        response = await self._request(client, url)

        if response.status_code == 404:
            logger.warning(f"Image TMDB introuvable: {size}{file_path}")
            return b""
        self._raise_for_status(response, url)
        return response.content

    async def _download_candidates(
        self,
        tmdb_id: int,
        media_kind: MediaKind,
        season_number: Optional[int],
        episode_number: Optional[int],
    ) -> ArtworkImages:
        path = self._images_path(tmdb_id, media_kind, season_number, episode_number)
        if path is None:
            return ArtworkImages()

        client = self._get_client()
        response = await self._request(client, path)

        if response.status_code == 404:
            logger.warning(
                f"Aucune image trouvee pour {media_kind.value} avec l'ID TMDB {tmdb_id}"
            )
            return ArtworkImages()
        self._raise_for_status(response, path)

        data = response.json()
        # Les stills d'episode sont exposees comme backdrops
        backdrops = data.get("stills") if media_kind == MediaKind.TV_EPISODE else data.get("backdrops")
        return ArtworkImages(
            posters=self._to_descriptors(data.get("posters")),
            backdrops=self._to_descriptors(backdrops),
            logos=self._to_descriptors(data.get("logos")),
        )

    @staticmethod
    def _images_path(
        tmdb_id: int,
        media_kind: MediaKind,
        season_number: Optional[int],
        episode_number: Optional[int],
    ) -> Optional[str]:
        if media_kind == MediaKind.MOVIE:
            return f"/movie/{tmdb_id}/images"
        if media_kind == MediaKind.TV_SHOW:
            return f"/tv/{tmdb_id}/images"
        if media_kind == MediaKind.TV_SEASON and season_number is not None:
            return f"/tv/{tmdb_id}/season/{season_number}/images"
        if (
            media_kind == MediaKind.TV_EPISODE
            and season_number is not None
            and episode_number is not None
        ):
            return f"/tv/{tmdb_id}/season/{season_number}/episode/{episode_number}/images"
        return None

    @staticmethod
    def _to_descriptors(items: Optional[list[dict[str, Any]]]) -> tuple[ImageDescriptor, ...]:
        return tuple(
            ImageDescriptor(
                file_path=item["file_path"],
                width=item.get("width") or 0,
                height=item.get("height") or 0,
                language=item.get("iso_639_1"),
            )
            for item in items or []
            if item.get("file_path")
        )

    async def _request(self, client: httpx.AsyncClient, url: str) -> httpx.Response:
        try:
            return await request_with_retry(
                client,
                "GET",
                url,
                max_attempts=self._max_attempts,
                max_wait=self._max_wait,
            )
        except (httpx.HTTPError, RateLimitError) as e:
            logger.error(f"Echec de l'appel TMDB {url}: {e}")
            raise ImageProviderError(f"TMDB request failed: {url}") from e

    @staticmethod
    def _raise_for_status(response: httpx.Response, url: str) -> None:
        if response.is_error:
            logger.error(f"TMDB a repondu {response.status_code} pour {url}")
            raise ImageProviderError(
                f"TMDB request failed with status {response.status_code}: {url}"
            )
