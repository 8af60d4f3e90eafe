"""
Tests for TMDBImagesClient - TMDB images API client.

Uses respx to mock httpx calls and verifies:
- Image listing for movies, shows, seasons and episodes (stills as backdrops)
- Image download from the CDN, 404 as an empty result
- Results are cached: repeated calls hit TMDB once
- Failures raise ImageProviderError and are not cached
- Missing API key raises ProviderNotConfiguredError
"""

import asyncio

import httpx
import pytest
import respx

from artforge.adapters.api.cache import FetchCache
from artforge.adapters.api.tmdb_images_client import (
    ImageProviderError,
    ProviderNotConfiguredError,
    TMDBImagesClient,
)
from artforge.core.entities.render_requests import MediaKind
from artforge.core.ports.api_clients import IImageProvider
from artforge.core.value_objects.artwork import ArtworkImages, ImageDescriptor
from tests.fixtures.tmdb_images import (
    TMDB_EPISODE_IMAGES_RESPONSE,
    TMDB_MOVIE_IMAGES_RESPONSE,
    TMDB_SEASON_IMAGES_RESPONSE,
)

API = "https://api.themoviedb.org/3"
CDN = "https://image.tmdb.org/t/p"


@pytest.fixture
def tmdb_client(fetch_cache: FetchCache) -> TMDBImagesClient:
    """TMDBImagesClient with an isolated cache and a single attempt per request."""
    return TMDBImagesClient(api_key="test_api_key", fetch_cache=fetch_cache, max_attempts=1)


class TestTMDBImagesClientInterface:
    """TMDBImagesClient implements IImageProvider."""

    def test_implements_interface(self, tmdb_client: TMDBImagesClient) -> None:
        assert isinstance(tmdb_client, IImageProvider)

    def test_source_property_returns_tmdb(self, tmdb_client: TMDBImagesClient) -> None:
        assert tmdb_client.source == "tmdb"

    def test_get_image_url(self, tmdb_client: TMDBImagesClient) -> None:
        assert tmdb_client.get_image_url("/abc.png") == f"{CDN}/original/abc.png"
        assert tmdb_client.get_image_url("/abc.png", "w500") == f"{CDN}/w500/abc.png"


class TestFetchCandidates:
    """Tests for fetch_candidates()."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_movie_images(self, tmdb_client: TMDBImagesClient) -> None:
        """Movie images are mapped to descriptors, empty file paths skipped."""
        respx.get(f"{API}/movie/27205/images").mock(
            return_value=httpx.Response(200, json=TMDB_MOVIE_IMAGES_RESPONSE)
        )

        images = await tmdb_client.fetch_candidates(27205, MediaKind.MOVIE)

        assert images.posters == (
            ImageDescriptor("/poster-neutral.jpg", 2000, 3000, None),
            ImageDescriptor("/poster-en.jpg", 1000, 1500, "en"),
        )
        assert len(images.backdrops) == 1
        assert images.logos[0] == ImageDescriptor("/logo-en.png", 800, 300, "en")

    @pytest.mark.asyncio
    @respx.mock
    async def test_v3_key_sent_as_query_param(self, tmdb_client: TMDBImagesClient) -> None:
        """A short key is sent as the api_key query parameter."""
        route = respx.get(f"{API}/tv/1399/images").mock(
            return_value=httpx.Response(200, json=TMDB_MOVIE_IMAGES_RESPONSE)
        )

        await tmdb_client.fetch_candidates(1399, MediaKind.TV_SHOW)

        request = route.calls.last.request
        assert request.url.params["api_key"] == "test_api_key"
        assert "Authorization" not in request.headers

    @pytest.mark.asyncio
    @respx.mock
    async def test_v4_token_sent_as_bearer(self, fetch_cache: FetchCache) -> None:
        """A long token is sent as a Bearer header."""
        token = "eyJ" + "a" * 60
        client = TMDBImagesClient(api_key=token, fetch_cache=fetch_cache, max_attempts=1)
        route = respx.get(f"{API}/movie/1/images").mock(
            return_value=httpx.Response(200, json=TMDB_MOVIE_IMAGES_RESPONSE)
        )

        await client.fetch_candidates(1, MediaKind.MOVIE)

        request = route.calls.last.request
        assert request.headers["Authorization"] == f"Bearer {token}"
        assert "api_key" not in request.url.params

    @pytest.mark.asyncio
    @respx.mock
    async def test_season_images(self, tmdb_client: TMDBImagesClient) -> None:
        """Season posters come from the season endpoint."""
        respx.get(f"{API}/tv/1399/season/2/images").mock(
            return_value=httpx.Response(200, json=TMDB_SEASON_IMAGES_RESPONSE)
        )

        images = await tmdb_client.fetch_candidates(
            1399, MediaKind.TV_SEASON, season_number=2
        )

        assert [p.file_path for p in images.posters] == ["/season2.jpg"]

    @pytest.mark.asyncio
    @respx.mock
    async def test_episode_stills_exposed_as_backdrops(
        self, tmdb_client: TMDBImagesClient
    ) -> None:
        """Episode stills are returned as backdrops."""
        respx.get(f"{API}/tv/1399/season/1/episode/3/images").mock(
            return_value=httpx.Response(200, json=TMDB_EPISODE_IMAGES_RESPONSE)
        )

        images = await tmdb_client.fetch_candidates(
            1399, MediaKind.TV_EPISODE, season_number=1, episode_number=3
        )

        assert [b.file_path for b in images.backdrops] == ["/still-1.jpg", "/still-2.jpg"]
        assert images.posters == ()

    @pytest.mark.asyncio
    async def test_season_without_number_is_empty(self, tmdb_client: TMDBImagesClient) -> None:
        """A season without number gives an empty result without calling TMDB."""
        images = await tmdb_client.fetch_candidates(1399, MediaKind.TV_SEASON)
        assert images == ArtworkImages()

    @pytest.mark.asyncio
    @respx.mock
    async def test_404_is_empty_result(self, tmdb_client: TMDBImagesClient) -> None:
        """TMDB 404 gives an empty result."""
        respx.get(f"{API}/movie/999999/images").mock(return_value=httpx.Response(404))

        images = await tmdb_client.fetch_candidates(999999, MediaKind.MOVIE)

        assert not images

    @pytest.mark.asyncio
    @respx.mock
    async def test_results_are_cached(self, tmdb_client: TMDBImagesClient) -> None:
        """Repeated calls for the same media hit TMDB once."""
        route = respx.get(f"{API}/movie/27205/images").mock(
            return_value=httpx.Response(200, json=TMDB_MOVIE_IMAGES_RESPONSE)
        )

        first = await tmdb_client.fetch_candidates(27205, MediaKind.MOVIE)
        second = await tmdb_client.fetch_candidates(27205, MediaKind.MOVIE)

        assert first == second
        assert route.call_count == 1

    @pytest.mark.asyncio
    @respx.mock
    async def test_concurrent_calls_hit_tmdb_once(self, tmdb_client: TMDBImagesClient) -> None:
        """Concurrent calls for the same media collapse into one request."""
        route = respx.get(f"{API}/movie/27205/images").mock(
            return_value=httpx.Response(200, json=TMDB_MOVIE_IMAGES_RESPONSE)
        )

        results = await asyncio.gather(
            *(tmdb_client.fetch_candidates(27205, MediaKind.MOVIE) for _ in range(8))
        )

        assert len({id(r) for r in results}) == 1
        assert route.call_count == 1

    @pytest.mark.asyncio
    @respx.mock
    async def test_server_error_raises_and_is_not_cached(
        self, tmdb_client: TMDBImagesClient
    ) -> None:
        """A 5xx raises ImageProviderError; the next call retries."""
        route = respx.get(f"{API}/movie/27205/images").mock(
            side_effect=[
                httpx.Response(503),
                httpx.Response(200, json=TMDB_MOVIE_IMAGES_RESPONSE),
            ]
        )

        with pytest.raises(ImageProviderError):
            await tmdb_client.fetch_candidates(27205, MediaKind.MOVIE)

        images = await tmdb_client.fetch_candidates(27205, MediaKind.MOVIE)
        assert images.posters
        assert route.call_count == 2

    @pytest.mark.asyncio
    @respx.mock
    async def test_transport_error_wrapped(self, tmdb_client: TMDBImagesClient) -> None:
        """Network errors are wrapped in ImageProviderError."""
        respx.get(f"{API}/movie/27205/images").mock(
            side_effect=httpx.ConnectError("connection refused")
        )

        with pytest.raises(ImageProviderError) as exc_info:
            await tmdb_client.fetch_candidates(27205, MediaKind.MOVIE)
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

    @pytest.mark.asyncio
    async def test_missing_api_key(self, fetch_cache: FetchCache) -> None:
        """Without API key, listing raises ProviderNotConfiguredError."""
        client = TMDBImagesClient(api_key=None, fetch_cache=fetch_cache)

        with pytest.raises(ProviderNotConfiguredError):
            await client.fetch_candidates(27205, MediaKind.MOVIE)


class TestFetchImage:
    """Tests for fetch_image()."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_downloads_bytes(self, tmdb_client: TMDBImagesClient) -> None:
        """Image bytes are downloaded from the CDN at the requested size."""
        route = respx.get(f"{CDN}/original/poster.jpg").mock(
            return_value=httpx.Response(200, content=b"\xff\xd8jpeg")
        )

        data = await tmdb_client.fetch_image("/poster.jpg")

        assert data == b"\xff\xd8jpeg"
        assert "api_key" not in route.calls.last.request.url.params

    @pytest.mark.asyncio
    @respx.mock
    async def test_works_without_api_key(self, fetch_cache: FetchCache) -> None:
        """The CDN does not require an API key."""
        client = TMDBImagesClient(api_key=None, fetch_cache=fetch_cache, max_attempts=1)
        respx.get(f"{CDN}/w500/logo.png").mock(
            return_value=httpx.Response(200, content=b"png")
        )

        assert await client.fetch_image("/logo.png", "w500") == b"png"

    @pytest.mark.asyncio
    @respx.mock
    async def test_404_returns_empty_bytes_and_is_cached(
        self, tmdb_client: TMDBImagesClient
    ) -> None:
        """A missing image is an empty result, cached with the short TTL."""
        route = respx.get(f"{CDN}/original/missing.jpg").mock(
            return_value=httpx.Response(404)
        )

        assert await tmdb_client.fetch_image("/missing.jpg") == b""
        assert await tmdb_client.fetch_image("/missing.jpg") == b""
        assert route.call_count == 1

    @pytest.mark.asyncio
    @respx.mock
    async def test_sizes_are_cached_separately(self, tmdb_client: TMDBImagesClient) -> None:
        """The cache key includes the size."""
        original = respx.get(f"{CDN}/original/p.jpg").mock(
            return_value=httpx.Response(200, content=b"big")
        )
        small = respx.get(f"{CDN}/w92/p.jpg").mock(
            return_value=httpx.Response(200, content=b"small")
        )

        assert await tmdb_client.fetch_image("/p.jpg") == b"big"
        assert await tmdb_client.fetch_image("/p.jpg", "w92") == b"small"
        assert original.call_count == 1
        assert small.call_count == 1

    @pytest.mark.asyncio
    @respx.mock
    async def test_server_error_raises(self, tmdb_client: TMDBImagesClient) -> None:
        """A 5xx from the CDN raises ImageProviderError."""
        respx.get(f"{CDN}/original/poster.jpg").mock(return_value=httpx.Response(500))

        with pytest.raises(ImageProviderError):
            await tmdb_client.fetch_image("/poster.jpg")

    @pytest.mark.asyncio
    async def test_empty_path_rejected(self, tmdb_client: TMDBImagesClient) -> None:
        """An empty path is a programming error."""
        with pytest.raises(ValueError):
            await tmdb_client.fetch_image("")


class TestClose:
    """Tests for close()."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_close_releases_clients(self, tmdb_client: TMDBImagesClient) -> None:
        respx.get(f"{CDN}/original/poster.jpg").mock(
            return_value=httpx.Response(200, content=b"x")
        )
        await tmdb_client.fetch_image("/poster.jpg")

        await tmdb_client.close()
        await tmdb_client.close()
