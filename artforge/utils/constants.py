"""
Constantes partagées de l'application.

Tailles d'images TMDB, presets de rendu par défaut et type MIME de sortie.
"""

TMDB_BASE_URL = "https://api.themoviedb.org/3"
TMDB_IMAGE_BASE_URL = "https://image.tmdb.org/t/p"


class ImageSize:
    """Tailles d'images acceptées par le CDN TMDB."""

    ORIGINAL = "original"

    # Posters
    POSTER_W92 = "w92"
    POSTER_W154 = "w154"
    POSTER_W185 = "w185"
    POSTER_W342 = "w342"
    POSTER_W500 = "w500"
    POSTER_W780 = "w780"

    # Logos
    LOGO_W45 = "w45"
    LOGO_W92 = "w92"
    LOGO_W154 = "w154"
    LOGO_W185 = "w185"
    LOGO_W300 = "w300"
    LOGO_W500 = "w500"

    # Backdrops
    BACKDROP_W300 = "w300"
    BACKDROP_W780 = "w780"
    BACKDROP_W1280 = "w1280"


# Presets par défaut attachés aux candidats
POSTER_DEFAULT_PRESET = "poster.default"
SEASON_DEFAULT_PRESET = "season.default"
THUMBNAIL_DEFAULT_PRESET = "thumbnail.default"
EPISODE_DEFAULT_PRESET = "episode.default"

JPEG_MIME_TYPE = "image/jpeg"

RENDER_ROUTE = "/render"
