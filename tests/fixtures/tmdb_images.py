"""
Reponses TMDB de test pour les endpoints /images.
"""

TMDB_MOVIE_IMAGES_RESPONSE = {
    "id": 27205,
    "posters": [
        {"file_path": "/poster-neutral.jpg", "width": 2000, "height": 3000, "iso_639_1": None},
        {"file_path": "/poster-en.jpg", "width": 1000, "height": 1500, "iso_639_1": "en"},
        {"file_path": "", "width": 500, "height": 750, "iso_639_1": None},
    ],
    "backdrops": [
        {"file_path": "/backdrop.jpg", "width": 3840, "height": 2160, "iso_639_1": None},
    ],
    "logos": [
        {"file_path": "/logo-en.png", "width": 800, "height": 300, "iso_639_1": "en"},
        {"file_path": "/logo-fr.svg", "width": 900, "height": 300, "iso_639_1": "fr"},
    ],
}

TMDB_SEASON_IMAGES_RESPONSE = {
    "id": 3625,
    "posters": [
        {"file_path": "/season2.jpg", "width": 1000, "height": 1500, "iso_639_1": None},
    ],
}

TMDB_EPISODE_IMAGES_RESPONSE = {
    "id": 63058,
    "stills": [
        {"file_path": "/still-1.jpg", "width": 1920, "height": 1080, "iso_639_1": None},
        {"file_path": "/still-2.jpg", "width": 1280, "height": 720, "iso_639_1": None},
    ],
}
