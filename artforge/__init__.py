"""
ArtForge - Rendu d'illustrations de médiathèque à partir de jetons signés.

Un appelant obtient un jeton opaque et infalsifiable décrivant une illustration
(poster, poster de saison, vignette, vignette d'épisode). La présentation du jeton
déclenche la récupération des images sources sur TMDB, leur composition et le
renvoi des octets JPEG. Aucune session serveur : le jeton *est* la requête.

Architecture : Hexagonale (Ports et Adaptateurs)
- core/ : Couche domaine (requêtes de rendu, ports, objets valeur)
- services/ : Couche application (codec de jetons, moteur de composition, dispatcher)
- adapters/ : Couche infrastructure (client TMDB, cache, polices, fichiers locaux)
- web/ : Point d'entrée HTTP (FastAPI)
"""
