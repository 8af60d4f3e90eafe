"""
Couche domaine d'ArtForge.

- entities/ : Requêtes de rendu (union fermée de variantes étiquetées)
- value_objects/ : Objets immutables (image rendue, descripteurs d'images TMDB)
- ports/ : Interfaces des collaborateurs externes (fournisseur d'images, polices, fichiers)
"""
