"""
Couche adaptateurs (infrastructure).

Les adaptateurs implémentent les ports définis dans core/ports/ et fournissent
des implémentations concrètes pour les systèmes externes.

Sous-packages :
- api/ : Client TMDB, cache mémoire TTL, single-flight et retry
- file_system.py : Lecture des logos locaux
- fonts.py : Chargement des polices de superposition

Chaque adaptateur dépend de core/ mais core/ ne dépend jamais des adaptateurs.
"""

from artforge.adapters.file_system import LocalFileReader
from artforge.adapters.fonts import FontFamily, FontProvider

__all__ = [
    "FontFamily",
    "FontProvider",
    "LocalFileReader",
]
