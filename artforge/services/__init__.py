"""
Couche des services applicatifs (cas d'usage).

Les services orchestrent la logique du domaine :
- protection et codec des jetons de rendu
- rendu des illustrations (posters, vignettes, saisons, episodes)
- generation des illustrations candidates d'un media

Les services dependent des ports (interfaces) de core/ ; les implementations
concretes sont injectees par le container.
"""
