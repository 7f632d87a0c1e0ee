"""
StreamVault - Catalogue auto-heberge de metadonnees de streaming.

Ce package fournit un stockage de documents JSON concurrent (ecriture
atomique, verrous inter-processus, validation de schema) et les services
du catalogue : films, series, categories, utilisateurs, historique.

Architecture : Hexagonale (Ports et Adaptateurs)
- core/ : Couche domaine (entites, ports, objets valeur)
- services/ : Couche application (cas d'utilisation, merge des series)
- infrastructure/ : Stockage fichier
- adapters/ et web/ : Hachage des mots de passe, API HTTP, CLI
"""
