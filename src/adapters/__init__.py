"""
Couche adaptateurs (infrastructure).

Les adaptateurs implémentent les ports définis dans core/ports/ et fournissent
des implémentations concrètes pour les systèmes externes.

Contenu :
- security : Hachage des mots de passe (passlib + argon2)

Chaque adaptateur dépend de core/ mais core/ ne dépend jamais des adaptateurs.
"""

from src.adapters.security import PasswordHasher

__all__ = [
    "PasswordHasher",
]
