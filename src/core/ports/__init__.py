"""
Ports (interfaces abstraites) définissant les contrats pour les adaptateurs.

Les ports sont les frontières de l'architecture hexagonale. Ils définissent
ce dont le domaine a besoin du monde extérieur sans spécifier
comment ces besoins sont satisfaits.

Port de stockage : Contrat de persistance des documents
- IDocumentStore : Chargement, sauvegarde et verrouillage des documents JSON

Port de sécurité :
- IPasswordHasher : Hachage et vérification des mots de passe
"""

from src.core.ports.security import IPasswordHasher
from src.core.ports.storage import IDocumentStore

__all__ = [
    "IDocumentStore",
    "IPasswordHasher",
]
